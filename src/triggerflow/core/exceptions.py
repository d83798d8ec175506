"""
TriggerFlow — Canonical Exceptions (v1)

Este módulo define exceções tipadas internas do TriggerFlow.

Objetivo:
- Permitir que Steps/Engine levantem exceções semânticas tipadas
- Facilitar o mapeamento determinístico para FlowErrorPayload
- Carregar dados estruturados (serializáveis) em `details`, nunca stack trace

Regras:
- `details` de falhas HTTP seguem o shape persistido em `failure_meta`:
    - com resposta:  {"status", "headers", "data"}
    - sem resposta:  {"code", "message"}
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass(eq=False)
class FlowException(Exception):
    """Base class para exceções internas do TriggerFlow.

    Importante:
    - Sempre carregar dados estruturados em `details`
    - Mensagem deve ser curta e humana
    """

    message: str
    details: Dict[str, Any] = field(default_factory=dict)
    hint: Optional[str] = None

    def __post_init__(self) -> None:
        Exception.__init__(self, self.message)

    def __str__(self) -> str:  # pragma: no cover
        return self.message


# ---------------------------------------------------------------------------
# HTTP
# ---------------------------------------------------------------------------

@dataclass(eq=False)
class HttpTransportError(FlowException):
    """Nenhuma resposta HTTP foi obtida (conexão recusada, timeout, protocolo)."""

    @property
    def code(self) -> str:
        return str(self.details.get("code", ""))


@dataclass(eq=False)
class HttpResponseError(FlowException):
    """Resposta HTTP recebida com status fora da faixa 2xx."""

    @property
    def status(self) -> int:
        return int(self.details.get("status", 0))

    @property
    def retryable(self) -> bool:
        return self.status >= 500


# ---------------------------------------------------------------------------
# Definição / Execução
# ---------------------------------------------------------------------------

@dataclass(eq=False)
class StepValidationError(FlowException):
    """Definição de Step ou Workflow estruturalmente inválida."""


@dataclass(eq=False)
class UnknownStepKindError(FlowException):
    """Step de tipo desconhecido chegou ao Runner (deveria ter sido barrado na validação)."""


# ---------------------------------------------------------------------------
# Colaboradores (workflows / runs)
# ---------------------------------------------------------------------------

@dataclass(eq=False)
class WorkflowNotFoundError(FlowException):
    """Nenhum workflow associado ao trigger informado."""


@dataclass(eq=False)
class WorkflowDisabledError(FlowException):
    """Workflow existe, mas está desabilitado."""


@dataclass(eq=False)
class WorkflowParseError(FlowException):
    """Arquivo de workflow ausente, ilegível ou em formato não suportado."""


@dataclass(eq=False)
class RunNotFoundError(FlowException):
    """Run inexistente no store."""


@dataclass(eq=False)
class RunAlreadyClosedError(FlowException):
    """Tentativa de segunda transição terminal em uma run já encerrada."""
