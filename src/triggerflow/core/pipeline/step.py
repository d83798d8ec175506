# src/triggerflow/core/pipeline/step.py
"""
Definições canônicas de Step do TriggerFlow.

Um Step é a menor unidade de comportamento de um workflow. Ao contrário
de um objeto executável, aqui um Step é **dado**: uma estrutura imutável,
definida em tempo de autoria e apenas lida durante a execução. A lógica
de execução vive nos executores de `triggerflow.steps`, despachados pelo
Runner a partir da classe do Step.

Union fechada de Steps:
    - FilterStep       → condições AND sobre o contexto; pode encerrar a run
    - TransformStep    → operações ordenadas (default, template, pick)
    - HttpRequestStep  → chamada HTTP de saída com retry/backoff
    - LogStep          → mensagem renderizada no log da run

Invariantes:
    - Instâncias são frozen e nunca mutadas durante a execução
    - Cada Step é autodescritivo (não depende de Steps vizinhos além da ordem)
    - Steps só são construídos por `triggerflow.core.workflow.schema`
      ou explicitamente em código/testes

Limites explícitos:
    - Não executa nada
    - Não valida domínio (responsabilidade do schema)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple, Union

from triggerflow.core.templating import MISSING

from .types import BodyMode, FilterOperator, HttpMethod, StepKind, TransformOperator


# ---------------------------------------------------------------------------
# Filter
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class FilterCondition:
    """Condição `path op value`; sem `value`, compara contra ausência."""
    path: str
    op: FilterOperator
    value: Any = MISSING


@dataclass(frozen=True)
class FilterStep:
    conditions: Tuple[FilterCondition, ...] = ()
    kind = StepKind.FILTER


# ---------------------------------------------------------------------------
# Transform
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DefaultOp:
    """Define `path` como `value` apenas se ausente, nulo ou string vazia."""
    path: str
    value: Any = None
    op = TransformOperator.DEFAULT


@dataclass(frozen=True)
class TemplateOp:
    """Renderiza `template` e grava o texto resultante em `to`."""
    to: str
    template: str
    op = TransformOperator.TEMPLATE


@dataclass(frozen=True)
class PickOp:
    """Substitui o contexto inteiro pelo subconjunto dos `paths` listados."""
    paths: Tuple[str, ...] = ()
    op = TransformOperator.PICK


TransformOp = Union[DefaultOp, TemplateOp, PickOp]


@dataclass(frozen=True)
class TransformStep:
    ops: Tuple[TransformOp, ...] = ()
    kind = StepKind.TRANSFORM


# ---------------------------------------------------------------------------
# HTTP request
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class CtxBody:
    """Envia o contexto vivo da run como corpo JSON."""
    mode = BodyMode.CTX


@dataclass(frozen=True)
class CustomBody:
    """Envia `value` (com templates resolvidos) como corpo JSON."""
    value: Dict[str, Any] = field(default_factory=dict)
    mode = BodyMode.CUSTOM


HttpBody = Union[CtxBody, CustomBody]


@dataclass(frozen=True)
class HttpRequestStep:
    method: HttpMethod
    url: str
    headers: Dict[str, str] = field(default_factory=dict)
    body: Optional[HttpBody] = None
    timeout_ms: int = 2000
    retries: int = 3
    kind = StepKind.HTTP_REQUEST


# ---------------------------------------------------------------------------
# Log
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class LogStep:
    message: str
    kind = StepKind.LOG


Step = Union[FilterStep, TransformStep, HttpRequestStep, LogStep]
