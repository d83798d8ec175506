# src/triggerflow/core/pipeline/types.py
"""
Tipos canônicos do pipeline do TriggerFlow.

Este módulo define as estruturas e enums fundamentais que padronizam
a comunicação entre definições de workflow, Runner e stores de runs.

Componentes principais:
    - StepKind          → discriminador textual dos tipos de Step
    - FilterOperator    → operadores de condição (eq, neq)
    - TransformOperator → operações de transformação (default, template, pick)
    - HttpMethod        → métodos HTTP aceitos
    - BodyMode          → modos de corpo de requisição (ctx, custom)
    - RunStatus         → estados terminais de uma run
    - StepResult        → rastro imutável da execução de um Step
    - RunOutcome        → resultado devolvido ao chamador

Princípios fundamentais:
    - Tipos são estáveis e serializáveis
    - Valores textuais dos enums são o formato de fio (wire format)
    - Nenhuma lógica de execução vive neste módulo
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class StepKind(str, Enum):
    """
    Tipos de Step aceitos em uma definição de workflow.

    O valor textual é o campo `type` da definição serializada.

    Invariantes:
        - Todo Step possui exatamente um `kind`
        - O conjunto é fechado: adicionar um tipo exige um executor
          registrado no Runner e uma regra de validação
    """
    FILTER = "filter"
    TRANSFORM = "transform"
    HTTP_REQUEST = "http_request"
    LOG = "log"


class FilterOperator(str, Enum):
    """Operadores de comparação estrita das condições de filtro."""
    EQ = "eq"
    NEQ = "neq"


class TransformOperator(str, Enum):
    """Operações suportadas por um Step de transformação."""
    DEFAULT = "default"
    TEMPLATE = "template"
    PICK = "pick"


class HttpMethod(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"


class BodyMode(str, Enum):
    CTX = "ctx"
    CUSTOM = "custom"


class RunStatus(str, Enum):
    """
    Estados terminais possíveis de uma run.

    Estados definidos:
        - SUCCESS: todos os Steps concluídos
        - SKIPPED: um filtro interrompeu a run (não é erro)
        - FAILED: um Step levantou exceção

    Decisões arquiteturais:
        - O estado transitório RUNNING não pertence a este enum; a run é
          aberta otimisticamente como SUCCESS e encerrada exatamente uma vez
    """
    SUCCESS = "success"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class StepResult:
    """
    Rastro imutável da execução de um Step dentro de uma run.

    Campos:
        - index: posição do Step na definição
        - kind: tipo do Step
        - status: SUCCESS, SKIPPED (filtro reprovado) ou FAILED
        - summary: resumo textual
        - duration_ms: duração medida pelo Runner
        - payload: dados adicionais livres (ex.: erro serializado)
    """
    index: int
    kind: str
    status: RunStatus
    summary: str
    duration_ms: int = 0
    payload: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class RunOutcome:
    """
    Resultado devolvido ao chamador de `execute_workflow`.

    `to_dict()` produz o shape de fio `{"runId", "status", "error"?}`.
    `context` expõe o contexto final da run para inspeção local; nunca é
    persistido.
    """
    run_id: str
    status: RunStatus
    error: Optional[str] = None
    failure_meta: Optional[Dict[str, Any]] = None
    steps: List[StepResult] = field(default_factory=list)
    context: Any = field(default=None, repr=False, compare=False)

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"runId": self.run_id, "status": self.status.value}
        if self.error is not None:
            out["error"] = self.error
        return out
