"""
TriggerFlow — Canonical Error Structures (v1)

Este módulo define o padrão canônico de erros do TriggerFlow.
Erros são artefatos do contrato operacional do sistema e devem ser:

- explícitos
- serializáveis
- acionáveis

O Runner converte qualquer exceção de Step em um `FlowErrorPayload`
antes de encerrar a run como `failed`.
"""

from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional

from triggerflow.core.exceptions import (
    FlowException,
    HttpResponseError,
    HttpTransportError,
    StepValidationError,
    UnknownStepKindError,
    WorkflowDisabledError,
    WorkflowNotFoundError,
)


# ---------------------------------------------------------------------------
# Payload canônico
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class FlowErrorPayload:
    """
    Payload canônico de erro do TriggerFlow.

    Campos:
    - type: código do catálogo abaixo, estável entre versões
    - message: o mesmo texto gravado em `error_message` da run
    - details: contexto estruturado (status HTTP, path inválido, índice do Step)
    - hint: próximo passo sugerido a quem opera o workflow
    """

    type: str
    message: str
    details: Dict[str, Any]
    hint: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Dict pronto para `json.dumps`."""
        return asdict(self)


# ---------------------------------------------------------------------------
# Catálogo canônico de tipos de erro (v1)
# ---------------------------------------------------------------------------

# HTTP
HTTP_TRANSPORT_ERROR = "HTTP_TRANSPORT_ERROR"
HTTP_RESPONSE_ERROR = "HTTP_RESPONSE_ERROR"

# Definição
STEP_VALIDATION_ERROR = "STEP_VALIDATION_ERROR"
UNKNOWN_STEP_KIND = "UNKNOWN_STEP_KIND"

# Trigger
WORKFLOW_NOT_FOUND = "WORKFLOW_NOT_FOUND"
WORKFLOW_DISABLED = "WORKFLOW_DISABLED"

# Engine / Execução
ENGINE_EXECUTION_ERROR = "ENGINE_EXECUTION_ERROR"


# ---------------------------------------------------------------------------
# Helpers de fábrica
# ---------------------------------------------------------------------------

def http_transport_error(
    *,
    code: str,
    message: str,
    url: Optional[str] = None,
    hint: str = "Verifique se o endpoint de destino está acessível e se o timeout do step é suficiente.",
) -> FlowErrorPayload:
    return FlowErrorPayload(
        type=HTTP_TRANSPORT_ERROR,
        message=message,
        details={"code": code, "message": message, "url": url},
        hint=hint,
    )


def http_response_error(
    *,
    status: int,
    headers: Dict[str, Any],
    data: Any,
    url: Optional[str] = None,
    hint: str = "Inspecione a resposta do endpoint de destino; status 3xx/4xx não são retentados.",
) -> FlowErrorPayload:
    return FlowErrorPayload(
        type=HTTP_RESPONSE_ERROR,
        message=f"Request failed with status code {status}",
        details={"status": status, "headers": headers, "data": data, "url": url},
        hint=hint,
    )


def unknown_step_kind(
    *,
    received: str,
    index: Optional[int] = None,
    hint: str = "Valide a definição do workflow antes de executá-lo.",
) -> FlowErrorPayload:
    return FlowErrorPayload(
        type=UNKNOWN_STEP_KIND,
        message=f"Unknown step type: {received}",
        details={"received": received, "index": index},
        hint=hint,
    )


def engine_execution_error(
    *,
    step_index: Optional[int] = None,
    exc_type: Optional[str] = None,
    exc_message: Optional[str] = None,
    hint: str = "Verifique o log técnico e a definição do workflow. Nenhum fallback é aplicado automaticamente.",
) -> FlowErrorPayload:
    return FlowErrorPayload(
        type=ENGINE_EXECUTION_ERROR,
        message=exc_message or "Erro inesperado durante execução",
        details={
            "step_index": step_index,
            "exception_class": exc_type,
        },
        hint=hint,
    )


# ---------------------------------------------------------------------------
# Mapeamento exceção -> payload
# ---------------------------------------------------------------------------

def exception_to_error(exc: Exception, *, step_index: Optional[int] = None) -> FlowErrorPayload:
    """Converte exceções em FlowErrorPayload (serializável, acionável).

    Regras:
    - Exceções HTTP: payload com o mesmo shape de `failure_meta`.
    - Demais FlowException: código estável por classe, details preservados.
    - Outras exceções: encapsuladas como ENGINE_EXECUTION_ERROR, sem stack trace.
    """
    if isinstance(exc, HttpTransportError):
        return http_transport_error(
            code=exc.code,
            message=exc.message,
            url=exc.details.get("url"),
        )

    if isinstance(exc, HttpResponseError):
        return http_response_error(
            status=exc.status,
            headers=dict(exc.details.get("headers") or {}),
            data=exc.details.get("data"),
            url=exc.details.get("url"),
        )

    if isinstance(exc, UnknownStepKindError):
        return unknown_step_kind(
            received=str(exc.details.get("received")),
            index=step_index,
        )

    if isinstance(exc, FlowException):
        codes = {
            StepValidationError: STEP_VALIDATION_ERROR,
            WorkflowNotFoundError: WORKFLOW_NOT_FOUND,
            WorkflowDisabledError: WORKFLOW_DISABLED,
        }
        return FlowErrorPayload(
            type=codes.get(type(exc), exc.__class__.__name__),
            message=exc.message or "Erro de execução",
            details=dict(exc.details or {}),
            hint=exc.hint,
        )

    return engine_execution_error(
        step_index=step_index,
        exc_type=exc.__class__.__name__,
        exc_message=str(exc) or None,
    )
