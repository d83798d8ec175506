# tests/core/errors/test_exception_to_error.py
"""
Testes do mapeamento exceção → FlowErrorPayload.

Os testes asseguram que:
- cada exceção canônica recebe um código estável
- exceções HTTP preservam o shape de diagnóstico
- exceções arbitrárias viram ENGINE_EXECUTION_ERROR sem stack trace
- o payload é serializável
"""

import json

from triggerflow.core.errors import (
    ENGINE_EXECUTION_ERROR,
    HTTP_RESPONSE_ERROR,
    HTTP_TRANSPORT_ERROR,
    STEP_VALIDATION_ERROR,
    UNKNOWN_STEP_KIND,
    WORKFLOW_DISABLED,
    WORKFLOW_NOT_FOUND,
    exception_to_error,
)
from triggerflow.core.exceptions import (
    HttpResponseError,
    HttpTransportError,
    RunNotFoundError,
    StepValidationError,
    UnknownStepKindError,
    WorkflowDisabledError,
    WorkflowNotFoundError,
)


def test_transport_error():
    exc = HttpTransportError("connection refused", details={"code": "ConnectError", "message": "connection refused"})

    err = exception_to_error(exc)

    assert err.type == HTTP_TRANSPORT_ERROR
    assert err.message == "connection refused"
    assert err.details["code"] == "ConnectError"
    assert err.hint


def test_response_error():
    exc = HttpResponseError(
        "Request failed with status code 404",
        details={"status": 404, "headers": {"content-type": "text/plain"}, "data": "nope"},
    )

    err = exception_to_error(exc)

    assert err.type == HTTP_RESPONSE_ERROR
    assert err.message == "Request failed with status code 404"
    assert err.details["status"] == 404
    assert err.details["data"] == "nope"


def test_unknown_step_kind_carries_index():
    err = exception_to_error(UnknownStepKindError("Unknown step type: sleep", details={"received": "sleep"}), step_index=2)

    assert err.type == UNKNOWN_STEP_KIND
    assert err.message == "Unknown step type: sleep"
    assert err.details == {"received": "sleep", "index": 2}


def test_flow_exceptions_get_stable_codes():
    assert exception_to_error(StepValidationError("bad")).type == STEP_VALIDATION_ERROR
    assert exception_to_error(WorkflowNotFoundError("nf")).type == WORKFLOW_NOT_FOUND
    assert exception_to_error(WorkflowDisabledError("off", hint="habilite")).hint == "habilite"
    assert exception_to_error(WorkflowDisabledError("off")).type == WORKFLOW_DISABLED
    # sem código dedicado: nome da classe
    assert exception_to_error(RunNotFoundError("x")).type == "RunNotFoundError"


def test_generic_exception_is_wrapped():
    err = exception_to_error(RuntimeError("boom"), step_index=0)

    assert err.type == ENGINE_EXECUTION_ERROR
    assert err.message == "boom"
    assert err.details == {"step_index": 0, "exception_class": "RuntimeError"}


def test_generic_exception_without_message():
    err = exception_to_error(KeyError())
    assert err.message == "Erro inesperado durante execução"


def test_payload_is_json_serializable():
    err = exception_to_error(HttpResponseError("x", details={"status": 500, "headers": {}, "data": {"a": 1}}))
    assert json.loads(json.dumps(err.to_dict()))["type"] == HTTP_RESPONSE_ERROR


def test_exceptions_behave_like_exceptions():
    exc = StepValidationError("steps[0].type: invalid", details={"path": "steps[0].type"})
    assert str(exc) == "steps[0].type: invalid"
    assert exc.args == ("steps[0].type: invalid",)
    assert isinstance(exc, Exception)
