# src/triggerflow/core/engine/engine.py
"""
Runner de pipelines do TriggerFlow.

Máquina de estados de uma run:

    RUNNING → {SUCCESS, SKIPPED, FAILED}   (terminais, sem saída)

Algoritmo:
    1. Abre a run no recorder com status otimista `success` e `start_time`
    2. Executa cada Step em ordem sobre o payload da run:
        - filter reprovado → SKIPPED; Steps seguintes nunca executam
        - transform/http_request/log concluem ou levantam exceção
    3. Todos concluídos → SUCCESS
    4. Qualquer exceção → FAILED, com `error_message` e `failure_meta`:
        - falha HTTP com resposta → {status, headers, data}
        - falha de transporte     → {code, message}
        - demais falhas           → None
    5. Encerra a run no recorder (exatamente uma transição terminal)

Decisões arquiteturais:
    - O despacho por tipo de Step usa uma tabela fechada indexada pela
      classe do Step; objetos fora da tabela falham a run
      (`UnknownStepKindError`), nunca o processo
    - O Runner é o único ponto que converte exceções em run `failed`
    - `pick` devolve um novo payload e o Runner troca o payload ativo
    - Relógio e sleep são injetáveis para testes determinísticos

Limites explícitos:
    - Não valida definições (responsabilidade de `core.workflow.schema`)
    - Não persiste o contexto
    - Não executa Steps em paralelo
"""

from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Sequence

import httpx

from triggerflow.core.config.settings import EngineSettings
from triggerflow.core.errors import exception_to_error
from triggerflow.core.exceptions import HttpResponseError, HttpTransportError, UnknownStepKindError
from triggerflow.core.http.client import build_client
from triggerflow.core.http.retry import BackoffPolicy, Sleeper
from triggerflow.core.pipeline.context import RunContext
from triggerflow.core.pipeline.step import FilterStep, HttpRequestStep, LogStep, Step, TransformStep
from triggerflow.core.pipeline.types import RunOutcome, RunStatus, StepResult
from triggerflow.persistence.run_store import RunRecorder
from triggerflow.steps.filter import evaluate_filter
from triggerflow.steps.http_request import HttpRequestExecutor
from triggerflow.steps.log import execute_log
from triggerflow.steps.transform import apply_transform

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _ms_between(start: datetime, end: datetime) -> int:
    return max(0, int((end - start).total_seconds() * 1000))


def _step_kind(step: Any) -> str:
    kind = getattr(step, "kind", None)
    if kind is not None:
        return getattr(kind, "value", str(kind))
    if isinstance(step, dict):
        return str(step.get("type"))
    return type(step).__name__


def failure_meta_for(exc: Exception) -> Optional[Dict[str, Any]]:
    """Extrai o `failure_meta` persistido para uma exceção de Step."""
    if isinstance(exc, HttpResponseError):
        return {
            "status": exc.details.get("status"),
            "headers": exc.details.get("headers"),
            "data": exc.details.get("data"),
        }
    if isinstance(exc, HttpTransportError):
        return {
            "code": exc.details.get("code"),
            "message": exc.details.get("message"),
        }
    return None


class PipelineRunner:
    """Runner canônico do TriggerFlow (uma instância serve runs concorrentes)."""

    def __init__(
        self,
        *,
        recorder: RunRecorder,
        settings: Optional[EngineSettings] = None,
        client: Optional[httpx.Client] = None,
        http_executor: Optional[HttpRequestExecutor] = None,
        sleep: Sleeper = time.sleep,
        clock: Clock = _utcnow,
    ):
        self.recorder = recorder
        self.settings = settings or EngineSettings()
        self.clock = clock

        self._owns_client = False
        if http_executor is None:
            if client is None:
                client = build_client(self.settings)
                self._owns_client = True
            http_executor = HttpRequestExecutor(
                client=client,
                policy=BackoffPolicy.from_settings(self.settings),
                sleep=sleep,
            )
        self.http = http_executor

        self._handlers: Dict[type, Callable[[Any, RunContext, str], bool]] = {
            FilterStep: self._run_filter,
            TransformStep: self._run_transform,
            HttpRequestStep: self._run_http,
            LogStep: self._run_log,
        }

    # ------------------------------------------------------------------
    # Ciclo de vida
    # ------------------------------------------------------------------
    def close(self) -> None:
        if self._owns_client:
            self.http.client.close()

    def __enter__(self) -> "PipelineRunner":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Handlers por tipo de Step (retornam False para encerrar como SKIPPED)
    # ------------------------------------------------------------------
    def _run_filter(self, step: FilterStep, run: RunContext, step_id: str) -> bool:
        return evaluate_filter(step, run.payload)

    def _run_transform(self, step: TransformStep, run: RunContext, step_id: str) -> bool:
        result = apply_transform(step, run.payload)
        if result is not run.payload:
            run.replace_payload(result)
        return True

    def _run_http(self, step: HttpRequestStep, run: RunContext, step_id: str) -> bool:
        def on_retry(attempt: int, exc: Exception, delay: float) -> None:
            run.add_warning(step_id=step_id, message=f"attempt {attempt} failed: {exc}")
            run.log(
                step_id=step_id,
                level="WARNING",
                message="retrying http request",
                event="http_retry",
                attempt=attempt,
                delay_s=delay,
            )

        response = self.http.execute(step, run.payload, on_retry=on_retry)
        run.log(
            step_id=step_id,
            level="INFO",
            message="http request completed",
            event="http_response",
            status_code=response.status_code,
        )
        return True

    def _run_log(self, step: LogStep, run: RunContext, step_id: str) -> bool:
        execute_log(step, run, step_id=step_id)
        return True

    def _dispatch(self, step: Step, run: RunContext, step_id: str) -> bool:
        handler = self._handlers.get(type(step))
        if handler is None:
            received = _step_kind(step)
            raise UnknownStepKindError(
                f"Unknown step type: {received}",
                details={"received": received},
            )
        return handler(step, run, step_id)

    # ------------------------------------------------------------------
    # Execução
    # ------------------------------------------------------------------
    def execute_workflow(
        self,
        steps: Sequence[Step],
        initial_context: Any,
        *,
        workflow_id: Optional[str] = None,
        meta: Optional[Dict[str, Any]] = None,
    ) -> RunOutcome:
        started_at = self.clock()
        run_id = self.recorder.create_run(
            workflow_id=workflow_id,
            status=RunStatus.SUCCESS,
            start_time=started_at,
        )

        run = RunContext(
            run_id=str(run_id),
            created_at=started_at,
            payload={} if initial_context is None else initial_context,
            workflow_id=workflow_id,
            meta=dict(meta or {}),
            record_events=self.settings.record_events,
        )
        run.log(step_id="run", level="INFO", message="run started", event="run_started")

        results: List[StepResult] = []
        status = RunStatus.SUCCESS
        error_message: Optional[str] = None
        failure_meta: Optional[Dict[str, Any]] = None

        index = -1
        step_id = "run"
        step_started = started_at
        try:
            for index, step in enumerate(steps):
                kind = _step_kind(step)
                step_id = f"{index}:{kind}"
                step_started = self.clock()
                run.log(step_id=step_id, level="INFO", message="step started", event="step_started")

                proceed = self._dispatch(step, run, step_id)
                duration = _ms_between(step_started, self.clock())

                if not proceed:
                    results.append(
                        StepResult(
                            index=index,
                            kind=kind,
                            status=RunStatus.SKIPPED,
                            summary="filter conditions not met",
                            duration_ms=duration,
                        )
                    )
                    run.log(step_id=step_id, level="INFO", message="run skipped by filter", event="run_skipped")
                    status = RunStatus.SKIPPED
                    break

                results.append(
                    StepResult(index=index, kind=kind, status=RunStatus.SUCCESS, summary="ok", duration_ms=duration)
                )
                run.log(step_id=step_id, level="INFO", message="step finished", event="step_finished", duration_ms=duration)

        except Exception as exc:
            error = exception_to_error(exc, step_index=index if index >= 0 else None)
            status = RunStatus.FAILED
            error_message = error.message
            failure_meta = failure_meta_for(exc)

            results.append(
                StepResult(
                    index=index,
                    kind=_step_kind(steps[index]) if index >= 0 else "run",
                    status=RunStatus.FAILED,
                    summary=error.message,
                    duration_ms=_ms_between(step_started, self.clock()),
                    payload={"error": error.to_dict()},
                )
            )
            run.log(step_id=step_id, level="ERROR", message=error.message, event="step_failed", error_type=error.type)
            logger.error("Workflow execution failed for run %s: %s", run.run_id, error.message)

        ended_at = self.clock()
        self.recorder.update_run(
            run.run_id,
            status=status,
            end_time=ended_at,
            error_message=error_message,
            failure_meta=failure_meta,
        )
        run.log(step_id="run", level="INFO", message="run finished", event="run_finished", status=status.value)

        return RunOutcome(
            run_id=run.run_id,
            status=status,
            error=error_message,
            failure_meta=failure_meta,
            steps=results,
            context=run.payload,
        )


def execute_workflow(
    steps: Sequence[Step],
    initial_context: Any,
    *,
    recorder: RunRecorder,
    workflow_id: Optional[str] = None,
    **runner_kwargs: Any,
) -> RunOutcome:
    """Atalho: executa uma run com um Runner efêmero (cliente HTTP fechado ao final)."""
    with PipelineRunner(recorder=recorder, **runner_kwargs) as runner:
        return runner.execute_workflow(steps, initial_context, workflow_id=workflow_id)
