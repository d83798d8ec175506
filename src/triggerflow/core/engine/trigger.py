# src/triggerflow/core/engine/trigger.py
"""
Serviço de trigger do TriggerFlow.

Resolve um `trigger_path` para um workflow registrado e delega a execução
ao `PipelineRunner`, usando o payload recebido como contexto inicial.

Regras:
    - trigger desconhecido → `WorkflowNotFoundError`
    - workflow desabilitado → `WorkflowDisabledError`
    - em ambos os casos nenhuma run é aberta no recorder
"""

from __future__ import annotations

import logging
from typing import Any

from triggerflow.core.engine.engine import PipelineRunner
from triggerflow.core.exceptions import WorkflowDisabledError, WorkflowNotFoundError
from triggerflow.core.pipeline.types import RunOutcome
from triggerflow.persistence.workflow_store import WorkflowLookup

logger = logging.getLogger(__name__)


class TriggerService:
    def __init__(self, *, workflows: WorkflowLookup, runner: PipelineRunner):
        self.workflows = workflows
        self.runner = runner

    def trigger(self, trigger_path: str, payload: Any = None) -> RunOutcome:
        workflow = self.workflows.find_by_trigger(trigger_path)
        if workflow is None:
            raise WorkflowNotFoundError(
                f"workflow not found for trigger: {trigger_path}",
                details={"trigger_path": trigger_path},
                hint="Confira o trigger_path registrado para o workflow.",
            )
        if not workflow.enabled:
            raise WorkflowDisabledError(
                f"workflow is disabled: {workflow.name}",
                details={"trigger_path": trigger_path, "workflow_id": workflow.id},
                hint="Habilite o workflow antes de acioná-lo.",
            )

        logger.info("Triggering workflow %s (%s)", workflow.name, workflow.id)
        return self.runner.execute_workflow(
            workflow.steps,
            payload,
            workflow_id=workflow.id,
            meta={"trigger_path": trigger_path, "workflow_name": workflow.name},
        )
