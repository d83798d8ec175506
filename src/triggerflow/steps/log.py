"""
Step: log
=========

Renderiza `message` contra o contexto e registra o texto no log de
eventos da run e no logger do módulo. Nunca falha e nunca muta o contexto.
"""

from __future__ import annotations

import logging

from triggerflow.core.pipeline.context import RunContext
from triggerflow.core.pipeline.step import LogStep
from triggerflow.core.templating import apply_template

logger = logging.getLogger(__name__)


def execute_log(step: LogStep, run: RunContext, *, step_id: str) -> str:
    message = apply_template(step.message, run.payload)
    logger.info("[Workflow Log] %s", message)
    run.log(step_id=step_id, level="INFO", message=message, event="workflow_log")
    return message
