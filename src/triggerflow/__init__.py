# src/triggerflow/__init__.py
"""
TriggerFlow — engine síncrono de workflows acionados por trigger.

Um workflow é uma sequência ordenada de Steps (filter, transform,
http_request, log) executada sobre o payload JSON recebido pelo trigger.

Arquitetura em alto nível:
    - core.templating → caminhos pontuados e templates `{{path}}`
    - core.workflow   → validação de definições (YAML/JSON/dict)
    - core.engine     → Runner e serviço de trigger
    - steps           → um executor por tipo de Step
    - persistence     → stores de runs e de workflows
"""

from triggerflow.core.engine import PipelineRunner, TriggerService, execute_workflow
from triggerflow.core.pipeline.types import RunOutcome, RunStatus
from triggerflow.core.workflow import WorkflowDefinition, load_workflow, parse_workflow
from triggerflow.persistence import InMemoryRunStore, InMemoryWorkflowRepository, JsonRunStore

__all__ = [
    "PipelineRunner",
    "TriggerService",
    "execute_workflow",
    "RunOutcome",
    "RunStatus",
    "WorkflowDefinition",
    "load_workflow",
    "parse_workflow",
    "InMemoryRunStore",
    "InMemoryWorkflowRepository",
    "JsonRunStore",
]
