"""Colaboradores de persistência do TriggerFlow: runs e lookup de workflows."""

from .run_store import InMemoryRunStore, JsonRunStore, RunRecord, RunRecorder  # noqa: F401
from .workflow_store import InMemoryWorkflowRepository, WorkflowLookup  # noqa: F401
