"""Lookup de workflows por trigger.

O Engine consome apenas `WorkflowLookup.find_by_trigger`. O repositório em
memória cobre registro e consulta para uso embutido e testes; stores com
banco de dados ficam fora do escopo do core.
"""

from __future__ import annotations

import itertools
import threading
import uuid
from dataclasses import replace
from typing import Dict, List, Optional, Protocol, runtime_checkable

from triggerflow.core.workflow.schema import WorkflowDefinition


@runtime_checkable
class WorkflowLookup(Protocol):
    def find_by_trigger(self, trigger_path: str) -> Optional[WorkflowDefinition]:
        ...


class InMemoryWorkflowRepository:
    """Repositório em memória indexado por id e por trigger_path."""

    def __init__(self) -> None:
        self._by_id: Dict[str, WorkflowDefinition] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def add(self, workflow: WorkflowDefinition) -> WorkflowDefinition:
        """Registra o workflow, atribuindo `id` e `trigger_path` quando ausentes."""
        with self._lock:
            wf_id = workflow.id or str(next(self._ids))
            trigger_path = workflow.trigger_path or uuid.uuid4().hex
            if wf_id in self._by_id:
                raise ValueError(f"Duplicate workflow id: {wf_id}")
            if any(w.trigger_path == trigger_path for w in self._by_id.values()):
                raise ValueError(f"Duplicate trigger path: {trigger_path}")
            stored = replace(workflow, id=wf_id, trigger_path=trigger_path)
            self._by_id[wf_id] = stored
            return stored

    def get(self, workflow_id: str) -> Optional[WorkflowDefinition]:
        with self._lock:
            return self._by_id.get(workflow_id)

    def find_by_trigger(self, trigger_path: str) -> Optional[WorkflowDefinition]:
        with self._lock:
            for workflow in self._by_id.values():
                if workflow.trigger_path == trigger_path:
                    return workflow
            return None

    def list(self) -> List[WorkflowDefinition]:
        with self._lock:
            return list(self._by_id.values())

    def set_enabled(self, workflow_id: str, enabled: bool) -> WorkflowDefinition:
        with self._lock:
            if workflow_id not in self._by_id:
                raise KeyError(workflow_id)
            updated = replace(self._by_id[workflow_id], enabled=bool(enabled))
            self._by_id[workflow_id] = updated
            return updated

    def remove(self, workflow_id: str) -> None:
        with self._lock:
            if workflow_id not in self._by_id:
                raise KeyError(workflow_id)
            del self._by_id[workflow_id]


__all__ = ["WorkflowLookup", "InMemoryWorkflowRepository"]
