"""Persistência de runs do TriggerFlow (Run Recorder).

O Runner consulta o recorder exatamente duas vezes por run:

- `create_run` ao iniciar, com status otimista `success`
- `update_run` ao encerrar, com o status terminal (uma única vez)

Este módulo define o protocolo consumido pelo Runner e duas Stores:

- `InMemoryRunStore`: ids sequenciais, protegida por lock (testes e uso embutido)
- `JsonRunStore`: um documento JSON por run em `<root>/runs/<run_id>.json`

Decisões (v1):
- UTC é o timezone canônico; timestamps naive são assumidos como UTC
- Serialização JSON determinística (`sort_keys=True`)
- Uma segunda transição terminal é rejeitada com `RunAlreadyClosedError`
"""

from __future__ import annotations

import itertools
import json
import threading
import uuid
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol, Union, runtime_checkable

from triggerflow.core.exceptions import RunAlreadyClosedError, RunNotFoundError
from triggerflow.core.pipeline.types import RunStatus


def _ensure_tzaware_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def _iso(dt: Optional[datetime]) -> Optional[str]:
    return None if dt is None else _ensure_tzaware_utc(dt).isoformat()


def _parse_iso(value: Optional[str]) -> Optional[datetime]:
    return None if value is None else datetime.fromisoformat(value)


@dataclass(frozen=True)
class RunRecord:
    """Registro persistido de uma run. `end_time is None` enquanto a run está aberta."""

    id: str
    workflow_id: Optional[str]
    status: RunStatus
    start_time: datetime
    end_time: Optional[datetime] = None
    error_message: Optional[str] = None
    failure_meta: Optional[Dict[str, Any]] = None

    @property
    def closed(self) -> bool:
        return self.end_time is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "workflowId": self.workflow_id,
            "status": self.status.value,
            "startTime": _iso(self.start_time),
            "endTime": _iso(self.end_time),
            "errorMessage": self.error_message,
            "failureMeta": self.failure_meta,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RunRecord":
        return cls(
            id=str(data["id"]),
            workflow_id=data.get("workflowId"),
            status=RunStatus(data["status"]),
            start_time=_parse_iso(data["startTime"]),
            end_time=_parse_iso(data.get("endTime")),
            error_message=data.get("errorMessage"),
            failure_meta=data.get("failureMeta"),
        )

    def close(
        self,
        *,
        status: RunStatus,
        end_time: datetime,
        error_message: Optional[str] = None,
        failure_meta: Optional[Dict[str, Any]] = None,
    ) -> "RunRecord":
        if self.closed:
            raise RunAlreadyClosedError(
                f"run {self.id} already closed as {self.status.value}",
                details={"run_id": self.id, "status": self.status.value},
            )
        return replace(
            self,
            status=RunStatus(status),
            end_time=_ensure_tzaware_utc(end_time),
            error_message=error_message,
            failure_meta=failure_meta,
        )


@runtime_checkable
class RunRecorder(Protocol):
    """Contrato mínimo de persistência de runs consumido pelo Runner."""

    def create_run(self, *, workflow_id: Optional[str], status: RunStatus, start_time: datetime) -> str:
        ...

    def update_run(
        self,
        run_id: str,
        *,
        status: RunStatus,
        end_time: datetime,
        error_message: Optional[str] = None,
        failure_meta: Optional[Dict[str, Any]] = None,
    ) -> None:
        ...


class InMemoryRunStore:
    """Store em memória, segura para runs concorrentes."""

    def __init__(self) -> None:
        self._records: Dict[str, RunRecord] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def create_run(self, *, workflow_id: Optional[str], status: RunStatus, start_time: datetime) -> str:
        with self._lock:
            run_id = str(next(self._ids))
            self._records[run_id] = RunRecord(
                id=run_id,
                workflow_id=workflow_id,
                status=RunStatus(status),
                start_time=_ensure_tzaware_utc(start_time),
            )
            return run_id

    def update_run(
        self,
        run_id: str,
        *,
        status: RunStatus,
        end_time: datetime,
        error_message: Optional[str] = None,
        failure_meta: Optional[Dict[str, Any]] = None,
    ) -> None:
        with self._lock:
            record = self._get_locked(run_id)
            self._records[run_id] = record.close(
                status=status,
                end_time=end_time,
                error_message=error_message,
                failure_meta=failure_meta,
            )

    def get(self, run_id: str) -> RunRecord:
        with self._lock:
            return self._get_locked(run_id)

    def list_runs(self, workflow_id: Optional[str] = None) -> List[RunRecord]:
        with self._lock:
            records = list(self._records.values())
        if workflow_id is None:
            return records
        return [r for r in records if r.workflow_id == workflow_id]

    def _get_locked(self, run_id: str) -> RunRecord:
        if run_id not in self._records:
            raise RunNotFoundError(f"run not found: {run_id}", details={"run_id": run_id})
        return self._records[run_id]


class JsonRunStore:
    """Store em disco: um documento JSON por run."""

    def __init__(self, *, root_dir: Union[str, Path]):
        self.root_dir = Path(root_dir)
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Paths
    # ------------------------------------------------------------------
    def run_path(self, run_id: str) -> Path:
        return self.root_dir / "runs" / f"{run_id}.json"

    # ------------------------------------------------------------------
    # Recorder
    # ------------------------------------------------------------------
    def create_run(self, *, workflow_id: Optional[str], status: RunStatus, start_time: datetime) -> str:
        record = RunRecord(
            id=uuid.uuid4().hex,
            workflow_id=workflow_id,
            status=RunStatus(status),
            start_time=_ensure_tzaware_utc(start_time),
        )
        with self._lock:
            self._write(record)
        return record.id

    def update_run(
        self,
        run_id: str,
        *,
        status: RunStatus,
        end_time: datetime,
        error_message: Optional[str] = None,
        failure_meta: Optional[Dict[str, Any]] = None,
    ) -> None:
        with self._lock:
            record = self._read(run_id)
            self._write(
                record.close(
                    status=status,
                    end_time=end_time,
                    error_message=error_message,
                    failure_meta=failure_meta,
                )
            )

    def get(self, run_id: str) -> RunRecord:
        with self._lock:
            return self._read(run_id)

    # ------------------------------------------------------------------
    # I/O
    # ------------------------------------------------------------------
    def _write(self, record: RunRecord) -> None:
        path = self.run_path(record.id)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(
            json.dumps(record.to_dict(), ensure_ascii=False, indent=2, sort_keys=True, default=str),
            encoding="utf-8",
        )

    def _read(self, run_id: str) -> RunRecord:
        path = self.run_path(run_id)
        if not path.exists():
            raise RunNotFoundError(f"run not found: {run_id}", details={"run_id": run_id})
        return RunRecord.from_dict(json.loads(path.read_text(encoding="utf-8")))


__all__ = ["RunRecord", "RunRecorder", "InMemoryRunStore", "JsonRunStore"]
