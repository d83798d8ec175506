# tests/persistence/test_run_store.py
"""
Testes das Stores de runs (Run Recorder).

Os testes asseguram que:
- runs são abertas com status otimista e sem `end_time`
- o encerramento registra status terminal, erro e failure_meta
- uma segunda transição terminal é rejeitada
- a Store JSON persiste um documento determinístico por run
"""

import json
from datetime import datetime, timedelta, timezone

import pytest

from triggerflow.core.exceptions import RunAlreadyClosedError, RunNotFoundError
from triggerflow.core.pipeline.types import RunStatus
from triggerflow.persistence.run_store import InMemoryRunStore, JsonRunStore, RunRecord, RunRecorder


def test_stores_satisfy_recorder_protocol(tmp_path):
    assert isinstance(InMemoryRunStore(), RunRecorder)
    assert isinstance(JsonRunStore(root_dir=tmp_path), RunRecorder)


# ---------------------------------------------------------------------------
# InMemoryRunStore
# ---------------------------------------------------------------------------

def test_in_memory_create_and_close(run_store, fixed_now):
    run_id = run_store.create_run(workflow_id="wf-1", status=RunStatus.SUCCESS, start_time=fixed_now)

    opened = run_store.get(run_id)
    assert opened.status == RunStatus.SUCCESS
    assert opened.closed is False

    run_store.update_run(
        run_id,
        status=RunStatus.FAILED,
        end_time=fixed_now + timedelta(seconds=1),
        error_message="Request failed with status code 404",
        failure_meta={"status": 404, "headers": {}, "data": None},
    )

    closed = run_store.get(run_id)
    assert closed.status == RunStatus.FAILED
    assert closed.closed is True
    assert closed.error_message == "Request failed with status code 404"
    assert closed.failure_meta["status"] == 404


def test_in_memory_ids_are_sequential_and_unique(run_store, fixed_now):
    ids = [run_store.create_run(workflow_id=None, status=RunStatus.SUCCESS, start_time=fixed_now) for _ in range(3)]
    assert ids == ["1", "2", "3"]


def test_in_memory_second_close_is_rejected(run_store, fixed_now):
    run_id = run_store.create_run(workflow_id=None, status=RunStatus.SUCCESS, start_time=fixed_now)
    run_store.update_run(run_id, status=RunStatus.SKIPPED, end_time=fixed_now)

    with pytest.raises(RunAlreadyClosedError):
        run_store.update_run(run_id, status=RunStatus.SUCCESS, end_time=fixed_now)

    assert run_store.get(run_id).status == RunStatus.SKIPPED


def test_in_memory_unknown_run(run_store, fixed_now):
    with pytest.raises(RunNotFoundError):
        run_store.get("404")
    with pytest.raises(RunNotFoundError):
        run_store.update_run("404", status=RunStatus.SUCCESS, end_time=fixed_now)


def test_in_memory_list_runs_by_workflow(run_store, fixed_now):
    run_store.create_run(workflow_id="a", status=RunStatus.SUCCESS, start_time=fixed_now)
    run_store.create_run(workflow_id="b", status=RunStatus.SUCCESS, start_time=fixed_now)
    run_store.create_run(workflow_id="a", status=RunStatus.SUCCESS, start_time=fixed_now)

    assert len(run_store.list_runs()) == 3
    assert [r.id for r in run_store.list_runs("a")] == ["1", "3"]


def test_naive_timestamps_are_treated_as_utc(run_store):
    run_id = run_store.create_run(workflow_id=None, status=RunStatus.SUCCESS, start_time=datetime(2026, 1, 1, 8, 0))
    assert run_store.get(run_id).start_time.tzinfo == timezone.utc


# ---------------------------------------------------------------------------
# RunRecord
# ---------------------------------------------------------------------------

def test_record_dict_roundtrip_uses_wire_keys(fixed_now):
    record = RunRecord(
        id="r1",
        workflow_id="wf",
        status=RunStatus.FAILED,
        start_time=fixed_now,
        end_time=fixed_now,
        error_message="boom",
        failure_meta={"code": "ConnectError", "message": "refused"},
    )

    data = record.to_dict()

    assert set(data) == {"id", "workflowId", "status", "startTime", "endTime", "errorMessage", "failureMeta"}
    assert data["status"] == "failed"
    assert data["startTime"] == "2026-01-16T12:00:00+00:00"
    assert RunRecord.from_dict(data) == record


# ---------------------------------------------------------------------------
# JsonRunStore
# ---------------------------------------------------------------------------

def test_json_store_persists_one_document_per_run(tmp_path, fixed_now):
    store = JsonRunStore(root_dir=tmp_path)

    run_id = store.create_run(workflow_id="wf-1", status=RunStatus.SUCCESS, start_time=fixed_now)
    path = store.run_path(run_id)
    assert path == tmp_path / "runs" / f"{run_id}.json"
    assert json.loads(path.read_text(encoding="utf-8"))["endTime"] is None

    store.update_run(run_id, status=RunStatus.SUCCESS, end_time=fixed_now + timedelta(milliseconds=5))

    doc = json.loads(path.read_text(encoding="utf-8"))
    assert doc["status"] == "success"
    assert doc["workflowId"] == "wf-1"
    assert doc["endTime"] == "2026-01-16T12:00:00.005000+00:00"
    assert list(doc) == sorted(doc)
    assert store.get(run_id).closed is True


def test_json_store_rejects_second_close(tmp_path, fixed_now):
    store = JsonRunStore(root_dir=tmp_path)
    run_id = store.create_run(workflow_id=None, status=RunStatus.SUCCESS, start_time=fixed_now)
    store.update_run(run_id, status=RunStatus.FAILED, end_time=fixed_now, error_message="x")

    with pytest.raises(RunAlreadyClosedError):
        store.update_run(run_id, status=RunStatus.SUCCESS, end_time=fixed_now)


def test_json_store_unknown_run(tmp_path):
    with pytest.raises(RunNotFoundError):
        JsonRunStore(root_dir=tmp_path).get("missing")
