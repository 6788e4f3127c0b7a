from __future__ import annotations

import json
from pathlib import Path
from typing import Callable

import pytest

from benchlab.errors import InvalidDocumentError, RunNotFoundError
from benchlab.storage import EndpointRun, HardwareInfo, ResultStore


def test_save_assigns_id_and_timestamp(
    store: ResultStore, hardware: HardwareInfo, make_endpoint_run: Callable[..., EndpointRun]
) -> None:
    run = store.save_run("baseline", hardware, [make_endpoint_run()])
    assert run.id
    assert run.created_at.endswith("Z")
    assert store.run_exists(run.id)
    assert store.get_run(run.id) == run


def test_list_is_most_recent_first(
    store: ResultStore, hardware: HardwareInfo, make_endpoint_run: Callable[..., EndpointRun]
) -> None:
    first = store.save_run("first", hardware, [make_endpoint_run()])
    second = store.save_run("second", hardware, [make_endpoint_run()])
    third = store.save_run("third", hardware, [make_endpoint_run()])
    assert [run.id for run in store.list_runs()] == [third.id, second.id, first.id]


def test_get_missing_run_returns_none(store: ResultStore) -> None:
    assert store.get_run("does-not-exist") is None


def test_delete(store: ResultStore, hardware: HardwareInfo, make_endpoint_run: Callable[..., EndpointRun]) -> None:
    keep = store.save_run("keep", hardware, [make_endpoint_run()])
    drop = store.save_run("drop", hardware, [make_endpoint_run()])
    assert store.delete_run(drop.id) is True
    assert store.delete_run(drop.id) is False
    assert [run.id for run in store.list_runs()] == [keep.id]


def test_export_import_round_trip(
    store: ResultStore, hardware: HardwareInfo, make_endpoint_run: Callable[..., EndpointRun]
) -> None:
    original = store.save_run(
        "N+1 comparison",
        hardware,
        [make_endpoint_run("explicit-loop", peak_memory=None), make_endpoint_run("projection")],
    )
    exported = store.export_run(original.id)

    imported = store.import_run(exported)
    assert imported.id != original.id
    assert imported.created_at == original.created_at
    assert imported.name == original.name
    assert imported.hardware == original.hardware
    assert imported.runs == original.runs

    reexported = store.export_run(imported.id)
    assert reexported == exported.replace(original.id, imported.id)
    assert "avgCpuPercent" not in json.loads(exported)["runs"][0]["results"]


def test_import_always_mints_fresh_id(
    store: ResultStore, hardware: HardwareInfo, make_endpoint_run: Callable[..., EndpointRun]
) -> None:
    original = store.save_run("shared", hardware, [make_endpoint_run()])
    document = store.export_run(original.id)
    first = store.import_run(document)
    second = store.import_run(json.loads(document))
    assert len({original.id, first.id, second.id}) == 3
    assert [run.id for run in store.list_runs()] == [second.id, first.id, original.id]


def test_import_preserves_document_written_elsewhere(store: ResultStore) -> None:
    document = {
        "id": "foreign-id",
        "createdAt": "2024-11-02T09:15:00.000Z",
        "name": "Tracking",
        "hardware": {"os": "macOS 14.5", "cpu": "Apple M4 (14 cores)", "memory": "64 GB"},
        "runs": [
            {
                "endpoint": "/api/scenarios/tracking/no-tracking",
                "variant": "no-tracking",
                "scenario": "tracking",
                "config": {"duration": "10s", "concurrency": 5, "warmupRequests": 1, "httpTimeoutSeconds": 60},
                "results": {
                    "totalRequests": 812,
                    "requestsPerSecond": 81.2,
                    "latencyP50": 55,
                    "latencyP95": 90,
                    "latencyP99": 131,
                    "errors": 0,
                    "durationMs": 10001,
                },
            }
        ],
    }
    run = store.import_run(json.dumps(document))
    assert run.id != "foreign-id"
    assert run.hardware.runtime_version is None
    exported = json.loads(store.export_run(run.id))
    assert exported == {**document, "id": run.id}


@pytest.mark.parametrize(
    "document",
    ["not json", "[1, 2]", json.dumps({"name": "missing fields"})],
)
def test_import_rejects_malformed_documents(store: ResultStore, document: str) -> None:
    with pytest.raises(InvalidDocumentError):
        store.import_run(document)
    assert store.list_runs() == []


def test_export_unknown_run(store: ResultStore) -> None:
    with pytest.raises(RunNotFoundError):
        store.export_run("missing")


def test_runs_persist_across_store_instances(
    tmp_path: Path, hardware: HardwareInfo, make_endpoint_run: Callable[..., EndpointRun]
) -> None:
    path = tmp_path / "nested" / "runs.duckdb"
    saved = ResultStore(path).save_run("persisted", hardware, [make_endpoint_run()])
    reopened = ResultStore(path)
    assert reopened.get_run(saved.id) == saved


def test_runs_frame_has_row_per_variant(
    store: ResultStore, hardware: HardwareInfo, make_endpoint_run: Callable[..., EndpointRun]
) -> None:
    assert store.runs_frame().empty
    store.save_run("two variants", hardware, [make_endpoint_run("a"), make_endpoint_run("b")])
    frame = store.runs_frame()
    assert list(frame["variant"]) == ["a", "b"]
    assert set(frame["name"]) == {"two variants"}


def test_clear(store: ResultStore, hardware: HardwareInfo, make_endpoint_run: Callable[..., EndpointRun]) -> None:
    store.save_run("one", hardware, [make_endpoint_run()])
    store.clear()
    assert store.list_runs() == []
