from __future__ import annotations

from pathlib import Path

from benchlab.storage.duckdb_store import ResultStore
from benchlab.storage.models import BenchmarkRun, EndpointRun, HardwareInfo


def default_store() -> ResultStore:
    return ResultStore(Path(".benchlab/benchlab.duckdb"))


__all__ = ["BenchmarkRun", "EndpointRun", "HardwareInfo", "ResultStore", "default_store"]
