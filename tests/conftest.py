from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest

from benchlab.config import BenchmarkConfig
from benchlab.metrics import BenchmarkResults
from benchlab.storage import EndpointRun, HardwareInfo, ResultStore


@pytest.fixture()
def store(tmp_path: Path) -> ResultStore:
    return ResultStore(tmp_path / "runs.duckdb")


@pytest.fixture()
def hardware() -> HardwareInfo:
    return HardwareInfo(os="Linux 6.8", cpu="x86_64 (8 cores)", memory="32 GB", runtime_version="Python 3.12.1")


@pytest.fixture()
def make_endpoint_run() -> Callable[..., EndpointRun]:
    def _make(
        variant: str = "eager-loading",
        rps: float = 120.5,
        p50: float = 8.0,
        p95: float = 15.0,
        p99: float = 22.0,
        errors: int = 0,
        total: int = 1205,
        peak_memory: float | None = 210.0,
    ) -> EndpointRun:
        results = BenchmarkResults(
            total_requests=total,
            requests_per_second=rps,
            latency_p50=p50,
            latency_p95=p95,
            latency_p99=p99,
            errors=errors,
            duration_ms=10004.0,
            avg_cpu_percent=None if peak_memory is None else 35.5,
            avg_memory_mb=None if peak_memory is None else 180.25,
            peak_memory_mb=peak_memory,
        )
        return EndpointRun(
            endpoint=f"/api/scenarios/nplusone/{variant}",
            variant=variant,
            scenario="nplusone",
            config=BenchmarkConfig(duration="10s", concurrency=5, warmup_requests=1, http_timeout_seconds=60),
            results=results,
        )

    return _make
