from __future__ import annotations

from benchlab.config import BenchmarkConfig, TargetConfig, parse_duration
from benchlab.loadgen import Phase, run_benchmark
from benchlab.metrics import BenchmarkResults, percentile
from benchlab.orchestrator import Orchestrator, ProgressState, Variant, run_orchestrated_benchmark
from benchlab.storage import BenchmarkRun, EndpointRun, HardwareInfo, ResultStore

__all__ = [
    "BenchmarkConfig",
    "BenchmarkResults",
    "BenchmarkRun",
    "EndpointRun",
    "HardwareInfo",
    "Orchestrator",
    "Phase",
    "ProgressState",
    "ResultStore",
    "TargetConfig",
    "Variant",
    "parse_duration",
    "percentile",
    "run_benchmark",
    "run_orchestrated_benchmark",
]
