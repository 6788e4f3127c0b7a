from __future__ import annotations

from benchlab.orchestrator.progress import (
    OVERHEAD_ESTIMATE_MS,
    ProgressReport,
    ProgressState,
    describe_progress,
    estimate_remaining_ms,
    overall_fraction,
    variant_fraction,
)
from benchlab.orchestrator.runner import (
    Orchestrator,
    ProgressObserver,
    Variant,
    run_and_save,
    run_orchestrated_benchmark,
)

__all__ = [
    "OVERHEAD_ESTIMATE_MS",
    "Orchestrator",
    "ProgressObserver",
    "ProgressReport",
    "ProgressState",
    "Variant",
    "describe_progress",
    "estimate_remaining_ms",
    "overall_fraction",
    "run_and_save",
    "run_orchestrated_benchmark",
    "variant_fraction",
]
