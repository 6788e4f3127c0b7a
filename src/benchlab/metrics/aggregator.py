from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Iterable, Sequence

import numpy as np

from benchlab.metrics.models import BenchmarkResults, ErrorType
from benchlab.metrics.percentile import percentile


@dataclass(slots=True)
class WorkerTally:
    """Counters owned by a single measurement worker."""

    successes: int = 0
    errors: int = 0
    latencies_ms: list[float] = field(default_factory=list)
    error_counts: Counter[ErrorType] = field(default_factory=Counter)

    def record_success(self, latency_ms: float) -> None:
        self.successes += 1
        self.latencies_ms.append(latency_ms)

    def record_error(self, error_type: ErrorType = ErrorType.OTHER) -> None:
        self.errors += 1
        self.error_counts[error_type] += 1


def merge_tallies(tallies: Iterable[WorkerTally]) -> WorkerTally:
    merged = WorkerTally()
    for tally in tallies:
        merged.successes += tally.successes
        merged.errors += tally.errors
        merged.latencies_ms.extend(tally.latencies_ms)
        merged.error_counts.update(tally.error_counts)
    return merged


def summarize(
    tally: WorkerTally,
    duration_ms: float,
    cpu_samples: Sequence[float] = (),
    memory_samples: Sequence[float] = (),
) -> BenchmarkResults:
    if duration_ms > 0:
        rps = tally.successes / (duration_ms / 1000.0)
    else:
        rps = 0.0
    avg_cpu = float(np.mean(cpu_samples)) if len(cpu_samples) else None
    avg_mem = float(np.mean(memory_samples)) if len(memory_samples) else None
    peak_mem = float(np.max(memory_samples)) if len(memory_samples) else None
    return BenchmarkResults(
        total_requests=tally.successes + tally.errors,
        requests_per_second=rps,
        latency_p50=percentile(tally.latencies_ms, 50),
        latency_p95=percentile(tally.latencies_ms, 95),
        latency_p99=percentile(tally.latencies_ms, 99),
        errors=tally.errors,
        duration_ms=duration_ms,
        avg_cpu_percent=avg_cpu,
        avg_memory_mb=avg_mem,
        peak_memory_mb=peak_mem,
    )


def describe_errors(tally: WorkerTally) -> str:
    """Render the per-type error counts as ``"timeout=3, status=1"``."""
    if not tally.error_counts:
        return "none"
    return ", ".join(
        f"{error_type.value}={count}"
        for error_type, count in sorted(tally.error_counts.items(), key=lambda item: item[0].value)
    )
