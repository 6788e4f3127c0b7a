from __future__ import annotations

from benchlab.metrics.aggregator import WorkerTally, describe_errors, merge_tallies, summarize
from benchlab.metrics.models import BenchmarkResults, ErrorType
from benchlab.metrics.percentile import percentile

__all__ = [
    "BenchmarkResults",
    "ErrorType",
    "WorkerTally",
    "describe_errors",
    "merge_tallies",
    "percentile",
    "summarize",
]
