from __future__ import annotations

from benchlab.loadgen.client import RequestOutcome, build_client, send_request
from benchlab.loadgen.runner import Phase, PhaseListener, run_benchmark
from benchlab.loadgen.sampler import MetricsSampler, ResourceSample

__all__ = [
    "MetricsSampler",
    "Phase",
    "PhaseListener",
    "RequestOutcome",
    "ResourceSample",
    "build_client",
    "run_benchmark",
    "send_request",
]
