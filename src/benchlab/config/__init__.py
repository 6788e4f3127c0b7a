from __future__ import annotations

from benchlab.config.models import (
    DEFAULT_BASE_URL,
    DEFAULT_DURATION_MS,
    DEFAULT_METRICS_PATH,
    BenchmarkConfig,
    TargetConfig,
    parse_duration,
)

__all__ = [
    "DEFAULT_BASE_URL",
    "DEFAULT_DURATION_MS",
    "DEFAULT_METRICS_PATH",
    "BenchmarkConfig",
    "TargetConfig",
    "parse_duration",
]
