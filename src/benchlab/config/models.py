from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Mapping

from benchlab.errors import InvalidConfigError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:5847"
DEFAULT_METRICS_PATH = "/api/metrics"
DEFAULT_DURATION_MS = 10_000

_DURATION_RE = re.compile(r"^(\d+)(ms|s|m|h)?$")
_UNIT_MS = {"ms": 1, "s": 1000, "m": 60 * 1000, "h": 60 * 60 * 1000}


def parse_duration(text: str) -> int:
    """Parse a compact duration such as ``"10s"``, ``"1m"`` or ``"1h"`` into ms.

    A bare number is read as seconds. Anything that does not match falls back
    to ``DEFAULT_DURATION_MS`` so that a typo still yields a usable run.
    """
    match = _DURATION_RE.fullmatch(text) if isinstance(text, str) else None
    if match is None:
        logger.warning(
            "Unparseable duration %r, using default of %d ms", text, DEFAULT_DURATION_MS
        )
        return DEFAULT_DURATION_MS
    value = int(match.group(1))
    unit = match.group(2) or "s"
    return value * _UNIT_MS[unit]


@dataclass(frozen=True, slots=True)
class TargetConfig:
    base_url: str = DEFAULT_BASE_URL
    metrics_path: str | None = DEFAULT_METRICS_PATH
    headers: Mapping[str, str] = field(default_factory=dict)

    def url_for(self, endpoint: str) -> str:
        if "://" in endpoint:
            return endpoint
        return self.base_url.rstrip("/") + "/" + endpoint.lstrip("/")

    @property
    def metrics_url(self) -> str | None:
        if self.metrics_path is None:
            return None
        return self.url_for(self.metrics_path)


@dataclass(frozen=True, slots=True)
class BenchmarkConfig:
    duration: str = "10s"
    concurrency: int = 5
    warmup_requests: int = 1
    http_timeout_seconds: int = 60

    @property
    def duration_ms(self) -> int:
        return parse_duration(self.duration)

    def validate(self) -> None:
        if self.concurrency < 1:
            msg = f"concurrency must be >= 1, got {self.concurrency}"
            raise InvalidConfigError(msg)
        if self.warmup_requests < 0:
            msg = f"warmupRequests must be >= 0, got {self.warmup_requests}"
            raise InvalidConfigError(msg)
        if self.http_timeout_seconds <= 0:
            msg = f"httpTimeoutSeconds must be > 0, got {self.http_timeout_seconds}"
            raise InvalidConfigError(msg)

    def to_dict(self) -> dict[str, Any]:
        return {
            "duration": self.duration,
            "concurrency": self.concurrency,
            "warmupRequests": self.warmup_requests,
            "httpTimeoutSeconds": self.http_timeout_seconds,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> BenchmarkConfig:
        return cls(
            duration=data["duration"],
            concurrency=data["concurrency"],
            warmup_requests=data["warmupRequests"],
            http_timeout_seconds=data.get("httpTimeoutSeconds", 60),
        )
