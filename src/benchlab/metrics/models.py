from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping


class ErrorType(str, Enum):
    TIMEOUT = "timeout"
    CONNECT = "connect"
    READ = "read"
    STATUS = "status"
    OTHER = "other"


@dataclass(frozen=True, slots=True)
class BenchmarkResults:
    total_requests: int
    requests_per_second: float
    latency_p50: float
    latency_p95: float
    latency_p99: float
    errors: int
    duration_ms: float
    avg_cpu_percent: float | None = None
    avg_memory_mb: float | None = None
    peak_memory_mb: float | None = None

    @property
    def successes(self) -> int:
        return self.total_requests - self.errors

    @property
    def error_rate(self) -> float:
        if self.total_requests == 0:
            return 0.0
        return self.errors / self.total_requests

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "totalRequests": self.total_requests,
            "requestsPerSecond": self.requests_per_second,
            "latencyP50": self.latency_p50,
            "latencyP95": self.latency_p95,
            "latencyP99": self.latency_p99,
            "errors": self.errors,
            "durationMs": self.duration_ms,
        }
        # unmeasured resource fields are left out of the document
        if self.avg_cpu_percent is not None:
            data["avgCpuPercent"] = self.avg_cpu_percent
        if self.avg_memory_mb is not None:
            data["avgMemoryMB"] = self.avg_memory_mb
        if self.peak_memory_mb is not None:
            data["peakMemoryMB"] = self.peak_memory_mb
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> BenchmarkResults:
        return cls(
            total_requests=data["totalRequests"],
            requests_per_second=data["requestsPerSecond"],
            latency_p50=data["latencyP50"],
            latency_p95=data["latencyP95"],
            latency_p99=data["latencyP99"],
            errors=data["errors"],
            duration_ms=data["durationMs"],
            avg_cpu_percent=data.get("avgCpuPercent"),
            avg_memory_mb=data.get("avgMemoryMB"),
            peak_memory_mb=data.get("peakMemoryMB"),
        )
