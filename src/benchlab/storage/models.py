from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from benchlab.config import BenchmarkConfig
from benchlab.metrics import BenchmarkResults


@dataclass(frozen=True, slots=True)
class EndpointRun:
    endpoint: str
    variant: str
    scenario: str
    config: BenchmarkConfig
    results: BenchmarkResults

    def to_dict(self) -> dict[str, Any]:
        return {
            "endpoint": self.endpoint,
            "variant": self.variant,
            "scenario": self.scenario,
            "config": self.config.to_dict(),
            "results": self.results.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> EndpointRun:
        return cls(
            endpoint=data["endpoint"],
            variant=data["variant"],
            scenario=data["scenario"],
            config=BenchmarkConfig.from_dict(data["config"]),
            results=BenchmarkResults.from_dict(data["results"]),
        )


@dataclass(frozen=True, slots=True)
class HardwareInfo:
    os: str
    cpu: str
    memory: str
    runtime_version: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"os": self.os, "cpu": self.cpu, "memory": self.memory}
        if self.runtime_version is not None:
            data["runtimeVersion"] = self.runtime_version
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> HardwareInfo:
        return cls(
            os=data["os"],
            cpu=data["cpu"],
            memory=data["memory"],
            runtime_version=data.get("runtimeVersion"),
        )


@dataclass(frozen=True, slots=True)
class BenchmarkRun:
    id: str
    created_at: str
    name: str
    hardware: HardwareInfo
    runs: tuple[EndpointRun, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "createdAt": self.created_at,
            "name": self.name,
            "hardware": self.hardware.to_dict(),
            "runs": [run.to_dict() for run in self.runs],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> BenchmarkRun:
        return cls(
            id=data["id"],
            created_at=data["createdAt"],
            name=data["name"],
            hardware=HardwareInfo.from_dict(data["hardware"]),
            runs=tuple(EndpointRun.from_dict(run) for run in data["runs"]),
        )
