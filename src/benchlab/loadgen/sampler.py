from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Mapping

import httpx

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_SEC = 0.5


@dataclass(frozen=True, slots=True)
class ResourceSample:
    cpu_percent: float
    memory_mb: float


def parse_sample(payload: Mapping[str, Any]) -> ResourceSample:
    """Read a metrics payload in either the nested or the flat shape."""
    if "cpu" in payload and "memory" in payload:
        return ResourceSample(
            cpu_percent=float(payload["cpu"]["usagePercent"]),
            memory_mb=float(payload["memory"]["workingSetMB"]),
        )
    return ResourceSample(
        cpu_percent=float(payload["cpuPercent"]),
        memory_mb=float(payload["memoryMB"]),
    )


class MetricsSampler:
    """Polls a resource-metrics endpoint while a measurement phase runs.

    Sampling is best effort: a failed poll is dropped and the next one is
    attempted on schedule. A ``None`` url disables polling entirely.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        url: str | None,
        interval_sec: float = DEFAULT_INTERVAL_SEC,
        timeout_sec: float = 5.0,
    ) -> None:
        self._client = client
        self._url = url
        self._interval = interval_sec
        self._timeout = timeout_sec
        self._task: asyncio.Task[None] | None = None
        self.cpu_samples: list[float] = []
        self.memory_samples: list[float] = []

    async def __aenter__(self) -> MetricsSampler:
        self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.stop()

    def start(self) -> None:
        if self._url is None or self._task is not None:
            return
        self._task = asyncio.create_task(self._poll_forever())

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None

    async def _poll_forever(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            await self.poll_once()

    async def poll_once(self) -> None:
        assert self._url is not None
        try:
            resp = await self._client.get(self._url, timeout=self._timeout)
            resp.raise_for_status()
            sample = parse_sample(resp.json())
        except (httpx.HTTPError, ValueError, KeyError, TypeError) as exc:
            # a missing reading is the only trace a failed poll leaves
            logger.debug("Metrics poll failed: %s", exc)
            return
        self.cpu_samples.append(sample.cpu_percent)
        self.memory_samples.append(sample.memory_mb)
