from __future__ import annotations

import asyncio
import logging
import time
from enum import Enum
from typing import Protocol

import httpx

from benchlab.config import BenchmarkConfig, TargetConfig
from benchlab.loadgen.client import build_client, send_request
from benchlab.loadgen.sampler import DEFAULT_INTERVAL_SEC, MetricsSampler
from benchlab.metrics import (
    BenchmarkResults,
    ErrorType,
    WorkerTally,
    describe_errors,
    merge_tallies,
    summarize,
)

logger = logging.getLogger(__name__)


class Phase(str, Enum):
    WARMUP = "warmup"
    MEASUREMENT = "measurement"


class PhaseListener(Protocol):
    def on_phase(self, phase: Phase) -> None:
        ...


async def run_benchmark(
    endpoint: str,
    config: BenchmarkConfig,
    listener: PhaseListener | None = None,
    *,
    target: TargetConfig | None = None,
    client: httpx.AsyncClient | None = None,
    sample_interval_sec: float = DEFAULT_INTERVAL_SEC,
    duration_ms: int | None = None,
) -> BenchmarkResults:
    """Warm up ``endpoint`` then measure it for the configured duration.

    ``endpoint`` is either an absolute URL or a path on ``target.base_url``.
    When no client is passed one is created for the duration of the call,
    with a pool large enough for every worker. A caller-supplied client must
    allow ``config.concurrency`` connections itself. ``duration_ms`` overrides
    parsing ``config.duration`` when the caller has already done so.
    """
    config.validate()
    target = target or TargetConfig()
    if duration_ms is None:
        duration_ms = config.duration_ms
    if client is not None:
        return await _execute(
            client, endpoint, config, duration_ms, listener, target, sample_interval_sec
        )
    async with build_client(target, config.concurrency) as owned:
        return await _execute(
            owned, endpoint, config, duration_ms, listener, target, sample_interval_sec
        )


async def _execute(
    client: httpx.AsyncClient,
    endpoint: str,
    config: BenchmarkConfig,
    duration_ms: int,
    listener: PhaseListener | None,
    target: TargetConfig,
    sample_interval_sec: float,
) -> BenchmarkResults:
    url = target.url_for(endpoint)
    timeout_sec = float(config.http_timeout_seconds)

    _notify(listener, Phase.WARMUP)
    await _warmup(client, url, config.warmup_requests, timeout_sec)
    _notify(listener, Phase.MEASUREMENT)

    logger.info(
        "Measuring %s for %d ms with %d workers", url, duration_ms, config.concurrency
    )
    sampler = MetricsSampler(client, target.metrics_url, interval_sec=sample_interval_sec)
    async with sampler:
        started = time.perf_counter()
        stop_at = started + duration_ms / 1000.0
        tallies = await _run_workers(client, url, timeout_sec, stop_at, config.concurrency)
        elapsed_ms = (time.perf_counter() - started) * 1000.0

    merged = merge_tallies(tallies)
    results = summarize(
        merged,
        elapsed_ms,
        sampler.cpu_samples,
        sampler.memory_samples,
    )
    logger.info(
        "Finished %s: %d requests, %d errors (%s), %.1f req/s, p95 %.1f ms",
        url,
        results.total_requests,
        results.errors,
        describe_errors(merged),
        results.requests_per_second,
        results.latency_p95,
    )
    return results


async def _warmup(
    client: httpx.AsyncClient,
    url: str,
    count: int,
    timeout_sec: float,
) -> None:
    for _ in range(count):
        # outcome ignored; only an unaddressable target escapes
        await send_request(client, url, timeout_sec)


async def _run_workers(
    client: httpx.AsyncClient,
    url: str,
    timeout_sec: float,
    stop_at: float,
    concurrency: int,
) -> list[WorkerTally]:
    tasks = [
        asyncio.create_task(_worker(client, url, timeout_sec, stop_at))
        for _ in range(concurrency)
    ]
    try:
        return list(await asyncio.gather(*tasks))
    except BaseException:
        for task in tasks:
            task.cancel()
        raise


async def _worker(
    client: httpx.AsyncClient,
    url: str,
    timeout_sec: float,
    stop_at: float,
) -> WorkerTally:
    tally = WorkerTally()
    while time.perf_counter() < stop_at:
        outcome = await send_request(client, url, timeout_sec)
        if outcome.success:
            tally.record_success(outcome.latency_ms)
        else:
            tally.record_error(outcome.error_type or ErrorType.OTHER)
    return tally


def _notify(listener: PhaseListener | None, phase: Phase) -> None:
    logger.debug("Phase %s", phase.value)
    if listener is not None:
        listener.on_phase(phase)
