from __future__ import annotations

import asyncio
import contextlib
import logging
import time
from dataclasses import dataclass, replace
from typing import Callable, Sequence

import httpx

from benchlab.config import BenchmarkConfig, TargetConfig
from benchlab.errors import InvalidConfigError
from benchlab.hardware import detect_hardware
from benchlab.loadgen import Phase, build_client, run_benchmark
from benchlab.loadgen.sampler import DEFAULT_INTERVAL_SEC
from benchlab.orchestrator.progress import ProgressState
from benchlab.storage import BenchmarkRun, EndpointRun, HardwareInfo, ResultStore

logger = logging.getLogger(__name__)

DEFAULT_TICK_SEC = 0.1

ProgressObserver = Callable[[ProgressState], None]


@dataclass(frozen=True, slots=True)
class Variant:
    name: str
    endpoint: str
    scenario: str = ""


class Orchestrator:
    """Runs variants one after another and keeps a live ``ProgressState``.

    Snapshots are pushed to the observer on every phase transition and on a
    fixed tick. Delivery is scheduled on the event loop, never awaited, so a
    slow or failing observer cannot hold up the measurement.
    """

    def __init__(
        self,
        config: BenchmarkConfig,
        *,
        target: TargetConfig | None = None,
        observer: ProgressObserver | None = None,
        tick_interval_sec: float = DEFAULT_TICK_SEC,
        clock: Callable[[], float] = time.monotonic,
        client: httpx.AsyncClient | None = None,
        sample_interval_sec: float = DEFAULT_INTERVAL_SEC,
    ) -> None:
        self._config = config
        self._target = target or TargetConfig()
        self._observer = observer
        self._tick_interval = tick_interval_sec
        self._clock = clock
        self._client = client
        self._sample_interval = sample_interval_sec
        self._state: ProgressState | None = None

    @property
    def progress(self) -> ProgressState | None:
        return self._state

    async def run(self, variants: Sequence[Variant]) -> list[EndpointRun]:
        if not variants:
            msg = "at least one variant is required"
            raise InvalidConfigError(msg)
        self._config.validate()

        names = [variant.name for variant in variants]
        duration_ms = self._config.duration_ms
        started = self._clock()
        completed: list[str] = []
        runs: list[EndpointRun] = []
        ticker = asyncio.create_task(self._tick())
        try:
            async with self._client_scope() as client:
                for index, variant in enumerate(variants):
                    self._update(
                        ProgressState(
                            is_running=True,
                            current_variant=variant.name,
                            current_variant_index=index,
                            total_variants=len(variants),
                            variant_start_time=self._clock(),
                            benchmark_start_time=started,
                            completed_variants=tuple(completed),
                            pending_variants=tuple(names[index + 1 :]),
                            duration=self._config.duration,
                            duration_ms=duration_ms,
                            is_warming_up=True,
                        )
                    )
                    logger.info(
                        "Variant %d/%d: %s (%s)", index + 1, len(variants), variant.name, variant.endpoint
                    )
                    results = await run_benchmark(
                        variant.endpoint,
                        self._config,
                        self,
                        target=self._target,
                        client=client,
                        sample_interval_sec=self._sample_interval,
                        duration_ms=duration_ms,
                    )
                    runs.append(
                        EndpointRun(
                            endpoint=variant.endpoint,
                            variant=variant.name,
                            scenario=variant.scenario,
                            config=self._config,
                            results=results,
                        )
                    )
                    completed.append(variant.name)
        except Exception:
            logger.error("Benchmark aborted after %d of %d variants", len(completed), len(variants))
            raise
        finally:
            ticker.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await ticker
            self._finish(completed)
        return runs

    def on_phase(self, phase: Phase) -> None:
        if self._state is None:
            return
        if phase is Phase.WARMUP:
            self._update(replace(self._state, is_warming_up=True))
        else:
            self._update(
                replace(self._state, is_warming_up=False, variant_start_time=self._clock())
            )

    def _client_scope(self) -> contextlib.AbstractAsyncContextManager[httpx.AsyncClient]:
        if self._client is not None:
            return contextlib.nullcontext(self._client)
        return build_client(self._target, self._config.concurrency)

    def _update(self, state: ProgressState) -> None:
        self._state = state
        self._publish(state)

    def _finish(self, completed: list[str]) -> None:
        last = self._state
        self._state = None
        if last is not None:
            self._publish(
                replace(
                    last,
                    is_running=False,
                    is_warming_up=False,
                    completed_variants=tuple(completed),
                )
            )

    async def _tick(self) -> None:
        while True:
            await asyncio.sleep(self._tick_interval)
            if self._state is not None:
                self._publish(self._state)

    def _publish(self, state: ProgressState) -> None:
        if self._observer is None:
            return
        asyncio.get_running_loop().call_soon(self._deliver, state)

    def _deliver(self, state: ProgressState) -> None:
        assert self._observer is not None
        try:
            self._observer(state)
        except Exception:
            logger.exception("Progress observer raised; continuing")


async def run_orchestrated_benchmark(
    variants: Sequence[Variant],
    config: BenchmarkConfig,
    *,
    target: TargetConfig | None = None,
    observer: ProgressObserver | None = None,
    tick_interval_sec: float = DEFAULT_TICK_SEC,
    client: httpx.AsyncClient | None = None,
) -> list[EndpointRun]:
    orchestrator = Orchestrator(
        config,
        target=target,
        observer=observer,
        tick_interval_sec=tick_interval_sec,
        client=client,
    )
    return await orchestrator.run(variants)


async def run_and_save(
    name: str,
    variants: Sequence[Variant],
    config: BenchmarkConfig,
    store: ResultStore,
    *,
    target: TargetConfig | None = None,
    observer: ProgressObserver | None = None,
    hardware: HardwareInfo | None = None,
    client: httpx.AsyncClient | None = None,
) -> BenchmarkRun:
    """Run every variant and persist the set as one ``BenchmarkRun``.

    Nothing is written unless all variants complete.
    """
    if not name.strip():
        msg = "benchmark name must not be empty"
        raise InvalidConfigError(msg)
    runs = await run_orchestrated_benchmark(
        variants,
        config,
        target=target,
        observer=observer,
        client=client,
    )
    return store.save_run(name, hardware or detect_hardware(), runs)
