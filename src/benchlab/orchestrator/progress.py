"""Progress and ETA model for a multi-variant run.

All estimates are pure functions of a ``ProgressState`` snapshot and the
current monotonic time, so observers can recompute them on their own tick.
"""

from __future__ import annotations

from dataclasses import dataclass

OVERHEAD_ESTIMATE_MS = 2000.0


@dataclass(frozen=True, slots=True)
class ProgressState:
    is_running: bool
    current_variant: str
    current_variant_index: int
    total_variants: int
    variant_start_time: float
    benchmark_start_time: float
    completed_variants: tuple[str, ...]
    pending_variants: tuple[str, ...]
    duration: str
    duration_ms: int
    is_warming_up: bool


@dataclass(frozen=True, slots=True)
class ProgressReport:
    variant_fraction: float
    overall_fraction: float
    elapsed_ms: float
    variant_elapsed_ms: float
    remaining_ms: float


def variant_fraction(state: ProgressState, now: float) -> float:
    if state.is_warming_up:
        return 0.0
    duration_ms = state.duration_ms
    if duration_ms <= 0:
        return 1.0
    elapsed_ms = (now - state.variant_start_time) * 1000.0
    return min(max(elapsed_ms / duration_ms, 0.0), 1.0)


def overall_fraction(state: ProgressState, now: float) -> float:
    completed = len(state.completed_variants)
    return (completed + variant_fraction(state, now)) / state.total_variants


def average_variant_ms(state: ProgressState, now: float) -> float:
    completed = len(state.completed_variants)
    if completed > 0:
        return (now - state.benchmark_start_time) * 1000.0 / completed
    return state.duration_ms + OVERHEAD_ESTIMATE_MS


def estimate_remaining_ms(state: ProgressState, now: float) -> float:
    """Remaining wall-clock estimate.

    While the current variant is warming up none of its measurement window
    has started yet, so its full configured duration is added on top.
    """
    completed = len(state.completed_variants)
    remaining_variants = state.total_variants - completed - variant_fraction(state, now)
    remaining = remaining_variants * average_variant_ms(state, now)
    if state.is_warming_up:
        remaining += state.duration_ms
    return max(remaining, 0.0)


def describe_progress(state: ProgressState, now: float) -> ProgressReport:
    if state.is_warming_up:
        variant_elapsed = 0.0
    else:
        variant_elapsed = max((now - state.variant_start_time) * 1000.0, 0.0)
    return ProgressReport(
        variant_fraction=variant_fraction(state, now),
        overall_fraction=overall_fraction(state, now),
        elapsed_ms=max((now - state.benchmark_start_time) * 1000.0, 0.0),
        variant_elapsed_ms=variant_elapsed,
        remaining_ms=estimate_remaining_ms(state, now),
    )
