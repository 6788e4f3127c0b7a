from __future__ import annotations

from typing import Callable

from benchlab.analysis import compare_runs, variant_frame, variant_scores
from benchlab.storage import BenchmarkRun, EndpointRun, HardwareInfo


def _run(hardware: HardwareInfo, runs: list[EndpointRun], run_id: str = "run") -> BenchmarkRun:
    return BenchmarkRun(id=run_id, created_at="2025-01-01T00:00:00.000Z", name=run_id, hardware=hardware, runs=tuple(runs))


def test_variant_frame(hardware: HardwareInfo, make_endpoint_run: Callable[..., EndpointRun]) -> None:
    frame = variant_frame(_run(hardware, [make_endpoint_run("a"), make_endpoint_run("b", errors=5, total=100)]))
    assert list(frame["variant"]) == ["a", "b"]
    assert frame.loc[1, "error_rate"] == 0.05


def test_variant_scores_normalize_against_best(
    hardware: HardwareInfo, make_endpoint_run: Callable[..., EndpointRun]
) -> None:
    run = _run(
        hardware,
        [
            make_endpoint_run("slow", rps=50.0, p95=40.0, peak_memory=400.0, errors=10, total=100),
            make_endpoint_run("fast", rps=200.0, p95=10.0, peak_memory=100.0, errors=0, total=400),
        ],
    )
    scores = variant_scores(run).set_index("variant")
    assert scores.loc["fast", "throughput"] == 100
    assert scores.loc["slow", "throughput"] == 25
    assert scores.loc["slow", "latency"] == 0
    assert scores.loc["fast", "latency"] == 75
    assert scores.loc["fast", "memory"] == 75
    assert scores.loc["slow", "reliability"] == 90
    assert scores.loc["fast", "reliability"] == 100


def test_variant_scores_neutral_memory_without_samples(
    hardware: HardwareInfo, make_endpoint_run: Callable[..., EndpointRun]
) -> None:
    run = _run(hardware, [make_endpoint_run("a", peak_memory=None), make_endpoint_run("b", peak_memory=None)])
    scores = variant_scores(run)
    assert list(scores["memory"]) == [50.0, 50.0]


def test_compare_flags_regressions_per_variant(
    hardware: HardwareInfo, make_endpoint_run: Callable[..., EndpointRun]
) -> None:
    base = _run(
        hardware,
        [make_endpoint_run("a", rps=100.0, p99=20.0), make_endpoint_run("b", rps=100.0, p99=20.0)],
        "base",
    )
    candidate = _run(
        hardware,
        [make_endpoint_run("a", rps=100.0, p99=21.0), make_endpoint_run("b", rps=50.0, p99=40.0)],
        "candidate",
    )
    regressions = compare_runs(base, candidate)
    assert {(r.variant, r.metric) for r in regressions} == {("b", "latency_p99"), ("b", "requests_per_second")}


def test_compare_ignores_variants_missing_from_either_run(
    hardware: HardwareInfo, make_endpoint_run: Callable[..., EndpointRun]
) -> None:
    base = _run(hardware, [make_endpoint_run("a")], "base")
    candidate = _run(hardware, [make_endpoint_run("z", rps=1.0, p99=999.0)], "candidate")
    assert compare_runs(base, candidate) == []


def test_variant_scores_round_halves_up(
    hardware: HardwareInfo, make_endpoint_run: Callable[..., EndpointRun]
) -> None:
    run = _run(
        hardware,
        [
            make_endpoint_run("lean", rps=8.0, errors=0, total=8),
            make_endpoint_run("heavy", rps=1.0, errors=3, total=8),
        ],
    )
    scores = variant_scores(run).set_index("variant")
    assert scores.loc["heavy", "throughput"] == 13
    assert scores.loc["heavy", "reliability"] == 63
