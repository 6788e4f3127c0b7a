from __future__ import annotations

from dataclasses import dataclass

import numpy as np
import pandas as pd

from benchlab.storage import BenchmarkRun

P99_REGRESSION = 0.2
ERROR_RATE_REGRESSION = 0.3
THROUGHPUT_REGRESSION = 0.2


@dataclass(frozen=True, slots=True)
class Regression:
    variant: str
    metric: str
    delta_pct: float
    message: str


def variant_frame(run: BenchmarkRun) -> pd.DataFrame:
    rows = [
        {
            "variant": endpoint_run.variant,
            "scenario": endpoint_run.scenario,
            "total_requests": endpoint_run.results.total_requests,
            "requests_per_second": endpoint_run.results.requests_per_second,
            "latency_p50": endpoint_run.results.latency_p50,
            "latency_p95": endpoint_run.results.latency_p95,
            "latency_p99": endpoint_run.results.latency_p99,
            "errors": endpoint_run.results.errors,
            "error_rate": endpoint_run.results.error_rate,
            "avg_cpu_percent": endpoint_run.results.avg_cpu_percent,
            "avg_memory_mb": endpoint_run.results.avg_memory_mb,
            "peak_memory_mb": endpoint_run.results.peak_memory_mb,
        }
        for endpoint_run in run.runs
    ]
    return pd.DataFrame(rows)


def _round_half_up(values: pd.Series) -> pd.Series:
    return np.floor(values + 0.5)


def variant_scores(run: BenchmarkRun) -> pd.DataFrame:
    """Score each variant 0-100 on throughput, latency, memory and reliability.

    Throughput is relative to the fastest variant; latency (p95) and peak
    memory are inverted so that higher is always better. Without any memory
    readings every variant gets a neutral 50.
    """
    frame = variant_frame(run)
    if frame.empty:
        return pd.DataFrame(columns=["variant", "throughput", "latency", "memory", "reliability"])
    max_rps = frame["requests_per_second"].max()
    max_latency = frame["latency_p95"].max()
    peak_memory = frame["peak_memory_mb"].fillna(0.0).astype(float)
    max_memory = peak_memory.max()

    scores = pd.DataFrame({"variant": frame["variant"]})
    scores["throughput"] = _round_half_up(frame["requests_per_second"] / max_rps * 100) if max_rps > 0 else 0.0
    scores["latency"] = _round_half_up((1 - frame["latency_p95"] / max_latency) * 100) if max_latency > 0 else 0.0
    scores["memory"] = _round_half_up((1 - peak_memory / max_memory) * 100) if max_memory > 0 else 50.0
    totals = frame["total_requests"].clip(lower=1)
    scores["reliability"] = _round_half_up((1 - frame["errors"] / totals) * 100)
    return scores


def compare_runs(base: BenchmarkRun, candidate: BenchmarkRun) -> list[Regression]:
    """Flag variants that got materially worse between two runs."""
    regressions: list[Regression] = []
    base_df = variant_frame(base)
    cand_df = variant_frame(candidate)
    if base_df.empty or cand_df.empty:
        return regressions
    merged = base_df.merge(cand_df, on="variant", suffixes=("_base", "_cand"))
    for _, row in merged.iterrows():
        variant = row["variant"]
        base_p99 = row["latency_p99_base"]
        if base_p99 > 0:
            delta = (row["latency_p99_cand"] - base_p99) / base_p99
            if delta > P99_REGRESSION:
                regressions.append(
                    Regression(
                        variant=variant,
                        metric="latency_p99",
                        delta_pct=delta * 100,
                        message="p99 latency increased materially",
                    )
                )
        base_err = row["error_rate_base"]
        if base_err > 0:
            delta = (row["error_rate_cand"] - base_err) / base_err
            if delta > ERROR_RATE_REGRESSION:
                regressions.append(
                    Regression(
                        variant=variant,
                        metric="error_rate",
                        delta_pct=delta * 100,
                        message="error rate regression detected",
                    )
                )
        base_rps = row["requests_per_second_base"]
        if base_rps > 0:
            delta = (base_rps - row["requests_per_second_cand"]) / base_rps
            if delta > THROUGHPUT_REGRESSION:
                regressions.append(
                    Regression(
                        variant=variant,
                        metric="requests_per_second",
                        delta_pct=delta * 100,
                        message="throughput regression detected",
                    )
                )
    return regressions
