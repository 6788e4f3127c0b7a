from __future__ import annotations

import pytest
from hypothesis import given, strategies as st

from benchlab.metrics import percentile

latencies = st.lists(st.floats(min_value=0.0, max_value=60_000.0, allow_nan=False), min_size=1, max_size=500)


@given(samples=latencies)
def test_percentiles_are_monotonic(samples: list[float]) -> None:
    p50 = percentile(samples, 50)
    p95 = percentile(samples, 95)
    p99 = percentile(samples, 99)
    assert p50 <= p95 <= p99


@given(samples=latencies, p=st.sampled_from([1, 25, 50, 90, 95, 99, 100]))
def test_percentile_is_a_sample(samples: list[float], p: int) -> None:
    assert percentile(samples, p) in samples


@given(samples=latencies)
def test_hundredth_percentile_is_max(samples: list[float]) -> None:
    assert percentile(samples, 100) == max(samples)


def test_empty_collection_reports_zero() -> None:
    assert percentile([], 50) == 0.0
    assert percentile([], 99) == 0.0


def test_nearest_rank_without_interpolation() -> None:
    samples = [float(v) for v in range(100, 0, -1)]
    assert percentile(samples, 50) == 50.0
    assert percentile(samples, 95) == 95.0
    assert percentile(samples, 99) == 99.0
    assert percentile([10.0, 20.0], 50) == 10.0
    assert percentile([10.0, 20.0], 51) == 20.0


def test_small_percentile_clamps_to_first_rank() -> None:
    assert percentile([7.0, 3.0, 5.0], 0.01) == 3.0


@pytest.mark.parametrize("p", [0, -5, 100.5])
def test_out_of_range_percentile_rejected(p: float) -> None:
    with pytest.raises(ValueError):
        percentile([1.0], p)
