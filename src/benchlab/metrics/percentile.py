from __future__ import annotations

import math
from typing import Sequence

import numpy as np


def percentile(samples: Sequence[float], p: float) -> float:
    """Nearest-rank percentile of ``samples`` (milliseconds).

    Sorts ascending and picks index ``ceil(p * n / 100) - 1``, clamped to the
    valid range. The result is always one of the samples; an empty collection
    yields ``0.0`` so that an all-failed run still reports a latency.
    """
    if not 0 < p <= 100:
        msg = f"percentile must be in (0, 100], got {p}"
        raise ValueError(msg)
    n = len(samples)
    if n == 0:
        return 0.0
    ordered = np.sort(np.asarray(samples, dtype=float))
    # p * n first keeps the product exact for integral p
    index = math.ceil(p * n / 100) - 1
    index = min(max(index, 0), n - 1)
    return float(ordered[index])
