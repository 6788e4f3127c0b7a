from __future__ import annotations

from benchlab.analysis.compare import Regression, compare_runs, variant_frame, variant_scores

__all__ = ["Regression", "compare_runs", "variant_frame", "variant_scores"]
