"""
global_stats.py

Cross-store statistics computed once per batch from mature stores only:

    - growth rate at the 65th percentile (new stores are assumed to be in an
      accelerating phase)
    - capacity at the 50th percentile
    - per-month median of the stores' seasonal profiles, renormalised

Percentiles use the inverted-CDF definition so that repeating the store set
does not move them.
"""

import numpy as np

from .config import (
    GLOBAL_GROWTH_RATE_PERCENTILE,
    GLOBAL_CAPACITY_PERCENTILE,
    DEFAULT_GROWTH_RATE,
    DEFAULT_CAPACITY,
)
from .contracts import GlobalStatistics
from .seasonality import flat_profile, normalize_profile
from .utils import notify


def default_global_statistics() -> GlobalStatistics:
    return GlobalStatistics(
        median_growth_rate=DEFAULT_GROWTH_RATE,
        median_capacity=DEFAULT_CAPACITY,
        median_seasonal_profile=tuple(flat_profile()),
    )


def is_eligible(result) -> bool:
    return (
        result.tier == "mature"
        and not result.error
        and result.is_active
        and result.fit is not None
        and result.fit.mode != "startup"
    )


def _percentile(values, q) -> float:
    return float(np.percentile(np.asarray(values, dtype=float), q, method="inverted_cdf"))


def compute_global_statistics(results) -> GlobalStatistics:
    mature = [r for r in results if is_eligible(r)]
    if not mature:
        notify("[GLOBAL][WARN] No mature stores, using default statistics.")
        return default_global_statistics()

    k = _percentile([r.fit.params.growth_rate for r in mature], GLOBAL_GROWTH_RATE_PERCENTILE)
    cap = _percentile([r.fit.params.capacity for r in mature], GLOBAL_CAPACITY_PERCENTILE)

    profiles = np.array([r.seasonal_profile for r in mature], dtype=float)
    profile = normalize_profile(np.median(profiles, axis=0))

    stats = GlobalStatistics(
        median_growth_rate=k if k > 0 else DEFAULT_GROWTH_RATE,
        median_capacity=cap if cap > 0 else DEFAULT_CAPACITY,
        median_seasonal_profile=tuple(float(v) for v in profile),
    )
    notify(
        f"[GLOBAL] {len(mature)} mature store(s): k={stats.median_growth_rate:.4f}, "
        f"L={stats.median_capacity:.1f}"
    )
    return stats
