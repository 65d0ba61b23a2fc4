"""
shocks.py

Structural-break (shock) candidates for the shift model:

    - detect_scan_shock()      → sliding pre/post mean divergence, largest wins
    - detect_pandemic_shock()  → fixed early-2020 window fallback
    - detect_shock()           → scan first, pandemic window only if scan is empty

A descriptor is only a candidate; model selection decides whether the shift
model built on it is worth its extra parameter.
"""

import numpy as np
import pandas as pd

from .config import (
    SHOCK_MIN_SERIES_MONTHS,
    SHOCK_EDGE_MARGIN,
    SHOCK_WINDOW,
    SHOCK_MIN_WINDOW_POINTS,
    SHOCK_MIN_RATIO,
    PANDEMIC_YEAR,
    PANDEMIC_MONTHS,
    PANDEMIC_MIN_SIDE_MONTHS,
)
from .contracts import ShockDescriptor
from .utils import notify, parse_month_labels


# ------------------------------------------------------------------------------
# Generic sliding scan
# ------------------------------------------------------------------------------
def _window_mean(raw, mask, lo, hi, min_points):
    vals = raw[lo:hi][mask[lo:hi]]
    if vals.size < min_points:
        return None
    return float(vals.mean())


def detect_scan_shock(
    values,
    mask,
    margin=SHOCK_EDGE_MARGIN,
    window=SHOCK_WINDOW,
    min_ratio=SHOCK_MIN_RATIO,
) -> ShockDescriptor | None:
    raw = np.asarray(values, dtype=float)
    mask = np.asarray(mask, dtype=bool)
    n = raw.size
    if n < SHOCK_MIN_SERIES_MONTHS:
        return None

    best = None
    for i in range(margin, n - margin):
        pre = _window_mean(raw, mask, i - window, i, SHOCK_MIN_WINDOW_POINTS)
        post = _window_mean(raw, mask, i, i + window, SHOCK_MIN_WINDOW_POINTS)
        if pre is None or post is None:
            continue

        ratio = abs(post - pre) / max(pre, post, 1.0)
        if ratio > min_ratio and (best is None or ratio > best.score):
            best = ShockDescriptor(index=i, magnitude=post - pre, source="scan", score=ratio)

    return best


# ------------------------------------------------------------------------------
# Fixed-window fallback
# ------------------------------------------------------------------------------
def detect_pandemic_shock(values, dates) -> ShockDescriptor | None:
    """
    First month labelled in the early-2020 window, if enough data surrounds it.
    Magnitude compares the 3 months before against months +3..+5 after.
    """
    raw = np.asarray(values, dtype=float)
    parsed = parse_month_labels(dates)
    n = raw.size

    for i, ts in enumerate(parsed):
        if pd.isna(ts):
            continue
        if ts.year != PANDEMIC_YEAR or ts.month not in PANDEMIC_MONTHS:
            continue

        if i < PANDEMIC_MIN_SIDE_MONTHS or i + 6 >= n:
            return None

        pre = raw[i - 3:i].mean()
        post = raw[i + 3:i + 6].mean()
        score = abs(post - pre) / max(pre, post, 1.0)
        return ShockDescriptor(index=i, magnitude=float(post - pre), source="pandemic", score=float(score))

    return None


# ------------------------------------------------------------------------------
# Combined detector
# ------------------------------------------------------------------------------
def detect_shock(values, mask, dates) -> ShockDescriptor | None:
    shock = detect_scan_shock(values, mask)
    if shock is None:
        shock = detect_pandemic_shock(values, dates)

    if shock is not None:
        notify(
            f"[SHOCK] Candidate at t={shock.index} ({shock.source}, "
            f"Δ={shock.magnitude:.1f}, score={shock.score:.3f})"
        )
    return shock
