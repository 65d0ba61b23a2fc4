"""
residuals.py

Trend × seasonal decomposition and the forecast-continuity nudge.

The nudge is an additive offset the forecasting consumer adds to the trend
(before seasonal multiplication) for the first future month, decaying by
nudge_decay per month after that. This module only computes the two numbers.
"""

import numpy as np

from .config import (
    NUDGE_SHORT_WINDOW,
    NUDGE_LONG_WINDOW,
    NUDGE_DECAY_STARTUP,
    NUDGE_DECAY_DEFAULT,
    NUDGE_DECAY_MAX,
)
from .contracts import Decomposition
from .utils import read_only, safe_div


def decompose(values, trend, profile, months) -> Decomposition:
    raw = np.asarray(values, dtype=float)
    trend = np.asarray(trend, dtype=float)
    seasonal = np.asarray(profile, dtype=float)[np.asarray(months, dtype=int)]
    residual = raw - trend * seasonal
    return Decomposition(trend=read_only(trend), seasonal=read_only(seasonal), residual=read_only(residual))


def lag1_autocorrelation(x) -> float:
    x = np.asarray(x, dtype=float)
    if x.size < 2:
        return 0.0
    d = x - x.mean()
    return float(safe_div(np.sum(d[:-1] * d[1:]), np.sum(d * d)))


def compute_nudge(residuals, tier: str) -> tuple[float, float]:
    """
    Returns (nudge, nudge_decay).

        < 12 residuals : mean of the last up-to-3, tier-dependent fixed decay
        otherwise      : median of the last 12, decay = lag-1 autocorrelation
                         of those 12 clamped to [0, 0.9]
    """
    r = np.asarray(residuals, dtype=float)
    if r.size == 0:
        return 0.0, 0.0

    if r.size < NUDGE_LONG_WINDOW:
        nudge = float(np.mean(r[-NUDGE_SHORT_WINDOW:]))
        decay = NUDGE_DECAY_STARTUP if tier == "startup" else NUDGE_DECAY_DEFAULT
        return nudge, decay

    recent = r[-NUDGE_LONG_WINDOW:]
    decay = float(np.clip(lag1_autocorrelation(recent), 0.0, NUDGE_DECAY_MAX))
    return float(np.median(recent)), decay
