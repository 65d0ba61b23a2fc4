"""
mask.py

Validity mask for a raw monthly series:

    1. Global IQR filter over strictly positive values.
    2. Rescue pass over the most recent months: a value close to the trailing
       moving average of already-valid months is kept even if the IQR test
       rejected it (global bounds are too strict for a trending series).

The mask is rebuilt from scratch whenever the series changes.
"""

import numpy as np

from .config import (
    IQR_MULTIPLIER,
    RESCUE_LOOKBACK_MONTHS,
    RESCUE_MA_WINDOW,
    RESCUE_MIN_POINTS,
    RESCUE_TOLERANCE,
)
from .utils import read_only


def iqr_bounds(values, multiplier=IQR_MULTIPLIER) -> tuple[float, float]:
    """
    (lower, upper) IQR bounds over strictly positive values.
    Quartiles are the order statistics at floor(0.25 n) and floor(0.75 n).
    """
    pos = np.sort(np.asarray(values, dtype=float))
    pos = pos[pos > 0]
    if pos.size == 0:
        return -np.inf, np.inf

    q1 = pos[int(np.floor(pos.size * 0.25))]
    q3 = pos[int(np.floor(pos.size * 0.75))]
    iqr = q3 - q1
    return q1 - multiplier * iqr, q3 + multiplier * iqr


def build_validity_mask(
    values,
    lookback=RESCUE_LOOKBACK_MONTHS,
    window=RESCUE_MA_WINDOW,
    min_points=RESCUE_MIN_POINTS,
    tolerance=RESCUE_TOLERANCE,
) -> np.ndarray:
    """
    True marks a month usable as a fitting point.
    """
    raw = np.asarray(values, dtype=float)
    lower, upper = iqr_bounds(raw)
    mask = (raw > 0) & (raw >= lower) & (raw <= upper)

    n = raw.size
    for i in range(max(0, n - lookback), n):
        if mask[i] or raw[i] <= 0:
            continue

        # trailing window ending at i, valid months only (earlier rescues count)
        lo = max(0, i - window + 1)
        win = raw[lo:i + 1][mask[lo:i + 1]]
        if win.size < min_points:
            continue

        ma = win.mean()
        if ma * (1.0 - tolerance) <= raw[i] <= ma * (1.0 + tolerance):
            mask[i] = True

    return read_only(mask)
