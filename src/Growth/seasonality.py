"""
seasonality.py

Multiplicative month-of-year profile extracted from a fitted trend:

    ratio(t) = actual(t) / trend(t)     (valid months, trend > 1)
    index(m) = median ratio over months with calendar month m
    profile  = index / mean(index)      (mean exactly 1.0)

Empty buckets fall back to a prior (the global profile for growth stores) or
to 1.0. Startup stores never call this; they borrow the global profile.
"""

import numpy as np

from .utils import notify

N_MONTHS = 12


def flat_profile() -> np.ndarray:
    return np.ones(N_MONTHS, dtype=float)


def normalize_profile(profile) -> np.ndarray:
    profile = np.asarray(profile, dtype=float)
    avg = profile.mean() if profile.size else 0.0
    if not np.isfinite(avg) or avg <= 0:
        return flat_profile()
    return profile / avg


def extract_seasonal_profile(values, mask, trend, months, fallback=None) -> np.ndarray:
    raw = np.asarray(values, dtype=float)
    mask = np.asarray(mask, dtype=bool)
    trend = np.asarray(trend, dtype=float)
    months = np.asarray(months, dtype=int)

    usable = mask & (trend > 1.0)
    ratios = np.zeros_like(raw)
    ratios[usable] = raw[usable] / trend[usable]

    profile = np.empty(N_MONTHS, dtype=float)
    empty = 0
    for m in range(N_MONTHS):
        bucket = ratios[usable & (months == m)]
        if bucket.size:
            profile[m] = np.median(bucket)
        else:
            profile[m] = fallback[m] if fallback is not None else 1.0
            empty += 1

    if empty:
        source = "global prior" if fallback is not None else "1.0"
        notify(f"[SZN] {empty} empty month bucket(s) filled from {source}.")

    return normalize_profile(profile)
