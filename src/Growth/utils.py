"""
utils.py

Shared utilities for the growth-curve engine:
    - notify()            → logging / stdout messages
    - safe_div()          → safe division helper
    - clip_or_default()   → numeric clipping helper
    - parse_month_labels() / month_numbers() → calendar handling for labels
"""

import numpy as np
import pandas as pd


# ==============================================================================
# LOGGING / MESSAGING
# ==============================================================================
def notify(msg: str):
    print(msg, flush=True)


# ==============================================================================
# SAFE NUMERIC HELPERS
# ==============================================================================
def safe_div(a, b, default=0.0):
    if b is None or b == 0 or not np.isfinite(b):
        return default
    return a / b


def clip_or_default(val, minv=0.0, maxv=None, default=1.0):
    if val is None or not np.isfinite(val):
        return default
    if maxv is None:
        return max(minv, float(val))
    return float(np.clip(val, minv, maxv))


def read_only(arr) -> np.ndarray:
    """Return a read-only copy of arr."""
    out = np.array(arr, copy=True)
    out.setflags(write=False)
    return out


# ==============================================================================
# MONTH LABELS
# ==============================================================================
def parse_month_labels(dates) -> pd.DatetimeIndex:
    """
    Parse month labels ("2020-03", "2020/03", "2020-03-01", Timestamps).
    Unparseable labels become NaT.
    """
    s = pd.Series(list(dates), dtype="object").astype(str).str.strip()
    s = s.str.replace("/", "-", regex=False).str.replace(".", "-", regex=False)
    return pd.DatetimeIndex(pd.to_datetime(s, format="mixed", errors="coerce"))


def month_numbers(dates) -> np.ndarray:
    """
    0-based calendar month (Jan=0) for each label; unparseable labels map to 0.
    """
    parsed = parse_month_labels(dates)
    months = np.asarray(parsed.month, dtype=float)
    months = np.where(np.isnan(months), 1.0, months)
    return months.astype(int) - 1
