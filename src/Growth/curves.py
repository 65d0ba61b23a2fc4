"""
curves.py

Logistic growth curve family:

    value(t) = base(t) + L / (1 + exp(-k (t - t0)))

where base(t) is constant (standard, startup), steps once at the shock index
(shift) or steps at two shock indices (dual_shift). Pure functions of the
parameter record and the month index t.
"""

import numpy as np
from scipy.special import expit

from .contracts import StandardParams, ShiftParams, DualShiftParams, StartupParams


def base_at(params, t):
    """Base level at month index t (scalar or array)."""
    t = np.asarray(t, dtype=float)

    if isinstance(params, (StandardParams, StartupParams)):
        return np.full_like(t, params.base, dtype=float)
    if isinstance(params, ShiftParams):
        return params.base + np.where(t >= params.shock_index, params.shift, 0.0)
    if isinstance(params, DualShiftParams):
        return (
            params.base
            + np.where(t >= params.shock_index, params.shift, 0.0)
            + np.where(t >= params.shock_index2, params.shift2, 0.0)
        )
    raise TypeError(f"Unknown parameter record: {type(params).__name__}")


def evaluate(params, t):
    """
    Expected value at month index t. Returns a float for scalar t and an
    array otherwise.
    """
    scalar = np.ndim(t) == 0
    tt = np.asarray(t, dtype=float)

    base = base_at(params, tt)
    out = base + params.capacity * expit(params.growth_rate * (tt - params.t0))
    return float(out) if scalar else out


def evaluate_series(params, n: int) -> np.ndarray:
    """Curve over month indices 0..n-1."""
    return evaluate(params, np.arange(n))
