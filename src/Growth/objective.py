"""
objective.py

Regularised fitting cost for the growth-curve family.

    cost = MSE(valid months) / variance
         + rare-capacity penalty
         + capacity / growth-rate / shift regularisation

Hard physical constraints return SENTINEL_COST so the simplex walks away
from the candidate instead of raising.

Parameter vector layouts:
    standard   : [L, k, t0]
    shift      : [L, k, t0, shift]
    dual_shift : [L, k, t0, shift, shift2]
    startup    : [L, t0]              (k fixed by FitContext.fixed_k)
"""

from dataclasses import dataclass
from typing import Optional

import numpy as np

from .config import (
    K_MIN,
    K_MAX,
    ABSOLUTE_MAX_CAPACITY,
    RARE_CAPACITY_THRESHOLD,
    RARE_CAPACITY_PENALTY,
    SENTINEL_COST,
    VARIANCE_MIN,
    VARIANCE_FALLBACK_SHARE,
    CAPACITY_RATIO_LIMIT,
    CAPACITY_PENALTY,
    GROWTH_RATE_PENALTY,
    SHIFT_PENALTY,
)
from .contracts import StandardParams, ShiftParams, DualShiftParams, StartupParams
from .curves import evaluate


@dataclass(frozen=True)
class FitContext:
    """
    Series-level quantities held fixed during a fit.

    max_val       : largest valid observation (scale for penalties)
    base          : base level, computed from early data, never fitted
    variance      : variance of valid observations
    shock_index   : first step index (shift, dual_shift)
    shock_index2  : second step index (dual_shift)
    fixed_k       : growth rate for the startup model
    """

    max_val: float
    base: float
    variance: float
    shock_index: Optional[int] = None
    shock_index2: Optional[int] = None
    fixed_k: Optional[float] = None


def params_from_vector(mode: str, x, ctx: FitContext):
    x = [float(v) for v in x]

    if mode == "standard":
        return StandardParams(base=ctx.base, capacity=x[0], growth_rate=x[1], t0=x[2])
    if mode == "shift":
        return ShiftParams(
            base=ctx.base, capacity=x[0], growth_rate=x[1], t0=x[2],
            shift=x[3], shock_index=ctx.shock_index,
        )
    if mode == "dual_shift":
        return DualShiftParams(
            base=ctx.base, capacity=x[0], growth_rate=x[1], t0=x[2],
            shift=x[3], shock_index=ctx.shock_index,
            shift2=x[4], shock_index2=ctx.shock_index2,
        )
    if mode == "startup":
        return StartupParams(base=ctx.base, capacity=x[0], growth_rate=ctx.fixed_k, t0=x[1])
    raise ValueError(f"Unknown model mode: {mode}")


def effective_variance(ctx: FitContext) -> float:
    if ctx.variance > VARIANCE_MIN:
        return float(ctx.variance)
    return max(ctx.max_val * ctx.max_val * VARIANCE_FALLBACK_SHARE, 1.0)


def masked_residuals(x, mode, values, mask, ctx) -> np.ndarray:
    """Unregularised residuals (actual − curve) over valid months."""
    params = params_from_vector(mode, x, ctx)
    t = np.flatnonzero(mask)
    return np.asarray(values, dtype=float)[t] - evaluate(params, t)


def objective(x, mode, values, mask, ctx) -> float:
    params = params_from_vector(mode, x, ctx)

    # 1. Hard constraints
    k = params.growth_rate
    if mode != "startup" and (k < K_MIN or k > K_MAX):
        return SENTINEL_COST

    total_potential = params.base + params.capacity
    if total_potential > ABSOLUTE_MAX_CAPACITY:
        return SENTINEL_COST

    penalty = 0.0
    if total_potential > RARE_CAPACITY_THRESHOLD:
        penalty += (total_potential - RARE_CAPACITY_THRESHOLD) ** 2 * RARE_CAPACITY_PENALTY

    # 2. Normalised MSE over valid months
    t = np.flatnonzero(mask)
    if t.size == 0:
        return SENTINEL_COST
    resid = np.asarray(values, dtype=float)[t] - evaluate(params, t)
    mse = float(np.mean(resid * resid))
    normalized_error = mse / effective_variance(ctx)

    # 3. Occam's razor
    current_max = ctx.max_val if ctx.max_val > 0 else 1.0
    l_ratio = total_potential / current_max
    reg_l = CAPACITY_PENALTY * (l_ratio - CAPACITY_RATIO_LIMIT) ** 2 if l_ratio > CAPACITY_RATIO_LIMIT else 0.0
    reg_k = GROWTH_RATE_PENALTY * k * k

    reg_shift = 0.0
    for step in (getattr(params, "shift", 0.0), getattr(params, "shift2", 0.0)):
        reg_shift += SHIFT_PENALTY * (step / current_max) ** 2

    cost = normalized_error + penalty + reg_l + reg_k + reg_shift
    if not np.isfinite(cost):
        return SENTINEL_COST
    return cost
