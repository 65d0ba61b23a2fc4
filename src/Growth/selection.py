"""
selection.py

Candidate model fitting and AIC-based selection:

    standard ──(shock candidate)──▶ shift ──(secondary index)──▶ dual_shift

A more complex model replaces the current best only when its AIC is lower by
more than `margin`; ties and near-ties keep the simpler model.

AIC = n·ln(SSE/n) + 2·p, with SSE the pure (unregularised) error and
p = 3 (standard), 4 (shift), 5 (dual_shift), 2 (startup).
"""

from dataclasses import dataclass, replace
from typing import Optional, Tuple

import numpy as np

from .config import (
    AIC_MARGIN,
    SHIFT_MIN_MARGIN,
    INIT_GROWTH_RATE,
    INIT_CAPACITY_FLOOR,
    INIT_CAPACITY_SHARE,
    STEP_SEED_CAPACITY_SHARE,
    SHOCK_WINDOW,
)
from .contracts import ModelFit, ShockDescriptor
from .objective import FitContext, objective, masked_residuals, params_from_vector
from .optimizer import minimize_simplex
from .utils import notify

PARAM_COUNTS = {"standard": 3, "shift": 4, "dual_shift": 5, "startup": 2}

_SSE_FLOOR = 1e-12


@dataclass(frozen=True)
class SelectionResult:
    fit: ModelFit
    candidate_aics: Tuple[Tuple[str, float], ...]


def compute_aic(sse: float, n: int, param_count: int) -> float:
    if n <= 0 or not np.isfinite(sse):
        return float("inf")
    return n * np.log(max(sse, _SSE_FLOOR) / n) + 2 * param_count


def fit_mode(mode, values, mask, ctx: FitContext, seeds) -> ModelFit:
    """
    Run the simplex from every seed and keep the lowest penalised cost.
    """
    values = np.asarray(values, dtype=float)
    args = (mode, values, mask, ctx)

    best = None
    for seed in seeds:
        res = minimize_simplex(objective, seed, args=args, residuals=masked_residuals)
        if best is None or res.fun < best.fun:
            best = res

    return ModelFit(
        params=params_from_vector(mode, best.x, ctx),
        aic=float(compute_aic(best.sse, best.n_points, PARAM_COUNTS[mode])),
        sse=best.sse,
        n_points=best.n_points,
    )


def _has_margin(index, n, margin=SHIFT_MIN_MARGIN) -> bool:
    return index is not None and index >= margin and n - index >= margin


def _step_guess(values, mask, index, window=SHOCK_WINDOW) -> float:
    raw = np.asarray(values, dtype=float)
    m = np.asarray(mask, dtype=bool)
    pre = raw[max(0, index - window):index][m[max(0, index - window):index]]
    post = raw[index:index + window][m[index:index + window]]
    if pre.size == 0 or post.size == 0:
        return 0.0
    return float(post.mean() - pre.mean())


def select_model(
    values,
    mask,
    ctx: FitContext,
    shock: Optional[ShockDescriptor] = None,
    secondary_shock_index: Optional[int] = None,
    allow_dual: bool = True,
    margin: float = AIC_MARGIN,
) -> SelectionResult:
    values = np.asarray(values, dtype=float)
    n = values.size
    candidates = {}

    # 1. Standard
    growth_l = max(INIT_CAPACITY_FLOOR, ctx.max_val * INIT_CAPACITY_SHARE)
    std = fit_mode("standard", values, mask, ctx, [[growth_l, INIT_GROWTH_RATE, n / 2.0]])
    candidates["standard"] = std.aic
    best = std

    # 2. Single shift
    if shock is None or not _has_margin(shock.index, n):
        return SelectionResult(fit=best, candidate_aics=tuple(candidates.items()))

    shift_ctx = replace(ctx, shock_index=shock.index)
    p = std.params
    seeds = [
        [p.capacity, p.growth_rate, p.t0, shock.magnitude],
        [ctx.max_val * STEP_SEED_CAPACITY_SHARE, INIT_GROWTH_RATE, n / 2.0, shock.magnitude],
    ]
    shift = fit_mode("shift", values, mask, shift_ctx, seeds)
    candidates["shift"] = shift.aic
    if shift.aic < best.aic - margin:
        best = shift
    else:
        return SelectionResult(fit=best, candidate_aics=tuple(candidates.items()))

    # 3. Dual shift, only from an accepted shift with an external second index
    if (
        not allow_dual
        or secondary_shock_index is None
        or secondary_shock_index == shock.index
        or not _has_margin(secondary_shock_index, n)
    ):
        return SelectionResult(fit=best, candidate_aics=tuple(candidates.items()))

    dual_ctx = replace(shift_ctx, shock_index2=int(secondary_shock_index))
    p = shift.params
    guess2 = _step_guess(values, mask, int(secondary_shock_index))
    seeds = [
        [p.capacity, p.growth_rate, p.t0, p.shift, guess2],
        [ctx.max_val * STEP_SEED_CAPACITY_SHARE, INIT_GROWTH_RATE, n / 2.0, p.shift, guess2],
    ]
    dual = fit_mode("dual_shift", values, mask, dual_ctx, seeds)
    candidates["dual_shift"] = dual.aic
    if dual.aic < best.aic - margin:
        best = dual

    return SelectionResult(fit=best, candidate_aics=tuple(candidates.items()))


def fit_startup(values, mask, ctx: FitContext, capacity_seed: float, t0_seed: float) -> ModelFit:
    """
    Startup model: k fixed at ctx.fixed_k, only L and t0 are searched.
    """
    if ctx.fixed_k is None:
        raise ValueError("Startup fitting requires a fixed growth rate.")
    fit = fit_mode("startup", values, mask, ctx, [[capacity_seed, t0_seed]])
    notify(f"[FIT] Startup fit: k={ctx.fixed_k:.4f} L={fit.params.capacity:.1f} t0={fit.params.t0:.1f}")
    return fit
