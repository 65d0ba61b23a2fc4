"""
optimizer.py

Derivative-free minimisation (Nelder-Mead simplex) for arbitrary scalar
objectives. Model-agnostic: nothing here knows about growth curves.

The simplex is built explicitly (one vertex per parameter, each coordinate
perturbed by SIMPLEX_STEP, zero seeds by SIMPLEX_ZERO_STEP) and handed to
SciPy. The search stops once the best-to-worst cost gap falls below `tol` or
after `max_iter` iterations, then restarts from a fresh simplex around the
best vertex while that keeps improving the cost.
"""

from dataclasses import dataclass
from typing import Callable, Optional

import numpy as np
from scipy.optimize import minimize

from .config import (
    SIMPLEX_STEP,
    SIMPLEX_ZERO_STEP,
    SIMPLEX_MAX_ITER,
    SIMPLEX_TOL,
    SIMPLEX_RESTARTS,
)


@dataclass(frozen=True)
class SimplexResult:
    """
    x        : best parameter vector
    fun      : objective value at x (penalties included)
    n_iter   : simplex iterations across all restarts
    sse      : pure sum of squared residuals at x (nan without a residual fn)
    n_points : number of residuals behind sse
    """

    x: np.ndarray
    fun: float
    n_iter: int
    sse: float
    n_points: int


def initial_simplex(x0, step=SIMPLEX_STEP, zero_step=SIMPLEX_ZERO_STEP) -> np.ndarray:
    x0 = np.asarray(x0, dtype=float)
    dim = x0.size
    simplex = np.tile(x0, (dim + 1, 1))
    for i in range(dim):
        simplex[i + 1, i] = zero_step if x0[i] == 0 else x0[i] * (1.0 + step)
    return simplex


def minimize_simplex(
    objective: Callable,
    x0,
    args=(),
    residuals: Optional[Callable] = None,
    max_iter=SIMPLEX_MAX_ITER,
    tol=SIMPLEX_TOL,
    restarts=SIMPLEX_RESTARTS,
) -> SimplexResult:
    """
    Minimise objective(x, *args) from x0.

    residuals(x, *args), when given, returns the unregularised residual
    vector; its sum of squares and length are reported so callers can score
    the fit without the penalties baked into the objective.
    """
    x = np.asarray(x0, dtype=float)
    best_x, best_fun, total_iter = x, float(objective(x, *args)), 0

    for _ in range(restarts + 1):
        res = minimize(
            objective,
            best_x,
            args=args,
            method="Nelder-Mead",
            options={
                "initial_simplex": initial_simplex(best_x),
                "maxiter": max_iter,
                "fatol": tol,
                "xatol": np.inf,  # terminate on the cost gap only
            },
        )
        total_iter += int(res.nit)

        improvement = best_fun - float(res.fun)
        if improvement > 0:
            best_x, best_fun = np.asarray(res.x, dtype=float), float(res.fun)
        if improvement <= tol:
            break

    if residuals is not None:
        r = np.asarray(residuals(best_x, *args), dtype=float)
        sse, n_points = float(np.sum(r * r)), int(r.size)
    else:
        sse, n_points = float("nan"), 0

    return SimplexResult(x=best_x, fun=best_fun, n_iter=total_iter, sse=sse, n_points=n_points)
