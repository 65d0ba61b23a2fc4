"""
analyzer.py

Per-store analysis. Classifies the store by valid-month count and dispatches:

    mature  (≥36 valid) → full model selection, dual shift allowed
    growth  (13–35)     → full model selection, global profile as seasonal prior
    startup (<13)       → startup model with k fixed from global statistics

An inactive store with fewer than 13 valid months (or any store without a
single valid month) yields an error result instead of a degenerate curve.

analyze_store() is a pure function of its inputs; the only cross-store input
is the read-only GlobalStatistics record.
"""

from typing import Optional

import numpy as np
import pandas as pd

from .config import (
    MATURE_MIN_MONTHS,
    GROWTH_MIN_MONTHS,
    ACTIVE_WINDOW_DAYS,
    K_MIN,
    K_MAX,
    DEFAULT_GROWTH_RATE,
    DEFAULT_CAPACITY,
    STARTUP_T0,
    BASE_POINTS,
)
from .contracts import GlobalStatistics, StoreAnalysisResult
from .curves import evaluate_series
from .mask import build_validity_mask
from .objective import FitContext
from .residuals import decompose, compute_nudge
from .seasonality import extract_seasonal_profile, flat_profile
from .selection import select_model, fit_startup
from .shocks import detect_shock
from .stats import compute_summary_stats
from .utils import clip_or_default, notify, month_numbers, parse_month_labels, read_only


# ------------------------------------------------------------------------------
# Classification helpers
# ------------------------------------------------------------------------------
def classify_tier(valid_count: int) -> str:
    if valid_count >= MATURE_MIN_MONTHS:
        return "mature"
    if valid_count >= GROWTH_MIN_MONTHS:
        return "growth"
    return "startup"


def is_store_active(dates, batch_max_date, window_days=ACTIVE_WINDOW_DAYS) -> bool:
    """
    Active if the last label is less than window_days older than batch_max_date.
    """
    if len(dates) == 0 or batch_max_date is None:
        return False
    last = parse_month_labels([dates[-1]])[0]
    if pd.isna(last):
        return False
    return (pd.Timestamp(batch_max_date) - last) < pd.Timedelta(days=window_days)


# ------------------------------------------------------------------------------
# Result builders
# ------------------------------------------------------------------------------
def _error_result(name, raw, dates, mask, is_active, tier, message) -> StoreAnalysisResult:
    notify(f"[FIT][ERROR] {name}: {message}")
    return StoreAnalysisResult(
        name=name,
        values=read_only(raw),
        dates=tuple(dates),
        mask=mask,
        is_active=is_active,
        tier=tier,
        summary=compute_summary_stats(raw, mask),
        error=True,
        message=message,
    )


def _finish(name, raw, dates, mask, is_active, tier, fit, shock, profile, months, candidates):
    trend = evaluate_series(fit.params, raw.size)
    comp = decompose(raw, trend, profile, months)
    nudge, decay = compute_nudge(comp.residual, tier)
    residual_std = float(np.sqrt(np.mean(comp.residual ** 2))) if raw.size else 0.0

    return StoreAnalysisResult(
        name=name,
        values=read_only(raw),
        dates=tuple(dates),
        mask=mask,
        is_active=is_active,
        tier=tier,
        fit=fit,
        shock=shock,
        seasonal_profile=tuple(float(v) for v in profile),
        decomposition=comp,
        nudge=nudge,
        nudge_decay=decay,
        residual_std=residual_std,
        candidate_aics=tuple(candidates),
        summary=compute_summary_stats(raw, mask),
    )


# ------------------------------------------------------------------------------
# Startup path
# ------------------------------------------------------------------------------
def _startup_base(raw, mask, months, profile) -> float:
    idx = np.flatnonzero(mask)[:BASE_POINTS]
    deseason = raw[idx] / np.where(profile[months[idx]] > 0, profile[months[idx]], 1.0)
    base = float(deseason.mean()) if idx.size else 0.0
    if base <= 0:
        base = float(raw[idx].mean()) if idx.size else 0.0
    return base


def _analyze_startup(name, raw, dates, mask, months, is_active, global_stats):
    if global_stats is not None:
        fixed_k = clip_or_default(global_stats.median_growth_rate, K_MIN, K_MAX, DEFAULT_GROWTH_RATE)
        capacity = global_stats.median_capacity
        profile = np.asarray(global_stats.median_seasonal_profile, dtype=float)
        if profile.size != 12:
            profile = flat_profile()
    else:
        fixed_k, capacity, profile = DEFAULT_GROWTH_RATE, DEFAULT_CAPACITY, flat_profile()

    valid = raw[mask]
    ctx = FitContext(
        max_val=float(valid.max()),
        base=_startup_base(raw, mask, months, profile),
        variance=float(valid.var()),
        fixed_k=fixed_k,
    )
    fit = fit_startup(raw, mask, ctx, capacity_seed=capacity, t0_seed=STARTUP_T0)
    return _finish(name, raw, dates, mask, is_active, "startup", fit, None, profile, months, ())


# ------------------------------------------------------------------------------
# Growth / mature path
# ------------------------------------------------------------------------------
def _analyze_selected(name, raw, dates, mask, months, is_active, tier, global_stats, secondary_shock_index):
    valid = raw[mask]
    first = valid[:BASE_POINTS]
    ctx = FitContext(
        max_val=float(valid.max()),
        base=float(first.mean()),
        variance=float(valid.var()),
    )

    shock = detect_shock(raw, mask, dates)
    selection = select_model(
        raw,
        mask,
        ctx,
        shock=shock,
        secondary_shock_index=secondary_shock_index,
        allow_dual=(tier == "mature"),
    )
    fit = selection.fit
    notify(f"[FIT] {name}: tier={tier} mode={fit.mode} AIC={fit.aic:.2f}")

    fallback = None
    if tier == "growth" and global_stats is not None:
        fallback = np.asarray(global_stats.median_seasonal_profile, dtype=float)

    trend = evaluate_series(fit.params, raw.size)
    profile = extract_seasonal_profile(raw, mask, trend, months, fallback=fallback)

    used_shock = shock if fit.shock_index is not None else None
    return _finish(name, raw, dates, mask, is_active, tier, fit, used_shock, profile, months, selection.candidate_aics)


# ------------------------------------------------------------------------------
# Public entry point
# ------------------------------------------------------------------------------
def analyze_store(
    name: str,
    values,
    dates,
    batch_max_date,
    global_stats: Optional[GlobalStatistics] = None,
    secondary_shock_index: Optional[int] = None,
) -> StoreAnalysisResult:
    """
    Fit one store.

    values                : calendar-aligned, non-negative monthly observations
                            (0 = no data / closed)
    dates                 : month labels parallel to values
    batch_max_date        : latest observation date across the batch
    global_stats          : statistics from mature stores (growth/startup only)
    secondary_shock_index : externally supplied second break for dual_shift
    """
    raw = np.asarray(values, dtype=float)
    dates = [str(d) for d in dates]
    if raw.size != len(dates):
        raise ValueError(f"{name}: {raw.size} values but {len(dates)} month labels.")
    if np.any(raw < 0) or not np.all(np.isfinite(raw)):
        raise ValueError(f"{name}: observations must be finite and non-negative.")

    months = month_numbers(dates)
    is_active = is_store_active(dates, batch_max_date)
    mask = build_validity_mask(raw)
    valid_count = int(mask.sum())
    tier = classify_tier(valid_count)

    if valid_count == 0:
        return _error_result(name, raw, dates, mask, is_active, tier, "No valid data")

    if tier == "startup":
        if not is_active:
            return _error_result(name, raw, dates, mask, is_active, tier, "Insufficient data")
        return _analyze_startup(name, raw, dates, mask, months, is_active, global_stats)

    return _analyze_selected(name, raw, dates, mask, months, is_active, tier, global_stats, secondary_shock_index)
