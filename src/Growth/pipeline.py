"""
pipeline.py

Batch orchestrator. Two phases separated by a barrier:

 1. Classify every store by valid-month count.
 2. Phase 1: fit all mature stores (no cross-store input).
 3. Reduce phase-1 results into an immutable GlobalStatistics record.
 4. Phase 2: fit growth and startup stores with that record.
 5. Rank stores (Pareto A/B/C) and assemble the BatchResult.

Stores inside a phase are independent; joblib runs them across N_JOBS
workers. No store begins phase-2 work before the global statistics exist.
"""

from dataclasses import replace

import numpy as np
import pandas as pd
from joblib import Parallel, delayed

from .analyzer import analyze_store, classify_tier
from .config import N_JOBS
from .contracts import BatchResult, StoreSeries
from .data_prep import series_max_date
from .global_stats import compute_global_statistics
from .mask import build_validity_mask
from .stats import assign_pareto_ranks
from .utils import notify


# ==============================================================================
# PHASE HELPERS
# ==============================================================================
def _run_phase(items, batch_max_date, global_stats, secondary_shocks, n_jobs):
    if not items:
        return []
    return Parallel(n_jobs=n_jobs)(
        delayed(analyze_store)(
            s.name,
            s.values,
            s.dates,
            batch_max_date,
            global_stats,
            secondary_shocks.get(s.name),
        )
        for s in items
    )


def split_by_tier(stores) -> tuple[list[StoreSeries], list[StoreSeries]]:
    """(mature, remaining) in input order."""
    mature, remaining = [], []
    for s in stores.values():
        valid_count = int(build_validity_mask(s.values).sum())
        if classify_tier(valid_count) == "mature":
            mature.append(s)
        else:
            remaining.append(s)
    return mature, remaining


# ==============================================================================
# MAIN BATCH
# ==============================================================================
def run_batch(
    stores: dict[str, StoreSeries],
    batch_max_date=None,
    secondary_shocks: dict[str, int] | None = None,
    n_jobs: int = N_JOBS,
) -> BatchResult:
    """
    stores           : name -> StoreSeries
    batch_max_date   : latest observation date; defaults to the latest label
    secondary_shocks : name -> externally known second break (dual_shift)
    """
    secondary_shocks = secondary_shocks or {}
    if batch_max_date is None:
        batch_max_date = series_max_date(stores)

    mature, remaining = split_by_tier(stores)
    notify(f"[BATCH] {len(stores)} stores: {len(mature)} mature, {len(remaining)} growth/startup.")

    # Phase 1
    notify("[BATCH] Phase 1: fitting mature stores...")
    phase1 = _run_phase(mature, batch_max_date, None, secondary_shocks, n_jobs)

    # Barrier
    global_stats = compute_global_statistics(phase1)

    # Phase 2
    notify("[BATCH] Phase 2: fitting growth and startup stores...")
    phase2 = _run_phase(remaining, batch_max_date, global_stats, secondary_shocks, n_jobs)

    results = phase1 + phase2
    ranks = assign_pareto_ranks(results)

    ranked = {}
    for r in results:
        if r.name in ranks:
            r = replace(r, summary=replace(r.summary, pareto_rank=ranks[r.name]))
        ranked[r.name] = r

    # keep caller's ordering
    ordered = {name: ranked[name] for name in stores if name in ranked}

    errors = sum(1 for r in ordered.values() if r.error)
    notify(f"[BATCH] Done: {len(ordered) - errors} fitted, {errors} error result(s).")
    return BatchResult(results=ordered, global_statistics=global_stats)


# ==============================================================================
# REPORTING FRAME
# ==============================================================================
def results_to_frame(batch: BatchResult) -> pd.DataFrame:
    """One row per store for reporting / export collaborators."""
    rows = []
    for r in batch.results.values():
        p = r.fit.params if r.fit is not None else None
        s = r.summary
        rows.append({
            "Store": r.name,
            "Tier": r.tier,
            "Active": r.is_active,
            "ValidMonths": int(np.sum(r.mask)),
            "Mode": r.fit.mode if r.fit is not None else None,
            "L": p.capacity if p is not None else np.nan,
            "k": p.growth_rate if p is not None else np.nan,
            "t0": p.t0 if p is not None else np.nan,
            "Base": r.effective_base if p is not None else np.nan,
            "ShockIndex": r.fit.shock_index if r.fit is not None else None,
            "AIC": r.fit.aic if r.fit is not None else np.nan,
            "Nudge": r.nudge,
            "NudgeDecay": r.nudge_decay,
            "ResidualStd": r.residual_std,
            "YoY": s.yoy if s is not None else np.nan,
            "CAGR3Y": s.cagr if s is not None else np.nan,
            "CV": s.cv if s is not None else np.nan,
            "Skewness": s.skewness if s is not None else np.nan,
            "ParetoRank": s.pareto_rank if s is not None else None,
            "Error": r.error,
            "Message": r.message,
        })
    return pd.DataFrame(rows)
