"""
stats.py

Descriptive analytics attached to every store result:

    - compute_summary_stats()  → totals, YoY, 3-year CAGR, CV, skewness
    - assign_pareto_ranks()    → A/B/C by last-year sales across the batch
    - z_chart()                → monthly / cumulative / moving annual total
"""

import numpy as np
import pandas as pd

from .config import PARETO_A_SHARE, PARETO_B_SHARE
from .contracts import SummaryStats
from .utils import safe_div


def compute_summary_stats(values, mask) -> SummaryStats:
    raw = np.asarray(values, dtype=float)
    valid = raw[np.asarray(mask, dtype=bool)]
    n = raw.size

    last12 = float(raw[-12:].sum())
    prev12 = float(raw[-24:-12].sum()) if n >= 24 else 0.0
    yoy = safe_div(last12 - prev12, prev12) if prev12 > 0 else 0.0

    cagr = 0.0
    if n >= 36:
        start = float(raw[-36:-24].sum())
        if start > 0 and last12 > 0:
            cagr = (last12 / start) ** (1.0 / 3.0) - 1.0

    cv = skewness = 0.0
    if valid.size:
        mean = valid.mean()
        std = valid.std()
        cv = safe_div(std, mean) if mean > 0 else 0.0
        skewness = float(np.mean(((valid - mean) / std) ** 3)) if std > 0 else 0.0

    return SummaryStats(
        total_sales=float(raw.sum()),
        last_year_sales=last12,
        prev_year_sales=prev12,
        yoy=float(yoy),
        cagr=float(cagr),
        cv=float(cv),
        skewness=skewness,
    )


def assign_pareto_ranks(results) -> dict:
    """
    Store name -> "A" | "B" | "C". Cumulative share of last-year sales,
    largest first: ≤70% A, ≤90% B, rest C. Error results are not ranked.
    """
    ranked = [r for r in results if not r.error and r.summary is not None]
    ranked.sort(key=lambda r: r.summary.last_year_sales, reverse=True)
    total = sum(r.summary.last_year_sales for r in ranked)

    ranks = {}
    cum = 0.0
    for r in ranked:
        cum += r.summary.last_year_sales
        share = safe_div(cum, total, default=1.0)
        if share <= PARETO_A_SHARE:
            ranks[r.name] = "A"
        elif share <= PARETO_B_SHARE:
            ranks[r.name] = "B"
        else:
            ranks[r.name] = "C"
    return ranks


def z_chart(values) -> pd.DataFrame:
    s = pd.Series(np.asarray(values, dtype=float))
    return pd.DataFrame({
        "monthly": s,
        "cumulative": s.cumsum(),
        "mat": s.rolling(12, min_periods=12).sum().fillna(0.0),
    })
