"""
data_prep.py

Long-format observations → calendar-aligned monthly series per store.

Input columns (defaults):
    Date, Tienda, Cantidad

Every store's series runs from its first to its last observed month with
missing months filled with 0, which the mask builder treats as "no data".
"""

import pandas as pd

from .contracts import StoreSeries
from .utils import notify, parse_month_labels


def _normalize_frame(df, store_col, date_col, value_col) -> pd.DataFrame:
    required = [store_col, date_col, value_col]
    missing = [c for c in required if c not in df.columns]
    if missing:
        raise ValueError(f"Input frame missing required columns: {missing}. Found: {list(df.columns)}")

    df = df[required].copy()
    df[date_col] = pd.to_datetime(df[date_col], format="mixed", errors="coerce")
    df = df.dropna(subset=[date_col])
    df[value_col] = pd.to_numeric(df[value_col], errors="coerce").fillna(0.0).clip(lower=0.0)
    return df


def build_store_series(
    df: pd.DataFrame,
    store_col: str = "Tienda",
    date_col: str = "Date",
    value_col: str = "Cantidad",
) -> dict[str, StoreSeries]:
    notify("[PREP] Building monthly store series...")

    df = _normalize_frame(df, store_col, date_col, value_col)
    if df.empty:
        notify("[PREP][WARN] No parseable rows.")
        return {}

    df["Month"] = df[date_col].dt.to_period("M")
    monthly = df.groupby([store_col, "Month"])[value_col].sum()

    out = {}
    for store, grp in monthly.groupby(level=0):
        s = grp.droplevel(0)
        full = pd.period_range(s.index.min(), s.index.max(), freq="M")
        s = s.reindex(full, fill_value=0.0)
        name = str(store)
        out[name] = StoreSeries(
            name=name,
            values=s.to_numpy(dtype=float),
            dates=tuple(p.strftime("%Y-%m") for p in full),
        )

    notify(f"[PREP] {len(out)} store series built.")
    return out


def batch_max_date(df: pd.DataFrame, date_col: str = "Date") -> pd.Timestamp:
    """Month start of the latest parseable observation."""
    dates = pd.to_datetime(df[date_col], format="mixed", errors="coerce").dropna()
    if dates.empty:
        raise ValueError("No parseable dates in input frame.")
    return dates.max().to_period("M").to_timestamp()


def series_max_date(stores) -> pd.Timestamp | None:
    """Latest month label across already-built store series."""
    last = [parse_month_labels([s.dates[-1]])[0] for s in stores.values() if len(s.dates)]
    last = [d for d in last if not pd.isna(d)]
    return max(last) if last else None
