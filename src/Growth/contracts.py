"""
contracts.py

Typed records passed between the fitting stages. All records are frozen;
arrays held by them are read-only copies.

Parameter records (one per model variant):

    StandardParams   – base, capacity (L), growth_rate (k), t0
    ShiftParams      – + shift applied from shock_index onward
    DualShiftParams  – + shift2 applied from shock_index2 onward
    StartupParams    – same curve as standard, k fixed from global statistics

Pipeline records:

    ShockDescriptor, ModelFit, GlobalStatistics, Decomposition,
    SummaryStats, StoreAnalysisResult, StoreSeries, BatchResult
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Dict, Optional, Tuple, Union

import numpy as np


# ---------------------------------------------------------------------------
# Model parameter records
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class StandardParams:
    mode: ClassVar[str] = "standard"

    base: float
    capacity: float
    growth_rate: float
    t0: float


@dataclass(frozen=True)
class ShiftParams:
    mode: ClassVar[str] = "shift"

    base: float
    capacity: float
    growth_rate: float
    t0: float
    shift: float
    shock_index: int


@dataclass(frozen=True)
class DualShiftParams:
    mode: ClassVar[str] = "dual_shift"

    base: float
    capacity: float
    growth_rate: float
    t0: float
    shift: float
    shock_index: int
    shift2: float
    shock_index2: int


@dataclass(frozen=True)
class StartupParams:
    mode: ClassVar[str] = "startup"

    base: float
    capacity: float
    growth_rate: float
    t0: float


ModelParams = Union[StandardParams, ShiftParams, DualShiftParams, StartupParams]


# ---------------------------------------------------------------------------
# Fitting records
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ShockDescriptor:
    """
    Candidate structural break.

    index     : month index where the new base level starts
    magnitude : estimated post − pre level change
    source    : "scan" (sliding pre/post divergence) or "pandemic" (fixed window)
    score     : relative divergence |post − pre| / max(pre, post, 1)
    """

    index: int
    magnitude: float
    source: str = "scan"
    score: float = 0.0


@dataclass(frozen=True)
class ModelFit:
    params: ModelParams
    aic: float
    sse: float
    n_points: int

    @property
    def mode(self) -> str:
        return self.params.mode

    @property
    def shock_index(self) -> Optional[int]:
        return getattr(self.params, "shock_index", None)


@dataclass(frozen=True)
class GlobalStatistics:
    median_growth_rate: float
    median_capacity: float
    median_seasonal_profile: Tuple[float, ...]


@dataclass(frozen=True)
class Decomposition:
    trend: np.ndarray
    seasonal: np.ndarray
    residual: np.ndarray


@dataclass(frozen=True)
class SummaryStats:
    total_sales: float
    last_year_sales: float
    prev_year_sales: float
    yoy: float
    cagr: float
    cv: float
    skewness: float
    pareto_rank: Optional[str] = None


@dataclass(frozen=True)
class StoreAnalysisResult:
    name: str
    values: np.ndarray
    dates: Tuple[str, ...]
    mask: np.ndarray
    is_active: bool
    tier: str
    fit: Optional[ModelFit] = None
    shock: Optional[ShockDescriptor] = None
    seasonal_profile: Tuple[float, ...] = ()
    decomposition: Optional[Decomposition] = None
    nudge: float = 0.0
    nudge_decay: float = 0.0
    residual_std: float = 0.0
    candidate_aics: Tuple[Tuple[str, float], ...] = ()
    summary: Optional[SummaryStats] = None
    error: bool = False
    message: str = ""

    @property
    def effective_base(self) -> float:
        """Base level after every shift has taken effect."""
        if self.fit is None:
            return 0.0
        p = self.fit.params
        return p.base + getattr(p, "shift", 0.0) + getattr(p, "shift2", 0.0)


# ---------------------------------------------------------------------------
# Batch records
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class StoreSeries:
    name: str
    values: np.ndarray
    dates: Tuple[str, ...]


@dataclass(frozen=True)
class BatchResult:
    results: Dict[str, StoreAnalysisResult]
    global_statistics: GlobalStatistics
