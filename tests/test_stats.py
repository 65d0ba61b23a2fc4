import numpy as np
import pytest

from Growth.contracts import StoreAnalysisResult, SummaryStats
from Growth.stats import assign_pareto_ranks, compute_summary_stats, z_chart


def test_year_over_year():
    values = np.r_[np.full(12, 100.0), np.full(12, 110.0)]
    s = compute_summary_stats(values, np.ones(24, dtype=bool))
    assert s.last_year_sales == 1320.0
    assert s.prev_year_sales == 1200.0
    assert s.yoy == pytest.approx(0.1)
    assert s.cagr == 0.0                   # needs three full years


def test_three_year_cagr():
    values = np.r_[np.full(12, 100.0), np.full(12, 110.0), np.full(12, 133.1)]
    s = compute_summary_stats(values, np.ones(36, dtype=bool))
    assert s.cagr == pytest.approx(0.1)
    assert s.total_sales == pytest.approx(12 * 343.1)


def test_constant_series_has_no_dispersion():
    s = compute_summary_stats(np.full(14, 50.0), np.ones(14, dtype=bool))
    assert s.cv == 0.0
    assert s.skewness == 0.0
    assert s.yoy == 0.0


def test_dispersion_uses_valid_months_only():
    values = np.array([10.0, 10.0, 10.0, 900.0])
    mask = np.array([True, True, True, False])
    s = compute_summary_stats(values, mask)
    assert s.cv == 0.0


def test_right_tail_gives_positive_skew():
    values = np.array([10.0, 10.0, 10.0, 10.0, 50.0])
    s = compute_summary_stats(values, np.ones(5, dtype=bool))
    assert s.skewness > 0
    assert s.cv > 0


def _ranked(name, last_year, error=False):
    return StoreAnalysisResult(
        name=name,
        values=np.ones(1),
        dates=("2024-01",),
        mask=np.ones(1, dtype=bool),
        is_active=True,
        tier="mature",
        summary=SummaryStats(
            total_sales=last_year, last_year_sales=last_year, prev_year_sales=0.0,
            yoy=0.0, cagr=0.0, cv=0.0, skewness=0.0,
        ),
        error=error,
    )


def test_pareto_ranks():
    results = [_ranked("small", 10.0), _ranked("big", 70.0), _ranked("mid", 20.0), _ranked("broken", 500.0, error=True)]
    ranks = assign_pareto_ranks(results)
    assert ranks == {"big": "A", "mid": "B", "small": "C"}


def test_z_chart_columns():
    chart = z_chart(np.ones(24))
    assert list(chart.columns) == ["monthly", "cumulative", "mat"]
    assert chart["cumulative"].iloc[-1] == 24.0
    assert chart["mat"].iloc[10] == 0.0
    assert chart["mat"].iloc[11] == 12.0
    assert chart["mat"].iloc[-1] == 12.0
