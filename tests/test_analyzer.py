import numpy as np
import pandas as pd
import pytest

from Growth.analyzer import analyze_store, classify_tier, is_store_active
from Growth.contracts import GlobalStatistics

STARTUP_VALUES = [500.0, 600.0, 650.0, 700.0, 720.0, 760.0]
STARTUP_DATES = ["2024-05", "2024-06", "2024-07", "2024-08", "2024-09", "2024-10"]


@pytest.fixture
def global_stats():
    return GlobalStatistics(median_growth_rate=0.12, median_capacity=3000.0, median_seasonal_profile=tuple([1.0] * 12))


def test_tier_boundaries():
    assert classify_tier(36) == "mature"
    assert classify_tier(35) == "growth"
    assert classify_tier(13) == "growth"
    assert classify_tier(12) == "startup"
    assert classify_tier(0) == "startup"


def test_activity_window():
    assert is_store_active(["2024-01"], pd.Timestamp("2024-01-31"))
    assert not is_store_active(["2024-01"], pd.Timestamp("2024-03-02"))
    assert not is_store_active([], pd.Timestamp("2024-01-31"))


def test_flat_mature_store(flat_series, month_labels):
    dates = month_labels("2021-01", 40)
    r = analyze_store("flat", flat_series, dates, pd.Timestamp("2024-04-01"))

    assert not r.error
    assert r.tier == "mature"
    assert r.is_active
    assert r.mask.all()
    assert r.fit.mode == "standard"
    assert [mode for mode, _ in r.candidate_aics] == ["standard"]
    assert abs(r.fit.params.capacity) < 1.0
    assert r.fit.params.growth_rate < 0.01
    assert r.shock is None
    np.testing.assert_allclose(r.decomposition.trend, 1000.0, rtol=0.05)
    np.testing.assert_allclose(r.seasonal_profile, 1.0, atol=0.05)
    assert len(r.seasonal_profile) == 12


def test_level_doubling_store(step_series, month_labels):
    dates = month_labels("2021-01", 48)
    r = analyze_store("step", step_series, dates, pd.Timestamp("2024-12-01"))

    assert r.tier == "mature"
    assert r.fit.mode == "shift"
    assert r.fit.shock_index == 24
    assert r.shock.index == 24
    assert set(dict(r.candidate_aics)) == {"standard", "shift"}


def test_startup_store_borrows_global_growth_rate(global_stats):
    r = analyze_store("new", STARTUP_VALUES, STARTUP_DATES, pd.Timestamp("2024-10-01"), global_stats=global_stats)

    assert not r.error
    assert r.tier == "startup"
    assert r.is_active
    assert r.fit.mode == "startup"
    assert r.fit.params.growth_rate == 0.12
    assert r.candidate_aics == ()
    assert r.nudge_decay == 0.8
    assert r.seasonal_profile == tuple([1.0] * 12)
    assert r.decomposition.residual.shape == (6,)


def test_startup_without_global_statistics_uses_defaults():
    r = analyze_store("new", STARTUP_VALUES, STARTUP_DATES, pd.Timestamp("2024-10-01"))
    assert r.fit.params.growth_rate == 0.1


def test_inactive_startup_store_is_an_error_result():
    r = analyze_store("closed", STARTUP_VALUES, STARTUP_DATES, pd.Timestamp("2025-06-01"))

    assert r.error
    assert r.message == "Insufficient data"
    assert r.fit is None
    assert not r.is_active
    assert r.summary is not None


def test_store_without_valid_months(month_labels):
    r = analyze_store("empty", np.zeros(8), month_labels("2024-01", 8), pd.Timestamp("2024-08-01"))
    assert r.error
    assert r.message == "No valid data"


def test_growth_store_masks_spikes(spiky_series, month_labels, global_stats):
    dates = month_labels("2023-01", 20)
    r = analyze_store("spiky", spiky_series, dates, pd.Timestamp("2024-08-01"), global_stats=global_stats)

    assert not r.error
    assert r.tier == "growth"
    assert not r.mask[[4, 10, 16]].any()
    assert r.mask.sum() == 17
    assert r.fit.mode == "standard"
    assert np.mean(r.seasonal_profile) == pytest.approx(1.0)


def test_input_validation(month_labels):
    dates = month_labels("2024-01", 3)
    with pytest.raises(ValueError):
        analyze_store("x", [1.0, 2.0], dates, None)
    with pytest.raises(ValueError):
        analyze_store("x", [1.0, -2.0, 3.0], dates, None)
    with pytest.raises(ValueError):
        analyze_store("x", [1.0, np.nan, 3.0], dates, None)


def test_result_arrays_are_read_only(flat_series, month_labels):
    r = analyze_store("flat", flat_series, month_labels("2021-01", 40), pd.Timestamp("2024-04-01"))
    with pytest.raises(ValueError):
        r.values[0] = 0.0
    with pytest.raises(ValueError):
        r.mask[0] = False


def test_effective_base_includes_the_shift(step_series, month_labels):
    r = analyze_store("step", step_series, month_labels("2021-01", 48), pd.Timestamp("2024-12-01"))
    p = r.fit.params
    assert r.effective_base == pytest.approx(p.base + p.shift)


def test_candidate_aics_cannot_be_mutated(step_series, month_labels):
    r = analyze_store("step", step_series, month_labels("2021-01", 48), pd.Timestamp("2024-12-01"))
    assert isinstance(r.candidate_aics, tuple)
    with pytest.raises(TypeError):
        r.candidate_aics[0] = ("dual_shift", 0.0)
