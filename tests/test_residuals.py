import numpy as np
import pytest

from Growth.residuals import compute_nudge, decompose, lag1_autocorrelation


def test_decompose_residual_is_actual_minus_trend_times_season():
    values = np.array([110.0, 90.0, 105.0])
    trend = np.array([100.0, 100.0, 100.0])
    profile = np.ones(12)
    profile[1] = 0.9
    comp = decompose(values, trend, profile, np.array([0, 1, 2]))

    np.testing.assert_allclose(comp.seasonal, [1.0, 0.9, 1.0])
    np.testing.assert_allclose(comp.residual, [10.0, 0.0, 5.0])
    with pytest.raises(ValueError):
        comp.residual[0] = 0.0


def test_short_history_uses_mean_of_last_three():
    nudge, decay = compute_nudge([1.0, 2.0, 3.0, 4.0, 5.0], "startup")
    assert nudge == pytest.approx(4.0)
    assert decay == 0.8

    _, decay = compute_nudge([1.0, 2.0], "growth")
    assert decay == 0.7


def test_long_history_uses_median_and_autocorrelation():
    residuals = np.concatenate([np.full(10, 500.0), np.arange(12, dtype=float)])
    nudge, decay = compute_nudge(residuals, "mature")
    assert nudge == pytest.approx(5.5)
    assert decay == pytest.approx(0.75)


def test_decay_is_clamped():
    alternating = np.array([1.0, -1.0] * 6)
    assert compute_nudge(alternating, "mature")[1] == 0.0

    smooth = np.concatenate([np.zeros(6), np.full(6, 1.0)])
    assert lag1_autocorrelation(smooth) > 0
    assert compute_nudge(smooth, "mature")[1] <= 0.9


def test_constant_residuals_have_zero_decay():
    nudge, decay = compute_nudge(np.full(15, 12.0), "mature")
    assert nudge == 12.0
    assert decay == 0.0


def test_empty_residuals():
    assert compute_nudge([], "growth") == (0.0, 0.0)
    assert lag1_autocorrelation([3.0]) == 0.0
