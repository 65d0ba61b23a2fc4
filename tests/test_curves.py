import numpy as np
import pytest

from Growth.contracts import StandardParams, ShiftParams, DualShiftParams, StartupParams
from Growth.curves import base_at, evaluate, evaluate_series


def test_standard_is_increasing_and_saturates():
    p = StandardParams(base=200.0, capacity=800.0, growth_rate=0.3, t0=20.0)
    t = np.linspace(-40, 80, 500)
    y = evaluate(p, t)

    assert np.all(np.diff(y) > 0)
    assert evaluate(p, 1e4) == pytest.approx(1000.0)
    assert evaluate(p, -1e4) == pytest.approx(200.0)
    assert evaluate(p, 20.0) == pytest.approx(600.0)


def test_scalar_input_returns_float():
    p = StandardParams(base=0.0, capacity=10.0, growth_rate=1.0, t0=0.0)
    assert isinstance(evaluate(p, 3), float)
    assert evaluate_series(p, 5).shape == (5,)


def test_shift_steps_at_shock_index():
    p = ShiftParams(base=1000.0, capacity=0.0, growth_rate=0.1, t0=0.0, shift=500.0, shock_index=10)
    y = evaluate_series(p, 20)
    np.testing.assert_allclose(y[:10], 1000.0)
    np.testing.assert_allclose(y[10:], 1500.0)


def test_dual_shift_steps_twice():
    p = DualShiftParams(
        base=100.0, capacity=0.0, growth_rate=0.1, t0=0.0,
        shift=50.0, shock_index=5, shift2=-30.0, shock_index2=12,
    )
    base = base_at(p, np.arange(20))
    np.testing.assert_allclose(base[:5], 100.0)
    np.testing.assert_allclose(base[5:12], 150.0)
    np.testing.assert_allclose(base[12:], 120.0)


def test_startup_matches_standard_formula():
    kw = dict(base=300.0, capacity=3000.0, growth_rate=0.12, t0=12.0)
    np.testing.assert_allclose(
        evaluate_series(StartupParams(**kw), 30),
        evaluate_series(StandardParams(**kw), 30),
    )


def test_extreme_arguments_do_not_overflow():
    p = StandardParams(base=0.0, capacity=100.0, growth_rate=2.0, t0=0.0)
    y = evaluate(p, np.array([-1e6, 1e6]))
    np.testing.assert_allclose(y, [0.0, 100.0])


def test_unknown_record_raises():
    with pytest.raises(TypeError):
        evaluate(object(), 1.0)
