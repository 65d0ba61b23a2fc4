import numpy as np
import pandas as pd
import pytest


def _labels(start, n):
    return [p.strftime("%Y-%m") for p in pd.period_range(start, periods=n, freq="M")]


@pytest.fixture
def month_labels():
    """Factory: month_labels(start, n) -> ["YYYY-MM", ...]."""
    return _labels


@pytest.fixture
def flat_series():
    return np.full(40, 1000.0)


@pytest.fixture
def step_series():
    """48 months, level doubles at month 24."""
    return np.concatenate([np.full(24, 1000.0), np.full(24, 2000.0)])


@pytest.fixture
def spiky_series():
    """20 months around 1000 with 5x spikes at months 4, 10 and 16."""
    pattern = np.array([0.0, 20.0, -20.0, 10.0, -10.0])
    values = 1000.0 + np.resize(pattern, 20)
    values[[4, 10, 16]] = 5000.0
    return values
