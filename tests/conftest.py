"""Shared fixtures: synthetic daily discharge records."""

import numpy as np
import pandas as pd
import pytest


def daily_records(start: str, end: str, flow) -> pd.DataFrame:
    """Daily ``date``/``flow`` frame; ``flow`` is a scalar or a function of the dates."""
    dates = pd.date_range(start, end, freq="D")
    values = flow(dates) if callable(flow) else np.full(len(dates), float(flow))
    return pd.DataFrame({"date": dates, "flow": values})


@pytest.fixture
def make_records():
    return daily_records


@pytest.fixture
def seasonal_records():
    """Twenty years of strictly positive seasonal flow with gamma noise."""
    rng = np.random.default_rng(7)

    def flow(dates: pd.DatetimeIndex) -> np.ndarray:
        season = 30.0 * np.sin(2 * np.pi * dates.dayofyear.to_numpy() / 365.25)
        return 40.0 + season + rng.gamma(2.0, 3.0, size=len(dates))

    return daily_records("2000-01-01", "2019-12-31", flow)
