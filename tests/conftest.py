"""
Shared synthetic series for the envpred tests.

    daily_seasonal     11 years of daily values: annual sinusoid + white noise
    monthly_alternating  10 years, one value per month, 0/1 alternating by month
    irregular_gappy    8-day sampling with jitter and missing values
"""

from datetime import date, timedelta

import numpy as np
import pandas as pd
import pytest


def make_daily_dates(start='2000-01-01', end='2010-12-31'):
    return pd.date_range(start, end, freq='D')


def make_seasonal_series(dates, amplitude=10.0, noise_sd=0.5, trend=0.0, seed=42):
    rng = np.random.default_rng(seed)
    t = np.asarray((dates - dates[0]).days, dtype=float)
    return (
        amplitude * np.sin(2 * np.pi * t / 365.25)
        + trend * t
        + rng.normal(0.0, noise_sd, len(t))
    )


@pytest.fixture
def daily_dates():
    return make_daily_dates()


@pytest.fixture
def daily_seasonal(daily_dates):
    return make_seasonal_series(daily_dates), daily_dates


@pytest.fixture
def monthly_alternating():
    dates = pd.date_range('2000-01-01', periods=120, freq='MS')
    values = (dates.month % 2).astype(float).to_numpy()
    return values, dates


@pytest.fixture
def irregular_gappy():
    rng = np.random.default_rng(7)
    dates = []
    d = date(2001, 1, 1)
    while d < date(2012, 1, 1):
        dates.append(d)
        d += timedelta(days=int(8 + rng.integers(-2, 3)))
    t = np.array([(x - dates[0]).days for x in dates], dtype=float)
    values = 50 + 20 * np.sin(2 * np.pi * t / 365.25) + rng.normal(0, 3, len(t))
    values[rng.choice(len(values), 30, replace=False)] = np.nan
    return values, dates
