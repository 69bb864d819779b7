"""
envpred Core
============

Compute engines. Arrays in, frozen result dataclasses out, no file I/O.

Structure:
    calendar.py       - Day differences, month ends, month/year labels
    interpolation.py  - Optional linear fill of missing values
    detrend.py        - OLS trend against elapsed days
    monthly_bins.py   - Monthly seasonal curve and unpredicted residuals
    spectral.py       - Regular / Lomb-Scargle spectrum and noise colour
    seasonality.py    - Bounded and unbounded seasonality
    colwell.py        - Colwell constancy, contingency, predictability
"""

from envpred.core.calendar import (
    days_between,
    elapsed_days,
    last_day_of_month,
    daily_calendar,
)
from envpred.core.interpolation import interpolate_missing
from envpred.core.detrend import linear_detrend
from envpred.core.monthly_bins import monthly_bins, detrend_and_bin
from envpred.core.spectral import (
    NoiseMethod,
    Distribution,
    SpectrumEstimator,
    RegularSpectrum,
    LombScargleSpectrum,
    get_estimator,
    fit_noise_colour,
    noise_colour,
)
from envpred.core.seasonality import compute as compute_seasonality
from envpred.core.colwell import compute as compute_colwell_indices

__all__ = [
    'days_between',
    'elapsed_days',
    'last_day_of_month',
    'daily_calendar',
    'interpolate_missing',
    'linear_detrend',
    'monthly_bins',
    'detrend_and_bin',
    'NoiseMethod',
    'Distribution',
    'SpectrumEstimator',
    'RegularSpectrum',
    'LombScargleSpectrum',
    'get_estimator',
    'fit_noise_colour',
    'noise_colour',
    'compute_seasonality',
    'compute_colwell_indices',
]
