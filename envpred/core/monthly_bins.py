"""
Monthly Bins Engine.

Builds a year-independent seasonal curve from residuals:

    1. Mean residual per calendar month, pooled across years
    2. One knot per (month, year) spanned by the series, placed at the
       median day of that month in a synthetic daily calendar
    3. Piecewise-linear interpolation between knots, clamped at both ends
    4. Seasonal curve evaluated at every observation date

The residual left after subtracting the curve is the unpredicted part.

Using the median of a daily calendar puts each knot at the true midpoint of
its month whatever the month length (day 16 of a 31-day month, midday of
the 15th for a 30-day month, and so on).
"""

import logging
from typing import Any, Sequence, Tuple

import numpy as np
import pandas as pd

from envpred.core.calendar import daily_calendar, elapsed_days, month_labels
from envpred.core.detrend import linear_detrend
from envpred.models import DetrendResult, MonthlyBinResult
from envpred.validation import validate_series

logger = logging.getLogger(__name__)


def monthly_means(residuals: np.ndarray, dates: pd.DatetimeIndex) -> pd.Series:
    """
    Mean residual per calendar month (1-12), ignoring missing values.

    Months with no non-missing observation are absent from the result.
    """
    frame = pd.DataFrame({'month': month_labels(dates), 'resid': residuals})
    means = frame.groupby('month', sort=True)['resid'].mean()
    return means.dropna()


def month_midpoints(dates: pd.DatetimeIndex) -> Tuple[np.ndarray, np.ndarray]:
    """
    Knot positions for every (month, year) the series spans.

    Returns:
        (midpoints in days elapsed since dates[0], calendar month per knot)
    """
    calendar = daily_calendar(dates)
    frame = pd.DataFrame({
        'period': calendar.to_period('M'),
        'offset': np.asarray((calendar - dates[0]).days, dtype=np.float64),
    })
    medians = frame.groupby('period', sort=True)['offset'].median()
    return medians.to_numpy(dtype=np.float64), np.asarray(medians.index.month, dtype=np.int64)


def monthly_bins(residuals: Sequence[Any], dates: Sequence[Any]) -> MonthlyBinResult:
    """
    Seasonal curve and unpredicted residuals for a residual series.

    Args:
        residuals: Detrended values aligned with dates (NaN for missing)
        dates: Strictly increasing calendar dates

    Returns:
        MonthlyBinResult aligned with dates

    Raises:
        InvalidInputError: malformed series
    """
    r, d = validate_series(residuals, dates)

    means = monthly_means(r, d)
    knot_x, knot_month = month_midpoints(d)
    knot_y = means.reindex(knot_month).to_numpy(dtype=np.float64)

    # Months without a defined mean carry no knot
    usable = ~np.isnan(knot_y)
    knot_x, knot_y = knot_x[usable], knot_y[usable]

    x = elapsed_days(d)
    if len(knot_x) == 0:
        season = np.full(len(r), np.nan)
    else:
        season = np.interp(x, knot_x, knot_y)

    if len(knot_x) < 2:
        logger.debug("fewer than 2 seasonal knots; seasonal curve is constant")

    return MonthlyBinResult(
        unpredicted_residuals=r - season,
        interpolated_season=season,
    )


def detrend_and_bin(values: Sequence[Any], dates: Sequence[Any]) -> Tuple[DetrendResult, MonthlyBinResult]:
    """Linear detrend followed by monthly binning of the residuals."""
    detrended = linear_detrend(values, dates)
    binned = monthly_bins(detrended.residuals, detrended.dates)
    return detrended, binned
