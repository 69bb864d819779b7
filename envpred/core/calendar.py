"""
Calendar Engine.

Gregorian date arithmetic used by the detrending, binning and Colwell
engines: day differences, month ends, month/year labels and the synthetic
daily calendar spanning a series.
"""

from datetime import date

import numpy as np
import pandas as pd

from envpred.validation import InvalidInputError


def _as_timestamp(d) -> pd.Timestamp:
    if isinstance(d, (str, bytes)) or not isinstance(d, (date, np.datetime64)) or pd.isna(d):
        raise InvalidInputError(f"expected a calendar date, got {d!r}")
    return pd.Timestamp(d).normalize()


def days_between(start, end) -> int:
    """Whole days from start to end (negative if end precedes start)."""
    return int((_as_timestamp(end) - _as_timestamp(start)).days)


def elapsed_days(dates: pd.DatetimeIndex) -> np.ndarray:
    """
    Days elapsed since the first date, as floats.

    First element is 0; strictly increasing dates give a strictly
    increasing result.
    """
    return np.asarray((dates - dates[0]).days, dtype=np.float64)


def last_day_of_month(d) -> date:
    """
    Last calendar day of the month containing d.

    Leap years are honoured (2020-02-01 -> 2020-02-29). A date already at
    month end is returned unchanged.
    """
    ts = _as_timestamp(d)
    return (ts + pd.offsets.MonthEnd(0)).date()


def first_day_of_month(d) -> date:
    return _as_timestamp(d).replace(day=1).date()


def month_labels(dates: pd.DatetimeIndex) -> np.ndarray:
    """Calendar month (1-12) per date."""
    return np.asarray(dates.month, dtype=np.int64)


def year_labels(dates: pd.DatetimeIndex) -> np.ndarray:
    return np.asarray(dates.year, dtype=np.int64)


def daily_calendar(dates: pd.DatetimeIndex) -> pd.DatetimeIndex:
    """
    Every day from the first day of the first observation's month through
    the last day of the final observation's month.
    """
    return pd.date_range(
        start=first_day_of_month(dates[0]),
        end=last_day_of_month(dates[-1]),
        freq='D',
    )
