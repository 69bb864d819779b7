"""
Input Validation

Coerces caller input into the arrays the core engines work on and reports
advisory conditions that do not stop computation.

PRINCIPLE: "Reject malformed input, warn about weak input"

Usage:
    from envpred.validation import validate_series, inspect_series

    values, dates = validate_series(raw_values, raw_dates)
    report = inspect_series(values, dates)
    emit_advisories(report)
"""

import re
import warnings
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd


# ============================================================
# ERRORS
# ============================================================

class EnvPredError(Exception):
    """Base class for all envpred errors."""


class InvalidInputError(EnvPredError, ValueError):
    """Raised for shape, type or ordering violations in the input series."""


class InsufficientDataError(EnvPredError, ValueError):
    """Raised when too few usable points remain for a fit, spectrum or entropy."""


class IncompatibleMethodError(EnvPredError, ValueError):
    """Raised when the chosen noise method cannot handle the series."""


class InvalidArgumentError(EnvPredError, ValueError):
    """Raised for out-of-range scalar options."""


class SeriesAdvisoryWarning(UserWarning):
    """Advisory about series quality. Computation continues."""


# ============================================================
# COERCION
# ============================================================

_ISO_DATE = re.compile(r'^\d{4}-\d{2}-\d{2}$')


def coerce_values(values: Sequence[Any]) -> np.ndarray:
    """
    Convert a value sequence to a float64 array with NaN for missing entries.

    None and pandas.NA become NaN. Strings, booleans, dates and infinities
    are rejected.

    Raises:
        InvalidInputError
    """
    if values is None:
        raise InvalidInputError("values is None")
    if isinstance(values, (str, bytes)):
        raise InvalidInputError("values must be a sequence of numbers, got a string")

    arr = np.asarray(values)
    if arr.ndim != 1:
        raise InvalidInputError(f"values must be one-dimensional, got {arr.ndim} dimensions")
    if arr.size == 0:
        raise InvalidInputError("values is empty")

    kind = arr.dtype.kind
    if kind in 'USbMm':
        raise InvalidInputError(f"values must be numeric, got dtype {arr.dtype}")

    if kind == 'O':
        items = arr.tolist()
        if any(isinstance(v, (str, bytes, bool, date)) for v in items):
            raise InvalidInputError("values must be numeric, found non-numeric entries")
        try:
            out = np.array(
                [np.nan if (v is None or v is pd.NA) else v for v in items],
                dtype=np.float64,
            )
        except (TypeError, ValueError) as e:
            raise InvalidInputError(f"values must be numeric: {e}") from e
    else:
        out = arr.astype(np.float64)

    if np.isinf(out).any():
        raise InvalidInputError("values contains infinite entries")

    return out


def _is_date_like(x: Any) -> bool:
    return isinstance(x, (date, np.datetime64)) and not pd.isna(x)


def coerce_dates(dates: Sequence[Any]) -> pd.DatetimeIndex:
    """
    Convert a date sequence to a day-resolution DatetimeIndex.

    Accepts datetime.date / datetime.datetime / numpy.datetime64 /
    pandas.Timestamp objects, or strings in strict ISO YYYY-MM-DD form.

    Raises:
        InvalidInputError
    """
    if dates is None:
        raise InvalidInputError("dates is None")
    if isinstance(dates, (str, bytes)):
        raise InvalidInputError("dates must be a sequence of dates, got a string")

    if isinstance(dates, pd.DatetimeIndex):
        idx = dates
    else:
        arr = np.asarray(dates)
        if arr.ndim != 1:
            raise InvalidInputError(f"dates must be one-dimensional, got {arr.ndim} dimensions")
        if arr.size == 0:
            raise InvalidInputError("dates is empty")

        kind = arr.dtype.kind
        if kind == 'M':
            idx = pd.DatetimeIndex(arr)
        elif kind in 'USO':
            items = arr.tolist()
            if all(isinstance(x, str) for x in items):
                bad = [x for x in items if not _ISO_DATE.match(x)]
                if bad:
                    raise InvalidInputError(
                        f"dates must be formatted YYYY-MM-DD, got {bad[0]!r}"
                    )
                try:
                    idx = pd.DatetimeIndex(pd.to_datetime(items, format='%Y-%m-%d'))
                except (ValueError, OverflowError) as e:
                    raise InvalidInputError(f"unparsable date: {e}") from e
            elif all(_is_date_like(x) for x in items):
                try:
                    idx = pd.DatetimeIndex(pd.to_datetime(items))
                except (ValueError, TypeError, OverflowError) as e:
                    raise InvalidInputError(f"unparsable date: {e}") from e
            else:
                raise InvalidInputError(
                    "dates must be calendar dates or YYYY-MM-DD strings"
                )
        else:
            raise InvalidInputError(
                f"dates must be calendar dates, got dtype {arr.dtype}"
            )

    if idx.hasnans:
        raise InvalidInputError("dates contains missing entries")
    if idx.tz is not None:
        idx = idx.tz_localize(None)

    return idx.normalize()


def validate_series(values: Sequence[Any], dates: Sequence[Any]) -> Tuple[np.ndarray, pd.DatetimeIndex]:
    """
    Validate a (values, dates) pair for the core engines.

    Returns:
        (values as float64 array, dates as DatetimeIndex)

    Raises:
        InvalidInputError: mismatched lengths, fewer than 2 observations,
            or dates not strictly increasing
    """
    v = coerce_values(values)
    d = coerce_dates(dates)

    if len(v) != len(d):
        raise InvalidInputError(
            f"values and dates differ in length ({len(v)} vs {len(d)})"
        )
    if len(v) < 2:
        raise InvalidInputError("at least 2 observations are required")

    steps = np.diff(d.asi8)
    if not np.all(steps > 0):
        first_bad = int(np.argmax(steps <= 0)) + 1
        raise InvalidInputError(
            f"dates must be strictly increasing (violated at position {first_bad}: "
            f"{d[first_bad - 1].date()} -> {d[first_bad].date()})"
        )

    return v, d


def validate_n_states(n_states: Any) -> int:
    """Validate the Colwell state count (integer >= 2)."""
    if isinstance(n_states, (bool, np.bool_)) or n_states is None:
        raise InvalidArgumentError(f"n_states must be an integer >= 2, got {n_states!r}")
    if isinstance(n_states, (float, np.floating)):
        if not np.isfinite(n_states) or not float(n_states).is_integer():
            raise InvalidArgumentError(f"n_states must be an integer >= 2, got {n_states!r}")
    elif not isinstance(n_states, (int, np.integer)):
        raise InvalidArgumentError(f"n_states must be an integer >= 2, got {n_states!r}")

    n = int(n_states)
    if n < 2:
        raise InvalidArgumentError(f"n_states must be an integer >= 2, got {n}")
    return n


def validate_delta(delta: Any) -> float:
    """Validate the nominal sampling interval (finite, positive)."""
    if isinstance(delta, (bool, np.bool_)) or not isinstance(delta, (int, float, np.integer, np.floating)):
        raise InvalidArgumentError(f"delta must be a positive number, got {delta!r}")
    delta = float(delta)
    if not np.isfinite(delta) or delta <= 0:
        raise InvalidArgumentError(f"delta must be a positive number, got {delta}")
    return delta


# ============================================================
# ADVISORIES
# ============================================================

@dataclass
class SeriesValidationReport:
    """Advisory findings for one series."""

    n_observations: int = 0
    n_missing: int = 0
    n_month_years: int = 0
    start_month: str = ""
    end_month: str = ""
    min_recommended_months: int = 120
    warnings: List[str] = field(default_factory=list)

    @property
    def has_missing(self) -> bool:
        return self.n_missing > 0

    @property
    def is_short(self) -> bool:
        return self.n_month_years < self.min_recommended_months

    @property
    def partial_year(self) -> bool:
        return self.start_month != self.end_month

    def summary(self) -> str:
        """Human-readable summary."""
        lines = [
            "=" * 60,
            "SERIES VALIDATION REPORT",
            "=" * 60,
            "",
            f"Observations: {self.n_observations:,}",
            f"  Missing: {self.n_missing}",
            f"Month-year combinations: {self.n_month_years}",
            f"Starts in {self.start_month}, ends in {self.end_month}",
            "",
        ]

        if self.warnings:
            lines.append("WARNINGS:")
            for w in self.warnings:
                lines.append(f"  - {w}")
            lines.append("")

        lines.append("=" * 60)
        return "\n".join(lines)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to serializable dict."""
        return {
            'n_observations': self.n_observations,
            'n_missing': self.n_missing,
            'n_month_years': self.n_month_years,
            'start_month': self.start_month,
            'end_month': self.end_month,
            'min_recommended_months': self.min_recommended_months,
            'warnings': list(self.warnings),
        }


def inspect_series(
    values: np.ndarray,
    dates: pd.DatetimeIndex,
    min_recommended_months: int = 120,
) -> SeriesValidationReport:
    """
    Collect advisory conditions for an already validated series.

    Conditions:
        - missing values present
        - fewer than min_recommended_months distinct month-year combinations
        - first and last observation fall in different calendar months
    """
    report = SeriesValidationReport(
        n_observations=len(values),
        n_missing=int(np.isnan(values).sum()),
        n_month_years=int(dates.to_period('M').nunique()),
        start_month=dates[0].month_name(),
        end_month=dates[-1].month_name(),
        min_recommended_months=min_recommended_months,
    )

    if report.has_missing:
        report.warnings.append(
            "Data contains missing values; interpolation is strongly discouraged "
            "for series containing large continuous chunks of missing values"
        )
    if report.is_short:
        report.warnings.append(
            f"Time series is shorter than recommended (contains {report.n_month_years} "
            f"months, recommended >= {min_recommended_months})"
        )
    if report.partial_year:
        report.warnings.append(
            f"Time series starts and ends at different times of the year. "
            f"Starting month is {report.start_month} and ending month is {report.end_month}"
        )

    return report


def emit_advisories(report: SeriesValidationReport, stacklevel: int = 3) -> None:
    """Issue one SeriesAdvisoryWarning per advisory in the report."""
    for message in report.warnings:
        warnings.warn(message, SeriesAdvisoryWarning, stacklevel=stacklevel)
