"""
Result models for the predictability pipeline.

Every engine returns one of these frozen dataclasses. Arrays are aligned with
the input dates; NaN marks missing positions.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

import numpy as np
import pandas as pd
import polars as pl


@dataclass(frozen=True)
class DetrendResult:
    """OLS trend fit against elapsed days, and its residuals."""
    dates: pd.DatetimeIndex
    predictor: np.ndarray
    residuals: np.ndarray
    intercept: float
    slope: float
    r_squared: float
    p_value: float

    def __len__(self) -> int:
        return len(self.predictor)

    def fitted(self) -> np.ndarray:
        """Trend line evaluated at every predictor."""
        return self.intercept + self.slope * self.predictor


@dataclass(frozen=True)
class MonthlyBinResult:
    """Interpolated monthly seasonal curve and the residuals it leaves."""
    unpredicted_residuals: np.ndarray
    interpolated_season: np.ndarray

    def __len__(self) -> int:
        return len(self.interpolated_season)


@dataclass(frozen=True)
class SpectrumTable:
    """(frequency, power) rows, frequency strictly increasing."""
    frequency: np.ndarray
    power: np.ndarray
    method: str = "regular"

    def __len__(self) -> int:
        return len(self.frequency)

    def to_frame(self) -> pl.DataFrame:
        return pl.DataFrame({
            'freq': self.frequency,
            'spec': self.power,
        })


@dataclass(frozen=True)
class NoiseModel:
    """
    OLS fit of log10(power) on log10(frequency).

    colour is |slope|: 0 for white noise, larger for reddened noise.
    """
    slope: float
    intercept: float
    r_squared: float
    p_value: float
    stderr: float
    n_points: int

    @property
    def colour(self) -> float:
        return abs(self.slope)

    def predict(self, frequency: np.ndarray) -> np.ndarray:
        """Fitted power at the given frequencies."""
        frequency = np.asarray(frequency, dtype=np.float64)
        return 10.0 ** (self.intercept + self.slope * np.log10(frequency))


@dataclass(frozen=True)
class SeasonalityResult:
    """Variance ratios of the seasonal curve against the leftover residuals."""
    predicted_var: float
    unpredicted_var: float
    unbounded_seasonality: float
    bounded_seasonality: float


@dataclass(frozen=True)
class ColwellTable:
    """State x month contingency counts with the breaks used to discretize."""
    counts: np.ndarray
    months: Tuple[int, ...]
    breaks: np.ndarray

    @property
    def n_states(self) -> int:
        return self.counts.shape[0]

    def to_frame(self) -> pl.DataFrame:
        """Long-format table: one row per (state, month) cell."""
        states, cols = np.indices(self.counts.shape)
        return pl.DataFrame({
            'state': states.ravel(),
            'lower': self.breaks[:-1][states.ravel()],
            'upper': self.breaks[1:][states.ravel()],
            'month': np.asarray(self.months, dtype=np.int64)[cols.ravel()],
            'count': self.counts.ravel(),
        })


@dataclass(frozen=True)
class ColwellResult:
    """Colwell (1974) constancy, contingency and predictability."""
    constancy: float
    contingency: float
    predictability: float
    table: Optional[ColwellTable] = field(default=None, compare=False)

    def to_dict(self) -> Dict[str, float]:
        return {
            'colwell_c': self.constancy,
            'colwell_m': self.contingency,
            'colwell_p': self.predictability,
        }


# Column order of the flat statistics record
RECORD_COLUMNS = (
    'series_n', 'n_na', 'prop_na', 'n_yrs', 'n_months', 'n_days',
    'frequency', 'nyquist_freq', 'raw_mean', 'raw_var', 'raw_cv',
    'predicted_var', 'unpredicted_var', 'unbounded_seasonality',
    'bounded_seasonality', 'env_col', 'colwell_c', 'colwell_m', 'colwell_p',
)


@dataclass(frozen=True)
class ResultRecord:
    """
    Flat statistics for one series plus the intermediates behind them.

    The detrended, binned and spectral intermediates are kept for
    downstream plotting; series_frame() builds their table on demand.
    """
    series_n: int
    n_na: int
    prop_na: float
    n_yrs: int
    n_months: int
    n_days: int
    frequency: float
    nyquist_freq: float
    raw_mean: float
    raw_var: float
    raw_cv: float
    predicted_var: float
    unpredicted_var: float
    unbounded_seasonality: float
    bounded_seasonality: float
    env_col: float
    colwell_c: float
    colwell_m: float
    colwell_p: float
    detrended: Optional[DetrendResult] = field(default=None, repr=False, compare=False)
    binned: Optional[MonthlyBinResult] = field(default=None, repr=False, compare=False)
    spectrum: Optional[SpectrumTable] = field(default=None, repr=False, compare=False)
    noise_model: Optional[NoiseModel] = field(default=None, repr=False, compare=False)
    colwell: Optional[ColwellResult] = field(default=None, repr=False, compare=False)

    def to_dict(self) -> Dict[str, Any]:
        return {name: getattr(self, name) for name in RECORD_COLUMNS}

    def to_frame(self) -> pl.DataFrame:
        """One-row DataFrame of the flat statistics."""
        return pl.DataFrame([self.to_dict()])

    def series_frame(self) -> Optional[pl.DataFrame]:
        """Per-observation detrended and seasonal series, or None if not attached."""
        if self.detrended is None or self.binned is None:
            return None
        return pl.DataFrame({
            'dates': list(self.detrended.dates.date),
            'predictor': self.detrended.predictor,
            'resids': self.detrended.residuals,
            'resid_time_series': self.binned.unpredicted_residuals,
            'interpolated_seasons': self.binned.interpolated_season,
        })
