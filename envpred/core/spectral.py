"""
Spectral Colour Engine
======================

Estimates the colour of the unpredicted residuals: the exponent θ in
S(f) ~ 1/f^θ, taken as |slope| of log10(power) regressed on log10(frequency).

Typical values:
    - θ ≈ 0: White noise
    - θ ≈ 1: Pink noise (1/f)
    - θ ≈ 2: Brownian motion (red noise)

Two spectrum estimators share one interface:
    regular     Tapered periodogram for evenly spaced, gap-free series
    irregular   Lomb-Scargle periodogram on elapsed days; tolerates gaps

Usage:
    from envpred.core.spectral import noise_colour
    spectrum, model = noise_colour(resid, predictor, 'irregular')
    model.colour
"""

import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Dict, Tuple

import numpy as np
from scipy import signal as sp_signal
from scipy import stats

from envpred.models import NoiseModel, SpectrumTable
from envpred.validation import (
    IncompatibleMethodError,
    InsufficientDataError,
    InvalidArgumentError,
)

logger = logging.getLogger(__name__)


class NoiseMethod(str, Enum):
    """Spectrum estimator selector."""
    REGULAR = 'regular'
    IRREGULAR = 'irregular'

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            key = value.strip().lower()
            aliases = {
                'regular': cls.REGULAR,
                'spectrum': cls.REGULAR,
                'irregular': cls.IRREGULAR,
                'lomb_scargle': cls.IRREGULAR,
            }
            if key in aliases:
                return aliases[key]
        return None

    @classmethod
    def parse(cls, value) -> 'NoiseMethod':
        try:
            return cls(value)
        except ValueError:
            valid = ", ".join(m.value for m in cls)
            raise InvalidArgumentError(
                f"Unknown noise method: {value!r}. Available: {valid}"
            ) from None


class Distribution(str, Enum):
    """Sampling layout of a series in time."""
    REGULAR = 'regular'
    IRREGULAR = 'irregular'

    @classmethod
    def parse(cls, value) -> 'Distribution':
        # booleans read as "is uneven"
        if isinstance(value, (bool, np.bool_)):
            return cls.IRREGULAR if value else cls.REGULAR
        try:
            return cls(value.strip().lower() if isinstance(value, str) else value)
        except ValueError:
            valid = ", ".join(m.value for m in cls)
            raise InvalidArgumentError(
                f"Unknown distribution: {value!r}. Available: {valid}"
            ) from None

    @property
    def is_uneven(self) -> bool:
        return self is Distribution.IRREGULAR


class SpectrumEstimator(ABC):
    """Produces a SpectrumTable from residuals and their time base."""

    method: NoiseMethod

    @abstractmethod
    def estimate(self, residuals: np.ndarray, predictor: np.ndarray,
                 delta: float = 1.0) -> SpectrumTable:
        """
        Args:
            residuals: Unpredicted residuals (NaN for missing)
            predictor: Days elapsed since the first observation
            delta: Nominal sampling interval

        Returns:
            SpectrumTable with strictly increasing, positive frequencies
        """


class RegularSpectrum(SpectrumEstimator):
    """
    Periodogram of an evenly spaced series.

    The series is detrended and tapered with a split cosine bell over 10% of
    each end. Frequency is in cycles per unit of delta; the zero frequency is
    dropped.
    """

    method = NoiseMethod.REGULAR
    taper = 0.1

    def estimate(self, residuals, predictor, delta=1.0):
        y = np.asarray(residuals, dtype=np.float64)
        if np.isnan(y).any():
            raise IncompatibleMethodError(
                "Regular spectrum cannot handle missing values; use noise method "
                "'irregular' (Lomb-Scargle) or interpolate missing values"
            )

        freqs, power = sp_signal.periodogram(
            y,
            fs=1.0 / delta,
            window=('tukey', 2 * self.taper),
            detrend='linear',
        )
        keep = freqs > 0
        return SpectrumTable(frequency=freqs[keep], power=power[keep],
                             method=self.method.value)


class LombScargleSpectrum(SpectrumEstimator):
    """
    Lomb-Scargle periodogram on elapsed days.

    Missing values are dropped. Frequencies run in steps of 1/span up to the
    pseudo-Nyquist frequency n / (2 * span), with oversampling factor ofac.
    """

    method = NoiseMethod.IRREGULAR

    def __init__(self, ofac: int = 1):
        self.ofac = ofac

    def estimate(self, residuals, predictor, delta=1.0):
        y = np.asarray(residuals, dtype=np.float64)
        t = np.asarray(predictor, dtype=np.float64)
        present = ~np.isnan(y)
        y, t = y[present], t[present]

        n = len(y)
        span = t[-1] - t[0] if n > 1 else 0.0
        if n < 2 or span <= 0:
            raise InsufficientDataError(
                f"Lomb-Scargle needs at least 2 distinct observation times, got {n}"
            )

        step = 1.0 / (self.ofac * span)
        n_freq = int(np.floor(0.5 * n * self.ofac))
        freqs = step * np.arange(1, n_freq + 1, dtype=np.float64)
        if len(freqs) == 0:
            return SpectrumTable(frequency=freqs, power=freqs.copy(),
                                 method=self.method.value)

        # a single frequency comes back 0-d
        power = np.atleast_1d(np.asarray(
            sp_signal.lombscargle(t, y - np.mean(y), 2 * np.pi * freqs), dtype=np.float64
        ))
        return SpectrumTable(frequency=freqs, power=power,
                             method=self.method.value)


ESTIMATORS: Dict[NoiseMethod, SpectrumEstimator] = {
    NoiseMethod.REGULAR: RegularSpectrum(),
    NoiseMethod.IRREGULAR: LombScargleSpectrum(),
}


def get_estimator(method) -> SpectrumEstimator:
    """Estimator for a method name or NoiseMethod."""
    return ESTIMATORS[NoiseMethod.parse(method)]


def fit_noise_colour(spectrum: SpectrumTable) -> NoiseModel:
    """
    Fit log10(power) ~ log10(frequency).

    Rows with non-positive or non-finite power cannot be logged and are left
    out. If fewer than 2 rows survive the model is all-NaN.

    Raises:
        InsufficientDataError: spectrum has fewer than 2 rows
    """
    if len(spectrum) < 2:
        raise InsufficientDataError(
            f"noise colour needs at least 2 spectrum points, got {len(spectrum)}"
        )

    freq = np.asarray(spectrum.frequency, dtype=np.float64)
    power = np.asarray(spectrum.power, dtype=np.float64)
    usable = np.isfinite(power) & (power > 0) & (freq > 0)

    if usable.sum() < 2:
        logger.debug("degenerate spectrum: %d usable rows", int(usable.sum()))
        return NoiseModel(slope=np.nan, intercept=np.nan, r_squared=np.nan,
                          p_value=np.nan, stderr=np.nan, n_points=int(usable.sum()))

    fit = stats.linregress(np.log10(freq[usable]), np.log10(power[usable]))
    return NoiseModel(
        slope=float(fit.slope),
        intercept=float(fit.intercept),
        r_squared=float(fit.rvalue ** 2),
        p_value=float(fit.pvalue),
        stderr=float(fit.stderr),
        n_points=int(usable.sum()),
    )


def noise_colour(
    residuals: np.ndarray,
    predictor: np.ndarray,
    method='regular',
    delta: float = 1.0,
    is_uneven: bool = False,
) -> Tuple[SpectrumTable, NoiseModel]:
    """
    Spectrum and fitted colour model of the unpredicted residuals.

    Raises:
        IncompatibleMethodError: regular method on uneven or gappy data
        InsufficientDataError: fewer than 2 spectrum points
    """
    method = NoiseMethod.parse(method)
    if is_uneven and method is NoiseMethod.REGULAR:
        raise IncompatibleMethodError(
            "Time series is uneven, please use noise method 'irregular' (Lomb-Scargle)"
        )

    spectrum = ESTIMATORS[method].estimate(residuals, predictor, delta)
    model = fit_noise_colour(spectrum)

    logger.debug("%s spectrum: %d rows, colour=%.4g", method.value, len(spectrum), model.colour)
    return spectrum, model
