"""
envpred: environmental predictability of a time series.

Public API:
    from envpred import compute_predictability, compute_colwell
    record = compute_predictability(values, dates, delta=1, noise_method='regular')
    record.bounded_seasonality, record.env_col, record.colwell_p

Layers:
    envpred.core        Engines: arrays in, result dataclasses out, no file I/O
    envpred.validation  Input coercion, typed errors, advisory warnings
    envpred.io          Series reader, parquet writer, YAML config
    envpred.run         Pipeline assembly and CLI (python -m envpred)

Metrics:
    Seasonality     bounded / unbounded variance ratios of a monthly seasonal curve
    Colour          spectral exponent of the residual noise (0 = white)
    Colwell (1974)  constancy, contingency and predictability of monthly states
"""

from envpred.models import (
    ColwellResult,
    ColwellTable,
    DetrendResult,
    MonthlyBinResult,
    NoiseModel,
    ResultRecord,
    SeasonalityResult,
    SpectrumTable,
)
from envpred.run import compute_colwell, compute_predictability, run
from envpred.validation import (
    EnvPredError,
    IncompatibleMethodError,
    InsufficientDataError,
    InvalidArgumentError,
    InvalidInputError,
    SeriesAdvisoryWarning,
)

__version__ = "0.1.0"

__all__ = [
    "compute_predictability",
    "compute_colwell",
    "run",
    "ResultRecord",
    "DetrendResult",
    "MonthlyBinResult",
    "SpectrumTable",
    "NoiseModel",
    "SeasonalityResult",
    "ColwellResult",
    "ColwellTable",
    "EnvPredError",
    "InvalidInputError",
    "InsufficientDataError",
    "IncompatibleMethodError",
    "InvalidArgumentError",
    "SeriesAdvisoryWarning",
]
