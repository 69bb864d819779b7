"""
envpred Validation Module

Validates input series and scalar options before the core engines run.

Exports:
    - validate_series: Coerce and check a (values, dates) pair
    - coerce_values / coerce_dates: Individual coercions
    - validate_n_states / validate_delta: Scalar option checks
    - inspect_series / emit_advisories: Advisory (non-fatal) diagnostics
    - EnvPredError and its four typed subclasses
    - SeriesAdvisoryWarning: Warning category for advisories
"""

from .input_validation import (
    EnvPredError,
    InvalidInputError,
    InsufficientDataError,
    IncompatibleMethodError,
    InvalidArgumentError,
    SeriesAdvisoryWarning,
    SeriesValidationReport,
    coerce_values,
    coerce_dates,
    validate_series,
    validate_n_states,
    validate_delta,
    inspect_series,
    emit_advisories,
)

__all__ = [
    # Errors
    'EnvPredError',
    'InvalidInputError',
    'InsufficientDataError',
    'IncompatibleMethodError',
    'InvalidArgumentError',
    'SeriesAdvisoryWarning',
    # Coercion
    'coerce_values',
    'coerce_dates',
    'validate_series',
    'validate_n_states',
    'validate_delta',
    # Advisories
    'SeriesValidationReport',
    'inspect_series',
    'emit_advisories',
]
