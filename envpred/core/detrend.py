"""
Detrend Engine.

Removes a linear trend fitted by ordinary least squares against the number
of days elapsed since the first observation.
"""

import logging
from typing import Sequence, Any

import numpy as np
from scipy import stats

from envpred.core.calendar import elapsed_days
from envpred.models import DetrendResult
from envpred.validation import InsufficientDataError, validate_series

logger = logging.getLogger(__name__)


def linear_detrend(values: Sequence[Any], dates: Sequence[Any]) -> DetrendResult:
    """
    Fit value ~ intercept + slope * elapsed_days and return the residuals.

    Missing values are excluded from the fit; their residual stays missing.

    Args:
        values: Observations (None / NaN for missing)
        dates: Strictly increasing calendar dates

    Returns:
        DetrendResult with predictor, residuals and the fit statistics

    Raises:
        InvalidInputError: malformed series
        InsufficientDataError: fewer than 2 non-missing values
    """
    y, d = validate_series(values, dates)
    predictor = elapsed_days(d)

    present = ~np.isnan(y)
    if present.sum() < 2:
        raise InsufficientDataError(
            f"linear trend needs at least 2 non-missing values, got {int(present.sum())}"
        )

    fit = stats.linregress(predictor[present], y[present])
    residuals = y - (fit.intercept + fit.slope * predictor)

    logger.debug("trend slope=%.6g/day intercept=%.6g over %d points",
                 fit.slope, fit.intercept, int(present.sum()))

    return DetrendResult(
        dates=d,
        predictor=predictor,
        residuals=residuals,
        intercept=float(fit.intercept),
        slope=float(fit.slope),
        r_squared=float(fit.rvalue ** 2),
        p_value=float(fit.pvalue),
    )
