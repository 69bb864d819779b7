"""
Seasonality Engine.

Variance ratios of the interpolated seasonal curve (predicted) against the
residuals it leaves (unpredicted):

    unbounded = predicted_var / unpredicted_var           in [0, inf)
    bounded   = predicted_var / (predicted_var + unpredicted_var)   in [0, 1]

Zero variances give non-finite ratios; they are returned, not raised.
"""

import numpy as np

from envpred.core._stats import ratio, sample_variance
from envpred.models import SeasonalityResult


def compute(interpolated_season: np.ndarray, unpredicted_residuals: np.ndarray) -> SeasonalityResult:
    """
    Args:
        interpolated_season: Seasonal curve at each observation
        unpredicted_residuals: Residuals after removing the seasonal curve

    Returns:
        SeasonalityResult
    """
    predicted_var = sample_variance(interpolated_season)
    unpredicted_var = sample_variance(unpredicted_residuals)

    return SeasonalityResult(
        predicted_var=predicted_var,
        unpredicted_var=unpredicted_var,
        unbounded_seasonality=ratio(predicted_var, unpredicted_var),
        bounded_seasonality=ratio(predicted_var, predicted_var + unpredicted_var),
    )
