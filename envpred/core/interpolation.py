"""
Missing-Value Interpolation.

Linear interpolation across missing entries by observation index. Leading
and trailing gaps take the nearest observed value.
"""

import logging

import numpy as np

from envpred.validation import InsufficientDataError

logger = logging.getLogger(__name__)


def interpolate_missing(values: np.ndarray) -> np.ndarray:
    """
    Fill NaN entries by linear interpolation over position.

    Args:
        values: 1D float array, NaN marks missing

    Returns:
        New array with no NaN entries (input is not modified)

    Raises:
        InsufficientDataError: fewer than 2 observed values
    """
    y = np.asarray(values, dtype=np.float64)
    missing = np.isnan(y)

    if not missing.any():
        return y.copy()

    if (~missing).sum() < 2:
        raise InsufficientDataError(
            "at least 2 non-missing values are required to interpolate"
        )

    x = np.arange(len(y), dtype=np.float64)
    out = y.copy()
    out[missing] = np.interp(x[missing], x[~missing], y[~missing])

    logger.debug("interpolated %d missing values", int(missing.sum()))
    return out
