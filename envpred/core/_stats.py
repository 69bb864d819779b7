"""Missing-aware summary statistics. Missing entries (NaN) are ignored."""

import numpy as np


def present(y):
    """Non-missing entries of y as a flat float64 array."""
    y = np.asarray(y, dtype=np.float64).ravel()
    return y[~np.isnan(y)]


def mean(y):
    """Mean over present values; NaN when none are present."""
    y = present(y)
    if len(y) == 0:
        return np.nan
    return float(np.mean(y))


def sample_variance(y):
    """Sample variance (n - 1 denominator); NaN with fewer than 2 present values."""
    y = present(y)
    if len(y) < 2:
        return np.nan
    return float(np.var(y, ddof=1))


def sample_sd(y):
    """Sample standard deviation."""
    return float(np.sqrt(sample_variance(y)))


def coefficient_of_variation(y):
    """sd / mean. Non-finite when the mean is zero."""
    with np.errstate(divide='ignore', invalid='ignore'):
        return float(np.float64(sample_sd(y)) / np.float64(mean(y)))


def ratio(numerator, denominator):
    """IEEE division: x/0 gives +-inf, 0/0 gives NaN, never raises."""
    with np.errstate(divide='ignore', invalid='ignore'):
        return float(np.float64(numerator) / np.float64(denominator))
