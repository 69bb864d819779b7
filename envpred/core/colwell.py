"""
Colwell Engine
==============

Colwell (1974) indices of periodic phenomena, computed on the raw series.

Steps:
    1. Mean value per (month, year), ignoring missing values
    2. Discretize those means into n_states equal-width, left-closed states
    3. Count (state, month) occurrences into a contingency table
    4. Shannon entropies (base 2) of the month marginal (HX), the state
       marginal (HY) and the joint table (HXY)

Metrics:
    - constancy C = 1 - HY / log2(n_states)
    - contingency M = (HX + HY - HXY) / log2(n_states)
    - predictability P = C + M

Usage:
    from envpred.core.colwell import compute
    result = compute(values, dates, n_states=11)
"""

import logging
from typing import Any, Sequence, Tuple

import numpy as np
import pandas as pd
from scipy.stats import entropy

from envpred.core.calendar import month_labels, year_labels
from envpred.models import ColwellResult, ColwellTable
from envpred.validation import (
    InsufficientDataError,
    validate_n_states,
    validate_series,
)

logger = logging.getLogger(__name__)


def month_year_means(values: np.ndarray, dates: pd.DatetimeIndex) -> pd.DataFrame:
    """
    Mean per (month, year) over non-missing values.

    Month-year combinations with no non-missing value are dropped.

    Returns:
        DataFrame with columns month, year, mean (sorted by year, month)
    """
    frame = pd.DataFrame({
        'month': month_labels(dates),
        'year': year_labels(dates),
        'value': values,
    }).dropna(subset=['value'])

    means = (
        frame.groupby(['year', 'month'], sort=True)['value']
        .mean()
        .rename('mean')
        .reset_index()
    )
    return means[['month', 'year', 'mean']]


def state_breaks(x: np.ndarray, n_states: int) -> np.ndarray:
    """
    n_states + 1 equal-width breaks over the range of x.

    The outer breaks are pushed out by 1/1000 of the range so the extremes
    fall strictly inside. A zero range is widened around the value instead.
    """
    lo, hi = float(np.min(x)), float(np.max(x))
    dx = hi - lo

    if dx == 0:
        dx = abs(lo) if lo != 0 else 1.0
        return np.linspace(lo - dx / 1000, hi + dx / 1000, n_states + 1)

    breaks = np.linspace(lo, hi, n_states + 1)
    breaks[0] = lo - dx / 1000
    breaks[-1] = hi + dx / 1000
    return breaks


def discretize(x: np.ndarray, n_states: int) -> Tuple[np.ndarray, np.ndarray]:
    """
    State index (0 .. n_states - 1) for each value.

    Intervals are [b_i, b_i+1); the top interval is also closed on the right.

    Returns:
        (state indices, breaks)
    """
    x = np.asarray(x, dtype=np.float64)
    breaks = state_breaks(x, n_states)
    states = np.searchsorted(breaks, x, side='right') - 1
    return np.clip(states, 0, n_states - 1), breaks


def contingency_table(states: np.ndarray, months: np.ndarray, n_states: int,
                      breaks: np.ndarray) -> ColwellTable:
    """Counts of (state, month) pairs. Rows cover every state; columns only months present."""
    present_months = np.unique(months)
    col = np.searchsorted(present_months, months)

    counts = np.zeros((n_states, len(present_months)), dtype=np.int64)
    np.add.at(counts, (states, col), 1)

    return ColwellTable(
        counts=counts,
        months=tuple(int(m) for m in present_months),
        breaks=breaks,
    )


def indices(table: ColwellTable) -> Tuple[float, float, float]:
    """(constancy, contingency, predictability) from a contingency table."""
    counts = table.counts.astype(np.float64)

    hx = float(entropy(counts.sum(axis=0), base=2))
    hy = float(entropy(counts.sum(axis=1), base=2))
    hxy = float(entropy(counts.ravel(), base=2))

    scale = np.log2(table.n_states)
    constancy = 1.0 - hy / scale
    contingency = (hx + hy - hxy) / scale
    return float(constancy), float(contingency), float(constancy + contingency)


def compute(values: Sequence[Any], dates: Sequence[Any], n_states: int = 11) -> ColwellResult:
    """
    Colwell constancy, contingency and predictability.

    Args:
        values: Raw observations (None / NaN for missing)
        dates: Strictly increasing calendar dates
        n_states: Number of discrete value states (>= 2)

    Returns:
        ColwellResult, with the contingency table attached

    Raises:
        InvalidArgumentError: n_states < 2 or not an integer
        InvalidInputError: malformed series
        InsufficientDataError: no non-missing value
    """
    n_states = validate_n_states(n_states)
    y, d = validate_series(values, dates)

    means = month_year_means(y, d)
    if len(means) == 0:
        raise InsufficientDataError("Colwell indices need at least one non-missing value")

    states, breaks = discretize(means['mean'].to_numpy(), n_states)
    table = contingency_table(states, means['month'].to_numpy(), n_states, breaks)
    constancy, contingency, predictability = indices(table)

    logger.debug("colwell: %d month-year bins, %d states, C=%.4f M=%.4f",
                 len(means), n_states, constancy, contingency)

    return ColwellResult(
        constancy=constancy,
        contingency=contingency,
        predictability=predictability,
        table=table,
    )
