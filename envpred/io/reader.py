"""
Reader: all series reads go through here.

No other module should call pl.read_csv / pl.read_parquet directly.
"""

from pathlib import Path
from typing import List, Tuple

import numpy as np
import polars as pl

from envpred.validation import InvalidInputError

DEFAULT_VALUE_COLUMN = 'time_series'
DEFAULT_DATE_COLUMN = 'dates'


def read_table(path: str) -> pl.DataFrame:
    """Read a CSV or Parquet file into a DataFrame."""
    p = Path(path)
    if not p.is_file():
        raise FileNotFoundError(f"No series file at {path}")

    if p.suffix == '.parquet':
        return pl.read_parquet(str(p))
    if p.suffix in ('.csv', '.txt'):
        return pl.read_csv(str(p), try_parse_dates=True, null_values=['NA', ''])

    raise InvalidInputError(f"Unsupported series format '{p.suffix}' (expected .csv or .parquet)")


def load_series(
    path: str,
    value_column: str = DEFAULT_VALUE_COLUMN,
    date_column: str = DEFAULT_DATE_COLUMN,
) -> Tuple[np.ndarray, List]:
    """
    Load one (dates, values) series in file order.

    Returns:
        (values as float64 with NaN for nulls, dates as a list of
        datetime.date or ISO strings)
    """
    df = read_table(path)

    missing = [c for c in (value_column, date_column) if c not in df.columns]
    if missing:
        raise InvalidInputError(
            f"{path} is missing column(s) {', '.join(missing)}; "
            f"available: {', '.join(df.columns)}"
        )

    if df.schema[date_column] == pl.Datetime:
        df = df.with_columns(pl.col(date_column).dt.date())

    try:
        values = df[value_column].cast(pl.Float64).fill_null(float('nan')).to_numpy()
    except (pl.exceptions.InvalidOperationError, pl.exceptions.ComputeError) as e:
        raise InvalidInputError(f"column '{value_column}' is not numeric: {e}") from e

    return values, df[date_column].to_list()
