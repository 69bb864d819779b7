"""
envpred Runner
==============

Assembles the predictability record for one environmental time series.
Pure orchestration; the computation lives in envpred.core.

Flow:
    raw series + dates
      -> (optional) linear fill of missing values
      -> linear detrend -> monthly seasonal curve
      -> seasonality ratios + spectral noise colour
    raw series + dates -> Colwell indices (independent of the detrending)
      -> ResultRecord

Usage:
    python -m envpred data/sst.csv --delta 1
    python -m envpred data/npp.parquet --delta 8 --uneven --noise-method irregular
    python -m envpred data/series.csv --config envpred.yaml --output out/
"""

import argparse
import logging
from pathlib import Path
from typing import Any, Optional, Sequence

import numpy as np

from envpred.core import colwell
from envpred.core import seasonality
from envpred.core._stats import coefficient_of_variation, mean, sample_variance
from envpred.core.calendar import month_labels, year_labels
from envpred.core import interpolation
from envpred.core.monthly_bins import detrend_and_bin
from envpred.core.spectral import Distribution, NoiseMethod, noise_colour
from envpred.io.config import PredictabilityConfig, load_config
from envpred.io.reader import DEFAULT_DATE_COLUMN, DEFAULT_VALUE_COLUMN, load_series
from envpred.io.writer import write_results
from envpred.models import ColwellResult, ResultRecord
from envpred.validation import (
    IncompatibleMethodError,
    emit_advisories,
    inspect_series,
    validate_delta,
    validate_n_states,
    validate_series,
)

logger = logging.getLogger(__name__)


def compute_colwell(values: Sequence[Any], dates: Sequence[Any], n_states: int = 11) -> ColwellResult:
    """Colwell constancy, contingency and predictability of the raw series."""
    return colwell.compute(values, dates, n_states)


def compute_predictability(
    values: Sequence[Any],
    dates: Sequence[Any],
    delta: float,
    distribution='regular',
    interpolate_missing: bool = False,
    noise_method='regular',
    n_states: int = 11,
    show_warnings: bool = True,
    min_recommended_months: int = 120,
) -> ResultRecord:
    """
    Seasonality, noise colour and Colwell indices of one series.

    Args:
        values: Observations (None / NaN for missing)
        dates: Strictly increasing calendar dates (or YYYY-MM-DD strings)
        delta: Nominal sampling interval, in the series' own unit
        distribution: 'regular' (evenly spaced) or 'irregular'; True/False
            are read as is_uneven
        interpolate_missing: Fill missing values linearly before
            detrending. Colwell indices always use the raw values.
        noise_method: 'regular' periodogram or 'irregular' Lomb-Scargle
        n_states: Colwell value states
        show_warnings: Emit SeriesAdvisoryWarning for short series, missing
            values, and series starting and ending in different months
        min_recommended_months: Month-year count below which a series is
            reported as short

    Returns:
        ResultRecord with intermediates attached

    Raises:
        InvalidInputError, InvalidArgumentError, IncompatibleMethodError,
        InsufficientDataError
    """
    delta = validate_delta(delta)
    distribution = Distribution.parse(distribution)
    noise_method = NoiseMethod.parse(noise_method)
    n_states = validate_n_states(n_states)
    raw, dates = validate_series(values, dates)

    if distribution.is_uneven and noise_method is NoiseMethod.REGULAR:
        raise IncompatibleMethodError(
            "Time series is uneven, please use noise method 'irregular' (Lomb-Scargle)"
        )

    series_n = len(raw)
    n_na = int(np.isnan(raw).sum())

    series = raw
    if n_na and interpolate_missing:
        series = interpolation.interpolate_missing(raw)

    if show_warnings:
        emit_advisories(inspect_series(series, dates, min_recommended_months))

    logger.debug("predictability: n=%d missing=%d method=%s distribution=%s",
                 series_n, n_na, noise_method.value, distribution.value)

    detrended, binned = detrend_and_bin(series, dates)
    seasonal = seasonality.compute(binned.interpolated_season, binned.unpredicted_residuals)
    spectrum, noise_model = noise_colour(
        binned.unpredicted_residuals,
        detrended.predictor,
        method=noise_method,
        delta=delta,
        is_uneven=distribution.is_uneven,
    )
    colwell_result = compute_colwell(raw, dates, n_states)

    return ResultRecord(
        series_n=series_n,
        n_na=n_na,
        prop_na=n_na / series_n,
        n_yrs=int(len(np.unique(year_labels(dates)))),
        n_months=int(len(np.unique(month_labels(dates)))),
        n_days=int(dates.nunique()),
        frequency=2.0 / (series_n * delta),
        nyquist_freq=1.0 / (2.0 * delta),
        raw_mean=mean(series),
        raw_var=sample_variance(series),
        raw_cv=coefficient_of_variation(series),
        predicted_var=seasonal.predicted_var,
        unpredicted_var=seasonal.unpredicted_var,
        unbounded_seasonality=seasonal.unbounded_seasonality,
        bounded_seasonality=seasonal.bounded_seasonality,
        env_col=noise_model.colour,
        colwell_c=colwell_result.constancy,
        colwell_m=colwell_result.contingency,
        colwell_p=colwell_result.predictability,
        detrended=detrended,
        binned=binned,
        spectrum=spectrum,
        noise_model=noise_model,
        colwell=colwell_result,
    )


def run(
    series_path: str,
    config: Optional[PredictabilityConfig] = None,
    output_dir: Optional[str] = None,
    value_column: str = DEFAULT_VALUE_COLUMN,
    date_column: str = DEFAULT_DATE_COLUMN,
    verbose: bool = True,
) -> ResultRecord:
    """
    Load a series file, compute its record and optionally write outputs.

    Args:
        series_path: CSV or Parquet file with a date and a value column
        config: Run options (defaults if None)
        output_dir: Write results/series/spectrum parquet here if given
        value_column: Name of the value column
        date_column: Name of the date column
        verbose: Print progress

    Returns:
        ResultRecord
    """
    config = config or PredictabilityConfig()
    values, dates = load_series(series_path, value_column=value_column, date_column=date_column)

    if verbose:
        print("=" * 70)
        print("ENVPRED")
        print("=" * 70)
        print(f"Input:        {series_path}")
        print(f"Observations: {len(values)}")
        print(f"Delta:        {config.delta}")
        print(f"Distribution: {config.distribution}")
        print(f"Noise method: {config.noise_method}")
        print(f"Interpolate:  {config.interpolate_missing}")
        print(f"States:       {config.n_states}")
        print()

    record = compute_predictability(
        values,
        dates,
        delta=config.delta,
        distribution=config.distribution,
        interpolate_missing=config.interpolate_missing,
        noise_method=config.noise_method,
        n_states=config.n_states,
        show_warnings=config.show_warnings,
        min_recommended_months=config.min_recommended_months,
    )

    if verbose:
        for name, value in record.to_dict().items():
            print(f"  {name:<22} {value}")
        print()

    if output_dir:
        write_results(record, output_dir, verbose=verbose)

    return record


def main():
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Environmental predictability of a time series",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Computes seasonality, noise colour and Colwell indices for one series.

Usage:
  python -m envpred data/sst.csv --delta 1
  python -m envpred data/npp.parquet --delta 8 --uneven --noise-method irregular
  python -m envpred data/series.csv --config envpred.yaml --output out/
"""
    )
    parser.add_argument('series_path', help='CSV or Parquet file with the series')
    parser.add_argument('--config', help='envpred.yaml (or a directory containing one)')
    parser.add_argument('--delta', type=float, help='Sampling interval of the series')
    parser.add_argument('--uneven', action='store_true', default=None,
                        help='Series is unevenly distributed in time')
    parser.add_argument('--interpolate', action='store_true', default=None,
                        help='Linearly interpolate missing values before detrending')
    parser.add_argument('--noise-method', choices=['regular', 'irregular', 'spectrum', 'lomb_scargle'],
                        help='Spectrum estimator for the noise colour')
    parser.add_argument('--n-states', type=int, help='Colwell value states (default 11)')
    parser.add_argument('--value-column', default=DEFAULT_VALUE_COLUMN)
    parser.add_argument('--date-column', default=DEFAULT_DATE_COLUMN)
    parser.add_argument('--output', help='Directory for results/series/spectrum parquet')
    parser.add_argument('--no-warnings', action='store_true', help='Suppress advisory warnings')
    parser.add_argument('-v', '--verbose', action='store_true', help='Debug logging')
    parser.add_argument('-q', '--quiet', action='store_true', help='Suppress output')

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s',
    )

    config = load_config(args.config) if args.config else PredictabilityConfig()
    config = config.override(
        delta=args.delta,
        distribution='irregular' if args.uneven else None,
        interpolate_missing=args.interpolate,
        noise_method=args.noise_method,
        n_states=args.n_states,
        show_warnings=False if args.no_warnings else None,
    )

    output_dir = str(Path(args.output)) if args.output else None

    run(
        args.series_path,
        config=config,
        output_dir=output_dir,
        value_column=args.value_column,
        date_column=args.date_column,
        verbose=not args.quiet,
    )


if __name__ == '__main__':
    main()
