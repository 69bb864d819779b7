"""
Writer: all parquet writes go through here.

No other module should call df.write_parquet directly.
"""

from pathlib import Path
from typing import Dict, Optional

import polars as pl

from envpred.models import ResultRecord

OUTPUT_FILES = {
    'results': 'results.parquet',
    'series': 'series.parquet',
    'spectrum': 'spectrum.parquet',
}


def _safe_write(name: str, df: Optional[pl.DataFrame], path: Path, verbose: bool = True) -> bool:
    """
    Guard against writing invalid parquet files.

    Skips frames that are missing (intermediates not attached) or that have
    no columns or no rows.

    Returns True if a file was written, False if skipped.
    """
    if df is None:
        return False

    if len(df.columns) == 0 or len(df) == 0:
        if verbose:
            print(f"  !! Skipped {name} -> {path} ({len(df.columns)} columns, {len(df)} rows)")
        return False

    df.write_parquet(str(path))
    return True


def write_results(record: ResultRecord, output_dir: str, verbose: bool = True) -> Dict[str, Path]:
    """
    Write the statistics row, the per-observation series and the spectrum.

    Args:
        record: Pipeline result
        output_dir: Directory to write into (created if missing)
        verbose: Print path on write

    Returns:
        Mapping of output name to written path (skipped outputs omitted)
    """
    out = Path(output_dir)
    out.mkdir(parents=True, exist_ok=True)

    frames = {
        'results': record.to_frame(),
        'series': record.series_frame(),
        'spectrum': record.spectrum.to_frame() if record.spectrum is not None else None,
    }

    written = {}
    for name, df in frames.items():
        path = out / OUTPUT_FILES[name]
        if _safe_write(name, df, path, verbose=verbose):
            written[name] = path
            if verbose:
                print(f"  -> {path} ({len(df)} rows)")

    return written
