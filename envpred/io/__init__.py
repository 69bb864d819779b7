"""Series / config / result I/O."""

from envpred.io.config import PredictabilityConfig, load_config
from envpred.io.reader import load_series, read_table
from envpred.io.writer import write_results

__all__ = [
    'PredictabilityConfig',
    'load_config',
    'load_series',
    'read_table',
    'write_results',
]
