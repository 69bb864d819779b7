"""
Tests for series reading, config loading, result writing and the CLI.
"""

import sys
from dataclasses import replace

import numpy as np
import polars as pl
import pytest

from envpred.io.config import PredictabilityConfig, load_config
from envpred.io.reader import load_series, read_table
from envpred.io.writer import OUTPUT_FILES, write_results
from envpred.models import SpectrumTable
from envpred.run import compute_predictability, main, run
from envpred.validation import InvalidArgumentError, InvalidInputError


@pytest.fixture
def seasonal_csv(tmp_path, daily_seasonal):
    values, dates = daily_seasonal
    path = tmp_path / 'series.csv'
    pl.DataFrame({
        'dates': list(dates.date),
        'time_series': values,
    }).write_csv(str(path))
    return path


@pytest.fixture
def gappy_parquet(tmp_path, irregular_gappy):
    values, dates = irregular_gappy
    path = tmp_path / 'gappy.parquet'
    pl.DataFrame({
        'day': dates,
        'npp': [None if np.isnan(v) else float(v) for v in values],
    }).write_parquet(str(path))
    return path


class TestReader:
    """CSV / Parquet series loading."""

    def test_csv_round_trip(self, seasonal_csv, daily_seasonal):
        values, dates = load_series(str(seasonal_csv))

        np.testing.assert_allclose(values, daily_seasonal[0])
        assert len(dates) == len(values)

    def test_parquet_nulls_become_nan(self, gappy_parquet):
        values, dates = load_series(str(gappy_parquet), value_column='npp', date_column='day')
        assert np.isnan(values).sum() == 30

    def test_na_strings_in_csv(self, tmp_path):
        path = tmp_path / 'na.csv'
        path.write_text("dates,time_series\n2020-01-01,1.5\n2020-01-02,NA\n2020-01-03,\n")
        values, dates = load_series(str(path))

        assert np.isnan(values[1]) and np.isnan(values[2])
        assert values[0] == 1.5

    def test_missing_column(self, seasonal_csv):
        with pytest.raises(InvalidInputError, match='missing column'):
            load_series(str(seasonal_csv), value_column='sst')

    def test_non_numeric_values(self, tmp_path):
        path = tmp_path / 'bad.csv'
        path.write_text("dates,time_series\n2020-01-01,warm\n2020-01-02,cold\n")
        with pytest.raises(InvalidInputError):
            load_series(str(path))

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            read_table(str(tmp_path / 'nope.csv'))

    def test_unsupported_format(self, tmp_path):
        path = tmp_path / 'series.xlsx'
        path.write_bytes(b'')
        with pytest.raises(InvalidInputError):
            read_table(str(path))

    def test_file_order_kept(self, tmp_path):
        path = tmp_path / 'reversed.csv'
        path.write_text("dates,time_series\n2020-01-02,1\n2020-01-01,2\n")
        _, dates = load_series(str(path))

        # ordering is left for validation to reject
        assert str(dates[0]) == '2020-01-02'


class TestConfig:
    """envpred.yaml parsing and validation."""

    def test_defaults(self):
        config = PredictabilityConfig()
        assert config.delta == 1.0
        assert config.noise_method == 'regular'
        assert config.n_states == 11

    def test_load_from_directory(self, tmp_path):
        (tmp_path / 'envpred.yaml').write_text(
            "delta: 8\ndistribution: irregular\nnoise_method: lomb_scargle\nn_states: 5\n"
        )
        config = load_config(str(tmp_path))

        assert config.delta == 8.0
        assert config.distribution == 'irregular'
        assert config.noise_method == 'irregular'
        assert config.n_states == 5

    def test_load_file(self, tmp_path):
        path = tmp_path / 'custom.yml'
        path.write_text("interpolate_missing: true\n")
        assert load_config(str(path)).interpolate_missing is True

    def test_empty_file(self, tmp_path):
        path = tmp_path / 'envpred.yaml'
        path.write_text("")
        assert load_config(str(path)) == PredictabilityConfig()

    def test_unknown_key(self, tmp_path):
        (tmp_path / 'envpred.yaml').write_text("delta: 1\nwindow: hann\n")
        with pytest.raises(InvalidArgumentError, match='window'):
            load_config(str(tmp_path))

    def test_not_a_mapping(self, tmp_path):
        (tmp_path / 'envpred.yaml').write_text("- 1\n- 2\n")
        with pytest.raises(InvalidArgumentError):
            load_config(str(tmp_path))

    def test_missing(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(str(tmp_path))

    @pytest.mark.parametrize('kwargs', [
        {'delta': -1},
        {'n_states': 1},
        {'noise_method': 'fft'},
        {'min_recommended_months': -5},
    ])
    def test_invalid_values(self, kwargs):
        with pytest.raises(InvalidArgumentError):
            PredictabilityConfig(**kwargs)

    def test_override_skips_none(self):
        config = PredictabilityConfig(delta=4).override(delta=None, n_states=3)
        assert config.delta == 4.0
        assert config.n_states == 3


class TestWriter:
    """Parquet outputs."""

    def test_writes_three_files(self, tmp_path, daily_seasonal):
        record = compute_predictability(*daily_seasonal, delta=1, show_warnings=False)
        written = write_results(record, str(tmp_path / 'out'), verbose=False)

        assert set(written) == set(OUTPUT_FILES)
        results = pl.read_parquet(str(written['results']))
        series = pl.read_parquet(str(written['series']))
        spectrum = pl.read_parquet(str(written['spectrum']))

        assert len(results) == 1
        assert results['bounded_seasonality'][0] == pytest.approx(record.bounded_seasonality)
        assert len(series) == len(daily_seasonal[0])
        assert spectrum.columns == ['freq', 'spec']

    def test_skips_detached_and_empty_tables(self, tmp_path, daily_seasonal, capsys):
        """Missing intermediates and zero-row tables produce no file."""
        record = compute_predictability(*daily_seasonal, delta=1, show_warnings=False)
        record = replace(
            record,
            detrended=None,
            spectrum=SpectrumTable(frequency=np.array([]), power=np.array([])),
        )
        out = tmp_path / 'out'
        written = write_results(record, str(out), verbose=True)

        assert set(written) == {'results'}
        assert not (out / 'series.parquet').exists()
        assert not (out / 'spectrum.parquet').exists()
        assert 'Skipped spectrum' in capsys.readouterr().out


class TestRun:
    """File-to-record runner and CLI."""

    def test_run_with_config(self, gappy_parquet, tmp_path):
        config = PredictabilityConfig(delta=8, distribution='irregular',
                                      noise_method='irregular', show_warnings=False)
        record = run(str(gappy_parquet), config=config, output_dir=str(tmp_path / 'out'),
                     value_column='npp', date_column='day', verbose=False)

        assert record.n_na == 30
        assert (tmp_path / 'out' / 'results.parquet').exists()

    def test_run_rejects_gaps_with_regular_method(self, gappy_parquet):
        config = PredictabilityConfig(delta=8, show_warnings=False)
        with pytest.raises(ValueError):
            run(str(gappy_parquet), config=config, value_column='npp',
                date_column='day', verbose=False)

    def test_main(self, seasonal_csv, tmp_path, monkeypatch):
        """Full CLI run writes the results table."""
        out = tmp_path / 'cli'
        monkeypatch.setattr(sys, 'argv', [
            'envpred', str(seasonal_csv), '--delta', '1', '--no-warnings',
            '--output', str(out), '-q',
        ])
        main()

        results = pl.read_parquet(str(out / 'results.parquet'))
        assert results['series_n'][0] == 4018

    def test_main_uneven(self, gappy_parquet, tmp_path, monkeypatch):
        config = tmp_path / 'envpred.yaml'
        config.write_text("noise_method: irregular\nshow_warnings: false\n")
        out = tmp_path / 'cli'
        monkeypatch.setattr(sys, 'argv', [
            'envpred', str(gappy_parquet), '--config', str(config), '--delta', '8',
            '--uneven', '--value-column', 'npp', '--date-column', 'day',
            '--output', str(out), '-q',
        ])
        main()

        spectrum = pl.read_parquet(str(out / 'spectrum.parquet'))
        assert len(spectrum) > 0

    def test_main_verbose_output(self, seasonal_csv, monkeypatch, capsys):
        monkeypatch.setattr(sys, 'argv', [
            'envpred', str(seasonal_csv), '--n-states', '5', '--no-warnings',
        ])
        main()

        out = capsys.readouterr().out
        assert 'ENVPRED' in out
        assert 'colwell_p' in out
