"""
Tests for the detrend engine and missing-value interpolation.
"""

import numpy as np
import pandas as pd
import pytest

from envpred.core.detrend import linear_detrend
from envpred.core.interpolation import interpolate_missing
from envpred.validation import InsufficientDataError, InvalidInputError

from conftest import make_daily_dates, make_seasonal_series


class TestLinearDetrend:
    """OLS detrend against elapsed days."""

    def test_structure(self, daily_seasonal):
        values, dates = daily_seasonal
        result = linear_detrend(values, dates)

        assert len(result) == len(values)
        assert result.predictor[0] == 0
        assert np.all(np.diff(result.predictor) >= 0)
        assert result.dates.equals(pd.DatetimeIndex(dates))

    def test_reconstructs_values(self, daily_seasonal):
        values, dates = daily_seasonal
        result = linear_detrend(values, dates)

        np.testing.assert_allclose(result.fitted() + result.residuals, values, atol=1e-9)

    def test_recovers_slope(self):
        dates = make_daily_dates('2000-01-01', '2009-12-31')
        values = make_seasonal_series(dates, amplitude=0.0, noise_sd=0.1, trend=0.01)
        result = linear_detrend(values, dates)

        assert result.slope == pytest.approx(0.01, rel=1e-2)
        assert result.r_squared > 0.99
        assert result.p_value < 1e-6

    def test_missing_values_stay_missing(self, daily_seasonal):
        values, dates = daily_seasonal
        values = values.copy()
        values[[5, 100, 2000]] = np.nan
        result = linear_detrend(values, dates)

        assert np.isnan(result.residuals).sum() == 3
        assert np.isnan(result.residuals[[5, 100, 2000]]).all()
        assert not np.isnan(result.predictor).any()

    def test_ramp_has_zero_residuals(self):
        dates = make_daily_dates('2000-01-01', '2003-12-31')
        values = 3.0 + 0.5 * np.arange(len(dates))
        result = linear_detrend(values, dates)

        np.testing.assert_allclose(result.residuals, 0.0, atol=1e-8)
        assert result.slope == pytest.approx(0.5)
        assert result.intercept == pytest.approx(3.0)

    def test_uneven_dates_use_elapsed_days(self):
        dates = ['2020-01-01', '2020-01-02', '2020-01-10', '2020-02-01']
        values = [0.0, 1.0, 9.0, 31.0]
        result = linear_detrend(values, dates)

        np.testing.assert_array_equal(result.predictor, [0, 1, 9, 31])
        assert result.slope == pytest.approx(1.0)

    def test_all_missing(self, daily_dates):
        with pytest.raises(InsufficientDataError):
            linear_detrend(np.full(len(daily_dates), np.nan), daily_dates)

    def test_single_present_value(self):
        with pytest.raises(InsufficientDataError):
            linear_detrend([np.nan, 2.0, np.nan], ['2020-01-01', '2020-01-02', '2020-01-03'])

    def test_length_mismatch(self, daily_seasonal):
        values, dates = daily_seasonal
        with pytest.raises(InvalidInputError):
            linear_detrend(values[:-1], dates)
        with pytest.raises(InvalidInputError):
            linear_detrend(values, dates[:100])

    def test_reversed_dates(self, daily_seasonal):
        values, dates = daily_seasonal
        with pytest.raises(InvalidInputError):
            linear_detrend(values, dates[::-1])

    def test_string_values(self, daily_dates):
        with pytest.raises(InvalidInputError):
            linear_detrend(['a'] * len(daily_dates), daily_dates)

    def test_iso_string_dates_match_dates(self, daily_seasonal):
        values, dates = daily_seasonal
        as_str = [d.strftime('%Y-%m-%d') for d in dates]

        a = linear_detrend(values, dates)
        b = linear_detrend(values, as_str)
        np.testing.assert_array_equal(a.residuals, b.residuals)


class TestInterpolateMissing:
    """Index-based linear fill."""

    def test_interior_gap_is_linear(self):
        out = interpolate_missing(np.array([1.0, np.nan, np.nan, 4.0]))
        np.testing.assert_allclose(out, [1.0, 2.0, 3.0, 4.0])

    def test_edges_take_nearest(self):
        out = interpolate_missing(np.array([np.nan, 2.0, np.nan, 6.0, np.nan]))
        np.testing.assert_allclose(out, [2.0, 2.0, 4.0, 6.0, 6.0])

    def test_input_untouched(self):
        values = np.array([1.0, np.nan, 3.0])
        interpolate_missing(values)
        assert np.isnan(values[1])

    def test_no_missing_returns_copy(self):
        values = np.array([1.0, 2.0])
        out = interpolate_missing(values)
        np.testing.assert_array_equal(out, values)
        assert out is not values

    def test_needs_two_values(self):
        with pytest.raises(InsufficientDataError):
            interpolate_missing(np.array([np.nan, 1.0, np.nan]))
