"""
Bollinger Bands tests.
"""

import numpy as np
import pandas as pd
import pytest

from fta.trend import sma
from fta.volatility import bbands, percent_b


class TestBbands:
    """BBANDS"""

    def test_band_order(self, ohlcv):
        ma = sma(ohlcv.close, 20)

        upper, lower = bbands(ohlcv.close, ma, 20, 2.0)

        assert (upper >= ma).all()
        assert (ma >= lower).all()

    def test_width_matches_rolling_std(self, ohlcv):
        ma = sma(ohlcv.close, 20)

        upper, lower = bbands(ohlcv.close, ma, 20, 2.5)

        expected = ohlcv.close.rolling(20).std()
        np.testing.assert_allclose((upper - ma).iloc[19:] / 2.5, expected.iloc[19:])
        np.testing.assert_allclose((ma - lower).iloc[19:] / 2.5, expected.iloc[19:])

    def test_single_bar_window_has_zero_width(self):
        series = pd.Series([1.0, 2.0, 3.0, 4.0])
        ma = sma(series, 2)

        upper, lower = bbands(series, ma, 2, 2.0)

        assert upper.iloc[0] == lower.iloc[0] == 1.0
        assert upper.iloc[1] == pytest.approx(1.5 + 2.0 * np.sqrt(0.5))

    def test_missing_ma_propagates_nan(self):
        series = pd.Series([1.0, 2.0, 3.0])
        ma = pd.Series([np.nan, 1.5, 2.5])

        upper, lower = bbands(series, ma, 2, 2.0)

        assert np.isnan(upper.iloc[0]) and np.isnan(lower.iloc[0])
        assert upper.iloc[1] > lower.iloc[1]

    def test_accepts_array_ma(self, ohlcv):
        ma = sma(ohlcv.close, 20)

        upper, _ = bbands(ohlcv.close, ma.to_numpy(), 20, 2.0)

        assert upper.index.equals(ohlcv.index)
        pd.testing.assert_series_equal(upper, bbands(ohlcv.close, ma, 20, 2.0)[0], check_names=False)


class TestPercentB:
    """PercentB"""

    def test_position_within_bands(self, ohlcv):
        ma = sma(ohlcv.close, 20)

        result = percent_b(ohlcv.close, ma, 20, 2.0)

        upper, lower = bbands(ohlcv.close, ma, 20, 2.0)
        expected = (ohlcv.close - lower) / (upper - lower)
        pd.testing.assert_series_equal(result, expected)

    def test_flat_bands_are_not_guarded(self):
        series = pd.Series([5.0] * 10)

        result = percent_b(series, sma(series, 3), 3, 2.0)

        assert result.isna().all()
