"""
Momentum and oscillator tests.
"""

import numpy as np
import pandas as pd
import pytest

from fta.momentum import (
    crsi, fish, kst, macd, roc, rsi, stoch, stochd, stochrsi, streak, vzo,
)
from fta.trend import ema, sma


class TestRoc:
    """ROC"""

    def test_percent_change(self):
        result = roc(pd.Series([1.0, 2.0, 4.0]), 1)

        assert np.isnan(result.iloc[0])
        assert result.iloc[1:].tolist() == [100.0, 100.0]

    def test_warm_up_is_nan(self, ohlcv):
        result = roc(ohlcv.close, 12)

        assert result.iloc[:12].isna().all()
        assert not result.iloc[12:].isna().any()


class TestKst:
    """KST"""

    def test_weighted_sum_of_smoothed_rocs(self, ohlcv):
        k, signal = kst(ohlcv.close, 10, 15, 20, 30)

        expected = (
            sma(roc(ohlcv.close, 10), 10)
            + 2 * sma(roc(ohlcv.close, 15), 10)
            + 3 * sma(roc(ohlcv.close, 20), 10)
            + 4 * sma(roc(ohlcv.close, 30), 10)
        )
        pd.testing.assert_series_equal(k, expected)
        pd.testing.assert_series_equal(signal, sma(k, 10))


class TestFish:
    """Fisher Transform"""

    def test_flat_prices_read_zero(self):
        flat = pd.Series([10.0] * 15)

        result = fish(flat, flat, 10)

        np.testing.assert_allclose(result, 0.0)

    def test_flat_tail_after_trend_decays_to_zero(self):
        prices = pd.Series(np.concatenate([np.arange(1.0, 21.0), [20.0] * 15]))

        result = fish(prices, prices, 5)

        # the smoothed input is 0 from bar 23 on, only the final ewm tail remains
        assert result.iloc[19] > 7.0
        assert np.abs(result.iloc[-5:]).max() < 0.05

    def test_finite_on_random_walk(self, ohlcv):
        result = fish(ohlcv.low, ohlcv.high, 10)

        assert np.isfinite(result).all()

    def test_sign_follows_position_in_range(self):
        high = pd.Series(np.arange(1.0, 31.0))
        low = high - 1

        rising = fish(low, high, 10)
        falling = fish(low.iloc[::-1].reset_index(drop=True), high.iloc[::-1].reset_index(drop=True), 10)

        assert (rising.iloc[1:] > 0).all()
        assert (falling.iloc[1:] < 0).all()


class TestMacd:
    """MACD"""

    def test_macd_is_ema_difference(self, ohlcv):
        line, signal = macd(ohlcv.close, 12, 26, 9)

        pd.testing.assert_series_equal(line, ema(ohlcv.close, 12) - ema(ohlcv.close, 26))
        pd.testing.assert_series_equal(signal, ema(line, 9))

    def test_float_spans(self, ohlcv):
        line, _ = macd(ohlcv.close, 12.5, 26.5, 9.5, adjust=False)

        expected = ema(ohlcv.close, 12.5, False) - ema(ohlcv.close, 26.5, False)
        pd.testing.assert_series_equal(line, expected)


class TestRsi:
    """RSI"""

    def test_constant_series_reads_100(self):
        result = rsi(pd.Series([7.0] * 30), 14)

        assert np.isnan(result.iloc[0])
        assert (result.iloc[1:] == 100.0).all()

    def test_falling_series_reads_zero(self):
        result = rsi(pd.Series(np.arange(30.0, 0.0, -1.0)), 14)

        np.testing.assert_allclose(result.iloc[1:], 0.0)

    def test_wilder_smoothing(self):
        # gains [nan, 1, 0], losses [nan, 0, 1], alpha 1/2 normalized by
        # the cumulative weight: gain = 0.5 / 1.5, loss = 1 / 1.5
        result = rsi(pd.Series([1.0, 2.0, 1.0]), 2)

        assert result.iloc[1] == 100.0
        assert result.iloc[2] == pytest.approx(100.0 / 3.0)

    def test_adjust_does_not_change_wilder_smoothing(self, ohlcv):
        pd.testing.assert_series_equal(rsi(ohlcv.close, 14, True), rsi(ohlcv.close, 14, False))

    def test_bounded(self, ohlcv):
        result = rsi(ohlcv.close, 14).iloc[1:]

        assert ((result >= 0) & (result <= 100)).all()


class TestCrsi:
    """Connors RSI"""

    def test_streak(self):
        result = streak(pd.Series([1.0, 2.0, 3.0, 3.0, 2.0, 1.0, 2.0]))

        assert result.tolist() == [0.0, 1.0, 2.0, 0.0, -1.0, -2.0, 1.0]

    def test_streak_keeps_index(self, ohlcv):
        assert streak(ohlcv.close).index.equals(ohlcv.index)

    def test_average_of_components(self, ohlcv):
        result = crsi(ohlcv.close, 3, 2, 100)

        expected = (
            rsi(ohlcv.close, 3)
            + rsi(streak(ohlcv.close), 2)
            + roc(ohlcv.close, 100).fillna(0)
        ) / 3
        pd.testing.assert_series_equal(result, expected)


class TestVzo:
    """Volume Zone Oscillator"""

    def test_rising_price(self):
        price = pd.Series(np.arange(1.0, 21.0))
        volume = pd.Series([100.0] * 20)

        result = vzo(price, volume, 14)

        assert result.iloc[0] == 0.0
        assert (result.iloc[1:] > 0).all()
        assert (result <= 100).all()

    def test_bounded(self, ohlcv):
        result = vzo(ohlcv.close, ohlcv.volume, 14)

        assert ((result >= -100) & (result <= 100)).all()


class TestStoch:
    """Stochastic %K / %D"""

    def test_fraction_of_range(self):
        high = pd.Series([3.0, 4.0, 5.0])
        low = pd.Series([1.0, 2.0, 3.0])
        close = pd.Series([2.0, 3.0, 5.0])

        result = stoch(high, low, close, 2)

        assert result.tolist() == pytest.approx([0.5, 2.0 / 3.0, 1.0])

    def test_flat_range_is_nan(self):
        flat = pd.Series([5.0, 5.0, 5.0])

        result = stoch(flat, flat, flat, 2)

        assert result.isna().all()

    def test_stochd_is_sma_of_stoch(self, ohlcv):
        result = stochd(ohlcv.high, ohlcv.low, ohlcv.close, 3, 14)

        expected = sma(stoch(ohlcv.high, ohlcv.low, ohlcv.close, 14), 3)
        pd.testing.assert_series_equal(result, expected)

    def test_stochrsi_uses_global_range(self, ohlcv):
        result = stochrsi(ohlcv.close, 14, 14)

        rsi_val = rsi(ohlcv.close, 14)
        scaled = (rsi_val - rsi_val.min()) / (rsi_val.max() - rsi_val.min())
        pd.testing.assert_series_equal(result, sma(scaled, 14))
        assert ((result.dropna() >= 0) & (result.dropna() <= 1)).all()
