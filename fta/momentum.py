"""
Momentum and oscillator indicators.

Composed from the moving-average family and elementwise arithmetic; CRSI
adds a sequential up/down streak scan.
"""

import numpy as np
import pandas as pd
from numba import jit
from typing import Tuple

from .core import (
    SeriesLike, as_series, check_period, diff, ewm_mean, lag, median_price,
    rolling_max, rolling_min,
)
from .trend import ema, sma

KST_WINDOW = 10
FISH_BOUND = 0.999


# ============================================================================
# Rate of Change
# ============================================================================

def roc(series: SeriesLike, period: int = 12) -> pd.Series:
    """
    Rate of Change, also referred to as Momentum.

    ROC = 100 * (Close - Close[n]) / Close[n]

    The first ``period`` bars have no reference price and are NaN.
    """
    check_period(period)
    series = as_series(series)
    shifted = lag(series, period)
    return (series - shifted) / shifted * 100


def kst(series: SeriesLike, r1: int = 10, r2: int = 15, r3: int = 20,
        r4: int = 30) -> Tuple[pd.Series, pd.Series]:
    """
    Know Sure Thing.

    Weighted sum of four rate-of-change series, each smoothed by a 10-bar
    SMA. The signal line is a further 10-bar SMA of the sum.

    Returns:
    --------
    k : pd.Series
        KST line
    signal : pd.Series
        Signal line
    """
    series = as_series(series)

    roc1 = sma(roc(series, r1), KST_WINDOW)
    roc2 = sma(roc(series, r2), KST_WINDOW)
    roc3 = sma(roc(series, r3), KST_WINDOW)
    roc4 = sma(roc(series, r4), KST_WINDOW)

    k = roc1 + 2 * roc2 + 3 * roc3 + 4 * roc4
    signal = sma(k, KST_WINDOW)

    return k, signal


# ============================================================================
# Fisher Transform
# ============================================================================

def fish(low: SeriesLike, high: SeriesLike, period: int = 10, adjust: bool = True) -> pd.Series:
    """
    Fisher Transform of the median price.

    The median price is scaled to [-1, 1] against its rolling range, smoothed,
    and mapped through log((1 + x) / (1 - x)). Flat windows (no range) are
    filled with 0 after the first smoothing pass, and the smoothed value is
    held inside (-0.999, 0.999) so that a price pinned to the top or bottom
    of its range stays finite.
    """
    check_period(period)
    high = as_series(high)
    low = as_series(low, index=high.index)

    med = median_price(high, low)
    lowest = rolling_min(med, period)
    highest = rolling_max(med, period)

    raw = 2 * ((med - lowest) / (highest - lowest)) - 1
    raw = raw.replace([np.inf, -np.inf], np.nan)

    # ewm carries the last value across NaN inputs, flat windows must read 0
    smooth = ewm_mean(raw, span=5, adjust=adjust).mask(raw.isna(), 0)
    # keep the log argument finite at the edges of the range
    smooth = smooth.clip(-FISH_BOUND, FISH_BOUND)

    return ewm_mean(np.log((1 + smooth) / (1 - smooth)), span=3, adjust=adjust)


# ============================================================================
# MACD (Moving Average Convergence Divergence)
# ============================================================================

def macd(series: SeriesLike, period_fast: float = 12, period_slow: float = 26,
         period_signal: float = 9, adjust: bool = True) -> Tuple[pd.Series, pd.Series]:
    """
    MACD indicator.

    MACD = EMA(fast) - EMA(slow), signal = EMA(MACD, signal). Periods are
    spans and need not be integers.

    Returns:
    --------
    macd : pd.Series
        MACD line
    signal : pd.Series
        Signal line
    """
    series = as_series(series)

    macd_line = ema(series, period_fast, adjust) - ema(series, period_slow, adjust)
    signal_line = ema(macd_line, period_signal, adjust)

    return macd_line, signal_line


# ============================================================================
# RSI (Relative Strength Index)
# ============================================================================

def rsi(series: SeriesLike, period: int = 14, adjust: bool = True) -> pd.Series:
    """
    Relative Strength Index.

    RSI = 100 - (100 / (1 + RS))
    RS = Average Gain / Average Loss

    Gains and losses use Wilder smoothing (alpha = 1/period, normalized by
    the cumulative weight). Bars with no average loss read 100.
    """
    check_period(period)
    series = as_series(series)

    delta = diff(series, 1)
    up = delta.clip(lower=0)
    down = (-delta).clip(lower=0)

    gain = ewm_mean(up, alpha=1.0 / period, adjust=adjust, bias=True)
    loss = ewm_mean(down, alpha=1.0 / period, adjust=adjust, bias=True)

    rs = gain / loss
    result = 100 - (100 / (1 + rs))
    result[loss == 0] = 100.0

    return result


@jit(nopython=True)
def _streak_calc(close: np.ndarray) -> np.ndarray:
    """Signed count of consecutive up (+) or down (-) closes."""
    length = len(close)
    streak = np.zeros(length)
    count = 0

    for i in range(1, length):
        delta = close[i] - close[i-1]

        if delta > 0:
            count = count + 1 if count > 0 else 1
        elif delta < 0:
            count = count - 1 if count < 0 else -1
        else:
            count = 0

        streak[i] = count

    return streak


def streak(close: SeriesLike) -> pd.Series:
    """Up/down streak length of a close series, 0 on unchanged closes."""
    close = as_series(close)
    values = _streak_calc(close.to_numpy(dtype=np.float64))
    return pd.Series(values, index=close.index)


def crsi(close: SeriesLike, period: int = 3, period_up_down: int = 2,
         period_roc: int = 100, adjust: bool = True) -> pd.Series:
    """
    Connors RSI.

    Average of a short RSI of price, an RSI of the up/down streak length and
    the rate of change over ``period_roc`` bars (NaN treated as 0).
    """
    close = as_series(close)

    price_rsi = rsi(close, period, adjust)
    streak_rsi = rsi(streak(close), period_up_down, adjust)
    rate = roc(close, period_roc).fillna(0)

    return (price_rsi + streak_rsi + rate) / 3


# ============================================================================
# Volume Zone Oscillator
# ============================================================================

def vzo(price: SeriesLike, volume: SeriesLike, period: int = 14, adjust: bool = True) -> pd.Series:
    """
    Volume Zone Oscillator.

    Volume signed by the direction of the price change, smoothed and
    expressed as a percentage of smoothed total volume.
    """
    check_period(period)
    price = as_series(price)
    volume = as_series(volume, index=price.index)

    direction = np.sign(diff(price, 1)).fillna(0)
    dvma = ewm_mean(direction * volume, span=period, adjust=adjust)
    vma = ewm_mean(volume, span=period, adjust=adjust)

    return 100 * (dvma / vma)


# ============================================================================
# Stochastic Oscillator
# ============================================================================

def stoch(high: SeriesLike, low: SeriesLike, close: SeriesLike, period: int = 14) -> pd.Series:
    """
    Stochastic %K as a fraction.

    %K = (Close - Low(n)) / (High(n) - Low(n))
    """
    check_period(period)
    close = as_series(close)
    high = as_series(high, index=close.index)
    low = as_series(low, index=close.index)

    lowest = rolling_min(low, period)
    highest = rolling_max(high, period)

    k = (close - lowest) / (highest - lowest)

    # Handle division by zero
    return k.replace([np.inf, -np.inf], np.nan)


def stochd(high: SeriesLike, low: SeriesLike, close: SeriesLike,
           period: int = 3, stoch_period: int = 14) -> pd.Series:
    """
    Stochastic %D (smoothed %K).

    %D = SMA(%K, n)
    """
    return sma(stoch(high, low, close, stoch_period), period)


def stochrsi(price: SeriesLike, rsi_period: int = 14, stoch_period: int = 14,
             adjust: bool = True) -> pd.Series:
    """
    Stochastic RSI.

    RSI rescaled to [0, 1] by its minimum and maximum over the whole series,
    then smoothed with a ``stoch_period`` SMA.
    """
    rsi_val = rsi(price, rsi_period, adjust)
    lowest = rsi_val.min()
    highest = rsi_val.max()

    return sma((rsi_val - lowest) / (highest - lowest), stoch_period)
