"""
Trend indicators and moving averages.

Moving-average family (SMA, SMM, SSMA, EMA, WMA, HMA) and the Parabolic
Stop-And-Reverse trend detector.
"""

import logging

import numpy as np
import pandas as pd
from numba import jit
from typing import Tuple

from .core import SeriesLike, as_series, check_period, ewm_mean, rolling_mean, rolling_median

logger = logging.getLogger(__name__)


# ============================================================================
# Moving Averages
# ============================================================================

def sma(series: SeriesLike, period: int = 41) -> pd.Series:
    """
    Simple Moving Average, also known as 'MA'.

    The first ``period - 1`` bars are averaged over the shrinking window that
    is available instead of being left empty.
    """
    check_period(period)
    return rolling_mean(as_series(series), period)


def smm(series: SeriesLike, period: int = 9) -> pd.Series:
    """Simple Moving Median, a robust alternative to SMA."""
    check_period(period)
    return rolling_median(as_series(series), period)


def ssma(series: SeriesLike, period: int = 9, adjust: bool = True) -> pd.Series:
    """Smoothed Simple Moving Average, exponential recursion with alpha = 1/period."""
    check_period(period)
    return ewm_mean(as_series(series), alpha=1.0 / period, adjust=adjust)


def ema(series: SeriesLike, period: float = 9, adjust: bool = True) -> pd.Series:
    """
    Exponential Moving Average.

    Parameters:
    -----------
    series : SeriesLike
        Price series
    period : float
        Span of the exponential weights, alpha = 2 / (period + 1)
    adjust : bool
        Normalize early bars by the partial sum of weights
    """
    check_period(period)
    return ewm_mean(as_series(series), span=period, adjust=adjust)


@jit(nopython=True)
def _wma_calc(values: np.ndarray, n: int) -> np.ndarray:
    """Linearly weighted rolling mean with a fixed full-window divisor."""
    length = len(values)
    result = np.empty(length)
    divisor = n * (n + 1) / 2.0

    for i in range(length):
        start = max(0, i - n + 1)
        total = 0.0
        # partial windows take the first k weights of 1..n
        for j in range(start, i + 1):
            total += values[j] * (j - start + 1)
        result[i] = total / divisor

    return result


def wma(series: SeriesLike, period: int = 9) -> pd.Series:
    """
    Weighted Moving Average.

    Weights increase linearly from 1 (oldest) to ``period`` (newest) and the
    sum is divided by ``period * (period + 1) / 2``. Bars before the first
    full window are under-weighted because their truncated weights are still
    divided by the full-period divisor; discard the first ``period`` bars.
    """
    check_period(period)
    series = as_series(series)
    values = _wma_calc(series.to_numpy(dtype=np.float64), int(period))
    return pd.Series(values, index=series.index, name=series.name)


def hma(series: SeriesLike, period: int = 16) -> pd.Series:
    """
    Hull Moving Average.

    HMA = WMA(2*WMA(n/2) - WMA(n), sqrt(n))
    """
    half_n = period // 2
    sqrt_n = int(np.sqrt(period))
    check_period(half_n, "period // 2")

    series = as_series(series)
    raw_hma = 2 * wma(series, half_n) - wma(series, period)
    return wma(raw_hma, sqrt_n)


# ============================================================================
# Parabolic SAR
# ============================================================================

@jit(nopython=True)
def _psar_calc(high: np.ndarray, low: np.ndarray, close: np.ndarray,
               iaf: float, maxaf: float):
    """Bar-by-bar PSAR scan. Returns psar, bull, bear and the reversal count."""
    length = len(close)
    psar = close.copy()
    bull = np.zeros(length)
    bear = np.zeros(length)

    is_bull = True
    af = iaf
    hp = high[0] if length > 0 else 0.0
    lp = low[0] if length > 0 else 0.0
    reversals = 0

    for i in range(2, length):
        if is_bull:
            psar[i] = psar[i-1] + af * (hp - psar[i-1])
        else:
            psar[i] = psar[i-1] + af * (lp - psar[i-1])

        reverse = False

        if is_bull:
            if low[i] < psar[i]:
                is_bull = False
                reverse = True
                psar[i] = hp
                lp = low[i]
                af = iaf
        else:
            if high[i] > psar[i]:
                is_bull = True
                reverse = True
                psar[i] = lp
                hp = high[i]
                af = iaf

        if reverse:
            reversals += 1
        elif is_bull:
            if high[i] > hp:
                hp = high[i]
                af = min(af + iaf, maxaf)
            if low[i-1] < psar[i]:
                psar[i] = low[i-1]
            if low[i-2] < psar[i]:
                psar[i] = low[i-2]
        else:
            if low[i] < lp:
                lp = low[i]
                af = min(af + iaf, maxaf)
            if high[i-1] > psar[i]:
                psar[i] = high[i-1]
            if high[i-2] > psar[i]:
                psar[i] = high[i-2]

        if is_bull:
            bull[i] = psar[i]
        else:
            bear[i] = psar[i]

    return psar, bull, bear, reversals


def psar(high: SeriesLike, low: SeriesLike, close: SeriesLike,
         iaf: float = 0.02, maxaf: float = 0.2) -> Tuple[pd.Series, pd.Series, pd.Series]:
    """
    Parabolic Stop And Reverse.

    The SAR trails price in the direction of the trend and accelerates by
    ``iaf`` every time a new extreme is made, up to ``maxaf``. When price
    crosses the SAR the trend flips and the SAR jumps to the extreme point of
    the finished run.

    Bars 0 and 1 seed the SAR with the close price.

    Returns:
    --------
    psar : pd.Series
        SAR value for every bar
    bull : pd.Series
        SAR while in an uptrend, 0 elsewhere
    bear : pd.Series
        SAR while in a downtrend, 0 elsewhere
    """
    if iaf <= 0:
        raise ValueError(f"iaf must be positive, got {iaf!r}")
    if maxaf < iaf:
        raise ValueError(f"maxaf ({maxaf!r}) must not be below iaf ({iaf!r})")

    close = as_series(close)
    high_arr = np.asarray(high, dtype=np.float64)
    low_arr = np.asarray(low, dtype=np.float64)
    close_arr = close.to_numpy(dtype=np.float64)

    if not (len(high_arr) == len(low_arr) == len(close_arr)):
        raise ValueError(
            f"high, low and close must have equal length, "
            f"got {len(high_arr)}, {len(low_arr)}, {len(close_arr)}"
        )

    values, bull, bear, reversals = _psar_calc(high_arr, low_arr, close_arr, float(iaf), float(maxaf))
    logger.debug("PSAR over %d bars: %d reversals", len(close_arr), reversals)

    index = close.index
    return (
        pd.Series(values, index=index, name="psar"),
        pd.Series(bull, index=index, name="psar_bull"),
        pd.Series(bear, index=index, name="psar_bear"),
    )
