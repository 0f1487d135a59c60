"""
Volume-flow indicators.
"""

from typing import Optional

import numpy as np
import pandas as pd

from .core import SeriesLike, as_series
from .trend import ema


def adl(high: SeriesLike, low: SeriesLike, close: SeriesLike,
        volume: Optional[SeriesLike] = None) -> pd.Series:
    """
    Accumulation/Distribution Line.

    MFM = ((Close - Low) - (High - Close)) / (High - Low)
    ADL = cumsum(MFM * Volume)

    Without ``volume`` the bare multiplier is accumulated. Bars with
    High == Low are NaN and skipped by the running sum.
    """
    close = as_series(close)
    high = as_series(high, index=close.index)
    low = as_series(low, index=close.index)

    mfm = ((close - low) - (high - close)) / (high - low)
    mfm = mfm.replace([np.inf, -np.inf], np.nan)

    if volume is not None:
        mfm = mfm * as_series(volume, index=close.index)

    return mfm.cumsum()


def chaikin(high: SeriesLike, low: SeriesLike, close: SeriesLike,
            volume: Optional[SeriesLike] = None, adjust: bool = True) -> pd.Series:
    """
    Chaikin Oscillator.

    CO = EMA(ADL, 3) - EMA(ADL, 10)
    """
    line = adl(high, low, close, volume)
    return ema(line, 3, adjust) - ema(line, 10, adjust)
