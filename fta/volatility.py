"""
Volatility bands.

Bollinger Bands around a caller-supplied moving average and the %B position
of price within them.
"""

import pandas as pd
from typing import Tuple

from .core import SeriesLike, as_series, check_period, rolling_std_about


# ============================================================================
# Bands and Channels
# ============================================================================

def bbands(series: SeriesLike, ma: SeriesLike, period: int = 20,
           std_multiplier: float = 2.0) -> Tuple[pd.Series, pd.Series]:
    """
    Bollinger Bands.

    The band half-width is ``std_multiplier`` times the rolling standard
    deviation (ddof=1) of ``series`` measured about ``ma``. Bars where the
    deviation is undefined get a zero width.

    Returns:
    --------
    upper : pd.Series
        Upper band
    lower : pd.Series
        Lower band
    """
    check_period(period)
    series = as_series(series)
    ma = as_series(ma, index=series.index)

    std = rolling_std_about(series, ma, period).fillna(0) * std_multiplier

    upper = ma + std
    lower = ma - std

    return upper, lower


def percent_b(series: SeriesLike, ma: SeriesLike, period: int = 20,
              std_multiplier: float = 2.0) -> pd.Series:
    """
    Percent B, position of price within the Bollinger Bands.

    %B = (Close - Lower) / (Upper - Lower)

    Zero-width bands are not guarded and yield NaN or +/-inf.
    """
    series = as_series(series)
    upper, lower = bbands(series, ma, period, std_multiplier)
    return (series - lower) / (upper - lower)
