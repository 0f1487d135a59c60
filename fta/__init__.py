"""
Financial technical analysis indicators.

Vectorized pandas/NumPy implementations of technical indicators over OHLCV
price history. All functions are designed to be:
- Pure: inputs are never mutated, every call returns new series
- Aligned to the input index
- NaN-propagating on numeric degeneracies (flat ranges, zero-width bands)

Sequential scans (PSAR, CRSI streak, WMA) are compiled with numba.
"""

import logging

from .core import *
from .trend import *
from .momentum import *
from .volatility import *
from .volume import *
from .ohlcv import *

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "1.0.0"

__all__ = [
    # Core transforms
    'as_series', 'median_price', 'lag', 'diff', 'pad', 'drop_zeros',
    'rolling_mean', 'rolling_sum', 'rolling_min', 'rolling_max',
    'rolling_median', 'rolling_std_about', 'ewm_mean',

    # Moving averages
    'sma', 'smm', 'ssma', 'ema', 'wma', 'hma',

    # Trend
    'psar',

    # Momentum
    'roc', 'kst', 'fish', 'macd', 'rsi', 'streak', 'crsi', 'vzo',
    'stoch', 'stochd', 'stochrsi',

    # Bands
    'bbands', 'percent_b',

    # Volume
    'adl', 'chaikin',

    # OHLCV
    'OHLCV', 'TimeUnit', 'CSVFormatError', 'ORIGIN_EPOCH',
    'resample_ohlcv', 'read_csv',
]
