"""
Core series transforms shared by every indicator.

Thin wrappers around pandas windowed reductions, exponential recursion and
shifting. Windows narrower than the period at the start of a series produce
a value over the available bars instead of NaN.
"""

import numpy as np
import pandas as pd
from typing import Union, Optional


# Type aliases
ArrayLike = Union[np.ndarray, pd.Series, pd.DataFrame]
SeriesLike = Union[np.ndarray, pd.Series]


def as_series(x: SeriesLike, index: Optional[pd.Index] = None) -> pd.Series:
    """
    Wrap array input in a float Series.

    A Series is returned as-is unless ``index`` is given and differs from its
    own, in which case its values are re-labelled by position so that mixed
    Series/array arguments never join on index labels.
    """
    if isinstance(x, pd.Series):
        if index is None or x.index.equals(index):
            return x
        return pd.Series(x.to_numpy(dtype=np.float64), index=index, name=x.name)
    return pd.Series(np.asarray(x, dtype=np.float64), index=index)


def check_period(period: float, name: str = "period") -> None:
    """Reject non-positive window lengths."""
    if period is None or period <= 0:
        raise ValueError(f"{name} must be positive, got {period!r}")


# ============================================================================
# OHLCV Composites
# ============================================================================

def median_price(high: ArrayLike, low: ArrayLike) -> ArrayLike:
    """Median price (high + low) / 2."""
    return (high + low) / 2


# ============================================================================
# Basic Transforms
# ============================================================================

def lag(x: ArrayLike, k: int = 1) -> ArrayLike:
    """Value k bars earlier aligned to the current bar."""
    if isinstance(x, (pd.Series, pd.DataFrame)):
        return x.shift(k)
    else:
        x = np.asarray(x, dtype=np.float64)
        result = np.full_like(x, np.nan)
        if k < len(x):
            result[k:] = x[:len(x) - k]
        return result


def diff(x: ArrayLike, k: int = 1) -> ArrayLike:
    """Difference of series with k-period lag."""
    if isinstance(x, (pd.Series, pd.DataFrame)):
        return x.diff(k)
    else:
        return np.asarray(x, dtype=np.float64) - lag(x, k)


def pad(x: ArrayLike) -> ArrayLike:
    """Forward-fill missing values."""
    if isinstance(x, (pd.Series, pd.DataFrame)):
        return x.ffill()
    else:
        return pd.Series(x).ffill().values


def drop_zeros(x: pd.Series) -> pd.Series:
    """Keep only non-zero bars, e.g. to turn PSAR sides into sparse markers."""
    return x[x != 0]


# ============================================================================
# Rolling Statistics
# ============================================================================

def rolling_mean(x: ArrayLike, n: int, min_periods: int = 1) -> ArrayLike:
    """Rolling mean over n periods."""
    if isinstance(x, (pd.Series, pd.DataFrame)):
        return x.rolling(n, min_periods=min_periods).mean()
    else:
        return pd.Series(x).rolling(n, min_periods=min_periods).mean().values


def rolling_sum(x: ArrayLike, n: int, min_periods: int = 1) -> ArrayLike:
    """Rolling sum over n periods."""
    if isinstance(x, (pd.Series, pd.DataFrame)):
        return x.rolling(n, min_periods=min_periods).sum()
    else:
        return pd.Series(x).rolling(n, min_periods=min_periods).sum().values


def rolling_count(x: ArrayLike, n: int) -> ArrayLike:
    """Number of non-NaN observations in each trailing window."""
    if isinstance(x, (pd.Series, pd.DataFrame)):
        return x.rolling(n, min_periods=0).count()
    else:
        return pd.Series(x).rolling(n, min_periods=0).count().values


def rolling_min(x: ArrayLike, n: int, min_periods: int = 1) -> ArrayLike:
    """Rolling minimum over n periods."""
    if isinstance(x, (pd.Series, pd.DataFrame)):
        return x.rolling(n, min_periods=min_periods).min()
    else:
        return pd.Series(x).rolling(n, min_periods=min_periods).min().values


def rolling_max(x: ArrayLike, n: int, min_periods: int = 1) -> ArrayLike:
    """Rolling maximum over n periods."""
    if isinstance(x, (pd.Series, pd.DataFrame)):
        return x.rolling(n, min_periods=min_periods).max()
    else:
        return pd.Series(x).rolling(n, min_periods=min_periods).max().values


def rolling_median(x: ArrayLike, n: int, min_periods: int = 1) -> ArrayLike:
    """Rolling median over n periods."""
    if isinstance(x, (pd.Series, pd.DataFrame)):
        return x.rolling(n, min_periods=min_periods).median()
    else:
        return pd.Series(x).rolling(n, min_periods=min_periods).median().values


def rolling_std_about(x: pd.Series, mean: pd.Series, n: int, ddof: int = 1) -> pd.Series:
    """
    Rolling standard deviation of ``x`` about an externally supplied mean.

    Each window is measured against ``mean`` at the window's last bar rather
    than the window's own average:

        var_i = sum((x_j - mean_i) ** 2) / (count_i - ddof)

    Windows with ``count <= ddof`` are NaN.

    The sum of squares is split into the spread about the window's own
    average plus the offset of that average from ``mean``, so large price
    levels do not cancel.
    """
    count = rolling_count(x, n)
    own_mean = rolling_mean(x, n)
    spread = x.rolling(n, min_periods=1).var(ddof=0) * count

    squares = spread + count * (own_mean - mean) ** 2
    var = squares.clip(lower=0) / (count - ddof)
    var[count <= ddof] = np.nan

    return np.sqrt(var)


# ============================================================================
# Exponential Recursion
# ============================================================================

def ewm_mean(x: ArrayLike, alpha: Optional[float] = None, span: Optional[float] = None,
             adjust: bool = True, bias: bool = False) -> ArrayLike:
    """
    Exponentially weighted mean, parametrized by either ``alpha`` or ``span``.

    ``span`` converts to ``alpha = 2 / (span + 1)``. With ``adjust`` the early
    bars are normalized by the partial sum of decaying weights; otherwise the
    plain recursion ``y_t = (1 - alpha) * y_{t-1} + alpha * x_t`` is used.
    ``bias`` forces the cumulative-weight normalization even when ``adjust``
    is off, which is what Wilder smoothing requires.
    """
    if (alpha is None) == (span is None):
        raise ValueError("exactly one of alpha or span must be given")

    normalize = adjust or bias

    if isinstance(x, (pd.Series, pd.DataFrame)):
        return x.ewm(alpha=alpha, span=span, adjust=normalize).mean()
    else:
        return pd.Series(x).ewm(alpha=alpha, span=span, adjust=normalize).mean().values
