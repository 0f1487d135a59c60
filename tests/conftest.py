"""
Shared pytest fixtures.
"""

import numpy as np
import pytest

from fta import OHLCV

MINUTE = 60 * 1_000_000_000


def create_sample_ohlcv(num_rows: int = 200, seed: int = 42) -> OHLCV:
    """Random-walk OHLCV bars on a one-minute grid."""
    rng = np.random.default_rng(seed)

    closes = 100.0 + np.cumsum(rng.normal(0, 1, num_rows))
    opens = np.concatenate([[closes[0]], closes[:-1]])
    highs = np.maximum(opens, closes) + rng.uniform(0.1, 1.0, num_rows)
    lows = np.minimum(opens, closes) - rng.uniform(0.1, 1.0, num_rows)
    volumes = rng.uniform(1_000, 5_000, num_rows)
    times = np.arange(num_rows, dtype=np.int64) * MINUTE

    return OHLCV.from_arrays(times, opens, highs, lows, closes, volumes, MINUTE)


@pytest.fixture
def ohlcv() -> OHLCV:
    return create_sample_ohlcv()
