"""
OHLCV frame, bucket resampling and CSV ingestion.

The five price/volume columns live in a single DataFrame over one int64
timestamp index, so every column shares the same bars by construction.
"""

import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import IO, Dict, Optional, Union

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)

INDEX_NAME = "time"
COLUMNS = ("open", "high", "low", "close", "volume")
ORIGIN_EPOCH = 0

RESAMPLE_AGGREGATIONS = {
    "open": "first",
    "high": "max",
    "low": "min",
    "close": "last",
    "volume": "sum",
}


class TimeUnit(IntEnum):
    """Timestamp unit of an input file, as a multiplier to nanoseconds."""
    NANOSECONDS = 1
    MICROSECONDS = 1_000
    MILLISECONDS = 1_000_000
    SECONDS = 1_000_000_000


class CSVFormatError(ValueError):
    """A record field could not be parsed."""


# ============================================================================
# Resampling
# ============================================================================

def resample_ohlcv(df: pd.DataFrame, interval: int, origin: int = ORIGIN_EPOCH,
                   columns: Optional[Dict[str, str]] = None) -> pd.DataFrame:
    """
    Resample OHLCV data to a coarser grid.

    Parameters:
    -----------
    df : pd.DataFrame
        OHLCV data over an int64 timestamp index
    interval : int
        Bucket width, in the unit of the index
    origin : int
        Timestamp the buckets are aligned to
    columns : dict, optional
        Column name mapping, default: {'open': 'open', 'high': 'high', ...}

    Returns:
    --------
    pd.DataFrame
        One row per non-empty bucket ``floor((t - origin) / interval)``,
        indexed by the bucket start ``origin + bucket * interval``
    """
    if interval <= 0:
        raise ValueError(f"interval must be positive, got {interval!r}")

    columns = columns or {name: name for name in COLUMNS}

    agg_dict = {columns[name]: how for name, how in RESAMPLE_AGGREGATIONS.items()}

    buckets = (df.index.to_numpy(dtype=np.int64) - origin) // interval
    result = df.groupby(buckets, sort=True).agg(agg_dict)

    starts = result.index.to_numpy(dtype=np.int64) * interval + origin
    result.index = pd.Index(starts, dtype=np.int64, name=df.index.name)

    return result[list(agg_dict)]


# ============================================================================
# OHLCV Frame
# ============================================================================

@dataclass
class OHLCV:
    """Open/high/low/close/volume columns over one shared timestamp index."""

    frame: pd.DataFrame
    freq: int  # grid spacing, same unit as the index

    def __post_init__(self):
        missing = [col for col in COLUMNS if col not in self.frame.columns]
        if missing:
            raise ValueError(f"Missing required columns: {missing}")

    @classmethod
    def from_arrays(cls, time, open, high, low, close, volume, freq: int) -> "OHLCV":
        """Build a frame from parallel arrays of equal length."""
        index = pd.Index(np.asarray(time, dtype=np.int64), name=INDEX_NAME)
        frame = pd.DataFrame(
            {
                "open": np.asarray(open, dtype=np.float64),
                "high": np.asarray(high, dtype=np.float64),
                "low": np.asarray(low, dtype=np.float64),
                "close": np.asarray(close, dtype=np.float64),
                "volume": np.asarray(volume, dtype=np.float64),
            },
            index=index,
        )
        return cls(frame, int(freq))

    @property
    def index(self) -> pd.Index:
        return self.frame.index

    @property
    def open(self) -> pd.Series:
        return self.frame["open"]

    @property
    def high(self) -> pd.Series:
        return self.frame["high"]

    @property
    def low(self) -> pd.Series:
        return self.frame["low"]

    @property
    def close(self) -> pd.Series:
        return self.frame["close"]

    @property
    def volume(self) -> pd.Series:
        return self.frame["volume"]

    def __len__(self) -> int:
        return len(self.frame)

    def clone(self) -> "OHLCV":
        """Full copy of the frame."""
        return OHLCV(self.frame.copy(), self.freq)

    def slice(self, start: int, stop: int) -> "OHLCV":
        """Copy of bars ``start`` (inclusive) to ``stop`` (exclusive)."""
        return OHLCV(self.frame.iloc[start:stop].copy(), self.freq)

    def resample(self, interval: int, origin: int = ORIGIN_EPOCH) -> "OHLCV":
        """
        Resampled copy of the frame.

        Open takes the first bar of each bucket, high the max, low the min,
        close the last bar and volume the sum.
        """
        result = resample_ohlcv(self.frame, interval, origin)
        logger.debug("Resampled %d bars into %d buckets of %d", len(self), len(result), interval)
        return OHLCV(result, int(interval))


# ============================================================================
# CSV Ingestion
# ============================================================================

CSV_FIELDS = {
    "time": "Time",
    "open": "Open",
    "high": "High",
    "low": "Low",
    "close": "Close",
    "volume": "Volume",
}


def _invalid_row(mask: pd.Series) -> int:
    return int(np.flatnonzero(mask.to_numpy())[0])


def read_csv(path_or_buffer: Union[str, IO], freq: int,
             unit: TimeUnit = TimeUnit.SECONDS) -> OHLCV:
    """
    Load OHLCV bars from a headerless CSV.

    Columns are read in the order Time, Open, High, Low, Close, Volume.
    Timestamps are integers in ``unit`` and are stored as nanoseconds, so
    ``freq`` is given in nanoseconds as well. Compression is inferred from
    the file name.

    Raises:
    -------
    CSVFormatError
        If a timestamp is not an integer or a price/volume is not a number
    """
    names = list(CSV_FIELDS)

    try:
        raw = pd.read_csv(path_or_buffer, header=None, dtype=str, compression="infer")
    except pd.errors.EmptyDataError:
        logger.debug("No records in %s", path_or_buffer)
        return OHLCV.from_arrays([], [], [], [], [], [], freq)
    except pd.errors.ParserError as exc:
        raise CSVFormatError(f"read csv: {exc}") from exc

    # short records surface as missing values below, extra fields are ignored
    raw = raw.reindex(columns=range(len(names)))
    raw.columns = names

    bad = ~raw["time"].str.fullmatch(r"[+-]?\d+").fillna(False).astype(bool)
    if bad.any():
        row = _invalid_row(bad)
        raise CSVFormatError(
            f"parse int: field 'Time': invalid value {raw['time'].iloc[row]!r} at row {row}"
        )
    times = pd.to_numeric(raw["time"])

    columns = {}
    for name in names[1:]:
        parsed = pd.to_numeric(raw[name], errors="coerce")
        bad = parsed.isna()
        if bad.any():
            row = _invalid_row(bad)
            raise CSVFormatError(
                f"parse float: field '{CSV_FIELDS[name]}': "
                f"invalid value {raw[name].iloc[row]!r} at row {row}"
            )
        columns[name] = parsed.to_numpy(dtype=np.float64)

    ohlcv = OHLCV.from_arrays(
        times.to_numpy(dtype=np.int64) * int(unit),
        columns["open"], columns["high"], columns["low"], columns["close"], columns["volume"],
        freq,
    )
    logger.debug("Loaded %d bars from %s", len(ohlcv), path_or_buffer)

    return ohlcv
