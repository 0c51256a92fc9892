"""
Shared data models and store state definitions.

This module defines immutable data contracts used across
ingestion, analytics, and storage layers.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

import numpy as np


NO_DATA = "No data available"

# One row per sample: timestamp and price of sample i always travel together
SAMPLE_DTYPE = np.dtype([("timestamp", np.int64), ("price", np.float64)])


@dataclass(frozen=True)
class Sample:
    timestamp: int   # epoch seconds, treated as an opaque orderable integer
    price: float


@dataclass(frozen=True)
class Stats:
    symbol: str
    min: float
    max: float
    oldest: int
    newest: int

    def as_dict(self) -> Dict[str, Any]:
        return {
            "symbol": self.symbol,
            "min": self.min,
            "max": self.max,
            "oldest": self.oldest,
            "newest": self.newest,
        }


@dataclass(frozen=True)
class Series:
    """
    Read-only price history for one symbol, in file order.

    `samples` is a structured array of SAMPLE_DTYPE with its
    writeable flag cleared.
    """

    symbol: str
    samples: np.ndarray

    @property
    def prices(self) -> np.ndarray:
        return self.samples["price"]

    @property
    def timestamps(self) -> np.ndarray:
        return self.samples["timestamp"]

    def __len__(self) -> int:
        return len(self.samples)

    def has_timestamp(self, timestamp: int) -> bool:
        return bool(np.any(self.timestamps == timestamp))


def freeze_samples(rows: List[Tuple[int, float]]) -> np.ndarray:
    """
    Pack rows into a read-only structured array.

    Non-empty arrays are backed by an immutable bytes buffer, so the
    writeable flag can never be switched back on.
    """
    arr = np.array(rows, dtype=SAMPLE_DTYPE)
    if len(arr):
        arr = np.frombuffer(arr.tobytes(), dtype=SAMPLE_DTYPE)
    arr.flags.writeable = False
    return arr


class SampleBuffer:
    """
    Staging area for samples parsed from a single source.

    Nothing here is visible to queries until the owning store
    commits the buffer.
    """

    def __init__(self):
        self.buffers: Dict[str, List[Tuple[int, float]]] = {}

    def add(self, symbol: str, sample: Sample):
        """Stage one parsed sample under the symbol from its record."""
        self.buffers.setdefault(symbol, []).append((sample.timestamp, sample.price))

    def get_symbols(self) -> List[str]:
        """Symbols seen so far in this source, in first-seen order."""
        return list(self.buffers.keys())

    def get_count(self, symbol: str) -> int:
        """Number of staged samples for a symbol."""
        return len(self.buffers.get(symbol, ()))

    def total(self) -> int:
        return sum(len(rows) for rows in self.buffers.values())

    def merge_into(self, symbol: str, existing: Optional[Series] = None) -> Series:
        """Build a frozen Series from existing samples plus this buffer's rows."""
        rows = self.buffers.get(symbol, [])
        if existing is not None and len(existing):
            rows = existing.samples.tolist() + rows
        return Series(symbol=symbol, samples=freeze_samples(rows))
