"""
Price-range analytics over loaded series.

Responsibilities:
- Compute per-symbol summary statistics
- Compute the normalized price range used for volatility ranking

This module must never:
- Read sources or parse records
- Mutate series data
- Know about the query facade
"""

import math
from typing import Optional

import numpy as np

from utils import Series, Stats


MAX_RANGE = float(np.finfo(np.float64).max)


# ============================================================
# PURE HELPER FUNCTIONS (no I/O, no side effects)
# ============================================================

def normalized_range(prices: np.ndarray) -> float:
    """
    (max - min) / min over the whole price history.

    Returns 0.0 for an empty history and for a degenerate history
    whose minimum price is zero or negative. A range too large to
    represent is capped at the largest finite float, so it still ranks
    first and ranking never sees NaN or infinity.
    """
    if prices is None or len(prices) == 0:
        return 0.0

    low = float(np.min(prices))
    high = float(np.max(prices))

    if low <= 0:
        return 0.0

    result = (high - low) / low
    if not math.isfinite(result):
        return MAX_RANGE

    return result


def compute_stats(series: Optional[Series]) -> Optional[Stats]:
    """
    Min/max price and oldest/newest timestamp, each found independently.

    Returns None when there is nothing to summarize.
    """
    if series is None or len(series) == 0:
        return None

    prices = series.prices
    timestamps = series.timestamps

    return Stats(
        symbol=series.symbol,
        min=float(np.min(prices)),
        max=float(np.max(prices)),
        oldest=int(np.min(timestamps)),
        newest=int(np.max(timestamps)),
    )
