"""Tests for the price-range helpers."""

import numpy as np
import pytest

from analytics import MAX_RANGE, compute_stats, normalized_range
from utils import Series, freeze_samples


def make_series(symbol, rows):
    return Series(symbol, freeze_samples(rows))


class TestNormalizedRange:
    def test_empty_history_is_zero(self):
        assert normalized_range(np.array([], dtype=np.float64)) == 0.0
        assert normalized_range(None) == 0.0

    def test_single_price_is_zero(self):
        assert normalized_range(np.array([42.0])) == 0.0

    def test_range_over_min(self):
        assert normalized_range(np.array([2200.0, 2000.0])) == pytest.approx(0.10)
        assert normalized_range(np.array([34000.0, 36000.0])) == pytest.approx(2000 / 34000)

    def test_zero_min_is_clamped(self):
        assert normalized_range(np.array([0.0, 5.0])) == 0.0

    def test_overflowing_range_is_capped(self):
        result = normalized_range(np.array([1e-300, 1e300]))
        assert result == MAX_RANGE
        assert np.isfinite(result)

    def test_negative_min_is_clamped(self):
        result = normalized_range(np.array([-1.0, 3.0]))
        assert result == 0.0
        assert np.isfinite(result)


class TestComputeStats:
    def test_none_and_empty(self):
        assert compute_stats(None) is None
        assert compute_stats(make_series("BTC", [])) is None

    def test_extremes_found_independently(self):
        series = make_series("BTC", [(300, 10.0), (100, 30.0), (200, 5.0)])
        stats = compute_stats(series)

        assert stats.symbol == "BTC"
        assert stats.min == 5.0
        assert stats.max == 30.0
        assert stats.oldest == 100
        assert stats.newest == 300

    def test_native_python_types(self):
        stats = compute_stats(make_series("ETH", [(1, 2.5)]))
        assert type(stats.min) is float
        assert type(stats.oldest) is int
