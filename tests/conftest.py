"""Shared fixtures for the crypto recommendations test suite."""

import pytest

from ingest import lines_source
from storage import TimeSeriesStore


HEADER = "timestamp,symbol,price"


def csv_lines(symbol, rows):
    return [HEADER] + [f"{ts},{symbol},{price}" for ts, price in rows]


@pytest.fixture
def make_store():
    """Build a sealed store from `{symbol: [(timestamp, price), ...]}`."""

    def _make(series):
        sources = [lines_source(sym, csv_lines(sym, rows)) for sym, rows in series.items()]
        return TimeSeriesStore.from_sources(sources)

    return _make


@pytest.fixture
def write_csv(tmp_path):
    """Write `<SYMBOL>_values.csv` into tmp_path and return its path."""

    def _write(symbol, rows=None, lines=None):
        path = tmp_path / f"{symbol}_values.csv"
        content = lines if lines is not None else csv_lines(symbol, rows or [])
        path.write_text("\n".join(content) + "\n")
        return path

    return _write
