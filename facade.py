"""
Query boundary over a loaded TimeSeriesStore.

Responsibilities:
- Forward the three public queries to the store
- Shape results into plain containers ready for serialization

This module must never:
- Compute statistics or rankings itself
- Mutate or reload the store
- Swallow store errors
"""

from typing import Any, Dict, List, Union

from storage import TimeSeriesStore


class StoreNotReadyError(RuntimeError):
    """Raised when queries are wired to a store that is still loading."""


class QueryFacade:
    def __init__(self, store: TimeSeriesStore):
        if not store.sealed:
            raise StoreNotReadyError("Store must be fully loaded and sealed before queries")
        self._store = store

    def stats(self, symbol: str) -> Dict[str, Any]:
        """`{symbol, min, max, oldest, newest}`, or `{}` for unknown/empty symbols."""
        stats = self._store.get_stats(symbol)
        if stats is None:
            return {}
        return stats.as_dict()

    def top_symbols(self) -> List[str]:
        return list(self._store.rank_symbols())

    def highest_range_on_date(self, date: Union[int, str]) -> str:
        return self._store.highest_range_on_date(parse_date(date))


def parse_date(date: Union[int, str]) -> int:
    """Accept an int timestamp or its decimal text form (path parameters arrive as text)."""
    if isinstance(date, bool):
        raise ValueError(f"Invalid date: {date!r}")
    if isinstance(date, int):
        return date
    if isinstance(date, str):
        text = date.strip()
        if text.lstrip("-").isdigit():
            return int(text)
    raise ValueError(f"Invalid date: {date!r}")
