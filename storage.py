"""
In-memory time-series store for historical crypto prices.

Responsibilities:
- Load per-symbol price histories from sources, once, at startup
- Seal the loaded data so it can be read without locks
- Serve stats, volatility ranking and date queries

This module must never:
- Parse CSV fields itself
- Persist anything to disk
- Know about the query facade or any transport
"""

import logging
import threading
from typing import Dict, Iterable, List, Optional

from analytics import compute_stats, normalized_range
from ingest import (
    MalformedRecord,
    RawRecord,
    Source,
    SourceUnavailable,
    iter_samples,
)
from utils import NO_DATA, SampleBuffer, Series, Stats, freeze_samples


logger = logging.getLogger("storage")


class StoreSealedError(RuntimeError):
    """Raised when loading into a store that has already been sealed."""


class TimeSeriesStore:
    def __init__(self):
        self._series: Dict[str, Series] = {}
        self._lock = threading.Lock()
        self._sealed = False

    @classmethod
    def from_sources(cls, sources: Iterable[Source]) -> "TimeSeriesStore":
        """
        Build a fully loaded, sealed store.

        Sources that cannot be opened or contain a malformed record are
        logged and skipped; every other source is still loaded.
        """
        store = cls()
        loaded, skipped = 0, 0

        for source in sources:
            try:
                with source.open() as records:
                    count = store.load(source.symbol, records, source_name=source.name)
            except SourceUnavailable as e:
                skipped += 1
                logger.error(f"[STORE] ❌ {source.name} - {e}")
                continue
            except MalformedRecord as e:
                skipped += 1
                logger.error(f"[STORE] ❌ {source.name} - skipped, {e}")
                continue
            except OSError as e:
                skipped += 1
                logger.error(f"[STORE] ❌ {source.name} - read error, skipped: {e}")
                continue

            loaded += 1
            logger.info(f"[STORE] ✓ Loaded {count} samples for {source.symbol} from {source.name}")

        store.seal()
        logger.info(f"[STORE] Ready: {loaded} sources loaded, {skipped} skipped, symbols={store.symbols()}")
        return store

    # ------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------

    def load(
        self,
        symbol_hint: str,
        raw_records: Iterable[RawRecord],
        source_name: Optional[str] = None,
    ) -> int:
        """
        Ingest one source: header first, then `timestamp,symbol,price` rows.

        The whole source is parsed before anything is committed, so a
        MalformedRecord leaves the store exactly as it was. Returns the
        number of samples committed.
        """
        source_name = source_name or symbol_hint
        staged = SampleBuffer()

        with self._lock:
            if self._sealed:
                raise StoreSealedError(f"Store is sealed; cannot load {source_name}")

            for symbol, sample in iter_samples(source_name, raw_records):
                staged.add(symbol, sample)

            # A clean header-only source still makes its symbol known
            if symbol_hint not in self._series and staged.get_count(symbol_hint) == 0:
                self._series[symbol_hint] = Series(symbol_hint, freeze_samples([]))

            for symbol in staged.get_symbols():
                self._series[symbol] = staged.merge_into(symbol, self._series.get(symbol))

        return staged.total()

    def seal(self):
        with self._lock:
            self._sealed = True

    @property
    def sealed(self) -> bool:
        return self._sealed

    # ------------------------------------------------------------
    # Read-only inspection
    # ------------------------------------------------------------

    def symbols(self) -> List[str]:
        return sorted(self._series)

    def series(self, symbol: str) -> Optional[Series]:
        return self._series.get(symbol)

    def __len__(self) -> int:
        return len(self._series)

    def __contains__(self, symbol: str) -> bool:
        return symbol in self._series

    # ------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------

    def get_stats(self, symbol: str) -> Optional[Stats]:
        """Summary for one symbol, or None when unknown or empty."""
        stats = compute_stats(self._series.get(symbol))
        logger.debug(f"[STORE] stats {symbol}: {stats}")
        return stats

    def rank_symbols(self) -> List[str]:
        """All known symbols, most volatile first; ties by symbol."""
        ranges = {sym: normalized_range(s.prices) for sym, s in self._series.items()}
        return sorted(ranges, key=lambda sym: (-ranges[sym], sym))

    def highest_range_on_date(self, date: int) -> str:
        """
        Most volatile symbol among those with a sample at exactly `date`.

        Eligibility is an exact timestamp match, but the range is taken
        over the symbol's whole history. Returns NO_DATA when no symbol
        has a sample at `date`.
        """
        eligible = [
            (normalized_range(s.prices), sym)
            for sym, s in self._series.items()
            if s.has_timestamp(date)
        ]
        if not eligible:
            logger.debug(f"[STORE] no samples at {date}")
            return NO_DATA

        best_range, best_symbol = min(eligible, key=lambda item: (-item[0], item[1]))
        return best_symbol
