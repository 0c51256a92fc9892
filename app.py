"""
Application entry point.

Responsibilities:
- Configure logging
- Load every configured source into the store at startup
- Expose the loaded store through the query facade

Single-command execution:
    python app.py [SYMBOL ...]
"""

import logging
import os
import sys
from pathlib import Path
from typing import Iterable, Optional, Union

from facade import QueryFacade
from ingest import sources_for
from storage import TimeSeriesStore


# ---------------- Logging ----------------
logger = logging.getLogger("app")


# ---------------- Configuration ----------------
DATA_DIR = Path(os.environ.get("CRYPTO_DATA_DIR", "data"))

DEFAULT_SYMBOLS = ("BTC", "DOGE", "ETH", "LTC", "XRP")


def build_store(
    symbols: Optional[Iterable[str]] = None,
    data_dir: Optional[Union[str, Path]] = None,
) -> TimeSeriesStore:
    """Startup hook: load `<data_dir>/<SYMBOL>_values.csv` for each symbol."""
    symbols = list(symbols or DEFAULT_SYMBOLS)
    data_dir = Path(data_dir) if data_dir is not None else DATA_DIR

    logger.info(f"Loading {len(symbols)} sources from {data_dir}")
    return TimeSeriesStore.from_sources(sources_for(symbols, data_dir))


def build_facade(
    symbols: Optional[Iterable[str]] = None,
    data_dir: Optional[Union[str, Path]] = None,
) -> QueryFacade:
    return QueryFacade(build_store(symbols, data_dir))


def main(argv=None):
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s"
    )

    argv = sys.argv[1:] if argv is None else argv

    logger.info("=" * 60)
    logger.info("CRYPTO RECOMMENDATIONS")
    logger.info("=" * 60)

    facade = build_facade(argv or None)

    for symbol in facade.top_symbols():
        stats = facade.stats(symbol)
        if not stats:
            logger.info(f"📊 [{symbol}] no data")
            continue
        logger.info(
            f"📊 [{symbol}] min={stats['min']:.4f} | max={stats['max']:.4f} | "
            f"oldest={stats['oldest']} | newest={stats['newest']}"
        )

    logger.info(f"🏆 Ranking: {', '.join(facade.top_symbols()) or '-'}")
    return facade


if __name__ == "__main__":
    main()
