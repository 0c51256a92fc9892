"""
Historical price ingestion from per-symbol CSV sources.

Responsibilities:
- Describe named sources (one symbol per source)
- Open sources and yield their raw records
- Parse `timestamp,symbol,price` records into samples
- Report unavailable sources and malformed records

This module must never:
- Hold loaded series
- Perform analytics logic
- Know about the query facade
"""

import logging
import math
import re
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, Iterator, List, Optional, Tuple, Union

from utils import Sample


logger = logging.getLogger("ingest")

DELIMITER = ","
FIELD_COUNT = 3
FILE_SUFFIX = "_values.csv"

# Timestamps are stored as int64
TIMESTAMP_MIN = -(2 ** 63)
TIMESTAMP_MAX = 2 ** 63 - 1

# Plain decimal text only: no whitespace, no underscores
TIMESTAMP_RE = re.compile(r"[+-]?[0-9]+")
PRICE_RE = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")

RawRecord = Union[str, bytes]


class IngestError(Exception):
    """Base class for ingestion failures."""


class SourceUnavailable(IngestError):
    def __init__(self, source: str, reason: str = ""):
        self.source = source
        self.reason = reason
        msg = f"Source not available: {source}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg)


class MalformedRecord(IngestError):
    def __init__(self, source: str, line_no: int, record: str, cause: str):
        self.source = source
        self.line_no = line_no
        self.record = record
        self.cause = cause
        super().__init__(f"{source}:{line_no}: malformed record {record!r}: {cause}")


@dataclass(frozen=True)
class Source:
    """
    One logical feed of raw records for a single symbol.

    `opener` is called once per ingestion and must return an
    iterable of raw records, header first.
    """

    name: str
    symbol: str
    opener: Callable[[], Iterable[RawRecord]]

    @contextmanager
    def open(self) -> Iterator[Iterable[RawRecord]]:
        logger.debug(f"[INGEST] Opening {self.name} for {self.symbol}")
        try:
            records = self.opener()
        except OSError as e:
            raise SourceUnavailable(self.name, str(e)) from e

        try:
            yield records
        finally:
            close = getattr(records, "close", None)
            if close is not None:
                close()


def file_source(path: Union[str, Path], symbol: str) -> Source:
    path = Path(path)

    def _open():
        if not path.is_file():
            raise FileNotFoundError(f"No such file: {path}")
        return open(path, "rb")

    return Source(name=path.name, symbol=symbol, opener=_open)


def lines_source(symbol: str, lines: Iterable[RawRecord], name: Optional[str] = None) -> Source:
    """In-memory source, mainly for tests and embedding."""
    snapshot = list(lines)
    return Source(name=name or f"{symbol}{FILE_SUFFIX}", symbol=symbol, opener=lambda: iter(snapshot))


def sources_for(symbols: Iterable[str], data_dir: Union[str, Path]) -> List[Source]:
    """Map each symbol to `<data_dir>/<SYMBOL>_values.csv`."""
    data_dir = Path(data_dir)
    return [file_source(data_dir / f"{sym}{FILE_SUFFIX}", sym) for sym in symbols]


def decode_record(raw: RawRecord) -> str:
    if isinstance(raw, bytes):
        raw = raw.decode("utf-8")
    return raw.rstrip("\r\n")


def parse_record(record: str) -> Tuple[str, Sample]:
    """
    Split one record into (symbol, Sample).

    Raises ValueError on wrong field count, non-integer timestamp,
    empty symbol, or non-numeric / non-finite price.
    """
    fields = record.split(DELIMITER)
    if len(fields) != FIELD_COUNT:
        raise ValueError(f"expected {FIELD_COUNT} fields, got {len(fields)}")

    ts_field, symbol, price_field = fields

    if not TIMESTAMP_RE.fullmatch(ts_field):
        raise ValueError(f"invalid timestamp: {ts_field!r}")
    timestamp = int(ts_field)
    if not TIMESTAMP_MIN <= timestamp <= TIMESTAMP_MAX:
        raise ValueError(f"timestamp out of range: {ts_field}")
    if not symbol:
        raise ValueError("empty symbol")

    if not PRICE_RE.fullmatch(price_field):
        raise ValueError(f"invalid price: {price_field!r}")
    price = float(price_field)
    if not math.isfinite(price):
        raise ValueError(f"non-finite price: {price_field}")

    return symbol, Sample(timestamp=timestamp, price=price)


def iter_samples(source_name: str, raw_records: Iterable[RawRecord]) -> Iterator[Tuple[str, Sample]]:
    """
    Yield parsed samples, skipping the header record unconditionally.

    The first bad record raises MalformedRecord and stops iteration.
    """
    for line_no, raw in enumerate(raw_records, start=1):
        if line_no == 1:
            continue

        try:
            record = decode_record(raw)
        except UnicodeDecodeError as e:
            raise MalformedRecord(source_name, line_no, repr(raw), str(e)) from e

        try:
            parsed = parse_record(record)
        except ValueError as e:
            raise MalformedRecord(source_name, line_no, record, str(e)) from e

        yield parsed
