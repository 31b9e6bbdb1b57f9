"""Rows — forward-only cursor over the Records returned by a Query.

A Rows wraps a driver-provided RowsSource. It is single-pass and owned
by one caller: once the source reports end-of-stream the cursor is
exhausted for good, and close() may be called any number of times.
Records already handed out stay valid after close().
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterator, Sequence

from recordbase.schemas.record import Record


class RowsSource(ABC):
    """Driver-side iterator backing a Rows cursor."""

    @abstractmethod
    def next(self) -> Record | None:
        """Return the next Record, or None at end-of-stream."""

    @abstractmethod
    def close(self) -> None:
        """Release any held resources."""


class MemoryRows(RowsSource):
    """RowsSource over an already materialized list of Records."""

    def __init__(self, records: Sequence[Record]) -> None:
        self._records = list(records)
        self._index = 0

    def next(self) -> Record | None:
        if self._index >= len(self._records):
            return None
        record = self._records[self._index]
        self._index += 1
        return record

    def close(self) -> None:
        self._records = []
        self._index = 0


class Rows:
    """Cursor returned by Database.query()."""

    def __init__(self, source: RowsSource) -> None:
        self._source = source
        self._exhausted = False
        self._closed = False

    @classmethod
    def empty(cls) -> Rows:
        return cls(MemoryRows([]))

    @property
    def exhausted(self) -> bool:
        return self._exhausted

    @property
    def closed(self) -> bool:
        return self._closed

    def next(self) -> Record | None:
        """Advance the cursor. Returns None once all Records are consumed."""
        if self._exhausted:
            return None
        record = self._source.next()
        if record is None:
            self._exhausted = True
        return record

    def close(self) -> None:
        """Release the source. Safe to call repeatedly or after exhaustion."""
        if self._closed:
            return
        self._closed = True
        self._exhausted = True
        self._source.close()

    def all(self) -> list[Record]:
        """Drain the remaining Records and close the cursor."""
        try:
            return list(self)
        finally:
            self.close()

    def __iter__(self) -> Iterator[Record]:
        return self

    def __next__(self) -> Record:
        record = self.next()
        if record is None:
            raise StopIteration
        return record

    def __enter__(self) -> Rows:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
