"""QueryExecutor — type-scoped scan, decode and sort of stored documents.

Backends hand the executor their raw stored documents; the executor owns
everything after that:

  1. Reject queries with more than one Sort before any document is read.
  2. Coarse scan: skip documents that do not start with the type marker,
     without parsing them.
  3. Decode every candidate. Any decode failure aborts the whole query.
  4. Drop decoded Records whose type differs (guards false positives of
     the coarse scan).
  5. Sort by the single Sort entry, if present.
"""

from __future__ import annotations

from typing import Iterable

import structlog

from recordbase.exceptions import UnsupportedQueryError
from recordbase.query.comparator import sort_records
from recordbase.query.rows import MemoryRows, Rows
from recordbase.schemas.query import Query
from recordbase.schemas.record import Record, type_marker

logger = structlog.get_logger()

# (storage key, document text)
StoredDocument = tuple[str, str]


class QueryExecutor:
    """Runs a Query over an iterable of stored documents."""

    def __init__(self, *, legacy_ties: bool = False) -> None:
        self._legacy_ties = legacy_ties

    @staticmethod
    def check_supported(query: Query) -> None:
        """Raise UnsupportedQueryError for queries the executor cannot run."""
        if len(query.sorts) > 1:
            raise UnsupportedQueryError(
                f"multiple sort order is not supported, got {len(query.sorts)} sorts"
            )

    def execute(self, query: Query, documents: Iterable[StoredDocument]) -> Rows:
        """Execute query against documents and return a Rows cursor.

        Raises:
            UnsupportedQueryError: More than one Sort entry.
            RecordDecodeError: A candidate document failed to decode.
        """
        self.check_supported(query)

        marker = type_marker(query.type)
        records: list[Record] = []
        scanned = 0
        for key, raw in documents:
            scanned += 1
            if not raw.lstrip().startswith(marker):
                continue
            record = Record.from_document(raw, key=key)
            if record.type != query.type:
                continue
            records.append(record)

        if query.sorts:
            records = sort_records(records, query.sorts[0], legacy_ties=self._legacy_ties)

        logger.debug(
            "Query executed",
            type=query.type,
            scanned=scanned,
            matched=len(records),
            sorted=bool(query.sorts),
        )
        return Rows(MemoryRows(records))
