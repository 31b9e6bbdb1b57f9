"""Query pipeline — comparator, executor and rows cursor."""

from recordbase.query.comparator import compare, less, sort_records
from recordbase.query.executor import QueryExecutor
from recordbase.query.rows import MemoryRows, Rows, RowsSource

__all__ = [
    "MemoryRows",
    "QueryExecutor",
    "Rows",
    "RowsSource",
    "compare",
    "less",
    "sort_records",
]
