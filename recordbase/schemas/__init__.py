"""recordbase schemas — records, values, queries and subscriptions."""

from recordbase.schemas.enums import RecordEvent, SortOrder, ValueKind
from recordbase.schemas.query import Predicate, Query, Sort, Subscription
from recordbase.schemas.record import Record, Value, get_value, value_kind

__all__ = [
    "Predicate",
    "Query",
    "Record",
    "RecordEvent",
    "Sort",
    "SortOrder",
    "Subscription",
    "Value",
    "ValueKind",
    "get_value",
    "value_kind",
]
