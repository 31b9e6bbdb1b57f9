"""recordbase — pluggable typed record store with query, hooks and subscriptions."""

from recordbase.exceptions import (
    InvalidKeyError,
    RecordbaseError,
    RecordDecodeError,
    RecordNotFoundError,
    StorageIOError,
    SubscriptionNotFoundError,
    UnsupportedQueryError,
)
from recordbase.schemas import Query, Record, RecordEvent, Sort, SortOrder, Subscription

__version__ = "0.1.0"

__all__ = [
    "InvalidKeyError",
    "Query",
    "Record",
    "RecordDecodeError",
    "RecordEvent",
    "RecordNotFoundError",
    "RecordbaseError",
    "Sort",
    "SortOrder",
    "StorageIOError",
    "Subscription",
    "SubscriptionNotFoundError",
    "UnsupportedQueryError",
]
