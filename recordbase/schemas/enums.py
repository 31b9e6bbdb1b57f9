"""Shared enumerations for recordbase schemas.

All enums used across recordbase are defined here to ensure
consistency and avoid circular imports.
"""

from enum import Enum


class SortOrder(str, Enum):
    """Order of Records returned from a Query."""
    ASCENDING = "ASCENDING"
    DESCENDING = "DESCENDING"


class RecordEvent(str, Enum):
    """Kind of mutation delivered to record hooks.

    CREATED vs UPDATED is decided by whether the key existed
    immediately before the write.
    """
    CREATED = "CREATED"
    UPDATED = "UPDATED"
    DELETED = "DELETED"


class ValueKind(str, Enum):
    """Variant tag of a field Value.

    Integers and floats share the NUMBER kind so they compare numerically.
    """
    NULL = "NULL"
    BOOL = "BOOL"
    NUMBER = "NUMBER"
    STRING = "STRING"
