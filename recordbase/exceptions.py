"""recordbase exception hierarchy.

All custom exceptions inherit from RecordbaseError, allowing callers
to catch broad or specific error categories as needed.
"""


class RecordbaseError(Exception):
    """Base exception for all recordbase errors."""

    def __init__(self, message: str = "", key: str | None = None) -> None:
        self.key = key
        super().__init__(message)


class RecordNotFoundError(RecordbaseError):
    """Raised when get or delete targets a key absent from a Database."""

    def __init__(self, key: str, database_id: str | None = None) -> None:
        self.database_id = database_id
        super().__init__(f"Record of {key} not found in Database", key)


class SubscriptionNotFoundError(RecordbaseError):
    """Raised when a Subscription key is absent from a Database."""

    def __init__(self, key: str) -> None:
        super().__init__(f"Subscription of {key} not found", key)


class UnsupportedQueryError(RecordbaseError):
    """Raised when a Query asks for something the executor cannot do.

    Examples: more than one Sort entry.
    """


class RecordDecodeError(RecordbaseError):
    """Raised when stored content does not parse into the record schema.

    Examples: truncated JSON document, missing _type discriminator,
    nested container values.
    """


class StorageIOError(RecordbaseError):
    """Raised when the underlying storage cannot be accessed.

    Examples: permission denied, disk full, path is not a directory.
    """


class InvalidKeyError(RecordbaseError, ValueError):
    """Raised when a key cannot name a storage unit.

    Examples: path separators, leading dot, reserved directory names.
    """
