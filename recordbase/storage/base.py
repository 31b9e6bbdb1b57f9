"""Storage contract — Database and Connection interfaces.

A Connection owns every Database of one application namespace: the
shared public database and one private database per user. It also owns
the hook registry and dispatcher, which every Database it opens shares.

Concrete backends implement the record primitives (_read, _write,
_remove, _exists, _documents). The base class builds the public
get/save/delete/query operations on top of them, including hook
dispatch after each successful mutation.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterator

import structlog

from recordbase.exceptions import RecordNotFoundError
from recordbase.hooks.dispatcher import HookDispatcher
from recordbase.hooks.registry import HookRegistry, RecordHook
from recordbase.query.executor import QueryExecutor, StoredDocument
from recordbase.query.rows import Rows
from recordbase.schemas.enums import RecordEvent
from recordbase.schemas.query import Query, Subscription
from recordbase.schemas.record import Record
from recordbase.subscriptions.store import SubscriptionStore
from recordbase.utils.keys import PUBLIC_DB_KEY

logger = structlog.get_logger()

PRIVATE_DB_KEY = "_private"


class Database(ABC):
    """A collection of Records, either public or private, in a namespace."""

    def __init__(
        self,
        database_id: str,
        *,
        dispatcher: HookDispatcher,
        subscriptions: SubscriptionStore,
        executor: QueryExecutor | None = None,
    ) -> None:
        self._id = database_id
        self._dispatcher = dispatcher
        self._subscriptions = subscriptions
        self._executor = executor or QueryExecutor()

    def id(self) -> str:
        """Identifier of the Database (_public or _private)."""
        return self._id

    # ------------------------------------------------------------------
    # Records
    # ------------------------------------------------------------------

    def get(self, key: str) -> Record:
        """Fetch the Record stored under key.

        Raises:
            RecordNotFoundError: If no Record is stored under key.
            RecordDecodeError: If the stored content is not a Record.
            StorageIOError: If the storage could not be read.
        """
        raw = self._read(key)
        if raw is None:
            raise RecordNotFoundError(key, self._id)
        return Record.from_document(raw, key=key)

    def save(self, record: Record) -> None:
        """Create the Record, or replace the one stored under its key.

        Dispatches CREATED or UPDATED to the record hooks on success.
        """
        event = RecordEvent.UPDATED if self._exists(record.key) else RecordEvent.CREATED
        self._write(record.key, record.to_document())
        logger.debug("Record saved", db=self._id, key=record.key, type=record.type, record_event=event.value)
        self._dispatcher.dispatch(self, record, event)

    def delete(self, key: str) -> None:
        """Remove the Record stored under key.

        The full Record is read first so hooks receive it with DELETED.

        Raises:
            RecordNotFoundError: If no Record is stored under key.
        """
        record = self.get(key)
        if not self._remove(key):
            raise RecordNotFoundError(key, self._id)
        logger.debug("Record deleted", db=self._id, key=key, type=record.type)
        self._dispatcher.dispatch(self, record, RecordEvent.DELETED)

    def query(self, query: Query) -> Rows:
        """Execute query and return a Rows cursor over the results.

        Raises:
            UnsupportedQueryError: More than one Sort entry.
            RecordDecodeError: A stored candidate failed to decode.
            StorageIOError: If the storage could not be read.
        """
        # _documents() is lazy; unsupported queries fail before storage is read
        return self._executor.execute(query, self._documents())

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------

    def get_subscription(self, key: str) -> Subscription:
        return self._subscriptions.get(key)

    def save_subscription(self, subscription: Subscription) -> None:
        self._subscriptions.save(subscription)

    def delete_subscription(self, key: str) -> None:
        self._subscriptions.delete(key)

    def get_matching_subscriptions(self, record: Record) -> set[Subscription]:
        """Subscriptions whose query selects record."""
        return self._subscriptions.matching(record)

    # ------------------------------------------------------------------
    # Backend primitives
    # ------------------------------------------------------------------

    @abstractmethod
    def _read(self, key: str) -> str | None:
        """Stored document for key, or None if absent."""

    @abstractmethod
    def _write(self, key: str, document: str) -> None:
        """Store document under key, creating the storage scope if needed."""

    @abstractmethod
    def _remove(self, key: str) -> bool:
        """Remove key. Returns False if it was already absent."""

    @abstractmethod
    def _exists(self, key: str) -> bool:
        ...

    @abstractmethod
    def _documents(self) -> Iterator[StoredDocument]:
        """Iterate over (key, document) pairs. A missing scope yields nothing."""


class Connection(ABC):
    """Entry point to the Databases of one application namespace."""

    def __init__(
        self,
        namespace: str,
        *,
        registry: HookRegistry | None = None,
        dispatcher: HookDispatcher | None = None,
        hook_workers: int = 4,
        legacy_ties: bool = False,
    ) -> None:
        if not namespace:
            raise ValueError("namespace must be non-empty")
        self._namespace = namespace
        self._registry = registry or (dispatcher.registry if dispatcher else HookRegistry())
        self._dispatcher = dispatcher or HookDispatcher(self._registry, max_workers=hook_workers)
        self._executor = QueryExecutor(legacy_ties=legacy_ties)

    @property
    def namespace(self) -> str:
        return self._namespace

    @property
    def dispatcher(self) -> HookDispatcher:
        return self._dispatcher

    def add_record_hook(self, hook: RecordHook) -> None:
        """Register hook for every Database of this connection."""
        self._registry.register(hook)

    @abstractmethod
    def public_db(self) -> Database:
        ...

    @abstractmethod
    def private_db(self, user_key: str) -> Database:
        ...

    def close(self) -> None:
        """Wait for in-flight hooks and stop the hook workers."""
        self._dispatcher.shutdown(wait=True)

    def __enter__(self) -> Connection:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
