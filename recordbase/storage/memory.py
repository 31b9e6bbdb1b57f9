"""In-memory backend — records held as serialized documents in a dict.

Documents are stored in their persisted JSON form rather than as Record
objects, so the memory backend goes through the same decode path as the
filesystem backend and hands out fresh snapshots on every read.
"""

from __future__ import annotations

import threading
from typing import Iterator

import structlog

from recordbase.config.settings import RecordbaseSettings
from recordbase.hooks.dispatcher import ErrorSink, HookDispatcher
from recordbase.hooks.registry import HookRegistry
from recordbase.query.executor import QueryExecutor, StoredDocument
from recordbase.storage.base import PRIVATE_DB_KEY, PUBLIC_DB_KEY, Connection, Database
from recordbase.subscriptions.store import MemorySubscriptionStore
from recordbase.utils.keys import check_key, check_user_key

logger = structlog.get_logger()


class MemoryDatabase(Database):
    """Thread-safe dict-backed Database."""

    def __init__(
        self,
        database_id: str,
        *,
        dispatcher: HookDispatcher,
        executor: QueryExecutor | None = None,
    ) -> None:
        super().__init__(
            database_id,
            dispatcher=dispatcher,
            subscriptions=MemorySubscriptionStore(),
            executor=executor,
        )
        self._lock = threading.RLock()
        self._documents_by_key: dict[str, str] = {}

    def _read(self, key: str) -> str | None:
        with self._lock:
            return self._documents_by_key.get(key)

    def _write(self, key: str, document: str) -> None:
        check_key(key, "record key")
        with self._lock:
            self._documents_by_key[key] = document

    def _remove(self, key: str) -> bool:
        with self._lock:
            return self._documents_by_key.pop(key, None) is not None

    def _exists(self, key: str) -> bool:
        with self._lock:
            return key in self._documents_by_key

    def _documents(self) -> Iterator[StoredDocument]:
        with self._lock:
            snapshot = list(self._documents_by_key.items())
        yield from snapshot

    def count(self) -> int:
        """Number of stored records."""
        with self._lock:
            return len(self._documents_by_key)


class MemoryConnection(Connection):
    """Connection whose databases live only for the process lifetime."""

    def __init__(
        self,
        namespace: str,
        *,
        registry: HookRegistry | None = None,
        dispatcher: HookDispatcher | None = None,
        hook_workers: int = 4,
        legacy_ties: bool = False,
    ) -> None:
        super().__init__(
            namespace,
            registry=registry,
            dispatcher=dispatcher,
            hook_workers=hook_workers,
            legacy_ties=legacy_ties,
        )
        self._lock = threading.Lock()
        self._public_db = MemoryDatabase(
            PUBLIC_DB_KEY, dispatcher=self._dispatcher, executor=self._executor
        )
        self._private_dbs: dict[str, MemoryDatabase] = {}

    def public_db(self) -> MemoryDatabase:
        return self._public_db

    def private_db(self, user_key: str) -> MemoryDatabase:
        check_user_key(user_key)
        with self._lock:
            db = self._private_dbs.get(user_key)
            if db is None:
                db = MemoryDatabase(
                    PRIVATE_DB_KEY, dispatcher=self._dispatcher, executor=self._executor
                )
                self._private_dbs[user_key] = db
            return db


def open(
    namespace: str,
    root_path: str = "",
    *,
    settings: RecordbaseSettings | None = None,
    registry: HookRegistry | None = None,
    error_sink: ErrorSink | None = None,
) -> MemoryConnection:
    """Open an in-memory connection. root_path is accepted and ignored."""
    settings = settings or RecordbaseSettings()
    registry = registry or HookRegistry()
    dispatcher = HookDispatcher(
        registry,
        max_workers=settings.hook_workers,
        error_sink=error_sink,
    )
    logger.debug("Memory connection opened", namespace=namespace)
    return MemoryConnection(
        namespace,
        registry=registry,
        dispatcher=dispatcher,
        legacy_ties=settings.legacy_tie_order,
    )
