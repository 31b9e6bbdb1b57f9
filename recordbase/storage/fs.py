"""Filesystem backend — one JSON document per record key.

Layout under the storage root:

    <root>/<namespace>/_public/<key>                  public records
    <root>/<namespace>/_public/_subscription/<key>    public subscriptions
    <root>/<namespace>/<user_key>/<key>               private records

Directories are created lazily on first save, so a database that was
never written to simply has no directory; querying it yields no rows.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Iterator

import structlog

from recordbase.config.settings import RecordbaseSettings
from recordbase.exceptions import StorageIOError
from recordbase.hooks.dispatcher import ErrorSink, HookDispatcher
from recordbase.hooks.registry import HookRegistry
from recordbase.query.executor import QueryExecutor, StoredDocument
from recordbase.storage.base import PRIVATE_DB_KEY, PUBLIC_DB_KEY, Connection, Database
from recordbase.subscriptions.store import FileSubscriptionStore
from recordbase.utils.keys import SUBSCRIPTION_DIR, check_key, check_user_key, is_valid_key

logger = structlog.get_logger()


class FileDatabase(Database):
    """Database storing each record as a file named by its key."""

    def __init__(
        self,
        directory: Path,
        database_id: str,
        *,
        dispatcher: HookDispatcher,
        executor: QueryExecutor | None = None,
    ) -> None:
        super().__init__(
            database_id,
            dispatcher=dispatcher,
            subscriptions=FileSubscriptionStore(directory / SUBSCRIPTION_DIR),
            executor=executor,
        )
        self._dir = directory

    @property
    def directory(self) -> Path:
        return self._dir

    def _path(self, key: str) -> Path:
        return self._dir / check_key(key, "record key")

    def _read(self, key: str) -> str | None:
        # a key that cannot name a file was never stored
        if not is_valid_key(key):
            return None
        path = self._path(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise StorageIOError(f"Failed to read record: {exc}", key) from exc

    def _write(self, key: str, document: str) -> None:
        path = self._path(key)
        try:
            self._dir.mkdir(parents=True, exist_ok=True)
            # write-then-rename so a concurrent scan never sees half a document
            fd, tmp_name = tempfile.mkstemp(prefix=f".{key}.", dir=self._dir)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(document)
                    f.write("\n")
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise StorageIOError(f"Failed to write record: {exc}", key) from exc

    def _remove(self, key: str) -> bool:
        if not is_valid_key(key):
            return False
        try:
            self._path(key).unlink()
        except FileNotFoundError:
            return False
        except OSError as exc:
            raise StorageIOError(f"Failed to remove record: {exc}", key) from exc
        return True

    def _exists(self, key: str) -> bool:
        return is_valid_key(key) and self._path(key).is_file()

    def _documents(self) -> Iterator[StoredDocument]:
        try:
            entries = sorted(os.scandir(self._dir), key=lambda e: e.name)
        except FileNotFoundError:
            return
        except OSError as exc:
            raise StorageIOError(f"Failed to list records: {exc}") from exc

        for entry in entries:
            if entry.name.startswith(".") or not entry.is_file():
                continue
            try:
                raw = Path(entry.path).read_text(encoding="utf-8")
            except FileNotFoundError:
                # deleted between listing and read
                continue
            except OSError as exc:
                raise StorageIOError(f"Failed to read record: {exc}", entry.name) from exc
            yield entry.name, raw


class FileConnection(Connection):
    """Connection to the filesystem databases of one namespace."""

    def __init__(
        self,
        namespace: str,
        root_path: str | Path,
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
        self._dir = Path(root_path) / check_key(namespace, "namespace")
        self._public_db = FileDatabase(
            self._dir / PUBLIC_DB_KEY,
            PUBLIC_DB_KEY,
            dispatcher=self._dispatcher,
            executor=self._executor,
        )

    @property
    def directory(self) -> Path:
        return self._dir

    def public_db(self) -> FileDatabase:
        return self._public_db

    def private_db(self, user_key: str) -> FileDatabase:
        return FileDatabase(
            self._dir / check_user_key(user_key),
            PRIVATE_DB_KEY,
            dispatcher=self._dispatcher,
            executor=self._executor,
        )


def open(
    namespace: str,
    root_path: str | Path,
    *,
    settings: RecordbaseSettings | None = None,
    registry: HookRegistry | None = None,
    error_sink: ErrorSink | None = None,
) -> FileConnection:
    """Open a filesystem connection rooted at root_path/namespace."""
    settings = settings or RecordbaseSettings()
    registry = registry or HookRegistry()
    dispatcher = HookDispatcher(
        registry,
        max_workers=settings.hook_workers,
        error_sink=error_sink,
    )
    conn = FileConnection(
        namespace,
        root_path,
        registry=registry,
        dispatcher=dispatcher,
        legacy_ties=settings.legacy_tie_order,
    )
    logger.info("Filesystem connection opened", namespace=namespace, path=str(conn.directory))
    return conn
