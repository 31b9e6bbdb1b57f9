"""Subscription stores — persistence of Subscriptions for one Database.

FileSubscriptionStore keeps one JSON document per subscription key in
a directory; MemorySubscriptionStore keeps them in a dict. Both answer
matching queries through a SubscriptionMatcher.
"""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterator

import structlog
from pydantic import ValidationError

from recordbase.exceptions import (
    RecordDecodeError,
    StorageIOError,
    SubscriptionNotFoundError,
)
from recordbase.schemas.query import Subscription
from recordbase.schemas.record import Record
from recordbase.subscriptions.matcher import SubscriptionMatcher
from recordbase.utils.keys import check_key, is_valid_key

logger = structlog.get_logger()


class SubscriptionStore(ABC):
    """CRUD over Subscriptions plus record matching."""

    def __init__(self, matcher: SubscriptionMatcher | None = None) -> None:
        self._matcher = matcher or SubscriptionMatcher()

    @abstractmethod
    def get(self, key: str) -> Subscription:
        """Raises SubscriptionNotFoundError if key is absent."""

    @abstractmethod
    def save(self, subscription: Subscription) -> None:
        """Create or replace the subscription stored under its key."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Raises SubscriptionNotFoundError if key is absent."""

    @abstractmethod
    def all(self) -> Iterator[Subscription]:
        """Iterate over every stored subscription."""

    def matching(self, record: Record) -> set[Subscription]:
        return self._matcher.matches(record, self.all())


class MemorySubscriptionStore(SubscriptionStore):
    """Thread-safe in-memory SubscriptionStore."""

    def __init__(self, matcher: SubscriptionMatcher | None = None) -> None:
        super().__init__(matcher)
        self._lock = threading.RLock()
        self._subscriptions: dict[str, Subscription] = {}

    def get(self, key: str) -> Subscription:
        with self._lock:
            try:
                return self._subscriptions[key]
            except KeyError:
                raise SubscriptionNotFoundError(key) from None

    def save(self, subscription: Subscription) -> None:
        check_key(subscription.key, "subscription key")
        with self._lock:
            self._subscriptions[subscription.key] = subscription

    def delete(self, key: str) -> None:
        with self._lock:
            if self._subscriptions.pop(key, None) is None:
                raise SubscriptionNotFoundError(key)

    def all(self) -> Iterator[Subscription]:
        with self._lock:
            snapshot = list(self._subscriptions.values())
        return iter(snapshot)


class FileSubscriptionStore(SubscriptionStore):
    """SubscriptionStore backed by one JSON file per key."""

    def __init__(self, directory: Path, matcher: SubscriptionMatcher | None = None) -> None:
        super().__init__(matcher)
        self._dir = Path(directory)

    def get(self, key: str) -> Subscription:
        if not is_valid_key(key):
            raise SubscriptionNotFoundError(key)
        path = self._dir / key
        try:
            raw = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            raise SubscriptionNotFoundError(key) from None
        except OSError as exc:
            raise StorageIOError(f"Failed to read subscription: {exc}", key) from exc
        return self._decode(raw, key)

    def save(self, subscription: Subscription) -> None:
        check_key(subscription.key, "subscription key")
        try:
            self._dir.mkdir(parents=True, exist_ok=True)
            (self._dir / subscription.key).write_text(
                subscription.model_dump_json(), encoding="utf-8"
            )
        except OSError as exc:
            raise StorageIOError(
                f"Failed to write subscription: {exc}", subscription.key
            ) from exc
        logger.debug("Subscription stored", key=subscription.key, type=subscription.query.type)

    def delete(self, key: str) -> None:
        if not is_valid_key(key):
            raise SubscriptionNotFoundError(key)
        try:
            (self._dir / key).unlink()
        except FileNotFoundError:
            raise SubscriptionNotFoundError(key) from None
        except OSError as exc:
            raise StorageIOError(f"Failed to remove subscription: {exc}", key) from exc

    def all(self) -> Iterator[Subscription]:
        if not self._dir.is_dir():
            return
        for path in sorted(self._dir.iterdir()):
            if not path.is_file():
                continue
            try:
                raw = path.read_text(encoding="utf-8")
            except FileNotFoundError:
                # removed between listing and read
                continue
            except OSError as exc:
                raise StorageIOError(
                    f"Failed to read subscription: {exc}", path.name
                ) from exc
            yield self._decode(raw, path.name)

    @staticmethod
    def _decode(raw: str, key: str) -> Subscription:
        try:
            return Subscription.model_validate_json(raw)
        except ValidationError as exc:
            raise RecordDecodeError(f"Invalid subscription document: {exc}", key) from exc
