"""HookRegistry — owned, append-only list of record hooks.

A registry is created by a Connection and shared with every Database it
opens. Hooks are never de-duplicated or removed.
"""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING, Callable

from recordbase.schemas.enums import RecordEvent
from recordbase.schemas.record import Record

if TYPE_CHECKING:
    from recordbase.storage.base import Database

RecordHook = Callable[["Database", Record, RecordEvent], None]


class HookRegistry:
    """Thread-safe append-only registry of RecordHooks."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._hooks: list[RecordHook] = []

    def register(self, hook: RecordHook) -> None:
        """Append a hook. Registering the same hook twice runs it twice."""
        with self._lock:
            self._hooks.append(hook)

    def hooks(self) -> tuple[RecordHook, ...]:
        """Snapshot of the registered hooks, in registration order."""
        with self._lock:
            return tuple(self._hooks)

    def __len__(self) -> int:
        with self._lock:
            return len(self._hooks)
