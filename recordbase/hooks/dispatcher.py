"""HookDispatcher — runs record hooks on a supervised worker pool.

Each hook invocation is submitted as an independent task to a bounded
ThreadPoolExecutor. The mutating call that triggered dispatch never
waits for its hooks, and there is no ordering between hooks of the same
event. A hook that raises does not affect the write; the failure is
handed to the error sink instead.
"""

from __future__ import annotations

import threading
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import wait as wait_futures
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable

import structlog

from recordbase.hooks.registry import HookRegistry, RecordHook
from recordbase.schemas.enums import RecordEvent
from recordbase.schemas.record import Record

if TYPE_CHECKING:
    from recordbase.storage.base import Database

logger = structlog.get_logger()

DEFAULT_MAX_WORKERS = 4


@dataclass(frozen=True)
class HookFailure:
    """A hook invocation that raised."""

    hook_name: str
    database_id: str
    record_key: str
    event: RecordEvent
    error: BaseException


ErrorSink = Callable[[HookFailure], None]


def log_hook_failure(failure: HookFailure) -> None:
    """Default error sink: emit a structured error event."""
    logger.error(
        "Record hook failed",
        hook=failure.hook_name,
        db=failure.database_id,
        key=failure.record_key,
        record_event=failure.event.value,
        error=repr(failure.error),
    )


def _hook_name(hook: RecordHook) -> str:
    return getattr(hook, "__qualname__", None) or repr(hook)


class HookDispatcher:
    """Submits every registered hook for each mutation event."""

    def __init__(
        self,
        registry: HookRegistry,
        *,
        max_workers: int = DEFAULT_MAX_WORKERS,
        error_sink: ErrorSink | None = None,
    ) -> None:
        self._registry = registry
        self._error_sink = error_sink or log_hook_failure
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix="recordbase-hook",
        )
        self._lock = threading.RLock()
        self._pending: set[Future] = set()
        self._closed = False

    @property
    def registry(self) -> HookRegistry:
        return self._registry

    def dispatch(self, database: Database, record: Record, event: RecordEvent) -> int:
        """Submit all hooks for one event. Returns the number submitted.

        Does not wait for any hook to run.
        """
        hooks = self._registry.hooks()
        if not hooks:
            return 0

        submitted = 0
        with self._lock:
            if self._closed:
                logger.warning(
                    "Hook dispatch after shutdown dropped",
                    key=record.key,
                    record_event=event.value,
                )
                return 0
            for hook in hooks:
                future = self._executor.submit(self._run, hook, database, record, event)
                self._pending.add(future)
                future.add_done_callback(self._discard)
                submitted += 1

        logger.debug(
            "Hooks dispatched",
            key=record.key,
            record_event=event.value,
            count=submitted,
        )
        return submitted

    def flush(self, timeout: float | None = None) -> bool:
        """Wait for in-flight hooks. Returns True if all finished in time."""
        with self._lock:
            pending = set(self._pending)
        if not pending:
            return True
        _, not_done = wait_futures(pending, timeout=timeout)
        return not not_done

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting events and release the worker pool."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
        self._executor.shutdown(wait=wait)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _run(
        self,
        hook: RecordHook,
        database: Database,
        record: Record,
        event: RecordEvent,
    ) -> None:
        try:
            hook(database, record, event)
        except Exception as exc:
            failure = HookFailure(
                hook_name=_hook_name(hook),
                database_id=database.id(),
                record_key=record.key,
                event=event,
                error=exc,
            )
            try:
                self._error_sink(failure)
            except Exception:
                logger.exception("Hook error sink failed", hook=failure.hook_name)

    def _discard(self, future: Future) -> None:
        with self._lock:
            self._pending.discard(future)
