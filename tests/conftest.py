"""Shared test fixtures for recordbase tests.

Provides filesystem and in-memory connections, a hook event recorder,
and captured structured logs for every test.
"""

import threading

import pytest
import structlog

from recordbase.config.settings import RecordbaseSettings
from recordbase.schemas.enums import RecordEvent
from recordbase.schemas.record import Record
from recordbase.storage import fs, memory

NAMESPACE = "testapp"


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------
@pytest.fixture(autouse=True)
def log_output():
    """Capture structlog events instead of printing them."""
    with structlog.testing.capture_logs() as logs:
        yield logs


# ---------------------------------------------------------------------------
# Hook recording
# ---------------------------------------------------------------------------
class EventRecorder:
    """Record hook that remembers every (db id, record, event) it receives."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.calls: list[tuple[str, Record, RecordEvent]] = []

    def __call__(self, db, record: Record, event: RecordEvent) -> None:
        with self._lock:
            self.calls.append((db.id(), record, event))

    @property
    def events(self) -> list[RecordEvent]:
        return [event for _, _, event in self.calls]


@pytest.fixture
def recorder() -> EventRecorder:
    return EventRecorder()


@pytest.fixture
def hook_failures() -> list:
    """Error sink collecting HookFailures."""
    return []


# ---------------------------------------------------------------------------
# Connections
# ---------------------------------------------------------------------------
@pytest.fixture
def settings() -> RecordbaseSettings:
    return RecordbaseSettings(hook_workers=2)


@pytest.fixture
def fs_conn(tmp_path, settings, hook_failures):
    conn = fs.open(NAMESPACE, tmp_path, settings=settings, error_sink=hook_failures.append)
    yield conn
    conn.close()


@pytest.fixture
def mem_conn(settings, hook_failures):
    conn = memory.open(NAMESPACE, settings=settings, error_sink=hook_failures.append)
    yield conn
    conn.close()


@pytest.fixture(params=["fs", "memory"])
def conn(request, tmp_path, settings, hook_failures):
    """Connection to each backend in turn."""
    if request.param == "fs":
        connection = fs.open(NAMESPACE, tmp_path, settings=settings, error_sink=hook_failures.append)
    else:
        connection = memory.open(NAMESPACE, settings=settings, error_sink=hook_failures.append)
    yield connection
    connection.close()


@pytest.fixture
def db(conn):
    return conn.public_db()


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------
@pytest.fixture
def note() -> Record:
    return Record(key="r1", type="note", fields={"title": "a"})