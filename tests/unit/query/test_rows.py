"""Tests for Rows — the forward-only query result cursor."""

from recordbase.query.rows import MemoryRows, Rows, RowsSource
from recordbase.schemas.record import Record


def _records(n: int) -> list[Record]:
    return [Record(key=f"r{i}", type="x") for i in range(n)]


class _TrackingSource(RowsSource):
    def __init__(self, records: list[Record]) -> None:
        self._inner = MemoryRows(records)
        self.close_calls = 0

    def next(self):
        return self._inner.next()

    def close(self):
        self.close_calls += 1
        self._inner.close()


class TestRowsNext:
    def test_next_in_order_then_none(self):
        rows = Rows(MemoryRows(_records(2)))
        assert rows.next().key == "r0"
        assert rows.next().key == "r1"
        assert rows.next() is None
        assert rows.exhausted is True

    def test_exhausted_is_terminal(self):
        rows = Rows(MemoryRows(_records(1)))
        list(rows)
        assert rows.next() is None
        assert list(rows) == []

    def test_empty(self):
        rows = Rows.empty()
        assert rows.next() is None
        assert rows.exhausted is True

    def test_iteration(self):
        rows = Rows(MemoryRows(_records(3)))
        assert [r.key for r in rows] == ["r0", "r1", "r2"]

    def test_not_restartable(self):
        rows = Rows(MemoryRows(_records(2)))
        rows.next()
        assert [r.key for r in rows] == ["r1"]


class TestRowsClose:
    def test_close_is_idempotent(self):
        source = _TrackingSource(_records(2))
        rows = Rows(source)
        rows.close()
        rows.close()
        assert source.close_calls == 1
        assert rows.closed is True

    def test_close_after_exhaustion(self):
        source = _TrackingSource(_records(1))
        rows = Rows(source)
        list(rows)
        rows.close()
        assert source.close_calls == 1

    def test_close_stops_iteration(self):
        rows = Rows(MemoryRows(_records(3)))
        rows.next()
        rows.close()
        assert rows.next() is None
        assert list(rows) == []

    def test_returned_records_survive_close(self):
        rows = Rows(MemoryRows(_records(1)))
        record = rows.next()
        rows.close()
        assert record.key == "r0"

    def test_context_manager_closes(self):
        source = _TrackingSource(_records(2))
        with Rows(source) as rows:
            rows.next()
        assert rows.closed is True
        assert source.close_calls == 1

    def test_all_drains_and_closes(self):
        rows = Rows(MemoryRows(_records(3)))
        rows.next()
        assert [r.key for r in rows.all()] == ["r1", "r2"]
        assert rows.closed is True
