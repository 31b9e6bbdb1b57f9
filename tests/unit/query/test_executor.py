"""Tests for QueryExecutor — coarse scan, decode and sort pipeline."""

import pytest

from recordbase.exceptions import RecordDecodeError, UnsupportedQueryError
from recordbase.query.executor import QueryExecutor
from recordbase.schemas.enums import SortOrder
from recordbase.schemas.query import Query, Sort
from recordbase.schemas.record import Record


def _doc(key: str, record_type: str = "x", **fields) -> tuple[str, str]:
    return key, Record(key=key, type=record_type, fields=fields).to_document()


def _keys(rows) -> list[str]:
    return [r.key for r in rows]


class TestTypeSelection:
    def test_selects_only_matching_type(self):
        docs = [_doc("a", "note"), _doc("b", "task"), _doc("c", "note")]
        rows = QueryExecutor().execute(Query(type="note"), docs)
        assert sorted(_keys(rows)) == ["a", "c"]

    def test_no_match_is_empty(self):
        rows = QueryExecutor().execute(Query(type="note"), [_doc("a", "task")])
        assert rows.next() is None

    def test_no_documents_is_empty(self):
        assert _keys(QueryExecutor().execute(Query(type="note"), [])) == []

    def test_type_prefix_not_matched(self):
        docs = [_doc("a", "notes"), _doc("b", "note")]
        assert _keys(QueryExecutor().execute(Query(type="note"), docs)) == ["b"]

    def test_leading_whitespace_tolerated(self):
        key, raw = _doc("a", "note")
        rows = QueryExecutor().execute(Query(type="note"), [(key, "  " + raw)])
        assert _keys(rows) == ["a"]

    def test_decoded_type_rechecked(self):
        # duplicate member: the last "_type" wins when decoded
        raw = '{"_type":"note","_key":"a","_type":"task"}'
        rows = QueryExecutor().execute(Query(type="note"), [("a", raw)])
        assert _keys(rows) == []


class TestDecodeFailures:
    def test_candidate_decode_failure_aborts(self):
        docs = [_doc("a", "note"), ("b", '{"_type":"note","_key":')]
        with pytest.raises(RecordDecodeError) as exc_info:
            QueryExecutor().execute(Query(type="note"), docs)
        assert exc_info.value.key == "b"

    def test_non_candidate_garbage_ignored(self):
        docs = [_doc("a", "note"), ("junk", "not json at all")]
        assert _keys(QueryExecutor().execute(Query(type="note"), docs)) == ["a"]


class TestSorting:
    def test_ascending(self):
        docs = [_doc("r1", score=3), _doc("r2", score=1), _doc("r3", score=2)]
        query = Query(type="x", sorts=(Sort(field_path="score"),))
        assert _keys(QueryExecutor().execute(query, docs)) == ["r2", "r3", "r1"]

    def test_descending(self):
        docs = [_doc("r1", score=3), _doc("r2", score=1), _doc("r3", score=2)]
        query = Query(
            type="x", sorts=(Sort(field_path="score", order=SortOrder.DESCENDING),)
        )
        assert _keys(QueryExecutor().execute(query, docs)) == ["r1", "r3", "r2"]

    def test_missing_field_sorts_first(self):
        docs = [_doc("r1", score=3), _doc("r2")]
        query = Query(type="x", sorts=(Sort(field_path="score"),))
        assert _keys(QueryExecutor().execute(query, docs)) == ["r2", "r1"]

    def test_multiple_sorts_unsupported_before_scan(self):
        def documents():
            raise AssertionError("storage must not be touched")
            yield  # pragma: no cover

        query = Query(
            type="x",
            sorts=(Sort(field_path="a"), Sort(field_path="b")),
        )
        with pytest.raises(UnsupportedQueryError):
            QueryExecutor().execute(query, documents())
