"""Tests for the recordbase CLI entry point."""

import json

import pytest
import yaml

import recordbase.__main__ as cli
from recordbase.__main__ import main, parse_field


@pytest.fixture(autouse=True)
def _no_logging_reconfigure(monkeypatch):
    """Keep the test-wide structlog capture in place."""
    monkeypatch.setattr(cli, "configure_logging", lambda **kwargs: None)


def _run(tmp_path, *argv: str) -> int:
    return main(["--data-dir", str(tmp_path), "--namespace", "cliapp", *argv])


def _records(out: str) -> list[dict]:
    return [json.loads(line) for line in out.splitlines() if line.startswith("{")]


class TestParseField:
    def test_json_scalars(self):
        assert parse_field("n=3") == ("n", 3)
        assert parse_field("f=1.5") == ("f", 1.5)
        assert parse_field("b=true") == ("b", True)
        assert parse_field("z=null") == ("z", None)
        assert parse_field('s="quoted"') == ("s", "quoted")

    def test_plain_text(self):
        assert parse_field("title=hello world") == ("title", "hello world")

    def test_containers_kept_as_text(self):
        assert parse_field("tags=[1,2]") == ("tags", "[1,2]")

    def test_missing_separator(self):
        with pytest.raises(ValueError):
            parse_field("novalue")


class TestCommands:
    def test_save_and_get(self, tmp_path, capsys):
        assert _run(tmp_path, "save", "r1", "note", "title=a", "score=3") == 0
        capsys.readouterr()
        assert _run(tmp_path, "get", "r1") == 0
        assert _records(capsys.readouterr().out) == [
            {"_type": "note", "_key": "r1", "title": "a", "score": 3}
        ]

    def test_get_missing(self, tmp_path, capsys):
        assert _run(tmp_path, "get", "nope") == 1
        assert "not found" in capsys.readouterr().err

    def test_delete(self, tmp_path, capsys):
        _run(tmp_path, "save", "r1", "note")
        assert _run(tmp_path, "delete", "r1") == 0
        assert _run(tmp_path, "delete", "r1") == 1

    def test_query_sorted(self, tmp_path, capsys):
        _run(tmp_path, "save", "r1", "x", "score=3")
        _run(tmp_path, "save", "r2", "x", "score=1")
        _run(tmp_path, "save", "r3", "x", "score=2")
        capsys.readouterr()

        assert _run(tmp_path, "query", "x", "--sort", "score") == 0
        assert [r["_key"] for r in _records(capsys.readouterr().out)] == ["r2", "r3", "r1"]

        assert _run(tmp_path, "query", "x", "--sort", "score", "--desc") == 0
        assert [r["_key"] for r in _records(capsys.readouterr().out)] == ["r1", "r3", "r2"]

    def test_private_database(self, tmp_path, capsys):
        assert main(["--data-dir", str(tmp_path), "--namespace", "cliapp", "--user", "alice", "save", "r1", "note"]) == 0
        assert _run(tmp_path, "get", "r1") == 1
        assert (tmp_path / "cliapp" / "alice" / "r1").is_file()

    def test_subscribe_and_match(self, tmp_path, capsys):
        subs = tmp_path / "subs.yaml"
        subs.write_text(yaml.safe_dump({"subscriptions": {"s1": {"type": "note"}, "s2": {"type": "task"}}}))
        _run(tmp_path, "save", "r1", "note")

        assert _run(tmp_path, "subscribe", str(subs)) == 0
        assert "Saved 2 subscription(s)" in capsys.readouterr().out

        assert _run(tmp_path, "match", "r1") == 0
        lines = [line for line in capsys.readouterr().out.splitlines() if "\t" in line]
        assert lines == ["s1\tnote"]

    def test_invalid_field_assignment(self, tmp_path, capsys):
        assert _run(tmp_path, "save", "r1", "note", "oops") == 1
        assert "FIELD=VALUE" in capsys.readouterr().err

    @pytest.mark.parametrize("user", ["../other", "_public"])
    def test_invalid_user_reports_error(self, tmp_path, capsys, user):
        argv = ["--data-dir", str(tmp_path), "--namespace", "cliapp", "--user", user, "get", "r1"]
        assert main(argv) == 1
        assert capsys.readouterr().err.startswith("error: Invalid user key")
        assert not (tmp_path / "other").exists()

    def test_invalid_namespace_reports_error(self, tmp_path, capsys):
        assert main(["--data-dir", str(tmp_path), "--namespace", "../up", "get", "r1"]) == 1
        assert "error: Invalid namespace" in capsys.readouterr().err
