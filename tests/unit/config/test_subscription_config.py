"""Tests for SubscriptionRegistry — YAML subscription definitions."""

import pytest
import yaml
from pydantic import ValidationError

from recordbase.config.subscriptions import SubscriptionRegistry
from recordbase.schemas.enums import SortOrder


class TestFromYaml:
    def test_missing_file_is_empty(self, tmp_path):
        registry = SubscriptionRegistry.from_yaml(tmp_path / "absent.yaml")
        assert len(registry) == 0

    def test_empty_file_is_empty(self, tmp_path):
        path = tmp_path / "subs.yaml"
        path.write_text("")
        assert len(SubscriptionRegistry.from_yaml(path)) == 0

    def test_loads_subscriptions(self, tmp_path):
        path = tmp_path / "subs.yaml"
        path.write_text(
            yaml.safe_dump(
                {
                    "subscriptions": {
                        "new-notes": {"type": "note"},
                        "top-scores": {
                            "type": "score",
                            "sort": {"field": "value", "order": "descending"},
                        },
                    }
                }
            )
        )
        registry = SubscriptionRegistry.from_yaml(path)

        assert sorted(registry.keys) == ["new-notes", "top-scores"]
        notes = registry.get("new-notes")
        assert notes.key == "new-notes"
        assert notes.query.type == "note"
        assert notes.query.sorts == ()

        scores = registry.get("top-scores")
        assert scores.query.sorts[0].field_path == "value"
        assert scores.query.sorts[0].order is SortOrder.DESCENDING


class TestFromDict:
    def test_default_sort_order(self):
        registry = SubscriptionRegistry.from_dict(
            {"s1": {"type": "note", "sort": {"field": "title"}}}
        )
        assert registry.get("s1").query.sorts[0].order is SortOrder.ASCENDING

    def test_unknown_key(self):
        assert SubscriptionRegistry.from_dict({}).get("nope") is None

    def test_missing_type_rejected(self):
        with pytest.raises(KeyError):
            SubscriptionRegistry.from_dict({"s1": {}})

    def test_empty_type_rejected(self):
        with pytest.raises(ValidationError):
            SubscriptionRegistry.from_dict({"s1": {"type": ""}})

    def test_iterates_subscriptions(self):
        registry = SubscriptionRegistry.from_dict({"a": {"type": "x"}, "b": {"type": "y"}})
        assert {s.query.type for s in registry} == {"x", "y"}
