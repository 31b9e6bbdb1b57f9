"""Subscription definitions loaded from YAML.

Lets a deployment declare the interest queries it wants registered,
instead of creating them one by one through the API.
"""

from pathlib import Path
from typing import Any

import yaml

from recordbase.schemas.enums import SortOrder
from recordbase.schemas.query import Query, Sort, Subscription


class SubscriptionRegistry:
    """Named Subscriptions parsed and validated on load."""

    def __init__(self, subscriptions: dict[str, Subscription] | None = None) -> None:
        self._subscriptions: dict[str, Subscription] = subscriptions or {}

    def get(self, key: str) -> Subscription | None:
        return self._subscriptions.get(key)

    @property
    def keys(self) -> list[str]:
        return list(self._subscriptions.keys())

    def __iter__(self):
        return iter(self._subscriptions.values())

    def __len__(self) -> int:
        return len(self._subscriptions)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "SubscriptionRegistry":
        """Load subscriptions from a YAML file.

        Expected YAML structure:
            subscriptions:
              new-notes:
                type: note
              top-scores:
                type: score
                sort: {field: value, order: DESCENDING}

        A missing file gives an empty registry.
        """
        path = Path(path)
        if not path.exists():
            return cls({})

        with open(path) as f:
            raw = yaml.safe_load(f) or {}

        return cls.from_dict(raw.get("subscriptions", {}) or {})

    @classmethod
    def from_dict(cls, subscriptions: dict[str, dict[str, Any]]) -> "SubscriptionRegistry":
        """Create registry from a plain dictionary (useful for testing)."""
        parsed: dict[str, Subscription] = {}
        for key, data in subscriptions.items():
            sorts: tuple[Sort, ...] = ()
            sort_data = data.get("sort")
            if sort_data:
                sorts = (
                    Sort(
                        field_path=sort_data["field"],
                        order=SortOrder(sort_data.get("order", SortOrder.ASCENDING.value).upper()),
                    ),
                )
            parsed[key] = Subscription(
                key=key,
                query=Query(type=data["type"], sorts=sorts),
            )
        return cls(parsed)
