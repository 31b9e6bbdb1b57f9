"""Subscriptions — stored interest queries and record matching."""

from recordbase.subscriptions.matcher import (
    PredicateEvaluator,
    SubscriptionMatcher,
    TypeOnlyEvaluator,
)
from recordbase.subscriptions.store import (
    FileSubscriptionStore,
    MemorySubscriptionStore,
    SubscriptionStore,
)

__all__ = [
    "FileSubscriptionStore",
    "MemorySubscriptionStore",
    "PredicateEvaluator",
    "SubscriptionMatcher",
    "SubscriptionStore",
    "TypeOnlyEvaluator",
]
