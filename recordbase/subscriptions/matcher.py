"""SubscriptionMatcher — selects Subscriptions interested in a Record.

A Subscription matches a Record when its query type equals the Record's
type and the PredicateEvaluator accepts the query predicate. Predicates
carry no conditions yet, so TypeOnlyEvaluator accepts all of them; a
richer evaluator can be injected without changing the matcher.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable

from recordbase.schemas.query import Predicate, Subscription
from recordbase.schemas.record import Record


class PredicateEvaluator(ABC):
    """Decides whether a Record satisfies a Query predicate."""

    @abstractmethod
    def evaluate(self, predicate: Predicate, record: Record) -> bool:
        ...


class TypeOnlyEvaluator(PredicateEvaluator):
    """Accepts every predicate; matching reduces to type equality."""

    def evaluate(self, predicate: Predicate, record: Record) -> bool:
        return True


class SubscriptionMatcher:
    """Matches Records against a set of Subscriptions."""

    def __init__(self, evaluator: PredicateEvaluator | None = None) -> None:
        self._evaluator = evaluator or TypeOnlyEvaluator()

    def is_match(self, subscription: Subscription, record: Record) -> bool:
        query = subscription.query
        if query.type != record.type:
            return False
        return self._evaluator.evaluate(query.predicate, record)

    def matches(
        self, record: Record, subscriptions: Iterable[Subscription]
    ) -> set[Subscription]:
        """Return every subscription whose query selects record."""
        return {s for s in subscriptions if self.is_match(s, record)}
