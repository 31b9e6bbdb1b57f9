"""Comparator — ordering over arbitrary field Values.

Values are compared by variant tag (see ValueKind):

  1. null vs null is equal; null sorts before everything else.
  2. Values of differing kinds compare by their canonical string form.
  3. Same kind: False < True, numbers numerically (int and float mixed),
     strings by code point, which is the same as UTF-8 byte order.

compare() is a genuine total order. less() can instead reproduce the
legacy tie behaviour, where two nulls or two equal booleans report
"less" in both directions, and descending is the plain negation of
ascending. Legacy ties make the relative order of equal elements
undefined.
"""

from functools import cmp_to_key
from typing import Any, Callable, Sequence

from recordbase.schemas.enums import SortOrder, ValueKind
from recordbase.schemas.query import Sort
from recordbase.schemas.record import Record, get_value, value_kind


def string_form(value: Any) -> str:
    """Canonical text of a Value, used when kinds differ."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    return str(value)


def _sign(a: Any, b: Any) -> int:
    if a < b:
        return -1
    if a > b:
        return 1
    return 0


def compare(a: Any, b: Any) -> int:
    """Three-way comparison of two Values. Returns -1, 0 or 1."""
    kind_a, kind_b = value_kind(a), value_kind(b)

    if kind_a is ValueKind.NULL and kind_b is ValueKind.NULL:
        return 0
    if kind_a is ValueKind.NULL:
        return -1
    if kind_b is ValueKind.NULL:
        return 1

    if kind_a is not kind_b:
        return _sign(string_form(a), string_form(b))

    if kind_a is ValueKind.BOOL:
        return _sign(int(a), int(b))
    return _sign(a, b)


def less(a: Any, b: Any, *, legacy_ties: bool = False) -> bool:
    """Whether a orders before b.

    With legacy_ties, equal nulls and equal booleans also report True.
    """
    if not legacy_ties:
        return compare(a, b) < 0

    kind_a, kind_b = value_kind(a), value_kind(b)
    if kind_a is ValueKind.NULL:
        return True
    if kind_b is ValueKind.NULL:
        return False
    if kind_a is not kind_b:
        return string_form(a) < string_form(b)
    if kind_a is ValueKind.BOOL:
        # only (True, False) is not less
        return not (a and not b)
    return a < b


def record_comparator(
    sort: Sort, *, legacy_ties: bool = False
) -> Callable[[Record, Record], int]:
    """Build a cmp function over Records for a single Sort entry."""
    field = sort.field_path
    descending = sort.order is SortOrder.DESCENDING

    if legacy_ties:
        def by(r1: Record, r2: Record) -> int:
            is_less = less(get_value(r1, field), get_value(r2, field), legacy_ties=True)
            if descending:
                is_less = not is_less
            return -1 if is_less else 1
        return by

    def by(r1: Record, r2: Record) -> int:
        result = compare(get_value(r1, field), get_value(r2, field))
        return -result if descending else result
    return by


def sort_records(
    records: Sequence[Record], sort: Sort, *, legacy_ties: bool = False
) -> list[Record]:
    """Return records ordered by sort.

    The sort is stable: records with equal values keep their base order
    in both directions, unless legacy_ties is set.
    """
    return sorted(records, key=cmp_to_key(record_comparator(sort, legacy_ties=legacy_ties)))
