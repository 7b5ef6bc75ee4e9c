"""Ordering policies for the insight-space collection.

Purpose
-------
The mining pipeline hands over spaces in its own rank order. The explorer
lets the user re-order them for navigation. Every policy here is a pure
function: the input sequence is never mutated and the result is always a
permutation of it.

Notes
-----
Sorting uses ``numpy.argsort(kind="stable")`` so spaces with equal keys keep
their incoming order. Without stability the displayed page index would drift
between re-renders whenever keys tie.

The cardinality policy is an estimate. It sums the catalog's precomputed
distinct counts instead of issuing an aggregation query per space.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Mapping, Sequence

import numpy as np

from .InsightSpace import Field, InsightSpace


class ExploreOrder(str, Enum):
    """Navigation order applied to the space collection."""

    DEFAULT = "default"
    FIELD_NUM = "field_num"
    CARDINALITY = "cardinality"

    @classmethod
    def coerce(cls, value: Any) -> "ExploreOrder":
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            options = ", ".join(repr(o.value) for o in cls)
            raise ValueError(f"Unknown explore order {value!r}; expected one of {options}.") from None


EXPLORE_ORDER_OPTIONS: Dict[str, str] = {
    ExploreOrder.DEFAULT.value: "Keep the mining pipeline's rank order.",
    ExploreOrder.FIELD_NUM.value: "Fewest fields (dimensions + measures) first.",
    ExploreOrder.CARDINALITY.value: "Lowest summed dimension cardinality first (catalog estimate).",
}


def distinct_counts(fields: Iterable[Field]) -> Dict[str, int]:
    """Map field id to distinct count; the first catalog entry wins on duplicates."""
    counts: Dict[str, int] = {}
    for f in fields:
        counts.setdefault(f.id, int(f.distinct_count or 0))
    return counts


def field_num_key(space: InsightSpace) -> int:
    return space.field_count


def cardinality_key(space: InsightSpace, counts: Mapping[str, int]) -> int:
    """Sum of the distinct counts of ``space``'s dimensions (unknown fields count 0)."""
    return sum(counts.get(dim, 0) for dim in space.dimensions)


def _stable_sorted(spaces: Sequence[InsightSpace], key: Callable[[InsightSpace], int]) -> List[InsightSpace]:
    keys = np.fromiter((key(space) for space in spaces), dtype=np.int64, count=len(spaces))
    order = np.argsort(keys, kind="stable")
    return [spaces[int(i)] for i in order]


def order_spaces(
    spaces: Sequence[InsightSpace],
    order_by: ExploreOrder | str = ExploreOrder.DEFAULT,
    fields: Iterable[Field] = (),
) -> List[InsightSpace]:
    """Return ``spaces`` re-ordered by ``order_by``.

    Parameters
    ----------
    spaces : Sequence[InsightSpace]
        Collection in pipeline rank order. Not modified.
    order_by : ExploreOrder or str
        Ordering mode.
    fields : Iterable[Field]
        Field catalog, consulted by the cardinality policy only.

    Returns
    -------
    list[InsightSpace]
        A new list holding the same spaces.

    Examples
    --------
    >>> a = InsightSpace(("x", "y"), ("m",))
    >>> b = InsightSpace(("x",), ("m",))
    >>> order_spaces([a, b], "field_num") == [b, a]
    True
    """
    order_by = ExploreOrder.coerce(order_by)
    spaces = list(spaces)
    if order_by is ExploreOrder.FIELD_NUM:
        return _stable_sorted(spaces, field_num_key)
    if order_by is ExploreOrder.CARDINALITY:
        counts = distinct_counts(fields)
        return _stable_sorted(spaces, lambda space: cardinality_key(space, counts))
    return spaces
