"""Cursor state and navigation math over the ordered space collection."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any, Optional, Sequence, Tuple

from .InsightSpace import InsightSpace
from .ViewDescriptor import ResolvedSpec, ViewDescriptor


@dataclass(frozen=True)
class ViewCursor:
    """Committed position of the explorer.

    Parameters
    ----------
    page_index : int
        Index into the ordering that was current at commit time. Re-ordering
        does not re-validate it.
    view : ViewDescriptor or None
        Committed view descriptor, ``None`` before the first transition.
    spec : ResolvedSpec or None
        Resolved specification of the committed view.
    """

    page_index: int = 0
    view: Optional[ViewDescriptor] = None
    spec: Optional[ResolvedSpec] = None


def next_index(page_index: int, length: int) -> Optional[int]:
    """Return the index after ``page_index`` with wrap-around, or ``None`` if empty."""
    if length <= 0:
        return None
    return (page_index + 1) % length


def previous_index(page_index: int, length: int) -> Optional[int]:
    """Return the index before ``page_index`` with wrap-around, or ``None`` if empty."""
    if length <= 0:
        return None
    return (page_index - 1 + length) % length


def is_set_equal(left: Iterable[str], right: Iterable[str]) -> bool:
    """Order- and duplicate-insensitive comparison of two field lists."""
    return set(left) == set(right)


def field_sets(target: Any) -> Tuple[Sequence[str], Sequence[str]]:
    """Extract ``(dimensions, measures)`` from a space, descriptor, or mapping.

    Raises
    ------
    AttributeError
        If ``target`` is neither a mapping nor has ``dimensions`` and
        ``measures`` attributes.
    """
    if isinstance(target, Mapping):
        return tuple(target.get("dimensions", ())), tuple(target.get("measures", ()))
    return tuple(target.dimensions), tuple(target.measures)


def find_view_index(spaces: Sequence[InsightSpace], target: Any) -> Optional[int]:
    """Return the first index whose fields are set-equal to ``target``'s.

    Examples
    --------
    >>> spaces = [InsightSpace(("a",), ("m",)), InsightSpace(("b", "a"), ("m",))]
    >>> find_view_index(spaces, {"dimensions": ["a", "b"], "measures": ["m"]})
    1
    """
    dimensions, measures = field_sets(target)
    for i, space in enumerate(spaces):
        if is_set_equal(dimensions, space.dimensions) and is_set_equal(measures, space.measures):
            return i
    return None
