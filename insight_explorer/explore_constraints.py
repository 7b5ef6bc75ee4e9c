"""Tri-state mining constraints per field.

Each catalog field carries a marker that biases future mining runs:
``0`` unconstrained, ``1`` must include, ``-1`` must exclude. The explorer only
stores and cycles these markers; consuming them is the pipeline's job.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Tuple

from .InsightSpace import AnalyticRole, Field
from .ViewDescriptor import FieldKind

CONSTRAINT_STATES: Tuple[int, ...] = (0, 1, -1)


def next_constraint_state(state: int) -> int:
    """Advance ``state`` along ``0 -> 1 -> -1 -> 0``."""
    return (state + 2) % 3 - 1


@dataclass(frozen=True)
class ConstraintEntry:
    field_id: str
    state: int = 0

    def __post_init__(self) -> None:
        if self.state not in CONSTRAINT_STATES:
            raise ValueError(f"Constraint state must be one of {CONSTRAINT_STATES}, got {self.state!r}")


@dataclass(frozen=True)
class ConstraintSet:
    """Immutable constraint markers partitioned by field kind.

    Parameters
    ----------
    dimensions : tuple[ConstraintEntry, ...]
        Markers for dimension fields, in catalog order.
    measures : tuple[ConstraintEntry, ...]
        Markers for measure fields, in catalog order.
    """

    dimensions: Tuple[ConstraintEntry, ...] = ()
    measures: Tuple[ConstraintEntry, ...] = ()

    @classmethod
    def initialize(cls, fields: Iterable[Field]) -> "ConstraintSet":
        """Build a fresh set from the field catalog with every state at ``0``.

        Any previous markers are discarded; this is a full reset.
        """
        dimensions = []
        measures = []
        for f in fields:
            entry = ConstraintEntry(field_id=f.id, state=0)
            if f.analytic_role is AnalyticRole.DIMENSION:
                dimensions.append(entry)
            else:
                measures.append(entry)
        return cls(dimensions=tuple(dimensions), measures=tuple(measures))

    def entries(self, kind: FieldKind) -> Tuple[ConstraintEntry, ...]:
        kind = FieldKind.coerce(kind)
        if kind is FieldKind.DIMENSIONS:
            return self.dimensions
        if kind is FieldKind.MEASURES:
            return self.measures
        raise ValueError(f"Unsupported field kind: {kind!r}")

    def cycle(self, kind: FieldKind, index: int) -> "ConstraintSet":
        """Return a set with entry ``index`` of ``kind`` advanced one state.

        Out-of-range indices (negative ones included) return ``self``.
        """
        kind = FieldKind.coerce(kind)
        current = self.entries(kind)
        if not 0 <= index < len(current):
            return self
        entry = current[index]
        updated = current[:index] + (
            ConstraintEntry(entry.field_id, next_constraint_state(entry.state)),
        ) + current[index + 1:]
        if kind is FieldKind.DIMENSIONS:
            return ConstraintSet(dimensions=updated, measures=self.measures)
        return ConstraintSet(dimensions=self.dimensions, measures=updated)

    def state_of(self, field_id: str) -> int:
        """Return the marker for ``field_id`` (``0`` when unknown)."""
        for entry in self.dimensions + self.measures:
            if entry.field_id == field_id:
                return entry.state
        return 0
