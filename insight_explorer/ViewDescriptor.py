"""View descriptors and resolved chart specifications.

``ViewDescriptor`` is the (dimensions, measures, ops) triple shown by the
explorer. Both the committed view and the fork view are descriptors; since
descriptors are frozen, editing the fork always produces a new instance and
can never leak into the committed view.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Tuple

from .InsightSpace import InsightSpace

DEFAULT_AGGREGATOR = "sum"


class FieldKind(str, Enum):
    """Which half of a view a field belongs to."""

    DIMENSIONS = "dimensions"
    MEASURES = "measures"

    @classmethod
    def coerce(cls, value: Any) -> "FieldKind":
        """Return ``value`` as a ``FieldKind`` or raise ``ValueError``.

        Accepts the enum members and their string values (``"dimensions"``,
        ``"measures"``).
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise ValueError(
                f"Unknown field kind {value!r}; expected 'dimensions' or 'measures'."
            ) from None


@dataclass(frozen=True)
class ViewDescriptor:
    """Immutable (dimensions, measures, ops) triple.

    Parameters
    ----------
    dimensions : tuple[str, ...]
        Ordered dimension field ids.
    measures : tuple[str, ...]
        Ordered measure field ids.
    ops : tuple[str, ...]
        One aggregator per measure. Defaults to ``"sum"`` for each measure.

    Raises
    ------
    ValueError
        If ``ops`` and ``measures`` differ in length.
    """

    dimensions: Tuple[str, ...] = ()
    measures: Tuple[str, ...] = ()
    ops: Optional[Tuple[str, ...]] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "dimensions", tuple(self.dimensions))
        object.__setattr__(self, "measures", tuple(self.measures))
        if self.ops is None:
            ops: Tuple[str, ...] = (DEFAULT_AGGREGATOR,) * len(self.measures)
        else:
            ops = tuple(self.ops)
        if len(ops) != len(self.measures):
            raise ValueError(
                f"ops has {len(ops)} entries but there are {len(self.measures)} measures"
            )
        object.__setattr__(self, "ops", ops)

    @classmethod
    def from_space(cls, space: InsightSpace) -> "ViewDescriptor":
        """Build a fresh descriptor for ``space`` with every op set to ``sum``."""
        return cls(dimensions=tuple(space.dimensions), measures=tuple(space.measures))

    def fields(self, kind: FieldKind) -> Tuple[str, ...]:
        kind = FieldKind.coerce(kind)
        if kind is FieldKind.DIMENSIONS:
            return self.dimensions
        if kind is FieldKind.MEASURES:
            return self.measures
        raise ValueError(f"Unsupported field kind: {kind!r}")

    def with_field(self, kind: FieldKind, field_id: str) -> "ViewDescriptor":
        """Return a descriptor with ``field_id`` appended to ``kind``.

        The same instance is returned when the field is already present, so
        callers can detect a no-op with an identity check.
        """
        kind = FieldKind.coerce(kind)
        if field_id in self.fields(kind):
            return self
        if kind is FieldKind.DIMENSIONS:
            return ViewDescriptor(self.dimensions + (field_id,), self.measures, self.ops)
        return ViewDescriptor(
            self.dimensions,
            self.measures + (field_id,),
            self.ops + (DEFAULT_AGGREGATOR,),
        )

    def without_field(self, kind: FieldKind, field_id: str) -> "ViewDescriptor":
        """Return a descriptor without the first occurrence of ``field_id``.

        Removing a measure also drops its aggregator. The same instance is
        returned when the field is absent.
        """
        kind = FieldKind.coerce(kind)
        current = self.fields(kind)
        if field_id not in current:
            return self
        index = current.index(field_id)
        remaining = current[:index] + current[index + 1:]
        if kind is FieldKind.DIMENSIONS:
            return ViewDescriptor(remaining, self.measures, self.ops)
        return ViewDescriptor(
            self.dimensions,
            remaining,
            self.ops[:index] + self.ops[index + 1:],
        )

    def __repr__(self) -> str:
        return (
            f"ViewDescriptor(dimensions={list(self.dimensions)!r}, "
            f"measures={list(self.measures)!r}, ops={list(self.ops)!r})"
        )


@dataclass(frozen=True)
class ResolvedSpec:
    """Chart specification returned by the resolver for one view.

    Parameters
    ----------
    schema : Mapping[str, Any]
        Chart schema (geometry, channel encodings, ...). Opaque to the
        explorer.
    data_view : tuple[Mapping[str, Any], ...]
        Rows backing the chart.
    """

    schema: Mapping[str, Any] = field(default_factory=dict)
    data_view: Tuple[Mapping[str, Any], ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "data_view", tuple(self.data_view))

    @classmethod
    def coerce(cls, value: Any) -> Optional["ResolvedSpec"]:
        """Normalize resolver output, returning ``None`` for empty results.

        Accepted inputs are ``None``, a ``ResolvedSpec``, or a mapping with a
        ``schema`` key and a ``dataView``/``data_view`` row list. A result
        without a schema counts as empty.

        Raises
        ------
        TypeError
            If ``value`` is none of the accepted shapes.
        """
        if value is None:
            return None
        if isinstance(value, ResolvedSpec):
            return value if value.schema else None
        if isinstance(value, Mapping):
            schema = value.get("schema")
            if not schema:
                return None
            rows = value.get("dataView", value.get("data_view", ()))
            return cls(schema=schema, data_view=tuple(rows or ()))
        raise TypeError(
            f"Cannot interpret resolver result of type {type(value).__name__}"
        )

    def __repr__(self) -> str:
        return f"ResolvedSpec(schema={dict(self.schema)!r}, rows={len(self.data_view)})"
