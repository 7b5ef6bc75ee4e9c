"""Immutable records for insight spaces and the field catalog.

An ``InsightSpace`` is a candidate (dimensions, measures) grouping proposed by
the external mining pipeline. The explorer never mutates these records; it
only orders them and navigates between them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Optional, Tuple


class AnalyticRole(str, Enum):
    """Analytic role of a field in the catalog."""

    DIMENSION = "dimension"
    MEASURE = "measure"

    @classmethod
    def coerce(cls, value: Any) -> "AnalyticRole":
        """Return ``value`` as an ``AnalyticRole`` or raise ``ValueError``."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ValueError(
                f"Unknown analytic role {value!r}; expected 'dimension' or 'measure'."
            ) from None


@dataclass(frozen=True)
class Field:
    """Catalog entry for one column of the data source.

    Parameters
    ----------
    id : str
        Field identifier (column key).
    analytic_role : AnalyticRole
        Whether the field acts as a dimension or a measure.
    distinct_count : int
        Precomputed number of distinct values, used for cardinality ordering.
    name : str or None
        Optional display name.
    """

    id: str
    analytic_role: AnalyticRole
    distinct_count: int = 0
    name: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "analytic_role", AnalyticRole.coerce(self.analytic_role))


@dataclass(frozen=True)
class InsightSpace:
    """Immutable record of one candidate insight space.

    Parameters
    ----------
    dimensions : tuple[str, ...]
        Dimension field ids.
    measures : tuple[str, ...]
        Measure field ids.
    significance : float or None
        Significance forwarded to the specification resolver.
    score : float or None
        Ranking score assigned by the mining pipeline.
    impurity : float or None
        Impurity metric reported by the mining pipeline.
    """

    dimensions: Tuple[str, ...]
    measures: Tuple[str, ...]
    significance: Optional[float] = None
    score: Optional[float] = None
    impurity: Optional[float] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "dimensions", tuple(self.dimensions))
        object.__setattr__(self, "measures", tuple(self.measures))

    @property
    def field_count(self) -> int:
        return len(self.dimensions) + len(self.measures)

    def __repr__(self) -> str:
        return (
            f"InsightSpace(dimensions={list(self.dimensions)!r}, "
            f"measures={list(self.measures)!r})"
        )


@dataclass(frozen=True, repr=False)
class VizSpace(InsightSpace):
    """Insight space carrying a denormalized chart schema and its rows.

    Used for associated views, where the pipeline resolves the chart for each
    entry up front.
    """

    schema: Mapping[str, Any] = field(default_factory=dict)
    data_view: Tuple[Mapping[str, Any], ...] = ()

    def __post_init__(self) -> None:
        super().__post_init__()
        object.__setattr__(self, "data_view", tuple(self.data_view))


@dataclass(frozen=True)
class AssociationResult:
    """First- and second-order associated views for one space."""

    first_order: Tuple[VizSpace, ...] = ()
    second_order: Tuple[VizSpace, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "first_order", tuple(self.first_order))
        object.__setattr__(self, "second_order", tuple(self.second_order))
