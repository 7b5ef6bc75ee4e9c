"""Top-level public API for the ``insight_explorer`` package.

This module re-exports the explorer surface so callers can import from a
single namespace, for example:

>>> from insight_explorer import ExploreStore, ExploreOrder, FieldKind  # doctest: +SKIP

It exposes the ``ExploreStore`` controller together with the immutable value
types it reads and produces, and the pure ordering/navigation helpers for
callers that want them without a store.
"""

from .ExploreEvent import ExploreEvent
from .ExploreSnapshot import (
    DEFAULT_RESIZE_HEIGHT,
    DEFAULT_RESIZE_WIDTH,
    ExploreSnapshot,
    ResizeMode,
    VisualConfig,
)
from .ExploreStore import ExploreStore
from .InsightSpace import AnalyticRole, AssociationResult, Field, InsightSpace, VizSpace
from .ViewDescriptor import DEFAULT_AGGREGATOR, FieldKind, ResolvedSpec, ViewDescriptor
from .explore_constraints import ConstraintEntry, ConstraintSet, next_constraint_state
from .explore_cursor import ViewCursor, find_view_index, is_set_equal, next_index, previous_index
from .explore_fork import ForkView
from .explore_ordering import EXPLORE_ORDER_OPTIONS, ExploreOrder, order_spaces
from .explore_pipeline import ComputeService, InsightPipeline, TaskTestMode
from .explore_requests import RequestTracker, ResolutionTarget, UpdateOutcome

__all__ = [
    "AnalyticRole",
    "AssociationResult",
    "ComputeService",
    "ConstraintEntry",
    "ConstraintSet",
    "DEFAULT_AGGREGATOR",
    "DEFAULT_RESIZE_HEIGHT",
    "DEFAULT_RESIZE_WIDTH",
    "EXPLORE_ORDER_OPTIONS",
    "ExploreEvent",
    "ExploreOrder",
    "ExploreSnapshot",
    "ExploreStore",
    "Field",
    "FieldKind",
    "ForkView",
    "InsightPipeline",
    "InsightSpace",
    "RequestTracker",
    "ResizeMode",
    "ResolutionTarget",
    "ResolvedSpec",
    "TaskTestMode",
    "UpdateOutcome",
    "ViewCursor",
    "ViewDescriptor",
    "VisualConfig",
    "VizSpace",
    "find_view_index",
    "is_set_equal",
    "next_constraint_state",
    "next_index",
    "order_spaces",
    "previous_index",
]
