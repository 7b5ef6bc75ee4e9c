"""Immutable snapshot of the explorer's whole owned state.

``ExploreStore`` keeps exactly one ``ExploreSnapshot`` and replaces it
wholesale on every update, so a snapshot handed to a subscriber never changes
underneath it.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Mapping, Optional, Tuple

from .InsightSpace import InsightSpace, VizSpace
from .ViewDescriptor import DEFAULT_AGGREGATOR, ResolvedSpec, ViewDescriptor
from .explore_constraints import ConstraintSet
from .explore_cursor import ViewCursor
from .explore_fork import ForkView
from .explore_ordering import ExploreOrder

DEFAULT_RESIZE_WIDTH = 320
DEFAULT_RESIZE_HEIGHT = 320


class ResizeMode(str, Enum):
    AUTO = "auto"
    CONTROL = "control"


@dataclass(frozen=True)
class VisualConfig:
    """Presentation preferences shared by every rendered view.

    Parameters
    ----------
    aggregator : str
        Default aggregator for measures.
    default_aggregated : bool
        Whether charts aggregate by default.
    default_stack : bool
        Whether series stack by default.
    vis_mode : str
        Visualization recommendation mode.
    zoom : bool
        Enable zooming.
    debug : bool
        Show debug overlays.
    resize : ResizeMode
        Chart sizing mode.
    resize_width, resize_height : int
        Chart size used when ``resize`` is ``ResizeMode.CONTROL``.
    nlg : bool
        Enable natural-language summaries.
    """

    aggregator: str = DEFAULT_AGGREGATOR
    default_aggregated: bool = False
    default_stack: bool = True
    vis_mode: str = "dist"
    zoom: bool = False
    debug: bool = False
    resize: ResizeMode = ResizeMode.AUTO
    resize_width: int = DEFAULT_RESIZE_WIDTH
    resize_height: int = DEFAULT_RESIZE_HEIGHT
    nlg: bool = False

    def with_default_resize(self) -> "VisualConfig":
        return replace(
            self,
            resize=ResizeMode.AUTO,
            resize_width=DEFAULT_RESIZE_WIDTH,
            resize_height=DEFAULT_RESIZE_HEIGHT,
        )


@dataclass(frozen=True)
class ExploreSnapshot:
    """Immutable record of the explorer state at one version.

    Parameters
    ----------
    cursor : ViewCursor
        Page index, committed view and its spec.
    fork : ForkView
        Editable overlay and its spec.
    order_by : ExploreOrder
        Active ordering mode.
    details : tuple[InsightSpace, ...]
        Drill-down records for a space.
    asso_list_t1, asso_list_t2 : tuple[VizSpace, ...]
        First- and second-order associated views of the committed space.
    show_asso, show_constraints, show_preference_panel, show_save_modal, show_subinsights : bool
        Presentation toggles.
    visual_config : VisualConfig
        Presentation preferences.
    constraints : ConstraintSet
        Tri-state mining constraints.
    spec_for_editor : Mapping or None
        Schema handed over to an external chart editor.
    version : int
        Incremented on every state replacement.
    """

    cursor: ViewCursor = field(default_factory=ViewCursor)
    fork: ForkView = field(default_factory=ForkView)
    order_by: ExploreOrder = ExploreOrder.DEFAULT
    details: Tuple[InsightSpace, ...] = ()
    asso_list_t1: Tuple[VizSpace, ...] = ()
    asso_list_t2: Tuple[VizSpace, ...] = ()
    show_asso: bool = False
    show_constraints: bool = False
    show_preference_panel: bool = False
    show_save_modal: bool = False
    show_subinsights: bool = False
    visual_config: VisualConfig = field(default_factory=VisualConfig)
    constraints: ConstraintSet = field(default_factory=ConstraintSet)
    spec_for_editor: Optional[Mapping[str, Any]] = None
    version: int = 0

    @property
    def page_index(self) -> int:
        return self.cursor.page_index

    @property
    def view(self) -> Optional[ViewDescriptor]:
        return self.cursor.view

    @property
    def spec(self) -> Optional[ResolvedSpec]:
        return self.cursor.spec

    @property
    def fork_view(self) -> Optional[ViewDescriptor]:
        return self.fork.view

    @property
    def fork_view_spec(self) -> Optional[ResolvedSpec]:
        return self.fork.spec

    def __repr__(self) -> str:
        return (
            f"ExploreSnapshot(version={self.version}, page_index={self.page_index}, "
            f"order_by={self.order_by.value!r}, view={self.view!r})"
        )
