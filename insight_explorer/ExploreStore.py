"""View-transition orchestration for insight-space exploration.

Purpose
-------
This module provides ``ExploreStore``, the controller behind the explore page
of the analysis workspace. Given the ranked insight spaces produced by an
external mining pipeline, it decides which space is displayed, lets the user
fork the displayed view into an editable draft, and reconciles both views
against the pipeline's asynchronous specification resolver.

Concepts and structure
----------------------
The implementation is composition-based:

- ``ExploreStore`` owns the single current ``ExploreSnapshot`` and exposes the
  public operations.
- ``explore_ordering`` ranks the space collection (pure, stable).
- ``explore_cursor`` holds the cursor model and wrap-around navigation math.
- ``explore_fork`` holds the fork overlay and its field edits.
- ``explore_constraints`` holds the tri-state mining constraints.
- ``explore_requests`` stamps requests with generations so stale responses
  can be dropped.

Every update replaces the snapshot in one step (``dataclasses.replace``),
bumps its version, and notifies subscribers with an ``ExploreEvent``.

Important gotchas
-----------------
- Re-ordering does not re-clamp ``page_index``. After switching order the
  same index may point at a different space; ``set_explore_order`` re-commits
  whatever now sits at that index.
- Public async operations never raise on collaborator failure. They return an
  ``UpdateOutcome`` and leave state untouched instead.
- With ``discard_stale=False`` responses apply in arrival order
  (last-response-wins), so a slow early request can overwrite a later one.

Examples
--------
>>> store = ExploreStore(pipeline)  # doctest: +SKIP
>>> asyncio.run(store.commit_transition(0))  # doctest: +SKIP
<UpdateOutcome.COMMITTED: 'committed'>
>>> store.state.view  # doctest: +SKIP
ViewDescriptor(dimensions=['city'], measures=['sales'], ops=['sum'])

Logging
-------
This module uses the standard Python ``logging`` framework and installs a
``NullHandler``, so nothing is printed unless logging is configured::

    import logging
    logging.getLogger("insight_explorer.ExploreStore").setLevel(logging.DEBUG)
"""

from __future__ import annotations

import logging
import warnings
from dataclasses import replace
from typing import Any, Callable, Dict, Hashable, List, Mapping, Optional, Sequence

from .ExploreEvent import ExploreEvent
from .ExploreSnapshot import ExploreSnapshot, VisualConfig
from .InsightSpace import AssociationResult, Field, InsightSpace
from .ViewDescriptor import FieldKind, ResolvedSpec, ViewDescriptor
from .explore_constraints import ConstraintSet
from .explore_cursor import ViewCursor, find_view_index, next_index, previous_index
from .explore_fork import ForkView
from .explore_ordering import ExploreOrder, order_spaces
from .explore_pipeline import ComputeService, InsightPipeline, TaskTestMode
from .explore_requests import RequestTracker, ResolutionTarget, UpdateOutcome

# Module logger
# - Uses a NullHandler so importing this module never configures global logging.
# - Callers can enable logs via standard logging configuration.
logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())

Hook = Callable[[ExploreEvent], Any]


class ExploreStore:
    """Transactional cursor, fork overlay and ordering over insight spaces.

    Parameters
    ----------
    pipeline : InsightPipeline
        Source of ranked spaces, the field catalog, and spec resolution.
    compute : ComputeService, optional
        Aggregation service used by :meth:`get_view_data` and
        :meth:`get_sub_insights`.
    order_by : ExploreOrder or str, default="default"
        Initial ordering mode.
    visual_config : VisualConfig, optional
        Initial presentation preferences.
    fork_significance : float, default=1.0
        Significance passed to the resolver for fork views.
    discard_stale : bool, default=True
        Drop responses superseded by a newer request for the same target.
        ``False`` applies every successful response (last-response-wins).
    """

    def __init__(
        self,
        pipeline: InsightPipeline,
        *,
        compute: Optional[ComputeService] = None,
        order_by: ExploreOrder | str = ExploreOrder.DEFAULT,
        visual_config: Optional[VisualConfig] = None,
        fork_significance: float = 1.0,
        discard_stale: bool = True,
    ) -> None:
        self._pipeline = pipeline
        self._compute = compute
        self._fork_significance = float(fork_significance)
        self._requests = RequestTracker(discard_stale=discard_stale)
        self._state = ExploreSnapshot(
            order_by=ExploreOrder.coerce(order_by),
            visual_config=visual_config if visual_config is not None else VisualConfig(),
        )
        self._hooks: Dict[Hashable, Hook] = {}
        self._hook_counter: int = 0

    # --- State access ---

    @property
    def state(self) -> ExploreSnapshot:
        """Return the current immutable snapshot."""
        return self._state

    def snapshot(self) -> ExploreSnapshot:
        return self._state

    @property
    def page_index(self) -> int:
        return self._state.page_index

    @property
    def insight_spaces(self) -> List[InsightSpace]:
        """Return the pipeline's spaces in the active order.

        The pipeline collection is re-read and re-ordered on every access;
        nothing is cached here.
        """
        return order_spaces(
            self._pipeline.ranked_spaces(),
            self._state.order_by,
            self._pipeline.field_catalog(),
        )

    @property
    def fields(self) -> Sequence[Field]:
        return self._pipeline.field_catalog()

    @property
    def data_source(self) -> Sequence[Mapping[str, Any]]:
        return self._pipeline.data_source()

    # --- Subscriptions ---

    def subscribe(self, callback: Hook, hook_id: Optional[Hashable] = None, *, run_now: bool = False) -> Hashable:
        """Register a state-change hook.

        Parameters
        ----------
        callback : Callable
            Called with an :class:`ExploreEvent` after each state update.
        hook_id : Hashable, optional
            Explicit identifier. Reusing an id replaces its callback.
            Automatic ids are ``"hook:1"``, ``"hook:2"``, ...
        run_now : bool, default=False
            Call ``callback`` immediately with a ``"subscribe"`` event.

        Returns
        -------
        Hashable
            The hook id.

        Raises
        ------
        TypeError
            If ``hook_id`` is unhashable.
        """
        if hook_id is None:
            self._hook_counter += 1
            hook_id = f"hook:{self._hook_counter}"
        else:
            hash(hook_id)
            if isinstance(hook_id, str) and hook_id.startswith("hook:"):
                suffix = hook_id[len("hook:"):]
                if suffix.isdigit():
                    self._hook_counter = max(self._hook_counter, int(suffix))
        self._hooks[hook_id] = callback

        if run_now:
            try:
                callback(ExploreEvent(reason="subscribe", old=None, new=self._state))
            except Exception as e:
                warnings.warn(f"Hook failed on init: {e}")
        return hook_id

    def unsubscribe(self, hook_id: Hashable) -> None:
        """Remove ``hook_id`` if registered."""
        self._hooks.pop(hook_id, None)

    def get_hooks(self) -> Dict[Hashable, Hook]:
        return self._hooks.copy()

    def _notify(self, event: ExploreEvent) -> None:
        for h_id, callback in list(self._hooks.items()):
            try:
                callback(event)
            except Exception as e:
                warnings.warn(f"Hook {h_id} failed: {e}")

    def _apply(self, reason: str, **changes: Any) -> ExploreSnapshot:
        """Replace the snapshot in one step and notify subscribers."""
        old = self._state
        new = replace(old, version=old.version + 1, **changes)
        self._state = new
        logger.debug(f"update(reason={reason}) version={new.version}")
        self._notify(ExploreEvent(reason=reason, old=old, new=new))
        return new

    # --- Resolution plumbing ---

    async def _resolve(self, view: ViewDescriptor, significance: Optional[float]) -> Optional[ResolvedSpec]:
        """Resolve ``view``; failures and empty results both become ``None``."""
        try:
            raw = await self._pipeline.specify(view, significance=significance)
            spec = ResolvedSpec.coerce(raw)
        except Exception as exc:
            logger.warning(f"specify failed for {view!r}: {exc}")
            return None
        if spec is None:
            logger.debug(f"specify returned no chart for {view!r}")
        return spec

    # --- Transitions ---

    async def commit_transition(self, index: int) -> UpdateOutcome:
        """Resolve the space at ``index`` and make it the committed view.

        On success the cursor, the committed view and spec, a fresh fork
        view, and every dependent overlay are replaced in a single update.
        Out-of-range indices are ignored; failed or empty resolutions leave
        state untouched.
        """
        spaces = self.insight_spaces
        if not 0 <= index < len(spaces):
            logger.debug(f"transition to {index} ignored; {len(spaces)} spaces")
            return UpdateOutcome.IGNORED

        space = spaces[index]
        generation = self._requests.issue(ResolutionTarget.COMMITTED)
        spec = await self._resolve(ViewDescriptor.from_space(space), space.significance)
        if spec is None:
            return UpdateOutcome.UNRESOLVED
        if not self._requests.is_current(ResolutionTarget.COMMITTED, generation):
            logger.debug(f"stale transition to {index} discarded")
            return UpdateOutcome.STALE

        self._requests.invalidate(
            ResolutionTarget.FORK,
            ResolutionTarget.ASSOCIATIONS,
            ResolutionTarget.DETAILS,
        )
        # view and fork view are built separately so they never share an instance
        self._apply(
            "transition",
            cursor=ViewCursor(page_index=index, view=ViewDescriptor.from_space(space), spec=spec),
            fork=ForkView.from_space(space),
            details=(),
            show_asso=False,
            asso_list_t1=(),
            asso_list_t2=(),
            visual_config=self._state.visual_config.with_default_resize(),
        )
        logger.info(f"transition page_index={index} space={space!r}")
        return UpdateOutcome.COMMITTED

    async def advance(self) -> UpdateOutcome:
        """Move to the next space, wrapping from the last to the first."""
        target = next_index(self._state.page_index, len(self.insight_spaces))
        if target is None:
            return UpdateOutcome.IGNORED
        return await self.commit_transition(target)

    async def retreat(self) -> UpdateOutcome:
        """Move to the previous space, wrapping from the first to the last."""
        target = previous_index(self._state.page_index, len(self.insight_spaces))
        if target is None:
            return UpdateOutcome.IGNORED
        return await self.commit_transition(target)

    async def jump_to_view(self, target: Any) -> UpdateOutcome:
        """Commit the first space whose field sets equal ``target``'s.

        ``target`` may be an ``InsightSpace``, a ``ViewDescriptor``, or a
        mapping with ``dimensions`` and ``measures``. Field order and
        duplicates are ignored.

        Raises
        ------
        AttributeError
            If ``target`` is not one of those shapes. This is a caller error
            and is raised before any request is issued.
        """
        index = find_view_index(self.insight_spaces, target)
        if index is None:
            return UpdateOutcome.IGNORED
        return await self.commit_transition(index)

    async def set_explore_order(self, order_by: ExploreOrder | str) -> UpdateOutcome:
        """Switch ordering mode and re-commit the current page index.

        ``page_index`` is deliberately not remapped, so the page may now show
        a different space.
        """
        order = ExploreOrder.coerce(order_by)
        self._apply("order", order_by=order)
        logger.info(f"explore order set to {order.value!r}")
        return await self.commit_transition(self._state.page_index)

    # --- Fork view ---

    async def specify_fork_view(self) -> UpdateOutcome:
        """Resolve the fork descriptor into the fork's own spec."""
        view = self._state.fork_view
        if view is None:
            return UpdateOutcome.IGNORED
        generation = self._requests.issue(ResolutionTarget.FORK)
        spec = await self._resolve(view, self._fork_significance)
        if spec is None:
            return UpdateOutcome.UNRESOLVED
        if not self._requests.is_current(ResolutionTarget.FORK, generation):
            logger.debug(f"stale fork spec for {view!r} discarded")
            return UpdateOutcome.STALE
        self._apply("fork_spec", fork=self._state.fork.with_spec(spec))
        return UpdateOutcome.COMMITTED

    async def add_field(self, kind: FieldKind | str, field_id: str) -> UpdateOutcome:
        """Append ``field_id`` to the fork's ``kind`` list and re-resolve it.

        Adding a field that is already present changes nothing and does not
        call the resolver.
        """
        kind = FieldKind.coerce(kind)
        fork, changed = self._state.fork.add_field(kind, field_id)
        if not changed:
            return UpdateOutcome.IGNORED
        self._apply("fork_edit", fork=fork)
        return await self.specify_fork_view()

    async def remove_field(self, kind: FieldKind | str, field_id: str) -> UpdateOutcome:
        """Remove ``field_id`` from the fork's ``kind`` list and re-resolve it.

        The fork is re-resolved even when the field was not present.
        """
        kind = FieldKind.coerce(kind)
        if self._state.fork_view is None:
            return UpdateOutcome.IGNORED
        fork, changed = self._state.fork.remove_field(kind, field_id)
        if changed:
            self._apply("fork_edit", fork=fork)
        return await self.specify_fork_view()

    # --- Constraints ---

    def init_constraints(self) -> None:
        """Rebuild every constraint marker from the field catalog (all ``0``)."""
        self._apply("constraints", constraints=ConstraintSet.initialize(self._pipeline.field_catalog()))

    def update_constraints(self, kind: FieldKind | str, index: int) -> None:
        """Cycle the constraint at ``index`` of ``kind``; out-of-range is a no-op."""
        constraints = self._state.constraints.cycle(FieldKind.coerce(kind), index)
        if constraints is not self._state.constraints:
            self._apply("constraints", constraints=constraints)

    # --- Associations and details ---

    async def get_associated_views(self, mode: TaskTestMode | str = TaskTestMode.LOCAL) -> UpdateOutcome:
        """Load associated views for the space at the current page index."""
        spaces = self.insight_spaces
        index = self._state.page_index
        if not 0 <= index < len(spaces):
            return UpdateOutcome.IGNORED
        space = spaces[index]
        mode = TaskTestMode(mode)
        generation = self._requests.issue(ResolutionTarget.ASSOCIATIONS)
        try:
            result: Optional[AssociationResult] = await self._pipeline.associated_views(
                space.dimensions, space.measures, mode
            )
        except Exception as exc:
            logger.warning(f"associated views failed for {space!r}: {exc}")
            return UpdateOutcome.UNRESOLVED
        if result is None:
            logger.debug(f"no associated views returned for {space!r}")
            return UpdateOutcome.UNRESOLVED
        if not self._requests.is_current(ResolutionTarget.ASSOCIATIONS, generation):
            return UpdateOutcome.STALE
        self._apply(
            "associations",
            asso_list_t1=tuple(result.first_order),
            asso_list_t2=tuple(result.second_order),
            show_asso=True,
        )
        return UpdateOutcome.COMMITTED

    async def scan_details(self, space_index: int) -> UpdateOutcome:
        """Load drill-down detail records for ``space_index``."""
        generation = self._requests.issue(ResolutionTarget.DETAILS)
        try:
            details = await self._pipeline.scan_details(space_index)
        except Exception as exc:
            logger.warning(f"scan_details({space_index}) failed: {exc}")
            return UpdateOutcome.UNRESOLVED
        if not self._requests.is_current(ResolutionTarget.DETAILS, generation):
            return UpdateOutcome.STALE
        self._apply("details", details=tuple(details or ()))
        return UpdateOutcome.COMMITTED

    # --- Compute service passthroughs ---

    async def get_view_data(
        self, dimensions: Sequence[str], measures: Sequence[str], ops: Sequence[str]
    ) -> List[Mapping[str, Any]]:
        """Return cube rows for the given fields, or ``[]`` on any failure."""
        if self._compute is None:
            return []
        try:
            return list(await self._compute.cube(list(dimensions), list(measures), list(ops)))
        except Exception as exc:
            logger.warning(f"cube query failed: {exc}")
            return []

    async def get_sub_insights(self, dimensions: Sequence[str], measures: Sequence[str]) -> List[Mapping[str, Any]]:
        if self._compute is None:
            return []
        try:
            return list(await self._compute.subinsights(list(dimensions), list(measures)))
        except Exception as exc:
            logger.error(f"subinsight query failed: {exc}")
            return []

    # --- Presentation state ---

    def set_visual_config(self, **changes: Any) -> None:
        """Update presentation preferences; unknown keys raise ``TypeError``."""
        self._apply("visual_config", visual_config=replace(self._state.visual_config, **changes))

    def init_visual_config_resize(self) -> None:
        self._apply("visual_config", visual_config=self._state.visual_config.with_default_resize())

    def set_agg_state(self, aggregated: bool) -> None:
        self.set_visual_config(default_aggregated=bool(aggregated))

    def set_show_asso(self, show: bool) -> None:
        self._apply("toggle", show_asso=bool(show))

    def set_show_constraints(self, show: bool) -> None:
        self._apply("toggle", show_constraints=bool(show))

    def set_show_preference_panel(self, show: bool) -> None:
        self._apply("toggle", show_preference_panel=bool(show))

    def set_show_save_modal(self, show: bool) -> None:
        self._apply("toggle", show_save_modal=bool(show))

    def set_show_subinsights(self, show: bool) -> None:
        self._apply("toggle", show_subinsights=bool(show))

    def bring_to_editor(self) -> None:
        """Hand the committed chart schema to an external chart editor."""
        spec = self._state.spec
        if spec is not None and spec.schema:
            self._apply("editor", spec_for_editor=spec.schema)
