"""Standardized state-change event payloads.

This module defines ``ExploreEvent``, the immutable structure passed to
callbacks registered with :meth:`ExploreStore.subscribe`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .ExploreSnapshot import ExploreSnapshot


@dataclass(frozen=True)
class ExploreEvent:
    """Normalized change event emitted after each state replacement.

    Parameters
    ----------
    reason : str
        Short tag of the operation that produced the change, for example
        ``"transition"``, ``"fork_edit"``, ``"fork_spec"`` or ``"subscribe"``.
    old : ExploreSnapshot or None
        Snapshot before the change (``None`` for synthesized events).
    new : ExploreSnapshot
        Snapshot after the change.

    Notes
    -----
    Consumers should render from ``new``; ``old`` is there for diffing.
    """

    reason: str
    old: Optional[ExploreSnapshot]
    new: ExploreSnapshot

    @property
    def cursor_moved(self) -> bool:
        return self.old is None or self.old.page_index != self.new.page_index
