"""Request generations used to drop stale resolver responses.

Every asynchronous request the explorer issues is stamped with a generation
number from a per-target counter. When the response arrives it is applied
only if no newer request for the same target has been issued since; otherwise
it is stale and discarded. There is no cancellation: superseded coroutines
run to completion and their results are simply ignored.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict


class ResolutionTarget(str, Enum):
    """Independently sequenced request channels."""

    COMMITTED = "committed"
    FORK = "fork"
    ASSOCIATIONS = "associations"
    DETAILS = "details"


class UpdateOutcome(str, Enum):
    """Result reported by every asynchronous explorer operation."""

    COMMITTED = "committed"
    IGNORED = "ignored"
    UNRESOLVED = "unresolved"
    STALE = "stale"


class RequestTracker:
    """Per-target monotonically increasing request generations.

    Parameters
    ----------
    discard_stale : bool, default=True
        When ``False`` every response counts as current, which reproduces
        last-response-wins behavior.
    """

    def __init__(self, *, discard_stale: bool = True) -> None:
        self._discard_stale = bool(discard_stale)
        self._latest: Dict[ResolutionTarget, int] = {target: 0 for target in ResolutionTarget}

    def issue(self, target: ResolutionTarget) -> int:
        """Stamp a new request for ``target`` and return its generation."""
        self._latest[target] += 1
        return self._latest[target]

    def invalidate(self, *targets: ResolutionTarget) -> None:
        """Make every in-flight request for ``targets`` stale."""
        for target in targets:
            self._latest[target] += 1

    def is_current(self, target: ResolutionTarget, generation: int) -> bool:
        if not self._discard_stale:
            return True
        return generation == self._latest[target]
