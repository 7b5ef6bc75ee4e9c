"""Fork-view overlay: an editable draft of the committed view.

The fork starts as a structurally equal copy of the committed view after each
transition and then diverges as the user adds or removes fields. It is
resolved independently; its spec never feeds back into the committed one.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional, Tuple

from .InsightSpace import InsightSpace
from .ViewDescriptor import FieldKind, ResolvedSpec, ViewDescriptor


@dataclass(frozen=True)
class ForkView:
    """Fork descriptor plus its own resolved spec.

    Parameters
    ----------
    view : ViewDescriptor or None
        Editable descriptor, ``None`` until the first committed transition.
    spec : ResolvedSpec or None
        Spec resolved for ``view``; cleared on every committed transition.
    """

    view: Optional[ViewDescriptor] = None
    spec: Optional[ResolvedSpec] = None

    @classmethod
    def from_space(cls, space: InsightSpace) -> "ForkView":
        """Fresh fork for ``space`` with no resolved spec."""
        return cls(view=ViewDescriptor.from_space(space), spec=None)

    def add_field(self, kind: FieldKind, field_id: str) -> Tuple["ForkView", bool]:
        """Return ``(fork, changed)`` after appending ``field_id`` to ``kind``.

        Duplicates are not added; ``changed`` is then ``False`` and ``self`` is
        returned. The resolved spec is kept until a re-resolution replaces it.
        """
        if self.view is None:
            return self, False
        view = self.view.with_field(kind, field_id)
        if view is self.view:
            return self, False
        return replace(self, view=view), True

    def remove_field(self, kind: FieldKind, field_id: str) -> Tuple["ForkView", bool]:
        """Return ``(fork, changed)`` after removing the first ``field_id`` of ``kind``."""
        if self.view is None:
            return self, False
        view = self.view.without_field(kind, field_id)
        if view is self.view:
            return self, False
        return replace(self, view=view), True

    def with_spec(self, spec: Optional[ResolvedSpec]) -> "ForkView":
        return replace(self, spec=spec)
