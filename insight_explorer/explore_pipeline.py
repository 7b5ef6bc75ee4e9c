"""Capabilities the explorer consumes from its external collaborators.

The mining pipeline discovers insight spaces and resolves views into chart
specifications; the compute service runs aggregation queries. Neither is
implemented here: these protocols only pin down the call shapes.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, List, Mapping, Optional, Protocol, Sequence, Union

from .InsightSpace import AssociationResult, Field, InsightSpace
from .ViewDescriptor import ResolvedSpec, ViewDescriptor


class TaskTestMode(str, Enum):
    """Where the pipeline runs association tasks."""

    LOCAL = "local"
    SERVER = "server"


class InsightPipeline(Protocol):
    def ranked_spaces(self) -> Sequence[InsightSpace]:
        """Spaces in the pipeline's rank order, read live on every call."""

    def field_catalog(self) -> Sequence[Field]:
        ...

    def data_source(self) -> Sequence[Mapping[str, Any]]:
        ...

    async def specify(
        self, view: ViewDescriptor, significance: Optional[float] = None
    ) -> Union[ResolvedSpec, Mapping[str, Any], None]:
        """Resolve ``view`` into a chart spec; ``None`` means no chart."""

    async def associated_views(
        self,
        dimensions: Sequence[str],
        measures: Sequence[str],
        mode: TaskTestMode,
    ) -> AssociationResult:
        ...

    async def scan_details(self, space_index: int) -> Sequence[InsightSpace]:
        ...


class ComputeService(Protocol):
    async def cube(
        self,
        dimensions: Sequence[str],
        measures: Sequence[str],
        aggregators: Sequence[str],
    ) -> List[Mapping[str, Any]]:
        ...

    async def subinsights(
        self, dimensions: Sequence[str], measures: Sequence[str]
    ) -> List[Mapping[str, Any]]:
        ...
