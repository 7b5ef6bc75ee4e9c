from __future__ import annotations

import asyncio
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

import pytest

_START = Path(__file__).resolve().parent
_repo_root = _START
while _repo_root != _repo_root.parent and not (_repo_root / "insight_explorer" / "__init__.py").exists():
    _repo_root = _repo_root.parent

sys.path.insert(0, str(_repo_root))

from insight_explorer import (  # noqa: E402
    AnalyticRole,
    AssociationResult,
    Field,
    InsightSpace,
    ResolvedSpec,
    ViewDescriptor,
    VizSpace,
)

Key = Tuple[Tuple[str, ...], Tuple[str, ...]]


def _key(view: Any) -> Key:
    return tuple(view.dimensions), tuple(view.measures)


class FakePipeline:
    """In-memory mining pipeline with scriptable failures and delays.

    ``gates`` maps a ``(dimensions, measures)`` key to an ``asyncio.Event``;
    ``specify`` for that key waits until the event is set.
    """

    def __init__(self, spaces: Sequence[InsightSpace] = (), fields: Sequence[Field] = ()) -> None:
        self.spaces: List[InsightSpace] = list(spaces)
        self.fields: List[Field] = list(fields)
        self.rows: List[Dict[str, Any]] = [{"city": "Oslo", "sales": 3}]
        self.specify_calls: List[Tuple[ViewDescriptor, Optional[float]]] = []
        self.fail_on: set[Key] = set()
        self.empty_on: set[Key] = set()
        self.gates: Dict[Key, asyncio.Event] = {}
        self.associations = AssociationResult(
            first_order=(VizSpace(("a",), ("m",), schema={"geom": "bar"}),),
            second_order=(VizSpace(("b",), ("m",), schema={"geom": "line"}),),
        )
        self.association_calls: List[Tuple[Tuple[str, ...], Tuple[str, ...], Any]] = []
        self.association_gate: Optional[asyncio.Event] = None
        self.fail_associations = False
        self.details: Dict[int, List[InsightSpace]] = {}
        self.details_gate: Optional[asyncio.Event] = None

    def ranked_spaces(self) -> List[InsightSpace]:
        return list(self.spaces)

    def field_catalog(self) -> List[Field]:
        return list(self.fields)

    def data_source(self) -> List[Dict[str, Any]]:
        return list(self.rows)

    async def specify(self, view: ViewDescriptor, significance: Optional[float] = None):
        key = _key(view)
        self.specify_calls.append((view, significance))
        gate = self.gates.get(key)
        if gate is not None:
            await gate.wait()
        if key in self.fail_on:
            raise RuntimeError("resolver unavailable")
        if key in self.empty_on:
            return None
        return ResolvedSpec(
            schema={"dimensions": list(view.dimensions), "measures": list(view.measures)},
            data_view=({"rows": len(view.dimensions)},),
        )

    async def associated_views(self, dimensions, measures, mode):
        self.association_calls.append((tuple(dimensions), tuple(measures), mode))
        if self.association_gate is not None:
            await self.association_gate.wait()
        if self.fail_associations:
            raise RuntimeError("association task failed")
        return self.associations

    async def scan_details(self, space_index: int):
        if self.details_gate is not None:
            await self.details_gate.wait()
        if space_index not in self.details:
            raise KeyError(space_index)
        return self.details[space_index]


class FakeCompute:
    def __init__(self, *, fail: bool = False) -> None:
        self.fail = fail
        self.calls: List[Tuple[str, tuple]] = []

    async def cube(self, dimensions, measures, aggregators):
        self.calls.append(("cube", (dimensions, measures, aggregators)))
        if self.fail:
            raise ConnectionError("engine offline")
        return [{"city": "Oslo", "sales": 10}]

    async def subinsights(self, dimensions, measures):
        self.calls.append(("subinsights", (dimensions, measures)))
        if self.fail:
            raise ConnectionError("engine offline")
        return [{"type": "outlier"}]


def sample_fields() -> List[Field]:
    return [
        Field("city", AnalyticRole.DIMENSION, distinct_count=40),
        Field("gender", AnalyticRole.DIMENSION, distinct_count=2),
        Field("year", AnalyticRole.DIMENSION, distinct_count=10),
        Field("sales", AnalyticRole.MEASURE, distinct_count=900),
        Field("profit", AnalyticRole.MEASURE, distinct_count=850),
    ]


def sample_spaces() -> List[InsightSpace]:
    return [
        InsightSpace(("city", "gender"), ("sales",), significance=0.9),
        InsightSpace(("year",), ("sales",), significance=0.7),
        InsightSpace(("city", "gender", "year"), ("profit",), significance=0.5),
    ]


@pytest.fixture
def pipeline() -> FakePipeline:
    return FakePipeline(sample_spaces(), sample_fields())


@pytest.fixture
def compute() -> FakeCompute:
    return FakeCompute()
