"""Property-based tests for ordering, constraint cycling and navigation.

These complement the example-based suites with generated space collections,
constraint states and cursor positions.
"""

from __future__ import annotations

import asyncio

import pytest

from insight_explorer import (
    AnalyticRole,
    ExploreOrder,
    ExploreStore,
    Field,
    InsightSpace,
    next_constraint_state,
    order_spaces,
)
from insight_explorer.explore_ordering import cardinality_key, distinct_counts, field_num_key

from conftest import FakePipeline

try:
    from hypothesis import given
    from hypothesis import strategies as st
except ModuleNotFoundError:  # pragma: no cover - environment-specific fallback
    pytest.skip("hypothesis is required for property-based tests", allow_module_level=True)


FIELD_IDS = st.sampled_from(["a", "b", "c", "d", "m1", "m2"])
SPACES = st.lists(
    st.builds(
        InsightSpace,
        dimensions=st.lists(FIELD_IDS, max_size=4).map(tuple),
        measures=st.lists(FIELD_IDS, max_size=3).map(tuple),
    ),
    max_size=12,
)
ORDERS = st.sampled_from(list(ExploreOrder))
CATALOG = [
    Field("a", AnalyticRole.DIMENSION, distinct_count=5),
    Field("b", AnalyticRole.DIMENSION, distinct_count=1),
    Field("c", AnalyticRole.DIMENSION, distinct_count=5),
    Field("m1", AnalyticRole.MEASURE, distinct_count=100),
]


@given(spaces=SPACES, order=ORDERS)
def test_ordering_is_a_permutation(spaces: list[InsightSpace], order: ExploreOrder) -> None:
    ordered = order_spaces(spaces, order, CATALOG)

    assert len(ordered) == len(spaces)
    assert sorted(map(id, ordered)) == sorted(map(id, spaces))


@given(spaces=SPACES, order=st.sampled_from([ExploreOrder.FIELD_NUM, ExploreOrder.CARDINALITY]))
def test_ordering_is_stable_and_sorted(spaces: list[InsightSpace], order: ExploreOrder) -> None:
    counts = distinct_counts(CATALOG)
    if order is ExploreOrder.FIELD_NUM:
        key = field_num_key
    else:
        def key(space: InsightSpace) -> int:
            return cardinality_key(space, counts)

    position = {id(space): i for i, space in enumerate(spaces)}
    ordered = order_spaces(spaces, order, CATALOG)

    for left, right in zip(ordered, ordered[1:]):
        assert key(left) <= key(right)
        if key(left) == key(right):
            assert position[id(left)] < position[id(right)]


@given(state=st.sampled_from([-1, 0, 1]), steps=st.integers(min_value=0, max_value=30))
def test_cycling_stays_in_tri_state_with_period_three(state: int, steps: int) -> None:
    current = state
    for _ in range(steps):
        current = next_constraint_state(current)
        assert current in (-1, 0, 1)

    assert current == next_constraint_state(next_constraint_state(next_constraint_state(current)))
    assert {state, next_constraint_state(state), next_constraint_state(next_constraint_state(state))} == {-1, 0, 1}


@given(n=st.integers(min_value=1, max_value=8), data=st.data())
def test_advance_then_retreat_returns_to_start(n: int, data) -> None:
    start = data.draw(st.integers(min_value=0, max_value=n - 1))
    first = data.draw(st.sampled_from(["advance", "retreat"]))
    spaces = [InsightSpace((f"d{i}",), ("m",)) for i in range(n)]
    store = ExploreStore(FakePipeline(spaces))

    async def scenario() -> None:
        await store.commit_transition(start)
        if first == "advance":
            await store.advance()
            await store.retreat()
        else:
            await store.retreat()
            await store.advance()

    asyncio.run(scenario())
    assert store.page_index == start
