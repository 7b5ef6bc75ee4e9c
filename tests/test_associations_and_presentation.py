from __future__ import annotations

import asyncio
import logging

import pytest

from insight_explorer import (
    ExploreStore,
    ResizeMode,
    TaskTestMode,
    UpdateOutcome,
    VisualConfig,
)

from conftest import FakeCompute, FakePipeline


def test_associated_views_use_current_space_and_show_lists(pipeline: FakePipeline) -> None:
    store = ExploreStore(pipeline)
    asyncio.run(store.commit_transition(1))

    outcome = asyncio.run(store.get_associated_views("server"))

    assert outcome is UpdateOutcome.COMMITTED
    assert pipeline.association_calls == [(("year",), ("sales",), TaskTestMode.SERVER)]
    assert store.state.asso_list_t1 == pipeline.associations.first_order
    assert store.state.asso_list_t2 == pipeline.associations.second_order
    assert store.state.show_asso is True


def test_transition_clears_associations(pipeline: FakePipeline) -> None:
    store = ExploreStore(pipeline)
    asyncio.run(store.commit_transition(0))
    asyncio.run(store.get_associated_views())

    asyncio.run(store.commit_transition(1))

    assert store.state.asso_list_t1 == ()
    assert store.state.asso_list_t2 == ()
    assert store.state.show_asso is False


def test_associated_views_on_empty_collection_are_ignored() -> None:
    pipeline = FakePipeline()
    store = ExploreStore(pipeline)

    assert asyncio.run(store.get_associated_views()) is UpdateOutcome.IGNORED
    assert pipeline.association_calls == []


def test_failed_association_task_leaves_state(pipeline: FakePipeline, caplog) -> None:
    store = ExploreStore(pipeline)
    asyncio.run(store.commit_transition(0))
    before = store.state
    pipeline.fail_associations = True

    with caplog.at_level(logging.WARNING, logger="insight_explorer.ExploreStore"):
        outcome = asyncio.run(store.get_associated_views())

    assert outcome is UpdateOutcome.UNRESOLVED
    assert store.state is before
    assert "associated views failed" in caplog.text


def test_missing_association_result_leaves_state(pipeline: FakePipeline) -> None:
    store = ExploreStore(pipeline)
    asyncio.run(store.commit_transition(0))
    before = store.state
    pipeline.associations = None

    outcome = asyncio.run(store.get_associated_views())

    assert outcome is UpdateOutcome.UNRESOLVED
    assert store.state is before
    assert store.state.show_asso is False


def test_scan_details_sets_and_transition_clears(pipeline: FakePipeline) -> None:
    store = ExploreStore(pipeline)
    pipeline.details[2] = list(pipeline.spaces[:2])

    assert asyncio.run(store.scan_details(2)) is UpdateOutcome.COMMITTED
    assert store.state.details == tuple(pipeline.spaces[:2])

    asyncio.run(store.commit_transition(0))
    assert store.state.details == ()


def test_scan_details_failure_is_reported_not_raised(pipeline: FakePipeline) -> None:
    store = ExploreStore(pipeline)

    assert asyncio.run(store.scan_details(7)) is UpdateOutcome.UNRESOLVED
    assert store.state.details == ()


def test_view_data_and_sub_insights_delegate_to_compute(pipeline: FakePipeline, compute: FakeCompute) -> None:
    store = ExploreStore(pipeline, compute=compute)

    rows = asyncio.run(store.get_view_data(["city"], ["sales"], ["sum"]))
    insights = asyncio.run(store.get_sub_insights(["city"], ["sales"]))

    assert rows == [{"city": "Oslo", "sales": 10}]
    assert insights == [{"type": "outlier"}]
    assert compute.calls[0] == ("cube", (["city"], ["sales"], ["sum"]))


def test_compute_failures_return_empty_lists(pipeline: FakePipeline, caplog) -> None:
    store = ExploreStore(pipeline, compute=FakeCompute(fail=True))

    with caplog.at_level(logging.ERROR, logger="insight_explorer.ExploreStore"):
        assert asyncio.run(store.get_view_data(["city"], ["sales"], ["sum"])) == []
        assert asyncio.run(store.get_sub_insights(["city"], ["sales"])) == []

    assert "subinsight query failed" in caplog.text


def test_without_compute_service_data_is_empty(pipeline: FakePipeline) -> None:
    store = ExploreStore(pipeline)

    assert asyncio.run(store.get_view_data(["city"], ["sales"], ["sum"])) == []
    assert asyncio.run(store.get_sub_insights(["city"], ["sales"])) == []


def test_presentation_toggles(pipeline: FakePipeline) -> None:
    store = ExploreStore(pipeline)

    store.set_show_asso(True)
    store.set_show_constraints(True)
    store.set_show_preference_panel(True)
    store.set_show_save_modal(True)
    store.set_show_subinsights(True)

    state = store.state
    assert state.show_asso and state.show_constraints and state.show_subinsights
    assert state.show_preference_panel and state.show_save_modal
    assert state.version == 5


def test_visual_config_updates_and_resize_reset(pipeline: FakePipeline) -> None:
    store = ExploreStore(pipeline, visual_config=VisualConfig(vis_mode="common"))

    store.set_agg_state(True)
    store.set_visual_config(resize=ResizeMode.CONTROL, resize_width=500)
    assert store.state.visual_config.default_aggregated is True
    assert store.state.visual_config.resize_width == 500
    assert store.state.visual_config.vis_mode == "common"

    store.init_visual_config_resize()
    assert store.state.visual_config.resize is ResizeMode.AUTO
    assert store.state.visual_config.resize_width == 320
    assert store.state.visual_config.default_aggregated is True


def test_unknown_visual_config_key_raises_type_error(pipeline: FakePipeline) -> None:
    store = ExploreStore(pipeline)

    with pytest.raises(TypeError):
        store.set_visual_config(colour="red")


def test_bring_to_editor_copies_committed_schema(pipeline: FakePipeline) -> None:
    store = ExploreStore(pipeline)
    store.bring_to_editor()
    assert store.state.spec_for_editor is None

    asyncio.run(store.commit_transition(0))
    store.bring_to_editor()

    assert store.state.spec_for_editor == store.state.spec.schema
