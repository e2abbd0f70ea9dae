"""Tests for the merge engine."""
import pytest

from conftest import BASE_TIME, make_item
from vocasync.models.sync_models import ProgressSnapshot
from vocasync.services.merge_engine import MergeEngine, supersedes


@pytest.fixture
def engine() -> MergeEngine:
    return MergeEngine()


def snapshot(word_id: str, last_reviewed: int, review_level: int) -> ProgressSnapshot:
    return ProgressSnapshot(word_id=word_id, last_reviewed=last_reviewed, review_level=review_level)


def test_new_word_is_created(engine):
    plan = engine.classify([make_item("w1")], {})

    assert [item.word_id for item in plan.creates] == ["w1"]
    assert plan.updates == []
    assert plan.discarded == 0


def test_newer_report_with_same_level_is_update(engine):
    existing = {"w1": snapshot("w1", BASE_TIME, 2)}
    plan = engine.classify([make_item("w1", review_level=2, last_reviewed=BASE_TIME + 1)], existing)

    assert plan.creates == []
    assert [item.word_id for item in plan.updates] == ["w1"]


def test_newer_report_with_higher_level_is_update(engine):
    existing = {"w1": snapshot("w1", BASE_TIME, 2)}
    plan = engine.classify([make_item("w1", review_level=4, last_reviewed=BASE_TIME + 10)], existing)

    assert len(plan.updates) == 1


@pytest.mark.parametrize(
    "last_reviewed, review_level",
    [
        (BASE_TIME, 2),        # same timestamp
        (BASE_TIME - 1, 3),    # older
        (BASE_TIME + 10, 1),   # newer but lower level
    ],
)
def test_stale_or_regressing_report_is_discarded(engine, last_reviewed, review_level):
    existing = {"w1": snapshot("w1", BASE_TIME, 2)}
    plan = engine.classify([make_item("w1", review_level=review_level, last_reviewed=last_reviewed)], existing)

    assert plan.creates == []
    assert plan.updates == []
    assert plan.discarded == 1


def test_supersedes_requires_both_conditions():
    current = snapshot("w1", 100, 2)

    assert supersedes(make_item("w1", review_level=2, last_reviewed=101), current)
    assert not supersedes(make_item("w1", review_level=2, last_reviewed=100), current)
    assert not supersedes(make_item("w1", review_level=1, last_reviewed=200), current)


def test_duplicates_in_batch_keep_single_create(engine):
    items = [
        make_item("w1", review_level=1, last_reviewed=BASE_TIME),
        make_item("w1", review_level=3, last_reviewed=BASE_TIME + 5),
    ]
    plan = engine.classify(items, {})

    assert len(plan.creates) == 1
    assert plan.creates[0].review_level == 3
    assert plan.updates == []
    assert plan.discarded == 1


def test_duplicates_in_batch_never_regress(engine):
    existing = {"w1": snapshot("w1", BASE_TIME, 1)}
    items = [
        make_item("w1", review_level=3, last_reviewed=BASE_TIME + 10),
        make_item("w1", review_level=2, last_reviewed=BASE_TIME + 20),  # newer, lower level
        make_item("w1", review_level=3, last_reviewed=BASE_TIME + 5),   # older
    ]
    plan = engine.classify(items, existing)

    assert len(plan.updates) == 1
    assert plan.updates[0].review_level == 3
    assert plan.updates[0].last_reviewed == BASE_TIME + 10
    assert plan.discarded == 2


def test_mixed_batch(engine):
    existing = {
        "old": snapshot("old", BASE_TIME, 2),
        "stale": snapshot("stale", BASE_TIME + 100, 2),
    }
    items = [
        make_item("new"),
        make_item("old", review_level=3, last_reviewed=BASE_TIME + 1),
        make_item("stale", review_level=2, last_reviewed=BASE_TIME),
    ]
    plan = engine.classify(items, existing)

    assert [item.word_id for item in plan.creates] == ["new"]
    assert [item.word_id for item in plan.updates] == ["old"]
    assert plan.discarded == 1


def test_existing_map_is_not_mutated(engine):
    existing = {"w1": snapshot("w1", BASE_TIME, 1)}
    engine.classify([make_item("w1", review_level=2, last_reviewed=BASE_TIME + 1)], existing)

    assert existing["w1"].review_level == 1
    assert existing["w1"].last_reviewed == BASE_TIME
