# tests/test_grade_commands.py

import logging
from unittest.mock import MagicMock

import pytest
from bson import ObjectId

from database.store import UpdateCounts
from models.grades import ScoreEntry
from schemas.grades import GradeCreate
from services.grade_commands import GradeCommands
from utils.exceptions import InvalidIdentifier, NotFound, StoreFailure

MISSING_ID = "65a1f0c2b3d4e5f6a7b8c9d0"


# === insert / fetch ===


def test_insert_then_fetch_returns_payload(commands, sample_payload):
    record_id = commands.insert(GradeCreate.model_validate(sample_payload))

    record = commands.fetch(record_id)
    assert record["_id"] == record_id
    assert record["learner_id"] == sample_payload["learner_id"]
    assert record["class_id"] == sample_payload["class_id"]
    assert record["scores"] == sample_payload["scores"]


def test_insert_out_of_range_logs_warning(commands, caplog):
    with caplog.at_level(logging.WARNING, logger="services.grade_commands"):
        record_id = commands.insert(GradeCreate(learner_id=1, class_id=999))

    assert commands.fetch(record_id)["class_id"] == 999
    assert "class_id 999" in caplog.text


def test_fetch_missing_raises_not_found(commands):
    with pytest.raises(NotFound):
        commands.fetch(MISSING_ID)


def test_malformed_id_rejected_before_store_access():
    store = MagicMock()
    commands = GradeCommands(store)

    with pytest.raises(InvalidIdentifier):
        commands.fetch("xyz")
    with pytest.raises(InvalidIdentifier):
        commands.delete("xyz")
    with pytest.raises(InvalidIdentifier):
        commands.add_score("xyz", ScoreEntry(type="exam", score=1))
    with pytest.raises(InvalidIdentifier):
        commands.remove_score("xyz", ScoreEntry(type="exam", score=1))

    assert store.method_calls == []


# === add / remove score ===


def test_add_score_appends_in_order(commands, sample_payload):
    record_id = commands.insert(GradeCreate.model_validate(sample_payload))

    result = commands.add_score(record_id, ScoreEntry(type="homework", score=95))

    assert result == UpdateCounts(1, 1)
    assert commands.fetch(record_id)["scores"][-1] == {"type": "homework", "score": 95}


def test_add_score_missing_record(commands):
    with pytest.raises(NotFound):
        commands.add_score(MISSING_ID, ScoreEntry(type="exam", score=50))


def test_add_then_remove_round_trip(commands, sample_payload):
    record_id = commands.insert(GradeCreate.model_validate(sample_payload))
    before = commands.fetch(record_id)["scores"]

    entry = ScoreEntry(type="homework", score=60)
    commands.add_score(record_id, entry)
    commands.remove_score(record_id, entry)

    assert commands.fetch(record_id)["scores"] == before


def test_remove_score_removes_first_occurrence_only(commands):
    record_id = commands.insert(GradeCreate.model_validate({
        "learner_id": 1,
        "class_id": 1,
        "scores": [
            {"type": "quiz", "score": 70},
            {"type": "exam", "score": 90},
            {"type": "quiz", "score": 70},
        ],
    }))

    commands.remove_score(record_id, ScoreEntry(type="quiz", score=70))

    assert commands.fetch(record_id)["scores"] == [
        {"type": "exam", "score": 90},
        {"type": "quiz", "score": 70},
    ]


def test_remove_score_absent_entry_is_not_found(commands, sample_payload):
    record_id = commands.insert(GradeCreate.model_validate(sample_payload))

    with pytest.raises(NotFound):
        commands.remove_score(record_id, ScoreEntry(type="exam", score=12))
    assert commands.fetch(record_id)["scores"] == sample_payload["scores"]


def test_remove_score_missing_record(commands):
    with pytest.raises(NotFound):
        commands.remove_score(MISSING_ID, ScoreEntry(type="exam", score=12))


def test_remove_score_retries_on_concurrent_change():
    doc = {"_id": ObjectId(MISSING_ID), "scores": [{"type": "exam", "score": 10}]}
    store = MagicMock()
    store.find_one.return_value = doc
    store.update_one.side_effect = [UpdateCounts(0, 0), UpdateCounts(1, 1)]

    result = GradeCommands(store, remove_retries=3).remove_score(MISSING_ID, ScoreEntry(type="exam", score=10))

    assert result == UpdateCounts(1, 1)
    assert store.update_one.call_count == 2
    filter_, update = store.update_one.call_args.args
    assert filter_["scores"] == doc["scores"]
    assert update == {"$set": {"scores": []}}


def test_remove_score_gives_up_after_retries():
    store = MagicMock()
    store.find_one.return_value = {"_id": ObjectId(MISSING_ID), "scores": [{"type": "exam", "score": 10}]}
    store.update_one.return_value = UpdateCounts(0, 0)

    with pytest.raises(StoreFailure):
        GradeCommands(store, remove_retries=2).remove_score(MISSING_ID, ScoreEntry(type="exam", score=10))
    assert store.update_one.call_count == 2


# === delete ===


def test_delete_one(commands, sample_payload):
    record_id = commands.insert(GradeCreate.model_validate(sample_payload))

    assert commands.delete(record_id) == 1
    with pytest.raises(NotFound):
        commands.fetch(record_id)


def test_delete_missing_is_not_found(commands):
    with pytest.raises(NotFound):
        commands.delete(MISSING_ID)


def test_delete_by_learner_removes_all_and_only_that_learner(commands, seed):
    seed(
        {"learner_id": 1, "class_id": 10, "scores": []},
        {"learner_id": 1, "class_id": 20, "scores": []},
        {"learner_id": 2, "class_id": 10, "scores": []},
    )

    assert commands.delete_by_learner(1) == 2
    assert commands.list_by_learner(1) == []
    assert len(commands.list_by_learner(2)) == 1


def test_delete_by_learner_none_matching(commands):
    with pytest.raises(NotFound):
        commands.delete_by_learner(42)


def test_delete_by_class(commands, seed):
    seed(
        {"learner_id": 1, "class_id": 10},
        {"learner_id": 2, "class_id": 10},
        {"learner_id": 3, "class_id": 11},
    )

    assert commands.delete_by_class(10) == 2
    assert [r["learner_id"] for r in commands.list_all()] == [3]

    with pytest.raises(NotFound):
        commands.delete_by_class(10)


# === list / reassign ===


def test_list_by_learner_with_class_filter(commands, seed):
    seed(
        {"learner_id": 1, "class_id": 10},
        {"learner_id": 1, "class_id": 20},
        {"learner_id": 2, "class_id": 10},
    )

    assert len(commands.list_by_learner(1)) == 2
    assert [r["class_id"] for r in commands.list_by_learner(1, 20)] == [20]
    assert commands.list_by_learner(99) == []


def test_list_by_class_with_learner_filter(commands, seed):
    seed(
        {"learner_id": 1, "class_id": 10},
        {"learner_id": 2, "class_id": 10},
    )

    assert len(commands.list_by_class(10)) == 2
    assert [r["learner_id"] for r in commands.list_by_class(10, 2)] == [2]


def test_list_all_serializes_ids(commands, seed):
    ids = seed({"learner_id": 1, "class_id": 10}, {"learner_id": 2, "class_id": 10})

    assert [r["_id"] for r in commands.list_all()] == ids


def test_reassign_class_updates_every_matching_record(commands, seed):
    seed(
        {"learner_id": 1, "class_id": 10},
        {"learner_id": 2, "class_id": 10},
        {"learner_id": 3, "class_id": 11},
    )

    assert commands.reassign_class(10, 12) == UpdateCounts(2, 2)
    assert commands.list_by_class(10) == []
    assert len(commands.list_by_class(12)) == 2
    assert len(commands.list_by_class(11)) == 1


def test_reassign_class_none_matching(commands):
    with pytest.raises(NotFound):
        commands.reassign_class(10, 12)


def test_explicit_zero_retries_is_kept():
    store = MagicMock()
    store.find_one.return_value = {"_id": ObjectId(MISSING_ID), "scores": [{"type": "exam", "score": 10}]}

    commands = GradeCommands(store, remove_retries=0)

    assert commands.remove_retries == 0
    with pytest.raises(StoreFailure):
        commands.remove_score(MISSING_ID, ScoreEntry(type="exam", score=10))
    store.update_one.assert_not_called()
