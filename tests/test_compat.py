# tests/test_compat.py

from schemas.compat import upgrade_payload


def test_student_id_renamed_to_learner_id():
    payload = {"student_id": 4, "class_id": 10}
    assert upgrade_payload(payload) == {"learner_id": 4, "class_id": 10}


def test_caller_payload_not_mutated():
    payload = {"student_id": 4, "class_id": 10}
    upgrade_payload(payload)
    assert payload == {"student_id": 4, "class_id": 10}


def test_learner_id_wins_over_legacy_field():
    assert upgrade_payload({"student_id": 4, "learner_id": 9, "class_id": 1}) == {"learner_id": 9, "class_id": 1}


def test_current_payload_passes_through():
    payload = {"learner_id": 1, "class_id": 2, "scores": []}
    assert upgrade_payload(payload) == payload
