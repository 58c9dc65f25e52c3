import re
from typing import Optional

from bson import ObjectId

from utils.exceptions import InvalidIdentifier

# ✅ 식별자 형식: 24자리 16진수 (대소문자 무관)
OBJECT_ID_PATTERN = re.compile(r"[a-f\d]{24}", re.IGNORECASE)


def is_valid_object_id(value) -> bool:
    return isinstance(value, str) and bool(OBJECT_ID_PATTERN.fullmatch(value))


def by_id(record_id: str) -> dict:
    if not is_valid_object_id(record_id):
        raise InvalidIdentifier(record_id)
    return {"_id": ObjectId(record_id)}


def by_learner(learner_id: int, class_id: Optional[int] = None) -> dict:
    query = {"learner_id": learner_id}
    if class_id is not None:
        query["class_id"] = class_id
    return query


def by_class(class_id: int, learner_id: Optional[int] = None) -> dict:
    query = {"class_id": class_id}
    if learner_id is not None:
        query["learner_id"] = learner_id
    return query
