"""
services/grade_commands.py

- 성적 레코드 생성/조회/점수 추가·삭제/삭제/반 ID 일괄 변경
- 라우터에서 호출되며, 저장소 접근은 생성자로 주입받은 RecordStore만 사용한다
"""

import logging
from typing import List, Optional

from config.settings import settings
from database.store import RecordStore, UpdateCounts
from models.grades import ScoreEntry, domain_warnings, serialize_record
from schemas.grades import GradeCreate
from services import queries
from utils.exceptions import NotFound, StoreFailure

logger = logging.getLogger(__name__)


class GradeCommands:
    def __init__(self, store: RecordStore, remove_retries: Optional[int] = None):
        self.store = store
        self.remove_retries = settings.SCORE_REMOVE_RETRIES if remove_retries is None else remove_retries

    # ==========================================================
    # 단건 CRUD
    # ==========================================================

    def insert(self, grade: GradeCreate) -> str:
        for warning in grade.domain_warnings():
            logger.warning("grade record accepted with out-of-range value: %s", warning)

        record_id = self.store.insert_one(grade.to_document())
        logger.info("grade record %s created (learner_id=%s, class_id=%s)",
                    record_id, grade.learner_id, grade.class_id)
        return record_id

    def fetch(self, record_id: str) -> dict:
        doc = self.store.find_one(queries.by_id(record_id))
        if doc is None:
            raise NotFound("Grade record", record_id)
        return serialize_record(doc)

    def add_score(self, record_id: str, entry: ScoreEntry) -> UpdateCounts:
        result = self.store.update_one(queries.by_id(record_id), {"$push": {"scores": entry.model_dump()}})
        if not result.matched_count:
            raise NotFound("Grade record", record_id)
        logger.info("score %s added to grade record %s", entry.model_dump(), record_id)
        return result

    def remove_score(self, record_id: str, entry: ScoreEntry) -> UpdateCounts:
        """
        같은 {type, score} 원소 중 첫 번째 하나만 제거한다.
        - scores 배열 전체를 비교 후 교체(compare-and-set) → 한 번의 원자적 저장소 호출
        - 그 사이 다른 요청이 배열을 바꿨다면 다시 읽어서 재시도
        """
        query = queries.by_id(record_id)

        for attempt in range(self.remove_retries):
            doc = self.store.find_one(query)
            if doc is None:
                raise NotFound("Grade record", record_id)

            scores = doc.get("scores") or []
            index = next((i for i, stored in enumerate(scores) if entry.matches(stored)), None)
            if index is None:
                raise NotFound("Score entry")

            remaining = scores[:index] + scores[index + 1:]
            result = self.store.update_one(
                {**query, "scores": scores},
                {"$set": {"scores": remaining}},
            )
            if result.matched_count:
                logger.info("score %s removed from grade record %s", entry.model_dump(), record_id)
                return result

            logger.debug("grade record %s changed concurrently, retry %d", record_id, attempt + 1)

        raise StoreFailure(f"score removal on {record_id} lost {self.remove_retries} concurrent updates")

    def delete(self, record_id: str) -> int:
        deleted = self.store.delete_one(queries.by_id(record_id))
        if not deleted:
            raise NotFound("Grade record", record_id)
        logger.info("grade record %s deleted", record_id)
        return deleted

    def list_all(self) -> List[dict]:
        return [serialize_record(doc) for doc in self.store.find({})]

    # ==========================================================
    # 학생 / 반 단위
    # ==========================================================

    def list_by_learner(self, learner_id: int, class_id: Optional[int] = None) -> List[dict]:
        return [serialize_record(doc) for doc in self.store.find(queries.by_learner(learner_id, class_id))]

    def list_by_class(self, class_id: int, learner_id: Optional[int] = None) -> List[dict]:
        return [serialize_record(doc) for doc in self.store.find(queries.by_class(class_id, learner_id))]

    def delete_by_learner(self, learner_id: int) -> int:
        deleted = self.store.delete_many(queries.by_learner(learner_id))
        if not deleted:
            raise NotFound("Grade records for learner", learner_id)
        logger.info("%d grade records deleted for learner %s", deleted, learner_id)
        return deleted

    def delete_by_class(self, class_id: int) -> int:
        deleted = self.store.delete_many(queries.by_class(class_id))
        if not deleted:
            raise NotFound("Grade records for class", class_id)
        logger.info("%d grade records deleted for class %s", deleted, class_id)
        return deleted

    def reassign_class(self, class_id: int, new_class_id: int) -> UpdateCounts:
        for warning in domain_warnings(None, new_class_id):
            logger.warning("class reassignment accepted with out-of-range value: %s", warning)

        result = self.store.update_many(queries.by_class(class_id), {"$set": {"class_id": new_class_id}})
        if not result.matched_count:
            raise NotFound("Grade records for class", class_id)
        logger.info("class %s reassigned to %s (%d records)", class_id, new_class_id, result.modified_count)
        return result
