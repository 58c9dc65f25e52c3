from typing import List, Optional

from pydantic import BaseModel, ConfigDict, StrictFloat

# ✅ 점수 유형별 가중치 (시험 50% / 퀴즈 30% / 과제 20%)
SCORE_WEIGHTS = {
    "exam": 0.5,
    "quiz": 0.3,
    "homework": 0.2,
}

CLASS_ID_MIN = 0
CLASS_ID_MAX = 300
LEARNER_ID_MIN = 0


class ScoreEntry(BaseModel):
    """scores 배열의 원소 하나. 가중치 표에 없는 type도 그대로 보존한다."""
    type: str                                # exam / quiz / homework (그 외는 가중 평균에서 제외)
    score: StrictFloat                       # 점수 (범위 제한 없음, 문자열/불리언은 거부)

    model_config = ConfigDict(extra="forbid")

    def matches(self, stored: dict) -> bool:
        # 구조적 동등성: 저장된 원소가 정확히 {type, score} 일 때만 같은 것으로 본다
        return stored == self.model_dump()


def domain_warnings(learner_id: int, class_id: Optional[int]) -> List[str]:
    """
    값의 범위 검사 결과를 경고 문자열 목록으로 돌려준다.
    - 범위를 벗어나도 저장은 허용(경고만 기록), 필드 누락/타입 오류는 스키마에서 거부
    """
    warnings = []
    if learner_id is not None and learner_id < LEARNER_ID_MIN:
        warnings.append(f"learner_id {learner_id} must be an integer greater than or equal to {LEARNER_ID_MIN}")
    if class_id is not None and not CLASS_ID_MIN <= class_id <= CLASS_ID_MAX:
        warnings.append(f"class_id {class_id} must be an integer between {CLASS_ID_MIN} and {CLASS_ID_MAX}")
    return warnings


def serialize_record(doc: dict) -> dict:
    """저장소 문서를 응답용 dict로 변환 (ObjectId → 16진수 문자열)"""
    data = dict(doc)
    if "_id" in data:
        data["_id"] = str(data["_id"])
    data.setdefault("scores", [])
    return data
