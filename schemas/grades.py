from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictInt

from models.grades import ScoreEntry, domain_warnings


# ✅ 입력용 (POST)
class GradeCreate(BaseModel):
    learner_id: StrictInt                    # 학생 ID (>= 0 권장)
    class_id: StrictInt                      # 반 ID (0~300 권장)
    scores: List[ScoreEntry] = []            # 초기 점수 목록 (선택)

    model_config = ConfigDict(extra="forbid")

    def domain_warnings(self) -> List[str]:
        return domain_warnings(self.learner_id, self.class_id)

    def to_document(self) -> dict:
        return self.model_dump()


# ✅ 반 ID 일괄 변경 (PATCH /grades/class/{id})
class ClassReassign(BaseModel):
    class_id: StrictInt

    model_config = ConfigDict(extra="forbid")


# ✅ 출력용
class GradeRecordOut(BaseModel):
    id: str = Field(alias="_id")
    learner_id: Optional[int] = None
    class_id: Optional[int] = None
    scores: List[dict] = []

    model_config = ConfigDict(populate_by_name=True, extra="allow")


class UpdateResult(BaseModel):
    matched_count: int
    modified_count: int


class DeleteResult(BaseModel):
    deleted_count: int


class LearnerClassAverage(BaseModel):
    """학생 한 명의 반별 가중 평균 (유형별 평균이 없으면 null)"""
    class_id: Optional[int] = None
    weighted_average: Optional[float] = None
    exam: Optional[float] = None
    quiz: Optional[float] = None
    homework: Optional[float] = None


class CohortStats(BaseModel):
    totalLearners: int
    above70Count: int
    above70Percentage: Optional[float] = None


class LearnerClassStats(BaseModel):
    learner_id: Optional[int] = Field(default=None, alias="_id")
    averageScore: Optional[float] = None
    totalScores: float = 0
    scoreCount: int = 0

    model_config = ConfigDict(populate_by_name=True)
