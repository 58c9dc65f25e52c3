from typing import List

from fastapi import APIRouter, Depends

from dependencies.store import get_aggregation
from schemas.grades import CohortStats, LearnerClassAverage
from services.grade_aggregation import GradeAggregation

router = APIRouter(prefix="/grades_agg", tags=["grades aggregation"])

# ==========================================================
# [집계] 가중치: 시험 50% / 퀴즈 30% / 과제 20%
# ==========================================================

# ✅ 특정 학생의 반별 가중 평균
@router.get("/learner/{learner_id}/avg-class", response_model=List[LearnerClassAverage])
def read_learner_class_averages(learner_id: int, aggregation: GradeAggregation = Depends(get_aggregation)):
    return aggregation.learner_class_averages(learner_id)


# ✅ 전체 학생 통계 (기준 점수 초과 인원/비율)
@router.get("/stats", response_model=CohortStats)
def read_cohort_stats(aggregation: GradeAggregation = Depends(get_aggregation)):
    return aggregation.cohort_stats()
