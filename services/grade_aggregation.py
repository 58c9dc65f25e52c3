"""
services/grade_aggregation.py

- 학생별 반 가중 평균, 전체 코호트 통계, 반 단위 학생 통계
- 저장소에서 $match/$unwind/$project로 필요한 값만 꺼내고, 그룹/평균/정렬은 여기서 계산한다

빈 집합 처리:
- 평균을 낼 값이 없으면 mean()이 ComputationUndefined를 던지고, 각 집계가 이를 null로 확정한다
- 가중 평균은 값이 있는 유형의 가중치만 다시 1로 정규화해서 합산한다
"""

import logging
from typing import Dict, Iterable, List, Optional

from config.settings import settings
from database.store import RecordStore
from models.grades import SCORE_WEIGHTS
from services import queries
from utils.exceptions import ComputationUndefined

logger = logging.getLogger(__name__)


def mean(values: Iterable[float]) -> float:
    values = list(values)
    if not values:
        raise ComputationUndefined("mean of an empty set is undefined")
    return sum(values) / len(values)


def mean_or_none(values: Iterable[float]) -> Optional[float]:
    try:
        return mean(values)
    except ComputationUndefined:
        return None


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _numeric_scores(scores) -> List[float]:
    # 숫자가 아닌 score 값(레거시 문서)은 평균에서 제외
    return [entry["score"] for entry in scores or [] if isinstance(entry, dict) and _is_number(entry.get("score"))]


def weighted_average(partition_means: Dict[str, Optional[float]]) -> Optional[float]:
    """
    유형별 평균 → 가중 평균.
    세 유형이 모두 있으면 exam*0.5 + quiz*0.3 + homework*0.2 와 같다.
    """
    present = {t: m for t, m in partition_means.items() if m is not None and t in SCORE_WEIGHTS}
    if not present:
        return None
    total_weight = sum(SCORE_WEIGHTS[t] for t in present)
    return sum(m * SCORE_WEIGHTS[t] for t, m in present.items()) / total_weight


class GradeAggregation:
    def __init__(self, store: RecordStore, threshold: Optional[float] = None):
        self.store = store
        self.threshold = settings.COHORT_THRESHOLD if threshold is None else threshold

    # ==========================================================
    # [1] 학생 한 명의 반별 가중 평균
    # ==========================================================
    def learner_class_averages(self, learner_id: int) -> List[dict]:
        rows = self.store.aggregate([
            {"$match": queries.by_learner(learner_id)},
            {"$unwind": "$scores"},
            {"$project": {"_id": 0, "class_id": 1, "type": "$scores.type", "score": "$scores.score"}},
        ])

        # class_id 별로 유형별 점수 목록 수집 (처음 등장한 순서 유지)
        groups: Dict[int, Dict[str, List[float]]] = {}
        for row in rows:
            partitions = groups.setdefault(row.get("class_id"), {t: [] for t in SCORE_WEIGHTS})
            score_type = row.get("type")
            score = row.get("score")
            if score_type in partitions and _is_number(score):
                partitions[score_type].append(score)

        result = []
        for class_id, partitions in groups.items():
            means = {t: mean_or_none(values) for t, values in partitions.items()}
            result.append({
                "class_id": class_id,
                "weighted_average": weighted_average(means),
                **means,
            })

        logger.debug("weighted averages for learner %s: %d classes", learner_id, len(result))
        return result

    # ==========================================================
    # [2] 전체 코호트 통계 (기준 점수 초과 비율)
    # ==========================================================
    def cohort_stats(self) -> dict:
        records = self.store.find({}, {"scores": 1})

        total = len(records)
        above = 0
        for record in records:
            # 레코드별 단순 평균 (유형 무관, 가중치 없음)
            average = mean_or_none(_numeric_scores(record.get("scores")))
            if average is not None and average > self.threshold:
                above += 1

        if total:
            percentage = above / total * 100
        else:
            # 0명 코호트: 비율은 정의되지 않으므로 null
            logger.info("cohort statistics requested on an empty collection")
            percentage = None

        return {
            "totalLearners": total,
            "above70Count": above,
            "above70Percentage": percentage,
        }

    # ==========================================================
    # [3] 반 단위 학생별 통계 (평균 내림차순)
    # ==========================================================
    def class_stats(self, class_id: int) -> List[dict]:
        records = self.store.find(queries.by_class(class_id))

        per_learner: Dict[int, List[float]] = {}
        for record in records:
            per_learner.setdefault(record.get("learner_id"), []).extend(_numeric_scores(record.get("scores")))

        stats = [
            {
                "_id": learner_id,
                "averageScore": mean_or_none(scores),
                "totalScores": sum(scores),
                "scoreCount": len(scores),
            }
            for learner_id, scores in per_learner.items()
        ]

        # 평균 없는 학생은 맨 뒤, 동점은 원래 순서 유지 (sorted는 안정 정렬)
        return sorted(
            stats,
            key=lambda s: (s["averageScore"] is None, -(s["averageScore"] or 0)),
        )
