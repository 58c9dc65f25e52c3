from typing import List, Optional

from fastapi import APIRouter, Body, Depends, Query, Response
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

from dependencies.store import get_aggregation, get_commands
from models.grades import ScoreEntry
from schemas.compat import upgrade_payload
from schemas.grades import (
    ClassReassign,
    DeleteResult,
    GradeCreate,
    GradeRecordOut,
    LearnerClassStats,
    UpdateResult,
)
from services.grade_aggregation import GradeAggregation
from services.grade_commands import GradeCommands

router = APIRouter(prefix="/grades", tags=["grades"])


# ==========================================================
# [1단계] CRUD 기본 라우터
# ==========================================================

# ✅ [CREATE] 성적 레코드 추가 (구 버전 필드명은 어댑터에서 변환 후 검증)
@router.post("", status_code=204)
def create_grade(payload: dict = Body(...), commands: GradeCommands = Depends(get_commands)):
    try:
        grade = GradeCreate.model_validate(upgrade_payload(payload))
    except ValidationError as exc:
        raise RequestValidationError(exc.errors())

    record_id = commands.insert(grade)
    return Response(status_code=204, headers={"Location": f"/grades/{record_id}"})


# ✅ [READ] 전체 성적 조회
@router.get("", response_model=List[GradeRecordOut])
def read_grades(commands: GradeCommands = Depends(get_commands)):
    return commands.list_all()


# ==========================================================
# [2단계] 정적 라우터 (학생 / 반 / 통계)
# ==========================================================

# ✅ [READ] 학생의 성적 (class 쿼리로 반 필터)
@router.get("/learner/{learner_id}", response_model=List[GradeRecordOut])
def read_learner_grades(
    learner_id: int,
    class_id: Optional[int] = Query(None, alias="class"),
    commands: GradeCommands = Depends(get_commands),
):
    return commands.list_by_learner(learner_id, class_id)


# ✅ [DELETE] 학생의 성적 전체 삭제
@router.delete("/learner/{learner_id}", response_model=DeleteResult)
def delete_learner_grades(learner_id: int, commands: GradeCommands = Depends(get_commands)):
    return {"deleted_count": commands.delete_by_learner(learner_id)}


# ✅ [READ] 반의 성적 (learner 쿼리로 학생 필터)
@router.get("/class/{class_id}", response_model=List[GradeRecordOut])
def read_class_grades(
    class_id: int,
    learner_id: Optional[int] = Query(None, alias="learner"),
    commands: GradeCommands = Depends(get_commands),
):
    return commands.list_by_class(class_id, learner_id)


# ✅ [UPDATE] 반 ID 일괄 변경
@router.patch("/class/{class_id}", response_model=UpdateResult)
def reassign_class(class_id: int, body: ClassReassign, commands: GradeCommands = Depends(get_commands)):
    return commands.reassign_class(class_id, body.class_id)._asdict()


# ✅ [DELETE] 반 성적 전체 삭제
@router.delete("/class/{class_id}", response_model=DeleteResult)
def delete_class_grades(class_id: int, commands: GradeCommands = Depends(get_commands)):
    return {"deleted_count": commands.delete_by_class(class_id)}


# ✅ [STATS] 반 내 학생별 평균/합계/개수 (평균 내림차순)
@router.get("/stats/{class_id}", response_model=List[LearnerClassStats])
def read_class_stats(class_id: int, aggregation: GradeAggregation = Depends(get_aggregation)):
    return aggregation.class_stats(class_id)


# ==========================================================
# [3단계] 완전 동적 라우터 (레코드 ID)
# ==========================================================

# ✅ [READ] 특정 성적 레코드 조회
@router.get("/{record_id}", response_model=GradeRecordOut)
def read_grade(record_id: str, commands: GradeCommands = Depends(get_commands)):
    return commands.fetch(record_id)


# ✅ [UPDATE] 점수 추가
@router.patch("/{record_id}/add", response_model=UpdateResult)
def add_score(record_id: str, entry: ScoreEntry, commands: GradeCommands = Depends(get_commands)):
    return commands.add_score(record_id, entry)._asdict()


# ✅ [UPDATE] 점수 제거 (같은 점수가 여러 개면 첫 번째만)
@router.patch("/{record_id}/remove", response_model=UpdateResult)
def remove_score(record_id: str, entry: ScoreEntry, commands: GradeCommands = Depends(get_commands)):
    return commands.remove_score(record_id, entry)._asdict()


# ✅ [DELETE] 성적 레코드 삭제
@router.delete("/{record_id}", response_model=DeleteResult)
def delete_grade(record_id: str, commands: GradeCommands = Depends(get_commands)):
    return {"deleted_count": commands.delete(record_id)}
