from fastapi import Depends, Request

from database.store import RecordStore
from services.grade_aggregation import GradeAggregation
from services.grade_commands import GradeCommands


# ==========================================================
# [공통] 저장소 주입
# - 앱 기동 시 만든 RecordStore를 app.state에 보관하고 요청마다 꺼내 쓴다
# ==========================================================
def get_store(request: Request) -> RecordStore:
    return request.app.state.store


def get_commands(store: RecordStore = Depends(get_store)) -> GradeCommands:
    return GradeCommands(store)


def get_aggregation(store: RecordStore = Depends(get_store)) -> GradeAggregation:
    return GradeAggregation(store)
