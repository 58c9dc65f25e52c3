"""
schemas/compat.py

- 구 버전 클라이언트가 보내는 입력 페이로드를 현재 스키마로 올려주는 단계 모음
- 검증(GradeCreate) 이전에 순서대로 적용되며, 호출자의 dict는 수정하지 않고 새 dict를 돌려준다
"""

import logging
from typing import Callable, Dict, List, Tuple

logger = logging.getLogger(__name__)


def _v1_student_to_learner(payload: Dict) -> Dict:
    # student_id → learner_id (둘 다 있으면 learner_id 우선)
    if "student_id" not in payload:
        return payload
    upgraded = {k: v for k, v in payload.items() if k != "student_id"}
    upgraded.setdefault("learner_id", payload["student_id"])
    return upgraded


UPGRADE_STEPS: List[Tuple[str, Callable[[Dict], Dict]]] = [
    ("v1", _v1_student_to_learner),
]


def upgrade_payload(payload: Dict) -> Dict:
    if not isinstance(payload, dict):
        return payload

    result = dict(payload)
    for version, step in UPGRADE_STEPS:
        upgraded = step(result)
        if upgraded is not result:
            logger.debug("payload upgraded by %s step", version)
        result = upgraded
    return result
