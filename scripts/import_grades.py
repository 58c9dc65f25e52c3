import csv
import sys

from pydantic import ValidationError

from config.logging import setup_logging
from database import db
from schemas.compat import upgrade_payload
from schemas.grades import GradeCreate
from services.grade_commands import GradeCommands

CSV_PATH = "data/grades.csv"  # ✅ 파일 경로 (learner_id 또는 student_id, class_id, type, score)


def _convert(value, kind):
    # CSV 문자열 → 숫자. 변환 실패 시 원래 값을 넘겨서 스키마 검증에서 거부되게 한다
    try:
        return kind(value.strip()) if isinstance(value, str) else value
    except ValueError:
        return value


def rows_to_records(rows):
    """
    CSV 한 줄 = 점수 하나.
    검증을 통과한 (learner_id, class_id) 가 같은 줄을 묶어 성적 레코드 하나로 만든다 (처음 등장한 순서 유지).
    """
    records = {}
    for row in rows:
        payload = upgrade_payload({k: v for k, v in row.items() if k in ("student_id", "learner_id", "class_id")})
        payload = {k: _convert(v, int) for k, v in payload.items()}
        scores = []
        if row.get("type") and row.get("score") not in (None, ""):
            scores.append({"type": row["type"], "score": _convert(row["score"], float)})

        grade = GradeCreate.model_validate({**payload, "scores": scores})
        key = (grade.learner_id, grade.class_id)
        if key in records:
            records[key].scores.extend(grade.scores)
        else:
            records[key] = grade
    return list(records.values())


def migrate_grades(path: str = CSV_PATH):
    setup_logging()
    client = db.create_client()
    try:
        commands = GradeCommands(db.create_store(client))

        with open(path, newline="", encoding="utf-8-sig") as csvfile:
            try:
                records = rows_to_records(csv.DictReader(csvfile))
            except ValidationError as exc:
                print(f"❌ CSV 검증 실패: {exc}")
                return 1

        for record in records:
            commands.insert(record)
    finally:
        client.close()

    print(f"✅ 성적 CSV → MongoDB 마이그레이션 완료 ({len(records)}건)")
    return 0


if __name__ == "__main__":
    sys.exit(migrate_grades(*sys.argv[1:2]))
