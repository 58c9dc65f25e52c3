import logging

from pymongo import ASCENDING, MongoClient
from pymongo.errors import PyMongoError

from config.settings import settings                 # ✅ 환경변수 설정 파일 불러오기
from database.store import MongoRecordStore
from models.grades import CLASS_ID_MAX, CLASS_ID_MIN, LEARNER_ID_MIN

logger = logging.getLogger(__name__)

# ✅ 컬렉션 검증 규칙: 범위 위반은 거부하지 않고 경고(validationAction=warn)만 남긴다
GRADES_VALIDATOR = {
    "$jsonSchema": {
        "bsonType": "object",
        "required": ["class_id", "learner_id"],
        "properties": {
            "class_id": {
                "bsonType": "int",
                "minimum": CLASS_ID_MIN,
                "maximum": CLASS_ID_MAX,
                "description": f"Must be an integer between {CLASS_ID_MIN} and {CLASS_ID_MAX}.",
            },
            "learner_id": {
                "bsonType": "int",
                "minimum": LEARNER_ID_MIN,
                "description": f"Must be an integer greater than or equal to {LEARNER_ID_MIN}.",
            },
        },
    },
}


def create_client(url: str = None) -> MongoClient:
    # ✅ 환경변수의 MONGO_URL로 클라이언트 생성 (연결은 첫 요청 시 지연 수립)
    return MongoClient(url or settings.MONGO_URL, serverSelectionTimeoutMS=settings.MONGO_TIMEOUT_MS)


def create_store(client: MongoClient) -> MongoRecordStore:
    collection = client[settings.MONGO_DB][settings.MONGO_COLLECTION]
    return MongoRecordStore(collection)


def ensure_indexes(collection):
    # 단일 필드 인덱스 + 복합 인덱스
    try:
        collection.create_index([("class_id", ASCENDING)])
        collection.create_index([("learner_id", ASCENDING)])
        collection.create_index([("learner_id", ASCENDING), ("class_id", ASCENDING)])
        logger.info("Indices created successfully.")
    except PyMongoError as exc:
        logger.error("Error creating indices: %s", exc)


def apply_validation_rules(database, collection_name: str):
    try:
        database.command({
            "collMod": collection_name,
            "validator": GRADES_VALIDATOR,
            "validationAction": "warn",
        })
        logger.info("Validation rules updated successfully.")
    except PyMongoError as exc:
        logger.error("Error setting validation rules: %s", exc)


def bootstrap(client: MongoClient):
    """기동 시 1회: 인덱스와 검증 규칙을 맞춘다. 실패해도 서버 기동은 계속한다."""
    database = client[settings.MONGO_DB]
    ensure_indexes(database[settings.MONGO_COLLECTION])
    apply_validation_rules(database, settings.MONGO_COLLECTION)
