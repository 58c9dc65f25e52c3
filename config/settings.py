"""
config/settings.py

- .env에 정의한 환경변수를 읽어 애플리케이션 전역 설정으로 제공합니다.
- pydantic v2 / pydantic-settings v2 사용.
- 성적 레코드는 MongoDB 컬렉션 하나(grades)에 문서 단위로 저장합니다.
"""

from typing import List, Literal
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # =========================
    # 앱/런타임
    # =========================
    ENV: Literal["dev", "stage", "prod"] = "dev"
    APP_TITLE: str = "Grade Aggregation API"
    APP_DESCRIPTION: str = "학생/반 단위 성적 기록 및 가중 평균 집계 API"
    APP_VERSION: str = "1.0.0"

    # =========================
    # CORS
    # =========================
    # 콤마(,)로 구분된 문자열 → List[str] 로 파싱
    CORS_ORIGINS: List[str] = ["http://localhost:3000"]

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def _split_origins(cls, v):
        if isinstance(v, str):
            # "a,b , c" → ["a","b","c"]
            return [s.strip() for s in v.split(",") if s.strip()]
        return v

    # =========================
    # Database (MongoDB)
    # =========================
    MONGO_URL: str = "mongodb://localhost:27017"
    MONGO_DB: str = "sample_training"
    MONGO_COLLECTION: str = "grades"
    MONGO_TIMEOUT_MS: int = 5000
    # 기동 시 인덱스/검증 규칙 생성 여부
    MONGO_BOOTSTRAP: bool = True

    # =========================
    # 집계 / 명령 정책
    # =========================
    COHORT_THRESHOLD: float = 70.0
    SCORE_REMOVE_RETRIES: int = 3

    # =========================
    # Logging / Misc
    # =========================
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    REQUEST_LOG: bool = True

    # =========================
    # BaseSettings Config
    # =========================
    model_config = SettingsConfigDict(
        env_file=".env",               # .env에서 값 로드
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",                # 정의되지 않은 키는 무시
    )


# ✅ settings 객체를 통해 어디서든 접근 가능
settings = Settings()
