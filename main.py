import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config.logging import setup_logging
from config.settings import settings
from database import db
from database.store import RecordStore

# ✅ 미들웨어 임포트
from middlewares.error_handler import add_error_handlers
from middlewares.legacy_paths import LegacyPathMiddleware
from middlewares.timing import TimingMiddleware

# ✅ 라우터 임포트
from routers import grades, grades_agg

logger = logging.getLogger(__name__)


@asynccontextmanager
async def _mongo_lifespan(app: FastAPI):
    # ✅ 기동 시 MongoDB 클라이언트 생성 → app.state.store 로 주입
    client = db.create_client()
    if settings.MONGO_BOOTSTRAP:
        db.bootstrap(client)
    app.state.store = db.create_store(client)
    logger.info("connected to %s/%s.%s", settings.MONGO_URL, settings.MONGO_DB, settings.MONGO_COLLECTION)
    try:
        yield
    finally:
        client.close()


def create_app(store: RecordStore = None) -> FastAPI:
    """
    store를 넘기면 그 저장소를 그대로 쓰고(테스트 등), 없으면 기동 시 MongoDB에 연결한다.
    """
    setup_logging()

    app = FastAPI(
        title=settings.APP_TITLE,
        description=settings.APP_DESCRIPTION,
        version=settings.APP_VERSION,
        lifespan=None if store is not None else _mongo_lifespan,
    )
    if store is not None:
        app.state.store = store

    # ✅ CORS 설정 (프론트엔드 연동 대비)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ✅ 요청 지연 측정 미들웨어 (응답 헤더 X-Latency-Ms 추가)
    app.add_middleware(TimingMiddleware, log_requests=settings.REQUEST_LOG)

    # ✅ 구 버전 경로(/grades/student/...) 재작성
    app.add_middleware(LegacyPathMiddleware)

    # ✅ 전역 에러 핸들러 등록 (일관된 JSON 에러 포맷)
    add_error_handlers(app)

    app.include_router(grades.router)        # CRUD 라우터
    app.include_router(grades_agg.router)    # 집계 라우터

    # ✅ 헬스체크 엔드포인트
    @app.get("/health")
    def health_check():
        return {"status": "ok", "message": "API is running"}

    # ✅ 루트 엔드포인트
    @app.get("/")
    def root():
        return {"message": "Welcome to the API."}

    return app


app = create_app()
