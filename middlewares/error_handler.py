import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from schemas.common import make_error
from utils.exceptions import GradebookError, StoreFailure

logger = logging.getLogger(__name__)


def add_error_handlers(app: FastAPI):
    @app.exception_handler(GradebookError)
    async def gradebook_exception_handler(request: Request, exc: GradebookError):
        if isinstance(exc, StoreFailure):
            # 내부 진단 정보는 로그에만
            logger.error("store failure on %s %s: %s", request.method, request.url.path, exc.detail)
        else:
            logger.info("%s on %s %s: %s", exc.code, request.method, request.url.path, exc.message)
        return JSONResponse(
            status_code=exc.status_code,
            content=make_error(exc.code, exc.message),
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=500,
            content=make_error("INTERNAL_ERROR", "Internal Server Error"),
        )
