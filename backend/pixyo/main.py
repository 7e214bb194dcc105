"""
Pixyo 메인 FastAPI 애플리케이션
"""

import time
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from pixyo.api.v1.api import api_router
from pixyo.core.config import settings
from pixyo.core.exception_handlers import (
    general_exception_handler,
    http_exception_handler,
    pixyo_exception_handler,
    validation_exception_handler,
)
from pixyo.core.exceptions import PixyoException
from pixyo.db.session import get_database
from pixyo.middleware.logging_middleware import LoggingMiddleware, SecurityMiddleware
from pixyo.services.logging_service import logging_service
from pixyo.utils.background import wait_for_background_tasks
from pixyo.utils.logger import get_logger, setup_logging

# 로깅 설정
setup_logging()
logger = get_logger(__name__)

# 서버 시작 시간 기록
server_start_time = time.time()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """애플리케이션 생명주기 관리"""
    logger.info("Pixyo 백엔드 서버가 시작됩니다...")
    logger.info(f"환경: {settings.ENVIRONMENT}")
    logger.info(f"Mock 인증: {settings.MOCK_AUTH_ENABLED}, Mock AI: {settings.MOCK_AI}")

    logging_service.log_security_event(
        event_type="server_startup",
        description="Pixyo 서버 시작",
        severity="INFO",
        version=settings.VERSION,
        environment=settings.ENVIRONMENT
    )

    yield

    logger.info("Pixyo 백엔드 서버가 종료됩니다...")

    # 남은 사용량 기록 마무리
    await wait_for_background_tasks(timeout=5)
    await get_database().dispose()

    logging_service.log_security_event(
        event_type="server_shutdown",
        description="Pixyo 서버 종료",
        severity="INFO",
        uptime=time.time() - server_start_time
    )


def create_app() -> FastAPI:
    """애플리케이션 생성 (테스트에서 의존성 교체용으로도 사용)"""
    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        description="AI 소셜 그래픽 생성, 캔버스 디자인, 브랜드 프로필 관리",
        openapi_url=f"{settings.API_PREFIX}/openapi.json",
        docs_url=f"{settings.API_PREFIX}/docs" if settings.DEBUG else None,
        redoc_url=None,
        lifespan=lifespan
    )

    # 미들웨어 (마지막에 추가한 것이 가장 바깥)
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(SecurityMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # 예외 처리기 등록
    app.add_exception_handler(PixyoException, pixyo_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    app.include_router(api_router, prefix=settings.API_PREFIX)

    # 업로드된 Blob 서빙 (디렉터리는 첫 업로드 시 생성)
    blob_dir = Path(settings.BLOB_STORAGE_DIR)
    app.mount("/blobs", StaticFiles(directory=str(blob_dir), check_dir=False), name="blobs")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "pixyo.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.DEBUG,
    )
