"""
헬스 체크 API
"""

import time
from typing import Any, Dict

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from pixyo.core.config import settings
from pixyo.core.responses import create_health_response
from pixyo.db.session import get_db
from pixyo.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter()

# 서버 시작 시간 기록
server_start_time = time.time()


@router.get("")
async def health_check(db: AsyncSession = Depends(get_db)) -> Dict[str, Any]:
    """
    헬스 체크 엔드포인트

    Returns:
        서버 상태, 버전, 환경, 가동 시간, 외부 서비스 설정 여부
    """
    services = {
        "gemini": "configured" if settings.GOOGLE_API_KEY else "not_configured",
        "claude": "configured" if settings.ANTHROPIC_API_KEY else "not_configured",
        "unsplash": "configured" if settings.UNSPLASH_ACCESS_KEY else "not_configured",
    }

    try:
        await db.execute(text("SELECT 1"))
        services["database"] = "healthy"
    except SQLAlchemyError as e:
        logger.error(f"데이터베이스 상태 확인 실패: {e}")
        services["database"] = "unavailable"

    return create_health_response(
        status="healthy" if services["database"] == "healthy" else "degraded",
        version=settings.VERSION,
        environment=settings.ENVIRONMENT,
        uptime=time.time() - server_start_time,
        services=services,
    )
