"""
API 의존성 주입
"""

from typing import Callable, Optional

from fastapi import Depends, Header, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from pixyo.core.config import settings
from pixyo.core.exceptions import AuthenticationError, AuthorizationError
from pixyo.core.permissions import get_tool_for_route, has_tool_access, is_admin
from pixyo.core.security import CurrentUser, decode_access_token, get_mock_user
from pixyo.db.session import get_session_factory
from pixyo.services.ai.claude_service import ClaudeService
from pixyo.services.ai.gemini_image_service import GeminiImageService
from pixyo.services.blob_storage import LocalBlobStorage
from pixyo.services.blob_storage import get_blob_storage as _get_blob_storage
from pixyo.services.unsplash_service import UnsplashService
from pixyo.services.usage_ledger import UsageLedger

# HTTP Bearer 토큰 스키마
security = HTTPBearer(auto_error=False)


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    x_mock_user_id: Optional[str] = Header(default=None),
) -> CurrentUser:
    """
    현재 사용자 반환

    Mock 인증이 켜져 있으면 개발용 사용자(X-Mock-User-ID로 선택 가능)를 사용한다.

    Raises:
        AuthenticationError: 토큰이 없거나 유효하지 않음
    """
    user: Optional[CurrentUser] = None

    if settings.MOCK_AUTH_ENABLED:
        user = get_mock_user(x_mock_user_id)

    if user is None:
        if credentials is None:
            raise AuthenticationError()
        user = decode_access_token(credentials.credentials)
        if user is None:
            raise AuthenticationError("Ungültiges Token")

    request.state.user_id = user.id
    return user


def require_tool_access(route_name: str) -> Callable:
    """경로에 연결된 도구 권한 검사 의존성 (연결된 도구가 없으면 인증만)"""

    async def dependency(current_user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        tool = get_tool_for_route(route_name)
        if tool is not None and not has_tool_access(current_user.server_metadata, tool):
            raise AuthorizationError(
                "Kein Zugriff auf dieses Tool",
                details={"tool": tool.value},
            )
        return current_user

    return dependency


async def get_current_admin_user(
    current_user: CurrentUser = Depends(get_current_user)
) -> CurrentUser:
    """관리자 전용"""
    if not is_admin(current_user.server_metadata):
        raise AuthorizationError("Nur für Admins")
    return current_user


# ===== 서비스 =====

def get_blob_storage() -> LocalBlobStorage:
    return _get_blob_storage()


_image_service: Optional[GeminiImageService] = None
_claude_service: Optional[ClaudeService] = None


def get_image_service() -> GeminiImageService:
    global _image_service
    if _image_service is None:
        _image_service = GeminiImageService()
    return _image_service


def get_claude_service() -> ClaudeService:
    global _claude_service
    if _claude_service is None:
        _claude_service = ClaudeService()
    return _claude_service


def get_unsplash_service() -> UnsplashService:
    return UnsplashService()


def get_usage_ledger(
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
) -> UsageLedger:
    return UsageLedger(session_factory)
