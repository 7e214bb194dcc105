"""
보안 관련 유틸리티

사용자 식별은 외부 인증 제공자가 발급한 JWT를 검증해서 얻는다.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import JWTError, jwt

from pixyo.core.config import settings


@dataclass
class CurrentUser:
    """인증된 요청자"""

    id: str
    primary_email: Optional[str] = None
    display_name: Optional[str] = None
    server_metadata: Optional[Dict[str, Any]] = field(default=None)

    @property
    def email_or_unknown(self) -> str:
        return self.primary_email or "unknown"


def create_access_token(
    subject: str,
    email: Optional[str] = None,
    server_metadata: Optional[Dict[str, Any]] = None,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """
    액세스 토큰 생성 (개발/테스트용)

    Args:
        subject: 사용자 ID
        email: 기본 이메일
        server_metadata: 서버 측 메타데이터 (role, allowedTools)
        expires_delta: 만료 시간 델타

    Returns:
        JWT 토큰 문자열
    """
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode: Dict[str, Any] = {"exp": expire, "sub": str(subject)}
    if email:
        to_encode["email"] = email
    if server_metadata is not None:
        to_encode["server_metadata"] = server_metadata
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> Optional[CurrentUser]:
    """
    토큰 검증

    Returns:
        검증된 사용자 또는 None
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None

    subject = payload.get("sub")
    if not subject:
        return None

    metadata = payload.get("server_metadata")
    return CurrentUser(
        id=str(subject),
        primary_email=payload.get("email"),
        display_name=payload.get("name"),
        server_metadata=metadata if isinstance(metadata, dict) else None,
    )


def get_mock_user(user_id: Optional[str] = None) -> Optional[CurrentUser]:
    """개발용 Mock 사용자 반환"""
    if not settings.MOCK_AUTH_ENABLED:
        return None

    metadata = {"role": settings.MOCK_USER_ROLE} if settings.MOCK_USER_ROLE else None
    return CurrentUser(
        id=user_id or settings.MOCK_USER_ID,
        primary_email=settings.MOCK_USER_EMAIL,
        display_name="Dev User",
        server_metadata=metadata,
    )
