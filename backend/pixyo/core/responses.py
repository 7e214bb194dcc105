"""
표준화된 API 응답 스키마 및 유틸리티
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class StatusCode:
    """HTTP 상태 코드 상수"""

    OK = 200
    CREATED = 201
    BAD_REQUEST = 400
    UNAUTHORIZED = 401
    FORBIDDEN = 403
    NOT_FOUND = 404
    CONFLICT = 409
    INTERNAL_SERVER_ERROR = 500
    SERVICE_UNAVAILABLE = 503


class ErrorCode:
    """에러 코드 상수"""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    METHOD_NOT_ALLOWED = "METHOD_NOT_ALLOWED"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    UPSTREAM_ERROR = "UPSTREAM_ERROR"
    UPSTREAM_TIMEOUT = "UPSTREAM_TIMEOUT"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# 상태 코드별 짧은 에러 제목
ERROR_TITLES: Dict[int, str] = {
    400: "Validation Error",
    401: "Unauthorized",
    403: "Forbidden",
    404: "Not Found",
    405: "Method Not Allowed",
    409: "Conflict",
    413: "Payload Too Large",
    429: "Too Many Requests",
    500: "Internal Server Error",
    502: "Bad Gateway",
    503: "Service Unavailable",
    504: "Gateway Timeout",
}


class ErrorResponse(BaseModel):
    """에러 응답 모델"""

    error: str = Field(description="짧은 에러 제목")
    message: Optional[str] = Field(default=None, description="에러 메시지")
    code: Optional[str] = Field(default=None, description="기계가 읽을 수 있는 에러 코드")
    details: Optional[Any] = Field(default=None, description="에러 세부 정보")


class ValidationErrorDetail(BaseModel):
    """검증 에러 세부 정보"""

    field: str = Field(description="에러가 발생한 필드")
    message: str = Field(description="에러 메시지")


def error_title(status_code: int) -> str:
    """상태 코드에 해당하는 에러 제목 반환"""
    if status_code in ERROR_TITLES:
        return ERROR_TITLES[status_code]
    return "Internal Server Error" if status_code >= 500 else "Bad Request"


def create_error_response(
    status_code: int,
    message: Optional[str] = None,
    code: Optional[str] = None,
    details: Optional[Any] = None,
    error: Optional[str] = None,
) -> Dict[str, Any]:
    """에러 응답 본문 생성 (`{error, message?, code?, details?}`)"""
    response = ErrorResponse(
        error=error or error_title(status_code),
        message=message,
        code=code,
        details=details or None,
    )
    return response.model_dump(exclude_none=True)


def create_health_response(
    status: str,
    version: str,
    environment: str,
    uptime: float,
    services: Optional[Dict[str, str]] = None,
) -> Dict[str, Any]:
    """헬스 체크 응답 생성"""
    return {
        "status": status,
        "version": version,
        "environment": environment,
        "uptime": round(uptime, 2),
        "services": services or {},
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
