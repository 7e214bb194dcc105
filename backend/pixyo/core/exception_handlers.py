"""
전역 예외 처리기

모든 실패는 `{error, message?, code?, details?}` 형태로 응답한다.
"""

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from pixyo.core.config import settings
from pixyo.core.exceptions import PixyoException
from pixyo.core.responses import (
    ErrorCode,
    StatusCode,
    ValidationErrorDetail,
    create_error_response,
)
from pixyo.services.logging_service import logging_service


def _client_ip(request: Request) -> str:
    return request.client.host if request.client else "unknown"


async def pixyo_exception_handler(request: Request, exc: PixyoException) -> JSONResponse:
    """Pixyo 사용자 정의 예외 처리기"""

    request_id = getattr(request.state, "request_id", None)
    user_id = getattr(request.state, "user_id", None)

    if exc.status_code >= 500:
        logging_service.log_error(
            error=exc,
            context="Pixyo 사용자 정의 예외",
            user_id=user_id,
            request_id=request_id,
            method=request.method,
            url=str(request.url),
            error_code=exc.error_code,
            status_code=exc.status_code
        )

    # 권한/인증 에러는 보안 이벤트로 기록
    if exc.status_code in (401, 403):
        logging_service.log_security_event(
            event_type="access_denied",
            description=f"접근 거부: {exc.message}",
            user_id=user_id,
            ip_address=_client_ip(request),
            severity="MEDIUM",
            error_code=exc.error_code,
            path=request.url.path
        )

    return JSONResponse(
        status_code=exc.status_code,
        content=jsonable_encoder(create_error_response(
            status_code=exc.status_code,
            message=exc.message,
            code=exc.error_code,
            details=exc.details,
        ))
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """요청 검증 에러 처리기 (400)"""

    request_id = getattr(request.state, "request_id", None)

    validation_errors = []
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ())]
        # "body", "query" 등 위치 접두어 제거
        field = ".".join(loc[1:]) if len(loc) > 1 else ".".join(loc)
        validation_errors.append(ValidationErrorDetail(field=field, message=error["msg"]))

    logging_service.log_security_event(
        event_type="validation_failed",
        description="요청 검증 실패",
        ip_address=_client_ip(request),
        request_id=request_id,
        path=request.url.path,
        fields=[err.field for err in validation_errors]
    )

    message = ", ".join(
        f"{err.field}: {err.message}" if err.field else err.message
        for err in validation_errors
    )

    return JSONResponse(
        status_code=StatusCode.BAD_REQUEST,
        content=jsonable_encoder(create_error_response(
            status_code=StatusCode.BAD_REQUEST,
            message=message,
            code=ErrorCode.VALIDATION_ERROR,
            details=[err.model_dump() for err in validation_errors],
        ))
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """FastAPI/Starlette HTTPException 처리기"""

    code_mapping = {
        400: ErrorCode.VALIDATION_ERROR,
        401: ErrorCode.UNAUTHORIZED,
        403: ErrorCode.FORBIDDEN,
        404: ErrorCode.NOT_FOUND,
        405: ErrorCode.METHOD_NOT_ALLOWED,
        409: ErrorCode.CONFLICT,
        503: ErrorCode.CONFIGURATION_ERROR,
    }

    return JSONResponse(
        status_code=exc.status_code,
        content=jsonable_encoder(create_error_response(
            status_code=exc.status_code,
            message=str(exc.detail) if exc.detail else None,
            code=code_mapping.get(exc.status_code, ErrorCode.INTERNAL_ERROR),
        )),
        headers=getattr(exc, "headers", None),
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """일반 예외 처리기 (마지막 예외 처리기)"""

    request_id = getattr(request.state, "request_id", None)
    user_id = getattr(request.state, "user_id", None)

    # 스택은 서버 로그에만 남긴다
    logging_service.log_error(
        error=exc,
        context="예상치 못한 시스템 에러",
        user_id=user_id,
        request_id=request_id,
        method=request.method,
        url=str(request.url),
        user_agent=request.headers.get("user-agent", "")
    )

    details = {"errorType": type(exc).__name__} if settings.DEBUG else None

    return JSONResponse(
        status_code=StatusCode.INTERNAL_SERVER_ERROR,
        content=jsonable_encoder(create_error_response(
            status_code=StatusCode.INTERNAL_SERVER_ERROR,
            message="Ein unerwarteter Fehler ist aufgetreten",
            code=ErrorCode.INTERNAL_ERROR,
            details=details,
        ))
    )
