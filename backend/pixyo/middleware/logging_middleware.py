"""
로깅 미들웨어
"""

import time
import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from pixyo.services.logging_service import logging_service

SLOW_REQUEST_THRESHOLD_MS = 1000


class LoggingMiddleware(BaseHTTPMiddleware):
    """HTTP 요청/응답 로깅 미들웨어"""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id

        start_time = time.time()
        client_ip = self._get_client_ip(request)

        logging_service.log_request(
            method=request.method,
            url=str(request.url),
            ip_address=client_ip,
            user_agent=request.headers.get("user-agent", ""),
            request_id=request_id,
            path=request.url.path,
        )

        try:
            response = await call_next(request)
        except Exception as e:
            response_time_ms = (time.time() - start_time) * 1000
            logging_service.log_error(
                error=e,
                context="HTTP 요청 처리 중 에러 발생",
                user_id=getattr(request.state, "user_id", None),
                request_id=request_id,
                method=request.method,
                url=str(request.url),
                response_time_ms=response_time_ms,
                client_ip=client_ip
            )
            raise

        response_time_ms = (time.time() - start_time) * 1000
        user_id = getattr(request.state, "user_id", None)

        logging_service.log_response(
            method=request.method,
            url=str(request.url),
            status_code=response.status_code,
            response_time_ms=response_time_ms,
            user_id=user_id,
            request_id=request_id,
            path=request.url.path
        )

        # 느린 요청 감지 (AI 호출은 대부분 여기에 해당)
        if response_time_ms > SLOW_REQUEST_THRESHOLD_MS:
            logging_service.log_performance_metric(
                metric_name="slow_request",
                value=response_time_ms,
                unit="ms",
                context={
                    "method": request.method,
                    "path": request.url.path,
                    "status_code": response.status_code
                },
                request_id=request_id
            )

        response.headers["X-Request-ID"] = request_id
        return response

    def _get_client_ip(self, request: Request) -> str:
        """클라이언트 IP 주소 추출"""
        forwarded_for = request.headers.get("X-Forwarded-For")
        if forwarded_for:
            return forwarded_for.split(",")[0].strip()

        real_ip = request.headers.get("X-Real-IP")
        if real_ip:
            return real_ip

        return request.client.host if request.client else "unknown"


class SecurityMiddleware(BaseHTTPMiddleware):
    """보안 헤더 추가 미들웨어"""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        return response
