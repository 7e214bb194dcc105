"""
통합 로깅 및 모니터링 서비스
"""

import asyncio
import traceback
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Union

import structlog
from langsmith import Client as LangsmithClient

from pixyo.core.config import settings

# 구조화된 로거 설정
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    wrapper_class=structlog.stdlib.BoundLogger,
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger(__name__)


class LoggingService:
    """통합 로깅 및 모니터링 서비스"""

    def __init__(self):
        self.langsmith_client: Optional[LangsmithClient] = None
        self._initialize_langsmith()

    def _initialize_langsmith(self):
        """LangSmith 클라이언트 초기화"""
        if not settings.LANGSMITH_API_KEY:
            logger.info("LANGSMITH_API_KEY가 설정되지 않음 - LangSmith 모니터링 비활성화")
            return
        try:
            self.langsmith_client = LangsmithClient(api_key=settings.LANGSMITH_API_KEY)
            logger.info("LangSmith 클라이언트 초기화 완료", project=settings.LANGSMITH_PROJECT)
        except Exception as e:
            logger.error("LangSmith 초기화 실패", error=str(e))
            self.langsmith_client = None

    def log_request(
        self,
        method: str,
        url: str,
        user_id: Optional[str] = None,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
        **extra_data
    ):
        """HTTP 요청 로깅"""
        logger.info(
            "HTTP 요청",
            method=method,
            url=url,
            user_id=user_id,
            ip_address=ip_address,
            user_agent=user_agent,
            **extra_data
        )

    def log_response(
        self,
        method: str,
        url: str,
        status_code: int,
        response_time_ms: float,
        user_id: Optional[str] = None,
        **extra_data
    ):
        """HTTP 응답 로깅"""
        logger.info(
            "HTTP 응답",
            method=method,
            url=url,
            status_code=status_code,
            response_time_ms=response_time_ms,
            user_id=user_id,
            **extra_data
        )

    def log_ai_model_usage(
        self,
        model_name: str,
        operation: str,
        prompt: str,
        response_time_ms: float,
        user_id: Optional[str] = None,
        response: str = "",
        success: bool = True,
        error: Optional[str] = None,
        **extra_data
    ):
        """AI 모델 호출 로깅"""
        log_data = {
            "model_name": model_name,
            "operation": operation,
            "prompt_length": len(prompt),
            "response_length": len(response),
            "response_time_ms": response_time_ms,
            "user_id": user_id,
            "success": success,
            **extra_data
        }

        if error:
            log_data["error"] = error
            logger.error("AI 모델 호출 실패", **log_data)
        else:
            logger.info("AI 모델 호출", **log_data)

        # LangSmith에 전송 (비동기, 실패 무시)
        if self.langsmith_client and success:
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError:
                return
            loop.create_task(self._send_to_langsmith(
                model_name=model_name,
                operation=operation,
                prompt=prompt,
                response=response,
                response_time_ms=response_time_ms,
                user_id=user_id,
            ))

    async def _send_to_langsmith(
        self,
        model_name: str,
        operation: str,
        prompt: str,
        response: str,
        response_time_ms: float,
        user_id: Optional[str] = None,
    ):
        """LangSmith로 데이터 전송"""
        try:
            end_time = datetime.now(timezone.utc)
            await asyncio.to_thread(
                self.langsmith_client.create_run,
                name=f"pixyo_{operation}",
                run_type="llm",
                inputs={"prompt": prompt},
                outputs={"response": response},
                start_time=end_time,
                end_time=end_time,
                project_name=settings.LANGSMITH_PROJECT,
                extra={
                    "model_name": model_name,
                    "response_time_ms": response_time_ms,
                    "user_id": user_id,
                },
                tags=["pixyo", operation, settings.ENVIRONMENT],
            )
        except Exception as e:
            logger.error("LangSmith 전송 실패", error=str(e))

    def log_error(
        self,
        error: BaseException,
        context: str,
        user_id: Optional[str] = None,
        request_id: Optional[str] = None,
        **extra_data
    ):
        """에러 로깅"""
        logger.error(
            "시스템 에러",
            error_type=type(error).__name__,
            error_message=str(error),
            context=context,
            user_id=user_id,
            request_id=request_id,
            traceback="".join(traceback.format_exception(type(error), error, error.__traceback__)),
            **extra_data
        )

    def log_security_event(
        self,
        event_type: str,
        description: str,
        user_id: Optional[str] = None,
        ip_address: Optional[str] = None,
        severity: str = "INFO",
        **extra_data
    ):
        """보안 이벤트 로깅"""
        log_data = {
            "security_event_type": event_type,
            "description": description,
            "user_id": user_id,
            "ip_address": ip_address,
            "severity": severity,
            **extra_data
        }

        if severity in ["CRITICAL", "HIGH"]:
            logger.error("보안 이벤트 발생", **log_data)
        elif severity == "MEDIUM":
            logger.warning("보안 이벤트 발생", **log_data)
        else:
            logger.info("보안 이벤트 발생", **log_data)

    def log_performance_metric(
        self,
        metric_name: str,
        value: Union[int, float],
        unit: str = "ms",
        context: Optional[Dict[str, Any]] = None,
        **extra_data
    ):
        """성능 메트릭 로깅"""
        logger.info(
            "성능 메트릭",
            metric_name=metric_name,
            value=value,
            unit=unit,
            context=context or {},
            **extra_data
        )


# 싱글톤 인스턴스
logging_service = LoggingService()
