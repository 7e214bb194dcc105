"""
사용자 정의 예외 클래스들
"""

from typing import Any, Dict, List, Optional, Union


ErrorDetails = Union[Dict[str, Any], List[Any]]


class PixyoException(Exception):
    """Pixyo 기본 예외 클래스"""

    def __init__(
        self,
        message: str,
        error_code: str = "INTERNAL_ERROR",
        status_code: int = 500,
        details: Optional[ErrorDetails] = None,
    ):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)


class ValidationError(PixyoException):
    """입력 검증 실패"""

    def __init__(self, message: str, field: Optional[str] = None, **kwargs):
        details = kwargs.pop("details", None)
        if details is None and field:
            details = [{"field": field, "message": message}]
        super().__init__(
            message=message,
            error_code="VALIDATION_ERROR",
            status_code=400,
            details=details,
            **kwargs
        )


class AuthenticationError(PixyoException):
    """인증 실패"""

    def __init__(self, message: str = "Nicht angemeldet", **kwargs):
        super().__init__(
            message=message,
            error_code="UNAUTHORIZED",
            status_code=401,
            **kwargs
        )


class AuthorizationError(PixyoException):
    """권한 부족 (역할, 소유권, 도구 권한)"""

    def __init__(self, message: str = "Keine Berechtigung", **kwargs):
        super().__init__(
            message=message,
            error_code="FORBIDDEN",
            status_code=403,
            **kwargs
        )


class ResourceNotFoundError(PixyoException):
    """리소스를 찾을 수 없음"""

    def __init__(self, resource: str, resource_id: Optional[str] = None, **kwargs):
        super().__init__(
            message=f"{resource} not found",
            error_code="NOT_FOUND",
            status_code=404,
            details={"resource": resource, "resourceId": resource_id} if resource_id else None,
            **kwargs
        )


class ConfigurationError(PixyoException):
    """외부 서비스 설정 누락"""

    def __init__(self, setting_name: str, message: Optional[str] = None, **kwargs):
        super().__init__(
            message=message or f"{setting_name} ist nicht konfiguriert",
            error_code="CONFIGURATION_ERROR",
            status_code=503,
            **kwargs
        )


class UpstreamServiceError(PixyoException):
    """외부 API 호출 실패 (AI 제공자, Unsplash)"""

    def __init__(
        self,
        service_name: str,
        message: Optional[str] = None,
        upstream_status: Optional[int] = None,
        error_code: str = "UPSTREAM_ERROR",
        **kwargs
    ):
        # 의미 있는 상위 상태 코드만 전달하고 나머지는 500
        if upstream_status is not None and 400 <= upstream_status <= 599:
            status_code = upstream_status
        else:
            status_code = 500
        self.service_name = service_name
        self.upstream_status = upstream_status
        super().__init__(
            message=message or f"{service_name} request failed",
            error_code=error_code,
            status_code=status_code,
            details={"service": service_name},
            **kwargs
        )


class StorageError(PixyoException):
    """Blob 저장소 오류"""

    def __init__(self, message: str = "Speichern der Datei fehlgeschlagen", **kwargs):
        super().__init__(
            message=message,
            error_code="STORAGE_ERROR",
            status_code=500,
            **kwargs
        )


class LogoError(PixyoException):
    """SVG 로고 처리 오류"""

    def __init__(self, message: str, status_code: int = 400, **kwargs):
        super().__init__(
            message=message,
            error_code="INVALID_LOGO",
            status_code=status_code,
            **kwargs
        )
