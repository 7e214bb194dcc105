"""
Unsplash 사진 검색 프록시

API 키는 서버에만 두고 검색 결과는 그대로 전달한다.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from pixyo.core.config import settings
from pixyo.core.exceptions import ConfigurationError, UpstreamServiceError, ValidationError

logger = logging.getLogger(__name__)

SERVICE_NAME = "Unsplash"
ORIENTATIONS = ("landscape", "portrait", "squarish")


class UnsplashService:
    """Unsplash API 클라이언트"""

    def __init__(
        self,
        access_key: Optional[str] = None,
        api_url: Optional[str] = None,
        timeout_seconds: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.access_key = access_key if access_key is not None else settings.UNSPLASH_ACCESS_KEY
        self.api_url = (api_url or settings.UNSPLASH_API_URL).rstrip("/")
        self.timeout_seconds = timeout_seconds or settings.UNSPLASH_TIMEOUT_SECONDS
        self.transport = transport

    def _require_key(self) -> str:
        if not self.access_key:
            raise ConfigurationError("UNSPLASH_ACCESS_KEY", "Unsplash API key not configured")
        return self.access_key

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout_seconds, transport=self.transport)

    async def search(
        self,
        query: Optional[str],
        page: str = "1",
        per_page: str = "12",
        orientation: str = "squarish"
    ) -> Dict[str, Any]:
        """
        사진 검색

        Returns:
            Unsplash 응답 그대로 ({total, total_pages, results})
        """
        access_key = self._require_key()
        if not query:
            raise ValidationError("Query parameter is required", field="query")

        params = {
            "query": query,
            "page": page,
            "per_page": per_page,
            "orientation": orientation,
        }
        headers = {
            "Authorization": f"Client-ID {access_key}",
            "Accept-Version": "v1",
        }

        try:
            async with self._client() as client:
                response = await client.get(f"{self.api_url}/search/photos", params=params, headers=headers)
        except httpx.TimeoutException as e:
            raise UpstreamServiceError(
                SERVICE_NAME, "Unsplash timeout", upstream_status=504, error_code="UPSTREAM_TIMEOUT"
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"Unsplash 요청 실패: {e}")
            raise UpstreamServiceError(SERVICE_NAME, "Failed to fetch from Unsplash") from e

        if response.status_code >= 400:
            logger.error(f"Unsplash API 오류: status={response.status_code}, body={response.text[:200]}")
            raise UpstreamServiceError(
                SERVICE_NAME, "Failed to fetch from Unsplash", upstream_status=response.status_code
            )

        return response.json()

    def is_download_location(self, download_location: str) -> bool:
        """다운로드 추적 URL은 Unsplash API 호스트만 허용 (키 유출 방지)"""
        return download_location.startswith(f"{self.api_url}/")

    async def track_download(self, download_location: Optional[str]) -> None:
        """
        다운로드 추적 호출 (Unsplash API 가이드라인)

        실패해도 예외를 던지지 않는다.
        """
        access_key = self._require_key()
        if not download_location:
            raise ValidationError("downloadLocation is required", field="downloadLocation")
        if not self.is_download_location(download_location):
            raise ValidationError("Ungültige downloadLocation", field="downloadLocation")

        try:
            async with self._client() as client:
                response = await client.get(
                    download_location, headers={"Authorization": f"Client-ID {access_key}"}
                )
        except httpx.HTTPError as e:
            logger.warning(f"Unsplash 다운로드 추적 실패 (무시): {e}")
            return

        if response.status_code >= 400:
            logger.warning(f"Unsplash 다운로드 추적 실패 (무시): status={response.status_code}")
