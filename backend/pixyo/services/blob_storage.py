"""
Blob 저장소

업로드한 이미지(배경, 썸네일, 로고)를 로컬 디렉터리에 저장하고 공개 URL을 돌려준다.
URL에 저장소 마커 문자열이 포함된 경우에만 이 저장소가 관리하는 파일로 본다.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import aiofiles
import aiofiles.os

from pixyo.core.config import settings
from pixyo.core.exceptions import StorageError

logger = logging.getLogger(__name__)


@dataclass
class StoredBlob:
    url: str
    pathname: str
    content_type: str
    size: int


class LocalBlobStorage:
    """로컬 파일 시스템 기반 Blob 저장소"""

    def __init__(
        self,
        root_dir: str,
        public_base_url: str,
        url_marker: str
    ):
        self.root_dir = Path(root_dir).resolve()
        self.public_base_url = public_base_url.rstrip("/")
        self.url_marker = url_marker

    def _resolve(self, pathname: str) -> Path:
        """저장소 루트 밖을 가리키는 경로 거부"""
        path = (self.root_dir / pathname.lstrip("/")).resolve()
        if path != self.root_dir and self.root_dir not in path.parents:
            raise StorageError(f"Ungültiger Dateipfad: {pathname}")
        return path

    def is_managed_url(self, url: Optional[str]) -> bool:
        return bool(url) and self.url_marker in url

    def pathname_from_url(self, url: str) -> Optional[str]:
        if not self.is_managed_url(url):
            return None
        return url.split(self.url_marker, 1)[1].split("?", 1)[0]

    async def put(self, pathname: str, data: bytes, content_type: str) -> StoredBlob:
        path = self._resolve(pathname)
        try:
            await aiofiles.os.makedirs(path.parent, exist_ok=True)
            async with aiofiles.open(path, "wb") as f:
                await f.write(data)
        except OSError as e:
            logger.error(f"Blob 저장 실패: {pathname} - {e}")
            raise StorageError() from e

        logger.info(f"Blob 저장: {pathname} ({len(data)} bytes, {content_type})")
        return StoredBlob(
            url=f"{self.public_base_url}/{pathname}",
            pathname=pathname,
            content_type=content_type,
            size=len(data),
        )

    async def delete(self, url: str) -> bool:
        """관리 대상 URL의 파일 삭제. 관리 대상이 아니거나 파일이 없으면 False"""
        pathname = self.pathname_from_url(url)
        if pathname is None:
            return False

        path = self._resolve(pathname)
        try:
            await aiofiles.os.remove(path)
        except FileNotFoundError:
            return False
        except OSError as e:
            raise StorageError(f"Löschen fehlgeschlagen: {pathname}") from e
        return True

    async def delete_quietly(self, url: Optional[str]) -> None:
        """이전 Blob 정리. 실패해도 주 작업에는 영향을 주지 않는다"""
        if not self.is_managed_url(url):
            return
        try:
            await self.delete(url)
        except StorageError as e:
            logger.warning(f"이전 Blob 삭제 실패 (무시): {url} - {e.message}")


_blob_storage: Optional[LocalBlobStorage] = None


def get_blob_storage() -> LocalBlobStorage:
    """설정 기반 저장소 (최초 호출 시 생성)"""
    global _blob_storage
    if _blob_storage is None:
        _blob_storage = LocalBlobStorage(
            root_dir=settings.BLOB_STORAGE_DIR,
            public_base_url=settings.BLOB_PUBLIC_BASE_URL,
            url_marker=settings.BLOB_URL_MARKER,
        )
    return _blob_storage
