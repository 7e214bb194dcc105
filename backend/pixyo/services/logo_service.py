"""
프로필 로고 업로드/삭제
"""

import asyncio
import logging
import time
import uuid
from typing import Any, Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from pixyo.core.config import settings
from pixyo.db.models.profile import Profile
from pixyo.services.blob_storage import LocalBlobStorage
from pixyo.services.svg_logo import prepare_logo

logger = logging.getLogger(__name__)

SVG_CONTENT_TYPE = "image/svg+xml"


def _logo_urls(profile: Profile) -> List[Optional[str]]:
    variants = profile.logo_variants or {}
    return [profile.logo, variants.get("dark"), variants.get("light")]


class LogoService:
    """SVG 로고 처리와 Blob 저장"""

    def __init__(self, session: AsyncSession, storage: LocalBlobStorage):
        self.session = session
        self.storage = storage

    async def _delete_existing(self, profile: Profile) -> None:
        await asyncio.gather(*(self.storage.delete_quietly(url) for url in _logo_urls(profile)))

    async def upload(
        self,
        profile: Profile,
        svg_data: str,
        max_size: Optional[int] = None
    ) -> Dict[str, Any]:
        """
        로고 업로드

        원본, 흰색(dark), 검은색(light) 세 변형을 저장하고 프로필에 반영한다.
        이전 로고 파일은 저장소가 관리하는 URL일 때만 정리한다.
        """
        variants = prepare_logo(svg_data, max_size or settings.MAX_LOGO_SIZE)

        await self._delete_existing(profile)

        base = f"logos/{profile.id}/{int(time.time() * 1000)}-{uuid.uuid4().hex[:6]}"
        original, dark, light = await asyncio.gather(
            self.storage.put(f"{base}-original.svg", variants.original.encode("utf-8"), SVG_CONTENT_TYPE),
            self.storage.put(f"{base}-dark.svg", variants.dark.encode("utf-8"), SVG_CONTENT_TYPE),
            self.storage.put(f"{base}-light.svg", variants.light.encode("utf-8"), SVG_CONTENT_TYPE),
        )

        profile.logo = original.url
        profile.logo_variants = {"dark": dark.url, "light": light.url}
        await self.session.commit()

        logger.info(f"로고 업로드 완료: profile={profile.id}")
        return {
            "logo": original.url,
            "logoVariants": {"dark": dark.url, "light": light.url},
        }

    async def remove(self, profile: Profile) -> None:
        await self._delete_existing(profile)
        profile.logo = ""
        profile.logo_variants = None
        await self.session.commit()
        logger.info(f"로고 삭제 완료: profile={profile.id}")
