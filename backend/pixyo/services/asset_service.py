"""
프로필 에셋 서비스

생성 이미지나 Unsplash 이미지를 프로필에 보관한다.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from pixyo.db.models.design import Asset
from pixyo.repositories.design import AssetRepository
from pixyo.services.blob_storage import LocalBlobStorage
from pixyo.services.design_service import decode_image_payload, unique_blob_suffix

logger = logging.getLogger(__name__)


class AssetService:
    def __init__(self, session: AsyncSession, storage: Optional[LocalBlobStorage] = None):
        self.session = session
        self.storage = storage
        self.repository = AssetRepository(session)

    async def list_assets(self, profile_id: str, asset_type: Optional[str] = None) -> List[Asset]:
        return await self.repository.list_for_profile(profile_id, asset_type)

    async def create_asset(self, profile_id: str, data: Dict[str, Any]) -> Asset:
        """
        에셋 등록

        Args:
            data: camelCase 입력 (type, width, height, meta, imageData?, url?)
        """
        url = data.get("url") or ""
        if data.get("imageData"):
            image = decode_image_payload(data["imageData"])
            pathname = f"assets/{unique_blob_suffix()}.{image.extension}"
            blob = await self.storage.put(pathname, image.data, image.mime_type)
            url = blob.url

        asset = await self.repository.create(
            profile_id=profile_id,
            type=data["type"],
            url=url,
            width=data["width"],
            height=data["height"],
            meta=data.get("meta") or {},
        )
        logger.info(f"에셋 등록: id={asset.id}, profile={profile_id}, type={asset.type}")
        return asset

    async def delete_asset(self, asset: Asset) -> None:
        """레코드 삭제 후 저장소가 관리하는 파일이면 함께 삭제"""
        asset_id, url = asset.id, asset.url
        await self.repository.delete(asset_id)
        if self.storage is not None:
            await self.storage.delete_quietly(url)
        logger.info(f"에셋 삭제: id={asset_id}")
