from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from pixyo.db.models.design import Asset, Design
from pixyo.repositories.base import BaseRepository


class DesignRepository(BaseRepository[Design]):
    """캔버스 디자인 Repository"""

    def __init__(self, session: AsyncSession):
        super().__init__(Design, session)

    async def list_for_profile(self, profile_id: str) -> List[Design]:
        """프로필의 디자인 목록 (최근 수정 순)"""
        result = await self.session.execute(
            select(Design)
            .where(Design.profile_id == profile_id)
            .order_by(Design.updated_at.desc())
        )
        return list(result.scalars().all())

    async def get_with_profile(self, design_id: str) -> Optional[Design]:
        """소유 프로필을 함께 로드한 디자인 조회"""
        result = await self.session.execute(
            select(Design)
            .where(Design.id == design_id)
            .options(selectinload(Design.profile))
        )
        return result.scalar_one_or_none()


class AssetRepository(BaseRepository[Asset]):
    """프로필 에셋 Repository"""

    def __init__(self, session: AsyncSession):
        super().__init__(Asset, session)

    async def list_for_profile(self, profile_id: str, asset_type: Optional[str] = None) -> List[Asset]:
        """프로필 에셋 목록 (최근 생성 순, 유형 필터 선택)"""
        query = select(Asset).where(Asset.profile_id == profile_id)
        if asset_type:
            query = query.where(Asset.type == asset_type)
        result = await self.session.execute(query.order_by(Asset.created_at.desc()))
        return list(result.scalars().all())

    async def get_with_profile(self, asset_id: str) -> Optional[Asset]:
        result = await self.session.execute(
            select(Asset)
            .where(Asset.id == asset_id)
            .options(selectinload(Asset.profile))
        )
        return result.scalar_one_or_none()
