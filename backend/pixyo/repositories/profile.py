from typing import List, Optional, Tuple

from sqlalchemy import delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from pixyo.db.models.design import Asset, Design
from pixyo.db.models.profile import Profile
from pixyo.repositories.base import BaseRepository


class ProfileRepository(BaseRepository[Profile]):
    """브랜드 프로필 Repository"""

    def __init__(self, session: AsyncSession):
        super().__init__(Profile, session)

    async def get_by_slug(self, slug: str) -> Optional[Profile]:
        result = await self.session.execute(
            select(Profile).where(Profile.slug == slug)
        )
        return result.scalar_one_or_none()

    async def slug_exists(self, slug: str) -> bool:
        return await self.get_by_slug(slug) is not None

    async def list_accessible(self, user_id: str, seed_user_id: str) -> List[Profile]:
        """사용자 본인 및 시드 소유 프로필 목록 (최근 수정 순)"""
        result = await self.session.execute(
            select(Profile)
            .where(or_(Profile.user_id == user_id, Profile.user_id == seed_user_id))
            .order_by(Profile.updated_at.desc())
        )
        return list(result.scalars().all())

    async def list_with_counts(self) -> List[Tuple[Profile, int, int]]:
        """전체 프로필과 에셋/디자인 개수 (관리자용)"""
        asset_counts = (
            select(Asset.profile_id, func.count(Asset.id).label("asset_count"))
            .group_by(Asset.profile_id)
            .subquery()
        )
        design_counts = (
            select(Design.profile_id, func.count(Design.id).label("design_count"))
            .group_by(Design.profile_id)
            .subquery()
        )
        result = await self.session.execute(
            select(
                Profile,
                func.coalesce(asset_counts.c.asset_count, 0),
                func.coalesce(design_counts.c.design_count, 0),
            )
            .outerjoin(asset_counts, asset_counts.c.profile_id == Profile.id)
            .outerjoin(design_counts, design_counts.c.profile_id == Profile.id)
            .order_by(Profile.updated_at.desc())
        )
        return [(row[0], int(row[1]), int(row[2])) for row in result.all()]

    async def count_children(self, profile_id: str) -> Tuple[int, int]:
        """(에셋 수, 디자인 수)"""
        assets = await self.session.execute(
            select(func.count(Asset.id)).where(Asset.profile_id == profile_id)
        )
        designs = await self.session.execute(
            select(func.count(Design.id)).where(Design.profile_id == profile_id)
        )
        return assets.scalar_one(), designs.scalar_one()

    async def delete(self, id: str) -> bool:
        """프로필과 소속 디자인/에셋 삭제"""
        profile = await self.get(id)
        if not profile:
            return False

        # DB 레벨 cascade가 꺼져 있는 드라이버(SQLite)에서도 동일하게 동작하도록 명시 삭제
        await self.session.execute(delete(Design).where(Design.profile_id == id))
        await self.session.execute(delete(Asset).where(Asset.profile_id == id))
        await self.session.delete(profile)
        await self.session.commit()
        return True
