from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from pixyo.db.models.waitlist import WaitlistEntry
from pixyo.repositories.base import BaseRepository


class WaitlistRepository(BaseRepository[WaitlistEntry]):
    """대기자 명단 Repository"""

    def __init__(self, session: AsyncSession):
        super().__init__(WaitlistEntry, session)

    async def get_by_email(self, email: str) -> Optional[WaitlistEntry]:
        result = await self.session.execute(
            select(WaitlistEntry).where(WaitlistEntry.email == email)
        )
        return result.scalar_one_or_none()

    async def add_if_absent(self, email: str, source: str) -> bool:
        """이메일 기준 upsert (기존 항목은 변경하지 않음). 새로 추가되면 True"""
        if await self.get_by_email(email):
            return False

        try:
            await self.create(email=email, source=source)
        except IntegrityError:
            # 동시 요청이 먼저 등록한 경우
            await self.session.rollback()
            return False
        return True
