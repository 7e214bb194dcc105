from datetime import datetime
from typing import List, Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from pixyo.db.base import utcnow
from pixyo.db.models.usage import GenerationLog, UsageLog
from pixyo.repositories.base import BaseRepository


class UsageLogRepository(BaseRepository[UsageLog]):
    """사용량 원장 Repository (추가/조회 전용)"""

    def __init__(self, session: AsyncSession):
        super().__init__(UsageLog, session)

    async def list_for_user_since(self, user_id: str, since: datetime) -> List[UsageLog]:
        result = await self.session.execute(
            select(UsageLog)
            .where(UsageLog.user_id == user_id, UsageLog.created_at >= since)
            .order_by(UsageLog.created_at.desc())
        )
        return list(result.scalars().all())

    async def list_in_window(
        self,
        start: datetime,
        end: datetime,
        user_id: Optional[str] = None
    ) -> List[UsageLog]:
        """[start, end) 구간의 원장 항목 (최신 순)"""
        query = select(UsageLog).where(
            UsageLog.created_at >= start, UsageLog.created_at < end
        )
        if user_id:
            query = query.where(UsageLog.user_id == user_id)

        result = await self.session.execute(query.order_by(UsageLog.created_at.desc()))
        return list(result.scalars().all())


class GenerationLogRepository(BaseRepository[GenerationLog]):
    """생성 로그 Repository"""

    def __init__(self, session: AsyncSession):
        super().__init__(GenerationLog, session)

    async def mark_downloaded(self, generation_log_id: str, user_id: str) -> int:
        """다운로드 표시 (이미 표시된 행은 건드리지 않음). 변경된 행 수 반환"""
        result = await self.session.execute(
            update(GenerationLog)
            .where(
                GenerationLog.id == generation_log_id,
                GenerationLog.user_id == user_id,
                GenerationLog.downloaded.is_(False),
            )
            .values(downloaded=True, downloaded_at=utcnow())
        )
        await self.session.commit()
        return result.rowcount or 0

    async def list_in_window(
        self,
        start: datetime,
        end: datetime,
        tool: Optional[str] = None
    ) -> List[GenerationLog]:
        query = select(GenerationLog).where(
            GenerationLog.created_at >= start, GenerationLog.created_at < end
        )
        if tool:
            query = query.where(GenerationLog.tool == tool)

        result = await self.session.execute(query.order_by(GenerationLog.created_at.desc()))
        return list(result.scalars().all())
