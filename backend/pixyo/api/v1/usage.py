"""
사용량 조회 API
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from pixyo.api.deps import get_current_admin_user, get_current_user, get_usage_ledger
from pixyo.core.security import CurrentUser
from pixyo.db.session import get_db
from pixyo.repositories.usage import UsageLogRepository
from pixyo.services.usage_ledger import UsageLedger, aggregate_usage_by_user, resolve_period

router = APIRouter()


@router.get("/me")
async def get_my_usage(
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    ledger: UsageLedger = Depends(get_usage_ledger)
) -> Dict[str, Any]:
    """본인 사용량 (최근 90일, 일별, 최신 순)"""
    return await ledger.user_summary(db, current_user.id)


@router.get("")
async def get_usage_overview(
    from_: Optional[str] = Query(None, alias="from"),
    to: Optional[str] = Query(None),
    user_id: Optional[str] = Query(None, alias="userId"),
    admin: CurrentUser = Depends(get_current_admin_user),
    db: AsyncSession = Depends(get_db)
) -> Dict[str, Any]:
    """사용자/작업별 비용 집계 (관리자 전용, 기본 기간은 이번 달)"""
    start, end = resolve_period(from_, to)
    entries = await UsageLogRepository(db).list_in_window(start, end, user_id=user_id)
    return {
        "period": {"from": start.isoformat(), "to": end.isoformat()},
        **aggregate_usage_by_user(entries),
    }
