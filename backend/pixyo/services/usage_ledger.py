"""
사용량 원장 서비스

기록 쪽은 응답 경로를 막지 않도록 분리된 작업으로 실행하고 실패는 로그로만 남긴다.
조회 쪽은 원장 항목을 일/사용자/작업 단위로 집계한다.
"""

import logging
from collections import OrderedDict
from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, Iterable, List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from pixyo.core.config import settings
from pixyo.core.costs import get_operation_cost, get_operation_model
from pixyo.core.exceptions import ValidationError
from pixyo.core.security import CurrentUser
from pixyo.db.base import isoformat
from pixyo.db.models.usage import GenerationLog, UsageLog
from pixyo.repositories.usage import GenerationLogRepository, UsageLogRepository
from pixyo.utils.background import fire_and_forget

logger = logging.getLogger(__name__)

RECENT_USAGE_LIMIT = 50
RECENT_GENERATIONS_LIMIT = 100


def _round_eur(value: float) -> float:
    return round(value, 3)


def _as_utc(value: datetime) -> datetime:
    # SQLite는 tz 정보 없이 돌려준다
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _download_rate(downloads: int, generations: int) -> float:
    """백분율, 소수점 한 자리"""
    if generations <= 0:
        return 0
    return round(downloads / generations * 1000) / 10


# ===== 집계 (순수 함수) =====

def aggregate_daily_usage(entries: Iterable[UsageLog]) -> Dict[str, Any]:
    """
    UTC 날짜별 비용/호출 수 집계

    항목이 없는 날은 출력하지 않으며 날짜는 최신 순으로 정렬한다.
    """
    daily: Dict[date, Dict[str, Any]] = {}
    total_cost = 0.0
    total_calls = 0

    for entry in entries:
        day = _as_utc(entry.created_at).date()
        bucket = daily.setdefault(day, {"costEur": 0.0, "calls": 0})
        bucket["costEur"] += entry.cost_eur
        bucket["calls"] += 1
        total_cost += entry.cost_eur
        total_calls += 1

    days = [
        {"date": day.isoformat(), "costEur": _round_eur(bucket["costEur"]), "calls": bucket["calls"]}
        for day, bucket in sorted(daily.items(), key=lambda item: item[0], reverse=True)
    ]
    return {
        "totalCostEur": _round_eur(total_cost),
        "totalCalls": total_calls,
        "days": days,
    }


def aggregate_usage_by_user(
    entries: List[UsageLog],
    recent_limit: int = RECENT_USAGE_LIMIT
) -> Dict[str, Any]:
    """사용자 및 작업별 비용 집계 (관리자용). entries는 최신 순"""
    users: "OrderedDict[str, Dict[str, Any]]" = OrderedDict()

    for entry in entries:
        summary = users.get(entry.user_id)
        if summary is None:
            summary = {
                "userEmail": entry.user_email,
                "totalCostEur": 0.0,
                "totalCalls": 0,
                "operations": OrderedDict(),
            }
            users[entry.user_id] = summary
        summary["totalCostEur"] += entry.cost_eur
        summary["totalCalls"] += 1

        operation = summary["operations"].setdefault(entry.operation, {"count": 0, "costEur": 0.0})
        operation["count"] += 1
        operation["costEur"] += entry.cost_eur

    grand_total = sum(summary["totalCostEur"] for summary in users.values())
    grand_calls = sum(summary["totalCalls"] for summary in users.values())

    return {
        "grandTotalEur": _round_eur(grand_total),
        "grandTotalCalls": grand_calls,
        "users": [
            {
                "userId": user_id,
                "userEmail": summary["userEmail"],
                "totalCostEur": _round_eur(summary["totalCostEur"]),
                "totalCalls": summary["totalCalls"],
                "operations": [
                    {"operation": name, "count": op["count"], "costEur": _round_eur(op["costEur"])}
                    for name, op in summary["operations"].items()
                ],
            }
            for user_id, summary in users.items()
        ],
        "recentLogs": [
            {
                "id": entry.id,
                "userEmail": entry.user_email,
                "operation": entry.operation,
                "costEur": entry.cost_eur,
                "model": entry.model,
                "createdAt": isoformat(entry.created_at),
            }
            for entry in entries[:recent_limit]
        ],
    }


def _group_generations(logs: Iterable[GenerationLog], key: str) -> Dict[str, Dict[str, Any]]:
    groups: Dict[str, Dict[str, Any]] = {}
    for log in logs:
        group = groups.setdefault(getattr(log, key), {"generations": 0, "downloads": 0, "rate": 0})
        group["generations"] += 1
        if log.downloaded:
            group["downloads"] += 1
    for group in groups.values():
        group["rate"] = _download_rate(group["downloads"], group["generations"])
    return groups


def summarize_generations(
    logs: List[GenerationLog],
    recent_limit: int = RECENT_GENERATIONS_LIMIT
) -> Dict[str, Any]:
    """생성/다운로드 수와 다운로드 비율 (도구별, 프롬프트 출처별)"""
    total = len(logs)
    downloads = sum(1 for log in logs if log.downloaded)
    return {
        "summary": {
            "totalGenerations": total,
            "totalDownloads": downloads,
            "downloadRate": _download_rate(downloads, total),
            "byTool": _group_generations(logs, "tool"),
            "byPromptSource": _group_generations(logs, "prompt_source"),
        },
        "logs": [log.to_dict() for log in logs[:recent_limit]],
    }


# ===== 조회 기간 =====

def current_month_window(now: Optional[datetime] = None) -> Tuple[datetime, datetime]:
    """이번 달 1일 00:00 ~ 다음 달 1일 00:00 (UTC)"""
    now = now or datetime.now(timezone.utc)
    start = datetime(now.year, now.month, 1, tzinfo=timezone.utc)
    if now.month == 12:
        end = datetime(now.year + 1, 1, 1, tzinfo=timezone.utc)
    else:
        end = datetime(now.year, now.month + 1, 1, tzinfo=timezone.utc)
    return start, end


def _parse_datetime(value: str, field: str) -> datetime:
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError as e:
        raise ValidationError(f"Ungültiges Datum: {value}", field=field) from e
    return _as_utc(parsed)


def resolve_period(
    from_param: Optional[str],
    to_param: Optional[str],
    now: Optional[datetime] = None
) -> Tuple[datetime, datetime]:
    """쿼리 파라미터의 기간 (없는 값은 이번 달 기준)"""
    default_start, default_end = current_month_window(now)
    start = _parse_datetime(from_param, "from") if from_param else default_start
    end = _parse_datetime(to_param, "to") if to_param else default_end
    return start, end


# ===== 기록 =====

class UsageLedger:
    """사용량 원장 기록/조회"""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def _write_usage(self, values: Dict[str, Any]) -> None:
        try:
            async with self.session_factory() as session:
                await UsageLogRepository(session).create(**values)
        except SQLAlchemyError as e:
            logger.error(f"사용량 기록 실패: operation={values.get('operation')} - {e}")

    def record_usage(
        self,
        user: CurrentUser,
        operation: str,
        meta: Optional[Dict[str, Any]] = None
    ):
        """
        과금 이벤트 기록 (응답을 기다리게 하지 않음)

        Returns:
            분리 실행된 asyncio.Task
        """
        values = {
            "user_id": user.id,
            "user_email": user.email_or_unknown,
            "operation": operation,
            "cost_eur": get_operation_cost(operation),
            "model": get_operation_model(operation),
            "meta": meta,
        }
        return fire_and_forget(self._write_usage(values), name=f"usage:{operation}")

    async def record_generation(
        self,
        user_id: str,
        tool: str,
        prompt: str,
        prompt_source: str,
        meta: Optional[Dict[str, Any]] = None
    ) -> Optional[str]:
        """생성 로그 기록. 실패하면 None (생성 응답은 그대로 반환)"""
        try:
            async with self.session_factory() as session:
                log = await GenerationLogRepository(session).create(
                    user_id=user_id,
                    tool=tool,
                    prompt=prompt,
                    prompt_source=prompt_source,
                    meta=meta,
                )
                return log.id
        except SQLAlchemyError as e:
            logger.warning(f"생성 로그 기록 실패: tool={tool} - {e}")
            return None

    async def user_summary(
        self,
        session: AsyncSession,
        user_id: str,
        lookback_days: Optional[int] = None
    ) -> Dict[str, Any]:
        """최근 N일(기본 90일) 본인 사용량"""
        days = lookback_days or settings.USAGE_LOOKBACK_DAYS
        since = datetime.now(timezone.utc) - timedelta(days=days)
        entries = await UsageLogRepository(session).list_for_user_since(user_id, since)
        return aggregate_daily_usage(entries)
