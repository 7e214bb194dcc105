"""
사용량 집계 단위 테스트
"""

from datetime import datetime, timezone

import pytest

from pixyo.core.costs import get_operation_cost, get_operation_model
from pixyo.core.exceptions import ValidationError
from pixyo.db.models.usage import GenerationLog, UsageLog
from pixyo.services.usage_ledger import (
    aggregate_daily_usage,
    aggregate_usage_by_user,
    current_month_window,
    resolve_period,
    summarize_generations,
)


def _usage(cost: float, created_at: datetime, user_id: str = "user-1", operation: str = "generate-image") -> UsageLog:
    return UsageLog(
        id=f"{user_id}-{created_at.isoformat()}-{cost}",
        user_id=user_id,
        user_email=f"{user_id}@example.com",
        operation=operation,
        cost_eur=cost,
        model=get_operation_model(operation),
        created_at=created_at,
    )


def _generation(tool: str, source: str, downloaded: bool) -> GenerationLog:
    return GenerationLog(
        id=f"{tool}-{source}-{downloaded}",
        user_id="user-1",
        tool=tool,
        prompt="Berge im Nebel",
        prompt_source=source,
        downloaded=downloaded,
        created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
    )


@pytest.mark.unit
class TestDailyUsage:
    """일별 집계 테스트"""

    def test_groups_by_utc_day_newest_first(self):
        # Given
        entries = [
            _usage(0.03, datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc)),
            _usage(0.02, datetime(2024, 1, 1, 18, 0, tzinfo=timezone.utc)),
            _usage(0.01, datetime(2024, 1, 2, 8, 0, tzinfo=timezone.utc)),
        ]

        # When
        result = aggregate_daily_usage(entries)

        # Then
        assert result["totalCostEur"] == pytest.approx(0.06)
        assert result["totalCalls"] == 3
        assert result["days"] == [
            {"date": "2024-01-02", "costEur": 0.01, "calls": 1},
            {"date": "2024-01-01", "costEur": 0.05, "calls": 2},
        ]

    def test_naive_timestamps_are_treated_as_utc(self):
        result = aggregate_daily_usage([_usage(0.015, datetime(2024, 3, 5, 23, 30))])
        assert result["days"][0]["date"] == "2024-03-05"

    def test_empty(self):
        assert aggregate_daily_usage([]) == {"totalCostEur": 0, "totalCalls": 0, "days": []}


@pytest.mark.unit
class TestUsageByUser:
    """관리자 집계 테스트"""

    def test_groups_users_and_operations(self):
        # Given (최신 순)
        entries = [
            _usage(0.03, datetime(2024, 1, 3, tzinfo=timezone.utc), "user-1", "generate-image"),
            _usage(0.015, datetime(2024, 1, 2, tzinfo=timezone.utc), "user-2", "generate-text"),
            _usage(0.03, datetime(2024, 1, 1, tzinfo=timezone.utc), "user-1", "generate-image"),
            _usage(0.015, datetime(2024, 1, 1, tzinfo=timezone.utc), "user-1", "generate-prompt"),
        ]

        # When
        result = aggregate_usage_by_user(entries, recent_limit=2)

        # Then
        assert result["grandTotalEur"] == pytest.approx(0.09)
        assert result["grandTotalCalls"] == 4
        first = result["users"][0]
        assert first["userId"] == "user-1"
        assert first["totalCalls"] == 3
        assert first["operations"] == [
            {"operation": "generate-image", "count": 2, "costEur": 0.06},
            {"operation": "generate-prompt", "count": 1, "costEur": 0.015},
        ]
        assert len(result["recentLogs"]) == 2


@pytest.mark.unit
class TestGenerationSummary:
    """생성/다운로드 통계 테스트"""

    def test_download_rates(self):
        # Given
        logs = [
            _generation("social-graphics", "ai-improved", True),
            _generation("social-graphics", "user-direct", False),
            _generation("social-graphics", "user-direct", False),
        ]

        # When
        summary = summarize_generations(logs)["summary"]

        # Then
        assert summary["totalGenerations"] == 3
        assert summary["totalDownloads"] == 1
        assert summary["downloadRate"] == 33.3
        assert summary["byTool"]["social-graphics"]["rate"] == 33.3
        assert summary["byPromptSource"]["ai-improved"] == {"generations": 1, "downloads": 1, "rate": 100.0}
        assert summary["byPromptSource"]["user-direct"]["rate"] == 0

    def test_empty_rate_is_zero(self):
        assert summarize_generations([])["summary"]["downloadRate"] == 0


@pytest.mark.unit
class TestPeriod:
    """조회 기간 테스트"""

    def test_current_month_window_wraps_year(self):
        start, end = current_month_window(datetime(2024, 12, 15, tzinfo=timezone.utc))
        assert start == datetime(2024, 12, 1, tzinfo=timezone.utc)
        assert end == datetime(2025, 1, 1, tzinfo=timezone.utc)

    def test_resolve_period_parses_iso_with_z(self):
        now = datetime(2024, 6, 10, tzinfo=timezone.utc)
        start, end = resolve_period("2024-01-01T00:00:00Z", None, now=now)
        assert start == datetime(2024, 1, 1, tzinfo=timezone.utc)
        assert end == datetime(2024, 7, 1, tzinfo=timezone.utc)

    def test_invalid_date_rejected(self):
        with pytest.raises(ValidationError):
            resolve_period("gestern", None)


@pytest.mark.unit
class TestCosts:
    def test_known_and_unknown_operations(self):
        assert get_operation_cost("generate-image") == 0.03
        assert get_operation_model("generate-text") == "claude-sonnet-4.5"
        assert get_operation_cost("unbekannt") == 0.0
        assert get_operation_model("unbekannt") == "unknown"
