"""
AI 생성, 다운로드 추적, 사용량 API 테스트
"""

import base64
from datetime import datetime, timezone

import pytest
from sqlalchemy.exc import SQLAlchemyError

from pixyo.db.session import get_session_factory
from pixyo.repositories.usage import UsageLogRepository
from pixyo.services.ai.claude_service import MOCK_SOCIAL_TEXT
from pixyo.utils.background import wait_for_background_tasks
from tests.conftest import make_png

EPOCH = datetime(2000, 1, 1, tzinfo=timezone.utc)


class UnavailableSession:
    """연결할 수 없는 데이터베이스 세션"""

    async def __aenter__(self):
        raise SQLAlchemyError("Datenbank nicht erreichbar")

    async def __aexit__(self, *exc_info):
        return False


async def _generate(client, api_prefix, headers, **overrides):
    payload = {"prompt": "Bergsee im Morgennebel", "mode": "photo", "aspectRatio": "1:1"}
    payload.update(overrides)
    response = await client.post(f"{api_prefix}/generate-image", json=payload, headers=headers)
    await wait_for_background_tasks(timeout=5)
    return response


@pytest.mark.unit
@pytest.mark.api
@pytest.mark.db
class TestGenerateImageAPI:
    """이미지 생성 테스트"""

    async def test_generate_image_records_usage(self, client, api_prefix, auth_headers, genai_client, db_session):
        # When
        response = await _generate(client, api_prefix, auth_headers())

        # Then
        assert response.status_code == 200
        body = response.json()
        assert len(body["images"]) == 1
        assert body["images"][0]["url"].startswith("data:image/png;base64,")
        assert body["mimeType"] == "image/png"
        assert body["generationLogId"]
        assert len(genai_client.calls) == 1

        entries = await UsageLogRepository(db_session).list_for_user_since("user-1", EPOCH)
        assert len(entries) == 1
        assert entries[0].operation == "generate-image"
        assert entries[0].cost_eur == 0.03
        assert entries[0].user_email == "user-1@example.com"

    async def test_tool_access_required(self, client, api_prefix, auth_headers, genai_client):
        response = await _generate(client, api_prefix, auth_headers(metadata={"allowedTools": []}))

        assert response.status_code == 403
        assert response.json()["message"] == "Kein Zugriff auf dieses Tool"
        assert genai_client.calls == []

    async def test_allowed_tool_passes(self, client, api_prefix, auth_headers):
        headers = auth_headers(metadata={"allowedTools": ["social-graphics"]})
        response = await _generate(client, api_prefix, headers)
        assert response.status_code == 200

    async def test_invalid_aspect_ratio(self, client, api_prefix, auth_headers, genai_client):
        response = await _generate(client, api_prefix, auth_headers(), aspectRatio="3:2")

        assert response.status_code == 400
        assert genai_client.calls == []

    async def test_generate_with_product_image(self, client, api_prefix, auth_headers, genai_client):
        product = {"data": base64.b64encode(make_png()).decode(), "mimeType": "image/png"}

        response = await _generate(client, api_prefix, auth_headers(), productImage=product)

        assert response.status_code == 200
        assert len(genai_client.calls[0]["contents"]) == 2

    async def test_ledger_failure_does_not_fail_generation(self, app, client, api_prefix, auth_headers, db_session):
        # Given
        app.dependency_overrides[get_session_factory] = lambda: UnavailableSession

        # When
        response = await _generate(client, api_prefix, auth_headers())

        # Then
        assert response.status_code == 200
        body = response.json()
        assert body["generationLogId"] is None
        assert len(body["images"]) == 1
        assert await UsageLogRepository(db_session).list_for_user_since("user-1", EPOCH) == []


@pytest.mark.unit
@pytest.mark.api
@pytest.mark.db
class TestTextGenerationAPI:
    """프롬프트/텍스트 생성 테스트 (mock 모드)"""

    async def test_generate_prompt(self, client, api_prefix, auth_headers):
        response = await client.post(
            f"{api_prefix}/generate-prompt",
            json={"userIdea": "Hafen bei Nacht", "styleId": "cinematic", "mode": "photo"},
            headers=auth_headers(),
        )

        assert response.status_code == 200
        assert "Hafen bei Nacht" in response.json()["prompt"]

    async def test_unknown_style(self, client, api_prefix, auth_headers):
        response = await client.post(
            f"{api_prefix}/generate-prompt",
            json={"userIdea": "Hafen", "styleId": "unbekannt", "mode": "photo"},
            headers=auth_headers(),
        )

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"

    async def test_generate_text_without_usage_entry(self, client, api_prefix, auth_headers, db_session):
        # When
        response = await client.post(
            f"{api_prefix}/generate-text",
            json={"prompt": "Sommerangebot", "customerName": "Canton"},
            headers=auth_headers(),
        )
        await wait_for_background_tasks(timeout=5)

        # Then
        assert response.status_code == 200
        assert response.json() == MOCK_SOCIAL_TEXT
        assert await UsageLogRepository(db_session).list_for_user_since("user-1", EPOCH) == []

    async def test_generate_text_requires_prompt(self, client, api_prefix, auth_headers):
        response = await client.post(f"{api_prefix}/generate-text", json={"prompt": ""}, headers=auth_headers())
        assert response.status_code == 400


@pytest.mark.unit
@pytest.mark.api
@pytest.mark.db
class TestTrackDownloadAPI:
    """다운로드 추적 테스트"""

    async def test_marks_download_once(self, client, api_prefix, auth_headers):
        # Given
        generated = await _generate(client, api_prefix, auth_headers())
        payload = {"generationLogId": generated.json()["generationLogId"]}

        # When
        first = await client.post(f"{api_prefix}/track-download", json=payload, headers=auth_headers())
        second = await client.post(f"{api_prefix}/track-download", json=payload, headers=auth_headers())

        # Then
        assert first.json() == {"success": True, "updated": 1}
        assert second.json() == {"success": True, "updated": 0}

    async def test_other_users_log_untouched(self, client, api_prefix, auth_headers):
        generated = await _generate(client, api_prefix, auth_headers())
        payload = {"generationLogId": generated.json()["generationLogId"]}

        response = await client.post(f"{api_prefix}/track-download", json=payload, headers=auth_headers("user-2"))

        assert response.json()["updated"] == 0

    async def test_requires_log_id(self, client, api_prefix, auth_headers):
        response = await client.post(f"{api_prefix}/track-download", json={}, headers=auth_headers())
        assert response.status_code == 400


@pytest.mark.unit
@pytest.mark.api
@pytest.mark.db
class TestUsageAPI:
    """사용량 조회 테스트"""

    async def test_my_usage(self, client, api_prefix, auth_headers):
        # Given
        await _generate(client, api_prefix, auth_headers())
        await _generate(client, api_prefix, auth_headers())
        await _generate(client, api_prefix, auth_headers("user-2"))

        # When
        response = await client.get(f"{api_prefix}/usage/me", headers=auth_headers())

        # Then
        body = response.json()
        assert body["totalCalls"] == 2
        assert body["totalCostEur"] == 0.06
        assert len(body["days"]) == 1
        assert body["days"][0]["calls"] == 2

    async def test_empty_usage(self, client, api_prefix, auth_headers):
        response = await client.get(f"{api_prefix}/usage/me", headers=auth_headers())
        assert response.json() == {"totalCostEur": 0, "totalCalls": 0, "days": []}

    async def test_overview_requires_admin(self, client, api_prefix, auth_headers):
        response = await client.get(f"{api_prefix}/usage", headers=auth_headers())

        assert response.status_code == 403
        assert response.json()["code"] == "FORBIDDEN"

    async def test_overview_for_admin(self, client, api_prefix, auth_headers, admin_headers):
        # Given
        await _generate(client, api_prefix, auth_headers())
        await _generate(client, api_prefix, auth_headers("user-2", email=None))

        # When
        response = await client.get(f"{api_prefix}/usage", headers=admin_headers)

        # Then
        assert response.status_code == 200
        body = response.json()
        assert body["grandTotalCalls"] == 2
        assert body["grandTotalEur"] == 0.06
        assert {user["userId"] for user in body["users"]} == {"user-1", "user-2"}
        assert len(body["recentLogs"]) == 2
        assert "unknown" in {log["userEmail"] for log in body["recentLogs"]}

    async def test_overview_filters_by_user(self, client, api_prefix, auth_headers, admin_headers):
        await _generate(client, api_prefix, auth_headers())
        await _generate(client, api_prefix, auth_headers("user-2"))

        response = await client.get(f"{api_prefix}/usage", params={"userId": "user-2"}, headers=admin_headers)

        assert [user["userId"] for user in response.json()["users"]] == ["user-2"]

    async def test_overview_rejects_bad_period(self, client, api_prefix, admin_headers):
        response = await client.get(f"{api_prefix}/usage", params={"from": "gestern"}, headers=admin_headers)
        assert response.status_code == 400
