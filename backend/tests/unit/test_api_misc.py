"""
관리자, 대기자 명단, Unsplash 프록시, 헬스 체크 API 테스트
"""

import httpx
import pytest
from sqlalchemy import func, select

from pixyo.api.deps import get_unsplash_service
from pixyo.db.models.waitlist import WaitlistEntry
from pixyo.services.unsplash_service import UnsplashService
from pixyo.utils.background import wait_for_background_tasks

TEST_SVG = '<svg xmlns="http://www.w3.org/2000/svg"><circle fill="red" r="4"/></svg>'


@pytest.mark.unit
@pytest.mark.api
@pytest.mark.db
class TestAdminProfilesAPI:
    """관리자 프로필 관리 테스트"""

    async def test_requires_admin_role(self, client, api_prefix, auth_headers):
        response = await client.get(f"{api_prefix}/admin/profiles", headers=auth_headers(metadata={"role": "Admin"}))

        assert response.status_code == 403
        assert response.json()["message"] == "Nur für Admins"

    async def test_create_for_user_and_list_with_counts(self, client, api_prefix, admin_headers, sample_profile_data):
        # When
        created = await client.post(
            f"{api_prefix}/admin/profiles",
            json={"userId": "kunde-9", **sample_profile_data},
            headers=admin_headers,
        )
        listed = await client.get(f"{api_prefix}/admin/profiles", headers=admin_headers)

        # Then
        assert created.status_code == 201
        assert created.json()["profile"]["userId"] == "kunde-9"

        profiles = listed.json()["profiles"]
        assert len(profiles) == 1
        assert profiles[0]["_count"] == {"assets": 0, "designs": 0}

    async def test_admin_manages_any_profile(self, client, api_prefix, auth_headers, admin_headers, sample_profile_data):
        # Given
        created = await client.post(f"{api_prefix}/profiles", json=sample_profile_data, headers=auth_headers())
        url = f"{api_prefix}/admin/profiles/{created.json()['profile']['id']}"

        # When
        detail = await client.get(url, headers=admin_headers)
        patched = await client.patch(url, json={"userId": "user-3"}, headers=admin_headers)
        logo = await client.post(f"{url}/logo", json={"svgData": TEST_SVG}, headers=admin_headers)
        deleted = await client.delete(url, headers=admin_headers)

        # Then
        assert detail.json()["profile"]["designs"] == []
        assert patched.json()["profile"]["userId"] == "user-3"
        assert logo.json()["logo"].endswith("-original.svg")
        assert deleted.json() == {"success": True}

    async def test_missing_profile(self, client, api_prefix, admin_headers):
        response = await client.get(f"{api_prefix}/admin/profiles/nope", headers=admin_headers)
        assert response.status_code == 404


@pytest.mark.unit
@pytest.mark.api
@pytest.mark.db
class TestAdminGenerationsAPI:
    """생성 통계 테스트"""

    async def test_generation_stats(self, client, api_prefix, auth_headers, admin_headers):
        # Given
        headers = auth_headers()
        for source in ("ai-improved", "user-direct"):
            response = await client.post(
                f"{api_prefix}/generate-image",
                json={"prompt": "Leuchtturm", "promptSource": source},
                headers=headers,
            )
            log_id = response.json()["generationLogId"]
        await wait_for_background_tasks(timeout=5)
        await client.post(f"{api_prefix}/track-download", json={"generationLogId": log_id}, headers=headers)

        # When
        stats = await client.get(f"{api_prefix}/admin/generations", headers=admin_headers)

        # Then
        summary = stats.json()["summary"]
        assert summary["totalGenerations"] == 2
        assert summary["totalDownloads"] == 1
        assert summary["downloadRate"] == 50.0
        assert summary["byPromptSource"]["user-direct"]["downloads"] == 1
        assert summary["byTool"]["social-graphics"]["generations"] == 2
        assert len(stats.json()["logs"]) == 2


@pytest.mark.unit
@pytest.mark.api
@pytest.mark.db
class TestWaitlistAPI:
    """대기자 명단 테스트 (인증 불필요)"""

    async def test_join_is_idempotent(self, client, api_prefix, db_session):
        # When
        first = await client.post(f"{api_prefix}/waitlist", json={"email": " anna@example.com "})
        second = await client.post(f"{api_prefix}/waitlist", json={"email": "anna@example.com", "source": "blog"})

        # Then
        assert first.json() == {"success": True}
        assert second.json() == {"success": True}

        count = await db_session.scalar(select(func.count()).select_from(WaitlistEntry))
        entry = await db_session.scalar(select(WaitlistEntry))
        assert count == 1
        assert entry.source == "landing"

    async def test_invalid_email(self, client, api_prefix):
        response = await client.post(f"{api_prefix}/waitlist", json={"email": "keine-mail"})

        assert response.status_code == 400
        assert "gültige E-Mail-Adresse" in response.json()["message"]


@pytest.mark.unit
@pytest.mark.api
class TestUnsplashAPI:
    """Unsplash 프록시 테스트"""

    async def test_search_passes_results_through(self, client, api_prefix, auth_headers, unsplash_stub):
        # Given
        unsplash_stub.responder = lambda request: httpx.Response(
            200, json={"total": 1, "total_pages": 1, "results": [{"id": "abc"}]}
        )

        # When
        response = await client.get(
            f"{api_prefix}/unsplash/search", params={"query": "berge"}, headers=auth_headers()
        )

        # Then
        assert response.status_code == 200
        assert response.json()["results"] == [{"id": "abc"}]
        request = unsplash_stub.requests[0]
        assert request.url.path == "/search/photos"
        assert request.url.params["orientation"] == "squarish"
        assert request.headers["Authorization"] == "Client-ID test-access-key"

    async def test_search_requires_query(self, client, api_prefix, auth_headers):
        response = await client.get(f"{api_prefix}/unsplash/search", headers=auth_headers())

        assert response.status_code == 400
        assert response.json()["message"] == "Query parameter is required"

    async def test_upstream_status_is_passed_through(self, client, api_prefix, auth_headers, unsplash_stub):
        unsplash_stub.responder = lambda request: httpx.Response(429, text="Rate Limit Exceeded")

        response = await client.get(
            f"{api_prefix}/unsplash/search", params={"query": "berge"}, headers=auth_headers()
        )

        assert response.status_code == 429
        assert response.json()["message"] == "Failed to fetch from Unsplash"

    async def test_missing_key(self, app, client, api_prefix, auth_headers):
        app.dependency_overrides[get_unsplash_service] = lambda: UnsplashService(access_key="")

        response = await client.get(
            f"{api_prefix}/unsplash/search", params={"query": "berge"}, headers=auth_headers()
        )

        assert response.status_code == 503
        assert response.json()["code"] == "CONFIGURATION_ERROR"

    async def test_requires_authentication(self, client, api_prefix):
        response = await client.get(f"{api_prefix}/unsplash/search", params={"query": "berge"})
        assert response.status_code == 401

    async def test_track_download(self, client, api_prefix, auth_headers, unsplash_stub):
        response = await client.post(
            f"{api_prefix}/unsplash/download",
            json={"downloadLocation": "https://unsplash.test/photos/abc/download"},
            headers=auth_headers(),
        )

        assert response.json() == {"success": True}
        assert unsplash_stub.requests[0].url.path == "/photos/abc/download"

    async def test_track_download_ignores_upstream_failure(self, client, api_prefix, auth_headers, unsplash_stub):
        unsplash_stub.responder = lambda request: httpx.Response(500)

        response = await client.post(
            f"{api_prefix}/unsplash/download",
            json={"downloadLocation": "https://unsplash.test/photos/abc/download"},
            headers=auth_headers(),
        )

        assert response.json() == {"success": True}

    @pytest.mark.parametrize("location", [None, "https://evil.example/steal"])
    async def test_track_download_rejects_bad_location(self, client, api_prefix, auth_headers, unsplash_stub, location):
        response = await client.post(
            f"{api_prefix}/unsplash/download",
            json={"downloadLocation": location},
            headers=auth_headers(),
        )

        assert response.status_code == 400
        assert unsplash_stub.requests == []


@pytest.mark.unit
@pytest.mark.api
@pytest.mark.db
class TestHealthAPI:
    async def test_health(self, client, api_prefix):
        response = await client.get(f"{api_prefix}/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["services"]["database"] == "healthy"
        assert body["uptime"] >= 0
