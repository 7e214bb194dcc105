"""
프로필 API 테스트
"""

import pytest

from pixyo.brand_design.tokens import default_design_tokens
from pixyo.db.seed import seed_demo_profiles

SIMPLE_SVG = '<svg xmlns="http://www.w3.org/2000/svg"><path fill="#123456"/></svg>'


@pytest.fixture
async def created_profile(client, api_prefix, auth_headers, sample_profile_data):
    response = await client.post(f"{api_prefix}/profiles", json=sample_profile_data, headers=auth_headers())
    assert response.status_code == 201
    return response.json()["profile"]


@pytest.mark.unit
@pytest.mark.api
@pytest.mark.db
class TestProfileAPI:
    """프로필 CRUD와 접근 제어 테스트"""

    async def test_requires_authentication(self, client, api_prefix):
        response = await client.get(f"{api_prefix}/profiles")

        assert response.status_code == 401
        body = response.json()
        assert body["code"] == "UNAUTHORIZED"
        assert body["error"] == "Unauthorized"

    async def test_invalid_token_rejected(self, client, api_prefix):
        response = await client.get(
            f"{api_prefix}/profiles", headers={"Authorization": "Bearer kaputt"}
        )
        assert response.status_code == 401

    async def test_create_profile(self, created_profile):
        assert created_profile["userId"] == "user-1"
        assert created_profile["slug"] == "caf-mueller"
        assert created_profile["fonts"]["headline"]["size"] == 48
        assert created_profile["systemPrompt"] == "Warm coffee house atmosphere"

    async def test_create_requires_fields(self, client, api_prefix, auth_headers):
        response = await client.post(f"{api_prefix}/profiles", json={"name": "Ohne Farben"}, headers=auth_headers())

        assert response.status_code == 400
        body = response.json()
        assert body["code"] == "VALIDATION_ERROR"
        assert any(detail["field"] == "colors" for detail in body["details"])

    async def test_other_users_profile_is_forbidden(self, client, api_prefix, auth_headers, created_profile):
        # When
        response = await client.get(
            f"{api_prefix}/profiles/{created_profile['id']}", headers=auth_headers("user-2")
        )

        # Then
        assert response.status_code == 403
        assert response.json()["code"] == "FORBIDDEN"

    async def test_missing_profile_is_not_found(self, client, api_prefix, auth_headers):
        response = await client.get(f"{api_prefix}/profiles/gibt-es-nicht", headers=auth_headers())

        assert response.status_code == 404
        assert response.json()["code"] == "NOT_FOUND"

    async def test_seed_profiles_are_shared(self, client, api_prefix, auth_headers, db_session):
        # Given
        await seed_demo_profiles(db_session, "system-seed-user")

        # When
        response = await client.get(f"{api_prefix}/profiles", headers=auth_headers("user-7"))

        # Then
        assert response.status_code == 200
        slugs = {profile["slug"] for profile in response.json()["profiles"]}
        assert {"hanako-koi", "elforyn"} <= slugs

        seed_id = next(p["id"] for p in response.json()["profiles"] if p["slug"] == "canton")
        detail = await client.get(f"{api_prefix}/profiles/{seed_id}", headers=auth_headers("user-7"))
        assert detail.status_code == 200
        assert detail.json()["profile"]["assets"] == []

    async def test_list_only_own_profiles(self, client, api_prefix, auth_headers, created_profile):
        response = await client.get(f"{api_prefix}/profiles", headers=auth_headers("user-2"))
        assert response.json()["profiles"] == []

    async def test_patch_and_delete(self, client, api_prefix, auth_headers, created_profile):
        # Given
        url = f"{api_prefix}/profiles/{created_profile['id']}"

        # When
        patched = await client.patch(url, json={"systemPrompt": "Neu", "name": None}, headers=auth_headers())
        deleted = await client.delete(url, headers=auth_headers())
        missing = await client.get(url, headers=auth_headers())

        # Then
        assert patched.status_code == 200
        assert patched.json()["profile"]["systemPrompt"] == "Neu"
        assert patched.json()["profile"]["name"] == "Café Müller"
        assert deleted.json() == {"success": True}
        assert missing.status_code == 404


@pytest.mark.unit
@pytest.mark.api
@pytest.mark.db
class TestProfileLogoAPI:
    """로고 업로드 테스트"""

    async def test_upload_and_remove_logo(self, client, api_prefix, auth_headers, created_profile):
        # Given
        url = f"{api_prefix}/profiles/{created_profile['id']}/logo"

        # When
        uploaded = await client.post(url, json={"svgData": SIMPLE_SVG}, headers=auth_headers())

        # Then
        assert uploaded.status_code == 200
        body = uploaded.json()
        assert body["logo"].startswith("http://testserver/blobs/logos/")
        assert body["logo"].endswith("-original.svg")
        assert body["logoVariants"]["dark"].endswith("-dark.svg")

        removed = await client.delete(url, headers=auth_headers())
        profile = await client.get(f"{api_prefix}/profiles/{created_profile['id']}", headers=auth_headers())
        assert removed.json() == {"success": True}
        assert profile.json()["profile"]["logo"] == ""
        assert profile.json()["profile"]["logoVariants"] is None

    async def test_invalid_logo_rejected(self, client, api_prefix, auth_headers, created_profile):
        response = await client.post(
            f"{api_prefix}/profiles/{created_profile['id']}/logo",
            json={"svgData": "<html></html>"},
            headers=auth_headers(),
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Invalid SVG file format"


@pytest.mark.unit
@pytest.mark.api
@pytest.mark.db
class TestDesignTokensAPI:
    """디자인 토큰 저장/내보내기 테스트"""

    async def test_save_tokens_syncs_profile(self, client, api_prefix, auth_headers, created_profile):
        # Given
        tokens = default_design_tokens().model_dump(by_alias=True, mode="json")

        # When
        response = await client.put(
            f"{api_prefix}/profiles/{created_profile['id']}/design-tokens",
            json=tokens,
            headers=auth_headers(),
        )

        # Then
        assert response.status_code == 200
        profile = response.json()["profile"]
        assert profile["designTokens"]["version"] == 1
        assert profile["colors"]["dark"] == "#7c3aed"

    async def test_unsupported_version_rejected(self, client, api_prefix, auth_headers, created_profile):
        tokens = default_design_tokens().model_dump(by_alias=True, mode="json")
        tokens["version"] = 2

        response = await client.put(
            f"{api_prefix}/profiles/{created_profile['id']}/design-tokens",
            json=tokens,
            headers=auth_headers(),
        )

        assert response.status_code == 400

    @pytest.mark.parametrize("export_format,marker", [
        ("tailwind", "@theme {"),
        ("css", ":root {"),
        ("llm", "# Café Müller"),
    ])
    async def test_export(self, client, api_prefix, auth_headers, created_profile, export_format, marker):
        response = await client.get(
            f"{api_prefix}/profiles/{created_profile['id']}/design-tokens/export",
            params={"format": export_format},
            headers=auth_headers(),
        )

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")
        assert marker in response.text

    async def test_unknown_export_format(self, client, api_prefix, auth_headers, created_profile):
        response = await client.get(
            f"{api_prefix}/profiles/{created_profile['id']}/design-tokens/export",
            params={"format": "scss"},
            headers=auth_headers(),
        )
        assert response.status_code == 400

    async def test_export_without_saved_tokens_uses_profile_colors(
        self, client, api_prefix, auth_headers, sample_profile_data
    ):
        # Given
        data = {**sample_profile_data, "colors": {"dark": "#123456", "light": "#f5f5f5", "accent": "#ff6600"}}
        created = await client.post(f"{api_prefix}/profiles", json=data, headers=auth_headers())
        profile_id = created.json()["profile"]["id"]

        # When
        response = await client.get(
            f"{api_prefix}/profiles/{profile_id}/design-tokens/export",
            params={"format": "css"},
            headers=auth_headers(),
        )

        # Then
        assert response.status_code == 200
        assert "  --color-primary: #123456;" in response.text
        assert "#7c3aed" not in response.text
