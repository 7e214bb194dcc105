"""
프로필 에셋 API 테스트
"""

import pytest

from tests.conftest import make_png, png_data_url

UNSPLASH_URL = "https://images.unsplash.com/photo-1?w=1080"


@pytest.fixture
async def profile_id(client, api_prefix, auth_headers, sample_profile_data):
    response = await client.post(f"{api_prefix}/profiles", json=sample_profile_data, headers=auth_headers())
    return response.json()["profile"]["id"]


async def _create_asset(client, api_prefix, headers, profile_id, **overrides):
    payload = {"profileId": profile_id, "type": "UNSPLASH", "width": 1080, "height": 720, "url": UNSPLASH_URL}
    payload.update(overrides)
    return await client.post(f"{api_prefix}/assets", json=payload, headers=headers)


@pytest.mark.unit
@pytest.mark.api
@pytest.mark.db
class TestAssetAPI:
    """에셋 목록/등록/삭제와 소유권 검사 테스트"""

    async def test_list_requires_profile_id(self, client, api_prefix, auth_headers):
        response = await client.get(f"{api_prefix}/assets", headers=auth_headers())

        assert response.status_code == 400
        assert response.json()["message"] == "profileId is required"

    async def test_create_from_url(self, client, api_prefix, auth_headers, profile_id):
        # When
        response = await _create_asset(
            client, api_prefix, auth_headers(), profile_id, meta={"photographer": "Anna Schmidt"}
        )

        # Then
        assert response.status_code == 201
        asset = response.json()["asset"]
        assert asset["profileId"] == profile_id
        assert asset["url"] == UNSPLASH_URL
        assert asset["meta"] == {"photographer": "Anna Schmidt"}

    async def test_create_from_image_data(self, client, api_prefix, auth_headers, profile_id, blob_storage):
        # When
        response = await _create_asset(
            client, api_prefix, auth_headers(), profile_id,
            type="GENERATED", url=None, imageData=png_data_url(make_png(16, 9)), width=16, height=9,
        )

        # Then
        assert response.status_code == 201
        url = response.json()["asset"]["url"]
        pathname = blob_storage.pathname_from_url(url)
        assert pathname.startswith("assets/")
        assert pathname.endswith(".png")
        assert (blob_storage.root_dir / pathname).exists()
        assert response.json()["asset"]["meta"] == {}

    @pytest.mark.parametrize("overrides", [
        {"url": None},
        {"url": "ftp://example.com/bild.png"},
        {"type": "UPLOAD"},
        {"width": -1},
    ])
    async def test_invalid_asset(self, client, api_prefix, auth_headers, profile_id, overrides):
        response = await _create_asset(client, api_prefix, auth_headers(), profile_id, **overrides)
        assert response.status_code == 400

    async def test_list_filters_by_type(self, client, api_prefix, auth_headers, profile_id):
        # Given
        await _create_asset(client, api_prefix, auth_headers(), profile_id)
        await _create_asset(
            client, api_prefix, auth_headers(), profile_id, type="GENERATED", url="https://cdn.example.com/a.png"
        )

        # When
        all_assets = await client.get(f"{api_prefix}/assets", params={"profileId": profile_id}, headers=auth_headers())
        generated = await client.get(
            f"{api_prefix}/assets", params={"profileId": profile_id, "type": "GENERATED"}, headers=auth_headers()
        )

        # Then
        assert len(all_assets.json()["assets"]) == 2
        assert [asset["type"] for asset in generated.json()["assets"]] == ["GENERATED"]

    async def test_other_users_profile_is_forbidden(self, client, api_prefix, auth_headers, profile_id):
        other = auth_headers("user-2", email="user-2@example.com")

        listed = await client.get(f"{api_prefix}/assets", params={"profileId": profile_id}, headers=other)
        created = await _create_asset(client, api_prefix, other, profile_id)

        assert listed.status_code == 403
        assert created.status_code == 403

    async def test_unknown_profile(self, client, api_prefix, auth_headers):
        response = await client.get(f"{api_prefix}/assets", params={"profileId": "fehlt"}, headers=auth_headers())
        assert response.status_code == 404

    async def test_delete_removes_stored_file(self, client, api_prefix, auth_headers, profile_id, blob_storage):
        # Given
        created = await _create_asset(
            client, api_prefix, auth_headers(), profile_id, type="GENERATED", url=None, imageData=png_data_url()
        )
        asset = created.json()["asset"]
        path = blob_storage.root_dir / blob_storage.pathname_from_url(asset["url"])

        # When
        forbidden = await client.delete(
            f"{api_prefix}/assets/{asset['id']}", headers=auth_headers("user-2", email="user-2@example.com")
        )
        response = await client.delete(f"{api_prefix}/assets/{asset['id']}", headers=auth_headers())

        # Then
        assert forbidden.status_code == 403
        assert response.json() == {"success": True}
        assert not path.exists()
        listed = await client.get(f"{api_prefix}/assets", params={"profileId": profile_id}, headers=auth_headers())
        assert listed.json()["assets"] == []
