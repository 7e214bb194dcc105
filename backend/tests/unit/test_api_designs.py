"""
디자인 API 테스트
"""

import pytest

from tests.conftest import make_png, png_data_url


@pytest.fixture
async def profile_id(client, api_prefix, auth_headers, sample_profile_data):
    response = await client.post(f"{api_prefix}/profiles", json=sample_profile_data, headers=auth_headers())
    return response.json()["profile"]["id"]


@pytest.fixture
async def created_design(client, api_prefix, auth_headers, profile_id, sample_design_data):
    response = await client.post(
        f"{api_prefix}/designs",
        json={"profileId": profile_id, **sample_design_data},
        headers=auth_headers(),
    )
    assert response.status_code == 201
    return response.json()["design"]


@pytest.mark.unit
@pytest.mark.api
@pytest.mark.db
class TestDesignAPI:
    """디자인 CRUD 테스트"""

    async def test_list_requires_profile_id(self, client, api_prefix, auth_headers):
        response = await client.get(f"{api_prefix}/designs", headers=auth_headers())

        assert response.status_code == 400
        assert response.json()["message"] == "profileId is required"

    async def test_create_and_list(self, client, api_prefix, auth_headers, profile_id, created_design):
        # When
        response = await client.get(
            f"{api_prefix}/designs", params={"profileId": profile_id}, headers=auth_headers()
        )

        # Then
        assert created_design["name"] == "Sommer-Aktion"
        assert created_design["overlayOpacity"] == 30
        assert [design["id"] for design in response.json()["designs"]] == [created_design["id"]]

    async def test_create_requires_canvas_state(self, client, api_prefix, auth_headers, profile_id):
        response = await client.post(
            f"{api_prefix}/designs", json={"profileId": profile_id, "name": "Leer"}, headers=auth_headers()
        )
        assert response.status_code == 400

    async def test_background_layer_must_be_first(self, client, api_prefix, auth_headers, profile_id, sample_design_data):
        # Given
        data = dict(sample_design_data)
        data["layers"] = list(reversed(sample_design_data["layers"]))

        # When
        response = await client.post(
            f"{api_prefix}/designs", json={"profileId": profile_id, **data}, headers=auth_headers()
        )

        # Then
        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"

    async def test_create_for_foreign_profile_forbidden(self, client, api_prefix, auth_headers, profile_id, sample_design_data):
        response = await client.post(
            f"{api_prefix}/designs",
            json={"profileId": profile_id, **sample_design_data},
            headers=auth_headers("user-2"),
        )
        assert response.status_code == 403

    async def test_foreign_design_forbidden(self, client, api_prefix, auth_headers, created_design):
        response = await client.get(f"{api_prefix}/designs/{created_design['id']}", headers=auth_headers("user-2"))
        assert response.status_code == 403

    async def test_update(self, client, api_prefix, auth_headers, created_design):
        response = await client.put(
            f"{api_prefix}/designs/{created_design['id']}",
            json={"name": "Herbst-Aktion", "overlayOpacity": 50, "layers": None},
            headers=auth_headers(),
        )

        assert response.status_code == 200
        design = response.json()["design"]
        assert design["name"] == "Herbst-Aktion"
        assert design["overlayOpacity"] == 50
        assert len(design["layers"]) == 2

    async def test_duplicate(self, client, api_prefix, auth_headers, created_design):
        response = await client.post(
            f"{api_prefix}/designs/{created_design['id']}/duplicate", headers=auth_headers()
        )

        assert response.status_code == 201
        duplicate = response.json()["design"]
        assert duplicate["id"] != created_design["id"]
        assert duplicate["name"] == "Sommer-Aktion (Kopie)"
        assert duplicate["layers"] == created_design["layers"]

    async def test_delete(self, client, api_prefix, auth_headers, created_design):
        url = f"{api_prefix}/designs/{created_design['id']}"

        deleted = await client.delete(url, headers=auth_headers())
        missing = await client.get(url, headers=auth_headers())

        assert deleted.json() == {"success": True}
        assert missing.status_code == 404

    async def test_deleting_profile_removes_designs(self, client, api_prefix, auth_headers, profile_id, created_design):
        await client.delete(f"{api_prefix}/profiles/{profile_id}", headers=auth_headers())

        response = await client.get(f"{api_prefix}/designs/{created_design['id']}", headers=auth_headers())

        assert response.status_code == 404


@pytest.mark.unit
@pytest.mark.api
@pytest.mark.db
class TestDesignUploadAPI:
    """썸네일/배경 업로드 테스트"""

    async def test_upload_thumbnail(self, client, api_prefix, auth_headers, created_design, blob_storage):
        # When
        response = await client.post(
            f"{api_prefix}/designs/{created_design['id']}/thumbnail",
            files={"thumbnail": ("thumb.png", make_png(), "image/png")},
            headers=auth_headers(),
        )

        # Then
        assert response.status_code == 200
        body = response.json()
        assert body["thumbnailUrl"].endswith(".jpg")
        assert body["design"]["thumbnailUrl"] == body["thumbnailUrl"]
        assert (blob_storage.root_dir / blob_storage.pathname_from_url(body["thumbnailUrl"])).exists()

    async def test_thumbnail_required(self, client, api_prefix, auth_headers, created_design):
        response = await client.post(
            f"{api_prefix}/designs/{created_design['id']}/thumbnail", headers=auth_headers()
        )

        assert response.status_code == 400
        assert response.json()["message"] == "No thumbnail provided"

    async def test_upload_background(self, client, api_prefix, auth_headers, created_design):
        response = await client.post(
            f"{api_prefix}/designs/{created_design['id']}/background",
            json={"imageData": png_data_url(), "source": "GENERATED"},
            headers=auth_headers(),
        )

        assert response.status_code == 200
        body = response.json()
        assert body["url"].startswith("http://testserver/blobs/backgrounds/")
        assert body["source"] == "GENERATED"

    async def test_background_requires_known_source(self, client, api_prefix, auth_headers, created_design):
        response = await client.post(
            f"{api_prefix}/designs/{created_design['id']}/background",
            json={"imageData": png_data_url(), "source": "UPLOAD"},
            headers=auth_headers(),
        )
        assert response.status_code == 400
