"""
DesignService 단위 테스트
"""

import base64
from io import BytesIO

import pytest
from PIL import Image as PILImage

from pixyo.core.exceptions import ValidationError
from pixyo.services.design_service import DesignService, decode_image_payload, normalize_thumbnail
from pixyo.services.profile_service import ProfileService
from tests.conftest import make_png


@pytest.fixture
async def profile(db_session):
    return await ProfileService(db_session).create_profile("user-1", {"name": "Testmarke"})


@pytest.mark.unit
class TestDecodeImagePayload:
    """base64 / data URL 디코딩 테스트"""

    def test_data_url_mime_wins(self):
        # Given
        payload = "data:image/jpeg;base64," + base64.b64encode(b"jpeg-bytes").decode()

        # When
        image = decode_image_payload(payload, mime_type="image/png")

        # Then
        assert image.data == b"jpeg-bytes"
        assert image.mime_type == "image/jpeg"
        assert image.extension == "jpg"

    def test_bare_base64_uses_given_mime(self):
        image = decode_image_payload(base64.b64encode(b"png-bytes").decode(), mime_type="image/png")
        assert image.mime_type == "image/png"
        assert image.extension == "png"

    def test_default_mime_is_png(self):
        assert decode_image_payload(base64.b64encode(b"x").decode()).mime_type == "image/png"

    @pytest.mark.parametrize("payload", ["kein base64!", ""])
    def test_invalid_payload_rejected(self, payload):
        with pytest.raises(ValidationError):
            decode_image_payload(payload)


@pytest.mark.unit
class TestNormalizeThumbnail:
    def test_converts_to_rgb_jpeg(self):
        # Given
        output = BytesIO()
        PILImage.new("RGBA", (4, 4), (0, 0, 255, 128)).save(output, format="PNG")

        # When
        jpeg = normalize_thumbnail(output.getvalue())

        # Then
        with PILImage.open(BytesIO(jpeg)) as image:
            assert image.format == "JPEG"
            assert image.mode == "RGB"

    def test_rejects_non_image(self):
        with pytest.raises(ValidationError):
            normalize_thumbnail(b"not an image")


@pytest.mark.unit
@pytest.mark.db
class TestDesignService:
    """디자인 CRUD 및 업로드 테스트"""

    async def test_create_with_defaults(self, db_session, profile):
        design = await DesignService(db_session).create_design(
            profile.id, {"canvasState": {"width": 1080}, "layers": []}
        )
        assert design.name == "Unbenannt"
        assert design.overlay_opacity == 0

    async def test_duplicate_copies_everything_but_thumbnail(self, db_session, profile, sample_design_data):
        # Given
        service = DesignService(db_session)
        design = await service.create_design(profile.id, sample_design_data)
        design.thumbnail_url = "http://testserver/blobs/thumbnails/x.jpg"
        await db_session.commit()

        # When
        duplicate = await service.duplicate_design(design)

        # Then
        assert duplicate.id != design.id
        assert duplicate.name == "Sommer-Aktion (Kopie)"
        assert duplicate.layers == design.layers
        assert duplicate.overlay_opacity == 30
        assert duplicate.thumbnail_url is None

    async def test_update_skips_null_required_fields(self, db_session, profile, sample_design_data):
        service = DesignService(db_session)
        design = await service.create_design(profile.id, sample_design_data)

        updated = await service.update_design(design, {"layers": None, "name": "Neu", "overlay": None})

        assert updated.name == "Neu"
        assert len(updated.layers) == 2
        assert updated.overlay is None

    async def test_background_upload_replaces_managed_blob(self, db_session, profile, blob_storage):
        # Given
        service = DesignService(db_session, blob_storage)
        design = await service.create_design(profile.id, {"name": "Bg"})
        data_url = "data:image/png;base64," + base64.b64encode(make_png()).decode()

        # When
        first = await service.upload_background(design, data_url, source="GENERATED")
        design.background_image = {"url": first["url"], "source": "GENERATED"}
        second = await service.upload_background(design, data_url, source="GENERATED")

        # Then
        assert first["url"].startswith("http://testserver/blobs/backgrounds/")
        assert first["url"].endswith(".png")
        assert second["source"] == "GENERATED"
        assert not (blob_storage.root_dir / blob_storage.pathname_from_url(first["url"])).exists()
        assert (blob_storage.root_dir / blob_storage.pathname_from_url(second["url"])).exists()

    async def test_background_upload_leaves_external_url(self, db_session, profile, blob_storage):
        service = DesignService(db_session, blob_storage)
        design = await service.create_design(
            profile.id, {"backgroundImage": {"url": "https://images.unsplash.com/photo-1", "source": "UNSPLASH"}}
        )

        result = await service.upload_background(design, base64.b64encode(make_png()).decode(), "GENERATED")

        assert result["source"] == "GENERATED"

    async def test_thumbnail_upload_and_delete(self, db_session, profile, blob_storage):
        # Given
        service = DesignService(db_session, blob_storage)
        design = await service.create_design(profile.id, {"name": "Thumb"})

        # When
        design = await service.upload_thumbnail(design, make_png())
        path = blob_storage.root_dir / blob_storage.pathname_from_url(design.thumbnail_url)

        # Then
        assert design.thumbnail_url.endswith(".jpg")
        assert path.exists()

        await service.delete_design(design)
        assert not path.exists()

    async def test_empty_thumbnail_rejected(self, db_session, profile, blob_storage):
        service = DesignService(db_session, blob_storage)
        design = await service.create_design(profile.id, {"name": "Leer"})

        with pytest.raises(ValidationError) as exc_info:
            await service.upload_thumbnail(design, b"")
        assert exc_info.value.message == "No thumbnail provided"
