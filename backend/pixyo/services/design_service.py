"""
디자인 서비스

디자인 생성/수정/복제와 배경 이미지, 썸네일 업로드를 담당한다.
"""

import base64
import binascii
import logging
import re
import time
import uuid
from dataclasses import dataclass
from io import BytesIO
from typing import Any, Dict, List, Optional

from PIL import Image, UnidentifiedImageError
from sqlalchemy.ext.asyncio import AsyncSession

from pixyo.core.config import settings
from pixyo.core.exceptions import ValidationError
from pixyo.db.models.design import DEFAULT_DESIGN_NAME, Design
from pixyo.repositories.design import DesignRepository
from pixyo.services.blob_storage import LocalBlobStorage

logger = logging.getLogger(__name__)

_DATA_URL_PATTERN = re.compile(r"^data:([^;]+);base64,(.+)$", re.DOTALL)
DEFAULT_IMAGE_MIME_TYPE = "image/png"
THUMBNAIL_QUALITY = 85

# API 필드명 -> 컬럼명
DESIGN_FIELDS = {
    "name": "name",
    "thumbnailUrl": "thumbnail_url",
    "canvasState": "canvas_state",
    "layers": "layers",
    "overlayOpacity": "overlay_opacity",
    "content": "content",
    "backgroundImage": "background_image",
    "overlay": "overlay",
    "productImage": "product_image",
}
REQUIRED_FIELDS = {"name", "canvasState", "layers", "overlayOpacity"}


@dataclass
class DecodedImage:
    data: bytes
    mime_type: str

    @property
    def extension(self) -> str:
        if "jpeg" in self.mime_type or "jpg" in self.mime_type:
            return "jpg"
        return "png"


def decode_image_payload(image_data: str, mime_type: Optional[str] = None) -> DecodedImage:
    """
    base64 문자열 또는 data URL 디코딩

    data URL의 MIME 타입이 명시적 mime_type보다 우선한다.
    """
    mime = mime_type or DEFAULT_IMAGE_MIME_TYPE
    payload = image_data

    if payload.startswith("data:"):
        match = _DATA_URL_PATTERN.match(payload)
        if match:
            mime, payload = match.group(1), match.group(2)

    try:
        data = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValidationError("Ungültige Bilddaten", field="imageData") from e

    if not data:
        raise ValidationError("Ungültige Bilddaten", field="imageData")
    return DecodedImage(data=data, mime_type=mime)


def normalize_thumbnail(data: bytes) -> bytes:
    """썸네일을 RGB JPEG로 변환"""
    try:
        with Image.open(BytesIO(data)) as image:
            if image.mode != "RGB":
                image = image.convert("RGB")
            output = BytesIO()
            image.save(output, format="JPEG", quality=THUMBNAIL_QUALITY)
    except (UnidentifiedImageError, OSError) as e:
        raise ValidationError("Ungültiges Thumbnail", field="thumbnail") from e
    return output.getvalue()


def unique_blob_suffix() -> str:
    """밀리초 타임스탬프 + 랜덤 6자 (같은 밀리초 업로드 충돌 방지)"""
    return f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:6]}"


class DesignService:
    """디자인 CRUD 및 파일 업로드"""

    def __init__(self, session: AsyncSession, storage: Optional[LocalBlobStorage] = None):
        self.session = session
        self.storage = storage
        self.repository = DesignRepository(session)

    async def list_designs(self, profile_id: str) -> List[Design]:
        return await self.repository.list_for_profile(profile_id)

    async def create_design(self, profile_id: str, data: Dict[str, Any]) -> Design:
        values = {
            column: data[field]
            for field, column in DESIGN_FIELDS.items()
            if data.get(field) is not None
        }
        values.setdefault("name", DEFAULT_DESIGN_NAME)
        values.setdefault("overlay_opacity", 0.0)

        design = await self.repository.create(profile_id=profile_id, **values)
        logger.info(f"디자인 생성: id={design.id}, profile={profile_id}")
        return design

    async def update_design(self, design: Design, changes: Dict[str, Any]) -> Design:
        """전달된 필드만 변경 (null은 선택 항목만 비움)"""
        for field, value in changes.items():
            column = DESIGN_FIELDS.get(field)
            if not column or (value is None and field in REQUIRED_FIELDS):
                continue
            setattr(design, column, value)

        await self.session.commit()
        await self.session.refresh(design)
        return design

    async def delete_design(self, design: Design) -> None:
        thumbnail_url = design.thumbnail_url
        await self.repository.delete(design.id)
        if self.storage is not None:
            await self.storage.delete_quietly(thumbnail_url)
        logger.info(f"디자인 삭제: id={design.id}")

    async def duplicate_design(self, design: Design) -> Design:
        """썸네일을 제외한 복제본 생성"""
        duplicate = await self.repository.create(
            profile_id=design.profile_id,
            name=f"{design.name} (Kopie)",
            canvas_state=design.canvas_state,
            layers=design.layers,
            overlay_opacity=design.overlay_opacity,
            content=design.content,
            background_image=design.background_image,
            overlay=design.overlay,
            product_image=design.product_image,
        )
        logger.info(f"디자인 복제: {design.id} -> {duplicate.id}")
        return duplicate

    async def upload_background(
        self,
        design: Design,
        image_data: str,
        source: str,
        mime_type: Optional[str] = None
    ) -> Dict[str, str]:
        """
        배경 이미지 업로드

        이전 배경은 저장소가 관리하는 URL인 경우에만 삭제한다.
        디자인 레코드 자체는 클라이언트가 이후 PUT으로 갱신한다.
        """
        image = decode_image_payload(image_data, mime_type)

        previous = design.background_image or {}
        await self.storage.delete_quietly(previous.get("url"))

        pathname = f"backgrounds/{design.id}-{unique_blob_suffix()}.{image.extension}"
        blob = await self.storage.put(pathname, image.data, image.mime_type)
        return {"url": blob.url, "source": source}

    async def upload_thumbnail(self, design: Design, data: bytes) -> Design:
        if not data:
            raise ValidationError("No thumbnail provided", field="thumbnail")
        if len(data) > settings.MAX_THUMBNAIL_SIZE:
            raise ValidationError(
                f"File size exceeds maximum of {settings.MAX_THUMBNAIL_SIZE // 1024}KB",
                field="thumbnail",
            )

        jpeg = normalize_thumbnail(data)
        await self.storage.delete_quietly(design.thumbnail_url)

        blob = await self.storage.put(
            f"thumbnails/{design.id}-{unique_blob_suffix()}.jpg", jpeg, "image/jpeg"
        )
        design.thumbnail_url = blob.url
        await self.session.commit()
        await self.session.refresh(design)
        return design
