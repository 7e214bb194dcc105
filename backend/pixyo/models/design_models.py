"""
캔버스 디자인 API 요청 모델
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import Field, field_serializer, field_validator, model_validator

from pixyo.editor.layers import CanvasState, Layer, dump_layer, is_background
from pixyo.models.profile_models import ApiModel


class ImageSource(str, Enum):
    GENERATED = "GENERATED"
    UNSPLASH = "UNSPLASH"


class OverlayType(str, Enum):
    NONE = "none"
    GRADIENT = "gradient"
    HALFTONE = "halftone"
    GRAIN = "grain"
    DUOTONE = "duotone"
    DIAGONAL_STRIPES = "diagonal-stripes"
    SCANLINES = "scanlines"
    MESH_GRADIENT = "mesh-gradient"


class OverlayMode(str, Enum):
    DARKEN = "darken"
    LIGHTEN = "lighten"


# ===== 디자인 구성 요소 =====

class DesignContent(ApiModel):
    tagline: str = ""
    headline: str = ""
    body: str = ""
    button_text: str = ""
    show_button: Optional[bool] = None


class ImageCredit(ApiModel):
    name: str
    username: str
    link: str


class ImageTransform(ApiModel):
    scale: float = 1.0
    position_x: float = 0.0
    position_y: float = 0.0
    flip_x: bool = False


class BackgroundImage(ApiModel):
    url: str
    source: ImageSource
    credit: Optional[ImageCredit] = None
    transform: ImageTransform = Field(default_factory=ImageTransform)


class OverlaySpec(ApiModel):
    type: OverlayType = OverlayType.NONE
    mode: OverlayMode = OverlayMode.DARKEN
    intensity: float = Field(default=0, ge=0, le=100)


class ProductImage(ApiModel):
    data: str = Field(..., min_length=1)
    mime_type: str = Field(..., min_length=1)


class LayeredDesignModel(ApiModel):
    """레이어 목록 검증 공통 부분 (배경 레이어는 최대 하나, 항상 맨 아래)"""

    @field_validator("layers", check_fields=False)
    @classmethod
    def validate_background(cls, layers: Optional[List[Any]]) -> Optional[List[Any]]:
        if layers is None:
            return layers
        backgrounds = [layer for layer in layers if is_background(layer)]
        if len(backgrounds) > 1:
            raise ValueError("Only one background layer is allowed")
        if backgrounds and not is_background(layers[0]):
            raise ValueError("Background layer must be the first layer")
        return layers

    @field_serializer("layers", check_fields=False)
    def serialize_layers(self, layers: Optional[List[Any]]) -> Optional[List[Dict[str, Any]]]:
        if layers is None:
            return None
        return [dump_layer(layer) for layer in layers]


# ===== 요청 =====

class DesignCreateRequest(LayeredDesignModel):
    profile_id: str = Field(..., min_length=1)
    name: Optional[str] = None
    canvas_state: CanvasState
    layers: List[Layer] = Field(default_factory=list)
    overlay_opacity: Optional[float] = Field(default=None, ge=0, le=100)


class DesignUpdateRequest(LayeredDesignModel):
    """디자인 부분 수정 (null을 보내면 선택 항목을 비움)"""
    name: Optional[str] = Field(default=None, min_length=1)
    thumbnail_url: Optional[str] = None
    canvas_state: Optional[CanvasState] = None
    layers: Optional[List[Layer]] = None
    overlay_opacity: Optional[float] = Field(default=None, ge=0, le=100)
    content: Optional[DesignContent] = None
    background_image: Optional[BackgroundImage] = None
    overlay: Optional[OverlaySpec] = None
    product_image: Optional[ProductImage] = None


class BackgroundUploadRequest(ApiModel):
    """base64 또는 data URL 이미지"""
    image_data: str = Field(..., min_length=1)
    mime_type: Optional[str] = None
    source: ImageSource


class AssetCreateRequest(ApiModel):
    """
    에셋 등록

    imageData(base64 또는 data URL)가 있으면 업로드하고, 없으면 url을 그대로 저장한다.
    """
    profile_id: str = Field(..., min_length=1)
    type: ImageSource
    width: int = Field(..., ge=0)
    height: int = Field(..., ge=0)
    meta: Dict[str, Any] = Field(default_factory=dict)
    image_data: Optional[str] = None
    url: Optional[str] = None

    @field_validator("url")
    @classmethod
    def validate_url(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.startswith(("http://", "https://")):
            raise ValueError("url must be an absolute http(s) URL")
        return value

    @model_validator(mode="after")
    def require_source(self) -> "AssetCreateRequest":
        if not self.image_data and not self.url:
            raise ValueError("Either imageData or url must be provided")
        return self
