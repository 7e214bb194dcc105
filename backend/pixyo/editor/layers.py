# 캔버스 레이어 모델
# 다섯 종류의 레이어를 type 필드로 구분하는 닫힌 합 타입

from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic.alias_generators import to_camel

# ===== 상수 정의 =====

BACKGROUND_LAYER_ID = "background"
DEFAULT_ASPECT_RATIO = "1:1"
DEFAULT_BACKGROUND_COLOR = "#1a1a1a"

ASPECT_RATIOS: Dict[str, Dict[str, Any]] = {
    "1:1": {"width": 1080, "height": 1080, "label": "Square (Instagram Post)"},
    "4:5": {"width": 1080, "height": 1350, "label": "Portrait (Instagram Feed)"},
    "9:16": {"width": 1080, "height": 1920, "label": "Story (Instagram/TikTok)"},
    "16:9": {"width": 1920, "height": 1080, "label": "Landscape (YouTube/LinkedIn)"},
}

LayerType = Literal["background", "image", "rect", "text", "logo"]
FontWeight = Literal["normal", "bold"]
TextAlign = Literal["left", "center", "right"]
LogoBackgroundShape = Literal["none", "pill", "circle", "rect"]


# ===== 레이어 모델 =====

class BaseLayer(BaseModel):
    """모든 레이어가 공유하는 위치/표시 속성 (불변)"""
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    id: str
    x: float = 0.0
    y: float = 0.0
    rotation: float = 0.0
    opacity: float = Field(default=1.0, ge=0.0, le=1.0)
    visible: bool = True
    locked: bool = False


class BackgroundLayer(BaseLayer):
    """배경 이미지. 디자인당 최대 하나, 항상 맨 아래"""
    type: Literal["background"] = "background"
    src: str
    width: float
    height: float
    scale_x: float = 1.0
    scale_y: float = 1.0


class ImageLayer(BaseLayer):
    type: Literal["image"] = "image"
    src: str
    width: float
    height: float
    scale_x: float = 1.0
    scale_y: float = 1.0


class RectLayer(BaseLayer):
    """오버레이용 사각형"""
    type: Literal["rect"] = "rect"
    width: float
    height: float
    fill: str


class TextLayer(BaseLayer):
    type: Literal["text"] = "text"
    text: str
    font_family: str
    font_size: float
    font_weight: FontWeight = "normal"
    fill: str
    align: TextAlign = "left"
    line_height: float = 1.2
    max_width: Optional[float] = None


class LogoLayer(BaseLayer):
    """로고 (PNG 또는 SVG). SVG는 tint 색상과 배경 도형을 지원"""
    type: Literal["logo"] = "logo"
    src: str
    width: float
    height: float
    scale_x: float = 1.0
    scale_y: float = 1.0
    is_svg: bool = False
    tint_color: Optional[str] = None
    background_shape: LogoBackgroundShape = "none"
    background_color: Optional[str] = None
    background_padding: float = 0.0


Layer = Annotated[
    Union[BackgroundLayer, ImageLayer, RectLayer, TextLayer, LogoLayer],
    Field(discriminator="type"),
]

_layer_adapter = TypeAdapter(Layer)
_layer_list_adapter = TypeAdapter(List[Layer])


class CanvasState(BaseModel):
    """캔버스 크기/비율/배경색"""
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    width: int = 1080
    height: int = 1080
    aspect_ratio: str = DEFAULT_ASPECT_RATIO
    background_color: str = DEFAULT_BACKGROUND_COLOR

    @classmethod
    def for_aspect_ratio(
        cls,
        ratio: str,
        background_color: str = DEFAULT_BACKGROUND_COLOR
    ) -> "CanvasState":
        if ratio not in ASPECT_RATIOS:
            raise ValueError(f"Unknown aspect ratio: {ratio}")
        config = ASPECT_RATIOS[ratio]
        return cls(
            width=config["width"],
            height=config["height"],
            aspect_ratio=ratio,
            background_color=background_color,
        )


# ===== 변환 헬퍼 =====

def parse_layer(data: Union[Dict[str, Any], BaseLayer]) -> BaseLayer:
    """dict(camelCase 또는 snake_case)를 해당 종류의 레이어 모델로 변환"""
    if isinstance(data, BaseLayer):
        return data
    return _layer_adapter.validate_python(data)


def parse_layers(items: List[Dict[str, Any]]) -> List[BaseLayer]:
    return _layer_list_adapter.validate_python(items)


def dump_layer(layer: BaseLayer) -> Dict[str, Any]:
    """JSON 저장용 camelCase dict (None 필드 제외)"""
    return layer.model_dump(by_alias=True, exclude_none=True)


def field_aliases(layer: BaseLayer) -> Dict[str, str]:
    """필드명 → camelCase 별칭"""
    return {
        name: field.alias or name
        for name, field in type(layer).model_fields.items()
    }


def is_background(layer: BaseLayer) -> bool:
    return layer.type == "background"
