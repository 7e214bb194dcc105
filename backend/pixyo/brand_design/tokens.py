"""
브랜드 디자인 토큰 모델과 기본값

토큰 문서는 camelCase JSON으로 저장/교환되며, 파이썬에서는 snake_case 필드로 다룬다.
"""

import copy
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class TokenModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ===== 색상 =====

class BackgroundColors(TokenModel):
    default: str
    subtle: str
    inverse: str


class TextColors(TokenModel):
    default: str
    muted: str
    inverse: str
    on_primary: str


class StatusColors(TokenModel):
    success: str
    warning: str
    error: str
    info: str


class BorderColors(TokenModel):
    default: str
    subtle: str


class SemanticColors(TokenModel):
    primary: str
    secondary: str
    accent: str
    background: BackgroundColors
    text: TextColors
    status: StatusColors
    border: BorderColors


class ColorTokens(TokenModel):
    palette: Dict[str, str]
    semantic: SemanticColors


# ===== 타이포그래피 =====

class FontSpec(TokenModel):
    family: str
    fallback: str


class FontSet(TokenModel):
    heading: FontSpec
    body: FontSpec
    mono: Optional[FontSpec] = None


class TypeScale(TokenModel):
    base: float  # px
    ratio: float  # 모듈러 스케일 비율 (1.25 = major third)
    xs: str
    sm: str
    base_: str = Field(alias="base_")
    md: str
    lg: str
    xl: str
    xl2: str = Field(alias="2xl")
    xl3: str = Field(alias="3xl")
    xl4: str = Field(alias="4xl")
    xl5: str = Field(alias="5xl")


class LineHeights(TokenModel):
    tight: float
    normal: float
    relaxed: float


class LetterSpacing(TokenModel):
    tight: str
    normal: str
    wide: str


class FontWeights(TokenModel):
    normal: int
    medium: int
    semibold: int
    bold: int


class TypographyTokens(TokenModel):
    fonts: FontSet
    scale: TypeScale
    line_height: LineHeights
    letter_spacing: LetterSpacing
    font_weights: FontWeights
    heading_uppercase: bool


# ===== 간격/테두리/그림자 =====

class SpacingScale(TokenModel):
    xs: str
    sm: str
    md: str
    lg: str
    xl: str
    xl2: str = Field(alias="2xl")
    xl3: str = Field(alias="3xl")
    xl4: str = Field(alias="4xl")


class SpacingTokens(TokenModel):
    base: float  # px
    scale: SpacingScale
    container: str
    section_padding: str


class RadiusScale(TokenModel):
    none: str
    sm: str
    md: str
    lg: str
    xl: str
    full: str
    default: str  # 기본으로 쓰는 값의 별칭


class BorderTokens(TokenModel):
    radius: RadiusScale
    width: str
    color: str


class ShadowTokens(TokenModel):
    sm: str
    md: str
    lg: str
    xl: str


# ===== 컴포넌트 =====

class ButtonStyle(TokenModel):
    background: str
    color: str
    border: str
    border_radius: str
    font_weight: int
    text_transform: Literal["none", "uppercase"]
    padding_x: str
    padding_y: str


class ButtonVariants(TokenModel):
    primary: ButtonStyle
    secondary: ButtonStyle
    ghost: ButtonStyle
    outline: ButtonStyle


class InputStyle(TokenModel):
    background: str
    border: str
    border_radius: str
    focus_ring: str
    padding: str


class CardStyle(TokenModel):
    background: str
    border: str
    border_radius: str
    shadow: str
    padding: str


class LinkStyle(TokenModel):
    color: str
    hover_color: str
    underline: bool


class ComponentTokens(TokenModel):
    button: ButtonVariants
    input: InputStyle
    card: CardStyle
    link: LinkStyle


# ===== 미디어/보이스 =====

class LogoVariants(TokenModel):
    primary: str = ""
    dark: Optional[str] = None
    light: Optional[str] = None
    icon: Optional[str] = None


class MediaTokens(TokenModel):
    logo_variants: LogoVariants
    favicon: Optional[str] = None
    image_style: str
    icon_style: str


class VoiceTokens(TokenModel):
    formality: Literal["formal", "neutral", "casual"]
    tone: List[str]
    address: Literal["du", "Sie", "ihr"]
    languages: List[str]
    dos: List[str]
    donts: List[str]
    description: str


class DesignTokens(TokenModel):
    """브랜드 디자인 시스템 전체"""
    version: Literal[1] = 1
    colors: ColorTokens
    typography: TypographyTokens
    spacing: SpacingTokens
    borders: BorderTokens
    shadows: ShadowTokens
    components: ComponentTokens
    media: MediaTokens
    voice: VoiceTokens

    def to_document(self) -> Dict[str, Any]:
        """저장용 camelCase dict"""
        return self.model_dump(by_alias=True, exclude_none=True)


# ===== 스케일 생성 =====

def format_number(value: float) -> str:
    """정수 값은 소수점 없이 (16.0 -> "16"), 나머지는 최단 표현"""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def generate_type_scale(base: float, ratio: float) -> Dict[str, str]:
    """모듈러 타입 스케일 (소수점 한 자리 px)"""
    return {
        "xs": f"{base / ratio / ratio:.1f}px",
        "sm": f"{base / ratio:.1f}px",
        "base_": f"{format_number(base)}px",
        "md": f"{base * ratio:.1f}px",
        "lg": f"{base * ratio * ratio:.1f}px",
        "xl": f"{base * ratio ** 3:.1f}px",
        "2xl": f"{base * ratio ** 4:.1f}px",
        "3xl": f"{base * ratio ** 5:.1f}px",
        "4xl": f"{base * ratio ** 6:.1f}px",
        "5xl": f"{base * ratio ** 7:.1f}px",
    }


def generate_spacing_scale(base: float) -> Dict[str, str]:
    multipliers = {"xs": 1, "sm": 2, "md": 4, "lg": 6, "xl": 8, "2xl": 12, "3xl": 16, "4xl": 24}
    return {key: f"{format_number(base * factor)}px" for key, factor in multipliers.items()}


# ===== 기본 토큰 =====

BASE_FONT_SIZE = 16
SCALE_RATIO = 1.25
SPACING_BASE = 4


def _button(background: str, color: str, border: str = "none", font_weight: int = 600) -> Dict[str, Any]:
    return {
        "background": background,
        "color": color,
        "border": border,
        "borderRadius": "8px",
        "fontWeight": font_weight,
        "textTransform": "none",
        "paddingX": "24px",
        "paddingY": "12px",
    }


DEFAULT_DESIGN_TOKENS: Dict[str, Any] = {
    "version": 1,
    "colors": {
        "palette": {
            "primary": "#7c3aed",
            "secondary": "#4f46e5",
            "accent": "#f59e0b",
            "neutral": "#71717a",
            "white": "#ffffff",
            "black": "#09090b",
        },
        "semantic": {
            "primary": "#7c3aed",
            "secondary": "#4f46e5",
            "accent": "#f59e0b",
            "background": {"default": "#ffffff", "subtle": "#f4f4f5", "inverse": "#09090b"},
            "text": {
                "default": "#18181b",
                "muted": "#71717a",
                "inverse": "#fafafa",
                "onPrimary": "#ffffff",
            },
            "status": {
                "success": "#22c55e",
                "warning": "#f59e0b",
                "error": "#ef4444",
                "info": "#3b82f6",
            },
            "border": {"default": "#e4e4e7", "subtle": "#f4f4f5"},
        },
    },
    "typography": {
        "fonts": {
            "heading": {"family": "Inter", "fallback": "sans-serif"},
            "body": {"family": "Inter", "fallback": "sans-serif"},
        },
        "scale": {
            "base": BASE_FONT_SIZE,
            "ratio": SCALE_RATIO,
            **generate_type_scale(BASE_FONT_SIZE, SCALE_RATIO),
        },
        "lineHeight": {"tight": 1.2, "normal": 1.5, "relaxed": 1.75},
        "letterSpacing": {"tight": "-0.02em", "normal": "0em", "wide": "0.05em"},
        "fontWeights": {"normal": 400, "medium": 500, "semibold": 600, "bold": 700},
        "headingUppercase": False,
    },
    "spacing": {
        "base": SPACING_BASE,
        "scale": generate_spacing_scale(SPACING_BASE),
        "container": "1200px",
        "sectionPadding": "64px",
    },
    "borders": {
        "radius": {
            "none": "0px",
            "sm": "4px",
            "md": "8px",
            "lg": "12px",
            "xl": "16px",
            "full": "9999px",
            "default": "8px",
        },
        "width": "1px",
        "color": "#e4e4e7",
    },
    "shadows": {
        "sm": "0 1px 2px 0 rgba(0, 0, 0, 0.05)",
        "md": "0 4px 6px -1px rgba(0, 0, 0, 0.1), 0 2px 4px -2px rgba(0, 0, 0, 0.1)",
        "lg": "0 10px 15px -3px rgba(0, 0, 0, 0.1), 0 4px 6px -4px rgba(0, 0, 0, 0.1)",
        "xl": "0 20px 25px -5px rgba(0, 0, 0, 0.1), 0 8px 10px -6px rgba(0, 0, 0, 0.1)",
    },
    "components": {
        "button": {
            "primary": _button("#7c3aed", "#ffffff"),
            "secondary": _button("#f4f4f5", "#18181b"),
            "ghost": _button("transparent", "#7c3aed", font_weight=500),
            "outline": _button("transparent", "#7c3aed", border="1px solid #7c3aed"),
        },
        "input": {
            "background": "#ffffff",
            "border": "1px solid #e4e4e7",
            "borderRadius": "8px",
            "focusRing": "#7c3aed",
            "padding": "10px 14px",
        },
        "card": {
            "background": "#ffffff",
            "border": "1px solid #e4e4e7",
            "borderRadius": "12px",
            "shadow": "0 1px 2px 0 rgba(0, 0, 0, 0.05)",
            "padding": "24px",
        },
        "link": {"color": "#7c3aed", "hoverColor": "#6d28d9", "underline": False},
    },
    "media": {
        "logoVariants": {"primary": ""},
        "imageStyle": "Clean, modern photography with natural lighting",
        "iconStyle": "Outlined, 1.5px stroke, rounded caps",
    },
    "voice": {
        "formality": "neutral",
        "tone": ["professional", "friendly"],
        "address": "du",
        "languages": ["de"],
        "dos": [],
        "donts": [],
        "description": "",
    },
}


def default_design_tokens() -> DesignTokens:
    return DesignTokens.model_validate(copy.deepcopy(DEFAULT_DESIGN_TOKENS))
