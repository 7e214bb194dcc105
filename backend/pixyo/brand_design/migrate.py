"""
기존 프로필 필드(colors, fonts, layout, logo)에서 디자인 토큰 생성

토큰을 아직 저장하지 않은 프로필을 위한 초기 토큰 세트다.
"""

import copy
from typing import Any, Dict, Mapping, Optional

from pixyo.brand_design.derive import parse_px
from pixyo.brand_design.palette import generate_palette, get_contrast_color, is_hex_color
from pixyo.brand_design.tokens import DEFAULT_DESIGN_TOKENS, DesignTokens

DEFAULT_PRIMARY = DEFAULT_DESIGN_TOKENS["colors"]["palette"]["primary"]
FONT_FALLBACK = "sans-serif"


def _color(colors: Mapping[str, Any], key: str, fallback: str) -> str:
    value = colors.get(key)
    return value if is_hex_color(value) else fallback


def _px(value: Any) -> str:
    return f"{value}px"


def migrate_from_profile(
    colors: Optional[Mapping[str, Any]],
    fonts: Optional[Mapping[str, Any]],
    layout: Optional[Mapping[str, Any]],
    logo: Optional[str] = None,
    logo_variants: Optional[Mapping[str, Any]] = None,
) -> DesignTokens:
    """
    프로필 필드로 전체 토큰 세트 생성

    colors/fonts/layout 중 하나라도 비어 있으면 기본 토큰에 로고만 채운다.
    팔레트는 colors.dark를 대표 색으로 생성한다.
    """
    tokens: Dict[str, Any] = copy.deepcopy(DEFAULT_DESIGN_TOKENS)
    tokens["media"]["logoVariants"] = {"primary": logo or ""}
    if not colors or not fonts or not layout:
        return DesignTokens.model_validate(tokens)

    defaults = DEFAULT_DESIGN_TOKENS["colors"]["palette"]
    dark = _color(colors, "dark", DEFAULT_PRIMARY)
    light = _color(colors, "light", defaults["secondary"])
    accent = _color(colors, "accent", defaults["accent"])
    palette = generate_palette(dark)

    color_tokens = tokens["colors"]
    color_tokens["palette"].update({"primary": dark, "secondary": light, "accent": accent})
    semantic = color_tokens["semantic"]
    semantic.update({
        "primary": dark,
        "secondary": light,
        "accent": accent,
        "background": palette["background"],
        "text": {**palette["text"], "onPrimary": get_contrast_color(dark)},
        "border": palette["border"],
    })

    headline = fonts.get("headline") or {}
    body = fonts.get("body") or {}
    heading_family = headline.get("family") or "Inter"
    typography = tokens["typography"]
    typography["fonts"] = {
        "heading": {"family": heading_family, "fallback": FONT_FALLBACK},
        "body": {"family": body.get("family") or heading_family, "fallback": FONT_FALLBACK},
    }
    typography["fontWeights"]["bold"] = parse_px(str(headline.get("weight", "")), 700)
    typography["headingUppercase"] = bool(headline.get("uppercase", False))

    padding_top = (layout.get("padding") or {}).get("top")
    base = int(padding_top / 6 + 0.5) if isinstance(padding_top, (int, float)) else 0
    tokens["spacing"]["base"] = base or 4

    button = layout.get("button") or {}
    radius = _px(button.get("radius", 8))
    tokens["borders"]["radius"]["default"] = radius

    buttons = tokens["components"]["button"]
    buttons["primary"].update({
        "background": accent,
        "color": get_contrast_color(accent),
        "borderRadius": radius,
        "paddingX": _px(button.get("paddingX", 24)),
        "paddingY": _px(button.get("paddingY", 12)),
    })
    buttons["secondary"]["borderRadius"] = radius
    buttons["ghost"].update({"color": dark, "borderRadius": radius})
    buttons["outline"].update({"color": dark, "border": f"1px solid {dark}", "borderRadius": radius})
    tokens["components"]["input"]["focusRing"] = dark
    tokens["components"]["link"].update({"color": dark, "hoverColor": light})

    variants = logo_variants or {}
    media_logos: Dict[str, Any] = {"primary": logo or ""}
    if variants.get("dark"):
        media_logos["dark"] = variants["dark"]
    if variants.get("light"):
        media_logos["light"] = variants["light"]
    tokens["media"]["logoVariants"] = media_logos

    return DesignTokens.model_validate(tokens)
