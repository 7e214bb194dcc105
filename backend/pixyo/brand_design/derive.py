import re
from typing import Any, Dict

from pixyo.brand_design.tokens import DesignTokens

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def parse_px(value: str, fallback: int) -> int:
    """"24px" -> 24. 숫자로 시작하지 않으면 fallback"""
    match = _LEADING_INT.match(value or "")
    if not match:
        return fallback
    return int(match.group(1))


def derive_profile_fields(tokens: DesignTokens) -> Dict[str, Any]:
    """
    디자인 토큰에서 기존 프로필 필드(colors, fonts, layout) 도출

    토큰 저장 시 이전 형식을 읽는 도구들을 위해 함께 동기화한다.
    로고 변형은 토큰에 값이 있을 때만 포함된다.
    """
    colors = tokens.colors.semantic
    typography = tokens.typography
    spacing = tokens.spacing.scale
    button = tokens.components.button.primary

    padding = parse_px(spacing.lg, 24)

    fields: Dict[str, Any] = {
        "colors": {
            "dark": colors.primary,
            "light": colors.secondary,
            "accent": colors.accent,
        },
        "fonts": {
            "headline": {
                "family": typography.fonts.heading.family,
                "size": round(typography.scale.base * typography.scale.ratio ** 3, 3),
                "weight": str(typography.font_weights.bold),
                "uppercase": typography.heading_uppercase,
            },
            "body": {
                "family": typography.fonts.body.family,
                "size": typography.scale.base,
                "weight": str(typography.font_weights.normal),
            },
        },
        "layout": {
            "padding": {
                "top": padding,
                "right": padding,
                "bottom": padding,
                "left": padding,
            },
            "gaps": {
                "taglineToHeadline": parse_px(spacing.sm, 8),
                "headlineToBody": parse_px(spacing.md, 16),
                "bodyToButton": parse_px(spacing.lg, 24),
            },
            "button": {
                "radius": parse_px(button.border_radius, 8),
                "paddingX": parse_px(button.padding_x, 24),
                "paddingY": parse_px(button.padding_y, 12),
            },
        },
    }

    logos = tokens.media.logo_variants
    if logos.primary:
        fields["logo"] = logos.primary
    if logos.dark or logos.light:
        fields["logoVariants"] = {
            "dark": logos.dark or logos.primary,
            "light": logos.light or logos.primary,
        }

    return fields
