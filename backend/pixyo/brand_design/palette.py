"""
HSL 기반 팔레트 생성

대표 색 하나에서 배경/텍스트/테두리 색을 만든다 (유사색 + 보색 조화).
"""

import re
from typing import Dict, Tuple

HEX_COLOR = re.compile(r"^#?[0-9a-fA-F]{6}$")

DARK_TEXT = "#18181b"
LIGHT_TEXT = "#ffffff"


def is_hex_color(value: object) -> bool:
    return isinstance(value, str) and bool(HEX_COLOR.match(value))


def hex_to_hsl(hex_color: str) -> Tuple[float, float, float]:
    """hex -> HSL (H: 0-360, S: 0-1, L: 0-1)"""
    h = hex_color.lstrip("#")
    r, g, b = int(h[0:2], 16) / 255, int(h[2:4], 16) / 255, int(h[4:6], 16) / 255
    mx, mn = max(r, g, b), min(r, g, b)
    lightness = (mx + mn) / 2
    if mx == mn:
        return 0.0, 0.0, lightness

    delta = mx - mn
    saturation = delta / (2 - mx - mn) if lightness > 0.5 else delta / (mx + mn)
    if mx == r:
        hue = ((g - b) / delta) % 6
    elif mx == g:
        hue = (b - r) / delta + 2
    else:
        hue = (r - g) / delta + 4
    return hue * 60, saturation, lightness


def _channel(value: float) -> str:
    return f"{int(value * 255 + 0.5):02x}"


def hsl_to_hex(hue: float, saturation: float, lightness: float) -> str:
    """HSL -> 소문자 hex. 색상각은 360으로 정규화"""
    hue = hue % 360
    c = (1 - abs(2 * lightness - 1)) * saturation
    x = c * (1 - abs((hue / 60) % 2 - 1))
    m = lightness - c / 2

    if hue < 60:
        r, g, b = c, x, 0.0
    elif hue < 120:
        r, g, b = x, c, 0.0
    elif hue < 180:
        r, g, b = 0.0, c, x
    elif hue < 240:
        r, g, b = 0.0, x, c
    elif hue < 300:
        r, g, b = x, 0.0, c
    else:
        r, g, b = c, 0.0, x
    return f"#{_channel(r + m)}{_channel(g + m)}{_channel(b + m)}"


def get_contrast_color(hex_color: str) -> str:
    """배경 위에서 읽히는 텍스트 색 (밝은 배경이면 어두운 텍스트)"""
    _, _, lightness = hex_to_hsl(hex_color)
    return DARK_TEXT if lightness > 0.55 else LIGHT_TEXT


def generate_palette(primary_hex: str) -> Dict[str, object]:
    """
    대표 색 하나로 전체 팔레트 생성

    - secondary: +30도, 채도 85%
    - accent: 보색, 명도 0.55
    - 배경/테두리: 대표 색상각을 아주 약하게 섞은 중립색
    """
    hue, saturation, lightness = hex_to_hsl(primary_hex)

    return {
        "primary": primary_hex,
        "secondary": hsl_to_hex(hue + 30, saturation * 0.85, min(lightness + 0.05, 0.65)),
        "accent": hsl_to_hex(hue + 180, min(saturation * 1.1, 1.0), 0.55),
        "neutral": "#71717a",
        "background": {
            "default": "#ffffff",
            "subtle": hsl_to_hex(hue, saturation * 0.08, 0.97),
            "inverse": hsl_to_hex(hue, saturation * 0.15, 0.06),
        },
        "text": {
            "default": DARK_TEXT,
            "muted": "#71717a",
            "inverse": "#fafafa",
            "onPrimary": LIGHT_TEXT if lightness < 0.55 else DARK_TEXT,
        },
        "border": {
            "default": hsl_to_hex(hue, saturation * 0.05, 0.89),
            "subtle": hsl_to_hex(hue, saturation * 0.03, 0.96),
        },
    }
