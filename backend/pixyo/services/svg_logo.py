"""
SVG 로고 처리

- 구조 검사 (is_valid_svg)
- 스크립트 실행 경로와 외부 리소스 참조 제거 (sanitize_svg)
- 어두운 배경용 흰색, 밝은 배경용 검은색 변형 생성 (colorize_svg)
"""

import base64
import binascii
import re
from dataclasses import dataclass
from typing import Callable, Pattern

from pixyo.core.exceptions import LogoError

DARK_VARIANT_COLOR = "#ffffff"
LIGHT_VARIANT_COLOR = "#000000"

PRESERVE_VALUES = {"none", "transparent", "inherit", "currentcolor"}

_RGBA = re.compile(r"rgba\s*\(\s*\d+\s*,\s*\d+\s*,\s*\d+\s*,\s*([\d.]+)\s*\)", re.I)
_HSLA = re.compile(r"hsla\s*\(\s*\d+\s*,\s*\d+%?\s*,\s*\d+%?\s*,\s*([\d.]+)\s*\)", re.I)

_COLOR_PROPERTIES = ("fill", "stroke", "stop-color")

_ATTRIBUTE_PATTERNS = [
    re.compile(rf"(\b{prop}\s*=\s*[\"'])([^\"']+)([\"'])", re.I) for prop in _COLOR_PROPERTIES
]
_STYLE_TAG = re.compile(r"(<style[^>]*>)([\s\S]*?)(</style>)", re.I)
_CSS_PATTERNS = [
    re.compile(rf"(\b{prop}\s*:\s*)([^;}}\s]+)(\s*[;}}])", re.I)
    for prop in _COLOR_PROPERTIES + ("color",)
]
_STYLE_ATTRIBUTE = re.compile(r"(\bstyle\s*=\s*[\"'])([^\"']+)([\"'])", re.I)
_INLINE_STYLE_PATTERNS = [
    re.compile(rf"(\b{prop}\s*:\s*)([^;]+)(;?)", re.I)
    for prop in _COLOR_PROPERTIES + ("color",)
]

# (패턴, 대체 문자열) 순서대로 적용
_SANITIZE_RULES = [
    (re.compile(r"<script[\s\S]*?</script>", re.I), ""),
    (re.compile(r"<script[^>]*/>", re.I), ""),
    (re.compile(r"\s+on\w+\s*=\s*[\"'][^\"']*[\"']", re.I), ""),
    (re.compile(r"\s+on\w+\s*=\s*[^\s>\"']+", re.I), ""),
    (re.compile(r"javascript\s*:", re.I), "blocked:"),
    (re.compile(r"vbscript\s*:", re.I), "blocked:"),
    (re.compile(r"xlink:href\s*=\s*[\"']data:(?!image/)[^\"']*[\"']", re.I), 'xlink:href=""'),
    (re.compile(r"(?<!:)href\s*=\s*[\"']data:(?!image/)[^\"']*[\"']", re.I), 'href=""'),
    (re.compile(r"<foreignObject[\s\S]*?</foreignObject>", re.I), ""),
    (re.compile(r"<foreignObject[^>]*/>", re.I), ""),
    (re.compile(r"<iframe[\s\S]*?</iframe>", re.I), ""),
    (re.compile(r"<iframe[^>]*/>", re.I), ""),
    (re.compile(r"<embed[^>]*/?>", re.I), ""),
    (re.compile(r"<object[\s\S]*?</object>", re.I), ""),
    (re.compile(r"<object[^>]*/>", re.I), ""),
    (re.compile(r"<use[^>]*(?:href|xlink:href)\s*=\s*[\"']https?://[^\"']*[\"'][^>]*/?>", re.I), ""),
    (re.compile(r"<image[^>]*(?:href|xlink:href)\s*=\s*[\"']https?://[^\"']*[\"'][^>]*/?>", re.I), ""),
    (re.compile(r"<a[^>]*(?:href|xlink:href)\s*=\s*[\"']https?://[^\"']*[\"'][^>]*>", re.I), "<g>"),
    (re.compile(r"</a>", re.I), "</g>"),
    (re.compile(r"<(?:animate|set)[^>]*attributeName\s*=\s*[\"'](?:href|xlink:href)[\"'][^>]*/?>", re.I), ""),
    (re.compile(r"<!\[CDATA\[[\s\S]*?\]\]>", re.I), ""),
]


@dataclass
class ColorizedSvg:
    original: str
    dark: str   # 어두운 배경용 (흰색)
    light: str  # 밝은 배경용 (검은색)


def should_preserve(value: str) -> bool:
    """특수 값, url() 참조, CSS 변수는 색을 바꾸지 않는다"""
    trimmed = value.strip().lower()
    return (
        trimmed in PRESERVE_VALUES
        or trimmed.startswith("url(")
        or trimmed.startswith("var(")
    )


def replace_color(value: str, target_color: str) -> str:
    """대상 색으로 교체. rgba/hsla의 알파 값은 유지"""
    if should_preserve(value):
        return value

    alpha_match = _RGBA.search(value) or _HSLA.search(value)
    if alpha_match:
        alpha = alpha_match.group(1)
        if target_color == DARK_VARIANT_COLOR:
            return f"rgba(255, 255, 255, {alpha})"
        if target_color == LIGHT_VARIANT_COLOR:
            return f"rgba(0, 0, 0, {alpha})"

    return target_color


def _replacer(target_color: str, strip: bool = False) -> Callable[[re.Match], str]:
    def replace(match: re.Match) -> str:
        prefix, value, suffix = match.groups()
        if strip:
            value = value.strip()
        if should_preserve(value):
            return match.group(0)
        return prefix + replace_color(value, target_color) + suffix
    return replace


def _apply_all(patterns: list[Pattern], text: str, replace: Callable[[re.Match], str]) -> str:
    for pattern in patterns:
        text = pattern.sub(replace, text)
    return text


def apply_colorization(svg: str, target_color: str) -> str:
    """속성, <style> 블록, style 속성 순으로 색 교체"""
    result = _apply_all(_ATTRIBUTE_PATTERNS, svg, _replacer(target_color))

    def colorize_style_tag(match: re.Match) -> str:
        open_tag, css, close_tag = match.groups()
        return open_tag + _apply_all(_CSS_PATTERNS, css, _replacer(target_color)) + close_tag

    result = _STYLE_TAG.sub(colorize_style_tag, result)

    def colorize_style_attribute(match: re.Match) -> str:
        prefix, style, suffix = match.groups()
        return prefix + _apply_all(_INLINE_STYLE_PATTERNS, style, _replacer(target_color, strip=True)) + suffix

    return _STYLE_ATTRIBUTE.sub(colorize_style_attribute, result)


def colorize_svg(svg_content: str) -> ColorizedSvg:
    return ColorizedSvg(
        original=svg_content,
        dark=apply_colorization(svg_content, DARK_VARIANT_COLOR),
        light=apply_colorization(svg_content, LIGHT_VARIANT_COLOR),
    )


def sanitize_svg(svg_content: str) -> str:
    """스크립트, 이벤트 핸들러, 위험한 URL, HTML 임베드, 외부 참조, CDATA 제거"""
    result = svg_content
    for pattern, replacement in _SANITIZE_RULES:
        result = pattern.sub(replacement, result)
    return result


def is_valid_svg(content: str) -> bool:
    """<svg ...> 여는 태그와 </svg> 닫는 태그가 모두 있는지"""
    if not re.search(r"<svg[\s>]", content, re.I):
        return False
    if not re.search(r"</svg>", content, re.I):
        return False
    return re.search(r"<svg[^>]*>", content, re.I) is not None


def decode_svg_payload(svg_data: str) -> str:
    """data URL(base64)이면 디코딩, 아니면 SVG 원문으로 간주"""
    if not svg_data.startswith("data:"):
        return svg_data

    match = re.search(r"base64,(.+)$", svg_data, re.S)
    if not match:
        return svg_data
    try:
        return base64.b64decode(match.group(1)).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError) as e:
        raise LogoError("Ungültige SVG-Daten") from e


def prepare_logo(svg_data: str, max_size: int) -> ColorizedSvg:
    """
    업로드된 로고 검증 및 변형 생성

    Raises:
        LogoError: 크기 초과 또는 SVG 형식이 아닌 경우 (400)
    """
    svg_content = decode_svg_payload(svg_data)

    if len(svg_content.encode("utf-8")) > max_size:
        raise LogoError(f"File size exceeds maximum of {max_size // 1024}KB")
    if not is_valid_svg(svg_content):
        raise LogoError("Invalid SVG file format")

    return colorize_svg(sanitize_svg(svg_content))
