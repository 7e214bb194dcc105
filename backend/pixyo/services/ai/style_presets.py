"""
이미지 스타일 프리셋

프롬프트 생성 시 선택한 스타일의 지시문과 레이아웃 힌트를 Claude에 전달한다.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class PresetTypography(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    default_font: str
    heading_size_px: int
    text_color: str


class StylePreset(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str
    label: str
    mode: str  # photo | illustration
    prompt_directives: str
    typography: PresetTypography
    layout_hints: str


def _preset(
    preset_id: str,
    label: str,
    mode: str,
    directives: str,
    font: str,
    heading_size: int,
    text_color: str,
    layout_hints: str
) -> StylePreset:
    return StylePreset(
        id=preset_id,
        label=label,
        mode=mode,
        prompt_directives=directives,
        typography=PresetTypography(
            default_font=font, heading_size_px=heading_size, text_color=text_color
        ),
        layout_hints=layout_hints,
    )


STYLE_PRESETS: List[StylePreset] = [
    # 사진 스타일
    _preset(
        "cinematic", "Cinematic Photo", "photo",
        "cinematic photography, dramatic lighting, shallow depth of field, film grain, "
        "anamorphic lens flare, professional color grading",
        "Playfair Display", 56, "#ffffff",
        "Dark, moody atmosphere with dramatic shadows. Leave space for text in less detailed areas.",
    ),
    _preset(
        "editorial", "Editorial Fashion", "photo",
        "high-end editorial photography, studio lighting, clean composition, "
        "fashion magazine aesthetic, professional retouching",
        "Bebas Neue", 64, "#ffffff",
        "Clean, minimalist backgrounds. Strong subject focus with ample negative space for headlines.",
    ),
    _preset(
        "lifestyle", "Lifestyle", "photo",
        "natural lifestyle photography, warm golden hour lighting, authentic candid moments, "
        "soft focus background, warm color palette",
        "Poppins", 48, "#2d2d2d",
        "Warm, inviting atmosphere. Soft backgrounds suitable for overlaid text.",
    ),
    _preset(
        "product", "Product Shot", "photo",
        "professional product photography, clean white or gradient background, perfect lighting, "
        "sharp focus, commercial quality",
        "Inter", 42, "#1a1a1a",
        "Clean, distraction-free background. Product centered with space around for text.",
    ),
    # 일러스트 스타일
    _preset(
        "flat", "Flat Illustration", "illustration",
        "flat design illustration, minimal shapes, bold colors, geometric style, "
        "vector art aesthetic, no gradients",
        "Space Grotesk", 52, "#ffffff",
        "Simple, bold color blocks. Clear areas for text placement.",
    ),
    _preset(
        "modern-3d", "Modern 3D", "illustration",
        "3D render illustration, soft gradients, floating objects, pastel colors, smooth surfaces, "
        "studio lighting, clay render style",
        "Poppins", 48, "#333333",
        "Soft, dimensional feel with gradient backgrounds. Space for text in empty areas.",
    ),
    _preset(
        "line-art", "Line Art", "illustration",
        "minimalist line art illustration, single continuous line, black ink on white, "
        "elegant simplicity, hand-drawn feel",
        "Playfair Display", 44, "#1a1a1a",
        "Clean white background with delicate line work. Plenty of white space for text.",
    ),
    _preset(
        "watercolor", "Watercolor", "illustration",
        "watercolor illustration, soft washes, organic textures, flowing colors, "
        "artistic brushstrokes, dreamy atmosphere",
        "Lora", 46, "#2d2d2d",
        "Soft, organic textures with areas of lighter washes suitable for text overlay.",
    ),
]

_PRESETS_BY_ID: Dict[str, StylePreset] = {preset.id: preset for preset in STYLE_PRESETS}


def get_preset_by_id(preset_id: str) -> Optional[StylePreset]:
    return _PRESETS_BY_ID.get(preset_id)


def get_presets_by_mode(mode: str) -> List[StylePreset]:
    return [preset for preset in STYLE_PRESETS if preset.mode == mode]
