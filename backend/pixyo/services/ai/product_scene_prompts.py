"""
Product Scenes 프롬프트

- 제품 분석 (초점거리, 제품 유형, 배치, 어울리는 공간)
- 제품 장면 생성 (제품 사진 1-3장 + 장면 설명)
- 합성용 배경 생성, 합성 이미지 색/그림자 보정
"""

import json
from typing import Any, Dict, List, Optional

from pixyo.models.product_scene_models import ProductAnalysis, ProductPlacement

ANALYSIS_PROMPT = """Analysiere dieses Produktbild für einen Hintergrund-Generator.

WICHTIG: Gib NUR ein valides JSON-Objekt zurück, keine Erklärungen.

1. BRENNWEITE: Schätze die verwendete Brennweite (35mm-Äquivalent). Typisch für Produktfotos: 50-100mm.
   Starke Kompression = längere Brennweite (85-135mm), weiter Look = kürzere Brennweite (35-50mm).
2. PRODUKTTYP: Erkenne das Produkt SPEZIFISCH (z.B. Subwoofer, Standlautsprecher, Kaffeemaschine)
   und die MARKE, wenn sichtbar.
3. PLATZIERUNG: floor, low_furniture, table_height, shelf, counter oder wall_mounted.
4. PASSENDE RÄUME: Deutsch und Englisch angeben.

Antworte mit diesem JSON-Schema:
{
  "analysis_version": "1.0",
  "confidence_overall": "<low|medium|high>",
  "camera": {
    "focal_length": {
      "estimated_mm": <number 24-200>,
      "category": "<wide|normal|light_telephoto|telephoto>",
      "confidence": "<low|medium|high>"
    }
  },
  "product": {
    "category": "<audio|electronics|kitchen|furniture|fashion|sports|other>",
    "type": "<englisch, z.B. 'subwoofer'>",
    "type_german": "<deutsch, z.B. 'Subwoofer'>",
    "brand": "<erkannte Marke oder 'unknown'>"
  },
  "placement": {
    "vertical_position": "<floor|low_furniture|table_height|shelf|counter|wall_mounted>",
    "surface_type": "<hardwood_floor|carpet|wood_furniture|glass|etc>"
  },
  "environment": {
    "primary_rooms": ["<englisch>"],
    "primary_rooms_german": ["<deutsch>"],
    "outdoor_suitable": <boolean>
  }
}"""

MOCK_PRODUCT_ANALYSIS: Dict[str, Any] = {
    "analysis_version": "1.0",
    "confidence_overall": "high",
    "camera": {"focal_length": {"estimated_mm": 70, "category": "normal", "confidence": "high"}},
    "product": {"category": "audio", "type": "subwoofer", "type_german": "Subwoofer", "brand": "Canton"},
    "placement": {"vertical_position": "floor", "surface_type": "hardwood_floor"},
    "environment": {
        "primary_rooms": ["living_room", "home_theater"],
        "primary_rooms_german": ["Wohnzimmer", "Heimkino"],
        "outdoor_suitable": False,
    },
}

# 제품 크기 단계 -> (화면 비율, 설명)
SCALE_PARAMETERS = {
    -2: ("15-25%", "compact, appearing smaller in the scene"),
    -1: ("25-35%", "moderately sized"),
    0: ("35-45%", "naturally proportioned"),
    1: ("45-55%", "prominent, taking up more space"),
    2: ("55-65%", "large and dominant in the frame"),
}

PLACEMENT_HINTS = {
    "floor": "on the floor",
    "low_furniture": "on low furniture",
    "table_height": "on a table",
    "shelf": "on a shelf",
    "counter": "on a counter",
    "wall_mounted": "mounted on a wall",
}

LENS_DESCRIPTIONS = {
    "wide": (
        "Shot with a wide-angle lens (24-35mm equivalent). Dramatic perspective, "
        "slightly curved lines at edges, expansive feel."
    ),
    "normal": (
        "Shot with a standard lens (50mm equivalent). Natural perspective matching human vision, "
        "straight lines, no distortion."
    ),
    "tele": (
        "Shot with a telephoto lens (85-135mm equivalent). Compressed perspective, "
        "very straight parallel lines, flattened depth."
    ),
}

BACKGROUND_SYSTEM_PROMPT = """Generate a background scene for product photography compositing.

Analyze the product's perspective first: camera height, horizontal angle and where the horizon line
would be if the product stood in a real room.

Generate ONLY the background environment, with no product in the output. The background perspective
must match the product's perspective exactly. Leave clear floor or surface space where the product
will be composited and do not place furniture or decorations there.

Output: photorealistic interior scene, professional soft lighting, DSLR quality."""

HARMONIZE_PROMPT = """You are looking at a composite image where a product has been placed on a generated background.

Harmonize the colors, shadows and reflections ONLY:
- Match the product's color temperature and highlights to the scene's lighting
- Add or enhance a natural contact shadow that follows the scene's light direction
- Add a subtle reflection if the surface is reflective (wood, marble, glass)

The camera perspective, the product's position, shape, proportions, logos and text stay exactly the same.
Output the same image with improved color harmony, realistic shadows and reflections."""


def parse_json_text(text: Optional[str]) -> Optional[Dict[str, Any]]:
    """모델 응답의 JSON 객체 (```json 코드 블록 허용). 해석할 수 없으면 None"""
    content = (text or "").strip()
    if content.startswith("```json"):
        content = content[7:]
    elif content.startswith("```"):
        content = content[3:]
    if content.endswith("```"):
        content = content[:-3]
    try:
        parsed = json.loads(content.strip())
    except json.JSONDecodeError:
        return None
    return parsed if isinstance(parsed, dict) else None


def _multi_view_block(labels: List[Optional[str]], product_label: str) -> str:
    if len(labels) == 1:
        return (
            "**Product Reference:**\n"
            f"Here is one image of the {product_label}. Use this reference to understand the product's appearance."
        )

    default_labels = ("First view", "Second view", "Third view")
    lines = [
        f"**Multi-View Product Reference ({len(labels)} images):**",
        f"Here are {len(labels)} views of the same {product_label}:",
    ]
    for index, label in enumerate(labels):
        lines.append(f"- Image {index + 1}: {label or default_labels[index]}")
    lines.append("")
    lines.append(
        f"Use all {len(labels)} views to fully understand the product's shape, proportions and surface details."
    )
    return "\n".join(lines)


def _floor_plan_note(description: Optional[str], has_image: bool) -> str:
    if description and has_image:
        return (
            "**Room Layout Reference (IMPORTANT):**\n"
            "A floor plan image is provided showing the room layout from above.\n"
            f"{description}\n\n"
            "Render the scene from a natural eye-level camera position that keeps the relative positions "
            "of furniture, windows and the product shown in this top-down plan."
        )
    if description:
        return (
            "**Room Layout Description:**\n"
            f"{description}\n\n"
            "Use this description to understand the room layout and position the product accordingly."
        )
    return ""


def build_product_scene_prompt(
    background_prompt: str,
    image_labels: List[Optional[str]],
    scale_level: int = 0,
    analysis: Optional[ProductAnalysis] = None,
    aspect_ratio: Optional[str] = None,
    has_reference_image: bool = False,
    floor_plan_description: Optional[str] = None,
    has_floor_plan_image: bool = False
) -> str:
    """
    제품 장면 생성 프롬프트

    사진 촬영 용어(카메라, 렌즈, 조명)로 장면을 서술하고 제품 외형은 참조 이미지 그대로 유지하도록 지시한다.
    초점거리는 분석 결과가 있으면 그 값을, 없으면 50mm를 쓴다.
    """
    image_count = len(image_labels)
    plural = image_count > 1
    reference_noun = "images" if plural else "image"
    frame_share, size_description = SCALE_PARAMETERS.get(scale_level, SCALE_PARAMETERS[0])

    focal_length = 50
    product_context = ""
    product_label = "Produkt"
    if analysis is not None:
        focal_length = int(analysis.camera.focal_length.estimated_mm) or 50
        product_label = analysis.product.type_german
        brand = f" ({analysis.known_brand})" if analysis.known_brand else ""
        placement = PLACEMENT_HINTS.get(analysis.placement.vertical_position, "naturally")
        product_context = (
            f"**PRODUCT:** {analysis.product.type_german}{brand}\n"
            f"**TYPICAL PLACEMENT:** {placement}"
        )
    aperture = "f/4" if focal_length > 70 else "f/5.6"

    sections = [
        f"A professional product photograph captured with a Canon EOS R5, {focal_length}mm lens at {aperture}.",
        _multi_view_block(image_labels, product_label),
        f"**Scene Description:**\n{background_prompt.strip()}",
        "**Subject Placement:**\n"
        f"- The exact product from the provided {reference_noun}\n"
        "- Positioned naturally within the scene, grounded with realistic contact shadow",
    ]
    if product_context:
        sections.append(product_context)

    identity = (
        "**Product Identity (CRITICAL - must match reference exactly):**\n"
        "This may be a new or unreleased product. Rely ONLY on the provided reference "
        f"{reference_noun} for all product details: same viewing angle, colors, materials, shape, "
        "proportions, markings and branding."
    )
    if plural:
        identity += (
            f"\nYou can see the product from {image_count} different angles. "
            "Render it exactly as shown in the reference images."
        )
    sections.append(identity)

    sections.append(
        "**Photography Style:**\n"
        f"- Shot with {focal_length}mm prime lens, natural perspective\n"
        f"- Product fills approximately {frame_share} of the frame, {size_description}\n"
        "- Shallow depth of field: product in sharp focus, background with gentle blur\n"
        "- Soft shadows with natural falloff"
    )
    sections.append(
        "**Lighting:**\n"
        "- Soft, diffused natural light or professional softbox setup\n"
        "- Ambient lighting harmonizes product with the environment"
    )
    if has_reference_image:
        sections.append(
            "**Style Reference:**\n"
            "The additional reference image shows the desired lighting mood and color palette for the environment."
        )
    sections.append(
        "**Output Style:**\n"
        "This is a background replacement task for e-commerce. Only the background changes. "
        "Generate a candid, natural-looking product photograph. Avoid over-processed or CGI appearance."
    )
    floor_plan = _floor_plan_note(floor_plan_description, has_floor_plan_image)
    if floor_plan:
        sections.append(floor_plan)
    if aspect_ratio:
        sections.append(f"Aspect ratio: {aspect_ratio}.")
    return "\n\n".join(sections)


def effective_lens_type(lens_type: str, analysis: Optional[ProductAnalysis] = None) -> str:
    """분석 결과의 초점거리 분류가 있으면 요청 값보다 우선"""
    if analysis is None:
        return lens_type
    category = analysis.camera.focal_length.category
    if category == "wide":
        return "wide"
    if category in ("telephoto", "light_telephoto"):
        return "tele"
    return lens_type


def build_background_prompt(
    background_prompt: str,
    lens_type: str = "normal",
    analysis: Optional[ProductAnalysis] = None,
    has_layout_image: bool = False,
    has_product_image: bool = False,
    placement: Optional[ProductPlacement] = None,
    has_reference_image: bool = False,
    aspect_ratio: Optional[str] = None
) -> str:
    """
    합성용 배경 프롬프트

    위치 전달 방식은 레이아웃 이미지 > 제품 이미지 + 좌표 > 위치 정보 없음 순이다.
    """
    lens = LENS_DESCRIPTIONS.get(effective_lens_type(lens_type, analysis), LENS_DESCRIPTIONS["normal"])
    sections = [BACKGROUND_SYSTEM_PROMPT]

    if analysis is not None:
        brand = f" ({analysis.known_brand})" if analysis.known_brand else ""
        sections.append(
            "**PRODUCT INFO:**\n"
            f"- Type: {analysis.product.type_german}{brand}\n"
            f"- Lens used for product photo: ~{int(analysis.camera.focal_length.estimated_mm)}mm"
        )

    if has_layout_image:
        product_label = analysis.product.type_german if analysis is not None else "product"
        sections.append(
            "**LAYOUT IMAGE:**\n"
            "The attached image shows the product on a neutral background at its exact final position. "
            f"Generate a room where a {product_label} would naturally stand there, with matching camera height "
            "and horizon line, and leave that floor space empty."
        )
    elif has_product_image:
        if placement is not None:
            placement_hint = (
                f"The product will be positioned at approximately {round(placement.x * 100)}% horizontal and "
                f"{round(placement.y * 100)}% vertical, taking up about {round(placement.scale * 100)}% of the frame."
            )
        else:
            placement_hint = "The product will be placed in the lower-center area of the image."
        sections.append(
            "**PRODUCT REFERENCE (Image 1):**\n"
            "The attached image shows the product that will be composited into this scene. "
            f"Analyze its shape, size and proportions.\n\n**PLACEMENT:** {placement_hint}"
        )
    else:
        sections.append("Leave clear space in the center-bottom area for a product to be placed later.")

    sections.append(f"**CAMERA/LENS:**\n{lens}")
    sections.append(f"**SCENE TO GENERATE:**\n{background_prompt.strip()}")
    sections.append("Do NOT include any product in the generated image - only the background.")
    if has_reference_image:
        sections.append(
            "**STYLE REFERENCE (additional image):** Match the atmosphere, color palette and lighting mood "
            "from the style reference image."
        )
    if aspect_ratio:
        sections.append(f"Aspect ratio: {aspect_ratio}.")
    return "\n\n".join(sections)
