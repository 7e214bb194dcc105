"""
Claude 텍스트 서비스

- 이미지 프롬프트 생성 (스타일 프리셋 기반)
- 소셜 미디어 텍스트 생성 (Tagline / Headline / Body)
- 제품 장면 프롬프트 변형 3개
- 브랜드 설명으로 부분 디자인 토큰 생성
"""

import asyncio
import copy
import json
import logging
import re
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import anthropic
from langchain_anthropic import ChatAnthropic
from langchain_core.messages import HumanMessage, SystemMessage

from pixyo.core.config import settings
from pixyo.core.exceptions import ConfigurationError, UpstreamServiceError, ValidationError
from pixyo.services.ai.style_presets import StylePreset, get_preset_by_id
from pixyo.services.logging_service import logging_service

logger = logging.getLogger(__name__)

SERVICE_NAME = "Claude"
PROMPT_MAX_TOKENS = 1024
TEXT_MAX_TOKENS = 300
BRAND_TOKENS_MAX_TOKENS = 4096
SCENE_PROMPT_COUNT = 3

_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")

PROMPT_SYSTEM_PROMPT = """You are an expert prompt engineer for AI image generation models.

Turn the user's idea into one detailed, vivid image generation prompt in English.
Apply the given style directives and layout hints. Describe subject, setting, lighting,
composition and mood. Keep clear, calm areas in the composition where text can be placed.
Never include text, letters, logos or watermarks in the image.

Respond only with a valid JSON object in this format:
{
  "prompt": "the final image prompt",
  "reasoning": "one short sentence explaining the main creative decisions"
}"""

TEXT_SYSTEM_PROMPT = """Du bist ein erfahrener Social Media Texter für deutsche Marken.

Deine Aufgabe ist es, aus einem kurzen Briefing drei Textelemente für eine Social Media Grafik zu erstellen:

1. **Tagline** (2-4 Wörter): Ein kurzer, prägnanter Aufhänger in GROSSBUCHSTABEN. Beispiele: "JETZT NEU", "LIMITED EDITION", "SOMMER SALE".

2. **Headline** (3-8 Wörter): Die Hauptüberschrift, die Aufmerksamkeit erregt und das Kernthema vermittelt.

3. **Body** (1-2 Sätze, max. 100 Zeichen): Ein kurzer Fließtext, der die Botschaft verstärkt und zum Handeln motiviert.

WICHTIGE REGELN:
- Schreibe auf Deutsch
- Halte dich an die Zeichenlimits
- Sei prägnant und werbewirksam
- Vermeide Floskeln und Füllwörter
- Die Texte sollen zusammen eine Story erzählen

AUSGABEFORMAT:
Antworte ausschließlich als valides JSON-Objekt mit diesem Format:
{
  "tagline": "DEINE TAGLINE",
  "headline": "Deine Headline",
  "body": "Dein Body-Text hier."
}"""

MOCK_SOCIAL_TEXT: Dict[str, str] = {
    "tagline": "JETZT ENTDECKEN",
    "headline": "Die neue Kollektion ist da",
    "body": "Entdecke jetzt unsere neuesten Highlights und lass dich inspirieren.",
}

SCENE_PROMPTS_SYSTEM_PROMPT = """You are an expert interior design and architectural photography prompt engineer.
Transform the user's scene idea into 3 creative, detailed variations for AI product photography.

Each prompt describes product placement in the frame, specific materials and surfaces, key design
elements and furniture, lighting conditions (time of day, light quality, mood) and the background context.
Vary lighting, season, materials or camera framing so each variant feels like a different photoshoot,
while staying true to the user's core idea.

Keep prompts 50-70 words. Focus on the environment; the product placement is just the anchor.

Return exactly 3 prompts as JSON:
{
  "prompts": [
    {"title": "Short 2-3 word title", "prompt": "Full detailed prompt..."},
    {"title": "Short 2-3 word title", "prompt": "Full detailed prompt..."},
    {"title": "Short 2-3 word title", "prompt": "Full detailed prompt..."}
  ]
}"""

BRAND_TOKENS_SYSTEM_PROMPT = """Du bist ein Design-System-Experte. Der Benutzer beschreibt eine Marke oder einen Stil, und du generierst passende Design Tokens.

WICHTIG: Antworte NUR mit einem validen JSON-Objekt, keine Erklärungen. Das JSON muss ein partielles DesignTokens-Objekt sein, nur die Felder die sich vom Default unterscheiden.

Die Tokens-Struktur hat folgende Bereiche:
- colors.palette: benannte Farben als Hex (primary, secondary, accent, neutral, white, black)
- colors.semantic: { primary, secondary, accent, background: {default, subtle, inverse}, text: {default, muted, inverse, onPrimary}, status: {success, warning, error, info}, border: {default, subtle} }
- typography.fonts: { heading: {family, fallback}, body: {family, fallback} } (nur Google Fonts)
- typography.scale: { base: Zahl in px, ratio: Zahl 1.1-1.5 }
- typography.fontWeights: { normal, medium, semibold, bold } (Zahlen 300-900)
- typography.headingUppercase: boolean
- spacing.base: Zahl 2-8 (px)
- borders.radius.default: String in px
- components.button.primary: { background, color, border, borderRadius, fontWeight, textTransform: 'none'|'uppercase', paddingX, paddingY }
- voice: { formality: 'formal'|'neutral'|'casual', tone: string[], address: 'du'|'Sie'|'ihr', languages: string[], description: string }

Design-Regeln:
1. Farben müssen harmonisch sein (Komplementär- oder Analogie-Harmonien)
2. Kontrast für Lesbarkeit sicherstellen (Text auf Hintergrund)
3. Button-Hintergrund muss mit Text darauf lesbar sein
4. Max 2 Font-Familien (Heading + Body), nur bekannte Google Fonts
5. Wenn der Benutzer eine Branche nennt, passe Tonalität und Bildsprache an"""


def mock_scene_prompts(product_type: Optional[str] = None) -> List[Dict[str, str]]:
    product = product_type or "product"
    return [
        {
            "title": "Morgenlicht",
            "prompt": (
                f"Premium {product} positioned in the scene, soft morning light streaming through large windows. "
                "Clean modern interior with warm wood tones, minimal furniture. Fresh, calm atmosphere with "
                "subtle shadows. Editorial photography style."
            ),
        },
        {
            "title": "Abendstimmung",
            "prompt": (
                f"Premium {product} in an elegant evening setting, warm artificial lighting mixed with blue hour "
                "glow from windows. Contemporary furniture, sophisticated materials. Cozy yet refined atmosphere. "
                "Cinematic photography mood."
            ),
        },
        {
            "title": "Klare Linien",
            "prompt": (
                f"Premium {product} in a bright, minimalist space with crisp natural daylight. White walls, "
                "concrete or light wood floors, geometric furniture pieces. Clean, architectural feel. "
                "Sharp focus, professional product photography."
            ),
        },
    ]


# Mock 응답: 기본 토큰과 다른 부분만
MOCK_BRAND_TOKENS: Dict[str, Any] = {
    "colors": {
        "palette": {"primary": "#1f4e3d", "secondary": "#e8dcc4", "accent": "#d97706"},
        "semantic": {"primary": "#1f4e3d", "secondary": "#e8dcc4", "accent": "#d97706"},
    },
    "typography": {
        "fonts": {
            "heading": {"family": "Playfair Display", "fallback": "serif"},
            "body": {"family": "Source Sans 3", "fallback": "sans-serif"},
        },
    },
    "voice": {"formality": "neutral", "tone": ["warm", "natural"], "address": "du"},
}


@dataclass
class SocialTextResult:
    text: Dict[str, str]
    # False면 모델 응답이 아닌 고정 텍스트 (과금 기록 안 함)
    from_model: bool


def extract_json_object(text: str) -> Optional[Dict[str, Any]]:
    """응답 텍스트에서 첫 JSON 객체 추출 (코드 블록 허용)"""
    match = _JSON_OBJECT.search(text or "")
    if not match:
        return None
    try:
        parsed = json.loads(match.group(0))
    except json.JSONDecodeError:
        return None
    return parsed if isinstance(parsed, dict) else None


def build_prompt_request(
    user_idea: str,
    preset: StylePreset,
    mode: str,
    aspect_ratio: Optional[str] = None
) -> str:
    lines = [
        f"User idea: {user_idea}",
        f"Mode: {mode}",
        f"Style: {preset.label}",
        f"Style directives: {preset.prompt_directives}",
        f"Layout hints: {preset.layout_hints}",
    ]
    if aspect_ratio:
        lines.append(f"Aspect ratio: {aspect_ratio}")
    return "\n".join(lines)


def build_text_request(
    prompt: str,
    customer_name: Optional[str] = None,
    system_prompt: Optional[str] = None
) -> str:
    brand_line = f"Marke: {customer_name}" if customer_name else ""
    style_line = f"Markenstil: {system_prompt}" if system_prompt else ""
    return (
        "Erstelle Social Media Texte für folgendes Briefing:\n\n"
        f"{brand_line}\n"
        f"{style_line}\n\n"
        f"Briefing: {prompt}\n\n"
        "Generiere jetzt die Texte als JSON."
    )


def build_scene_prompts_request(
    user_prompt: str,
    product_type: Optional[str] = None,
    product_brand: Optional[str] = None
) -> str:
    product_context = ""
    if product_type:
        brand = f"{product_brand} " if product_brand else ""
        product_context = f"The product is a {brand}{product_type}."
    return (
        f'Create 3 creative variations of this scene idea: "{user_prompt}"\n\n'
        f"{product_context}\n\n"
        "Stay true to the user's vision but vary the lighting, materials, time of day, or mood. "
        "Each should feel like a different photoshoot interpretation of the same concept."
    )


def build_brand_tokens_request(prompt: str, current_tokens: Optional[Dict[str, Any]] = None) -> str:
    if not current_tokens:
        return prompt
    context = json.dumps(current_tokens, indent=2, ensure_ascii=False)
    return f"Aktuelle Tokens (als Kontext):\n{context}\n\nAnweisung: {prompt}"


def _message_text(message: Any) -> str:
    content = getattr(message, "content", message)
    if isinstance(content, str):
        return content
    # content block 목록
    texts = []
    for block in content or []:
        if isinstance(block, dict) and block.get("type") == "text":
            texts.append(block.get("text", ""))
        elif isinstance(block, str):
            texts.append(block)
    return "".join(texts)


class ClaudeService:
    """ChatAnthropic 기반 텍스트 생성"""

    def __init__(
        self,
        api_key: Optional[str] = None,
        prompt_model: Optional[str] = None,
        text_model: Optional[str] = None,
        timeout_seconds: Optional[float] = None,
        mock_mode: Optional[bool] = None,
    ):
        self.api_key = api_key if api_key is not None else settings.ANTHROPIC_API_KEY
        self.prompt_model = prompt_model or settings.CLAUDE_PROMPT_MODEL
        self.text_model = text_model or settings.CLAUDE_TEXT_MODEL
        self.timeout_seconds = timeout_seconds or settings.AI_REQUEST_TIMEOUT_SECONDS
        self.mock_mode = settings.MOCK_AI if mock_mode is None else mock_mode
        self._models: Dict[str, Any] = {}

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def get_model(self, model_name: str, max_tokens: int) -> Any:
        key = f"{model_name}:{max_tokens}"
        if key not in self._models:
            self._models[key] = ChatAnthropic(
                model=model_name,
                api_key=self.api_key,
                max_tokens=max_tokens,
                temperature=0.7,
                timeout=self.timeout_seconds,
                max_retries=0,
            )
        return self._models[key]

    async def _invoke(
        self,
        model_name: str,
        max_tokens: int,
        system_prompt: str,
        user_message: str,
        operation: str,
        user_id: Optional[str] = None
    ) -> str:
        model = self.get_model(model_name, max_tokens)
        messages = [SystemMessage(content=system_prompt), HumanMessage(content=user_message)]

        start_time = time.time()
        try:
            response = await asyncio.wait_for(model.ainvoke(messages), timeout=self.timeout_seconds)
        except asyncio.TimeoutError as e:
            self._log(model_name, operation, user_message, start_time, user_id, error="timeout")
            raise UpstreamServiceError(
                SERVICE_NAME,
                "Zeitüberschreitung bei der Textgenerierung",
                upstream_status=504,
                error_code="UPSTREAM_TIMEOUT",
            ) from e
        except anthropic.APIStatusError as e:
            self._log(model_name, operation, user_message, start_time, user_id, error=str(e))
            raise UpstreamServiceError(SERVICE_NAME, e.message, upstream_status=e.status_code) from e
        except anthropic.APIError as e:
            self._log(model_name, operation, user_message, start_time, user_id, error=str(e))
            raise UpstreamServiceError(SERVICE_NAME, "Claude nicht erreichbar") from e

        text = _message_text(response)
        self._log(model_name, operation, user_message, start_time, user_id, response=text)
        return text

    def _log(
        self,
        model_name: str,
        operation: str,
        prompt: str,
        start_time: float,
        user_id: Optional[str],
        response: str = "",
        error: Optional[str] = None
    ) -> None:
        logging_service.log_ai_model_usage(
            model_name=model_name,
            operation=operation,
            prompt=prompt,
            response_time_ms=(time.time() - start_time) * 1000,
            user_id=user_id,
            response=response,
            success=error is None,
            error=error,
        )

    async def generate_prompt(
        self,
        user_idea: str,
        style_id: str,
        mode: str,
        aspect_ratio: Optional[str] = None,
        user_id: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        사용자 아이디어 + 스타일 프리셋으로 이미지 프롬프트 생성

        Returns:
            {"prompt": str, "reasoning": str?}
        """
        preset = get_preset_by_id(style_id)
        if preset is None:
            raise ValidationError(f"Unknown style: {style_id}", field="styleId")

        if self.mock_mode:
            return {
                "prompt": f"{user_idea}, {preset.prompt_directives}",
                "reasoning": f"Mock: {preset.label}",
            }
        if not self.is_configured:
            raise ConfigurationError("ANTHROPIC_API_KEY")

        text = await self._invoke(
            self.prompt_model,
            PROMPT_MAX_TOKENS,
            PROMPT_SYSTEM_PROMPT,
            build_prompt_request(user_idea, preset, mode, aspect_ratio),
            "generate-prompt",
            user_id,
        )

        parsed = extract_json_object(text)
        if parsed and isinstance(parsed.get("prompt"), str) and parsed["prompt"].strip():
            result: Dict[str, Any] = {"prompt": parsed["prompt"].strip()}
            if parsed.get("reasoning"):
                result["reasoning"] = str(parsed["reasoning"])
            return result

        # JSON 형식이 아니면 응답 전체를 프롬프트로 사용
        logger.warning("프롬프트 응답이 JSON 형식이 아님 - 원문 사용")
        return {"prompt": text.strip()}

    async def generate_social_text(
        self,
        prompt: str,
        customer_name: Optional[str] = None,
        system_prompt: Optional[str] = None,
        user_id: Optional[str] = None
    ) -> SocialTextResult:
        """
        Tagline / Headline / Body 생성

        Mock 모드이거나 API 키가 없거나 응답을 해석할 수 없으면 고정 텍스트를 반환한다.
        """
        if self.mock_mode or not self.is_configured:
            return SocialTextResult(text=dict(MOCK_SOCIAL_TEXT), from_model=False)

        text = await self._invoke(
            self.text_model,
            TEXT_MAX_TOKENS,
            TEXT_SYSTEM_PROMPT,
            build_text_request(prompt, customer_name, system_prompt),
            "generate-text",
            user_id,
        )

        parsed = extract_json_object(text)
        if not parsed or not all(parsed.get(key) for key in ("tagline", "headline", "body")):
            logger.error(f"Claude 응답 해석 실패: {text[:200]}")
            return SocialTextResult(text=dict(MOCK_SOCIAL_TEXT), from_model=False)

        return SocialTextResult(
            text={key: str(parsed[key]) for key in ("tagline", "headline", "body")},
            from_model=True,
        )

    async def generate_scene_prompts(
        self,
        user_prompt: str,
        product_type: Optional[str] = None,
        product_brand: Optional[str] = None,
        user_id: Optional[str] = None
    ) -> List[Dict[str, str]]:
        """
        장면 아이디어 하나로 서로 다른 장면 프롬프트 3개 생성

        Returns:
            [{"title": str, "prompt": str}] (항상 3개)

        Raises:
            UpstreamServiceError: 응답이 3개의 title/prompt 형식이 아님 (502)
        """
        if self.mock_mode:
            return mock_scene_prompts(product_type)
        if not self.is_configured:
            raise ConfigurationError("ANTHROPIC_API_KEY")

        text = await self._invoke(
            self.prompt_model,
            PROMPT_MAX_TOKENS,
            SCENE_PROMPTS_SYSTEM_PROMPT,
            build_scene_prompts_request(user_prompt, product_type, product_brand),
            "generate-scene-prompts",
            user_id,
        )

        parsed = extract_json_object(text) or {}
        prompts = parsed.get("prompts")
        valid = (
            isinstance(prompts, list)
            and len(prompts) == SCENE_PROMPT_COUNT
            and all(
                isinstance(item, dict) and isinstance(item.get("title"), str) and isinstance(item.get("prompt"), str)
                for item in prompts
            )
        )
        if not valid:
            logger.error(f"장면 프롬프트 응답 해석 실패: {text[:200]}")
            raise UpstreamServiceError(
                SERVICE_NAME,
                "Prompts konnten nicht generiert werden",
                upstream_status=502,
            )
        return [{"title": item["title"], "prompt": item["prompt"]} for item in prompts]

    async def generate_brand_tokens(
        self,
        prompt: str,
        current_tokens: Optional[Dict[str, Any]] = None,
        user_id: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        브랜드/스타일 설명으로 부분 디자인 토큰 생성

        기본 토큰과 다른 필드만 담긴 camelCase 객체를 반환한다. 병합은 호출하는 쪽에서 한다.
        """
        if self.mock_mode:
            return copy.deepcopy(MOCK_BRAND_TOKENS)
        if not self.is_configured:
            raise ConfigurationError("ANTHROPIC_API_KEY")

        text = await self._invoke(
            self.text_model,
            BRAND_TOKENS_MAX_TOKENS,
            BRAND_TOKENS_SYSTEM_PROMPT,
            build_brand_tokens_request(prompt, current_tokens),
            "brand-design-generate",
            user_id,
        )

        parsed = extract_json_object(text)
        if parsed is None:
            logger.error(f"디자인 토큰 응답 해석 실패: {text[:200]}")
            raise UpstreamServiceError(
                SERVICE_NAME,
                "Design Tokens konnten nicht generiert werden",
                upstream_status=502,
            )
        return parsed
