"""
Gemini 이미지 생성 서비스

- Social Graphics 이미지 생성 (텍스트 프롬프트, 선택적으로 제품 이미지)
- Product Scenes: 제품 분석, 제품 장면, 합성용 배경, 합성 보정
- Vertex AI 제품 재배치 (Google Cloud 프로젝트 설정 시)

동기 SDK 호출은 executor에서 실행하고 제한 시간을 둔다. 재시도는 하지 않는다.
"""

import asyncio
import base64
import logging
import time
from dataclasses import dataclass
from io import BytesIO
from typing import Any, Callable, Dict, List, Optional

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types as genai_types
from PIL import Image as PILImage
from pydantic import ValidationError as PydanticValidationError

from pixyo.core.config import settings
from pixyo.core.exceptions import ConfigurationError, UpstreamServiceError, ValidationError
from pixyo.editor.layers import ASPECT_RATIOS
from pixyo.models.product_scene_models import ProductAnalysis, ProductPlacement
from pixyo.services.ai.product_scene_prompts import (
    ANALYSIS_PROMPT,
    HARMONIZE_PROMPT,
    MOCK_PRODUCT_ANALYSIS,
    build_background_prompt,
    build_product_scene_prompt,
    parse_json_text,
)
from pixyo.services.logging_service import logging_service

logger = logging.getLogger(__name__)

SERVICE_NAME = "Gemini"
VERTEX_SERVICE_NAME = "Vertex AI"

MODE_DIRECTIVES = {
    "photo": "Create a photorealistic, high-quality photograph.",
    "illustration": "Create a high-quality digital illustration.",
}

PRODUCT_DIRECTIVE = (
    "Use the provided product image as the main subject. Keep the product's shape, "
    "colors, labels and proportions exactly as they are and place it naturally in the scene."
)

# Mock 이미지 색상 (모드별)
_MOCK_COLORS = {"photo": (40, 44, 52), "illustration": (96, 72, 160)}

ImagePayload = Dict[str, str]


@dataclass
class GeneratedImage:
    data: bytes
    mime_type: str

    @property
    def base64(self) -> str:
        return base64.b64encode(self.data).decode("ascii")

    @property
    def data_url(self) -> str:
        return f"data:{self.mime_type};base64,{self.base64}"


def build_image_prompt(
    prompt: str,
    mode: str = "photo",
    aspect_ratio: Optional[str] = None,
    has_product_image: bool = False
) -> str:
    """모드/비율/제품 지시문을 붙인 최종 프롬프트"""
    parts = [MODE_DIRECTIVES.get(mode, MODE_DIRECTIVES["photo"]), prompt.strip()]
    if has_product_image:
        parts.append(PRODUCT_DIRECTIVE)
    if aspect_ratio:
        parts.append(f"Aspect ratio: {aspect_ratio}.")
    return "\n\n".join(parts)


def _first_parts(response: Any) -> list:
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return []
    content = getattr(candidates[0], "content", None)
    return getattr(content, "parts", None) or []


def extract_inline_image(response: Any) -> Optional[GeneratedImage]:
    """응답의 첫 번째 후보에서 inline 이미지 추출"""
    for part in _first_parts(response):
        inline_data = getattr(part, "inline_data", None)
        if inline_data is not None and inline_data.data:
            data = inline_data.data
            if isinstance(data, str):
                data = base64.b64decode(data)
            return GeneratedImage(data=data, mime_type=inline_data.mime_type or "image/png")
    return None


def extract_text(response: Any) -> str:
    """응답의 첫 번째 후보에서 텍스트 부분을 이어 붙임"""
    texts = [getattr(part, "text", None) for part in _first_parts(response)]
    return "".join(text for text in texts if isinstance(text, str))


def blocked_for_safety(response: Any) -> bool:
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return False
    reason = getattr(candidates[0], "finish_reason", None)
    return getattr(reason, "value", reason) == "SAFETY"


def decode_image(image: ImagePayload, field: str) -> bytes:
    """{"data": base64 또는 data URL, "mimeType": ...}의 바이트"""
    try:
        data = image["data"]
        if data.startswith("data:"):
            data = data.split(",", 1)[1]
        return base64.b64decode(data, validate=True)
    except (ValueError, KeyError, IndexError) as e:
        raise ValidationError("Ungültige Bilddaten", field=field) from e


def _image_part(image: ImagePayload, field: str) -> Any:
    return genai_types.Part.from_bytes(data=decode_image(image, field), mime_type=image["mimeType"])


def render_mock_image(mode: str = "photo", aspect_ratio: Optional[str] = None) -> GeneratedImage:
    """개발용 단색 PNG (비율 유지, 1/10 크기)"""
    dimensions = ASPECT_RATIOS.get(aspect_ratio or "1:1", ASPECT_RATIOS["1:1"])
    size = (dimensions["width"] // 10, dimensions["height"] // 10)
    image = PILImage.new("RGB", size, _MOCK_COLORS.get(mode, _MOCK_COLORS["photo"]))
    output = BytesIO()
    image.save(output, format="PNG")
    return GeneratedImage(data=output.getvalue(), mime_type="image/png")


class GeminiImageService:
    """Gemini 이미지 생성 클라이언트 래퍼"""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model_id: Optional[str] = None,
        timeout_seconds: Optional[float] = None,
        mock_mode: Optional[bool] = None,
        client: Optional[Any] = None,
        analysis_model_id: Optional[str] = None,
        vertex_client: Optional[Any] = None,
    ):
        self.api_key = api_key if api_key is not None else settings.GOOGLE_API_KEY
        self.model_id = model_id or settings.GEMINI_IMAGE_MODEL
        self.analysis_model_id = analysis_model_id or settings.GEMINI_ANALYSIS_MODEL
        self.vertex_model_id = settings.VERTEX_PRODUCT_MODEL
        self.timeout_seconds = timeout_seconds or settings.AI_REQUEST_TIMEOUT_SECONDS
        self.mock_mode = settings.MOCK_AI if mock_mode is None else mock_mode
        self.client = client
        if self.client is None and self.api_key and not self.mock_mode:
            self.client = genai.Client(api_key=self.api_key)
        self.vertex_client = vertex_client

    @property
    def is_configured(self) -> bool:
        return self.client is not None

    @property
    def vertex_configured(self) -> bool:
        return self.vertex_client is not None or bool(settings.GOOGLE_CLOUD_PROJECT)

    def _get_vertex_client(self) -> Any:
        # 자격 증명은 Application Default Credentials에서 읽으므로 처음 사용할 때 생성
        if self.vertex_client is None:
            if not settings.GOOGLE_CLOUD_PROJECT:
                raise ConfigurationError(
                    "GOOGLE_CLOUD_PROJECT",
                    "Vertex AI ist nicht konfiguriert. Bitte GOOGLE_CLOUD_PROJECT und GOOGLE_CLOUD_LOCATION setzen.",
                )
            self.vertex_client = genai.Client(
                vertexai=True,
                project=settings.GOOGLE_CLOUD_PROJECT,
                location=settings.GOOGLE_CLOUD_LOCATION,
            )
        return self.vertex_client

    def _generate_content(self, contents: list, model_id: Optional[str] = None, with_image: bool = True) -> Any:
        config = genai_types.GenerateContentConfig(
            response_modalities=["TEXT", "IMAGE"] if with_image else ["TEXT"],
            candidate_count=1,
        )
        return self.client.models.generate_content(
            model=model_id or self.model_id,
            contents=contents,
            config=config,
        )

    def _require_client(self) -> None:
        if not self.is_configured:
            raise ConfigurationError("GOOGLE_API_KEY")

    async def _execute(
        self,
        call: Callable[[], Any],
        operation: str,
        model_id: str,
        prompt: str,
        user_id: Optional[str],
        service_name: str = SERVICE_NAME
    ) -> Any:
        """
        SDK 호출 실행 (executor + 제한 시간)

        Raises:
            UpstreamServiceError: 시간 초과(504), 제공자 오류(제공자 상태 코드), 연결 오류
        """
        start_time = time.time()
        loop = asyncio.get_running_loop()
        try:
            response = await asyncio.wait_for(
                loop.run_in_executor(None, call),
                timeout=self.timeout_seconds,
            )
        except asyncio.TimeoutError as e:
            self._log_usage(operation, model_id, prompt, start_time, user_id, error="timeout")
            raise UpstreamServiceError(
                service_name,
                "Zeitüberschreitung bei der Bildgenerierung",
                upstream_status=504,
                error_code="UPSTREAM_TIMEOUT",
            ) from e
        except genai_errors.APIError as e:
            self._log_usage(operation, model_id, prompt, start_time, user_id, error=str(e))
            raise UpstreamServiceError(
                service_name,
                e.message or "Bildgenerierung fehlgeschlagen",
                upstream_status=e.code,
            ) from e
        except httpx.HTTPError as e:
            self._log_usage(operation, model_id, prompt, start_time, user_id, error=str(e))
            raise UpstreamServiceError(service_name, f"{service_name} nicht erreichbar") from e

        return response

    async def _generate_image_content(
        self,
        contents: list,
        operation: str,
        prompt: str,
        user_id: Optional[str]
    ) -> GeneratedImage:
        start_time = time.time()
        response = await self._execute(
            lambda: self._generate_content(contents),
            operation,
            self.model_id,
            prompt,
            user_id,
        )

        image = extract_inline_image(response)
        if image is None:
            if blocked_for_safety(response):
                self._log_usage(operation, self.model_id, prompt, start_time, user_id, error="safety")
                raise UpstreamServiceError(
                    SERVICE_NAME,
                    "Bild konnte aus Sicherheitsgründen nicht generiert werden.",
                    upstream_status=422,
                    error_code="CONTENT_BLOCKED",
                )
            self._log_usage(operation, self.model_id, prompt, start_time, user_id, error="no image in response")
            raise UpstreamServiceError(SERVICE_NAME, "Kein Bild in der Antwort erhalten")

        self._log_usage(
            operation,
            self.model_id,
            prompt,
            start_time,
            user_id,
            response=f"<{image.mime_type} {len(image.data)} bytes>",
        )
        return image

    async def generate_image(
        self,
        prompt: str,
        mode: str = "photo",
        aspect_ratio: Optional[str] = None,
        product_image: Optional[ImagePayload] = None,
        user_id: Optional[str] = None,
    ) -> GeneratedImage:
        """
        이미지 생성

        Args:
            prompt: 이미지 설명
            mode: photo | illustration
            aspect_ratio: 1:1, 4:5, 16:9, 9:16
            product_image: {"data": base64, "mimeType": ...} (Image-to-Image)

        Raises:
            ConfigurationError: API 키 없음
            UpstreamServiceError: 제공자 오류, 시간 초과, 이미지 없는 응답
        """
        if self.mock_mode:
            logger.info(f"Mock 이미지 생성: mode={mode}, aspect_ratio={aspect_ratio}")
            return render_mock_image(mode, aspect_ratio)

        self._require_client()

        final_prompt = build_image_prompt(prompt, mode, aspect_ratio, product_image is not None)
        contents: list = [final_prompt]
        if product_image:
            contents.append(_image_part(product_image, "productImage"))

        return await self._generate_image_content(contents, "generate-image", final_prompt, user_id)

    async def analyze_product(self, product_image: ImagePayload, user_id: Optional[str] = None) -> ProductAnalysis:
        """
        제품 사진 분석 (초점거리, 제품 유형, 배치, 어울리는 공간)

        Raises:
            UpstreamServiceError: 분석 결과를 해석할 수 없음 (502)
        """
        if self.mock_mode:
            return ProductAnalysis.model_validate(MOCK_PRODUCT_ANALYSIS)

        self._require_client()
        contents = [ANALYSIS_PROMPT, _image_part(product_image, "productImage")]
        start_time = time.time()
        response = await self._execute(
            lambda: self._generate_content(contents, model_id=self.analysis_model_id, with_image=False),
            "analyze-product",
            self.analysis_model_id,
            ANALYSIS_PROMPT,
            user_id,
        )

        text = extract_text(response)
        parsed = parse_json_text(text)
        try:
            if parsed is None:
                raise ValueError("no JSON object")
            analysis = ProductAnalysis.model_validate(parsed)
        except (ValueError, PydanticValidationError) as e:
            logger.error(f"제품 분석 응답 해석 실패: {text[:200]}")
            self._log_usage("analyze-product", self.analysis_model_id, ANALYSIS_PROMPT, start_time, user_id, error=str(e))
            raise UpstreamServiceError(
                SERVICE_NAME,
                "Produktanalyse konnte nicht ausgewertet werden",
                upstream_status=502,
            ) from e

        self._log_usage("analyze-product", self.analysis_model_id, ANALYSIS_PROMPT, start_time, user_id, response=text)
        return analysis

    async def generate_product_scene(
        self,
        product_images: List[Dict[str, Any]],
        background_prompt: str,
        aspect_ratio: str = "1:1",
        scale_level: int = 0,
        analysis: Optional[ProductAnalysis] = None,
        reference_image: Optional[ImagePayload] = None,
        floor_plan_image: Optional[ImagePayload] = None,
        floor_plan_description: Optional[str] = None,
        user_id: Optional[str] = None,
    ) -> GeneratedImage:
        """
        제품 사진(1-3장)을 장면 설명에 맞는 환경에 배치

        product_images 항목은 {"data", "mimeType", "label"?} 형식이다.
        """
        if self.mock_mode:
            logger.info(f"Mock 제품 장면 생성: images={len(product_images)}, aspect_ratio={aspect_ratio}")
            return render_mock_image("photo", aspect_ratio)

        self._require_client()
        prompt = build_product_scene_prompt(
            background_prompt,
            [image.get("label") for image in product_images],
            scale_level=scale_level,
            analysis=analysis,
            aspect_ratio=aspect_ratio,
            has_reference_image=reference_image is not None,
            floor_plan_description=floor_plan_description,
            has_floor_plan_image=floor_plan_image is not None,
        )
        contents: list = [prompt]
        contents.extend(_image_part(image, "productImages") for image in product_images)
        if reference_image:
            contents.append(_image_part(reference_image, "referenceImage"))
        if floor_plan_image:
            contents.append(_image_part(floor_plan_image, "floorPlanImage"))

        return await self._generate_image_content(contents, "generate-product-scene", prompt, user_id)

    async def generate_background(
        self,
        background_prompt: str,
        aspect_ratio: str = "1:1",
        lens_type: str = "normal",
        analysis: Optional[ProductAnalysis] = None,
        layout_image: Optional[ImagePayload] = None,
        product_image: Optional[ImagePayload] = None,
        placement: Optional[ProductPlacement] = None,
        reference_image: Optional[ImagePayload] = None,
        user_id: Optional[str] = None,
    ) -> GeneratedImage:
        """
        제품 없는 합성용 배경 생성

        레이아웃 이미지가 있으면 제품 이미지는 보내지 않는다.
        """
        if self.mock_mode:
            return render_mock_image("photo", aspect_ratio)

        self._require_client()
        prompt = build_background_prompt(
            background_prompt,
            lens_type=lens_type,
            analysis=analysis,
            has_layout_image=layout_image is not None,
            has_product_image=product_image is not None,
            placement=placement,
            has_reference_image=reference_image is not None,
            aspect_ratio=aspect_ratio,
        )
        contents: list = [prompt]
        if layout_image:
            contents.append(_image_part(layout_image, "layoutImage"))
        elif product_image:
            contents.append(_image_part(product_image, "productImage"))
        if reference_image:
            contents.append(_image_part(reference_image, "referenceImage"))

        return await self._generate_image_content(contents, "generate-background", prompt, user_id)

    async def harmonize_composite(
        self,
        composite_image: ImagePayload,
        aspect_ratio: str = "1:1",
        user_id: Optional[str] = None,
    ) -> GeneratedImage:
        """합성 이미지의 색/그림자/반사만 보정 (구도는 그대로)"""
        if self.mock_mode:
            return render_mock_image("photo", aspect_ratio)

        self._require_client()
        prompt = f"{HARMONIZE_PROMPT}\n\nAspect ratio: {aspect_ratio}."
        contents = [prompt, _image_part(composite_image, "compositeImage")]
        return await self._generate_image_content(contents, "harmonize-composite", prompt, user_id)

    def _recontext(self, client: Any, prompt: str, image_bytes: bytes, mime_type: str) -> Any:
        return client.models.recontext_image(
            model=self.vertex_model_id,
            source=genai_types.RecontextImageSource(
                prompt=prompt,
                product_images=[
                    genai_types.ProductImage(
                        product_image=genai_types.Image(image_bytes=image_bytes, mime_type=mime_type)
                    )
                ],
            ),
            config=genai_types.RecontextImageConfig(
                number_of_images=1,
                output_mime_type="image/png",
                enhance_prompt=True,
                person_generation=genai_types.PersonGeneration.ALLOW_ADULT,
            ),
        )

    async def recontext_product(
        self,
        product_image: ImagePayload,
        background_prompt: str,
        aspect_ratio: str = "1:1",
        user_id: Optional[str] = None,
    ) -> GeneratedImage:
        """
        Vertex AI 제품 재배치 모델로 배경 교체

        출력 비율은 제품 사진을 따른다 (aspect_ratio는 Mock 이미지에만 사용).

        Raises:
            ConfigurationError: Google Cloud 프로젝트 미설정
        """
        if self.mock_mode:
            return render_mock_image("photo", aspect_ratio)

        client = self._get_vertex_client()
        image_bytes = decode_image(product_image, "productImage")
        start_time = time.time()
        response = await self._execute(
            lambda: self._recontext(client, background_prompt, image_bytes, product_image["mimeType"]),
            "generate-product-scene-vertex",
            self.vertex_model_id,
            background_prompt,
            user_id,
            service_name=VERTEX_SERVICE_NAME,
        )

        generated = getattr(response, "generated_images", None) or []
        image = getattr(generated[0], "image", None) if generated else None
        if image is None or not image.image_bytes:
            self._log_usage(
                "generate-product-scene-vertex", self.vertex_model_id, background_prompt, start_time, user_id,
                error="no image in response",
            )
            raise UpstreamServiceError(VERTEX_SERVICE_NAME, "Vertex AI hat kein Bild zurückgegeben")

        result = GeneratedImage(data=image.image_bytes, mime_type=image.mime_type or "image/png")
        self._log_usage(
            "generate-product-scene-vertex", self.vertex_model_id, background_prompt, start_time, user_id,
            response=f"<{result.mime_type} {len(result.data)} bytes>",
        )
        return result

    def _log_usage(
        self,
        operation: str,
        model_id: str,
        prompt: str,
        start_time: float,
        user_id: Optional[str],
        response: str = "",
        error: Optional[str] = None
    ) -> None:
        logging_service.log_ai_model_usage(
            model_name=model_id,
            operation=operation,
            prompt=prompt,
            response_time_ms=(time.time() - start_time) * 1000,
            user_id=user_id,
            response=response,
            success=error is None,
            error=error,
        )
