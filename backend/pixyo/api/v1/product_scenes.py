"""
AI 생성 API (Product Scenes)

제품 사진 분석, 제품 장면 생성, 합성용 배경과 합성 보정, 장면 프롬프트 변형.
처리 순서와 사용량 기록 규칙은 Social Graphics 생성 API와 같다.
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends

from pixyo.api.deps import get_claude_service, get_image_service, get_usage_ledger, require_tool_access
from pixyo.core.permissions import ToolId
from pixyo.core.security import CurrentUser
from pixyo.models.design_models import ProductImage
from pixyo.models.product_scene_models import (
    AnalyzeProductRequest,
    GenerateBackgroundRequest,
    GenerateProductSceneRequest,
    GenerateScenePromptsRequest,
    HarmonizeCompositeRequest,
    RecontextProductRequest,
)
from pixyo.services.ai.claude_service import ClaudeService
from pixyo.services.ai.gemini_image_service import GeminiImageService, GeneratedImage
from pixyo.services.usage_ledger import UsageLedger

router = APIRouter()


def _image_response(image: GeneratedImage, **extra: Any) -> Dict[str, Any]:
    return {"image": {"url": image.data_url}, **extra}


def _payload(image: ProductImage) -> Dict[str, str]:
    return image.model_dump(by_alias=True, include={"data", "mime_type"})


@router.post("/analyze-product")
async def analyze_product(
    request: AnalyzeProductRequest,
    current_user: CurrentUser = Depends(require_tool_access("analyze-product")),
    image_service: GeminiImageService = Depends(get_image_service),
    ledger: UsageLedger = Depends(get_usage_ledger)
) -> Dict[str, Any]:
    """제품 사진 분석 (초점거리, 제품 유형, 배치, 어울리는 공간)"""
    analysis = await image_service.analyze_product(_payload(request.product_image), user_id=current_user.id)
    if not image_service.mock_mode:
        ledger.record_usage(
            current_user,
            "analyze-product",
            meta={"productType": analysis.product.type, "confidence": analysis.confidence_overall},
        )
    return {"analysis": analysis.model_dump(mode="json")}


@router.post("/generate-product-scene")
async def generate_product_scene(
    request: GenerateProductSceneRequest,
    current_user: CurrentUser = Depends(require_tool_access("generate-product-scene")),
    image_service: GeminiImageService = Depends(get_image_service),
    ledger: UsageLedger = Depends(get_usage_ledger)
) -> Dict[str, Any]:
    """
    제품 사진 1-3장을 장면 설명에 맞는 환경에 배치

    productImages가 있으면 productImage보다 우선한다.
    """
    product_images = [
        {**_payload(image), "label": image.label}
        for image in request.normalized_images()
    ]
    image = await image_service.generate_product_scene(
        product_images=product_images,
        background_prompt=request.background_prompt,
        aspect_ratio=request.aspect_ratio,
        scale_level=request.product_scale_level,
        analysis=request.product_analysis,
        reference_image=_payload(request.reference_image) if request.reference_image else None,
        floor_plan_image=_payload(request.floor_plan_image) if request.floor_plan_image else None,
        floor_plan_description=request.floor_plan_description,
        user_id=current_user.id,
    )

    generation_log_id = None
    if not image_service.mock_mode:
        meta = {
            "aspectRatio": request.aspect_ratio,
            "imageSize": request.image_size,
            "imageCount": len(product_images),
            "scaleLevel": request.product_scale_level,
        }
        ledger.record_usage(current_user, "generate-product-scene", meta=meta)
        generation_log_id = await ledger.record_generation(
            user_id=current_user.id,
            tool=ToolId.PRODUCT_SCENES.value,
            prompt=request.background_prompt,
            prompt_source=request.prompt_source,
            meta=meta,
        )

    return _image_response(image, prompt=request.background_prompt, generationLogId=generation_log_id)


@router.get("/generate-product-scene-vertex")
async def vertex_status(
    current_user: CurrentUser = Depends(require_tool_access("generate-product-scene-vertex")),
    image_service: GeminiImageService = Depends(get_image_service)
) -> Dict[str, Any]:
    """Vertex AI 제품 재배치 설정 상태"""
    configured = image_service.vertex_configured
    return {
        "service": "Vertex AI Imagen Product Recontext",
        "model": image_service.vertex_model_id,
        "configured": configured,
        "requirements": ["GOOGLE_CLOUD_PROJECT", "GOOGLE_CLOUD_LOCATION", "Application Default Credentials"],
        "status": "ready" if configured else "not_configured",
    }


@router.post("/generate-product-scene-vertex")
async def generate_product_scene_vertex(
    request: RecontextProductRequest,
    current_user: CurrentUser = Depends(require_tool_access("generate-product-scene-vertex")),
    image_service: GeminiImageService = Depends(get_image_service),
    ledger: UsageLedger = Depends(get_usage_ledger)
) -> Dict[str, Any]:
    """Vertex AI 제품 재배치 모델로 배경 교체 (Google Cloud 프로젝트 필요)"""
    image = await image_service.recontext_product(
        product_image=_payload(request.product_image),
        background_prompt=request.background_prompt,
        aspect_ratio=request.aspect_ratio,
        user_id=current_user.id,
    )
    if not image_service.mock_mode:
        ledger.record_usage(current_user, "generate-product-scene-vertex", meta={"aspectRatio": request.aspect_ratio})
    return _image_response(image, prompt=request.background_prompt, model=image_service.vertex_model_id)


@router.post("/generate-background")
async def generate_background(
    request: GenerateBackgroundRequest,
    current_user: CurrentUser = Depends(require_tool_access("generate-background")),
    image_service: GeminiImageService = Depends(get_image_service),
    ledger: UsageLedger = Depends(get_usage_ledger)
) -> Dict[str, Any]:
    """제품 없는 합성용 배경 생성"""
    image = await image_service.generate_background(
        background_prompt=request.background_prompt,
        aspect_ratio=request.aspect_ratio,
        lens_type=request.lens_type,
        analysis=request.product_analysis,
        layout_image=_payload(request.layout_image) if request.layout_image else None,
        product_image=_payload(request.product_image) if request.product_image else None,
        placement=request.product_placement,
        reference_image=_payload(request.reference_image) if request.reference_image else None,
        user_id=current_user.id,
    )
    if not image_service.mock_mode:
        meta = {
            "aspectRatio": request.aspect_ratio,
            "lensType": request.lens_type,
            "hasLayoutImage": request.layout_image is not None,
        }
        ledger.record_usage(current_user, "generate-background", meta=meta)
    return _image_response(image)


@router.post("/harmonize-composite")
async def harmonize_composite(
    request: HarmonizeCompositeRequest,
    current_user: CurrentUser = Depends(require_tool_access("harmonize-composite")),
    image_service: GeminiImageService = Depends(get_image_service),
    ledger: UsageLedger = Depends(get_usage_ledger)
) -> Dict[str, Any]:
    """합성 이미지의 색/그림자/반사 보정"""
    image = await image_service.harmonize_composite(
        composite_image=_payload(request.composite_image),
        aspect_ratio=request.aspect_ratio,
        user_id=current_user.id,
    )
    if not image_service.mock_mode:
        ledger.record_usage(current_user, "harmonize-composite", meta={"aspectRatio": request.aspect_ratio})
    return _image_response(image)


@router.post("/generate-scene-prompts")
async def generate_scene_prompts(
    request: GenerateScenePromptsRequest,
    current_user: CurrentUser = Depends(require_tool_access("generate-scene-prompts")),
    claude_service: ClaudeService = Depends(get_claude_service),
    ledger: UsageLedger = Depends(get_usage_ledger)
) -> Dict[str, Any]:
    """장면 아이디어 하나로 프롬프트 변형 3개"""
    prompts = await claude_service.generate_scene_prompts(
        user_prompt=request.user_prompt,
        product_type=request.product_type,
        product_brand=request.product_brand,
        user_id=current_user.id,
    )
    if not claude_service.mock_mode:
        ledger.record_usage(current_user, "generate-scene-prompts")
    return {"prompts": prompts}
