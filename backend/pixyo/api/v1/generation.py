"""
AI 생성 API (Social Graphics)

인증과 도구 권한 확인 → 요청 검증 → 외부 생성 호출 1회 → 사용량 기록 순서로 처리한다.
사용량/생성 로그 기록 실패는 응답에 영향을 주지 않는다.
"""

import uuid
from typing import Any, Dict, Literal, Optional

from fastapi import APIRouter, Depends
from pydantic import Field

from pixyo.api.deps import get_claude_service, get_image_service, get_usage_ledger, require_tool_access
from pixyo.core.permissions import ToolId
from pixyo.core.security import CurrentUser
from pixyo.db.base import isoformat, utcnow
from pixyo.models.design_models import ProductImage
from pixyo.models.profile_models import ApiModel
from pixyo.services.ai.claude_service import ClaudeService
from pixyo.services.ai.gemini_image_service import GeminiImageService
from pixyo.services.usage_ledger import UsageLedger

router = APIRouter()

AspectRatio = Literal["1:1", "4:5", "16:9", "9:16"]
ImageMode = Literal["photo", "illustration"]


class GenerateImageRequest(ApiModel):
    """이미지 생성 요청"""
    prompt: str = Field(..., min_length=1)
    mode: ImageMode = "photo"
    aspect_ratio: Optional[AspectRatio] = None
    # 받기만 하고 사용하지 않음
    variation_seed: Optional[float] = None
    product_image: Optional[ProductImage] = None
    prompt_source: Literal["ai-improved", "user-direct"] = "user-direct"


class GeneratePromptRequest(ApiModel):
    """이미지 프롬프트 생성 요청"""
    user_idea: str = Field(..., min_length=1)
    style_id: str = Field(..., min_length=1)
    mode: ImageMode
    aspect_ratio: Optional[AspectRatio] = None


class GenerateTextRequest(ApiModel):
    """소셜 미디어 텍스트 생성 요청"""
    prompt: str = Field(..., min_length=1)
    customer_name: Optional[str] = None
    system_prompt: Optional[str] = None


@router.post("/generate-image")
async def generate_image(
    request: GenerateImageRequest,
    current_user: CurrentUser = Depends(require_tool_access("generate-image")),
    image_service: GeminiImageService = Depends(get_image_service),
    ledger: UsageLedger = Depends(get_usage_ledger)
) -> Dict[str, Any]:
    """
    이미지 생성

    응답의 generationLogId로 이후 다운로드 여부를 표시한다.
    """
    product_image = request.product_image.model_dump(by_alias=True) if request.product_image else None
    image = await image_service.generate_image(
        prompt=request.prompt,
        mode=request.mode,
        aspect_ratio=request.aspect_ratio,
        product_image=product_image,
        user_id=current_user.id,
    )

    generation_log_id = None
    if not image_service.mock_mode:
        meta = {"mode": request.mode, "aspectRatio": request.aspect_ratio, "hasProductImage": product_image is not None}
        ledger.record_usage(current_user, "generate-image", meta=meta)
        generation_log_id = await ledger.record_generation(
            user_id=current_user.id,
            tool=ToolId.SOCIAL_GRAPHICS.value,
            prompt=request.prompt,
            prompt_source=request.prompt_source,
            meta=meta,
        )

    return {
        "images": [{
            "id": str(uuid.uuid4()),
            "url": image.data_url,
            "createdAt": isoformat(utcnow()),
        }],
        "imageBase64": image.base64,
        "mimeType": image.mime_type,
        "generationLogId": generation_log_id,
    }


@router.post("/generate-prompt")
async def generate_prompt(
    request: GeneratePromptRequest,
    current_user: CurrentUser = Depends(require_tool_access("generate-prompt")),
    claude_service: ClaudeService = Depends(get_claude_service),
    ledger: UsageLedger = Depends(get_usage_ledger)
) -> Dict[str, Any]:
    """스타일 프리셋을 적용한 이미지 프롬프트 생성"""
    result = await claude_service.generate_prompt(
        user_idea=request.user_idea,
        style_id=request.style_id,
        mode=request.mode,
        aspect_ratio=request.aspect_ratio,
        user_id=current_user.id,
    )
    if not claude_service.mock_mode:
        ledger.record_usage(current_user, "generate-prompt", meta={"styleId": request.style_id})
    return result


@router.post("/generate-text")
async def generate_text(
    request: GenerateTextRequest,
    current_user: CurrentUser = Depends(require_tool_access("generate-text")),
    claude_service: ClaudeService = Depends(get_claude_service),
    ledger: UsageLedger = Depends(get_usage_ledger)
) -> Dict[str, str]:
    """Tagline / Headline / Body 생성 (해석 실패 시 고정 텍스트)"""
    result = await claude_service.generate_social_text(
        prompt=request.prompt,
        customer_name=request.customer_name,
        system_prompt=request.system_prompt,
        user_id=current_user.id,
    )
    if result.from_model:
        ledger.record_usage(current_user, "generate-text")
    return result.text
