"""
브랜드 디자인 AI API
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends

from pixyo.api.deps import get_claude_service, get_usage_ledger, require_tool_access
from pixyo.core.security import CurrentUser
from pixyo.models.profile_models import BrandDesignGenerateRequest
from pixyo.services.ai.claude_service import ClaudeService
from pixyo.services.usage_ledger import UsageLedger

router = APIRouter()


@router.post("/generate")
async def generate_brand_design(
    request: BrandDesignGenerateRequest,
    current_user: CurrentUser = Depends(require_tool_access("brand-design-generate")),
    claude_service: ClaudeService = Depends(get_claude_service),
    ledger: UsageLedger = Depends(get_usage_ledger)
) -> Dict[str, Any]:
    """
    브랜드/스타일 설명으로 부분 디자인 토큰 생성

    currentTokens를 보내면 문맥으로 사용한다. 결과는 저장하지 않는다.
    """
    tokens = await claude_service.generate_brand_tokens(
        prompt=request.prompt,
        current_tokens=request.current_tokens,
        user_id=current_user.id,
    )
    if not claude_service.mock_mode:
        ledger.record_usage(current_user, "brand-design-generate")
    return {"tokens": tokens}
