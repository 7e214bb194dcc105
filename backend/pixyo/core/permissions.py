"""
도구 접근 권한 및 관리자 판별

사용자 메타데이터는 인증 제공자의 서버 측 메타데이터(`role`, `allowedTools`)이다.
"""

from enum import Enum
from typing import Any, Dict, Mapping, Optional, Union


class ToolId(str, Enum):
    """권한으로 제어되는 도구 영역"""
    SOCIAL_GRAPHICS = "social-graphics"
    PRODUCT_SCENES = "product-scenes"
    BANNER_KONFIGURATOR = "banner-konfigurator"


# API 경로 이름 -> 필요한 도구
TOOL_ROUTES: Dict[str, ToolId] = {
    "generate-prompt": ToolId.SOCIAL_GRAPHICS,
    "generate-image": ToolId.SOCIAL_GRAPHICS,
    "generate-text": ToolId.SOCIAL_GRAPHICS,
    "analyze-product": ToolId.PRODUCT_SCENES,
    "generate-product-scene": ToolId.PRODUCT_SCENES,
    "generate-product-scene-vertex": ToolId.PRODUCT_SCENES,
    "generate-background": ToolId.PRODUCT_SCENES,
    "harmonize-composite": ToolId.PRODUCT_SCENES,
    "generate-scene-prompts": ToolId.PRODUCT_SCENES,
}

UserServerMetadata = Optional[Mapping[str, Any]]


def has_tool_access(metadata: UserServerMetadata, tool_id: Union[ToolId, str]) -> bool:
    """
    도구 접근 가능 여부

    메타데이터나 허용 목록이 없으면 허용한다 (권한 시스템 도입 이전 사용자 유지).
    빈 허용 목록은 모든 도구를 거부한다.
    """
    if not metadata:
        return True

    allowed_tools = metadata.get("allowedTools")
    if allowed_tools is None:
        return True

    value = tool_id.value if isinstance(tool_id, ToolId) else tool_id
    return value in allowed_tools


def is_admin(metadata: UserServerMetadata) -> bool:
    """role이 정확히 "admin"인 경우에만 관리자"""
    if not metadata:
        return False
    return metadata.get("role") == "admin"


def get_tool_for_route(route_name: str) -> Optional[ToolId]:
    """경로에 필요한 도구 반환 (없으면 인증만 필요)"""
    return TOOL_ROUTES.get(route_name)
