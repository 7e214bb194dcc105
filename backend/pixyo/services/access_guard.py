"""
리소스 접근 검사

프로필/디자인/에셋은 요청자 본인 또는 공유 시드 ID가 소유한 경우에만 접근할 수 있다.
존재하지 않으면 NotFound, 다른 사용자 소유면 Forbidden으로 구분한다.
"""

from enum import Enum
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from pixyo.core.config import settings
from pixyo.core.exceptions import AuthorizationError, ResourceNotFoundError
from pixyo.db.models.design import Asset, Design
from pixyo.db.models.profile import Profile
from pixyo.repositories.design import AssetRepository, DesignRepository
from pixyo.repositories.profile import ProfileRepository


class AccessDecision(str, Enum):
    ALLOWED = "allowed"
    NOT_FOUND = "not_found"
    FORBIDDEN = "forbidden"


def decide_access(
    resource_exists: bool,
    owner_id: Optional[str],
    requester_id: str,
    seed_user_id: Optional[str] = None
) -> AccessDecision:
    """소유자와 요청자 비교 (순수 함수)"""
    if not resource_exists:
        return AccessDecision.NOT_FOUND

    seed_user_id = seed_user_id if seed_user_id is not None else settings.SEED_USER_ID
    if owner_id == requester_id or owner_id == seed_user_id:
        return AccessDecision.ALLOWED
    return AccessDecision.FORBIDDEN


def enforce_access(
    decision: AccessDecision,
    resource: str,
    resource_id: Optional[str] = None
) -> None:
    """판정 결과를 예외로 변환"""
    if decision == AccessDecision.NOT_FOUND:
        raise ResourceNotFoundError(resource, resource_id)
    if decision == AccessDecision.FORBIDDEN:
        raise AuthorizationError()


async def get_accessible_profile(
    session: AsyncSession,
    profile_id: str,
    user_id: str
) -> Profile:
    """접근 가능한 프로필 반환 (없으면 404, 권한 없으면 403)"""
    profile = await ProfileRepository(session).get(profile_id)
    decision = decide_access(
        profile is not None,
        profile.user_id if profile else None,
        user_id,
    )
    enforce_access(decision, "Profile", profile_id)
    return profile


async def get_accessible_design(
    session: AsyncSession,
    design_id: str,
    user_id: str
) -> Design:
    """디자인은 소유 프로필의 소유자 기준으로 검사"""
    design = await DesignRepository(session).get_with_profile(design_id)
    decision = decide_access(
        design is not None,
        design.profile.user_id if design else None,
        user_id,
    )
    enforce_access(decision, "Design", design_id)
    return design


async def get_accessible_asset(
    session: AsyncSession,
    asset_id: str,
    user_id: str
) -> Asset:
    """에셋도 소유 프로필의 소유자 기준"""
    asset = await AssetRepository(session).get_with_profile(asset_id)
    decision = decide_access(
        asset is not None,
        asset.profile.user_id if asset else None,
        user_id,
    )
    enforce_access(decision, "Asset", asset_id)
    return asset
