"""
관리자 API

모든 프로필을 소유권과 무관하게 관리하고 생성 로그 통계를 조회한다.
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from pixyo.api.deps import get_blob_storage, get_current_admin_user
from pixyo.core.exceptions import ResourceNotFoundError
from pixyo.core.security import CurrentUser
from pixyo.db.models.profile import Profile
from pixyo.db.session import get_db
from pixyo.models.profile_models import (
    AdminProfileCreateRequest,
    AdminProfileUpdateRequest,
    LogoUploadRequest,
)
from pixyo.repositories.design import AssetRepository, DesignRepository
from pixyo.repositories.profile import ProfileRepository
from pixyo.repositories.usage import GenerationLogRepository
from pixyo.services.blob_storage import LocalBlobStorage
from pixyo.services.logo_service import LogoService
from pixyo.services.profile_service import ProfileService
from pixyo.services.usage_ledger import resolve_period, summarize_generations

router = APIRouter()


async def _get_profile_or_404(db: AsyncSession, profile_id: str) -> Profile:
    profile = await ProfileRepository(db).get(profile_id)
    if profile is None:
        raise ResourceNotFoundError("Profile", profile_id)
    return profile


def _with_counts(profile: Profile, asset_count: int, design_count: int) -> Dict[str, Any]:
    data = profile.to_dict()
    data["_count"] = {"assets": asset_count, "designs": design_count}
    return data


# ===== 프로필 =====

@router.get("/profiles")
async def list_all_profiles(
    admin: CurrentUser = Depends(get_current_admin_user),
    db: AsyncSession = Depends(get_db)
) -> Dict[str, Any]:
    """전체 프로필 (에셋/디자인 수 포함)"""
    rows = await ProfileRepository(db).list_with_counts()
    return {"profiles": [_with_counts(profile, assets, designs) for profile, assets, designs in rows]}


@router.post("/profiles", status_code=status.HTTP_201_CREATED)
async def create_profile_for_user(
    request: AdminProfileCreateRequest,
    admin: CurrentUser = Depends(get_current_admin_user),
    db: AsyncSession = Depends(get_db)
) -> Dict[str, Any]:
    """지정한 사용자 소유로 프로필 생성"""
    profile = await ProfileService(db).create_profile(request.user_id, request.to_payload())
    return {"profile": profile.to_dict()}


@router.get("/profiles/{profile_id}")
async def get_profile_detail(
    profile_id: str,
    admin: CurrentUser = Depends(get_current_admin_user),
    db: AsyncSession = Depends(get_db)
) -> Dict[str, Any]:
    profile = await _get_profile_or_404(db, profile_id)
    assets = await AssetRepository(db).list_for_profile(profile.id)
    designs = await DesignRepository(db).list_for_profile(profile.id)

    data = _with_counts(profile, len(assets), len(designs))
    data["assets"] = [asset.to_dict() for asset in assets]
    data["designs"] = [design.to_dict() for design in designs]
    return {"profile": data}


@router.patch("/profiles/{profile_id}")
async def update_any_profile(
    profile_id: str,
    request: AdminProfileUpdateRequest,
    admin: CurrentUser = Depends(get_current_admin_user),
    db: AsyncSession = Depends(get_db)
) -> Dict[str, Any]:
    """프로필 수정 (소유자 변경 포함)"""
    profile = await _get_profile_or_404(db, profile_id)
    profile = await ProfileService(db).update_profile(profile, request.to_payload())
    return {"profile": profile.to_dict()}


@router.delete("/profiles/{profile_id}")
async def delete_any_profile(
    profile_id: str,
    admin: CurrentUser = Depends(get_current_admin_user),
    db: AsyncSession = Depends(get_db)
) -> Dict[str, Any]:
    profile = await _get_profile_or_404(db, profile_id)
    await ProfileService(db).delete_profile(profile)
    return {"success": True}


@router.post("/profiles/{profile_id}/logo")
async def upload_profile_logo(
    profile_id: str,
    request: LogoUploadRequest,
    admin: CurrentUser = Depends(get_current_admin_user),
    db: AsyncSession = Depends(get_db),
    storage: LocalBlobStorage = Depends(get_blob_storage)
) -> Dict[str, Any]:
    profile = await _get_profile_or_404(db, profile_id)
    return await LogoService(db, storage).upload(profile, request.svg_data)


@router.delete("/profiles/{profile_id}/logo")
async def delete_profile_logo(
    profile_id: str,
    admin: CurrentUser = Depends(get_current_admin_user),
    db: AsyncSession = Depends(get_db),
    storage: LocalBlobStorage = Depends(get_blob_storage)
) -> Dict[str, Any]:
    profile = await _get_profile_or_404(db, profile_id)
    await LogoService(db, storage).remove(profile)
    return {"success": True}


# ===== 생성 통계 =====

@router.get("/generations")
async def get_generation_stats(
    from_: Optional[str] = Query(None, alias="from"),
    to: Optional[str] = Query(None),
    tool: Optional[str] = Query(None),
    admin: CurrentUser = Depends(get_current_admin_user),
    db: AsyncSession = Depends(get_db)
) -> Dict[str, Any]:
    """기간 내 생성 수, 다운로드 수, 다운로드 비율 (도구별, 프롬프트 출처별)"""
    start, end = resolve_period(from_, to)
    logs = await GenerationLogRepository(db).list_in_window(start, end, tool=tool)

    result = summarize_generations(logs)
    return {
        "period": {"from": start.isoformat(), "to": end.isoformat()},
        **result,
    }
