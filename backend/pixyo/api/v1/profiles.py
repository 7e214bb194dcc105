"""
브랜드 프로필 API

본인 소유 또는 공유 시드 프로필만 조회/수정할 수 있다.
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import PlainTextResponse
from sqlalchemy.ext.asyncio import AsyncSession

from pixyo.api.deps import get_blob_storage, get_current_user
from pixyo.brand_design.tokens import DesignTokens
from pixyo.core.config import settings
from pixyo.core.security import CurrentUser
from pixyo.db.session import get_db
from pixyo.models.profile_models import LogoUploadRequest, ProfileCreateRequest, ProfileUpdateRequest
from pixyo.repositories.design import AssetRepository
from pixyo.repositories.profile import ProfileRepository
from pixyo.services.access_guard import get_accessible_profile
from pixyo.services.blob_storage import LocalBlobStorage
from pixyo.services.logo_service import LogoService
from pixyo.services.profile_service import ProfileService

router = APIRouter()


@router.get("")
async def list_profiles(
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
) -> Dict[str, Any]:
    """본인 프로필과 공유 데모 프로필 목록"""
    profiles = await ProfileRepository(db).list_accessible(current_user.id, settings.SEED_USER_ID)
    return {"profiles": [profile.to_dict() for profile in profiles]}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_profile(
    request: ProfileCreateRequest,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
) -> Dict[str, Any]:
    profile = await ProfileService(db).create_profile(current_user.id, request.to_payload())
    return {"profile": profile.to_dict()}


@router.get("/{profile_id}")
async def get_profile(
    profile_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
) -> Dict[str, Any]:
    """프로필 상세 (에셋 포함)"""
    profile = await get_accessible_profile(db, profile_id, current_user.id)
    assets = await AssetRepository(db).list_for_profile(profile.id)

    data = profile.to_dict()
    data["assets"] = [asset.to_dict() for asset in assets]
    return {"profile": data}


@router.patch("/{profile_id}")
async def update_profile(
    profile_id: str,
    request: ProfileUpdateRequest,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
) -> Dict[str, Any]:
    profile = await get_accessible_profile(db, profile_id, current_user.id)
    profile = await ProfileService(db).update_profile(profile, request.to_payload())
    return {"profile": profile.to_dict()}


@router.delete("/{profile_id}")
async def delete_profile(
    profile_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
) -> Dict[str, Any]:
    """프로필 삭제 (디자인과 에셋도 함께 삭제)"""
    profile = await get_accessible_profile(db, profile_id, current_user.id)
    await ProfileService(db).delete_profile(profile)
    return {"success": True}


# ===== 로고 =====

@router.post("/{profile_id}/logo")
async def upload_logo(
    profile_id: str,
    request: LogoUploadRequest,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    storage: LocalBlobStorage = Depends(get_blob_storage)
) -> Dict[str, Any]:
    """SVG 로고 업로드 (원본 + dark/light 변형)"""
    profile = await get_accessible_profile(db, profile_id, current_user.id)
    return await LogoService(db, storage).upload(profile, request.svg_data)


@router.delete("/{profile_id}/logo")
async def delete_logo(
    profile_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    storage: LocalBlobStorage = Depends(get_blob_storage)
) -> Dict[str, Any]:
    profile = await get_accessible_profile(db, profile_id, current_user.id)
    await LogoService(db, storage).remove(profile)
    return {"success": True}


# ===== 디자인 토큰 =====

@router.put("/{profile_id}/design-tokens")
async def save_design_tokens(
    profile_id: str,
    tokens: DesignTokens,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
) -> Dict[str, Any]:
    """토큰 저장 후 colors/fonts/layout 동기화"""
    profile = await get_accessible_profile(db, profile_id, current_user.id)
    profile = await ProfileService(db).save_design_tokens(profile, tokens)
    return {"profile": profile.to_dict()}


@router.get("/{profile_id}/design-tokens/export", response_class=PlainTextResponse)
async def export_design_tokens(
    profile_id: str,
    format: str = Query("tailwind", pattern="^(tailwind|css|llm)$"),
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
) -> PlainTextResponse:
    profile = await get_accessible_profile(db, profile_id, current_user.id)
    content = ProfileService(db).export_design_tokens(profile, format)
    return PlainTextResponse(content)
