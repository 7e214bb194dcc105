"""
프로필 에셋 API
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from pixyo.api.deps import get_blob_storage, get_current_user
from pixyo.core.exceptions import ValidationError
from pixyo.core.security import CurrentUser
from pixyo.db.session import get_db
from pixyo.models.design_models import AssetCreateRequest, ImageSource
from pixyo.services.access_guard import get_accessible_asset, get_accessible_profile
from pixyo.services.asset_service import AssetService
from pixyo.services.blob_storage import LocalBlobStorage

router = APIRouter()


@router.get("")
async def list_assets(
    profile_id: Optional[str] = Query(None, alias="profileId"),
    asset_type: Optional[ImageSource] = Query(None, alias="type"),
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
) -> Dict[str, Any]:
    """프로필의 에셋 목록 (최근 생성 순)"""
    if not profile_id:
        raise ValidationError("profileId is required", field="profileId")

    profile = await get_accessible_profile(db, profile_id, current_user.id)
    assets = await AssetService(db).list_assets(profile.id, asset_type.value if asset_type else None)
    return {"assets": [asset.to_dict() for asset in assets]}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_asset(
    request: AssetCreateRequest,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    storage: LocalBlobStorage = Depends(get_blob_storage)
) -> Dict[str, Any]:
    profile = await get_accessible_profile(db, request.profile_id, current_user.id)
    asset = await AssetService(db, storage).create_asset(profile.id, request.to_payload())
    return {"asset": asset.to_dict()}


@router.delete("/{asset_id}")
async def delete_asset(
    asset_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    storage: LocalBlobStorage = Depends(get_blob_storage)
) -> Dict[str, bool]:
    asset = await get_accessible_asset(db, asset_id, current_user.id)
    await AssetService(db, storage).delete_asset(asset)
    return {"success": True}
