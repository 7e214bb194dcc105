"""
캔버스 디자인 API

디자인 접근 권한은 소유 프로필의 소유자 기준으로 검사한다.
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, File, Query, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from pixyo.api.deps import get_blob_storage, get_current_user
from pixyo.core.exceptions import ValidationError
from pixyo.core.security import CurrentUser
from pixyo.db.session import get_db
from pixyo.models.design_models import (
    BackgroundUploadRequest,
    DesignCreateRequest,
    DesignUpdateRequest,
)
from pixyo.services.access_guard import get_accessible_design, get_accessible_profile
from pixyo.services.blob_storage import LocalBlobStorage
from pixyo.services.design_service import DesignService

router = APIRouter()


@router.get("")
async def list_designs(
    profile_id: Optional[str] = Query(None, alias="profileId"),
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
) -> Dict[str, Any]:
    """프로필의 디자인 목록 (최근 수정 순)"""
    if not profile_id:
        raise ValidationError("profileId is required", field="profileId")

    profile = await get_accessible_profile(db, profile_id, current_user.id)
    designs = await DesignService(db).list_designs(profile.id)
    return {"designs": [design.to_dict() for design in designs]}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_design(
    request: DesignCreateRequest,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
) -> Dict[str, Any]:
    profile = await get_accessible_profile(db, request.profile_id, current_user.id)
    design = await DesignService(db).create_design(profile.id, request.to_payload())
    return {"design": design.to_dict()}


@router.get("/{design_id}")
async def get_design(
    design_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
) -> Dict[str, Any]:
    design = await get_accessible_design(db, design_id, current_user.id)
    return {"design": design.to_dict()}


@router.put("/{design_id}")
async def update_design(
    design_id: str,
    request: DesignUpdateRequest,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
) -> Dict[str, Any]:
    design = await get_accessible_design(db, design_id, current_user.id)
    design = await DesignService(db).update_design(design, request.to_payload())
    return {"design": design.to_dict()}


@router.delete("/{design_id}")
async def delete_design(
    design_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    storage: LocalBlobStorage = Depends(get_blob_storage)
) -> Dict[str, Any]:
    design = await get_accessible_design(db, design_id, current_user.id)
    await DesignService(db, storage).delete_design(design)
    return {"success": True}


@router.post("/{design_id}/duplicate", status_code=status.HTTP_201_CREATED)
async def duplicate_design(
    design_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
) -> Dict[str, Any]:
    """복제 (썸네일 제외, 이름에 "(Kopie)" 추가)"""
    design = await get_accessible_design(db, design_id, current_user.id)
    duplicate = await DesignService(db).duplicate_design(design)
    return {"design": duplicate.to_dict()}


# ===== 파일 업로드 =====

@router.post("/{design_id}/thumbnail")
async def upload_thumbnail(
    design_id: str,
    thumbnail: Optional[UploadFile] = File(None),
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    storage: LocalBlobStorage = Depends(get_blob_storage)
) -> Dict[str, Any]:
    """썸네일 업로드 (JPEG로 변환, 이전 썸네일 삭제)"""
    design = await get_accessible_design(db, design_id, current_user.id)
    if thumbnail is None:
        raise ValidationError("No thumbnail provided", field="thumbnail")

    data = await thumbnail.read()
    design = await DesignService(db, storage).upload_thumbnail(design, data)
    return {"thumbnailUrl": design.thumbnail_url, "design": design.to_dict()}


@router.post("/{design_id}/background")
async def upload_background(
    design_id: str,
    request: BackgroundUploadRequest,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    storage: LocalBlobStorage = Depends(get_blob_storage)
) -> Dict[str, Any]:
    """배경 이미지(base64 또는 data URL) 업로드"""
    design = await get_accessible_design(db, design_id, current_user.id)
    return await DesignService(db, storage).upload_background(
        design,
        image_data=request.image_data,
        source=request.source.value,
        mime_type=request.mime_type,
    )
