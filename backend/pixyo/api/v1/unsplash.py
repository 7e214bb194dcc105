"""
Unsplash 프록시 API
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query

from pixyo.api.deps import get_current_user, get_unsplash_service
from pixyo.core.security import CurrentUser
from pixyo.models.profile_models import ApiModel
from pixyo.services.unsplash_service import UnsplashService

router = APIRouter()


class DownloadTrackingRequest(ApiModel):
    download_location: Optional[str] = None


@router.get("/search")
async def search_photos(
    query: Optional[str] = Query(None),
    page: str = Query("1"),
    per_page: str = Query("12"),
    orientation: str = Query("squarish"),
    current_user: CurrentUser = Depends(get_current_user),
    unsplash: UnsplashService = Depends(get_unsplash_service)
) -> Dict[str, Any]:
    return await unsplash.search(query, page=page, per_page=per_page, orientation=orientation)


@router.post("/download")
async def track_photo_download(
    request: DownloadTrackingRequest,
    current_user: CurrentUser = Depends(get_current_user),
    unsplash: UnsplashService = Depends(get_unsplash_service)
) -> Dict[str, Any]:
    """사진 사용 시 Unsplash 다운로드 추적 (실패해도 성공 응답)"""
    await unsplash.track_download(request.download_location)
    return {"success": True}
