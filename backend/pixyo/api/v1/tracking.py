"""
다운로드 추적 API
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends
from pydantic import Field
from sqlalchemy.ext.asyncio import AsyncSession

from pixyo.api.deps import get_current_user
from pixyo.core.security import CurrentUser
from pixyo.db.session import get_db
from pixyo.models.profile_models import ApiModel
from pixyo.repositories.usage import GenerationLogRepository

router = APIRouter()


class TrackDownloadRequest(ApiModel):
    generation_log_id: str = Field(..., min_length=1)


@router.post("/track-download")
async def track_download(
    request: TrackDownloadRequest,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
) -> Dict[str, Any]:
    """
    생성 결과 다운로드 표시

    본인 로그만, 그리고 한 번만 표시된다. 두 번째 호출은 updated=0.
    """
    updated = await GenerationLogRepository(db).mark_downloaded(
        request.generation_log_id, current_user.id
    )
    return {"success": True, "updated": updated}
