"""
대기자 명단 API
"""

import re
from typing import Any, Dict

from fastapi import APIRouter, Depends
from pydantic import field_validator
from pydantic_core import PydanticCustomError
from sqlalchemy.ext.asyncio import AsyncSession

from pixyo.db.session import get_db
from pixyo.models.profile_models import ApiModel
from pixyo.repositories.waitlist import WaitlistRepository

router = APIRouter()

_EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


class WaitlistRequest(ApiModel):
    email: str
    source: str = "landing"

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: str) -> str:
        value = value.strip()
        if not _EMAIL_PATTERN.match(value):
            raise PydanticCustomError("email", "Bitte gib eine gültige E-Mail-Adresse ein.")
        return value


@router.post("")
async def join_waitlist(
    request: WaitlistRequest,
    db: AsyncSession = Depends(get_db)
) -> Dict[str, Any]:
    """이미 등록된 이메일이면 아무것도 바꾸지 않는다"""
    await WaitlistRepository(db).add_if_absent(request.email, request.source)
    return {"success": True}
