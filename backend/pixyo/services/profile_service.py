"""
브랜드 프로필 서비스
"""

import logging
import re
import time
import uuid
from typing import Any, Dict, Optional

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from pixyo.brand_design.derive import derive_profile_fields
from pixyo.brand_design.exporters import EXPORT_FORMATS, generate_llm_context
from pixyo.brand_design.migrate import migrate_from_profile
from pixyo.brand_design.tokens import DesignTokens
from pixyo.db.models.profile import Profile
from pixyo.repositories.profile import ProfileRepository

logger = logging.getLogger(__name__)

_TRANSLITERATIONS = (("ä", "ae"), ("ö", "oe"), ("ü", "ue"), ("ß", "ss"))
_NON_ALPHANUMERIC = re.compile(r"[^a-z0-9]+")
FALLBACK_SLUG = "profil"

# API 필드명 -> 컬럼명
PROFILE_FIELDS = {
    "name": "name",
    "logo": "logo",
    "logoVariants": "logo_variants",
    "colors": "colors",
    "fonts": "fonts",
    "layout": "layout",
    "systemPrompt": "system_prompt",
    "userId": "user_id",
}
NULLABLE_FIELDS = {"logoVariants", "designTokens"}


def generate_slug(name: str) -> str:
    """이름에서 URL용 slug 생성 (움라우트 변환, 영숫자 외 문자는 '-')"""
    slug = name.lower()
    for source, target in _TRANSLITERATIONS:
        slug = slug.replace(source, target)
    return _NON_ALPHANUMERIC.sub("-", slug).strip("-")


def _timestamp_suffix(slug: str) -> str:
    return f"{slug}-{int(time.time() * 1000)}"


class ProfileService:
    """프로필 생성/수정/토큰 관리"""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.repository = ProfileRepository(session)

    async def ensure_unique_slug(self, slug: str) -> str:
        """이미 사용 중이면 타임스탬프 접미사 추가"""
        if await self.repository.slug_exists(slug):
            return _timestamp_suffix(slug)
        return slug

    async def create_profile(self, owner_id: str, data: Dict[str, Any]) -> Profile:
        """
        프로필 생성

        Args:
            owner_id: 소유자 ID (관리자는 임의 지정 가능)
            data: camelCase 입력 (name, slug?, logo, colors, fonts, layout, systemPrompt)
        """
        base_slug = data.get("slug") or generate_slug(data["name"]) or FALLBACK_SLUG
        slug = await self.ensure_unique_slug(base_slug)

        values = {
            column: data[field]
            for field, column in PROFILE_FIELDS.items()
            if field in data and field != "userId"
        }
        values.setdefault("logo", "")
        values.setdefault("system_prompt", "")

        try:
            profile = await self.repository.create(user_id=owner_id, slug=slug, **values)
        except IntegrityError:
            # 확인과 생성 사이에 같은 slug가 등록된 경우
            await self.session.rollback()
            slug = f"{_timestamp_suffix(base_slug)}-{uuid.uuid4().hex[:4]}"
            logger.warning(f"slug 충돌, 재시도: {slug}")
            profile = await self.repository.create(user_id=owner_id, slug=slug, **values)

        logger.info(f"프로필 생성: id={profile.id}, slug={profile.slug}, owner={owner_id}")
        return profile

    async def update_profile(self, profile: Profile, changes: Dict[str, Any]) -> Profile:
        """전달된 필드만 변경 (userId는 관리자 경로에서만 전달됨)"""
        for field, value in changes.items():
            column = PROFILE_FIELDS.get(field)
            if not column or (value is None and field not in NULLABLE_FIELDS):
                continue
            setattr(profile, column, value)
        if "designTokens" in changes:
            profile.design_tokens = changes["designTokens"]

        await self.session.commit()
        await self.session.refresh(profile)
        return profile

    async def delete_profile(self, profile: Profile) -> None:
        await self.repository.delete(profile.id)
        logger.info(f"프로필 삭제: id={profile.id}")

    def get_design_tokens(self, profile: Profile) -> DesignTokens:
        """저장된 토큰 (없거나 손상된 경우 프로필 필드에서 생성)"""
        if profile.design_tokens:
            try:
                return DesignTokens.model_validate(profile.design_tokens)
            except PydanticValidationError as e:
                logger.warning(
                    f"저장된 디자인 토큰 파싱 실패, 프로필 필드에서 생성: profile={profile.id} - {e.error_count()}개 오류"
                )
        return migrate_from_profile(
            colors=profile.colors,
            fonts=profile.fonts,
            layout=profile.layout,
            logo=profile.logo,
            logo_variants=profile.logo_variants,
        )

    async def save_design_tokens(self, profile: Profile, tokens: DesignTokens) -> Profile:
        """토큰 저장 및 기존 필드(colors/fonts/layout/logo) 동기화"""
        derived = derive_profile_fields(tokens)

        profile.design_tokens = tokens.to_document()
        profile.colors = derived["colors"]
        profile.fonts = derived["fonts"]
        profile.layout = derived["layout"]
        if "logo" in derived:
            profile.logo = derived["logo"]
        if "logoVariants" in derived:
            profile.logo_variants = derived["logoVariants"]

        await self.session.commit()
        await self.session.refresh(profile)
        return profile

    def export_design_tokens(self, profile: Profile, export_format: str) -> str:
        """tailwind | css | llm (llm은 브랜드 이름 포함)"""
        tokens = self.get_design_tokens(profile)
        if export_format == "llm":
            return generate_llm_context(tokens, profile.name)
        return EXPORT_FORMATS[export_format](tokens)
