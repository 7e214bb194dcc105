"""
공유 데모 프로필 시드 데이터

시드 사용자 소유 프로필은 인증된 모든 사용자가 편집할 수 있다.
"""

import logging
from typing import Any, Dict, List

from sqlalchemy.ext.asyncio import AsyncSession

from pixyo.repositories.profile import ProfileRepository

logger = logging.getLogger(__name__)

_DEFAULT_LAYOUT = {
    "padding": {"top": 60, "right": 60, "bottom": 60, "left": 60},
    "gaps": {"taglineToHeadline": 20, "headlineToBody": 30, "bodyToButton": 40},
    "button": {"radius": 8, "paddingX": 24, "paddingY": 12},
}


def _fonts(family: str, uppercase: bool = False) -> Dict[str, Any]:
    return {
        "headline": {"family": family, "weight": "bold", "uppercase": uppercase},
        "body": {"family": family, "weight": "normal"},
    }


DEMO_PROFILES: List[Dict[str, Any]] = [
    {
        "slug": "hanako-koi",
        "name": "Hanako Koi",
        "logo": "/logos/HanakoKoiLogo.svg",
        "logo_variants": {"dark": "/logos/HanakoKoiLogo-white.svg", "light": "/logos/HanakoKoiLogo-black.svg"},
        "colors": {"dark": "#1a1a1a", "light": "#ffffff", "accent": "#c41e3a"},
        "fonts": _fonts("Inter"),
        "system_prompt": (
            "Japanese koi pond aesthetics, zen garden atmosphere, water reflections, "
            "elegant traditional style, serene nature scenes"
        ),
    },
    {
        "slug": "1001frucht",
        "name": "1001Frucht",
        "logo": "/logos/1001frucht.svg",
        "logo_variants": {"dark": "/logos/1001frucht.svg", "light": "/logos/1001frucht-black.svg"},
        "colors": {"dark": "#1a1a1a", "light": "#ffffff", "accent": "#f5a623"},
        "fonts": _fonts("Cera Pro"),
        "system_prompt": (
            "Fresh fruits, natural ingredients, healthy lifestyle, vibrant colors, "
            "premium dried fruits, exotic spices, mediterranean feeling"
        ),
    },
    {
        "slug": "elforyn",
        "name": "elforyn",
        "logo": "/logos/elforyn.svg",
        "logo_variants": {"dark": "/logos/elforyn.svg", "light": "/logos/elforyn-black.svg"},
        "colors": {"dark": "#1a1a1a", "light": "#ffffff", "accent": "#2e7d32"},
        "fonts": _fonts("Cera Pro", uppercase=True),
        "system_prompt": (
            "Sustainable materials, ivory alternative, eco-friendly luxury, natural textures, "
            "ethical craftsmanship, premium quality, musical instruments"
        ),
    },
    {
        "slug": "canton",
        "name": "Canton",
        "logo": "/logos/canton.svg",
        "logo_variants": {"dark": "/logos/canton-white.svg", "light": "/logos/canton-black.svg"},
        "colors": {"dark": "#1a1a1a", "light": "#ffffff", "accent": "#e63946"},
        "fonts": _fonts("Inter"),
        "system_prompt": (
            "High-end audio equipment, premium speakers, subwoofers, home cinema, "
            "living room ambiance, modern interior design, audiophile lifestyle"
        ),
    },
]


async def seed_demo_profiles(session: AsyncSession, seed_user_id: str) -> Dict[str, int]:
    """
    데모 프로필 생성 또는 갱신 (slug 기준)

    Returns:
        {"created": n, "updated": m}
    """
    repository = ProfileRepository(session)
    created = updated = 0

    for entry in DEMO_PROFILES:
        values = {key: value for key, value in entry.items() if key != "slug"}
        values["layout"] = _DEFAULT_LAYOUT

        existing = await repository.get_by_slug(entry["slug"])
        if existing is None:
            await repository.create(user_id=seed_user_id, slug=entry["slug"], **values)
            created += 1
            logger.info(f"데모 프로필 생성: {entry['slug']}")
        else:
            # 소유자는 유지하고 브랜드 필드만 갱신
            for column, value in values.items():
                setattr(existing, column, value)
            await session.commit()
            updated += 1
            logger.info(f"데모 프로필 갱신: {entry['slug']}")

    return {"created": created, "updated": updated}
