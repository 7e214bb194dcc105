"""
API v1 메인 라우터
"""

from fastapi import APIRouter

from pixyo.api.v1 import (
    admin,
    assets,
    brand_design,
    designs,
    generation,
    health,
    product_scenes,
    profiles,
    tracking,
    unsplash,
    usage,
    waitlist,
)

api_router = APIRouter()

# 각 기능별 라우터 포함
api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(profiles.router, prefix="/profiles", tags=["profiles"])
api_router.include_router(designs.router, prefix="/designs", tags=["designs"])
api_router.include_router(assets.router, prefix="/assets", tags=["assets"])
api_router.include_router(generation.router, tags=["generation"])
api_router.include_router(product_scenes.router, tags=["product-scenes"])
api_router.include_router(brand_design.router, prefix="/brand-design", tags=["brand-design"])
api_router.include_router(tracking.router, tags=["tracking"])
api_router.include_router(usage.router, prefix="/usage", tags=["usage"])
api_router.include_router(admin.router, prefix="/admin", tags=["admin"])
api_router.include_router(waitlist.router, prefix="/waitlist", tags=["waitlist"])
api_router.include_router(unsplash.router, prefix="/unsplash", tags=["unsplash"])
