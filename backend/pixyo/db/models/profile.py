"""
브랜드 프로필 데이터베이스 모델
"""

import uuid
from typing import Any, Dict

from sqlalchemy import JSON, Column, DateTime, String, Text
from sqlalchemy.orm import relationship

from pixyo.db.base import Base, isoformat, utcnow


class Profile(Base):
    """브랜드 프로필 (로고, 색상, 폰트, 레이아웃, 시스템 프롬프트)"""
    __tablename__ = "profiles"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    # 실제 사용자 ID 또는 공유 데모 데이터용 시드 ID
    user_id = Column(String(255), nullable=False, index=True)
    slug = Column(String(255), nullable=False, unique=True, index=True)
    name = Column(String(255), nullable=False)

    logo = Column(Text, nullable=False, default="")
    logo_variants = Column(JSON, nullable=True)  # {dark, light}
    colors = Column(JSON, nullable=False, default=dict)  # {dark, light, accent}
    fonts = Column(JSON, nullable=False, default=dict)  # {headline, body}
    layout = Column(JSON, nullable=False, default=dict)  # {padding, gaps, button}
    system_prompt = Column(Text, nullable=False, default="")
    design_tokens = Column(JSON, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    designs = relationship(
        "Design", back_populates="profile", cascade="all, delete-orphan", passive_deletes=True
    )
    assets = relationship(
        "Asset", back_populates="profile", cascade="all, delete-orphan", passive_deletes=True
    )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "userId": self.user_id,
            "slug": self.slug,
            "name": self.name,
            "logo": self.logo or "",
            "logoVariants": self.logo_variants,
            "colors": self.colors or {},
            "fonts": self.fonts or {},
            "layout": self.layout or {},
            "systemPrompt": self.system_prompt or "",
            "designTokens": self.design_tokens,
            "createdAt": isoformat(self.created_at),
            "updatedAt": isoformat(self.updated_at),
        }
