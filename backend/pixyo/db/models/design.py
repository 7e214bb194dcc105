"""
캔버스 디자인 및 에셋 데이터베이스 모델
"""

import uuid
from typing import Any, Dict

from sqlalchemy import JSON, Column, DateTime, Float, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import relationship

from pixyo.db.base import Base, isoformat, utcnow

DEFAULT_DESIGN_NAME = "Unbenannt"


class Design(Base):
    """프로필에 속한 캔버스 구성 하나"""
    __tablename__ = "designs"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    profile_id = Column(
        String(36), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name = Column(String(255), nullable=False, default=DEFAULT_DESIGN_NAME)
    thumbnail_url = Column(Text, nullable=True)

    canvas_state = Column(JSON, nullable=False, default=dict)  # {width, height, aspectRatio, backgroundColor}
    layers = Column(JSON, nullable=False, default=list)
    overlay_opacity = Column(Float, nullable=False, default=0.0)

    content = Column(JSON, nullable=True)  # {tagline, headline, body, buttonText, showButton}
    background_image = Column(JSON, nullable=True)  # {url, source, credit?, transform}
    overlay = Column(JSON, nullable=True)  # {type, mode, intensity}
    product_image = Column(JSON, nullable=True)  # {data, mimeType}

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    profile = relationship("Profile", back_populates="designs")

    __table_args__ = (
        Index('ix_designs_profile_updated', 'profile_id', 'updated_at'),
    )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "profileId": self.profile_id,
            "name": self.name,
            "thumbnailUrl": self.thumbnail_url,
            "canvasState": self.canvas_state or {},
            "layers": self.layers or [],
            "overlayOpacity": self.overlay_opacity or 0.0,
            "content": self.content,
            "backgroundImage": self.background_image,
            "overlay": self.overlay,
            "productImage": self.product_image,
            "createdAt": isoformat(self.created_at),
            "updatedAt": isoformat(self.updated_at),
        }


class Asset(Base):
    """프로필에 저장된 이미지 에셋 (생성 이미지 또는 Unsplash)"""
    __tablename__ = "assets"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    profile_id = Column(
        String(36), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True
    )
    type = Column(String(20), nullable=False)  # GENERATED | UNSPLASH
    url = Column(Text, nullable=False)
    width = Column(Integer, nullable=False, default=0)
    height = Column(Integer, nullable=False, default=0)
    meta = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    profile = relationship("Profile", back_populates="assets")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "profileId": self.profile_id,
            "type": self.type,
            "url": self.url,
            "width": self.width,
            "height": self.height,
            "meta": self.meta,
            "createdAt": isoformat(self.created_at),
        }
