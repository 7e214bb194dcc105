"""
사용량 원장 및 생성 로그 데이터베이스 모델
"""

import uuid
from typing import Any, Dict

from sqlalchemy import JSON, Boolean, Column, DateTime, Float, Index, String, Text

from pixyo.db.base import Base, isoformat, utcnow


class UsageLog(Base):
    """과금 대상 AI 작업 비용 이벤트 (추가 전용)"""
    __tablename__ = "usage_logs"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(255), nullable=False)
    user_email = Column(String(255), nullable=False, default="unknown")
    operation = Column(String(100), nullable=False)
    cost_eur = Column(Float, nullable=False)
    model = Column(String(100), nullable=False)
    meta = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    __table_args__ = (
        Index('ix_usage_logs_user_created', 'user_id', 'created_at'),
        Index('ix_usage_logs_created_at', 'created_at'),
    )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "userId": self.user_id,
            "userEmail": self.user_email,
            "operation": self.operation,
            "costEur": self.cost_eur,
            "model": self.model,
            "createdAt": isoformat(self.created_at),
        }


class GenerationLog(Base):
    """AI 생성 호출 1건 (다운로드 여부 추적)"""
    __tablename__ = "generation_logs"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(255), nullable=False, index=True)
    tool = Column(String(50), nullable=False)
    prompt = Column(Text, nullable=False)
    prompt_source = Column(String(20), nullable=False)  # ai-improved | user-direct
    meta = Column(JSON, nullable=True)
    downloaded = Column(Boolean, nullable=False, default=False)
    downloaded_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    __table_args__ = (
        Index('ix_generation_logs_created_at', 'created_at'),
        Index('ix_generation_logs_tool', 'tool'),
    )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "userId": self.user_id,
            "tool": self.tool,
            "prompt": self.prompt,
            "promptSource": self.prompt_source,
            "downloaded": bool(self.downloaded),
            "downloadedAt": isoformat(self.downloaded_at),
            "meta": self.meta,
            "createdAt": isoformat(self.created_at),
        }
