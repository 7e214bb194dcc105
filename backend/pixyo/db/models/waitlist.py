import uuid

from sqlalchemy import Column, DateTime, String

from pixyo.db.base import Base, utcnow


class WaitlistEntry(Base):
    __tablename__ = "waitlist_entries"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    email = Column(String(320), nullable=False, unique=True, index=True)
    source = Column(String(100), nullable=False, default="landing")
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
