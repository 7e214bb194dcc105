from datetime import datetime, timezone

from sqlalchemy.orm import declarative_base

Base = declarative_base()


def utcnow() -> datetime:
    """타임존 정보가 있는 현재 UTC 시각"""
    return datetime.now(timezone.utc)


def isoformat(value: datetime | None) -> str | None:
    """UTC ISO 문자열 (SQLite가 돌려주는 naive 값은 UTC로 간주)"""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat().replace("+00:00", "Z")

# 모델 import는 pixyo.db.models에서 수행
# 순환 import 방지를 위해 여기서는 import하지 않음
