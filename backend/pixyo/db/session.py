"""
데이터베이스 엔진/세션 관리

엔진은 모듈 import 시점이 아니라 처음 사용할 때 생성된다.
"""

from typing import AsyncGenerator, Optional

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from pixyo.core.config import settings


class Database:
    """비동기 엔진과 세션 팩토리 보관"""

    def __init__(self, url: str, echo: bool = False, **engine_kwargs):
        self.url = url
        self.echo = echo
        self.engine_kwargs = engine_kwargs
        self._engine: Optional[AsyncEngine] = None
        self._session_factory: Optional[async_sessionmaker[AsyncSession]] = None

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            self._engine = create_async_engine(self.url, echo=self.echo, **self.engine_kwargs)
        return self._engine

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        if self._session_factory is None:
            self._session_factory = async_sessionmaker(
                self.engine,
                class_=AsyncSession,
                expire_on_commit=False,
            )
        return self._session_factory

    async def dispose(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._session_factory = None


_database: Optional[Database] = None


def get_database() -> Database:
    """설정 기반 Database 인스턴스 반환 (최초 호출 시 생성)"""
    global _database
    if _database is None:
        engine_kwargs = {"pool_pre_ping": True}
        if settings.DATABASE_URL.startswith("postgresql"):
            engine_kwargs.update(
                pool_size=settings.DB_POOL_SIZE,
                max_overflow=settings.DB_MAX_OVERFLOW,
            )
        _database = Database(settings.DATABASE_URL, echo=settings.DEBUG, **engine_kwargs)
    return _database


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """요청 세션보다 오래 사는 작업(사용량 기록 등)을 위한 세션 팩토리"""
    return get_database().session_factory


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with get_database().session_factory() as session:
        try:
            yield session
        finally:
            await session.close()
