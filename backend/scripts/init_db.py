#!/usr/bin/env python3
"""
데이터베이스 초기화 스크립트
테이블 생성 후 공유 데모 프로필을 시드 사용자 소유로 등록
"""

import asyncio
import sys
from pathlib import Path

sys.path.append(str(Path(__file__).parent.parent))

from sqlalchemy.exc import SQLAlchemyError

from pixyo.core.config import settings
from pixyo.db.base import Base
from pixyo.db.models import *  # noqa: F401,F403  메타데이터 등록
from pixyo.db.seed import seed_demo_profiles
from pixyo.db.session import Database


async def init_db():
    """데이터베이스 테이블 생성 및 데모 데이터 시드"""
    print("데이터베이스 초기화 시작...")
    print(f"DATABASE_URL: {settings.DATABASE_URL}")

    database = Database(settings.DATABASE_URL, echo=True)
    try:
        # 모든 테이블 생성
        async with database.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

        print("✅ 데이터베이스 테이블 생성 완료")

        async with database.session_factory() as session:
            result = await seed_demo_profiles(session, settings.SEED_USER_ID)

        print(f"✅ 데모 프로필 시드 완료: 생성 {result['created']}개, 갱신 {result['updated']}개")

    except SQLAlchemyError as e:
        print(f"❌ 데이터베이스 초기화 실패: {e}")
        sys.exit(1)
    finally:
        await database.dispose()


if __name__ == "__main__":
    asyncio.run(init_db())
