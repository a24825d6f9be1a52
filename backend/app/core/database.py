"""
수리점 지점 재고 관리 시스템 - 데이터베이스 연결 설정
SQLAlchemy 비동기 세션 및 Base 모델 정의
"""

from typing import AsyncGenerator

from sqlalchemy import JSON
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase

from app.core.config import settings


# 비동기 엔진 생성
engine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,  # DEBUG 모드에서만 SQL 로깅
    pool_pre_ping=True,   # 연결 상태 확인
)

# 비동기 세션 팩토리
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)


# JSON 컬럼 타입: PostgreSQL에서는 JSONB, 그 외(테스트용 SQLite)는 JSON
JSONVariant = JSON().with_variant(JSONB(), "postgresql")


class Base(DeclarativeBase):
    """SQLAlchemy Base 모델 클래스 (공용 테이블 전용, 지점별 재고 테이블은 제외)"""
    pass


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    데이터베이스 세션 의존성 주입
    FastAPI의 Depends()에서 사용
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def init_db() -> None:
    """공용 테이블 초기화 (개발용, 지점별 재고 테이블은 최초 접근 시 생성)"""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

