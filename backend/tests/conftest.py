"""
테스트 공통 설정
테스트마다 새 SQLite(aiosqlite) DB를 만들고 get_db를 교체한다.
"""

import os

# app 모듈 임포트 전에 설정 (모듈 수준 엔진은 연결하지 않음)
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./bootstrap-unused.db")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.core.database import Base, get_db
from app.main import app
from app.models.branch_part import branch_inventory
from app.models.enums import UserRole
from app.services.access import Actor

from factories import create_branch, create_user


@pytest.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    branch_inventory.clear()
    yield engine
    branch_inventory.clear()
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory):
    async def _override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = _override_get_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
async def branch(db):
    return await create_branch(db, name="Kadikoy")


@pytest.fixture
async def other_branch(db):
    return await create_branch(db, name="Besiktas")


@pytest.fixture
async def admin(db):
    return await create_user(db, UserRole.ADMIN, email="admin@example.com")


@pytest.fixture
async def staff(db, branch):
    return await create_user(db, UserRole.BRANCH_STAFF, branch=branch, email="staff@example.com")


@pytest.fixture
def admin_actor(admin):
    return Actor.from_user(admin)


@pytest.fixture
def staff_actor(staff):
    return Actor.from_user(staff)
