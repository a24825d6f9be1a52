"""
수리점 지점 재고 관리 시스템 - 전 지점 재고 일괄 동기화 Worker
SyncJob 상태 갱신 + 지점 × 카탈로그 부품 동기화 (app.services.branch_sync 사용)
"""

import asyncio
import logging

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.core.config import settings
from app.services.branch_sync import run_sync_job

logger = logging.getLogger(__name__)


async def _run(job_id: str) -> dict:
    # RQ 작업마다 이벤트 루프가 새로 만들어지므로 엔진도 작업 단위로 생성
    engine = create_async_engine(settings.DATABASE_URL, pool_pre_ping=True)
    SessionLocal = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    try:
        async with SessionLocal() as session:
            return await run_sync_job(session, job_id)
    finally:
        await engine.dispose()


def run_branch_sync(job_id: str) -> dict:
    """
    일괄 동기화 태스크 (RQ 엔트리)

    1. Job 상태 → RUNNING
    2. 운영 중 지점마다 활성 부품 전체 동기화 (지점 단위 진행률 갱신)
    3. 결과 요약 저장 후 SUCCEEDED, 예외 시 FAILED
    """
    logger.info(f"[Worker] 일괄 동기화 Job {job_id} 시작")
    return asyncio.run(_run(job_id))
