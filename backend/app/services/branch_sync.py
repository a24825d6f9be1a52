"""
수리점 지점 재고 관리 시스템 - 전 지점 일괄 동기화
모든 운영 중 지점 × 모든 활성 카탈로그 부품을 지점 재고에 반영

- 기존 행: 카탈로그 미러 필드 갱신, branch_ 값은 기존 값을 그대로 재기록
- 신규 행: 지점 기본값 + branch_price는 카탈로그 판매가
- 부품 단위 실패는 오류 건수만 올리고 계속 진행
"""

import logging
import uuid
from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any, Awaitable, Callable, Optional

from fastapi.concurrency import run_in_threadpool
from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.models.audit_log import AuditLog
from app.models.branch import Branch
from app.models.branch_part import branch_inventory
from app.models.enums import AuditAction, BranchStatus, JobStatus, SyncChangeType
from app.models.part import Part
from app.models.sync_job import SyncJob
from app.services.access import SYSTEM_ACTOR, Actor
from app.services.branch_inventory import catalog_snapshot, upsert_from_catalog

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int], Awaitable[None]]


@dataclass
class BulkSyncStats:
    """일괄 동기화 결과 요약"""
    total_branches: int = 0
    total_parts: int = 0
    created: int = 0
    updated: int = 0
    errors: int = 0
    started_at: datetime = field(default_factory=datetime.utcnow)
    finished_at: Optional[datetime] = None

    @property
    def duration_seconds(self) -> float:
        end = self.finished_at or datetime.utcnow()
        return round((end - self.started_at).total_seconds(), 2)

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["started_at"] = self.started_at.isoformat()
        data["finished_at"] = self.finished_at.isoformat() if self.finished_at else None
        data["duration_seconds"] = self.duration_seconds
        return data


async def sync_all_branches(
    db: AsyncSession,
    progress: Optional[ProgressCallback] = None,
) -> BulkSyncStats:
    """
    전 지점 재고 일괄 동기화

    지점 하나를 마칠 때마다 progress(0~100)를 호출한다.
    """
    stats = BulkSyncStats()
    actor = SYSTEM_ACTOR.snapshot()

    branch_rows = await db.execute(
        select(Branch.id, Branch.name)
        .where(Branch.status == BranchStatus.ACTIVE, Branch.deleted_at.is_(None))
        .order_by(Branch.name)
    )
    branches = [(row.id, row.name) for row in branch_rows.all()]

    part_result = await db.execute(select(Part).where(Part.is_active.is_(True)))
    parts = [catalog_snapshot(part) for part in part_result.scalars().all()]

    stats.total_branches = len(branches)
    stats.total_parts = len(parts)
    logger.info(f"[BranchSync] 일괄 동기화 시작: 지점 {len(branches)}개, 부품 {len(parts)}개")

    for index, (branch_id, branch_name) in enumerate(branches, start=1):
        logger.info(f"[BranchSync] ({index}/{len(branches)}) {branch_name} 처리 중")
        table = await branch_inventory.ensure_inventory_table(db, branch_id)

        for snapshot in parts:
            try:
                change, _ = await upsert_from_catalog(
                    db, table, snapshot, actor,
                    reassert_branch_fields=True,
                    seed_price=True,
                )
                await db.commit()
            except SQLAlchemyError as e:
                await db.rollback()
                stats.errors += 1
                logger.error(
                    f"[BranchSync] {branch_name} 부품 {snapshot['part_id']} 동기화 실패: {e}"
                )
                continue

            if change == SyncChangeType.CREATED:
                stats.created += 1
            else:
                stats.updated += 1

        if progress is not None:
            await progress(int(index * 100 / len(branches)))

    stats.finished_at = datetime.utcnow()
    logger.info(
        f"[BranchSync] 일괄 동기화 완료: 생성 {stats.created}, 수정 {stats.updated}, "
        f"오류 {stats.errors}, 소요 {stats.duration_seconds}초"
    )
    return stats


# ============================================================================
# 작업(SyncJob) 관리
# ============================================================================

def enqueue_branch_sync(job_id: uuid.UUID) -> str:
    """RQ 큐에 일괄 동기화 작업 등록 (동기 함수)"""
    from rq import Queue
    import redis as sync_redis_lib

    sync_redis_conn = sync_redis_lib.Redis.from_url(settings.REDIS_URL)
    q = Queue(settings.BRANCH_SYNC_QUEUE, connection=sync_redis_conn)
    rq_job = q.enqueue(
        "tasks.branch_sync.run_branch_sync",
        str(job_id),
        job_timeout=settings.BRANCH_SYNC_JOB_TIMEOUT,
    )
    return rq_job.id


async def start_sync_job(db: AsyncSession, actor: Actor) -> SyncJob:
    """
    일괄 동기화 작업 생성 + 큐 등록

    큐 등록에 실패하면 작업을 FAILED로 남긴다.
    """
    job = SyncJob(status=JobStatus.QUEUED, progress=0, created_by=actor.id)
    db.add(job)
    await db.flush()

    db.add(AuditLog(
        user_id=actor.id,
        action=AuditAction.BRANCH_SYNC_START,
        target_type="sync_job",
        target_id=job.id,
    ))
    await db.commit()

    try:
        await run_in_threadpool(enqueue_branch_sync, job.id)
        logger.info(f"[BranchSync] Job {job.id} → RQ 큐 enqueue 완료")
    except Exception as enq_err:
        logger.error(f"[BranchSync] RQ enqueue 실패: {enq_err}")
        job.status = JobStatus.FAILED
        job.error_message = f"작업 큐 등록 실패: {str(enq_err)}"
        job.completed_at = datetime.utcnow()
        await db.commit()

    return job


async def _set_job_progress(db: AsyncSession, job_id: uuid.UUID, progress: int) -> None:
    try:
        await db.execute(update(SyncJob).where(SyncJob.id == job_id).values(progress=progress))
        await db.commit()
    except SQLAlchemyError as e:
        logger.warning(f"[BranchSync] progress 업데이트 실패: {e}")
        await db.rollback()


async def run_sync_job(db: AsyncSession, job_id: Any) -> dict[str, Any]:
    """
    일괄 동기화 작업 실행 (워커 엔트리에서 호출)

    QUEUED → RUNNING → SUCCEEDED/FAILED, 결과 요약은 result_summary에 저장
    """
    job_uuid = job_id if isinstance(job_id, uuid.UUID) else uuid.UUID(str(job_id))
    job = await db.get(SyncJob, job_uuid)
    if job is None:
        logger.error(f"[BranchSync] Job {job_uuid} 없음")
        return {"error": "Job not found"}

    await db.execute(
        update(SyncJob)
        .where(SyncJob.id == job_uuid)
        .values(status=JobStatus.RUNNING, started_at=datetime.utcnow(), progress=0)
    )
    await db.commit()

    async def _progress(value: int) -> None:
        await _set_job_progress(db, job_uuid, value)

    try:
        stats = await sync_all_branches(db, progress=_progress)
    except Exception as e:
        logger.exception(f"[BranchSync] Job {job_uuid} 예외: {e}")
        await db.rollback()
        await db.execute(
            update(SyncJob)
            .where(SyncJob.id == job_uuid)
            .values(status=JobStatus.FAILED, error_message=str(e)[:2000], completed_at=datetime.utcnow())
        )
        await db.commit()
        return {"error": str(e)}

    summary = stats.to_dict()
    await db.execute(
        update(SyncJob)
        .where(SyncJob.id == job_uuid)
        .values(
            status=JobStatus.SUCCEEDED,
            progress=100,
            result_summary=summary,
            completed_at=datetime.utcnow(),
        )
    )
    await db.commit()
    logger.info(f"[BranchSync] Job {job_uuid} 완료: {summary}")
    return summary
