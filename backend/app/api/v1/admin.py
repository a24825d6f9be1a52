"""
수리점 지점 재고 관리 시스템 - 관리자 API
전 지점 재고 일괄 동기화 작업 실행/조회
"""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.api.deps import get_central_user
from app.models.user import User
from app.models.sync_job import SyncJob
from app.schemas.common import SuccessResponse, ResponseMeta
from app.schemas.sync_job import SyncJobResponse, SyncJobListResponse
from app.services.access import Actor
from app.services.branch_sync import start_sync_job

router = APIRouter()


@router.post(
    "/sync-branch-parts",
    response_model=SuccessResponse[SyncJobResponse],
    status_code=status.HTTP_202_ACCEPTED,
)
async def trigger_branch_sync(
    current_user: User = Depends(get_central_user),
    db: AsyncSession = Depends(get_db),
):
    """
    전 지점 재고 일괄 동기화 실행 (관리자/본사 직원)

    작업을 큐에 등록하고 즉시 반환, 진행 상황은 /sync-jobs/{id}로 조회
    """
    job = await start_sync_job(db, Actor.from_user(current_user))
    return SuccessResponse(data=SyncJobResponse.model_validate(job))


@router.get("/sync-jobs", response_model=SuccessResponse[SyncJobListResponse])
async def list_sync_jobs(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    current_user: User = Depends(get_central_user),
    db: AsyncSession = Depends(get_db),
):
    """일괄 동기화 작업 내역 (최신순)"""
    total = (await db.execute(select(func.count(SyncJob.id)))).scalar()

    offset = (page - 1) * page_size
    result = await db.execute(
        select(SyncJob).order_by(SyncJob.created_at.desc()).offset(offset).limit(page_size)
    )
    jobs = result.scalars().all()

    return SuccessResponse(
        data=SyncJobListResponse(
            jobs=[SyncJobResponse.model_validate(j) for j in jobs],
            total=total,
        ),
        meta=ResponseMeta(total=total, page=page, page_size=page_size, has_next=offset + len(jobs) < total),
    )


@router.get("/sync-jobs/{job_id}", response_model=SuccessResponse[SyncJobResponse])
async def get_sync_job(
    job_id: UUID,
    current_user: User = Depends(get_central_user),
    db: AsyncSession = Depends(get_db),
):
    """일괄 동기화 작업 상태 조회"""
    job = await db.get(SyncJob, job_id)
    if job is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"code": "JOB_NOT_FOUND", "message": "작업을 찾을 수 없습니다"},
        )
    return SuccessResponse(data=SyncJobResponse.model_validate(job))
