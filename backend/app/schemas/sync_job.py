"""
수리점 지점 재고 관리 시스템 - 일괄 동기화 작업 스키마
"""

from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel

from app.models.enums import JobStatus


class SyncJobResponse(BaseModel):
    """일괄 동기화 작업 응답"""
    id: UUID
    status: JobStatus
    progress: int
    created_by: Optional[UUID] = None
    result_summary: Optional[dict[str, Any]] = None
    error_message: Optional[str] = None
    created_at: datetime
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class SyncJobListResponse(BaseModel):
    """일괄 동기화 작업 목록"""
    jobs: list[SyncJobResponse]
    total: int
