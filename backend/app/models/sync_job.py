"""
수리점 지점 재고 관리 시스템 - SyncJob 모델
전 지점 재고 일괄 동기화 작업 상태 및 결과 관리
"""

import uuid
from datetime import datetime

from sqlalchemy import Integer, DateTime, Text, ForeignKey, Uuid, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base, JSONVariant
from app.models.enums import JobStatus


class SyncJob(Base):
    """일괄 동기화 작업 테이블"""

    __tablename__ = "sync_jobs"

    # 기본 키
    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4
    )

    # 작업 상태
    status: Mapped[JobStatus] = mapped_column(
        SQLEnum(JobStatus, name="job_status"),
        default=JobStatus.QUEUED,
        nullable=False,
        comment="작업 상태: queued, running, succeeded, failed"
    )
    progress: Mapped[int] = mapped_column(
        Integer,
        default=0,
        nullable=False,
        comment="진행률 (0-100, 지점 단위로 갱신)"
    )

    # 생성자 정보
    created_by: Mapped[uuid.UUID | None] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        comment="요청자 ID"
    )

    # 결과 정보
    result_summary: Mapped[dict | None] = mapped_column(
        JSONVariant,
        nullable=True,
        comment="결과 요약 (지점/부품 수, 생성/수정/오류 건수, 소요 시간)"
    )
    error_message: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
        comment="오류 메시지 (실패 시)"
    )

    # 타임스탬프
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        nullable=False,
        comment="생성 일시"
    )
    started_at: Mapped[datetime | None] = mapped_column(
        DateTime,
        nullable=True,
        comment="시작 일시"
    )
    completed_at: Mapped[datetime | None] = mapped_column(
        DateTime,
        nullable=True,
        comment="완료 일시"
    )

    def __repr__(self) -> str:
        return f"<SyncJob(id={self.id}, status={self.status}, progress={self.progress})>"
