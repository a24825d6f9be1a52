"""
수리점 지점 재고 관리 시스템 - Notification 모델
카탈로그 부품 변경 시 지점별로 생성되는 알림
"""

import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Uuid, Enum as SQLEnum, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base, JSONVariant
from app.models.enums import NotificationType


class Notification(Base):
    """지점 알림 테이블"""

    __tablename__ = "notifications"

    # 기본 키
    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4
    )

    type: Mapped[NotificationType] = mapped_column(
        SQLEnum(NotificationType, name="notification_type"),
        nullable=False,
        comment="알림 타입: PART_CREATE, PART_UPDATE"
    )

    # 대상
    branch_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("branches.id", ondelete="CASCADE"),
        nullable=False,
        comment="수신 지점 ID"
    )
    part_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("parts.id", ondelete="CASCADE"),
        nullable=False,
        comment="대상 부품 ID"
    )

    # 내용
    message: Mapped[dict] = mapped_column(
        JSONVariant,
        nullable=False,
        comment="다국어 메시지 {tr, de, en}"
    )
    is_read: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
        comment="읽음 여부"
    )
    created_by: Mapped[dict | None] = mapped_column(
        JSONVariant,
        nullable=True,
        comment="작업자 스냅샷"
    )

    # 타임스탬프
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        nullable=False,
        comment="생성 일시"
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False,
        comment="수정 일시"
    )

    # 관계
    part = relationship("Part", lazy="raise")

    __table_args__ = (
        Index("ix_notifications_branch_read", "branch_id", "is_read"),
        Index("ix_notifications_created", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Notification(id={self.id}, type={self.type}, branch={self.branch_id})>"
