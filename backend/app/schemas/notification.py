"""
수리점 지점 재고 관리 시스템 - 알림 스키마
"""

from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel

from app.models.enums import NotificationType
from app.models.notification import Notification


class NotificationPartSummary(BaseModel):
    """알림 대상 부품 요약"""
    id: UUID
    name: dict[str, Any]
    category: str


class NotificationResponse(BaseModel):
    """알림 응답"""
    id: UUID
    type: NotificationType
    branch_id: UUID
    part_id: UUID
    part: Optional[NotificationPartSummary] = None
    message: dict[str, Any]
    is_read: bool
    created_by: Optional[dict[str, Any]] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_notification(cls, notification: Notification) -> "NotificationResponse":
        """part 관계는 selectinload 된 상태여야 함"""
        part = notification.part
        return cls(
            id=notification.id,
            type=notification.type,
            branch_id=notification.branch_id,
            part_id=notification.part_id,
            part=NotificationPartSummary(id=part.id, name=part.name, category=part.category) if part else None,
            message=notification.message,
            is_read=notification.is_read,
            created_by=notification.created_by,
            created_at=notification.created_at,
            updated_at=notification.updated_at,
        )
