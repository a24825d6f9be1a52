"""
수리점 지점 재고 관리 시스템 - 지점 알림
카탈로그 부품 생성/수정 시 운영 중인 모든 지점에 다국어 알림 생성 + 조회/읽음 처리
"""

import logging
import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import select, insert, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.config import settings
from app.core.events import EventBus, PartChanged, event_bus
from app.core.exceptions import NotFoundError
from app.models.branch import Branch
from app.models.enums import BranchStatus, NotificationType
from app.models.notification import Notification

logger = logging.getLogger(__name__)


MESSAGE_TEMPLATES: dict[NotificationType, dict[str, str]] = {
    NotificationType.PART_CREATE: {
        "tr": "Yeni parça eklendi: {name}",
        "de": "Neues Teil hinzugefügt: {name}",
        "en": "New part added: {name}",
    },
    NotificationType.PART_UPDATE: {
        "tr": "Parça güncellendi: {name}",
        "de": "Teil aktualisiert: {name}",
        "en": "Part updated: {name}",
    },
}


def build_message(notification_type: NotificationType, name: dict[str, Any]) -> dict[str, str]:
    """언어별 메시지 생성 (각 언어는 같은 언어의 부품명 사용)"""
    name = name or {}
    return {
        lang: template.format(name=name.get(lang, ""))
        for lang, template in MESSAGE_TEMPLATES[notification_type].items()
    }


async def emit_part_notifications(event: PartChanged, db: AsyncSession) -> int:
    """
    PartChanged 구독자: 운영 중인 지점마다 알림 1건 생성

    발행자의 커밋 이후 실행되며 실패해도 카탈로그 변경은 유지된다.
    """
    result = await db.execute(
        select(Branch.id).where(Branch.status == BranchStatus.ACTIVE, Branch.deleted_at.is_(None))
    )
    branch_ids = list(result.scalars().all())
    if not branch_ids:
        return 0

    notification_type = NotificationType.PART_CREATE if event.created else NotificationType.PART_UPDATE
    message = build_message(notification_type, event.name)
    now = datetime.utcnow()

    await db.execute(
        insert(Notification),
        [
            {
                "id": uuid.uuid4(),
                "type": notification_type,
                "branch_id": branch_id,
                "part_id": event.part_id,
                "message": message,
                "is_read": False,
                "created_by": event.actor,
                "created_at": now,
                "updated_at": now,
            }
            for branch_id in branch_ids
        ],
    )
    await db.commit()

    logger.info(
        f"[Notify] {notification_type.value} 알림 {len(branch_ids)}건 생성 (part={event.part_id})"
    )
    return len(branch_ids)


def register_notification_handlers(bus: EventBus = event_bus) -> None:
    bus.subscribe(PartChanged, emit_part_notifications)


async def list_unread(
    db: AsyncSession,
    branch_id: uuid.UUID,
    limit: int = settings.NOTIFICATION_UNREAD_LIMIT,
) -> list[Notification]:
    """지점의 읽지 않은 알림 (최신순, 부품 요약 포함)"""
    result = await db.execute(
        select(Notification)
        .options(selectinload(Notification.part))
        .where(Notification.branch_id == branch_id, Notification.is_read.is_(False))
        .order_by(Notification.created_at.desc())
        .limit(limit)
    )
    return list(result.scalars().all())


async def mark_read(db: AsyncSession, branch_id: uuid.UUID, notification_id: uuid.UUID) -> Notification:
    """알림 1건 읽음 처리 (다른 지점 알림이나 이미 읽은 알림은 404)"""
    result = await db.execute(
        select(Notification)
        .options(selectinload(Notification.part))
        .where(
            Notification.id == notification_id,
            Notification.branch_id == branch_id,
            Notification.is_read.is_(False),
        )
    )
    notification = result.scalar_one_or_none()
    if notification is None:
        raise NotFoundError("알림을 찾을 수 없거나 이미 읽음 처리되었습니다", code="NOTIFICATION_NOT_FOUND")

    notification.is_read = True
    await db.flush()
    return notification


async def mark_all_read(db: AsyncSession, branch_id: uuid.UUID) -> int:
    """지점의 읽지 않은 알림 전체 읽음 처리, 처리 건수 반환"""
    result = await db.execute(
        update(Notification)
        .where(Notification.branch_id == branch_id, Notification.is_read.is_(False))
        .values(is_read=True, updated_at=datetime.utcnow())
    )
    logger.info(f"[Notify] 지점 {branch_id} 알림 {result.rowcount}건 읽음 처리")
    return result.rowcount
