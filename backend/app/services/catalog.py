"""
수리점 지점 재고 관리 시스템 - 카탈로그 부품 서비스
부품 생성/수정/비활성화 후 커밋이 끝나면 PartChanged 이벤트 발행
"""

import logging
import uuid
from decimal import Decimal
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.events import PartChanged, event_bus
from app.core.exceptions import ConflictError, NotFoundError
from app.models.audit_log import AuditLog
from app.models.enums import AuditAction
from app.models.part import Part
from app.schemas.part import PartCreate, PartUpdate
from app.services.access import Actor

logger = logging.getLogger(__name__)

MONEY_FIELDS = ("cost", "price", "service_fee")


def _part_values(data: dict[str, Any]) -> dict[str, Any]:
    """요청 dict → Part 컬럼 값 (금액은 *_amount/*_currency로 분리)"""
    values = dict(data)
    for key in MONEY_FIELDS:
        money = values.pop(key, None)
        if money is None:
            continue
        values[f"{key}_amount"] = money["amount"]
        values[f"{key}_currency"] = getattr(money["currency"], "value", money["currency"])
    if values.get("compatible_with") is not None:
        values["compatible_with"] = [str(v) for v in values["compatible_with"]]
    return values


async def get_part_or_404(db: AsyncSession, part_id: uuid.UUID) -> Part:
    part = await db.get(Part, part_id)
    if part is None:
        raise NotFoundError("카탈로그 부품을 찾을 수 없습니다", code="PART_NOT_FOUND")
    return part


async def _commit(db: AsyncSession) -> None:
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ConflictError("이미 등록된 바코드 또는 QR 코드입니다", code="PART_DUPLICATE")


async def _publish(db: AsyncSession, part: Part, created: bool) -> None:
    """커밋 이후 이벤트 발행, 구독자 롤백에 대비해 부품을 다시 읽음"""
    event = PartChanged(
        part_id=part.id,
        created=created,
        name=dict(part.name),
        actor=part.updated_by or part.created_by,
    )
    await event_bus.publish(event, db)
    await db.refresh(part)


async def create_part(db: AsyncSession, actor: Actor, data: PartCreate) -> Part:
    """카탈로그 부품 생성"""
    part = Part(**_part_values(data.model_dump(mode="python")), created_by=actor.snapshot())
    db.add(part)
    try:
        await db.flush()
    except IntegrityError:
        await db.rollback()
        raise ConflictError("이미 등록된 바코드 또는 QR 코드입니다", code="PART_DUPLICATE")

    db.add(AuditLog(
        user_id=actor.id,
        action=AuditAction.PART_CREATE,
        target_type="part",
        target_id=part.id,
        after_data=data.model_dump(mode="json"),
    ))
    await _commit(db)

    logger.info(f"[Catalog] 부품 생성: {part.id} ({part.name.get('en')})")
    await _publish(db, part, created=True)
    return part


async def update_part(db: AsyncSession, actor: Actor, part_id: uuid.UUID, data: PartUpdate) -> Part:
    """카탈로그 부품 수정 (원가/판매가 변경 시 마진 자동 재계산)"""
    part = await get_part_or_404(db, part_id)

    update_fields = data.model_dump(exclude_unset=True, mode="python")
    values = _part_values(update_fields)
    before_data = {key: _jsonable(getattr(part, key)) for key in values}

    for key, value in values.items():
        setattr(part, key, value)
    part.updated_by = actor.snapshot()

    db.add(AuditLog(
        user_id=actor.id,
        action=AuditAction.PART_UPDATE,
        target_type="part",
        target_id=part.id,
        before_data=before_data,
        after_data=data.model_dump(exclude_unset=True, mode="json"),
    ))
    await _commit(db)

    logger.info(f"[Catalog] 부품 수정: {part.id}")
    await _publish(db, part, created=False)
    return part


async def deactivate_part(db: AsyncSession, actor: Actor, part_id: uuid.UUID) -> Part:
    """카탈로그 부품 비활성화 (삭제 대신)"""
    part = await get_part_or_404(db, part_id)
    part.is_active = False
    part.updated_by = actor.snapshot()

    db.add(AuditLog(
        user_id=actor.id,
        action=AuditAction.PART_DEACTIVATE,
        target_type="part",
        target_id=part.id,
        before_data={"is_active": True},
        after_data={"is_active": False},
    ))
    await _commit(db)

    logger.info(f"[Catalog] 부품 비활성화: {part.id}")
    await _publish(db, part, created=False)
    return part


def _jsonable(value: Any) -> Any:
    if isinstance(value, uuid.UUID):
        return str(value)
    if isinstance(value, Decimal):
        return str(value)
    return value
