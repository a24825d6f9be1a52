"""
수리점 지점 재고 관리 시스템 - 지점 재고 최신 여부 판단
브랜드 단위로 카탈로그 최종 수정 시각과 지점 재고 최종 수정 시각을 비교

지점 재고의 어떤 행이든 수정되면 최신으로 간주되므로
일부 부품만 동기화된 경우에도 needs_update=False가 될 수 있다.
"""

import logging
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import InvalidRequestError
from app.models.branch_part import branch_inventory
from app.models.part import Part
from app.schemas.branch_part import InventoryStatusResponse
from app.services.access import Actor, ensure_branch_access, parse_uuid, require_branch

logger = logging.getLogger(__name__)


async def get_inventory_status(
    db: AsyncSession,
    actor: Actor,
    branch_id: Any,
    brand_id: Any,
) -> InventoryStatusResponse:
    """
    브랜드 재고 동기화 필요 여부

    - 지점 재고에 해당 브랜드 부품이 하나도 없으면 True
    - 활성 카탈로그 부품의 최종 수정이 지점 재고 최종 수정보다 늦으면 True
    """
    if not branch_id or not brand_id:
        raise InvalidRequestError("branch_id와 brand_id가 필요합니다")
    branch_uuid = parse_uuid(branch_id, "branch_id")
    brand_uuid = parse_uuid(brand_id, "brand_id")
    ensure_branch_access(actor, branch_uuid)
    await require_branch(db, branch_uuid)
    table = await branch_inventory.ensure_inventory_table(db, branch_uuid)

    last_part_update = (await db.execute(
        select(Part.updated_at)
        .where(Part.brand_id == brand_uuid, Part.is_active.is_(True))
        .order_by(Part.updated_at.desc())
        .limit(1)
    )).scalar_one_or_none()

    brand_part_ids = select(Part.id).where(Part.brand_id == brand_uuid)
    last_inventory_update = (await db.execute(
        select(table.c.updated_at)
        .where(table.c.part_id.in_(brand_part_ids))
        .order_by(table.c.updated_at.desc())
        .limit(1)
    )).scalar_one_or_none()

    if last_inventory_update is None:
        needs_update = True
    else:
        needs_update = last_part_update is not None and last_part_update > last_inventory_update

    logger.debug(
        f"[InventoryStatus] branch={branch_uuid}, brand={brand_uuid}, "
        f"part={last_part_update}, inventory={last_inventory_update}, needs_update={needs_update}"
    )
    return InventoryStatusResponse(
        needs_update=needs_update,
        last_part_update=last_part_update,
        last_inventory_update=last_inventory_update,
    )
