"""
수리점 지점 재고 관리 시스템 - 지점 재고 API
카탈로그 → 지점 동기화, 지점 부품 조회/수정, 재고 최신 여부
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.api.deps import get_actor
from app.schemas.branch_part import (
    BranchPartSyncRequest,
    BranchPartSyncResult,
    BranchPartResponse,
    BranchPartUpdateRequest,
    InventoryStatusResponse,
)
from app.schemas.common import SuccessResponse, ResponseMeta
from app.services import branch_inventory
from app.services.access import Actor
from app.services.inventory_status import get_inventory_status

router = APIRouter()


@router.post("", response_model=SuccessResponse[BranchPartSyncResult])
async def sync_branch_parts(
    payload: BranchPartSyncRequest,
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
):
    """
    지정 카탈로그 부품을 지점 재고에 추가/갱신

    - 부품별 결과(created/updated)와 실패 사유를 함께 반환
    - 지점 소유 필드(branch_*)는 변경하지 않음
    """
    report = await branch_inventory.add_or_update_branch_parts(
        db, actor, payload.branch_id, payload.parts
    )
    await db.commit()
    return SuccessResponse(data=report)


@router.get("/status", response_model=SuccessResponse[InventoryStatusResponse])
async def branch_inventory_status(
    branch_id: str = Query(...),
    brand_id: str = Query(...),
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
):
    """브랜드 기준 지점 재고 동기화 필요 여부"""
    result = await get_inventory_status(db, actor, branch_id, brand_id)
    return SuccessResponse(data=result)


@router.get("", response_model=SuccessResponse[list[BranchPartResponse]])
async def list_branch_parts(
    branch_id: str = Query(...),
    shelf_number: Optional[str] = Query(None),
    min_stock: bool = Query(False, description="재고가 최소 재고 이하인 부품만"),
    part_id: Optional[str] = Query(None, description="지정 시 해당 부품 1건 (없으면 기본값으로 생성)"),
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
):
    """지점 부품 목록 조회"""
    if part_id:
        record = await branch_inventory.get_or_create_branch_part(db, actor, branch_id, part_id)
        records = [record]
    else:
        records = await branch_inventory.list_branch_parts(
            db, actor, branch_id, shelf_number=shelf_number, min_stock=min_stock
        )

    return SuccessResponse(
        data=[BranchPartResponse(**record) for record in records],
        meta=ResponseMeta(total=len(records)),
    )


@router.put("/{branch_part_id}", response_model=SuccessResponse[BranchPartResponse])
async def update_branch_part(
    branch_part_id: str,
    payload: BranchPartUpdateRequest,
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
):
    """
    지점 부품 수정

    허용 필드만 반영하며 branch_cost/branch_price 변경 시 branch_margin 재계산
    """
    fields = payload.model_dump(exclude_unset=True, exclude={"branch_id"})
    record = await branch_inventory.update_branch_part(
        db, actor, payload.branch_id, branch_part_id, fields
    )
    await db.commit()
    return SuccessResponse(data=BranchPartResponse(**record))
