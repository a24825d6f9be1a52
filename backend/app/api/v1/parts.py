"""
수리점 지점 재고 관리 시스템 - 카탈로그 부품 API
부품 조회 + 생성/수정/비활성화 (관리자/본사 직원)
"""

from uuid import UUID
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import select, func, or_, String, cast
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.api.deps import get_current_user, get_central_actor
from app.models.user import User
from app.models.part import Part
from app.schemas.part import PartCreate, PartUpdate, PartResponse, PartListResponse
from app.schemas.common import SuccessResponse, ResponseMeta
from app.services import catalog
from app.services.access import Actor

router = APIRouter()


@router.get("", response_model=SuccessResponse[PartListResponse])
async def list_parts(
    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1, le=200),
    brand_id: Optional[UUID] = Query(None),
    model_id: Optional[UUID] = Query(None),
    device_type_id: Optional[UUID] = Query(None),
    category: Optional[str] = Query(None),
    is_active: Optional[bool] = Query(None),
    search: Optional[str] = Query(None, description="부품명(tr/de/en)/바코드 검색"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """카탈로그 부품 목록 조회"""
    query = select(Part)
    count_query = select(func.count(Part.id))

    filters = []
    if brand_id:
        filters.append(Part.brand_id == brand_id)
    if model_id:
        filters.append(Part.model_id == model_id)
    if device_type_id:
        filters.append(Part.device_type_id == device_type_id)
    if category:
        filters.append(Part.category == category)
    if is_active is not None:
        filters.append(Part.is_active == is_active)
    if search:
        filters.append(or_(
            cast(Part.name, String).ilike(f"%{search}%"),
            Part.barcode.ilike(f"%{search}%"),
        ))

    if filters:
        query = query.where(*filters)
        count_query = count_query.where(*filters)

    total = (await db.execute(count_query)).scalar()

    offset = (page - 1) * page_size
    query = query.order_by(Part.category, Part.created_at.desc()).offset(offset).limit(page_size)
    parts = (await db.execute(query)).scalars().all()

    return SuccessResponse(
        data=PartListResponse(parts=[PartResponse.from_part(p) for p in parts], total=total),
        meta=ResponseMeta(total=total, page=page, page_size=page_size, has_next=offset + len(parts) < total),
    )


@router.get("/{part_id}", response_model=SuccessResponse[PartResponse])
async def get_part(
    part_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """카탈로그 부품 상세"""
    part = await catalog.get_part_or_404(db, part_id)
    return SuccessResponse(data=PartResponse.from_part(part))


@router.post("", response_model=SuccessResponse[PartResponse], status_code=status.HTTP_201_CREATED)
async def create_part(
    part_data: PartCreate,
    actor: Actor = Depends(get_central_actor),
    db: AsyncSession = Depends(get_db),
):
    """카탈로그 부품 생성 (운영 중인 모든 지점에 알림)"""
    part = await catalog.create_part(db, actor, part_data)
    return SuccessResponse(data=PartResponse.from_part(part))


@router.put("/{part_id}", response_model=SuccessResponse[PartResponse])
async def update_part(
    part_id: UUID,
    part_data: PartUpdate,
    actor: Actor = Depends(get_central_actor),
    db: AsyncSession = Depends(get_db),
):
    """카탈로그 부품 수정 (운영 중인 모든 지점에 알림)"""
    part = await catalog.update_part(db, actor, part_id, part_data)
    return SuccessResponse(data=PartResponse.from_part(part))


@router.delete("/{part_id}", response_model=SuccessResponse[PartResponse])
async def delete_part(
    part_id: UUID,
    actor: Actor = Depends(get_central_actor),
    db: AsyncSession = Depends(get_db),
):
    """카탈로그 부품 삭제 (비활성화)"""
    part = await catalog.deactivate_part(db, actor, part_id)
    return SuccessResponse(data=PartResponse.from_part(part))
