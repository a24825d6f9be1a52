"""
수리점 지점 재고 관리 시스템 - 지점 API
지점 CRUD + 소프트 삭제 (관리자 전용, 조회는 본사 직원 포함)
"""

from uuid import UUID
from typing import Optional
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy import select, func, delete
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.api.deps import get_current_user, get_central_user, get_current_admin_user
from app.models.user import User
from app.models.branch import Branch
from app.models.audit_log import AuditLog
from app.models.enums import AuditAction, BranchStatus, UserRole
from app.schemas.branch import (
    BranchCreate,
    BranchUpdate,
    BranchResponse,
    BranchListResponse,
    BranchDeleteResponse,
)
from app.schemas.common import SuccessResponse

router = APIRouter()


async def _get_branch_or_404(db: AsyncSession, branch_id: UUID) -> Branch:
    result = await db.execute(select(Branch).where(Branch.id == branch_id))
    branch = result.scalar_one_or_none()
    if not branch:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"code": "BRANCH_NOT_FOUND", "message": "지점을 찾을 수 없습니다"},
        )
    return branch


async def _ensure_code_available(db: AsyncSession, code: str, exclude_id: Optional[UUID] = None) -> None:
    query = select(Branch.id).where(Branch.code == code)
    if exclude_id is not None:
        query = query.where(Branch.id != exclude_id)
    if (await db.execute(query)).first():
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={"code": "BRANCH_CODE_EXISTS", "message": "이미 사용 중인 지점 코드입니다"},
        )


def _branch_snapshot(branch: Branch) -> dict:
    return {
        "name": branch.name, "code": branch.code,
        "address": branch.address, "phone": branch.phone,
        "manager_name": branch.manager_name, "is_central": branch.is_central,
        "default_language": branch.default_language.value, "status": branch.status.value,
    }


@router.get("", response_model=SuccessResponse[BranchListResponse])
async def list_branches(
    include_deleted: bool = Query(False),
    search: Optional[str] = Query(None),
    current_user: User = Depends(get_current_admin_user),
    db: AsyncSession = Depends(get_db),
):
    """지점 목록 조회 (관리자 전용)"""
    query = select(Branch)
    count_query = select(func.count(Branch.id))

    if not include_deleted:
        query = query.where(Branch.deleted_at.is_(None))
        count_query = count_query.where(Branch.deleted_at.is_(None))

    if search:
        search_filter = Branch.name.ilike(f"%{search}%") | Branch.code.ilike(f"%{search}%")
        query = query.where(search_filter)
        count_query = count_query.where(search_filter)

    query = query.order_by(Branch.name)

    total = (await db.execute(count_query)).scalar()
    branches = (await db.execute(query)).scalars().all()

    return SuccessResponse(
        data=BranchListResponse(
            branches=[BranchResponse.model_validate(b) for b in branches],
            total=total,
        )
    )


@router.get("/current", response_model=SuccessResponse[BranchResponse])
async def get_current_branch(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """로그인 사용자의 소속 지점"""
    if current_user.branch_id is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"code": "BRANCH_NOT_ASSIGNED", "message": "소속 지점이 없습니다"},
        )
    branch = await _get_branch_or_404(db, current_user.branch_id)
    return SuccessResponse(data=BranchResponse.model_validate(branch))


@router.post("", response_model=SuccessResponse[BranchResponse], status_code=status.HTTP_201_CREATED)
async def create_branch(
    branch_data: BranchCreate,
    current_user: User = Depends(get_current_admin_user),
    db: AsyncSession = Depends(get_db),
):
    """지점 생성 (관리자 전용, 코드 미입력 시 자동 생성)"""
    if branch_data.code:
        await _ensure_code_available(db, branch_data.code)

    new_branch = Branch(**branch_data.model_dump())
    db.add(new_branch)
    await db.flush()

    db.add(AuditLog(
        user_id=current_user.id,
        action=AuditAction.BRANCH_CREATE,
        target_type="branch",
        target_id=new_branch.id,
        branch_id=new_branch.id,
        after_data=_branch_snapshot(new_branch),
    ))

    await db.commit()
    await db.refresh(new_branch)

    return SuccessResponse(data=BranchResponse.model_validate(new_branch))


@router.get("/{branch_id}", response_model=SuccessResponse[BranchResponse])
async def get_branch(
    branch_id: UUID,
    current_user: User = Depends(get_central_user),
    db: AsyncSession = Depends(get_db),
):
    """지점 상세 조회 (관리자/본사 직원)"""
    branch = await _get_branch_or_404(db, branch_id)
    return SuccessResponse(data=BranchResponse.model_validate(branch))


@router.patch("/{branch_id}", response_model=SuccessResponse[BranchResponse])
async def update_branch(
    branch_id: UUID,
    branch_data: BranchUpdate,
    current_user: User = Depends(get_current_admin_user),
    db: AsyncSession = Depends(get_db),
):
    """지점 수정 (관리자 전용)"""
    branch = await _get_branch_or_404(db, branch_id)

    if branch.deleted_at is not None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"code": "BRANCH_DELETED", "message": "삭제된 지점은 수정할 수 없습니다"},
        )

    if branch_data.code and branch_data.code != branch.code:
        await _ensure_code_available(db, branch_data.code, exclude_id=branch.id)

    before_data = _branch_snapshot(branch)

    update_fields = branch_data.model_dump(exclude_unset=True)
    for field, value in update_fields.items():
        setattr(branch, field, value)

    db.add(AuditLog(
        user_id=current_user.id,
        action=AuditAction.BRANCH_UPDATE,
        target_type="branch",
        target_id=branch.id,
        branch_id=branch.id,
        before_data=before_data,
        after_data=branch_data.model_dump(exclude_unset=True, mode="json"),
    ))

    await db.commit()
    await db.refresh(branch)

    return SuccessResponse(data=BranchResponse.model_validate(branch))


@router.delete("/{branch_id}", response_model=SuccessResponse[BranchDeleteResponse])
async def delete_branch(
    branch_id: UUID,
    current_user: User = Depends(get_current_admin_user),
    db: AsyncSession = Depends(get_db),
):
    """
    지점 소프트 삭제 (관리자 전용)

    - 상태를 inactive로 변경하고 deleted_at 기록
    - 소속 사용자 중 관리자를 제외한 계정 삭제
    - 지점 재고 테이블은 보존
    """
    branch = await _get_branch_or_404(db, branch_id)

    if branch.deleted_at is not None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"code": "BRANCH_ALREADY_DELETED", "message": "이미 삭제된 지점입니다"},
        )

    branch.status = BranchStatus.INACTIVE
    branch.deleted_at = datetime.utcnow()

    removed = await db.execute(
        delete(User)
        .where(User.branch_id == branch_id, User.role != UserRole.ADMIN)
        .execution_options(synchronize_session=False)
    )

    db.add(AuditLog(
        user_id=current_user.id,
        action=AuditAction.BRANCH_DELETE,
        target_type="branch",
        target_id=branch.id,
        branch_id=branch.id,
        before_data={"name": branch.name, "code": branch.code},
        after_data={"removed_user_count": removed.rowcount},
    ))

    await db.commit()
    await db.refresh(branch)

    return SuccessResponse(data=BranchDeleteResponse(
        branch=BranchResponse.model_validate(branch),
        removed_user_count=removed.rowcount,
    ))
