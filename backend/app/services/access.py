"""
수리점 지점 재고 관리 시스템 - 작업자/지점 접근 검증
"""

import uuid
from dataclasses import dataclass
from typing import Any, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import BranchAccessDeniedError, InvalidRequestError, NotFoundError
from app.models.branch import Branch
from app.models.enums import CROSS_BRANCH_ROLES, UserRole


@dataclass(frozen=True)
class Actor:
    """
    요청 작업자 정보

    세션 롤백 후에도 안전하게 쓸 수 있도록 User에서 값만 복사해 둔다.
    """
    id: Optional[uuid.UUID]
    email: str
    full_name: str
    role: UserRole
    branch_id: Optional[uuid.UUID] = None

    @classmethod
    def from_user(cls, user: Any) -> "Actor":
        return cls(
            id=user.id,
            email=user.email,
            full_name=user.name,
            role=user.role,
            branch_id=user.branch_id,
        )

    @property
    def is_cross_branch(self) -> bool:
        return self.role in CROSS_BRANCH_ROLES

    def snapshot(self) -> dict[str, Any]:
        return {
            "id": str(self.id) if self.id else None,
            "email": self.email,
            "full_name": self.full_name,
        }


# 일괄 동기화 작업에서 사용하는 시스템 작업자
SYSTEM_ACTOR = Actor(
    id=None,
    email="system@repair-inventory.local",
    full_name="System Sync",
    role=UserRole.ADMIN,
)


def parse_uuid(value: Any, field: str) -> uuid.UUID:
    """문자열/UUID → UUID (형식 오류 시 InvalidRequestError)"""
    if isinstance(value, uuid.UUID):
        return value
    if not value:
        raise InvalidRequestError(f"{field} 값이 필요합니다", details={"field": field})
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError):
        raise InvalidRequestError(f"{field} 형식이 올바르지 않습니다", details={"field": field})


def ensure_branch_access(actor: Actor, branch_id: uuid.UUID) -> None:
    """관리자/본사 직원이 아니면 소속 지점만 허용"""
    if actor.is_cross_branch:
        return
    if actor.branch_id is None or actor.branch_id != branch_id:
        raise BranchAccessDeniedError("해당 지점에 접근할 수 없습니다")


async def require_branch(db: AsyncSession, branch_id: uuid.UUID) -> Branch:
    """지점 존재 확인 (삭제된 지점 포함 조회, 없으면 404)"""
    branch = await db.get(Branch, branch_id)
    if branch is None:
        raise NotFoundError("지점을 찾을 수 없습니다", code="BRANCH_NOT_FOUND")
    return branch
