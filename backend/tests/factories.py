"""테스트 데이터 생성 헬퍼"""

import uuid
from decimal import Decimal
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.security import create_access_token
from app.models.branch import Branch
from app.models.enums import BranchStatus, UserRole
from app.models.part import Part
from app.models.user import User

CREATOR = {"id": None, "email": "catalog@example.com", "full_name": "Catalog Admin"}


async def create_branch(
    db: AsyncSession,
    name: str = "Merkez",
    status: BranchStatus = BranchStatus.ACTIVE,
    **kwargs,
) -> Branch:
    branch = Branch(
        name=name,
        phone="+90 212 000 00 00",
        manager_name="Manager",
        address={"city": "Istanbul", "country": "TR"},
        status=status,
        **kwargs,
    )
    db.add(branch)
    await db.commit()
    return branch


async def create_user(
    db: AsyncSession,
    role: UserRole,
    branch: Optional[Branch] = None,
    email: Optional[str] = None,
    password_hash: str = "not-a-real-hash",
) -> User:
    user = User(
        email=email or f"{role.value}-{uuid.uuid4().hex[:8]}@example.com",
        password_hash=password_hash,
        name=f"{role.value} user",
        role=role,
        branch_id=branch.id if branch else None,
    )
    db.add(user)
    await db.commit()
    return user


async def create_part(
    db: AsyncSession,
    brand_id: Optional[uuid.UUID] = None,
    name: str = "Ekran",
    category: str = "Display",
    **kwargs,
) -> Part:
    values = {
        "device_type_id": uuid.uuid4(),
        "brand_id": brand_id or uuid.uuid4(),
        "model_id": uuid.uuid4(),
        "category": category,
        "name": {"tr": name, "de": f"{name} DE", "en": f"{name} EN"},
        "cost_amount": Decimal("100"),
        "price_amount": Decimal("150"),
        "created_by": CREATOR,
    }
    values.update(kwargs)
    part = Part(**values)
    db.add(part)
    await db.commit()
    return part


def auth_headers(user: User) -> dict:
    token = create_access_token(
        subject=str(user.id),
        role=user.role.value,
        branch_id=str(user.branch_id) if user.branch_id else None,
    )
    return {"Authorization": f"Bearer {token}"}


def part_payload(**overrides) -> dict:
    payload = {
        "device_type_id": str(uuid.uuid4()),
        "brand_id": str(uuid.uuid4()),
        "model_id": str(uuid.uuid4()),
        "category": "Battery",
        "name": {"tr": "Batarya", "de": "Akku", "en": "Battery"},
        "cost": {"amount": "40", "currency": "EUR"},
        "price": {"amount": "60", "currency": "EUR"},
    }
    payload.update(overrides)
    return payload
