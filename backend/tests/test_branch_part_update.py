"""지점 부품 단건 수정/조회 테스트"""

import uuid
from decimal import Decimal

import pytest
from sqlalchemy import select

from app.core.exceptions import BranchAccessDeniedError, InvalidRequestError, NotFoundError
from app.models.audit_log import AuditLog
from app.models.enums import AuditAction
from app.services.branch_inventory import (
    add_or_update_branch_parts,
    get_or_create_branch_part,
    list_branch_parts,
    update_branch_part,
)

from factories import create_part


async def _synced_row(db, branch, actor, **part_kwargs):
    part = await create_part(db, **part_kwargs)
    report = await add_or_update_branch_parts(db, actor, branch.id, [str(part.id)])
    return part, report.results[0].data


class TestUpdateBranchPart:
    """허용 필드 반영 + 지점 마진 재계산"""

    async def test_cost_and_price_recompute_margin(self, db, branch, staff_actor):
        _, row = await _synced_row(db, branch, staff_actor)

        record = await update_branch_part(db, staff_actor, branch.id, row.id, {
            "branch_cost": Decimal("50"),
            "branch_price": Decimal("80"),
        })

        assert record["branch_margin"] == Decimal("60")
        assert record["updated_by"]["email"] == staff_actor.email

    async def test_price_only_uses_stored_cost(self, db, branch, staff_actor):
        _, row = await _synced_row(db, branch, staff_actor)
        await update_branch_part(db, staff_actor, branch.id, row.id, {"branch_cost": Decimal("40")})

        record = await update_branch_part(db, staff_actor, branch.id, row.id, {"branch_price": Decimal("50")})

        assert record["branch_margin"] == Decimal("25")

    async def test_zero_cost_keeps_margin(self, db, branch, staff_actor):
        _, row = await _synced_row(db, branch, staff_actor)

        record = await update_branch_part(db, staff_actor, branch.id, row.id, {"branch_price": Decimal("999")})

        assert record["branch_price"] == Decimal("999")
        assert record["branch_margin"] == Decimal("20")

    async def test_unknown_keys_are_ignored(self, db, branch, staff_actor):
        part, row = await _synced_row(db, branch, staff_actor)

        record = await update_branch_part(db, staff_actor, branch.id, row.id, {
            "branch_stock": 3,
            "part_id": str(uuid.uuid4()),
            "created_by": {"email": "intruder@example.com"},
            "favorite_color": "blue",
        })

        assert record["branch_stock"] == 3
        assert record["part_id"] == part.id
        assert record["created_by"]["email"] == staff_actor.email
        assert "favorite_color" not in record

    async def test_mirror_fields_can_be_edited(self, db, branch, staff_actor):
        _, row = await _synced_row(db, branch, staff_actor)

        record = await update_branch_part(db, staff_actor, branch.id, row.id, {
            "category": "Local Display",
            "barcode": "8690000000001",
        })

        assert record["category"] == "Local Display"
        assert record["barcode"] == "8690000000001"

    async def test_writes_audit_log(self, db, branch, staff_actor):
        _, row = await _synced_row(db, branch, staff_actor)

        await update_branch_part(db, staff_actor, branch.id, row.id, {"branch_stock": 12})
        await db.commit()

        logs = (await db.execute(
            select(AuditLog).where(AuditLog.action == AuditAction.BRANCH_PART_UPDATE)
        )).scalars().all()
        assert len(logs) == 1
        assert logs[0].target_id == row.id
        assert logs[0].after_data["branch_stock"] == 12
        assert logs[0].before_data["branch_stock"] == 0

    async def test_missing_row(self, db, branch, staff_actor):
        with pytest.raises(NotFoundError) as exc_info:
            await update_branch_part(db, staff_actor, branch.id, uuid.uuid4(), {"branch_stock": 1})
        assert exc_info.value.code == "BRANCH_PART_NOT_FOUND"

    async def test_other_branch_denied(self, db, branch, other_branch, staff_actor):
        with pytest.raises(BranchAccessDeniedError):
            await update_branch_part(db, staff_actor, other_branch.id, uuid.uuid4(), {"branch_stock": 1})

    async def test_missing_branch_id(self, db, staff_actor):
        with pytest.raises(InvalidRequestError):
            await update_branch_part(db, staff_actor, None, uuid.uuid4(), {})

    async def test_null_for_required_column(self, db, branch, staff_actor):
        _, row = await _synced_row(db, branch, staff_actor)

        with pytest.raises(InvalidRequestError) as exc_info:
            await update_branch_part(db, staff_actor, branch.id, row.id, {"branch_stock": None, "barcode": None})

        assert exc_info.value.details == {"fields": ["branch_stock"]}


class TestListBranchParts:
    """지점 부품 목록 필터/정렬"""

    async def test_sorted_by_category_then_turkish_name(self, db, branch, staff_actor):
        parts = [
            await create_part(db, name="Zil", category="Audio"),
            await create_part(db, name="Batarya", category="Power"),
            await create_part(db, name="Anten", category="Audio"),
        ]
        await add_or_update_branch_parts(db, staff_actor, branch.id, [str(p.id) for p in parts])

        records = await list_branch_parts(db, staff_actor, branch.id)

        assert [r["name"]["tr"] for r in records] == ["Anten", "Zil", "Batarya"]

    async def test_shelf_and_min_stock_filters(self, db, branch, staff_actor):
        _, low = await _synced_row(db, branch, staff_actor, name="Low")
        _, full = await _synced_row(db, branch, staff_actor, name="Full")
        await update_branch_part(db, staff_actor, branch.id, low.id, {"branch_stock": 5, "branch_shelf_number": "A1"})
        await update_branch_part(db, staff_actor, branch.id, full.id, {"branch_stock": 30, "branch_shelf_number": "A1"})
        await db.commit()

        low_stock = await list_branch_parts(db, staff_actor, branch.id, min_stock=True)
        on_shelf = await list_branch_parts(db, staff_actor, branch.id, shelf_number="A1")
        empty_shelf = await list_branch_parts(db, staff_actor, branch.id, shelf_number="Z9")

        assert [r["id"] for r in low_stock] == [low.id]
        assert len(on_shelf) == 2
        assert empty_shelf == []


class TestGetOrCreate:
    """부품 단건 조회 (없으면 기본값으로 생성)"""

    async def test_creates_when_missing(self, db, branch, staff_actor):
        part = await create_part(db)

        first = await get_or_create_branch_part(db, staff_actor, branch.id, str(part.id))
        second = await get_or_create_branch_part(db, staff_actor, branch.id, str(part.id))

        assert first["id"] == second["id"]
        assert first["branch_stock"] == 0
        assert len(await list_branch_parts(db, staff_actor, branch.id)) == 1

    async def test_unknown_part(self, db, branch, staff_actor):
        with pytest.raises(NotFoundError) as exc_info:
            await get_or_create_branch_part(db, staff_actor, branch.id, str(uuid.uuid4()))
        assert exc_info.value.code == "PART_NOT_FOUND"

    async def test_existing_row_of_removed_part(self, db, branch, staff_actor):
        part = await create_part(db)
        await get_or_create_branch_part(db, staff_actor, branch.id, str(part.id))
        await db.delete(part)
        await db.commit()

        with pytest.raises(NotFoundError) as exc_info:
            await get_or_create_branch_part(db, staff_actor, branch.id, str(part.id))
        assert exc_info.value.code == "PART_NOT_FOUND"
