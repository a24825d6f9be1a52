"""지정 부품 동기화(add_or_update_branch_parts) 테스트"""

import uuid
from decimal import Decimal

import pytest

from app.core.exceptions import BranchAccessDeniedError, InvalidRequestError, NotFoundError
from app.models.branch_part import branch_inventory
from app.models.enums import SyncChangeType
from app.services import branch_inventory as inventory_service
from app.services.branch_inventory import add_or_update_branch_parts, update_branch_part

from factories import create_part


class TestAddOrUpdate:
    """카탈로그 → 지점 재고 반영"""

    async def test_creates_rows_with_branch_defaults(self, db, branch, staff_actor):
        part = await create_part(db, name="Ekran")

        report = await add_or_update_branch_parts(db, staff_actor, branch.id, [{"id": str(part.id)}])

        assert report.stats.total == 1
        assert report.stats.success == 1
        assert report.stats.failed == 0
        item = report.results[0]
        assert item.type == SyncChangeType.CREATED
        assert item.data.part_id == part.id
        assert item.data.name["tr"] == "Ekran"
        assert item.data.branch_stock == 0
        assert item.data.branch_min_stock_level == 5
        assert item.data.branch_margin == Decimal("20")
        # 지정 동기화는 판매가를 가져오지 않음
        assert item.data.branch_price == Decimal("0")
        assert item.data.created_by["email"] == staff_actor.email

    async def test_second_run_is_update(self, db, branch, staff_actor):
        part = await create_part(db)
        await add_or_update_branch_parts(db, staff_actor, branch.id, [str(part.id)])

        report = await add_or_update_branch_parts(db, staff_actor, branch.id, [str(part.id)])

        assert report.results[0].type == SyncChangeType.UPDATED
        records = await inventory_service.list_branch_parts(db, staff_actor, branch.id)
        assert len(records) == 1

    async def test_accepts_underscore_id_key(self, db, branch, staff_actor):
        part = await create_part(db)
        report = await add_or_update_branch_parts(db, staff_actor, branch.id, [{"_id": str(part.id)}])
        assert report.stats.success == 1

    async def test_branch_values_survive_catalog_sync(self, db, branch, staff_actor):
        part = await create_part(db, name="Kamera")
        report = await add_or_update_branch_parts(db, staff_actor, branch.id, [str(part.id)])
        row_id = report.results[0].data.id

        await update_branch_part(db, staff_actor, branch.id, row_id, {
            "branch_stock": 7,
            "branch_cost": Decimal("80"),
            "branch_price": Decimal("100"),
            "branch_shelf_number": "B-2",
        })
        await db.commit()

        part.name = {"tr": "Arka Kamera", "de": "Rückkamera", "en": "Rear Camera"}
        part.category = "Camera"
        await db.commit()

        report = await add_or_update_branch_parts(db, staff_actor, branch.id, [str(part.id)])
        data = report.results[0].data

        assert data.name["en"] == "Rear Camera"
        assert data.category == "Camera"
        assert data.branch_stock == 7
        assert data.branch_price == Decimal("100")
        assert data.branch_margin == Decimal("25")
        assert data.branch_shelf_number == "B-2"

    async def test_partial_failure_is_reported_per_item(self, db, branch, staff_actor):
        part = await create_part(db)
        refs = [str(part.id), str(uuid.uuid4()), "not-a-uuid", None]

        report = await add_or_update_branch_parts(db, staff_actor, branch.id, refs)

        assert report.stats.total == 4
        assert report.stats.processed == 4
        assert report.stats.success == 1
        assert report.stats.failed == 3
        assert report.stats.not_found == 1
        assert report.stats.validation_errors == 2
        assert report.stats.db_errors == 0
        assert {e.reason for e in report.errors} == {"not_found", "validation"}

    async def test_central_user_can_sync_any_branch(self, db, branch, admin_actor):
        part = await create_part(db)
        report = await add_or_update_branch_parts(db, admin_actor, branch.id, [str(part.id)])
        assert report.stats.success == 1


class TestRejectedRequests:
    """저장소 접근 전 거부"""

    async def test_other_branch_is_denied(self, db, other_branch, staff_actor):
        part = await create_part(db)

        with pytest.raises(BranchAccessDeniedError):
            await add_or_update_branch_parts(db, staff_actor, other_branch.id, [str(part.id)])

        assert not branch_inventory.is_ready(other_branch.id)

    @pytest.mark.parametrize("branch_id, parts", [
        (None, []),
        ("", []),
        ("some-branch", "not-a-list"),
    ])
    async def test_missing_input(self, db, admin_actor, branch_id, parts):
        with pytest.raises(InvalidRequestError):
            await add_or_update_branch_parts(db, admin_actor, branch_id, parts)

    async def test_malformed_branch_id(self, db, admin_actor):
        with pytest.raises(InvalidRequestError):
            await add_or_update_branch_parts(db, admin_actor, "not-a-uuid", [])

    async def test_unknown_branch(self, db, admin_actor):
        with pytest.raises(NotFoundError) as exc_info:
            await add_or_update_branch_parts(db, admin_actor, uuid.uuid4(), [])
        assert exc_info.value.code == "BRANCH_NOT_FOUND"


class TestConcurrentFirstSync:
    """같은 부품의 동시 최초 동기화"""

    async def test_duplicate_insert_becomes_update(self, db, branch, staff_actor, monkeypatch):
        part = await create_part(db)
        await add_or_update_branch_parts(db, staff_actor, branch.id, [str(part.id)])

        original = inventory_service.find_by_part_id
        calls = {"count": 0}

        async def _stale_lookup(session, table, part_id):
            # 첫 조회는 다른 요청이 행을 만들기 전 상태를 흉내냄
            calls["count"] += 1
            if calls["count"] == 1:
                return None
            return await original(session, table, part_id)

        monkeypatch.setattr(inventory_service, "find_by_part_id", _stale_lookup)

        report = await add_or_update_branch_parts(db, staff_actor, branch.id, [str(part.id)])

        assert report.stats.success == 1
        assert report.stats.db_errors == 0
        assert report.results[0].type == SyncChangeType.UPDATED
        assert calls["count"] == 2
