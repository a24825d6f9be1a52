"""전 지점 일괄 동기화 + 작업 상태 테스트"""

import uuid
from datetime import datetime
from decimal import Decimal

from app.models.branch_part import branch_inventory
from app.models.enums import BranchStatus, JobStatus
from app.models.sync_job import SyncJob
from app.services import branch_sync
from app.services.branch_inventory import list_branch_parts, update_branch_part
from app.services.branch_sync import run_sync_job, sync_all_branches

from factories import create_branch, create_part


async def _catalog(db, count=3):
    return [await create_part(db, name=f"Parca {i}", price_amount=Decimal("150")) for i in range(count)]


class TestSyncAllBranches:
    """운영 중 지점 × 활성 부품"""

    async def test_scope_and_counts(self, db, branch, other_branch, admin_actor):
        inactive = await create_branch(db, name="Uskudar", status=BranchStatus.INACTIVE)
        deleted = await create_branch(db, name="Zeytinburnu", deleted_at=datetime.utcnow())
        await _catalog(db)
        await create_part(db, name="Eski", is_active=False)
        seen = []

        async def _progress(value):
            seen.append(value)

        stats = await sync_all_branches(db, progress=_progress)

        assert stats.total_branches == 2
        assert stats.total_parts == 3
        assert stats.created == 6
        assert stats.updated == 0
        assert stats.errors == 0
        assert seen == [50, 100]
        assert stats.finished_at is not None
        assert not branch_inventory.is_ready(inactive.id)
        assert not branch_inventory.is_ready(deleted.id)
        assert len(await list_branch_parts(db, admin_actor, other_branch.id)) == 3

    async def test_new_rows_take_catalog_price(self, db, branch, admin_actor):
        await _catalog(db, count=1)

        await sync_all_branches(db)

        record = (await list_branch_parts(db, admin_actor, branch.id))[0]
        assert record["branch_price"] == Decimal("150")
        assert record["created_by"]["full_name"] == "System Sync"

    async def test_branch_values_are_kept(self, db, branch, admin_actor):
        parts = await _catalog(db, count=2)
        await sync_all_branches(db)
        record = (await list_branch_parts(db, admin_actor, branch.id))[0]
        await update_branch_part(db, admin_actor, branch.id, record["id"], {
            "branch_stock": 9,
            "branch_price": Decimal("175"),
        })
        await db.commit()

        parts[0].price_amount = Decimal("500")
        parts[1].category = "Renamed"
        await db.commit()

        stats = await sync_all_branches(db)

        assert stats.created == 0
        assert stats.updated == 2
        refreshed = {r["id"]: r for r in await list_branch_parts(db, admin_actor, branch.id)}
        assert refreshed[record["id"]]["branch_stock"] == 9
        assert refreshed[record["id"]]["branch_price"] == Decimal("175")
        assert "Renamed" in {r["category"] for r in refreshed.values()}

    async def test_no_branches(self, db):
        await _catalog(db, count=1)
        stats = await sync_all_branches(db)
        assert stats.total_branches == 0
        assert stats.created == 0


class TestRunSyncJob:
    """QUEUED → RUNNING → SUCCEEDED/FAILED"""

    async def _job(self, db, admin):
        job = SyncJob(status=JobStatus.QUEUED, progress=0, created_by=admin.id)
        db.add(job)
        await db.commit()
        return job

    async def test_success(self, db, branch, admin):
        await _catalog(db, count=2)
        job = await self._job(db, admin)

        summary = await run_sync_job(db, str(job.id))

        await db.refresh(job)
        assert job.status == JobStatus.SUCCEEDED
        assert job.progress == 100
        assert job.started_at is not None
        assert job.completed_at is not None
        assert job.result_summary["created"] == 2
        assert summary["total_branches"] == 1

    async def test_failure_is_recorded(self, db, branch, admin, monkeypatch):
        job = await self._job(db, admin)

        async def _boom(session, progress=None):
            raise RuntimeError("catalog unavailable")

        monkeypatch.setattr(branch_sync, "sync_all_branches", _boom)

        result = await run_sync_job(db, job.id)

        await db.refresh(job)
        assert result == {"error": "catalog unavailable"}
        assert job.status == JobStatus.FAILED
        assert job.error_message == "catalog unavailable"
        assert job.completed_at is not None

    async def test_missing_job(self, db):
        result = await run_sync_job(db, uuid.uuid4())
        assert result == {"error": "Job not found"}
