"""카탈로그 변경 알림 테스트"""

import uuid
from collections import defaultdict
from datetime import datetime, timedelta

import pytest
from sqlalchemy import select

from app.core.events import PartChanged, event_bus
from app.core.exceptions import NotFoundError
from app.models.enums import BranchStatus, NotificationType, UserRole
from app.models.notification import Notification
from app.models.part import Part
from app.schemas.part import PartCreate, PartUpdate
from app.services import catalog, notifications

from factories import auth_headers, create_branch, create_part, create_user, part_payload


async def _notifications(db, **filters):
    query = select(Notification)
    for key, value in filters.items():
        query = query.where(getattr(Notification, key) == value)
    return (await db.execute(query)).scalars().all()


async def _add_notification(db, branch, part, created_at, is_read=False):
    notification = Notification(
        type=NotificationType.PART_UPDATE,
        branch_id=branch.id,
        part_id=part.id,
        message=notifications.build_message(NotificationType.PART_UPDATE, part.name),
        is_read=is_read,
        created_at=created_at,
        updated_at=created_at,
    )
    db.add(notification)
    await db.commit()
    return notification


class TestBuildMessage:
    """언어별 메시지"""

    def test_each_language_uses_own_name(self):
        message = notifications.build_message(
            NotificationType.PART_CREATE, {"tr": "Ekran", "de": "Bildschirm", "en": "Screen"}
        )
        assert message == {
            "tr": "Yeni parça eklendi: Ekran",
            "de": "Neues Teil hinzugefügt: Bildschirm",
            "en": "New part added: Screen",
        }

    def test_missing_translation(self):
        message = notifications.build_message(NotificationType.PART_UPDATE, {"en": "Screen"})
        assert message["en"] == "Part updated: Screen"
        assert message["tr"] == "Parça güncellendi: "


class TestFanOut:
    """카탈로그 부품 생성/수정 → 운영 중 지점마다 1건"""

    async def test_create_notifies_every_active_branch(self, db, branch, other_branch, admin_actor):
        await create_branch(db, name="Uskudar", status=BranchStatus.INACTIVE)
        await create_branch(db, name="Zeytinburnu", deleted_at=datetime.utcnow())

        part = await catalog.create_part(db, admin_actor, PartCreate(**part_payload()))

        rows = await _notifications(db, part_id=part.id)
        assert {n.branch_id for n in rows} == {branch.id, other_branch.id}
        assert all(n.type == NotificationType.PART_CREATE for n in rows)
        assert rows[0].message["de"] == "Neues Teil hinzugefügt: Akku"
        assert rows[0].created_by["email"] == admin_actor.email
        assert all(n.is_read is False for n in rows)

    async def test_update_notifies_with_update_message(self, db, branch, admin_actor):
        part = await create_part(db, name="Ekran")

        await catalog.update_part(db, admin_actor, part.id, PartUpdate(category="Screens"))

        rows = await _notifications(db, part_id=part.id)
        assert len(rows) == 1
        assert rows[0].type == NotificationType.PART_UPDATE
        assert rows[0].message["tr"] == "Parça güncellendi: Ekran"

    async def test_emit_without_branches(self, db):
        part = await create_part(db)
        event = PartChanged(part_id=part.id, created=True, name=part.name)
        assert await notifications.emit_part_notifications(event, db) == 0

    async def test_handler_failure_keeps_catalog_change(self, db, branch, admin_actor, monkeypatch):
        monkeypatch.setattr(event_bus, "_handlers", defaultdict(list))

        async def _broken(event, session):
            raise RuntimeError("mail server down")

        event_bus.subscribe(PartChanged, _broken)
        notifications.register_notification_handlers(event_bus)

        part = await catalog.create_part(db, admin_actor, PartCreate(**part_payload()))

        assert await db.get(Part, part.id) is not None
        assert len(await _notifications(db, part_id=part.id)) == 1


class TestReadState:
    """지점 단위 조회/읽음 처리"""

    async def test_list_unread_newest_first(self, db, branch, other_branch):
        part = await create_part(db)
        now = datetime.utcnow()
        older = await _add_notification(db, branch, part, now - timedelta(hours=1))
        newer = await _add_notification(db, branch, part, now)
        await _add_notification(db, branch, part, now, is_read=True)
        await _add_notification(db, other_branch, part, now)

        items = await notifications.list_unread(db, branch.id)

        assert [n.id for n in items] == [newer.id, older.id]
        assert items[0].part.id == part.id

    async def test_mark_all_read_is_branch_scoped(self, db, branch, other_branch):
        part = await create_part(db)
        now = datetime.utcnow()
        await _add_notification(db, branch, part, now)
        await _add_notification(db, branch, part, now)
        await _add_notification(db, other_branch, part, now)

        count = await notifications.mark_all_read(db, branch.id)
        await db.commit()

        assert count == 2
        assert await notifications.list_unread(db, branch.id) == []
        assert len(await notifications.list_unread(db, other_branch.id)) == 1

    async def test_mark_read(self, db, branch):
        part = await create_part(db)
        notification = await _add_notification(db, branch, part, datetime.utcnow())

        updated = await notifications.mark_read(db, branch.id, notification.id)

        assert updated.is_read is True
        with pytest.raises(NotFoundError):
            await notifications.mark_read(db, branch.id, notification.id)

    async def test_mark_read_other_branch(self, db, branch, other_branch):
        part = await create_part(db)
        notification = await _add_notification(db, other_branch, part, datetime.utcnow())

        with pytest.raises(NotFoundError) as exc_info:
            await notifications.mark_read(db, branch.id, notification.id)
        assert exc_info.value.code == "NOTIFICATION_NOT_FOUND"


class TestNotificationApi:
    """알림 API"""

    async def test_list_and_read_all(self, client, db, branch, staff):
        part = await create_part(db)
        await _add_notification(db, branch, part, datetime.utcnow())

        response = await client.get("/api/v1/notifications/unread", headers=auth_headers(staff))
        assert response.status_code == 200
        body = response.json()
        assert body["meta"]["total"] == 1
        assert body["data"][0]["part"]["category"] == "Display"

        response = await client.post("/api/v1/notifications/read-all", headers=auth_headers(staff))
        assert response.status_code == 200
        assert response.json()["data"]["count"] == 1

    async def test_read_unknown_notification(self, client, staff):
        response = await client.post(
            f"/api/v1/notifications/{uuid.uuid4()}/read", headers=auth_headers(staff)
        )
        assert response.status_code == 404
        assert response.json()["detail"]["code"] == "NOTIFICATION_NOT_FOUND"

    async def test_user_without_branch(self, client, db):
        central = await create_user(db, UserRole.CENTRAL_STAFF)
        response = await client.get("/api/v1/notifications/unread", headers=auth_headers(central))
        assert response.status_code == 400
        assert response.json()["detail"]["code"] == "BRANCH_NOT_ASSIGNED"
