"""지점 API 테스트"""

import uuid

from sqlalchemy import select

from app.models.enums import UserRole
from app.models.user import User

from factories import auth_headers, create_user

BRANCH_PAYLOAD = {
    "name": "Izmir Alsancak",
    "phone": "+90 232 000 00 00",
    "manager_name": "Ayse",
    "address": {"city": "Izmir", "country": "TR"},
}


class TestBranchApi:
    """/api/v1/branches"""

    async def test_create_generates_code(self, client, admin):
        response = await client.post("/api/v1/branches", json=BRANCH_PAYLOAD, headers=auth_headers(admin))

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["code"].startswith("IZM")
        assert len(data["code"]) == 6
        assert data["status"] == "active"

    async def test_duplicate_code(self, client, admin):
        headers = auth_headers(admin)
        payload = {**BRANCH_PAYLOAD, "code": "IZM001"}
        await client.post("/api/v1/branches", json=payload, headers=headers)

        response = await client.post("/api/v1/branches", json=payload, headers=headers)

        assert response.status_code == 409
        assert response.json()["detail"]["code"] == "BRANCH_CODE_EXISTS"

    async def test_list_is_admin_only(self, client, branch, staff, admin):
        forbidden = await client.get("/api/v1/branches", headers=auth_headers(staff))
        allowed = await client.get("/api/v1/branches", headers=auth_headers(admin))

        assert forbidden.status_code == 403
        assert allowed.status_code == 200
        assert allowed.json()["data"]["total"] == 1

    async def test_current_branch(self, client, branch, staff):
        response = await client.get("/api/v1/branches/current", headers=auth_headers(staff))
        assert response.status_code == 200
        assert response.json()["data"]["id"] == str(branch.id)

    async def test_update(self, client, branch, admin):
        response = await client.patch(
            f"/api/v1/branches/{branch.id}",
            json={"manager_name": "Mehmet", "address": {"city": "Istanbul", "street": "Bahariye"}},
            headers=auth_headers(admin),
        )
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["manager_name"] == "Mehmet"
        assert data["address"]["street"] == "Bahariye"

    async def test_soft_delete_removes_branch_users(self, client, db, branch, staff, admin):
        branch_admin = await create_user(db, UserRole.ADMIN, branch=branch)
        headers = auth_headers(admin)

        response = await client.delete(f"/api/v1/branches/{branch.id}", headers=headers)

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["removed_user_count"] == 1
        assert data["branch"]["status"] == "inactive"
        assert data["branch"]["deleted_at"] is not None

        remaining = (await db.execute(
            select(User.id).where(User.branch_id == branch.id)
        )).scalars().all()
        assert remaining == [branch_admin.id]

        again = await client.delete(f"/api/v1/branches/{branch.id}", headers=headers)
        assert again.status_code == 400

    async def test_unknown_branch(self, client, admin):
        response = await client.get(f"/api/v1/branches/{uuid.uuid4()}", headers=auth_headers(admin))
        assert response.status_code == 404
