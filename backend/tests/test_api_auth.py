"""인증 API 테스트"""

from sqlalchemy import select

from app.core.security import get_password_hash
from app.models.audit_log import AuditLog
from app.models.enums import AuditAction, UserRole

from factories import create_user


class TestLogin:
    """POST /api/v1/auth/login"""

    async def test_login_and_me(self, client, db, branch):
        user = await create_user(
            db, UserRole.TECHNICIAN, branch=branch,
            email="tech@example.com", password_hash=get_password_hash("secret-pass"),
        )

        response = await client.post(
            "/api/v1/auth/login", json={"email": "tech@example.com", "password": "secret-pass"}
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["user"]["branch_id"] == str(branch.id)
        token = data["token"]["access_token"]

        me = await client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert me.status_code == 200
        assert me.json()["data"]["role"] == "technician"

        logs = (await db.execute(
            select(AuditLog).where(AuditLog.action == AuditAction.USER_LOGIN)
        )).scalars().all()
        assert [log.user_id for log in logs] == [user.id]

    async def test_wrong_password(self, client, db):
        await create_user(
            db, UserRole.ADMIN, email="boss@example.com", password_hash=get_password_hash("right-pass"),
        )

        response = await client.post(
            "/api/v1/auth/login", json={"email": "boss@example.com", "password": "wrong-pass"}
        )

        assert response.status_code == 401
        assert response.json()["detail"]["code"] == "INVALID_CREDENTIALS"

    async def test_invalid_token(self, client):
        response = await client.get("/api/v1/auth/me", headers={"Authorization": "Bearer garbage"})
        assert response.status_code == 401
