"""
수리점 지점 재고 관리 시스템 - 인증 API
로그인, 내 정보 조회
"""

from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, status, Request
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.security import verify_password, create_access_token
from app.core.config import settings
from app.api.deps import get_current_user
from app.models.user import User
from app.models.audit_log import AuditLog
from app.models.enums import AuditAction
from app.schemas.auth import (
    LoginRequest,
    LoginResponse,
    TokenResponse,
    UserInfo,
)
from app.schemas.common import SuccessResponse

router = APIRouter()


@router.post("/login", response_model=SuccessResponse[LoginResponse])
async def login(
    request: Request,
    login_data: LoginRequest,
    db: AsyncSession = Depends(get_db)
):
    """
    로그인

    - 이메일/비밀번호로 인증
    - JWT 액세스 토큰 발급 (역할/소속 지점 포함)
    """
    result = await db.execute(
        select(User).where(User.email == login_data.email)
    )
    user = result.scalar_one_or_none()

    if user is None or not verify_password(login_data.password, user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"code": "INVALID_CREDENTIALS", "message": "이메일 또는 비밀번호가 올바르지 않습니다"}
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"code": "USER_INACTIVE", "message": "비활성화된 계정입니다"}
        )

    access_token = create_access_token(
        subject=str(user.id),
        role=user.role.value,
        branch_id=str(user.branch_id) if user.branch_id else None,
    )

    user.last_login_at = datetime.utcnow()

    db.add(AuditLog(
        user_id=user.id,
        action=AuditAction.USER_LOGIN,
        target_type="user",
        target_id=user.id,
        branch_id=user.branch_id,
        ip_address=request.client.host if request.client else None,
    ))

    await db.commit()
    await db.refresh(user)

    return SuccessResponse(
        data=LoginResponse(
            token=TokenResponse(
                access_token=access_token,
                token_type="bearer",
                expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60
            ),
            user=UserInfo.model_validate(user)
        )
    )


@router.get("/me", response_model=SuccessResponse[UserInfo])
async def get_me(
    current_user: User = Depends(get_current_user)
):
    """현재 로그인한 사용자 정보 조회"""
    return SuccessResponse(data=UserInfo.model_validate(current_user))
