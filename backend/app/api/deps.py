"""
수리점 지점 재고 관리 시스템 - API 의존성
FastAPI 의존성 주입 함수
"""

from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.security import decode_access_token
from app.models.user import User
from app.models.enums import UserRole
from app.services.access import Actor


# Bearer 토큰 스킴
security = HTTPBearer()


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: AsyncSession = Depends(get_db)
) -> User:
    """
    현재 로그인한 사용자 반환

    Raises:
        HTTPException: 인증 실패 시
    """
    token = credentials.credentials
    payload = decode_access_token(token)

    if payload is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"code": "INVALID_TOKEN", "message": "유효하지 않은 토큰입니다"}
        )

    user_id = payload.get("sub")
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"code": "INVALID_TOKEN", "message": "토큰에 사용자 정보가 없습니다"}
        )

    try:
        user_uuid = UUID(user_id)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"code": "INVALID_TOKEN", "message": "잘못된 사용자 ID 형식입니다"}
        )

    result = await db.execute(select(User).where(User.id == user_uuid))
    user = result.scalar_one_or_none()

    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"code": "USER_NOT_FOUND", "message": "사용자를 찾을 수 없습니다"}
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"code": "USER_INACTIVE", "message": "비활성화된 계정입니다"}
        )

    return user


async def get_current_admin_user(
    current_user: User = Depends(get_current_user)
) -> User:
    """
    현재 관리자 사용자 반환

    Raises:
        HTTPException: 관리자가 아닐 경우
    """
    if current_user.role != UserRole.ADMIN:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={"code": "ADMIN_REQUIRED", "message": "관리자 권한이 필요합니다"}
        )
    return current_user


async def get_central_user(
    current_user: User = Depends(get_current_user)
) -> User:
    """관리자 또는 본사 직원 (모든 지점 접근 가능 역할)"""
    if not current_user.is_cross_branch:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={"code": "CENTRAL_REQUIRED", "message": "관리자 또는 본사 직원 권한이 필요합니다"}
        )
    return current_user


async def get_actor(
    current_user: User = Depends(get_current_user)
) -> Actor:
    """서비스 계층에 전달할 작업자 정보"""
    return Actor.from_user(current_user)


async def get_central_actor(
    current_user: User = Depends(get_central_user)
) -> Actor:
    return Actor.from_user(current_user)
