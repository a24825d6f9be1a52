"""
수리점 지점 재고 관리 시스템 - 보안 및 인증
JWT 토큰 생성/검증, 비밀번호 해싱
"""

from datetime import datetime, timedelta
from typing import Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

from app.core.config import settings


# 비밀번호 해싱 컨텍스트 (bcrypt 사용)
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """평문 비밀번호와 해시된 비밀번호 비교"""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """비밀번호 해싱"""
    return pwd_context.hash(password)


def create_access_token(
    subject: str,
    role: str,
    branch_id: Optional[str] = None,
    expires_delta: Optional[timedelta] = None
) -> str:
    """
    JWT 액세스 토큰 생성

    Args:
        subject: 토큰 주체 (user_id)
        role: 사용자 역할 (admin/central_staff/branch_staff/technician)
        branch_id: 소속 지점 ID (지점 미배정 시 None)
        expires_delta: 만료 시간 (기본: 설정값)

    Returns:
        JWT 토큰 문자열

    소속 지점은 참고용으로만 싣는다. 권한 판단은 항상 DB의 사용자 정보를 기준으로 한다.
    """
    expire = datetime.utcnow() + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )

    to_encode = {
        "sub": subject,
        "role": role,
        "branch": branch_id,
        "exp": expire,
        "iat": datetime.utcnow(),
    }

    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> Optional[dict]:
    """
    JWT 액세스 토큰 검증 및 디코딩

    Returns:
        디코딩된 페이로드 또는 None (검증 실패 시)
    """
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None
