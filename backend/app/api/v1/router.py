"""
수리점 지점 재고 관리 시스템 - API v1 라우터
모든 v1 엔드포인트를 여기서 통합
"""

from fastapi import APIRouter

from app.api.v1 import (
    auth,
    branches,
    parts,
    branch_parts,
    notifications,
    admin,
)

api_router = APIRouter()

# 인증
api_router.include_router(
    auth.router,
    prefix="/auth",
    tags=["인증"]
)

# 지점 관리
api_router.include_router(
    branches.router,
    prefix="/branches",
    tags=["지점"]
)

# 카탈로그 부품
api_router.include_router(
    parts.router,
    prefix="/parts",
    tags=["카탈로그 부품"]
)

# 지점 재고
api_router.include_router(
    branch_parts.router,
    prefix="/branch-parts",
    tags=["지점 재고"]
)

# 알림
api_router.include_router(
    notifications.router,
    prefix="/notifications",
    tags=["알림"]
)

# 관리자 (일괄 동기화)
api_router.include_router(
    admin.router,
    prefix="/admin",
    tags=["관리자"]
)
