"""
수리점 지점 재고 관리 시스템 - FastAPI 메인 애플리케이션
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from app.core.config import settings
from app.core.database import init_db, AsyncSessionLocal
from app.core.exceptions import ServiceError
from app.core.logging import setup_logging
from app.schemas.common import ErrorDetail, ErrorResponse
from app.api.v1.router import api_router
from app.services.notifications import register_notification_handlers

setup_logging()
logger = logging.getLogger(__name__)

# 카탈로그 부품 변경 → 지점 알림
register_notification_handlers()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """애플리케이션 시작/종료 이벤트"""
    # 시작 시
    await init_db()

    # 초기 관리자 계정 생성
    await create_initial_admin()

    yield


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="중앙 부품 카탈로그와 지점별 재고를 동기화하고 지점에 변경 알림을 전달하는 시스템",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS 설정
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# 예외 핸들러
@app.exception_handler(ServiceError)
async def service_exception_handler(request: Request, exc: ServiceError):
    """서비스 예외 핸들러 (HTTPException과 같은 detail 형식)"""
    if exc.status_code >= 500:
        logger.error(f"[API] {request.method} {request.url.path} 실패: {exc.code} {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.to_detail()},
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """유효성 검증 예외 핸들러"""
    errors = []
    for error in exc.errors():
        errors.append({
            "field": ".".join(str(loc) for loc in error["loc"]),
            "message": error["msg"],
        })

    body = ErrorResponse(error=ErrorDetail(
        code="VALIDATION_ERROR",
        message="입력값 검증에 실패했습니다",
        details={"errors": errors},
    ))
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=body.model_dump(),
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """일반 예외 핸들러"""
    logger.exception(f"[API] {request.method} {request.url.path} 처리 중 예외: {exc}")
    body = ErrorResponse(error=ErrorDetail(
        code="INTERNAL_ERROR",
        message="서버 내부 오류가 발생했습니다",
        details={"error": str(exc)} if settings.DEBUG else None,
    ))
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=body.model_dump(),
    )


# API 라우터 등록
app.include_router(api_router, prefix="/api/v1")


# 헬스 체크
@app.get("/health")
async def health_check():
    """헬스 체크"""
    return {"status": "healthy", "version": settings.APP_VERSION}


async def create_initial_admin():
    """초기 관리자 계정 생성"""
    from sqlalchemy import select
    from app.models.user import User
    from app.models.enums import UserRole
    from app.core.security import get_password_hash

    async with AsyncSessionLocal() as session:
        # 이미 관리자가 있는지 확인
        result = await session.execute(
            select(User).where(User.role == UserRole.ADMIN).limit(1)
        )
        if result.scalar_one_or_none():
            return

        admin_user = User(
            email=settings.ADMIN_EMAIL,
            password_hash=get_password_hash(settings.ADMIN_PASSWORD),
            name="관리자",
            role=UserRole.ADMIN,
        )
        session.add(admin_user)
        await session.commit()
        logger.info(f"초기 관리자 계정 생성: {settings.ADMIN_EMAIL}")
