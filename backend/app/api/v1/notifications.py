"""
수리점 지점 재고 관리 시스템 - 알림 API
소속 지점의 읽지 않은 알림 조회 + 읽음 처리
"""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.api.deps import get_current_user
from app.models.user import User
from app.schemas.common import SuccessResponse, CountResponse, ResponseMeta
from app.schemas.notification import NotificationResponse
from app.services import notifications

router = APIRouter()


def _require_branch(user: User) -> UUID:
    """알림은 소속 지점 기준 (지점 미배정 사용자는 400)"""
    if user.branch_id is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"code": "BRANCH_NOT_ASSIGNED", "message": "소속 지점이 없는 사용자입니다"},
        )
    return user.branch_id


@router.get("/unread", response_model=SuccessResponse[list[NotificationResponse]])
async def list_notifications(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """읽지 않은 알림 목록 (최신순)"""
    branch_id = _require_branch(current_user)
    items = await notifications.list_unread(db, branch_id)
    return SuccessResponse(
        data=[NotificationResponse.from_notification(n) for n in items],
        meta=ResponseMeta(total=len(items)),
    )


@router.post("/read-all", response_model=SuccessResponse[CountResponse])
async def mark_all_notifications_read(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """소속 지점 알림 전체 읽음 처리"""
    branch_id = _require_branch(current_user)
    count = await notifications.mark_all_read(db, branch_id)
    await db.commit()
    return SuccessResponse(data=CountResponse(count=count, message=f"{count}건의 알림을 읽음 처리했습니다"))


@router.post("/{notification_id}/read", response_model=SuccessResponse[NotificationResponse])
async def mark_notification_read(
    notification_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """알림 1건 읽음 처리"""
    branch_id = _require_branch(current_user)
    notification = await notifications.mark_read(db, branch_id, notification_id)
    await db.commit()
    return SuccessResponse(data=NotificationResponse.from_notification(notification))
