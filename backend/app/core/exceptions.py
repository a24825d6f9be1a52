"""
수리점 지점 재고 관리 시스템 - 서비스 예외
서비스 계층에서 발생시키고 main.py의 예외 핸들러가 HTTP 응답으로 변환
"""

from typing import Any, Optional

from fastapi import status


class ServiceError(Exception):
    """서비스 예외 기본 클래스"""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "SERVICE_ERROR"

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code
        self.details = details

    def to_detail(self) -> dict[str, Any]:
        detail: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            detail["details"] = self.details
        return detail


class InvalidRequestError(ServiceError):
    """필수 입력 누락/형식 오류 (저장소 접근 전 거부)"""
    status_code = status.HTTP_400_BAD_REQUEST
    code = "INVALID_REQUEST"


class BranchAccessDeniedError(ServiceError):
    """다른 지점에 대한 접근 시도"""
    status_code = status.HTTP_403_FORBIDDEN
    code = "BRANCH_ACCESS_DENIED"


class NotFoundError(ServiceError):
    """부품/지점 부품/지점/알림 없음"""
    status_code = status.HTTP_404_NOT_FOUND
    code = "NOT_FOUND"


class PersistenceError(ServiceError):
    """저장소 작업 실패 (단건 작업에서만 요청 실패로 전파)"""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "PERSISTENCE_ERROR"


class ConflictError(ServiceError):
    """고유값(바코드/QR/지점 코드) 중복"""
    status_code = status.HTTP_409_CONFLICT
    code = "CONFLICT"
