"""
수리점 지점 재고 관리 시스템 - 공통 스키마
API 응답 포맷 및 공통 타입 정의
"""

from decimal import Decimal
from typing import Any, Generic, TypeVar, Optional

from pydantic import BaseModel, Field

from app.models.enums import Currency


# 제네릭 타입 변수
T = TypeVar("T")


class ResponseMeta(BaseModel):
    """응답 메타 정보"""
    total: Optional[int] = None
    page: Optional[int] = None
    page_size: Optional[int] = None
    has_next: Optional[bool] = None


class SuccessResponse(BaseModel, Generic[T]):
    """성공 응답 포맷"""
    data: T
    meta: Optional[ResponseMeta] = None


class ErrorDetail(BaseModel):
    """에러 상세 정보"""
    code: str = Field(..., description="에러 코드")
    message: str = Field(..., description="에러 메시지")
    details: Optional[dict[str, Any]] = Field(None, description="추가 상세 정보")


class ErrorResponse(BaseModel):
    """에러 응답 포맷"""
    error: ErrorDetail


class CountResponse(BaseModel):
    """일괄 처리 건수 응답"""
    count: int
    message: Optional[str] = None


class LocalizedText(BaseModel):
    """다국어 필수 텍스트 (부품명)"""
    tr: str = Field(..., min_length=1)
    de: str = Field(..., min_length=1)
    en: str = Field(..., min_length=1)


class LocalizedOptionalText(BaseModel):
    """다국어 선택 텍스트 (설명)"""
    tr: Optional[str] = None
    de: Optional[str] = None
    en: Optional[str] = None


class Money(BaseModel):
    """금액 {amount, currency}"""
    amount: Decimal = Field(Decimal("0"), ge=0)
    currency: Currency = Currency.EUR

