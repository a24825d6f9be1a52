"""
수리점 지점 재고 관리 시스템 - 지점 재고 스키마
지점 부품 조회/수정, 카탈로그 동기화 결과, 재고 최신 여부 응답
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.models.enums import Currency, SyncChangeType
from app.schemas.common import LocalizedText, LocalizedOptionalText


class BranchPartSyncRequest(BaseModel):
    """
    지점 부품 일괄 추가/갱신 요청

    형식 검증은 서비스에서 수행한다. branch_id 누락이나 목록이 아닌 parts는 400,
    잘못된 부품 참조는 해당 항목만 실패로 기록된다.
    """
    branch_id: Optional[str] = Field(None, description="대상 지점 ID")
    parts: Any = Field(None, description="동기화할 카탈로그 부품 참조 목록 [{id} 또는 {_id}]")


class BranchPartResponse(BaseModel):
    """지점 부품 (확장 필드 포함)"""
    model_config = ConfigDict(extra="allow")

    id: UUID
    part_id: UUID
    brand_id: UUID
    model_id: UUID
    device_type_id: UUID
    name: dict[str, Any]
    description: Optional[dict[str, Any]] = None
    category: str
    barcode: Optional[str] = None
    qr_code: Optional[str] = None
    compatible_with: list[Any] = Field(default_factory=list)
    is_active: bool

    branch_stock: int
    branch_min_stock_level: int
    branch_cost: Decimal
    branch_price: Decimal
    branch_margin: Decimal
    branch_shelf_number: str
    branch_service_fee_amount: Decimal
    branch_service_fee_currency: str

    created_by: Optional[dict[str, Any]] = None
    updated_by: Optional[dict[str, Any]] = None
    created_at: datetime
    updated_at: datetime


class BranchPartUpdateRequest(BaseModel):
    """
    지점 부품 단건 수정 요청

    허용 필드 외의 키는 무시된다.
    """
    model_config = ConfigDict(extra="ignore")

    branch_id: str = Field(..., min_length=1)

    # 카탈로그 미러 필드
    brand_id: Optional[UUID] = None
    model_id: Optional[UUID] = None
    device_type_id: Optional[UUID] = None
    name: Optional[LocalizedText] = None
    description: Optional[LocalizedOptionalText] = None
    category: Optional[str] = Field(None, min_length=1, max_length=100)
    barcode: Optional[str] = Field(None, max_length=100)
    qr_code: Optional[str] = Field(None, max_length=255)
    compatible_with: Optional[list[UUID]] = None
    is_active: Optional[bool] = None

    # 지점 소유 필드
    branch_stock: Optional[int] = Field(None, ge=0)
    branch_min_stock_level: Optional[int] = Field(None, ge=0)
    branch_cost: Optional[Decimal] = Field(None, ge=0)
    branch_price: Optional[Decimal] = Field(None, ge=0)
    branch_margin: Optional[Decimal] = None
    branch_shelf_number: Optional[str] = Field(None, max_length=50)
    branch_service_fee_amount: Optional[Decimal] = Field(None, ge=0)
    branch_service_fee_currency: Optional[Currency] = None

    # 생략은 허용, 명시적 null은 거부 (description/barcode/qr_code만 null 허용)
    @field_validator(
        "brand_id", "model_id", "device_type_id", "name", "category", "compatible_with", "is_active",
        "branch_stock", "branch_min_stock_level", "branch_cost", "branch_price", "branch_margin",
        "branch_shelf_number", "branch_service_fee_amount", "branch_service_fee_currency",
    )
    @classmethod
    def reject_null(cls, value):
        if value is None:
            raise ValueError("null을 허용하지 않는 필드입니다")
        return value


class SyncStats(BaseModel):
    """동기화 통계 (failed = 모든 실패, 나머지는 실패 사유별 건수)"""
    total: int = 0
    processed: int = 0
    success: int = 0
    failed: int = 0
    not_found: int = 0
    validation_errors: int = 0
    db_errors: int = 0


class SyncItemResult(BaseModel):
    """부품별 성공 결과"""
    part_id: str
    success: bool = True
    type: SyncChangeType
    data: BranchPartResponse


class SyncItemError(BaseModel):
    """부품별 실패 결과"""
    part_id: Optional[str] = None
    reason: str = Field(..., description="not_found | validation | db_error")
    error: str


class BranchPartSyncResult(BaseModel):
    """지점 부품 동기화 보고서"""
    stats: SyncStats
    results: list[SyncItemResult] = Field(default_factory=list)
    errors: list[SyncItemError] = Field(default_factory=list)


class InventoryStatusResponse(BaseModel):
    """브랜드별 지점 재고 최신 여부"""
    needs_update: bool
    last_part_update: Optional[datetime] = None
    last_inventory_update: Optional[datetime] = None
