"""
수리점 지점 재고 관리 시스템 - 카탈로그 부품 스키마
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from app.models.part import Part
from app.schemas.common import LocalizedText, LocalizedOptionalText, Money


class PartBase(BaseModel):
    """부품 공통 필드"""
    model_config = ConfigDict(str_strip_whitespace=True)

    device_type_id: UUID
    brand_id: UUID
    model_id: UUID
    category: str = Field(..., min_length=1, max_length=100)
    name: LocalizedText
    description: Optional[LocalizedOptionalText] = None
    barcode: Optional[str] = Field(None, max_length=100)
    qr_code: Optional[str] = Field(None, max_length=255)
    cost: Money = Field(default_factory=Money)
    price: Money = Field(default_factory=Money)
    service_fee: Money = Field(default_factory=Money)
    margin: Decimal = Field(Decimal("20"), description="마진(%) - 원가가 0보다 크면 자동 계산")
    stock: int = Field(0, ge=0)
    min_stock_level: int = Field(5, ge=0)
    shelf_number: str = Field("0", max_length=50)
    compatible_with: list[UUID] = Field(default_factory=list)


class PartCreate(PartBase):
    """부품 생성 요청"""
    pass


class PartUpdate(BaseModel):
    """부품 수정 요청 (부분 수정)"""
    model_config = ConfigDict(str_strip_whitespace=True)

    device_type_id: Optional[UUID] = None
    brand_id: Optional[UUID] = None
    model_id: Optional[UUID] = None
    category: Optional[str] = Field(None, min_length=1, max_length=100)
    name: Optional[LocalizedText] = None
    description: Optional[LocalizedOptionalText] = None
    barcode: Optional[str] = Field(None, max_length=100)
    qr_code: Optional[str] = Field(None, max_length=255)
    cost: Optional[Money] = None
    price: Optional[Money] = None
    service_fee: Optional[Money] = None
    margin: Optional[Decimal] = None
    stock: Optional[int] = Field(None, ge=0)
    min_stock_level: Optional[int] = Field(None, ge=0)
    shelf_number: Optional[str] = Field(None, max_length=50)
    compatible_with: Optional[list[UUID]] = None
    is_active: Optional[bool] = None


class PartResponse(BaseModel):
    """부품 응답"""
    id: UUID
    device_type_id: UUID
    brand_id: UUID
    model_id: UUID
    category: str
    name: dict[str, Any]
    description: Optional[dict[str, Any]] = None
    barcode: Optional[str] = None
    qr_code: Optional[str] = None
    cost: Money
    price: Money
    service_fee: Money
    margin: Decimal
    stock: int
    min_stock_level: int
    shelf_number: str
    compatible_with: list[str]
    is_active: bool
    created_by: Optional[dict[str, Any]] = None
    updated_by: Optional[dict[str, Any]] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_part(cls, part: Part) -> "PartResponse":
        return cls(
            id=part.id,
            device_type_id=part.device_type_id,
            brand_id=part.brand_id,
            model_id=part.model_id,
            category=part.category,
            name=part.name,
            description=part.description,
            barcode=part.barcode,
            qr_code=part.qr_code,
            cost=Money(amount=part.cost_amount, currency=part.cost_currency),
            price=Money(amount=part.price_amount, currency=part.price_currency),
            service_fee=Money(amount=part.service_fee_amount, currency=part.service_fee_currency),
            margin=part.margin,
            stock=part.stock,
            min_stock_level=part.min_stock_level,
            shelf_number=part.shelf_number,
            compatible_with=[str(v) for v in part.compatible_with or []],
            is_active=part.is_active,
            created_by=part.created_by,
            updated_by=part.updated_by,
            created_at=part.created_at,
            updated_at=part.updated_at,
        )


class PartListResponse(BaseModel):
    """부품 목록 응답"""
    parts: list[PartResponse]
    total: int
