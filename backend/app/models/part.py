"""
수리점 지점 재고 관리 시스템 - Part 모델 (카탈로그 부품)
모든 지점이 공유하는 기준 부품 정보
"""

import uuid
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from sqlalchemy import (
    String, Integer, Boolean, DateTime, Numeric, Uuid, Index, event, inspect,
)
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base, JSONVariant


MARGIN_QUANT = Decimal("0.01")


def compute_margin(cost, price) -> Optional[Decimal]:
    """
    마진(%) 계산: (판매가 - 원가) / 원가 * 100

    원가가 0 이하이면 None (기존 마진 유지)
    """
    if cost is None or price is None:
        return None
    cost = Decimal(str(cost))
    price = Decimal(str(price))
    if cost <= 0:
        return None
    return ((price - cost) / cost * 100).quantize(MARGIN_QUANT, rounding=ROUND_HALF_UP)


class Part(Base):
    """카탈로그 부품 테이블"""

    __tablename__ = "parts"

    # 기본 키
    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4
    )

    # 분류 (외부 카탈로그 참조)
    device_type_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        nullable=False,
        comment="기기 타입 ID"
    )
    brand_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        nullable=False,
        comment="브랜드 ID"
    )
    model_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        nullable=False,
        comment="모델 ID"
    )
    category: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        comment="카테고리"
    )

    # 다국어 이름/설명 {tr, de, en}
    name: Mapped[dict] = mapped_column(
        JSONVariant,
        nullable=False,
        comment="부품명 {tr, de, en}"
    )
    description: Mapped[dict | None] = mapped_column(
        JSONVariant,
        nullable=True,
        comment="설명 {tr, de, en}"
    )

    # 식별자
    barcode: Mapped[str | None] = mapped_column(
        String(100),
        unique=True,
        nullable=True,
        comment="바코드"
    )
    qr_code: Mapped[str | None] = mapped_column(
        String(255),
        unique=True,
        nullable=True,
        comment="QR 코드"
    )

    # 가격 정보
    cost_amount: Mapped[Decimal] = mapped_column(
        Numeric(12, 2),
        default=Decimal("0"),
        nullable=False,
        comment="원가"
    )
    cost_currency: Mapped[str] = mapped_column(String(3), default="EUR", nullable=False)
    price_amount: Mapped[Decimal] = mapped_column(
        Numeric(12, 2),
        default=Decimal("0"),
        nullable=False,
        comment="판매가"
    )
    price_currency: Mapped[str] = mapped_column(String(3), default="EUR", nullable=False)
    service_fee_amount: Mapped[Decimal] = mapped_column(
        Numeric(12, 2),
        default=Decimal("0"),
        nullable=False,
        comment="기술 서비스 요금"
    )
    service_fee_currency: Mapped[str] = mapped_column(String(3), default="EUR", nullable=False)
    margin: Mapped[Decimal] = mapped_column(
        Numeric(10, 2),
        default=Decimal("20"),
        nullable=False,
        comment="마진(%) - 원가/판매가 변경 시 자동 계산"
    )

    # 재고 참고값 (지점 재고는 지점 테이블에서 관리)
    stock: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    min_stock_level: Mapped[int] = mapped_column(Integer, default=5, nullable=False)
    shelf_number: Mapped[str] = mapped_column(
        String(50),
        default="0",
        nullable=False,
        comment="선반 번호"
    )

    # 호환 모델 ID 목록
    compatible_with: Mapped[list] = mapped_column(
        JSONVariant,
        default=list,
        nullable=False,
        comment="호환 모델 ID 목록"
    )

    # 상태 (삭제 = 비활성화)
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
        comment="활성 상태"
    )

    # 작업자 스냅샷 {id, email, full_name}
    created_by: Mapped[dict] = mapped_column(JSONVariant, nullable=False, comment="등록자")
    updated_by: Mapped[dict | None] = mapped_column(JSONVariant, nullable=True, comment="최종 수정자")

    # 타임스탬프
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        nullable=False,
        comment="생성 일시"
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False,
        comment="수정 일시 (지점 재고 최신 여부 판단 기준)"
    )

    __table_args__ = (
        Index("ix_parts_category", "category"),
        Index("ix_parts_brand_model_device", "brand_id", "model_id", "device_type_id"),
        Index("ix_parts_is_active", "is_active"),
        Index("ix_parts_shelf_number", "shelf_number"),
        Index("ix_parts_brand_updated", "brand_id", "updated_at"),
    )

    def __repr__(self) -> str:
        return f"<Part(id={self.id}, category={self.category})>"


@event.listens_for(Part, "before_insert")
def _margin_on_insert(mapper, connection, target: Part) -> None:
    margin = compute_margin(target.cost_amount, target.price_amount)
    if margin is not None:
        target.margin = margin


@event.listens_for(Part, "before_update")
def _margin_on_update(mapper, connection, target: Part) -> None:
    state = inspect(target)
    if not (
        state.attrs.cost_amount.history.has_changes()
        or state.attrs.price_amount.history.has_changes()
    ):
        return
    margin = compute_margin(target.cost_amount, target.price_amount)
    if margin is not None:
        target.margin = margin
