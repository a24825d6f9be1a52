"""
수리점 지점 재고 관리 시스템 - BranchPart (지점 재고)
지점마다 별도 테이블(branch_<지점ID>_parts)에 카탈로그 부품의 사본과 지점 고유 값을 저장

- 카탈로그 필드: 카탈로그 동기화로만 갱신되는 미러 값
- 지점 필드(branch_ 접두어): 지점에서만 수정, 카탈로그 동기화가 덮어쓰지 않음
- 알 수 없는 필드는 거부하지 않고 extra(JSON)에 보관
"""

import asyncio
import logging
import uuid
from datetime import datetime
from decimal import Decimal
from typing import Any, Iterable, Optional

from sqlalchemy import (
    Column, Table, MetaData, String, Integer, Boolean, DateTime, Numeric, Uuid, Index,
)
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import JSONVariant
from app.models.part import compute_margin

logger = logging.getLogger(__name__)


# 카탈로그에서 미러링하는 필드 (카탈로그 동기화 화이트리스트)
CATALOG_FIELDS: tuple[str, ...] = (
    "brand_id",
    "model_id",
    "device_type_id",
    "name",
    "description",
    "category",
    "barcode",
    "qr_code",
    "compatible_with",
    "is_active",
)

# 지점 소유 필드
BRANCH_FIELDS: tuple[str, ...] = (
    "branch_stock",
    "branch_min_stock_level",
    "branch_cost",
    "branch_price",
    "branch_margin",
    "branch_shelf_number",
    "branch_service_fee_amount",
    "branch_service_fee_currency",
)

# 지점 부품 단건 수정 허용 필드
BRANCH_PART_UPDATABLE_FIELDS: tuple[str, ...] = CATALOG_FIELDS + BRANCH_FIELDS

# 지점 재고 최초 생성 시 기본값
BRANCH_DEFAULTS: dict[str, Any] = {
    "branch_stock": 0,
    "branch_min_stock_level": 5,
    "branch_cost": Decimal("0"),
    "branch_price": Decimal("0"),
    "branch_margin": Decimal("20"),
    "branch_shelf_number": "0",
    "branch_service_fee_amount": Decimal("0"),
    "branch_service_fee_currency": "EUR",
}


def _branch_key(branch_id: uuid.UUID | str) -> str:
    """지점 ID → 테이블/인덱스 이름용 키 (하이픈 없는 hex)"""
    if not isinstance(branch_id, uuid.UUID):
        branch_id = uuid.UUID(str(branch_id))
    return branch_id.hex


def inventory_table_name(branch_id: uuid.UUID | str) -> str:
    """지점 재고 테이블 이름 (결정적)"""
    return f"branch_{_branch_key(branch_id)}_parts"


def build_inventory_table(branch_id: uuid.UUID | str, metadata: MetaData) -> Table:
    """지점 재고 테이블 정의 (컬럼 + 인덱스)"""
    key = _branch_key(branch_id)
    # PostgreSQL 인덱스 이름은 스키마 전역이며 63자 제한
    ix = f"ix_b{key}"

    return Table(
        inventory_table_name(branch_id),
        metadata,
        Column("id", Uuid, primary_key=True, default=uuid.uuid4),
        Column("part_id", Uuid, nullable=False, comment="카탈로그 부품 ID"),

        # 카탈로그 미러 필드
        Column("brand_id", Uuid, nullable=False),
        Column("model_id", Uuid, nullable=False),
        Column("device_type_id", Uuid, nullable=False),
        Column("name", JSONVariant, nullable=False, comment="부품명 {tr, de, en}"),
        Column("description", JSONVariant, nullable=True),
        Column("category", String(100), nullable=False),
        Column("barcode", String(100), nullable=True),
        Column("qr_code", String(255), nullable=True),
        Column("compatible_with", JSONVariant, nullable=False, default=list),
        Column("is_active", Boolean, nullable=False, default=True),

        # 지점 소유 필드
        Column("branch_stock", Integer, nullable=False, default=0),
        Column("branch_min_stock_level", Integer, nullable=False, default=5),
        Column("branch_cost", Numeric(12, 2), nullable=False, default=Decimal("0")),
        Column("branch_price", Numeric(12, 2), nullable=False, default=Decimal("0")),
        Column("branch_margin", Numeric(10, 2), nullable=False, default=Decimal("20")),
        Column("branch_shelf_number", String(50), nullable=False, default="0"),
        Column("branch_service_fee_amount", Numeric(12, 2), nullable=False, default=Decimal("0")),
        Column("branch_service_fee_currency", String(3), nullable=False, default="EUR"),

        # 작업자 스냅샷 / 확장 필드
        Column("created_by", JSONVariant, nullable=True),
        Column("updated_by", JSONVariant, nullable=True),
        Column("extra", JSONVariant, nullable=True, comment="스키마에 없는 추가 필드"),

        # 타임스탬프
        Column("created_at", DateTime, nullable=False, default=datetime.utcnow),
        Column("updated_at", DateTime, nullable=False, default=datetime.utcnow),

        Index(f"{ix}_part", "part_id", unique=True),
        Index(f"{ix}_active", "is_active"),
        Index(f"{ix}_shelf", "branch_shelf_number"),
        Index(f"{ix}_compat", "compatible_with", postgresql_using="gin"),
        Index(f"{ix}_category", "category"),
        Index(f"{ix}_brand_model_device", "brand_id", "model_id", "device_type_id"),
        Index(f"{ix}_barcode", "barcode", unique=True),
        Index(f"{ix}_qr", "qr_code", unique=True),
        Index(f"{ix}_updated", "updated_at"),
    )


class BranchInventoryRegistry:
    """
    지점 ID → 재고 테이블 핸들 레지스트리

    테이블 객체는 최초 요청 시 만들어 프로세스 수명 동안 재사용한다.
    DB 테이블 생성(create checkfirst)도 테이블별로 한 번만 수행한다.
    지점 존재 여부는 호출자가 검증한다.
    """

    def __init__(self) -> None:
        self._metadata = MetaData()
        self._tables: dict[str, Table] = {}
        self._ready: set[str] = set()
        self._lock = asyncio.Lock()

    def get_inventory_table(self, branch_id: uuid.UUID | str) -> Table:
        """테이블 핸들 반환 (없으면 정의만 생성, DB 작업 없음)"""
        name = inventory_table_name(branch_id)
        table = self._tables.get(name)
        if table is None:
            table = build_inventory_table(branch_id, self._metadata)
            self._tables[name] = table
        return table

    def is_ready(self, branch_id: uuid.UUID | str) -> bool:
        return inventory_table_name(branch_id) in self._ready

    async def ensure_inventory_table(self, db: AsyncSession, branch_id: uuid.UUID | str) -> Table:
        """
        테이블 핸들 반환 + DB 테이블 보장

        DDL은 요청 트랜잭션과 분리된 연결에서 즉시 커밋한다.
        (요청이 롤백되어도 생성된 테이블은 유지됨)
        """
        table = self.get_inventory_table(branch_id)
        if table.name in self._ready:
            return table

        async with self._lock:
            if table.name not in self._ready:
                async with db.bind.begin() as conn:
                    await conn.run_sync(table.create, checkfirst=True)
                self._ready.add(table.name)
                logger.info(f"[BranchInventory] 재고 테이블 준비 완료: {table.name}")
        return table

    def clear(self) -> None:
        """캐시 초기화 (DB 교체 시/테스트용)"""
        self._metadata = MetaData()
        self._tables.clear()
        self._ready.clear()
        self._lock = asyncio.Lock()


branch_inventory = BranchInventoryRegistry()


# ============================================================================
# 레코드 변환
# ============================================================================

def split_known_fields(table: Table, values: dict[str, Any]) -> tuple[dict[str, Any], dict[str, Any]]:
    """입력값을 테이블 컬럼 값과 extra(알 수 없는 필드)로 분리"""
    known: dict[str, Any] = {}
    extra: dict[str, Any] = {}
    for key, value in values.items():
        if key in table.c and key != "extra":
            known[key] = value
        else:
            extra[key] = value
    return known, extra


def row_to_record(row: Any) -> dict[str, Any]:
    """조회 결과 행 → dict (extra 필드를 최상위로 병합, 스키마 필드 우선)"""
    record = dict(row._mapping)
    extra = record.pop("extra", None) or {}
    for key, value in extra.items():
        record.setdefault(key, value)
    return record


def catalog_values(part: Any, fields: Iterable[str] = CATALOG_FIELDS) -> dict[str, Any]:
    """카탈로그 부품(Part)에서 미러 필드 값 추출"""
    return {field: getattr(part, field) for field in fields}


def recompute_branch_margin(values: dict[str, Any], current: Optional[dict[str, Any]] = None) -> None:
    """
    지점 마진 재계산 (지점 원가/판매가 기준)

    branch_cost 또는 branch_price가 values에 있을 때만 계산하며
    지점 원가가 0이면 기존 마진을 유지한다.
    """
    if "branch_cost" not in values and "branch_price" not in values:
        return
    current = current or {}
    cost = values.get("branch_cost", current.get("branch_cost"))
    price = values.get("branch_price", current.get("branch_price"))
    margin = compute_margin(cost, price)
    if margin is not None:
        values["branch_margin"] = margin
