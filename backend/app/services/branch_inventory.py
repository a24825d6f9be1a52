"""
수리점 지점 재고 관리 시스템 - 지점 재고 서비스
지점 재고 테이블 조회/생성/수정 + 카탈로그 → 지점 동기화(지정 부품)

- 카탈로그 동기화는 카탈로그 미러 필드만 갱신하고 branch_ 필드는 건드리지 않는다.
- 부품 단위로 커밋하므로 일부 실패가 다른 부품 결과를 되돌리지 않는다.
"""

import logging
import uuid
from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from sqlalchemy import Table, select, insert, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.exceptions import InvalidRequestError, NotFoundError, PersistenceError
from app.models.audit_log import AuditLog
from app.models.branch_part import (
    BRANCH_DEFAULTS,
    BRANCH_FIELDS,
    BRANCH_PART_UPDATABLE_FIELDS,
    CATALOG_FIELDS,
    branch_inventory,
    catalog_values,
    recompute_branch_margin,
    row_to_record,
    split_known_fields,
)
from app.models.enums import AuditAction, SyncChangeType
from app.models.part import Part
from app.schemas.branch_part import (
    BranchPartResponse,
    BranchPartSyncResult,
    SyncItemError,
    SyncItemResult,
    SyncStats,
)
from app.services.access import Actor, ensure_branch_access, parse_uuid, require_branch

logger = logging.getLogger(__name__)


# ============================================================================
# 저장소 (지점 재고 테이블 단위)
# ============================================================================

def catalog_snapshot(part: Part) -> dict[str, Any]:
    """
    카탈로그 부품 → 동기화용 스냅샷

    롤백으로 ORM 객체가 만료되어도 사용할 수 있도록 값만 복사한다.
    """
    snapshot = catalog_values(part)
    snapshot["compatible_with"] = [str(v) for v in snapshot.get("compatible_with") or []]
    snapshot["part_id"] = part.id
    snapshot["price_amount"] = part.price_amount
    return snapshot


def _normalize_values(values: dict[str, Any]) -> dict[str, Any]:
    """JSON 컬럼에 저장 가능한 형태로 변환"""
    normalized = dict(values)
    if normalized.get("compatible_with") is not None:
        normalized["compatible_with"] = [str(v) for v in normalized["compatible_with"]]
    for key in ("name", "description"):
        value = normalized.get(key)
        if hasattr(value, "model_dump"):
            normalized[key] = value.model_dump()
    currency = normalized.get("branch_service_fee_currency")
    if currency is not None and hasattr(currency, "value"):
        normalized["branch_service_fee_currency"] = currency.value
    return normalized


async def find_by_id(db: AsyncSession, table: Table, branch_part_id: uuid.UUID):
    result = await db.execute(select(table).where(table.c.id == branch_part_id))
    return result.first()


async def find_by_part_id(db: AsyncSession, table: Table, part_id: uuid.UUID):
    result = await db.execute(select(table).where(table.c.part_id == part_id))
    return result.first()


async def create_branch_part(db: AsyncSession, table: Table, values: dict[str, Any]) -> uuid.UUID:
    """
    지점 부품 행 생성

    테이블에 없는 키는 extra에 보관한다. part_id/바코드/QR 중복 시 IntegrityError.
    """
    known, extra = split_known_fields(table, values)
    now = datetime.utcnow()
    row_id = known.setdefault("id", uuid.uuid4())
    known.setdefault("created_at", now)
    known.setdefault("updated_at", now)
    if extra:
        known["extra"] = extra
    await db.execute(insert(table).values(**known))
    return row_id


async def load_record(db: AsyncSession, table: Table, branch_part_id: uuid.UUID) -> dict[str, Any]:
    row = await find_by_id(db, table, branch_part_id)
    if row is None:
        raise NotFoundError("지점 부품을 찾을 수 없습니다", code="BRANCH_PART_NOT_FOUND")
    return row_to_record(row)


async def upsert_from_catalog(
    db: AsyncSession,
    table: Table,
    snapshot: dict[str, Any],
    actor: dict[str, Any],
    *,
    reassert_branch_fields: bool = False,
    seed_price: bool = False,
) -> tuple[SyncChangeType, uuid.UUID]:
    """
    카탈로그 스냅샷으로 지점 부품 생성 또는 미러 필드 갱신 (커밋은 호출자)

    reassert_branch_fields: 갱신 시 기존 branch_ 값을 그대로 다시 기록
    seed_price: 신규 생성 시 branch_price를 카탈로그 판매가로 설정
    """
    part_id = snapshot["part_id"]
    mirror = {field: snapshot[field] for field in CATALOG_FIELDS}
    now = datetime.utcnow()

    existing = await find_by_part_id(db, table, part_id)
    if existing is None:
        values = {
            "part_id": part_id,
            **mirror,
            **BRANCH_DEFAULTS,
            "created_by": actor,
            "updated_by": actor,
        }
        if seed_price and snapshot.get("price_amount") is not None:
            values["branch_price"] = Decimal(str(snapshot["price_amount"]))
        try:
            row_id = await create_branch_part(db, table, values)
            return SyncChangeType.CREATED, row_id
        except IntegrityError:
            # 동시 최초 동기화로 같은 부품 행이 먼저 생성된 경우 갱신으로 처리
            await db.rollback()
            existing = await find_by_part_id(db, table, part_id)
            if existing is None:
                raise
            logger.info(f"[BranchInventory] 동시 생성 감지, 갱신으로 전환: part={part_id}")

    values = {**mirror, "updated_by": actor, "updated_at": now}
    if reassert_branch_fields:
        current = existing._mapping
        values.update({field: current[field] for field in BRANCH_FIELDS})
    await db.execute(update(table).where(table.c.id == existing.id).values(**values))
    return SyncChangeType.UPDATED, existing.id


# ============================================================================
# 지정 부품 동기화
# ============================================================================

def _ref_id(ref: Any) -> Any:
    """부품 참조({id}/{_id}/모델/문자열)에서 ID 추출"""
    if isinstance(ref, dict):
        return ref.get("id") or ref.get("_id") or ref.get("part_id")
    if isinstance(ref, (str, uuid.UUID)):
        return ref
    return getattr(ref, "id", ref)


async def add_or_update_branch_parts(
    db: AsyncSession,
    actor: Actor,
    branch_id: Any,
    part_refs: Any,
) -> BranchPartSyncResult:
    """
    지정한 카탈로그 부품들을 지점 재고에 추가/갱신

    부품별로 독립 처리하며 실패는 통계와 errors에 기록하고 계속 진행한다.
    """
    if not branch_id or not isinstance(part_refs, (list, tuple)):
        raise InvalidRequestError("branch_id와 parts 목록이 필요합니다")

    branch_uuid = parse_uuid(branch_id, "branch_id")
    ensure_branch_access(actor, branch_uuid)
    await require_branch(db, branch_uuid)
    table = await branch_inventory.ensure_inventory_table(db, branch_uuid)
    actor_snapshot = actor.snapshot()

    stats = SyncStats(total=len(part_refs))
    results: list[SyncItemResult] = []
    errors: list[SyncItemError] = []

    for ref in part_refs:
        stats.processed += 1
        raw_id = _ref_id(ref)

        try:
            part_id = uuid.UUID(str(raw_id)) if raw_id else None
        except (TypeError, ValueError):
            part_id = None
        if part_id is None:
            stats.failed += 1
            stats.validation_errors += 1
            errors.append(SyncItemError(
                part_id=str(raw_id) if raw_id else None,
                reason="validation",
                error="부품 ID 형식이 올바르지 않습니다",
            ))
            continue

        try:
            part = await db.get(Part, part_id)
            if part is None:
                stats.failed += 1
                stats.not_found += 1
                errors.append(SyncItemError(
                    part_id=str(part_id), reason="not_found", error="카탈로그 부품을 찾을 수 없습니다",
                ))
                continue

            change, row_id = await upsert_from_catalog(db, table, catalog_snapshot(part), actor_snapshot)
            await db.commit()
            record = await load_record(db, table, row_id)
        except SQLAlchemyError as e:
            await db.rollback()
            stats.failed += 1
            stats.db_errors += 1
            errors.append(SyncItemError(part_id=str(part_id), reason="db_error", error=str(e)))
            logger.error(f"[BranchInventory] 부품 동기화 실패 (branch={branch_uuid}, part={part_id}): {e}")
            continue

        stats.success += 1
        results.append(SyncItemResult(
            part_id=str(part_id),
            type=change,
            data=BranchPartResponse(**record),
        ))

    db.add(AuditLog(
        user_id=actor.id,
        action=AuditAction.BRANCH_PART_SYNC,
        target_type="branch_part",
        branch_id=branch_uuid,
        after_data=stats.model_dump(),
        description=f"지점 부품 동기화: 성공 {stats.success} / 실패 {stats.failed}",
    ))

    logger.info(
        f"[BranchInventory] 지점 {branch_uuid} 동기화 완료: "
        f"total={stats.total}, success={stats.success}, failed={stats.failed}"
    )
    return BranchPartSyncResult(stats=stats, results=results, errors=errors)


# ============================================================================
# 지점 부품 단건 수정
# ============================================================================

async def update_branch_part(
    db: AsyncSession,
    actor: Actor,
    branch_id: Any,
    branch_part_id: Any,
    fields: dict[str, Any],
) -> dict[str, Any]:
    """
    지점 부품 수정 (허용 필드만 반영, 그 외 키는 무시)

    branch_cost/branch_price가 바뀌면 branch_margin을 다시 계산한다.
    """
    if not branch_id:
        raise InvalidRequestError("branch_id가 필요합니다")
    branch_uuid = parse_uuid(branch_id, "branch_id")
    ensure_branch_access(actor, branch_uuid)
    branch_part_uuid = parse_uuid(branch_part_id, "branch_part_id")
    await require_branch(db, branch_uuid)

    table = await branch_inventory.ensure_inventory_table(db, branch_uuid)
    row = await find_by_id(db, table, branch_part_uuid)
    if row is None:
        raise NotFoundError("지점 부품을 찾을 수 없습니다", code="BRANCH_PART_NOT_FOUND")

    part = await db.get(Part, row.part_id)
    if part is None:
        raise NotFoundError("카탈로그 부품을 찾을 수 없습니다", code="PART_NOT_FOUND")

    current = dict(row._mapping)
    values = _normalize_values(
        {key: value for key, value in fields.items() if key in BRANCH_PART_UPDATABLE_FIELDS}
    )
    null_fields = sorted(key for key, value in values.items() if value is None and not table.c[key].nullable)
    if null_fields:
        raise InvalidRequestError("비어 있을 수 없는 필드입니다", details={"fields": null_fields})
    recompute_branch_margin(values, current)
    values["updated_by"] = actor.snapshot()
    values["updated_at"] = datetime.utcnow()

    try:
        await db.execute(update(table).where(table.c.id == branch_part_uuid).values(**values))
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"[BranchInventory] 지점 부품 수정 실패 ({branch_part_uuid}): {e}")
        raise PersistenceError(
            "지점 부품 저장 중 오류가 발생했습니다",
            details={"error": str(e)} if settings.DEBUG else None,
        )

    db.add(AuditLog(
        user_id=actor.id,
        action=AuditAction.BRANCH_PART_UPDATE,
        target_type="branch_part",
        target_id=branch_part_uuid,
        branch_id=branch_uuid,
        before_data={key: _jsonable(current.get(key)) for key in values if key in current},
        after_data={key: _jsonable(value) for key, value in values.items()},
    ))

    return await load_record(db, table, branch_part_uuid)


def _jsonable(value: Any) -> Any:
    if isinstance(value, (uuid.UUID, Decimal)):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, list):
        return [_jsonable(v) for v in value]
    return value


# ============================================================================
# 조회
# ============================================================================

async def list_branch_parts(
    db: AsyncSession,
    actor: Actor,
    branch_id: Any,
    shelf_number: Optional[str] = None,
    min_stock: bool = False,
) -> list[dict[str, Any]]:
    """지점 부품 목록 (카테고리 → 터키어 부품명 순)"""
    branch_uuid = parse_uuid(branch_id, "branch_id")
    ensure_branch_access(actor, branch_uuid)
    await require_branch(db, branch_uuid)
    table = await branch_inventory.ensure_inventory_table(db, branch_uuid)

    query = select(table)
    if shelf_number:
        query = query.where(table.c.branch_shelf_number == shelf_number)
    if min_stock:
        query = query.where(table.c.branch_stock <= table.c.branch_min_stock_level)
    query = query.order_by(table.c.category, table.c.name["tr"].as_string())

    result = await db.execute(query)
    return [row_to_record(row) for row in result.all()]


async def get_or_create_branch_part(
    db: AsyncSession,
    actor: Actor,
    branch_id: Any,
    part_id: Any,
) -> dict[str, Any]:
    """카탈로그 부품의 지점 재고 조회 (없으면 기본값으로 생성)"""
    branch_uuid = parse_uuid(branch_id, "branch_id")
    ensure_branch_access(actor, branch_uuid)
    part_uuid = parse_uuid(part_id, "part_id")
    await require_branch(db, branch_uuid)
    table = await branch_inventory.ensure_inventory_table(db, branch_uuid)

    part = await db.get(Part, part_uuid)
    if part is None:
        raise NotFoundError("카탈로그 부품을 찾을 수 없습니다", code="PART_NOT_FOUND")

    row = await find_by_part_id(db, table, part_uuid)
    if row is not None:
        return row_to_record(row)

    try:
        _, row_id = await upsert_from_catalog(db, table, catalog_snapshot(part), actor.snapshot())
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"[BranchInventory] 지점 부품 생성 실패 (branch={branch_uuid}, part={part_uuid}): {e}")
        raise PersistenceError(
            "지점 부품 저장 중 오류가 발생했습니다",
            details={"error": str(e)} if settings.DEBUG else None,
        )

    logger.info(f"[BranchInventory] 지점 부품 생성: branch={branch_uuid}, part={part_uuid}")
    return await load_record(db, table, row_id)


