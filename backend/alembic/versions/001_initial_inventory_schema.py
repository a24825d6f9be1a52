"""initial inventory schema

Revision ID: 001_initial_inventory_schema
Revises:
Create Date: 2026-10-19

공용 테이블 6개 + enum 타입 생성:
- branches (지점)
- users (사용자, 소속 지점)
- parts (카탈로그 부품)
- notifications (지점 알림)
- sync_jobs (전 지점 일괄 동기화 작업)
- audit_logs (감사로그)

지점별 재고 테이블(branch_<지점ID>_parts)은 런타임에 생성되므로 여기서 만들지 않음
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '001_initial_inventory_schema'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# =========================================================================
# postgresql.ENUM 객체 (create_type=False, 타입은 upgrade에서 직접 생성)
# DB는 Python Enum의 NAME(대문자)을 저장함
# =========================================================================
user_role_enum = postgresql.ENUM(
    'ADMIN', 'CENTRAL_STAFF', 'BRANCH_STAFF', 'TECHNICIAN',
    name='user_role', create_type=False
)
branch_language_enum = postgresql.ENUM('TR', 'DE', 'EN', name='branch_language', create_type=False)
branch_status_enum = postgresql.ENUM('ACTIVE', 'INACTIVE', name='branch_status', create_type=False)
notification_type_enum = postgresql.ENUM(
    'PART_CREATE', 'PART_UPDATE',
    name='notification_type', create_type=False
)
job_status_enum = postgresql.ENUM(
    'QUEUED', 'RUNNING', 'SUCCEEDED', 'FAILED',
    name='job_status', create_type=False
)
audit_action_enum = postgresql.ENUM(
    'USER_LOGIN',
    'PART_CREATE', 'PART_UPDATE', 'PART_DEACTIVATE',
    'BRANCH_CREATE', 'BRANCH_UPDATE', 'BRANCH_DELETE',
    'BRANCH_PART_SYNC', 'BRANCH_PART_UPDATE', 'BRANCH_SYNC_START',
    name='audit_action', create_type=False
)

ENUMS = (
    user_role_enum, branch_language_enum, branch_status_enum,
    notification_type_enum, job_status_enum, audit_action_enum,
)


def upgrade() -> None:
    # =========================================================================
    # 1. Enum 타입 생성
    # =========================================================================
    bind = op.get_bind()
    for enum_type in ENUMS:
        enum_type.create(bind, checkfirst=True)

    # =========================================================================
    # 2. branches 테이블
    # =========================================================================
    op.create_table(
        'branches',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('name', sa.String(100), nullable=False, comment='지점명'),
        sa.Column('code', sa.String(20), nullable=False, unique=True, comment='지점 코드'),
        sa.Column('address', postgresql.JSONB, nullable=True, comment='주소'),
        sa.Column('phone', sa.String(50), nullable=False, comment='대표 연락처'),
        sa.Column('manager_name', sa.String(100), nullable=False, comment='지점장 이름'),
        sa.Column('is_central', sa.Boolean, nullable=False, server_default='false', comment='본사 여부'),
        sa.Column('default_language', branch_language_enum, nullable=False, server_default='TR'),
        sa.Column('status', branch_status_enum, nullable=False, server_default='ACTIVE'),
        sa.Column('deleted_at', sa.DateTime, nullable=True, comment='삭제 일시'),
        sa.Column('created_at', sa.DateTime, nullable=False, server_default=sa.text('NOW()')),
        sa.Column('updated_at', sa.DateTime, nullable=False, server_default=sa.text('NOW()')),
    )
    op.create_index('ix_branches_name', 'branches', ['name'])
    op.create_index('ix_branches_is_central', 'branches', ['is_central'])

    # =========================================================================
    # 3. users 테이블
    # =========================================================================
    op.create_table(
        'users',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('email', sa.String(255), nullable=False, unique=True, comment='이메일'),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('name', sa.String(100), nullable=False, comment='이름'),
        sa.Column('role', user_role_enum, nullable=False, server_default='BRANCH_STAFF'),
        sa.Column('branch_id', postgresql.UUID(as_uuid=True),
                  sa.ForeignKey('branches.id', ondelete='SET NULL'), nullable=True, comment='소속 지점 ID'),
        sa.Column('is_active', sa.Boolean, nullable=False, server_default='true'),
        sa.Column('created_at', sa.DateTime, nullable=False, server_default=sa.text('NOW()')),
        sa.Column('updated_at', sa.DateTime, nullable=False, server_default=sa.text('NOW()')),
        sa.Column('last_login_at', sa.DateTime, nullable=True),
    )
    op.create_index('ix_users_branch_id', 'users', ['branch_id'])

    # =========================================================================
    # 4. parts 테이블 (카탈로그)
    # =========================================================================
    op.create_table(
        'parts',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('device_type_id', postgresql.UUID(as_uuid=True), nullable=False, comment='기기 타입 ID'),
        sa.Column('brand_id', postgresql.UUID(as_uuid=True), nullable=False, comment='브랜드 ID'),
        sa.Column('model_id', postgresql.UUID(as_uuid=True), nullable=False, comment='모델 ID'),
        sa.Column('category', sa.String(100), nullable=False, comment='카테고리'),
        sa.Column('name', postgresql.JSONB, nullable=False, comment='부품명 {tr, de, en}'),
        sa.Column('description', postgresql.JSONB, nullable=True, comment='설명 {tr, de, en}'),
        sa.Column('barcode', sa.String(100), nullable=True, unique=True),
        sa.Column('qr_code', sa.String(255), nullable=True, unique=True),
        sa.Column('cost_amount', sa.Numeric(12, 2), nullable=False, server_default='0'),
        sa.Column('cost_currency', sa.String(3), nullable=False, server_default='EUR'),
        sa.Column('price_amount', sa.Numeric(12, 2), nullable=False, server_default='0'),
        sa.Column('price_currency', sa.String(3), nullable=False, server_default='EUR'),
        sa.Column('service_fee_amount', sa.Numeric(12, 2), nullable=False, server_default='0'),
        sa.Column('service_fee_currency', sa.String(3), nullable=False, server_default='EUR'),
        sa.Column('margin', sa.Numeric(10, 2), nullable=False, server_default='20', comment='마진(%)'),
        sa.Column('stock', sa.Integer, nullable=False, server_default='0'),
        sa.Column('min_stock_level', sa.Integer, nullable=False, server_default='5'),
        sa.Column('shelf_number', sa.String(50), nullable=False, server_default='0'),
        sa.Column('compatible_with', postgresql.JSONB, nullable=False, server_default=sa.text("'[]'::jsonb")),
        sa.Column('is_active', sa.Boolean, nullable=False, server_default='true'),
        sa.Column('created_by', postgresql.JSONB, nullable=False, comment='등록자 스냅샷'),
        sa.Column('updated_by', postgresql.JSONB, nullable=True, comment='최종 수정자 스냅샷'),
        sa.Column('created_at', sa.DateTime, nullable=False, server_default=sa.text('NOW()')),
        sa.Column('updated_at', sa.DateTime, nullable=False, server_default=sa.text('NOW()')),
    )
    op.create_index('ix_parts_category', 'parts', ['category'])
    op.create_index('ix_parts_brand_model_device', 'parts', ['brand_id', 'model_id', 'device_type_id'])
    op.create_index('ix_parts_is_active', 'parts', ['is_active'])
    op.create_index('ix_parts_shelf_number', 'parts', ['shelf_number'])
    op.create_index('ix_parts_brand_updated', 'parts', ['brand_id', 'updated_at'])

    # =========================================================================
    # 5. notifications 테이블
    # =========================================================================
    op.create_table(
        'notifications',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('type', notification_type_enum, nullable=False),
        sa.Column('branch_id', postgresql.UUID(as_uuid=True),
                  sa.ForeignKey('branches.id', ondelete='CASCADE'), nullable=False, comment='수신 지점 ID'),
        sa.Column('part_id', postgresql.UUID(as_uuid=True),
                  sa.ForeignKey('parts.id', ondelete='CASCADE'), nullable=False, comment='대상 부품 ID'),
        sa.Column('message', postgresql.JSONB, nullable=False, comment='다국어 메시지'),
        sa.Column('is_read', sa.Boolean, nullable=False, server_default='false'),
        sa.Column('created_by', postgresql.JSONB, nullable=True),
        sa.Column('created_at', sa.DateTime, nullable=False, server_default=sa.text('NOW()')),
        sa.Column('updated_at', sa.DateTime, nullable=False, server_default=sa.text('NOW()')),
    )
    op.create_index('ix_notifications_branch_read', 'notifications', ['branch_id', 'is_read'])
    op.create_index('ix_notifications_created', 'notifications', ['created_at'])

    # =========================================================================
    # 6. sync_jobs 테이블
    # =========================================================================
    op.create_table(
        'sync_jobs',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('status', job_status_enum, nullable=False, server_default='QUEUED'),
        sa.Column('progress', sa.Integer, nullable=False, server_default='0'),
        sa.Column('created_by', postgresql.UUID(as_uuid=True),
                  sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True, comment='요청자 ID'),
        sa.Column('result_summary', postgresql.JSONB, nullable=True),
        sa.Column('error_message', sa.Text, nullable=True),
        sa.Column('created_at', sa.DateTime, nullable=False, server_default=sa.text('NOW()')),
        sa.Column('started_at', sa.DateTime, nullable=True),
        sa.Column('completed_at', sa.DateTime, nullable=True),
    )

    # =========================================================================
    # 7. audit_logs 테이블
    # =========================================================================
    op.create_table(
        'audit_logs',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('user_id', postgresql.UUID(as_uuid=True),
                  sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('action', audit_action_enum, nullable=False),
        sa.Column('target_type', sa.String(50), nullable=False),
        sa.Column('target_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('branch_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('before_data', postgresql.JSONB, nullable=True),
        sa.Column('after_data', postgresql.JSONB, nullable=True),
        sa.Column('description', sa.Text, nullable=True),
        sa.Column('ip_address', sa.String(45), nullable=True),
        sa.Column('created_at', sa.DateTime, nullable=False, server_default=sa.text('NOW()')),
    )
    op.create_index('ix_audit_logs_user_created', 'audit_logs', ['user_id', 'created_at'])
    op.create_index('ix_audit_logs_action_created', 'audit_logs', ['action', 'created_at'])
    op.create_index('ix_audit_logs_target', 'audit_logs', ['target_type', 'target_id'])


def downgrade() -> None:
    # 테이블 삭제 (의존성 역순)
    op.drop_table('audit_logs')
    op.drop_table('sync_jobs')
    op.drop_table('notifications')
    op.drop_table('parts')
    op.drop_table('users')
    op.drop_table('branches')

    # enum 타입 삭제
    bind = op.get_bind()
    for enum_type in reversed(ENUMS):
        enum_type.drop(bind, checkfirst=True)
