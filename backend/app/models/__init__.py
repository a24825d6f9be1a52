"""
수리점 지점 재고 관리 시스템 - SQLAlchemy 모델
모든 공용 모델을 여기서 import하여 Alembic 마이그레이션에서 인식할 수 있도록 함
지점별 재고 테이블(branch_part)은 런타임에 생성되므로 Base 메타데이터에 포함되지 않음
"""

from app.models.user import User
from app.models.branch import Branch
from app.models.part import Part
from app.models.notification import Notification
from app.models.sync_job import SyncJob
from app.models.audit_log import AuditLog

__all__ = [
    "User",
    "Branch",
    "Part",
    "Notification",
    "SyncJob",
    "AuditLog",
]
