"""
수리점 지점 재고 관리 시스템 - 공통 Enum 정의
프론트엔드와 백엔드에서 동일한 의미로 사용되어야 함
"""

import enum


class UserRole(str, enum.Enum):
    """사용자 역할"""
    ADMIN = "admin"                 # 관리자: 모든 지점 접근
    CENTRAL_STAFF = "central_staff" # 본사 직원: 모든 지점 접근
    BRANCH_STAFF = "branch_staff"   # 지점 직원: 소속 지점만
    TECHNICIAN = "technician"       # 수리 기사: 소속 지점만


# 지점 제한 없이 모든 지점에 접근 가능한 역할
CROSS_BRANCH_ROLES = frozenset({UserRole.ADMIN, UserRole.CENTRAL_STAFF})


class BranchStatus(str, enum.Enum):
    """지점 운영 상태"""
    ACTIVE = "active"       # 운영 중
    INACTIVE = "inactive"   # 운영 중지


class Language(str, enum.Enum):
    """지원 언어 (다국어 이름/설명/알림 메시지 키)"""
    TR = "tr"
    DE = "de"
    EN = "en"


class Currency(str, enum.Enum):
    """통화"""
    EUR = "EUR"


class NotificationType(str, enum.Enum):
    """알림 타입"""
    PART_CREATE = "PART_CREATE"   # 카탈로그 부품 신규 등록
    PART_UPDATE = "PART_UPDATE"   # 카탈로그 부품 수정


class SyncChangeType(str, enum.Enum):
    """지점 부품 동기화 결과 구분"""
    CREATED = "created"
    UPDATED = "updated"


class JobStatus(str, enum.Enum):
    """일괄 동기화 작업 상태"""
    QUEUED = "queued"       # 대기 중
    RUNNING = "running"     # 실행 중
    SUCCEEDED = "succeeded" # 성공
    FAILED = "failed"       # 실패


class AuditAction(str, enum.Enum):
    """감사로그 액션 타입"""
    # 인증
    USER_LOGIN = "user_login"

    # 카탈로그 부품
    PART_CREATE = "part_create"
    PART_UPDATE = "part_update"
    PART_DEACTIVATE = "part_deactivate"

    # 지점
    BRANCH_CREATE = "branch_create"
    BRANCH_UPDATE = "branch_update"
    BRANCH_DELETE = "branch_delete"

    # 지점 재고
    BRANCH_PART_SYNC = "branch_part_sync"
    BRANCH_PART_UPDATE = "branch_part_update"
    BRANCH_SYNC_START = "branch_sync_start"
