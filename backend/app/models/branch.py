"""
수리점 지점 재고 관리 시스템 - Branch 모델 (지점)
지점은 재고 격리 단위: 지점마다 별도의 재고 테이블을 가진다
"""

import random
import uuid
from datetime import datetime

from sqlalchemy import String, Boolean, DateTime, Uuid, Enum as SQLEnum, Index, event
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base, JSONVariant
from app.models.enums import BranchStatus, Language


def generate_branch_code(name: str) -> str:
    """지점 코드 생성: 이름 앞 3글자(대문자) + 100~999 난수"""
    prefix = name.strip()[:3].upper()
    return f"{prefix}{random.randint(100, 999)}"


class Branch(Base):
    """지점 테이블"""

    __tablename__ = "branches"

    # 기본 키
    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4
    )

    # 지점 정보
    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        comment="지점명"
    )
    code: Mapped[str] = mapped_column(
        String(20),
        unique=True,
        nullable=False,
        comment="지점 코드 (미입력 시 자동 생성)"
    )
    address: Mapped[dict | None] = mapped_column(
        JSONVariant,
        nullable=True,
        comment="주소 {street, city, state, country, postal_code}"
    )
    phone: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        comment="대표 연락처"
    )
    manager_name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        comment="지점장 이름"
    )
    is_central: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
        comment="본사 지점 여부"
    )
    default_language: Mapped[Language] = mapped_column(
        SQLEnum(Language, name="branch_language"),
        default=Language.TR,
        nullable=False,
        comment="기본 언어"
    )

    # 상태
    status: Mapped[BranchStatus] = mapped_column(
        SQLEnum(BranchStatus, name="branch_status"),
        default=BranchStatus.ACTIVE,
        nullable=False,
        comment="운영 상태"
    )
    deleted_at: Mapped[datetime | None] = mapped_column(
        DateTime,
        nullable=True,
        comment="삭제 일시 (소프트 삭제)"
    )

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
        comment="수정 일시"
    )

    # 관계
    users = relationship("User", back_populates="branch")

    __table_args__ = (
        Index("ix_branches_name", "name"),
        Index("ix_branches_is_central", "is_central"),
    )

    def __repr__(self) -> str:
        return f"<Branch(id={self.id}, code={self.code}, name={self.name})>"


@event.listens_for(Branch, "before_insert")
def _assign_branch_code(mapper, connection, target: Branch) -> None:
    if not target.code:
        target.code = generate_branch_code(target.name)
