"""
수리점 지점 재고 관리 시스템 - 지점 스키마
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from app.models.enums import BranchStatus, Language


class BranchAddress(BaseModel):
    """지점 주소"""
    street: str = ""
    city: str = ""
    state: str = ""
    country: str = ""
    postal_code: str = ""


class BranchCreate(BaseModel):
    """지점 생성 요청"""
    name: str = Field(..., min_length=1, max_length=100, description="지점명")
    code: Optional[str] = Field(None, max_length=20, description="지점 코드 (미입력 시 자동 생성)")
    address: BranchAddress = Field(default_factory=BranchAddress)
    phone: str = Field(..., min_length=1, max_length=50, description="대표 연락처")
    manager_name: str = Field(..., min_length=1, max_length=100, description="지점장 이름")
    is_central: bool = False
    default_language: Language = Language.TR
    status: BranchStatus = BranchStatus.ACTIVE


class BranchUpdate(BaseModel):
    """지점 수정 요청"""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    code: Optional[str] = Field(None, min_length=1, max_length=20)
    address: Optional[BranchAddress] = None
    phone: Optional[str] = Field(None, min_length=1, max_length=50)
    manager_name: Optional[str] = Field(None, min_length=1, max_length=100)
    is_central: Optional[bool] = None
    default_language: Optional[Language] = None
    status: Optional[BranchStatus] = None


class BranchResponse(BaseModel):
    """지점 응답"""
    id: UUID
    name: str
    code: str
    address: Optional[BranchAddress] = None
    phone: str
    manager_name: str
    is_central: bool
    default_language: Language
    status: BranchStatus
    deleted_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class BranchListResponse(BaseModel):
    """지점 목록 응답"""
    branches: list[BranchResponse]
    total: int


class BranchDeleteResponse(BaseModel):
    """지점 삭제 결과"""
    branch: BranchResponse
    removed_user_count: int
