from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import Field

from app.schemas.common import CamelModel


class UserBase(CamelModel):
    username: str = Field(..., min_length=1, max_length=100)
    email: Optional[str] = Field(None, max_length=200)
    first_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)
    is_active: bool = True


class UserCreate(UserBase):
    role_ids: List[UUID] = Field(default_factory=list)


class UserDto(UserBase):
    id: UUID
    full_name: str = ""
    roles: List[str] = []
    last_login_at: Optional[datetime] = None
    created_at: Optional[datetime] = None


class CurrentUserResponse(CamelModel):
    """令牌中携带的当前用户信息"""
    id: str
    username: Optional[str] = None
    email: Optional[str] = None
    roles: List[str] = []
    is_admin: bool = False


class UserProfileUpdate(CamelModel):
    """当前用户可修改的资料，未传的字段保持不变"""
    email: Optional[str] = Field(None, max_length=200)
    first_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)
