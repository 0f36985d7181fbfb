"""标签Schema"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import Field

from app.schemas.common import CamelModel


class TagBase(CamelModel):
    name: str = Field(..., min_length=1, max_length=100, description="标签名称")
    description: Optional[str] = Field(None, max_length=500)
    icon: Optional[str] = Field(None, max_length=100)
    color: Optional[str] = Field(None, max_length=20)
    display_order: int = Field(0, ge=0)
    is_active: bool = True


class TagCreate(TagBase):
    pass


class TagUpdate(TagBase):
    id: UUID


class TagSummary(CamelModel):
    id: UUID
    name: str
    slug: str
    color: Optional[str] = None


class TagDto(TagBase):
    id: UUID
    slug: str
    usage_count: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
