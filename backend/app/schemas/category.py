"""商品分类Schema"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import Field

from app.schemas.common import CamelModel


class CategoryBase(CamelModel):
    name: str = Field(..., min_length=1, max_length=100, description="分类名称")
    description: Optional[str] = Field(None, max_length=1000)
    image_url: Optional[str] = Field(None, max_length=500)
    parent_category_id: Optional[UUID] = Field(None, description="父分类ID")


class CategoryCreate(CategoryBase):
    pass


class CategoryUpdate(CategoryBase):
    id: UUID


class CategoryDto(CategoryBase):
    id: UUID
    slug: str
    is_main_category: bool = True
    parent_category_name: Optional[str] = None
    product_count: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CategoryTreeNode(CategoryDto):
    """分类树节点"""
    children: List["CategoryTreeNode"] = []
