"""商品Schema"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import Field

from app.schemas.common import CamelModel
from app.schemas.tag import TagSummary


class ProductDimensions(CamelModel):
    weight: Optional[float] = None
    height: Optional[float] = None
    width: Optional[float] = None
    length: Optional[float] = None


class ProductBase(CamelModel):
    name: str = Field(..., min_length=1, max_length=200, description="商品名称")
    description: Optional[str] = Field(None, max_length=4000)
    image_url: Optional[str] = Field(None, max_length=500)
    price: float = Field(..., ge=0, description="售价")
    discount_price: Optional[float] = Field(None, ge=0, description="折扣价")
    stock_quantity: int = Field(0, ge=0, description="库存数量")
    sku: Optional[str] = Field(None, max_length=50)
    barcode: Optional[str] = Field(None, max_length=50)
    weight: Optional[float] = Field(None, gt=0)
    height: Optional[float] = Field(None, gt=0)
    width: Optional[float] = Field(None, gt=0)
    length: Optional[float] = Field(None, gt=0)
    category_id: UUID = Field(..., description="分类ID")
    is_featured: bool = False
    is_published: bool = False


class ProductCreate(ProductBase):
    tag_ids: List[UUID] = Field(default_factory=list, description="标签ID列表")


class ProductUpdate(ProductBase):
    id: UUID
    # None 表示不修改标签
    tag_ids: Optional[List[UUID]] = None
    # 传入时必须与当前版本一致
    version: Optional[int] = None


class StockAdjustment(CamelModel):
    delta: int = Field(..., description="库存增量，负数表示出库")


class ProductVariantBase(CamelModel):
    name: str = Field(..., min_length=1, max_length=100, description="变体名称，如 \"42码\"、\"黑色\"")
    description: Optional[str] = Field(None, max_length=1000)
    sku: Optional[str] = Field(None, max_length=50)
    barcode: Optional[str] = Field(None, max_length=50)
    price_adjustment: float = Field(0, description="相对商品当前价的调整，可为负")
    weight_adjustment: Optional[float] = None
    stock_quantity: int = Field(0, ge=0)
    is_default: bool = False
    display_order: int = Field(0, ge=0)
    image_url: Optional[str] = Field(None, max_length=500)


class ProductVariantCreate(ProductVariantBase):
    pass


class ProductVariantUpdate(ProductVariantBase):
    id: UUID


class ProductVariantDto(ProductVariantBase):
    id: UUID
    product_id: UUID
    final_price: float = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ProductDto(CamelModel):
    id: UUID
    name: str
    description: Optional[str] = None
    image_url: Optional[str] = None
    price: float = 0
    discount_price: Optional[float] = None
    stock_quantity: int = 0
    sku: Optional[str] = None
    barcode: Optional[str] = None
    dimensions: Optional[ProductDimensions] = None
    is_featured: bool = False
    is_published: bool = False
    published_at: Optional[datetime] = None
    category_id: UUID
    category_name: Optional[str] = None
    tags: List[TagSummary] = []
    variants: List[ProductVariantDto] = []
    has_discount: bool = False
    current_price: float = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    version: Optional[int] = None
