"""商品查询规格"""

from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from sqlalchemy import or_

from app.models import Product
from app.specifications.base import Specification, contains_text

# 允许的排序字段
PRODUCT_ORDER_FIELDS = {
    "name": Product.name,
    "price": Product.price,
    "created_at": Product.created_at,
    "createdat": Product.created_at,
    "stock_quantity": Product.stock_quantity,
    "stockquantity": Product.stock_quantity,
}


@dataclass
class ProductFilter:
    search_term: Optional[str] = None
    category_id: Optional[UUID] = None
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    is_published: Optional[bool] = None
    is_featured: Optional[bool] = None
    in_stock: Optional[bool] = None
    order_by: Optional[str] = None
    descending: bool = False
    page_number: int = 1
    page_size: int = 10


class ProductListSpecification(Specification):
    """商品列表：搜索 + 过滤 + 排序 + 分页"""

    def __init__(self, filter: ProductFilter, paged: bool = True):
        self.filter = filter
        if paged:
            self.apply_paging(filter.page_number, filter.page_size)

    def criteria(self):
        f = self.filter
        conditions = []
        if f.search_term and f.search_term.strip():
            term = f.search_term.strip()
            conditions.append(or_(
                contains_text(Product.name, term),
                contains_text(Product.description, term),
            ))
        if f.category_id:
            conditions.append(Product.category_id == f.category_id)
        if f.min_price is not None:
            conditions.append(Product.price >= f.min_price)
        if f.max_price is not None:
            conditions.append(Product.price <= f.max_price)
        if f.is_published is not None:
            conditions.append(Product.is_published == f.is_published)
        if f.is_featured is not None:
            conditions.append(Product.is_featured == f.is_featured)
        if f.in_stock is True:
            conditions.append(Product.stock_quantity > 0)
        elif f.in_stock is False:
            conditions.append(Product.stock_quantity <= 0)
        return conditions

    def order_by(self):
        key = (self.filter.order_by or "name").strip().lower()
        column = PRODUCT_ORDER_FIELDS.get(key, Product.name)
        primary = column.desc() if self.filter.descending else column.asc()
        return [primary, Product.id.asc()]


class ProductBySkuSpecification(Specification):
    def __init__(self, sku: str, exclude_id: Optional[UUID] = None):
        self.sku = sku.strip()
        self.exclude_id = exclude_id

    def criteria(self):
        conditions = [Product.sku == self.sku]
        if self.exclude_id:
            conditions.append(Product.id != self.exclude_id)
        return conditions


class ProductsInCategorySpecification(Specification):
    def __init__(self, category_id: UUID):
        self.category_id = category_id

    def criteria(self):
        return [Product.category_id == self.category_id]

    def order_by(self):
        return [Product.name.asc()]


class OutOfStockProductsSpecification(Specification):
    def criteria(self):
        return [Product.stock_quantity <= 0]

    def order_by(self):
        return [Product.name.asc()]


class FeaturedProductsSpecification(Specification):
    def __init__(self, count: Optional[int] = None, only_published: bool = True):
        self.only_published = only_published
        if count:
            self.take = count

    def criteria(self):
        conditions = [Product.is_featured.is_(True)]
        if self.only_published:
            conditions.append(Product.is_published.is_(True))
        return conditions

    def order_by(self):
        return [Product.created_at.desc()]


class PublishedProductsSpecification(Specification):
    def criteria(self):
        return [Product.is_published.is_(True)]
