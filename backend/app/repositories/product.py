from typing import Dict, List, Optional
from uuid import UUID

from sqlalchemy import exists, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import Product, ProductVariant
from app.repositories.base import Repository
from app.specifications import ProductBySkuSpecification, ProductsInCategorySpecification


class ProductRepository(Repository[Product]):

    def __init__(self, session: AsyncSession):
        super().__init__(session, Product)

    async def get_by_sku(self, sku: str) -> Optional[Product]:
        return await self.first(ProductBySkuSpecification(sku))

    async def sku_exists(self, sku: str, exclude_id: Optional[UUID] = None) -> bool:
        if not sku or not sku.strip():
            return False
        return await self.any(ProductBySkuSpecification(sku, exclude_id))

    async def barcode_exists(self, barcode: str, exclude_id: Optional[UUID] = None) -> bool:
        if not barcode or not barcode.strip():
            return False
        clauses = [Product.barcode == barcode.strip()]
        if exclude_id:
            clauses.append(Product.id != exclude_id)
        return await self.exists(*clauses)

    async def variant_sku_exists(self, sku: str, exclude_id: Optional[UUID] = None) -> bool:
        """变体 SKU 在未删除的变体中唯一"""
        if not sku or not sku.strip():
            return False
        clauses = [ProductVariant.sku == sku.strip(), ProductVariant.is_deleted.is_(False)]
        if exclude_id:
            clauses.append(ProductVariant.id != exclude_id)
        result = await self.session.execute(select(exists().where(*clauses)))
        return bool(result.scalar())

    async def list_by_category(self, category_id: UUID) -> List[Product]:
        return await self.list(ProductsInCategorySpecification(category_id))

    async def get_with_tags(self, id: UUID) -> Optional[Product]:
        # 标签关系为 selectin 预加载
        return await self.get_by_id(id)

    async def count_by_category(self) -> Dict[UUID, int]:
        """每个分类下未删除的商品数"""
        result = await self.session.execute(
            select(Product.category_id, func.count())
            .where(self._not_deleted())
            .group_by(Product.category_id)
        )
        return {category_id: count for category_id, count in result.all()}

    async def total_stock_value(self) -> float:
        result = await self.session.execute(
            select(func.coalesce(func.sum(Product.price * Product.stock_quantity), 0))
            .where(self._not_deleted())
        )
        return float(result.scalar() or 0)
