from typing import Dict, Iterable, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import Product, Tag, product_tags
from app.repositories.base import Repository
from app.specifications import TagByNameSpecification, TagBySlugSpecification


class TagRepository(Repository[Tag]):

    def __init__(self, session: AsyncSession):
        super().__init__(session, Tag)

    async def get_by_slug(self, slug: str) -> Optional[Tag]:
        return await self.first(TagBySlugSpecification(slug))

    async def name_exists(self, name: str, exclude_id: Optional[UUID] = None) -> bool:
        return await self.any(TagByNameSpecification(name, exclude_id))

    async def slug_exists(self, slug: str, exclude_id: Optional[UUID] = None) -> bool:
        return await self.any(TagBySlugSpecification(slug, exclude_id))

    async def get_many(self, ids: Iterable[UUID]) -> List[Tag]:
        ids = list(dict.fromkeys(ids))
        if not ids:
            return []
        result = await self.session.execute(
            select(Tag).where(Tag.id.in_(ids), self._not_deleted())
        )
        return list(result.scalars().all())

    def _usage_subquery(self):
        return (
            select(product_tags.c.tag_id, func.count().label("usage_count"))
            .join(Product, Product.id == product_tags.c.product_id)
            .where(Product.is_deleted.is_(False))
            .group_by(product_tags.c.tag_id)
            .subquery()
        )

    async def usage_counts(self, tag_ids: Iterable[UUID]) -> Dict[UUID, int]:
        """标签被多少个未删除商品使用"""
        tag_ids = list(tag_ids)
        if not tag_ids:
            return {}
        usage = self._usage_subquery()
        result = await self.session.execute(
            select(usage.c.tag_id, usage.c.usage_count).where(usage.c.tag_id.in_(tag_ids))
        )
        return {tag_id: count for tag_id, count in result.all()}

    async def list_popular(self, count: int, only_active: bool = True) -> List[Tuple[Tag, int]]:
        """按使用次数降序、名称升序"""
        usage = self._usage_subquery()
        usage_count = func.coalesce(usage.c.usage_count, 0).label("usage_count")
        stmt = (
            select(Tag, usage_count)
            .outerjoin(usage, usage.c.tag_id == Tag.id)
            .where(self._not_deleted())
        )
        if only_active:
            stmt = stmt.where(Tag.is_active.is_(True))
        stmt = stmt.order_by(usage_count.desc(), Tag.name.asc()).limit(count)
        result = await self.session.execute(stmt)
        return [(tag, used) for tag, used in result.all()]
