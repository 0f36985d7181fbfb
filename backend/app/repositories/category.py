import logging
from typing import List, Optional, Set
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import Category
from app.repositories.base import Repository
from app.specifications import (
    CategoryByNameInParentSpecification,
    CategoryBySlugSpecification,
    ChildCategoriesSpecification,
)

logger = logging.getLogger(__name__)


class CategoryRepository(Repository[Category]):

    def __init__(self, session: AsyncSession):
        super().__init__(session, Category)

    async def get_by_slug(self, slug: str) -> Optional[Category]:
        return await self.first(CategoryBySlugSpecification(slug))

    async def slug_exists(self, slug: str, exclude_id: Optional[UUID] = None) -> bool:
        return await self.any(CategoryBySlugSpecification(slug, exclude_id))

    async def name_exists_in_parent(
        self, name: str, parent_id: Optional[UUID], exclude_id: Optional[UUID] = None
    ) -> bool:
        return await self.any(CategoryByNameInParentSpecification(name, parent_id, exclude_id))

    async def list_children(self, parent_id: UUID) -> List[Category]:
        return await self.list(ChildCategoriesSpecification(parent_id))

    async def has_children(self, parent_id: UUID) -> bool:
        return await self.any(ChildCategoriesSpecification(parent_id))

    async def get_ancestor_ids(self, category_id: UUID) -> List[UUID]:
        """从父分类一路向上，返回所有祖先ID（不含自身）"""
        ancestors: List[UUID] = []
        visited: Set[UUID] = {category_id}
        current = category_id
        while current is not None:
            result = await self.session.execute(
                select(Category.parent_category_id).where(Category.id == current)
            )
            parent_id = result.scalar()
            if parent_id is None:
                break
            if parent_id in visited:
                logger.warning(f"分类 {category_id} 的上级链存在循环")
                break
            ancestors.append(parent_id)
            visited.add(parent_id)
            current = parent_id
        return ancestors
