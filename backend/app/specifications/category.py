"""分类查询规格"""

from typing import Optional
from uuid import UUID

from sqlalchemy import func, or_

from app.models import Category
from app.specifications.base import Specification, contains_text


class CategoryListSpecification(Specification):
    def __init__(
        self,
        search: Optional[str] = None,
        parent_id: Optional[UUID] = None,
        main_only: bool = False,
        page_number: Optional[int] = None,
        page_size: Optional[int] = None,
        paged: bool = True,
    ):
        self.search = search
        self.parent_id = parent_id
        self.main_only = main_only
        if paged:
            self.apply_paging(page_number, page_size)

    def criteria(self):
        conditions = []
        if self.search and self.search.strip():
            term = self.search.strip()
            conditions.append(or_(
                contains_text(Category.name, term),
                contains_text(Category.description, term),
            ))
        if self.parent_id:
            conditions.append(Category.parent_category_id == self.parent_id)
        if self.main_only:
            conditions.append(Category.parent_category_id.is_(None))
        return conditions

    def order_by(self):
        return [Category.name.asc(), Category.id.asc()]


class CategoryBySlugSpecification(Specification):
    def __init__(self, slug: str, exclude_id: Optional[UUID] = None):
        self.slug = slug
        self.exclude_id = exclude_id

    def criteria(self):
        conditions = [Category.slug == self.slug]
        if self.exclude_id:
            conditions.append(Category.id != self.exclude_id)
        return conditions


class CategoryByNameInParentSpecification(Specification):
    """同一父分类下名称唯一（忽略大小写）"""

    def __init__(self, name: str, parent_id: Optional[UUID], exclude_id: Optional[UUID] = None):
        self.name = name.strip()
        self.parent_id = parent_id
        self.exclude_id = exclude_id

    def criteria(self):
        conditions = [func.lower(Category.name) == self.name.lower()]
        if self.parent_id:
            conditions.append(Category.parent_category_id == self.parent_id)
        else:
            conditions.append(Category.parent_category_id.is_(None))
        if self.exclude_id:
            conditions.append(Category.id != self.exclude_id)
        return conditions


class ChildCategoriesSpecification(Specification):
    def __init__(self, parent_id: UUID):
        self.parent_id = parent_id

    def criteria(self):
        return [Category.parent_category_id == self.parent_id]

    def order_by(self):
        return [Category.name.asc()]
