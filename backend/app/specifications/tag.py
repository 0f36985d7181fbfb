"""标签查询规格"""

from typing import Optional
from uuid import UUID

from sqlalchemy import func, or_

from app.models import Tag
from app.specifications.base import Specification, contains_text


class TagListSpecification(Specification):
    def __init__(
        self,
        search: Optional[str] = None,
        only_active: bool = False,
        page_number: Optional[int] = None,
        page_size: Optional[int] = None,
    ):
        self.search = search
        self.only_active = only_active
        self.apply_paging(page_number, page_size)

    def criteria(self):
        conditions = []
        if self.search and self.search.strip():
            term = self.search.strip()
            conditions.append(or_(contains_text(Tag.name, term), contains_text(Tag.description, term)))
        if self.only_active:
            conditions.append(Tag.is_active.is_(True))
        return conditions

    def order_by(self):
        return [Tag.display_order.asc(), Tag.name.asc()]


class TagBySlugSpecification(Specification):
    def __init__(self, slug: str, exclude_id: Optional[UUID] = None):
        self.slug = slug.strip().lower()
        self.exclude_id = exclude_id

    def criteria(self):
        conditions = [Tag.slug == self.slug]
        if self.exclude_id:
            conditions.append(Tag.id != self.exclude_id)
        return conditions


class TagByNameSpecification(Specification):
    def __init__(self, name: str, exclude_id: Optional[UUID] = None):
        self.name = name.strip()
        self.exclude_id = exclude_id

    def criteria(self):
        conditions = [func.lower(Tag.name) == self.name.lower()]
        if self.exclude_id:
            conditions.append(Tag.id != self.exclude_id)
        return conditions
