"""用户与角色查询规格"""

from typing import Optional
from uuid import UUID

from sqlalchemy import or_

from app.models import ApplicationRole, ApplicationUser
from app.specifications.base import Specification, contains_text


class RoleByNameSpecification(Specification):
    def __init__(self, name: str, exclude_id: Optional[UUID] = None):
        self.normalized_name = name.strip().upper()
        self.exclude_id = exclude_id

    def criteria(self):
        conditions = [ApplicationRole.normalized_name == self.normalized_name]
        if self.exclude_id:
            conditions.append(ApplicationRole.id != self.exclude_id)
        return conditions


class RoleListSpecification(Specification):
    def __init__(self, search: Optional[str] = None):
        self.search = search

    def criteria(self):
        if self.search and self.search.strip():
            return [contains_text(ApplicationRole.name, self.search.strip())]
        return []

    def order_by(self):
        return [ApplicationRole.name.asc()]


class UserListSpecification(Specification):
    def __init__(
        self,
        search: Optional[str] = None,
        is_active: Optional[bool] = None,
        page_number: Optional[int] = None,
        page_size: Optional[int] = None,
    ):
        self.search = search
        self.is_active = is_active
        self.apply_paging(page_number, page_size)

    def criteria(self):
        conditions = []
        if self.search and self.search.strip():
            term = self.search.strip()
            conditions.append(or_(
                contains_text(ApplicationUser.username, term),
                contains_text(ApplicationUser.email, term),
                contains_text(ApplicationUser.first_name, term),
                contains_text(ApplicationUser.last_name, term),
            ))
        if self.is_active is not None:
            conditions.append(ApplicationUser.is_active == self.is_active)
        return conditions

    def order_by(self):
        return [ApplicationUser.username.asc()]


class UserByUsernameSpecification(Specification):
    def __init__(self, username: str, exclude_id: Optional[UUID] = None):
        self.username = username.strip()
        self.exclude_id = exclude_id

    def criteria(self):
        conditions = [ApplicationUser.username == self.username]
        if self.exclude_id:
            conditions.append(ApplicationUser.id != self.exclude_id)
        return conditions
