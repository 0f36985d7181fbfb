"""用户与角色仓储"""

from typing import Optional
from uuid import UUID

from sqlalchemy import exists, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import ApplicationRole, ApplicationUser, user_roles
from app.repositories.base import Repository
from app.specifications import RoleByNameSpecification, UserByUsernameSpecification


class RoleRepository(Repository[ApplicationRole]):

    def __init__(self, session: AsyncSession):
        super().__init__(session, ApplicationRole)

    async def get_by_name(self, name: str) -> Optional[ApplicationRole]:
        return await self.first(RoleByNameSpecification(name))

    async def name_exists(self, name: str, exclude_id: Optional[UUID] = None) -> bool:
        return await self.any(RoleByNameSpecification(name, exclude_id))

    async def add_claim(self, role: ApplicationRole, claim_type: str, claim_value: str,
                        user_id: Optional[str] = None) -> bool:
        added = role.add_claim(claim_type, claim_value)
        if added:
            await self.update(role, user_id)
        return added

    async def remove_claim(self, role: ApplicationRole, claim_type: str, claim_value: str,
                           user_id: Optional[str] = None) -> bool:
        removed = role.remove_claim(claim_type, claim_value)
        if removed:
            await self.update(role, user_id)
        return removed

    async def is_assigned(self, role_id: UUID) -> bool:
        """是否仍有未删除的用户拥有该角色"""
        stmt = select(exists().where(
            user_roles.c.role_id == role_id,
            user_roles.c.user_id == ApplicationUser.id,
            ApplicationUser.is_deleted.is_(False),
        ))
        result = await self.session.execute(stmt)
        return bool(result.scalar())


class UserRepository(Repository[ApplicationUser]):

    def __init__(self, session: AsyncSession):
        super().__init__(session, ApplicationUser)

    async def get_by_username(self, username: str) -> Optional[ApplicationUser]:
        return await self.first(UserByUsernameSpecification(username))

    async def username_exists(self, username: str, exclude_id: Optional[UUID] = None) -> bool:
        return await self.any(UserByUsernameSpecification(username, exclude_id))

    async def assign_role(self, user: ApplicationUser, role: ApplicationRole,
                          user_id: Optional[str] = None) -> bool:
        assigned = user.assign_role(role)
        if assigned:
            await self.update(user, user_id)
        return assigned

    async def remove_role(self, user: ApplicationUser, role: ApplicationRole,
                          user_id: Optional[str] = None) -> bool:
        removed = user.remove_role(role)
        if removed:
            await self.update(user, user_id)
        return removed
