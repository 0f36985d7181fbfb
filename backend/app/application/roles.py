"""角色用例"""

import logging
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from app.application.mappings import to_role_dto
from app.application.mediator import RequestHandler, handles
from app.application.result import Result, ValidationError
from app.models import ApplicationRole
from app.schemas.role import RoleCreate, RoleDto, RoleUpdate
from app.specifications import RoleListSpecification

logger = logging.getLogger(__name__)


class CreateRoleCommand(RoleCreate):
    pass


class UpdateRoleCommand(RoleUpdate):
    pass


class DeleteRoleCommand(BaseModel):
    id: UUID


class GetRoleByIdQuery(BaseModel):
    id: UUID


class GetRoleByNameQuery(BaseModel):
    name: str


class GetAllRolesQuery(BaseModel):
    search: Optional[str] = None


class AddClaimToRoleCommand(BaseModel):
    role_id: UUID
    claim_type: str = Field(..., min_length=1, max_length=200)
    claim_value: str = Field(..., min_length=1, max_length=500)


class RemoveClaimFromRoleCommand(BaseModel):
    role_id: UUID
    claim_type: str
    claim_value: str


@handles(CreateRoleCommand)
class CreateRoleHandler(RequestHandler):
    action = "创建角色"

    async def execute(self, cmd: CreateRoleCommand) -> Result[RoleDto]:
        if await self.uow.roles.name_exists(cmd.name):
            return Result.conflict(f"角色 '{cmd.name.strip()}' 已存在")

        role = ApplicationRole(name=cmd.name, description=cmd.description, claims=[])
        await self.uow.roles.add(role, self.user_id)
        await self.uow.save_changes()

        logger.info(f"✅ 角色已创建: {role.name} ({role.id})")
        return Result.success(to_role_dto(role))


@handles(UpdateRoleCommand)
class UpdateRoleHandler(RequestHandler):
    action = "更新角色"

    async def execute(self, cmd: UpdateRoleCommand) -> Result[RoleDto]:
        role = await self.uow.roles.get_by_id(cmd.id)
        if role is None:
            return Result.not_found(f"角色 {cmd.id} 不存在")

        if await self.uow.roles.name_exists(cmd.name, exclude_id=role.id):
            return Result.conflict(f"角色 '{cmd.name.strip()}' 已存在")

        role.name = cmd.name
        role.description = cmd.description
        await self.uow.roles.update(role, self.user_id)
        await self.uow.save_changes()
        return Result.success(to_role_dto(role))


@handles(DeleteRoleCommand)
class DeleteRoleHandler(RequestHandler):
    action = "删除角色"

    async def execute(self, cmd: DeleteRoleCommand) -> Result[bool]:
        role = await self.uow.roles.get_by_id(cmd.id)
        if role is None:
            return Result.not_found(f"角色 {cmd.id} 不存在")

        if await self.uow.roles.is_assigned(role.id):
            return Result.invalid([ValidationError("id", "角色已分配给用户，无法删除")])

        await self.uow.roles.remove(role, self.user_id)
        await self.uow.save_changes()

        logger.info(f"🗑️ 角色已删除: {role.name} ({role.id})")
        return Result.success(True)


@handles(GetRoleByIdQuery)
class GetRoleByIdHandler(RequestHandler):
    action = "查询角色"

    async def execute(self, query: GetRoleByIdQuery) -> Result[RoleDto]:
        role = await self.uow.roles.get_by_id(query.id)
        if role is None:
            return Result.not_found(f"角色 {query.id} 不存在")
        return Result.success(to_role_dto(role))


@handles(GetRoleByNameQuery)
class GetRoleByNameHandler(RequestHandler):
    action = "按名称查询角色"

    async def execute(self, query: GetRoleByNameQuery) -> Result[RoleDto]:
        role = await self.uow.roles.get_by_name(query.name)
        if role is None:
            return Result.not_found(f"角色 '{query.name}' 不存在")
        return Result.success(to_role_dto(role))


@handles(GetAllRolesQuery)
class GetAllRolesHandler(RequestHandler):
    action = "查询角色列表"

    async def execute(self, query: GetAllRolesQuery) -> Result[List[RoleDto]]:
        roles = await self.uow.roles.list(RoleListSpecification(query.search))
        return Result.success([to_role_dto(r) for r in roles])


@handles(AddClaimToRoleCommand)
class AddClaimToRoleHandler(RequestHandler):
    action = "添加角色声明"

    async def execute(self, cmd: AddClaimToRoleCommand) -> Result[bool]:
        role = await self.uow.roles.get_by_id(cmd.role_id)
        if role is None:
            return Result.not_found(f"角色 {cmd.role_id} 不存在")

        added = await self.uow.roles.add_claim(role, cmd.claim_type, cmd.claim_value, self.user_id)
        if not added:
            return Result.conflict(f"角色已拥有声明 {cmd.claim_type}={cmd.claim_value}")
        await self.uow.save_changes()
        return Result.success(True)


@handles(RemoveClaimFromRoleCommand)
class RemoveClaimFromRoleHandler(RequestHandler):
    action = "移除角色声明"

    async def execute(self, cmd: RemoveClaimFromRoleCommand) -> Result[bool]:
        role = await self.uow.roles.get_by_id(cmd.role_id)
        if role is None:
            return Result.not_found(f"角色 {cmd.role_id} 不存在")

        removed = await self.uow.roles.remove_claim(role, cmd.claim_type, cmd.claim_value, self.user_id)
        if not removed:
            return Result.not_found(f"角色没有声明 {cmd.claim_type}={cmd.claim_value}")
        await self.uow.save_changes()
        return Result.success(True)
