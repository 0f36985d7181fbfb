"""用户用例（本地用户镜像，认证由身份服务负责）"""

import logging
from typing import Optional
from uuid import UUID

from pydantic import BaseModel

from app.application.mappings import to_user_dto
from app.application.mediator import RequestHandler, handles
from app.application.result import Result
from app.models import ApplicationUser
from app.schemas.common import PaginatedList
from app.schemas.user import UserCreate, UserDto, UserProfileUpdate
from app.specifications import UserListSpecification

logger = logging.getLogger(__name__)


class CreateUserCommand(UserCreate):
    pass


class UpdateCurrentUserCommand(UserProfileUpdate):
    pass


class GetUserByIdQuery(BaseModel):
    id: UUID


class GetAllUsersQuery(BaseModel):
    search: Optional[str] = None
    is_active: Optional[bool] = None
    page_number: int = 1
    page_size: int = 10


class AssignRoleToUserCommand(BaseModel):
    user_id: UUID
    role_id: UUID


class RemoveRoleFromUserCommand(BaseModel):
    user_id: UUID
    role_id: UUID


@handles(CreateUserCommand)
class CreateUserHandler(RequestHandler):
    action = "创建用户"

    async def execute(self, cmd: CreateUserCommand) -> Result[UserDto]:
        if await self.uow.users.username_exists(cmd.username):
            return Result.conflict(f"用户名 '{cmd.username.strip()}' 已存在")

        roles = []
        for role_id in dict.fromkeys(cmd.role_ids):
            role = await self.uow.roles.get_by_id(role_id)
            if role is None:
                return Result.not_found(f"角色 {role_id} 不存在")
            roles.append(role)

        user = ApplicationUser(
            username=cmd.username,
            email=cmd.email,
            first_name=cmd.first_name,
            last_name=cmd.last_name,
            is_active=cmd.is_active,
        )
        user.roles = roles
        await self.uow.users.add(user, self.user_id)
        await self.uow.save_changes()

        logger.info(f"✅ 用户已创建: {user.username} ({user.id})")
        return Result.success(to_user_dto(user))


@handles(UpdateCurrentUserCommand)
class UpdateCurrentUserHandler(RequestHandler):
    """按令牌中的用户名找到本地用户，只修改请求中出现的字段"""
    action = "更新个人资料"

    async def execute(self, cmd: UpdateCurrentUserCommand) -> Result[UserDto]:
        username = self.current_user.username if self.current_user else None
        user = await self.uow.users.get_by_username(username) if username else None
        if user is None:
            return Result.not_found("当前登录用户没有对应的本地账号")

        for field in ("email", "first_name", "last_name"):
            if field in cmd.model_fields_set:
                setattr(user, field, getattr(cmd, field))

        await self.uow.users.update(user, self.user_id)
        await self.uow.save_changes()

        logger.info(f"👤 用户 {user.username} 更新了个人资料")
        return Result.success(to_user_dto(user))


@handles(GetUserByIdQuery)
class GetUserByIdHandler(RequestHandler):
    action = "查询用户"

    async def execute(self, query: GetUserByIdQuery) -> Result[UserDto]:
        user = await self.uow.users.get_by_id(query.id)
        if user is None:
            return Result.not_found(f"用户 {query.id} 不存在")
        return Result.success(to_user_dto(user))


@handles(GetAllUsersQuery)
class GetAllUsersHandler(RequestHandler):
    action = "查询用户列表"

    async def execute(self, query: GetAllUsersQuery) -> Result[PaginatedList[UserDto]]:
        spec = UserListSpecification(
            search=query.search,
            is_active=query.is_active,
            page_number=query.page_number,
            page_size=query.page_size,
        )
        users = await self.uow.users.list(spec)
        total = await self.uow.users.count(spec)
        return Result.success(PaginatedList[UserDto].create(
            [to_user_dto(u) for u in users], total, spec.page_number, spec.page_size
        ))


class _UserRoleHandler(RequestHandler):

    async def _load(self, cmd):
        user = await self.uow.users.get_by_id(cmd.user_id)
        if user is None:
            return None, None, Result.not_found(f"用户 {cmd.user_id} 不存在")
        role = await self.uow.roles.get_by_id(cmd.role_id)
        if role is None:
            return None, None, Result.not_found(f"角色 {cmd.role_id} 不存在")
        return user, role, None


@handles(AssignRoleToUserCommand)
class AssignRoleToUserHandler(_UserRoleHandler):
    action = "分配角色"

    async def execute(self, cmd: AssignRoleToUserCommand) -> Result[bool]:
        user, role, failure = await self._load(cmd)
        if failure:
            return failure

        if await self.uow.users.assign_role(user, role, self.user_id):
            await self.uow.save_changes()
            logger.info(f"👤 用户 {user.username} 获得角色 {role.name}")
        return Result.success(True)


@handles(RemoveRoleFromUserCommand)
class RemoveRoleFromUserHandler(_UserRoleHandler):
    action = "移除角色"

    async def execute(self, cmd: RemoveRoleFromUserCommand) -> Result[bool]:
        user, role, failure = await self._load(cmd)
        if failure:
            return failure

        if not await self.uow.users.remove_role(user, role, self.user_id):
            return Result.not_found(f"用户 {user.username} 没有角色 {role.name}")
        await self.uow.save_changes()
        logger.info(f"👤 用户 {user.username} 移除角色 {role.name}")
        return Result.success(True)
