"""用户管理API"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, Response, status

from app.api.responses import set_location, unwrap
from app.application import Mediator
from app.application.users import (
    AssignRoleToUserCommand,
    CreateUserCommand,
    GetAllUsersQuery,
    GetUserByIdQuery,
    RemoveRoleFromUserCommand,
    UpdateCurrentUserCommand,
)
from app.core.deps import get_mediator
from app.core.security import CurrentUser, get_current_admin_user, get_current_user
from app.schemas.common import PaginatedList
from app.schemas.user import CurrentUserResponse, UserDto

router = APIRouter()


@router.get("/me", response_model=CurrentUserResponse)
def read_user_me(
    current_user: CurrentUser = Depends(get_current_user),
):
    """
    当前登录用户（来自令牌声明）
    """
    return CurrentUserResponse(
        id=current_user.id,
        username=current_user.username,
        email=current_user.email,
        roles=current_user.roles,
        is_admin=current_user.is_admin,
    )


@router.put("/me", response_model=UserDto)
async def update_user_me(
    *,
    mediator: Mediator = Depends(get_mediator),
    _: CurrentUser = Depends(get_current_user),
    profile_in: UpdateCurrentUserCommand,
):
    """
    修改当前用户的本地资料（邮箱、姓名）
    """
    return unwrap(await mediator.send(profile_in))


@router.get("", response_model=PaginatedList[UserDto])
async def list_users(
    *,
    mediator: Mediator = Depends(get_mediator),
    _: CurrentUser = Depends(get_current_admin_user),
    search: Optional[str] = Query(None),
    is_active: Optional[bool] = Query(None, alias="isActive"),
    page_number: int = Query(1, alias="pageNumber"),
    page_size: int = Query(10, alias="pageSize"),
):
    query = GetAllUsersQuery(
        search=search,
        is_active=is_active,
        page_number=page_number,
        page_size=page_size,
    )
    return unwrap(await mediator.send(query))


@router.get("/{user_id}", response_model=UserDto)
async def get_user(
    *,
    mediator: Mediator = Depends(get_mediator),
    _: CurrentUser = Depends(get_current_admin_user),
    user_id: UUID,
):
    return unwrap(await mediator.send(GetUserByIdQuery(id=user_id)))


@router.post("", response_model=UserDto, status_code=status.HTTP_201_CREATED)
async def create_user(
    *,
    request: Request,
    response: Response,
    mediator: Mediator = Depends(get_mediator),
    _: CurrentUser = Depends(get_current_admin_user),
    user_in: CreateUserCommand,
):
    user = unwrap(await mediator.send(user_in))
    set_location(response, request, user.id)
    return user


@router.post("/{user_id}/roles/{role_id}", status_code=status.HTTP_204_NO_CONTENT)
async def assign_role(
    *,
    mediator: Mediator = Depends(get_mediator),
    _: CurrentUser = Depends(get_current_admin_user),
    user_id: UUID,
    role_id: UUID,
):
    unwrap(await mediator.send(AssignRoleToUserCommand(user_id=user_id, role_id=role_id)))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{user_id}/roles/{role_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_role(
    *,
    mediator: Mediator = Depends(get_mediator),
    _: CurrentUser = Depends(get_current_admin_user),
    user_id: UUID,
    role_id: UUID,
):
    unwrap(await mediator.send(RemoveRoleFromUserCommand(user_id=user_id, role_id=role_id)))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
