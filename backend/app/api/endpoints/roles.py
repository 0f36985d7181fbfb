"""角色管理API"""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, Response, status

from app.api.responses import ensure_route_matches, set_location, unwrap
from app.application import Mediator
from app.application.roles import (
    AddClaimToRoleCommand,
    CreateRoleCommand,
    DeleteRoleCommand,
    GetAllRolesQuery,
    GetRoleByIdQuery,
    GetRoleByNameQuery,
    RemoveClaimFromRoleCommand,
    UpdateRoleCommand,
)
from app.core.deps import get_mediator
from app.core.security import CurrentUser, get_current_admin_user
from app.schemas.role import RoleClaimDto, RoleDto

router = APIRouter()


@router.get("", response_model=List[RoleDto])
async def list_roles(
    *,
    mediator: Mediator = Depends(get_mediator),
    search: Optional[str] = Query(None),
):
    return unwrap(await mediator.send(GetAllRolesQuery(search=search)))


@router.get("/name/{name}", response_model=RoleDto)
async def get_role_by_name(
    *,
    mediator: Mediator = Depends(get_mediator),
    name: str,
):
    return unwrap(await mediator.send(GetRoleByNameQuery(name=name)))


@router.get("/{role_id}", response_model=RoleDto)
async def get_role(
    *,
    mediator: Mediator = Depends(get_mediator),
    role_id: UUID,
):
    return unwrap(await mediator.send(GetRoleByIdQuery(id=role_id)))


@router.post("", response_model=RoleDto, status_code=status.HTTP_201_CREATED)
async def create_role(
    *,
    request: Request,
    response: Response,
    mediator: Mediator = Depends(get_mediator),
    _: CurrentUser = Depends(get_current_admin_user),
    role_in: CreateRoleCommand,
):
    role = unwrap(await mediator.send(role_in))
    set_location(response, request, role.id)
    return role


@router.put("/{role_id}", response_model=RoleDto)
async def update_role(
    *,
    mediator: Mediator = Depends(get_mediator),
    _: CurrentUser = Depends(get_current_admin_user),
    role_id: UUID,
    role_in: UpdateRoleCommand,
):
    ensure_route_matches(role_id, role_in.id)
    return unwrap(await mediator.send(role_in))


@router.delete("/{role_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_role(
    *,
    mediator: Mediator = Depends(get_mediator),
    _: CurrentUser = Depends(get_current_admin_user),
    role_id: UUID,
):
    """
    删除角色（已分配给用户的角色不能删除）
    """
    unwrap(await mediator.send(DeleteRoleCommand(id=role_id)))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{role_id}/claims", status_code=status.HTTP_204_NO_CONTENT)
async def add_role_claim(
    *,
    mediator: Mediator = Depends(get_mediator),
    _: CurrentUser = Depends(get_current_admin_user),
    role_id: UUID,
    claim_in: RoleClaimDto,
):
    command = AddClaimToRoleCommand(
        role_id=role_id, claim_type=claim_in.claim_type, claim_value=claim_in.claim_value
    )
    unwrap(await mediator.send(command))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{role_id}/claims", status_code=status.HTTP_204_NO_CONTENT)
async def remove_role_claim(
    *,
    mediator: Mediator = Depends(get_mediator),
    _: CurrentUser = Depends(get_current_admin_user),
    role_id: UUID,
    claim_type: str = Query(..., alias="claimType"),
    claim_value: str = Query(..., alias="claimValue"),
):
    command = RemoveClaimFromRoleCommand(
        role_id=role_id, claim_type=claim_type, claim_value=claim_value
    )
    unwrap(await mediator.send(command))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
