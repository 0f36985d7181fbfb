"""标签API"""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, Response, status

from app.api.responses import ensure_route_matches, set_location, unwrap
from app.application import Mediator
from app.application.tags import (
    CreateTagCommand,
    DeleteTagCommand,
    GetAllTagsQuery,
    GetPopularTagsQuery,
    GetTagByIdQuery,
    GetTagBySlugQuery,
    UpdateTagCommand,
)
from app.core.deps import get_mediator
from app.core.security import CurrentUser, get_current_admin_user
from app.schemas.common import PaginatedList
from app.schemas.tag import TagDto

router = APIRouter()


@router.get("", response_model=PaginatedList[TagDto])
async def list_tags(
    *,
    mediator: Mediator = Depends(get_mediator),
    search: Optional[str] = Query(None),
    only_active: bool = Query(False, alias="onlyActive"),
    page_number: int = Query(1, alias="pageNumber"),
    page_size: int = Query(10, alias="pageSize"),
):
    query = GetAllTagsQuery(
        search=search,
        only_active=only_active,
        page_number=page_number,
        page_size=page_size,
    )
    return unwrap(await mediator.send(query))


@router.get("/popular", response_model=List[TagDto])
async def list_popular_tags(
    *,
    mediator: Mediator = Depends(get_mediator),
    count: int = Query(10, description="返回数量，限制在 1-50"),
    only_active: bool = Query(True, alias="onlyActive"),
):
    return unwrap(await mediator.send(GetPopularTagsQuery(count=count, only_active=only_active)))


@router.get("/slug/{slug}", response_model=TagDto)
async def get_tag_by_slug(
    *,
    mediator: Mediator = Depends(get_mediator),
    slug: str,
):
    return unwrap(await mediator.send(GetTagBySlugQuery(slug=slug)))


@router.get("/{tag_id}", response_model=TagDto)
async def get_tag(
    *,
    mediator: Mediator = Depends(get_mediator),
    tag_id: UUID,
):
    return unwrap(await mediator.send(GetTagByIdQuery(id=tag_id)))


@router.post("", response_model=TagDto, status_code=status.HTTP_201_CREATED)
async def create_tag(
    *,
    request: Request,
    response: Response,
    mediator: Mediator = Depends(get_mediator),
    _: CurrentUser = Depends(get_current_admin_user),
    tag_in: CreateTagCommand,
):
    tag = unwrap(await mediator.send(tag_in))
    set_location(response, request, tag.id)
    return tag


@router.put("/{tag_id}", response_model=TagDto)
async def update_tag(
    *,
    mediator: Mediator = Depends(get_mediator),
    _: CurrentUser = Depends(get_current_admin_user),
    tag_id: UUID,
    tag_in: UpdateTagCommand,
):
    ensure_route_matches(tag_id, tag_in.id)
    return unwrap(await mediator.send(tag_in))


@router.delete("/{tag_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_tag(
    *,
    mediator: Mediator = Depends(get_mediator),
    _: CurrentUser = Depends(get_current_admin_user),
    tag_id: UUID,
):
    unwrap(await mediator.send(DeleteTagCommand(id=tag_id)))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
