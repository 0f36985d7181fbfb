"""商品分类API"""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, Response, status

from app.api.responses import ensure_route_matches, set_location, unwrap
from app.application import Mediator
from app.application.categories import (
    CreateCategoryCommand,
    DeleteCategoryCommand,
    GetAllCategoriesQuery,
    GetCategoryByIdQuery,
    GetCategoryTreeQuery,
    UpdateCategoryCommand,
)
from app.core.deps import get_mediator
from app.core.security import CurrentUser, get_current_admin_user
from app.schemas.category import CategoryDto, CategoryTreeNode
from app.schemas.common import PaginatedList

router = APIRouter()


@router.get("", response_model=PaginatedList[CategoryDto])
async def list_categories(
    *,
    mediator: Mediator = Depends(get_mediator),
    search: Optional[str] = Query(None),
    parent_id: Optional[UUID] = Query(None, alias="parentId", description="父分类ID，不传则获取所有"),
    main_only: bool = Query(False, alias="mainOnly", description="只返回主分类"),
    page_number: int = Query(1, alias="pageNumber"),
    page_size: int = Query(10, alias="pageSize"),
):
    query = GetAllCategoriesQuery(
        search=search,
        parent_id=parent_id,
        main_only=main_only,
        page_number=page_number,
        page_size=page_size,
    )
    return unwrap(await mediator.send(query))


@router.get("/tree", response_model=List[CategoryTreeNode])
async def get_category_tree(
    *,
    mediator: Mediator = Depends(get_mediator),
):
    """
    获取分类树（用于选择器）
    """
    return unwrap(await mediator.send(GetCategoryTreeQuery()))


@router.get("/{category_id}", response_model=CategoryDto)
async def get_category(
    *,
    mediator: Mediator = Depends(get_mediator),
    category_id: UUID,
):
    return unwrap(await mediator.send(GetCategoryByIdQuery(id=category_id)))


@router.post("", response_model=CategoryDto, status_code=status.HTTP_201_CREATED)
async def create_category(
    *,
    request: Request,
    response: Response,
    mediator: Mediator = Depends(get_mediator),
    _: CurrentUser = Depends(get_current_admin_user),
    category_in: CreateCategoryCommand,
):
    category_id = unwrap(await mediator.send(category_in))
    set_location(response, request, category_id)
    return unwrap(await mediator.send(GetCategoryByIdQuery(id=category_id)))


@router.put("/{category_id}", response_model=CategoryDto)
async def update_category(
    *,
    mediator: Mediator = Depends(get_mediator),
    _: CurrentUser = Depends(get_current_admin_user),
    category_id: UUID,
    category_in: UpdateCategoryCommand,
):
    ensure_route_matches(category_id, category_in.id)
    return unwrap(await mediator.send(category_in))


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category(
    *,
    mediator: Mediator = Depends(get_mediator),
    _: CurrentUser = Depends(get_current_admin_user),
    category_id: UUID,
):
    """
    删除分类（有商品或子分类时不能删除）
    """
    unwrap(await mediator.send(DeleteCategoryCommand(id=category_id)))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
