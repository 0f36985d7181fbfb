"""商品管理API"""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, Response, status

from app.api.responses import ensure_route_matches, set_location, unwrap
from app.application import Mediator
from app.application.products import (
    AddProductVariantCommand,
    AdjustProductStockCommand,
    CreateProductCommand,
    DeleteProductCommand,
    GetAllProductsQuery,
    GetFeaturedProductsQuery,
    GetProductByIdQuery,
    GetProductVariantsQuery,
    PublishProductCommand,
    RemoveProductVariantCommand,
    UpdateProductCommand,
    UpdateProductVariantCommand,
)
from app.core.deps import get_mediator
from app.schemas.common import PaginatedList
from app.schemas.product import (
    ProductDto,
    ProductVariantCreate,
    ProductVariantDto,
    ProductVariantUpdate,
    StockAdjustment,
)

router = APIRouter()


@router.get("", response_model=PaginatedList[ProductDto])
async def list_products(
    *,
    mediator: Mediator = Depends(get_mediator),
    search_term: Optional[str] = Query(None, alias="searchTerm", description="按名称或描述搜索"),
    category_id: Optional[UUID] = Query(None, alias="categoryId"),
    min_price: Optional[float] = Query(None, alias="minPrice"),
    max_price: Optional[float] = Query(None, alias="maxPrice"),
    is_published: Optional[bool] = Query(None, alias="isPublished"),
    is_featured: Optional[bool] = Query(None, alias="isFeatured"),
    in_stock: Optional[bool] = Query(None, alias="inStock"),
    order_by: Optional[str] = Query(None, alias="orderBy", description="name / price / createdAt / stockQuantity"),
    descending: bool = Query(False),
    page_number: int = Query(1, alias="pageNumber"),
    page_size: int = Query(10, alias="pageSize"),
):
    """
    获取商品列表（搜索、过滤、分页）
    """
    query = GetAllProductsQuery(
        search_term=search_term,
        category_id=category_id,
        min_price=min_price,
        max_price=max_price,
        is_published=is_published,
        is_featured=is_featured,
        in_stock=in_stock,
        order_by=order_by,
        descending=descending,
        page_number=page_number,
        page_size=page_size,
    )
    return unwrap(await mediator.send(query))


@router.get("/featured", response_model=List[ProductDto])
async def list_featured_products(
    *,
    mediator: Mediator = Depends(get_mediator),
    count: int = Query(10),
):
    return unwrap(await mediator.send(GetFeaturedProductsQuery(count=count)))


@router.get("/{product_id}", response_model=ProductDto)
async def get_product(
    *,
    mediator: Mediator = Depends(get_mediator),
    product_id: UUID,
):
    return unwrap(await mediator.send(GetProductByIdQuery(id=product_id)))


@router.post("", response_model=ProductDto, status_code=status.HTTP_201_CREATED)
async def create_product(
    *,
    request: Request,
    response: Response,
    mediator: Mediator = Depends(get_mediator),
    product_in: CreateProductCommand,
):
    """
    创建商品，返回 201 和 Location 头
    """
    product_id = unwrap(await mediator.send(product_in))
    set_location(response, request, product_id)
    return unwrap(await mediator.send(GetProductByIdQuery(id=product_id)))


@router.put("/{product_id}", response_model=ProductDto)
async def update_product(
    *,
    mediator: Mediator = Depends(get_mediator),
    product_id: UUID,
    product_in: UpdateProductCommand,
):
    ensure_route_matches(product_id, product_in.id)
    return unwrap(await mediator.send(product_in))


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product(
    *,
    mediator: Mediator = Depends(get_mediator),
    product_id: UUID,
):
    unwrap(await mediator.send(DeleteProductCommand(id=product_id)))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{product_id}/publish", response_model=ProductDto)
async def publish_product(
    *,
    mediator: Mediator = Depends(get_mediator),
    product_id: UUID,
):
    """上架"""
    return unwrap(await mediator.send(PublishProductCommand(id=product_id, publish=True)))


@router.post("/{product_id}/unpublish", response_model=ProductDto)
async def unpublish_product(
    *,
    mediator: Mediator = Depends(get_mediator),
    product_id: UUID,
):
    """下架"""
    return unwrap(await mediator.send(PublishProductCommand(id=product_id, publish=False)))


@router.patch("/{product_id}/stock", response_model=ProductDto)
async def adjust_product_stock(
    *,
    mediator: Mediator = Depends(get_mediator),
    product_id: UUID,
    adjustment: StockAdjustment,
):
    """按增量调整库存"""
    command = AdjustProductStockCommand(id=product_id, delta=adjustment.delta)
    return unwrap(await mediator.send(command))


# ========== 变体 ==========

@router.get("/{product_id}/variants", response_model=List[ProductVariantDto])
async def list_product_variants(
    *,
    mediator: Mediator = Depends(get_mediator),
    product_id: UUID,
):
    return unwrap(await mediator.send(GetProductVariantsQuery(product_id=product_id)))


@router.post("/{product_id}/variants", response_model=ProductVariantDto, status_code=status.HTTP_201_CREATED)
async def add_product_variant(
    *,
    request: Request,
    response: Response,
    mediator: Mediator = Depends(get_mediator),
    product_id: UUID,
    variant_in: ProductVariantCreate,
):
    """
    添加变体（同一商品下名称唯一）
    """
    command = AddProductVariantCommand(product_id=product_id, **variant_in.model_dump())
    variant = unwrap(await mediator.send(command))
    set_location(response, request, variant.id)
    return variant


@router.put("/{product_id}/variants/{variant_id}", response_model=ProductVariantDto)
async def update_product_variant(
    *,
    mediator: Mediator = Depends(get_mediator),
    product_id: UUID,
    variant_id: UUID,
    variant_in: ProductVariantUpdate,
):
    ensure_route_matches(variant_id, variant_in.id)
    command = UpdateProductVariantCommand(product_id=product_id, **variant_in.model_dump())
    return unwrap(await mediator.send(command))


@router.delete("/{product_id}/variants/{variant_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_product_variant(
    *,
    mediator: Mediator = Depends(get_mediator),
    product_id: UUID,
    variant_id: UUID,
):
    command = RemoveProductVariantCommand(product_id=product_id, variant_id=variant_id)
    unwrap(await mediator.send(command))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
