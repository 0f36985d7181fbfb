"""
商品用例

命令：创建、更新、删除、上下架、调整库存、维护变体
查询：按ID获取、分页列表、推荐商品、变体列表
"""

import logging
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from app.application.mappings import to_product_dto, to_variant_dto
from app.application.mediator import RequestHandler, handles
from app.application.result import Result
from app.models import Product, ProductVariant
from app.schemas.common import PaginatedList
from app.schemas.product import (
    ProductCreate,
    ProductDto,
    ProductUpdate,
    ProductVariantCreate,
    ProductVariantDto,
    ProductVariantUpdate,
)
from app.specifications import (
    FeaturedProductsSpecification,
    ProductFilter,
    ProductListSpecification,
)

logger = logging.getLogger(__name__)


# ========== 命令 / 查询 ==========

class CreateProductCommand(ProductCreate):
    pass


class UpdateProductCommand(ProductUpdate):
    pass


class DeleteProductCommand(BaseModel):
    id: UUID


class PublishProductCommand(BaseModel):
    id: UUID
    publish: bool = True


class AdjustProductStockCommand(BaseModel):
    id: UUID
    delta: int


class GetProductByIdQuery(BaseModel):
    id: UUID


class GetAllProductsQuery(BaseModel):
    search_term: Optional[str] = None
    category_id: Optional[UUID] = None
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    is_published: Optional[bool] = None
    is_featured: Optional[bool] = None
    in_stock: Optional[bool] = None
    order_by: Optional[str] = None
    descending: bool = False
    page_number: int = 1
    page_size: int = 10


class GetFeaturedProductsQuery(BaseModel):
    count: int = Field(10, description="返回数量，限制在 [1, 50]")


class AddProductVariantCommand(ProductVariantCreate):
    product_id: UUID


class UpdateProductVariantCommand(ProductVariantUpdate):
    product_id: UUID


class RemoveProductVariantCommand(BaseModel):
    product_id: UUID
    variant_id: UUID


class GetProductVariantsQuery(BaseModel):
    product_id: UUID


# ========== 处理器 ==========

class _ProductHandler(RequestHandler):

    async def _check_unique_codes(self, sku, barcode, exclude_id=None) -> Optional[Result]:
        if sku and await self.uow.products.sku_exists(sku, exclude_id):
            return Result.conflict(f"SKU '{sku.strip()}' 已存在")
        if barcode and await self.uow.products.barcode_exists(barcode, exclude_id):
            return Result.conflict(f"条码 '{barcode.strip()}' 已存在")
        return None

    async def _load_tags(self, tag_ids: List[UUID]):
        tags = await self.uow.tags.get_many(tag_ids)
        found = {t.id for t in tags}
        missing = [str(i) for i in tag_ids if i not in found]
        return tags, missing


@handles(CreateProductCommand)
class CreateProductHandler(_ProductHandler):
    action = "创建商品"

    async def execute(self, cmd: CreateProductCommand) -> Result[UUID]:
        category = await self.uow.categories.get_by_id(cmd.category_id)
        if category is None:
            return Result.not_found(f"分类 {cmd.category_id} 不存在")

        conflict = await self._check_unique_codes(cmd.sku, cmd.barcode)
        if conflict:
            return conflict

        tags, missing = await self._load_tags(cmd.tag_ids)
        if missing:
            return Result.not_found(f"标签不存在: {', '.join(missing)}")

        product = Product(
            name=cmd.name,
            description=cmd.description,
            image_url=cmd.image_url,
            price=cmd.price,
            discount_price=cmd.discount_price,
            stock_quantity=cmd.stock_quantity,
            sku=cmd.sku,
            barcode=cmd.barcode,
            weight=cmd.weight,
            height=cmd.height,
            width=cmd.width,
            length=cmd.length,
            category_id=category.id,
            is_featured=cmd.is_featured,
        )
        product.category = category
        product.tags = tags
        product.variants = []
        if cmd.is_published:
            product.publish()

        await self.uow.products.add(product, self.user_id)
        await self.uow.save_changes()

        logger.info(f"✅ 商品已创建: {product.name} ({product.id})")
        return Result.success(product.id)


@handles(UpdateProductCommand)
class UpdateProductHandler(_ProductHandler):
    action = "更新商品"

    async def execute(self, cmd: UpdateProductCommand) -> Result[ProductDto]:
        product = await self.uow.products.get_by_id(cmd.id)
        if product is None:
            return Result.not_found(f"商品 {cmd.id} 不存在")

        if cmd.version is not None and cmd.version != product.version:
            return Result.conflict("商品已被其他操作修改，请刷新后重试")

        category = await self.uow.categories.get_by_id(cmd.category_id)
        if category is None:
            return Result.not_found(f"分类 {cmd.category_id} 不存在")

        conflict = await self._check_unique_codes(cmd.sku, cmd.barcode, exclude_id=product.id)
        if conflict:
            return conflict

        tags = None
        if cmd.tag_ids is not None:
            tags, missing = await self._load_tags(cmd.tag_ids)
            if missing:
                return Result.not_found(f"标签不存在: {', '.join(missing)}")

        product.name = cmd.name
        product.description = cmd.description
        product.image_url = cmd.image_url
        # 先清空折扣价，避免新旧价格交叉校验失败
        product.discount_price = None
        product.price = cmd.price
        product.discount_price = cmd.discount_price
        product.stock_quantity = cmd.stock_quantity
        product.sku = cmd.sku
        product.barcode = cmd.barcode
        product.weight = cmd.weight
        product.height = cmd.height
        product.width = cmd.width
        product.length = cmd.length
        product.category_id = category.id
        product.category = category
        product.is_featured = cmd.is_featured
        if tags is not None:
            product.tags = tags

        if cmd.is_published and not product.is_published:
            product.publish(self.user_id)
        elif not cmd.is_published and product.is_published:
            product.unpublish(self.user_id)

        await self.uow.products.update(product, self.user_id)
        await self.uow.save_changes()

        logger.info(f"✅ 商品已更新: {product.name} ({product.id})")
        return Result.success(to_product_dto(product))


@handles(DeleteProductCommand)
class DeleteProductHandler(RequestHandler):
    action = "删除商品"

    async def execute(self, cmd: DeleteProductCommand) -> Result[bool]:
        product = await self.uow.products.get_by_id(cmd.id)
        if product is None:
            return Result.not_found(f"商品 {cmd.id} 不存在")

        await self.uow.products.remove(product, self.user_id)
        await self.uow.save_changes()

        logger.info(f"🗑️ 商品已删除: {product.name} ({product.id})")
        return Result.success(True)


@handles(PublishProductCommand)
class PublishProductHandler(RequestHandler):
    action = "商品上下架"

    async def execute(self, cmd: PublishProductCommand) -> Result[ProductDto]:
        product = await self.uow.products.get_by_id(cmd.id)
        if product is None:
            return Result.not_found(f"商品 {cmd.id} 不存在")

        if cmd.publish:
            product.publish(self.user_id)
        else:
            product.unpublish(self.user_id)
        await self.uow.products.update(product, self.user_id)
        await self.uow.save_changes()
        return Result.success(to_product_dto(product))


@handles(AdjustProductStockCommand)
class AdjustProductStockHandler(RequestHandler):
    action = "调整库存"

    async def execute(self, cmd: AdjustProductStockCommand) -> Result[ProductDto]:
        product = await self.uow.products.get_by_id(cmd.id)
        if product is None:
            return Result.not_found(f"商品 {cmd.id} 不存在")

        before = product.stock_quantity
        product.adjust_stock(cmd.delta, self.user_id)
        await self.uow.products.update(product, self.user_id)
        await self.uow.save_changes()

        logger.info(f"📦 库存调整: {product.name} {before} → {product.stock_quantity}")
        return Result.success(to_product_dto(product))


@handles(GetProductByIdQuery)
class GetProductByIdHandler(RequestHandler):
    action = "查询商品"

    async def execute(self, query: GetProductByIdQuery) -> Result[ProductDto]:
        product = await self.uow.products.get_with_tags(query.id)
        if product is None:
            return Result.not_found(f"商品 {query.id} 不存在")
        return Result.success(to_product_dto(product))


@handles(GetAllProductsQuery)
class GetAllProductsHandler(RequestHandler):
    action = "查询商品列表"

    async def execute(self, query: GetAllProductsQuery) -> Result[PaginatedList[ProductDto]]:
        spec = ProductListSpecification(ProductFilter(**query.model_dump()))
        products = await self.uow.products.list(spec)
        total = await self.uow.products.count(spec)
        page = PaginatedList[ProductDto].create(
            [to_product_dto(p) for p in products], total, spec.page_number, spec.page_size
        )
        return Result.success(page)


@handles(GetFeaturedProductsQuery)
class GetFeaturedProductsHandler(RequestHandler):
    action = "查询推荐商品"

    async def execute(self, query: GetFeaturedProductsQuery) -> Result[List[ProductDto]]:
        count = min(max(query.count, 1), 50)
        products = await self.uow.products.list(FeaturedProductsSpecification(count))
        return Result.success([to_product_dto(p) for p in products])


# ========== 变体 ==========

class _VariantHandler(RequestHandler):

    async def _load_product(self, product_id: UUID):
        product = await self.uow.products.get_by_id(product_id)
        if product is None:
            return None, Result.not_found(f"商品 {product_id} 不存在")
        return product, None

    async def _check_sku(self, sku: Optional[str], exclude_id: Optional[UUID] = None) -> Optional[Result]:
        if sku and await self.uow.products.variant_sku_exists(sku, exclude_id):
            return Result.conflict(f"变体SKU '{sku.strip()}' 已存在")
        return None


@handles(AddProductVariantCommand)
class AddProductVariantHandler(_VariantHandler):
    action = "添加商品变体"

    async def execute(self, cmd: AddProductVariantCommand) -> Result[ProductVariantDto]:
        product, failure = await self._load_product(cmd.product_id)
        if failure:
            return failure

        conflict = await self._check_sku(cmd.sku)
        if conflict:
            return conflict

        variant = ProductVariant(
            name=cmd.name,
            description=cmd.description,
            sku=cmd.sku,
            barcode=cmd.barcode,
            price_adjustment=cmd.price_adjustment,
            weight_adjustment=cmd.weight_adjustment,
            stock_quantity=cmd.stock_quantity,
            is_default=cmd.is_default,
            display_order=cmd.display_order,
            image_url=cmd.image_url,
        )
        product.add_variant(variant, self.user_id)

        await self.uow.products.update(product, self.user_id)
        await self.uow.save_changes()

        logger.info(f"✅ 商品变体已添加: {product.name} / {variant.name} ({variant.id})")
        return Result.success(to_variant_dto(variant, product.current_price))


@handles(UpdateProductVariantCommand)
class UpdateProductVariantHandler(_VariantHandler):
    action = "更新商品变体"

    async def execute(self, cmd: UpdateProductVariantCommand) -> Result[ProductVariantDto]:
        product, failure = await self._load_product(cmd.product_id)
        if failure:
            return failure

        variant = product.get_variant(cmd.id)
        if variant is None:
            return Result.not_found(f"变体 {cmd.id} 不存在")

        conflict = await self._check_sku(cmd.sku, exclude_id=variant.id)
        if conflict:
            return conflict

        variant.name = cmd.name
        variant.description = cmd.description
        variant.sku = cmd.sku
        variant.barcode = cmd.barcode
        variant.price_adjustment = cmd.price_adjustment
        variant.weight_adjustment = cmd.weight_adjustment
        variant.stock_quantity = cmd.stock_quantity
        variant.is_default = cmd.is_default
        variant.display_order = cmd.display_order
        variant.image_url = cmd.image_url
        product.update_variant(variant, self.user_id)

        await self.uow.products.update(product, self.user_id)
        await self.uow.save_changes()

        logger.info(f"✅ 商品变体已更新: {product.name} / {variant.name}")
        return Result.success(to_variant_dto(variant, product.current_price))


@handles(RemoveProductVariantCommand)
class RemoveProductVariantHandler(_VariantHandler):
    action = "删除商品变体"

    async def execute(self, cmd: RemoveProductVariantCommand) -> Result[bool]:
        product, failure = await self._load_product(cmd.product_id)
        if failure:
            return failure

        variant = product.get_variant(cmd.variant_id)
        if variant is None:
            return Result.not_found(f"变体 {cmd.variant_id} 不存在")

        product.remove_variant(variant, self.user_id)
        await self.uow.products.update(product, self.user_id)
        await self.uow.save_changes()

        logger.info(f"🗑️ 商品变体已删除: {product.name} / {variant.name}")
        return Result.success(True)


@handles(GetProductVariantsQuery)
class GetProductVariantsHandler(_VariantHandler):
    action = "查询商品变体"

    async def execute(self, query: GetProductVariantsQuery) -> Result[List[ProductVariantDto]]:
        product, failure = await self._load_product(query.product_id)
        if failure:
            return failure
        return Result.success([to_variant_dto(v, product.current_price) for v in product.active_variants])
