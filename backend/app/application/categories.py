"""分类用例"""

import logging
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel

from app.application.mappings import build_category_tree, to_category_dto
from app.application.mediator import RequestHandler, handles
from app.application.result import Result, ValidationError
from app.models import Category
from app.schemas.category import CategoryCreate, CategoryDto, CategoryTreeNode, CategoryUpdate
from app.schemas.common import PaginatedList
from app.specifications import CategoryListSpecification
from app.utils.slug import slugify

logger = logging.getLogger(__name__)


class CreateCategoryCommand(CategoryCreate):
    pass


class UpdateCategoryCommand(CategoryUpdate):
    pass


class DeleteCategoryCommand(BaseModel):
    id: UUID


class GetCategoryByIdQuery(BaseModel):
    id: UUID


class GetAllCategoriesQuery(BaseModel):
    search: Optional[str] = None
    parent_id: Optional[UUID] = None
    main_only: bool = False
    page_number: int = 1
    page_size: int = 10


class GetCategoryTreeQuery(BaseModel):
    pass


class _CategoryHandler(RequestHandler):

    async def _check_unique(self, name: str, parent_id: Optional[UUID],
                            exclude_id: Optional[UUID] = None) -> Optional[Result]:
        if await self.uow.categories.name_exists_in_parent(name, parent_id, exclude_id):
            return Result.conflict(f"同一上级分类下已存在名称为 '{name.strip()}' 的分类")
        slug = slugify(name.strip(), fallback="")
        if slug and await self.uow.categories.slug_exists(slug, exclude_id):
            return Result.conflict(f"分类别名 '{slug}' 已存在")
        return None


@handles(CreateCategoryCommand)
class CreateCategoryHandler(_CategoryHandler):
    action = "创建分类"

    async def execute(self, cmd: CreateCategoryCommand) -> Result[UUID]:
        parent = None
        if cmd.parent_category_id:
            parent = await self.uow.categories.get_by_id(cmd.parent_category_id)
            if parent is None:
                return Result.not_found(f"上级分类 {cmd.parent_category_id} 不存在")

        conflict = await self._check_unique(cmd.name, cmd.parent_category_id)
        if conflict:
            return conflict

        category = Category(
            name=cmd.name,
            description=cmd.description,
            image_url=cmd.image_url,
        )
        category.set_parent(parent)

        await self.uow.categories.add(category, self.user_id)
        await self.uow.save_changes()

        logger.info(f"✅ 分类已创建: {category.name} ({category.id})")
        return Result.success(category.id)


@handles(UpdateCategoryCommand)
class UpdateCategoryHandler(_CategoryHandler):
    action = "更新分类"

    async def execute(self, cmd: UpdateCategoryCommand) -> Result[CategoryDto]:
        category = await self.uow.categories.get_by_id(cmd.id)
        if category is None:
            return Result.not_found(f"分类 {cmd.id} 不存在")

        parent = None
        ancestor_ids: List[UUID] = []
        if cmd.parent_category_id:
            if cmd.parent_category_id == category.id:
                return Result.invalid([ValidationError("parentCategoryId", "分类不能成为自己的上级")])
            parent = await self.uow.categories.get_by_id(cmd.parent_category_id)
            if parent is None:
                return Result.not_found(f"上级分类 {cmd.parent_category_id} 不存在")
            ancestor_ids = await self.uow.categories.get_ancestor_ids(parent.id)

        conflict = await self._check_unique(cmd.name, cmd.parent_category_id, exclude_id=category.id)
        if conflict:
            return conflict

        # 检测循环引用（DomainError → INVALID）
        category.set_parent(parent, ancestor_ids)
        category.name = cmd.name
        category.description = cmd.description
        category.image_url = cmd.image_url

        await self.uow.categories.update(category, self.user_id)
        await self.uow.save_changes()

        count = await self.uow.products.count_by_category()
        return Result.success(to_category_dto(category, count.get(category.id, 0)))


@handles(DeleteCategoryCommand)
class DeleteCategoryHandler(RequestHandler):
    action = "删除分类"

    async def execute(self, cmd: DeleteCategoryCommand) -> Result[bool]:
        category = await self.uow.categories.get_by_id(cmd.id)
        if category is None:
            return Result.not_found(f"分类 {cmd.id} 不存在")

        if await self.uow.is_category_in_use(category.id):
            return Result.invalid([ValidationError("id", "分类下仍有商品，无法删除")])

        if await self.uow.categories.has_children(category.id):
            return Result.invalid([ValidationError("id", "分类下仍有子分类，无法删除")])

        await self.uow.categories.remove(category, self.user_id)
        await self.uow.save_changes()

        logger.info(f"🗑️ 分类已删除: {category.name} ({category.id})")
        return Result.success(True)


@handles(GetCategoryByIdQuery)
class GetCategoryByIdHandler(RequestHandler):
    action = "查询分类"

    async def execute(self, query: GetCategoryByIdQuery) -> Result[CategoryDto]:
        category = await self.uow.categories.get_by_id(query.id)
        if category is None:
            return Result.not_found(f"分类 {query.id} 不存在")
        counts = await self.uow.products.count_by_category()
        return Result.success(to_category_dto(category, counts.get(category.id, 0)))


@handles(GetAllCategoriesQuery)
class GetAllCategoriesHandler(RequestHandler):
    action = "查询分类列表"

    async def execute(self, query: GetAllCategoriesQuery) -> Result[PaginatedList[CategoryDto]]:
        spec = CategoryListSpecification(
            search=query.search,
            parent_id=query.parent_id,
            main_only=query.main_only,
            page_number=query.page_number,
            page_size=query.page_size,
        )
        categories = await self.uow.categories.list(spec)
        total = await self.uow.categories.count(spec)
        counts = await self.uow.products.count_by_category()
        items = [to_category_dto(c, counts.get(c.id, 0)) for c in categories]
        return Result.success(
            PaginatedList[CategoryDto].create(items, total, spec.page_number, spec.page_size)
        )


@handles(GetCategoryTreeQuery)
class GetCategoryTreeHandler(RequestHandler):
    action = "查询分类树"

    async def execute(self, query: GetCategoryTreeQuery) -> Result[List[CategoryTreeNode]]:
        categories = await self.uow.categories.list(CategoryListSpecification(paged=False))
        counts = await self.uow.products.count_by_category()
        return Result.success(build_category_tree(categories, counts))
