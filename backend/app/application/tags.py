"""标签用例"""

import logging
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel

from app.application.mappings import to_tag_dto
from app.application.mediator import RequestHandler, handles
from app.application.result import Result
from app.models import Tag
from app.schemas.common import PaginatedList
from app.schemas.tag import TagCreate, TagDto, TagUpdate
from app.specifications import TagListSpecification
from app.utils.slug import slugify

logger = logging.getLogger(__name__)

POPULAR_TAGS_MAX = 50


class CreateTagCommand(TagCreate):
    pass


class UpdateTagCommand(TagUpdate):
    pass


class DeleteTagCommand(BaseModel):
    id: UUID


class GetTagByIdQuery(BaseModel):
    id: UUID


class GetTagBySlugQuery(BaseModel):
    slug: str


class GetAllTagsQuery(BaseModel):
    search: Optional[str] = None
    only_active: bool = False
    page_number: int = 1
    page_size: int = 10


class GetPopularTagsQuery(BaseModel):
    count: int = 10
    only_active: bool = True


class _TagHandler(RequestHandler):

    async def _check_unique(self, name: str, exclude_id: Optional[UUID] = None) -> Optional[Result]:
        if await self.uow.tags.name_exists(name, exclude_id):
            return Result.conflict(f"标签 '{name.strip()}' 已存在")
        slug = slugify(name.strip(), fallback="")
        if slug and await self.uow.tags.slug_exists(slug, exclude_id):
            return Result.conflict(f"标签别名 '{slug}' 已存在")
        return None

    async def _to_dto(self, tag: Tag) -> TagDto:
        counts = await self.uow.tags.usage_counts([tag.id])
        return to_tag_dto(tag, counts.get(tag.id, 0))


@handles(CreateTagCommand)
class CreateTagHandler(_TagHandler):
    action = "创建标签"

    async def execute(self, cmd: CreateTagCommand) -> Result[TagDto]:
        conflict = await self._check_unique(cmd.name)
        if conflict:
            return conflict

        tag = Tag(
            name=cmd.name,
            description=cmd.description,
            icon=cmd.icon,
            color=cmd.color,
            display_order=cmd.display_order,
            is_active=cmd.is_active,
        )
        await self.uow.tags.add(tag, self.user_id)
        await self.uow.save_changes()

        logger.info(f"✅ 标签已创建: {tag.name} ({tag.id})")
        return Result.success(to_tag_dto(tag))


@handles(UpdateTagCommand)
class UpdateTagHandler(_TagHandler):
    action = "更新标签"

    async def execute(self, cmd: UpdateTagCommand) -> Result[TagDto]:
        tag = await self.uow.tags.get_by_id(cmd.id)
        if tag is None:
            return Result.not_found(f"标签 {cmd.id} 不存在")

        conflict = await self._check_unique(cmd.name, exclude_id=tag.id)
        if conflict:
            return conflict

        tag.name = cmd.name
        tag.description = cmd.description
        tag.icon = cmd.icon
        tag.color = cmd.color
        tag.display_order = cmd.display_order
        tag.is_active = cmd.is_active

        await self.uow.tags.update(tag, self.user_id)
        await self.uow.save_changes()
        return Result.success(await self._to_dto(tag))


@handles(DeleteTagCommand)
class DeleteTagHandler(RequestHandler):
    action = "删除标签"

    async def execute(self, cmd: DeleteTagCommand) -> Result[bool]:
        tag = await self.uow.tags.get_by_id(cmd.id)
        if tag is None:
            return Result.not_found(f"标签 {cmd.id} 不存在")

        await self.uow.tags.remove(tag, self.user_id)
        await self.uow.save_changes()

        logger.info(f"🗑️ 标签已删除: {tag.name} ({tag.id})")
        return Result.success(True)


@handles(GetTagByIdQuery)
class GetTagByIdHandler(_TagHandler):
    action = "查询标签"

    async def execute(self, query: GetTagByIdQuery) -> Result[TagDto]:
        tag = await self.uow.tags.get_by_id(query.id)
        if tag is None:
            return Result.not_found(f"标签 {query.id} 不存在")
        return Result.success(await self._to_dto(tag))


@handles(GetTagBySlugQuery)
class GetTagBySlugHandler(_TagHandler):
    action = "按别名查询标签"

    async def execute(self, query: GetTagBySlugQuery) -> Result[TagDto]:
        tag = await self.uow.tags.get_by_slug(query.slug)
        if tag is None:
            return Result.not_found(f"标签 '{query.slug}' 不存在")
        return Result.success(await self._to_dto(tag))


@handles(GetAllTagsQuery)
class GetAllTagsHandler(RequestHandler):
    action = "查询标签列表"

    async def execute(self, query: GetAllTagsQuery) -> Result[PaginatedList[TagDto]]:
        spec = TagListSpecification(
            search=query.search,
            only_active=query.only_active,
            page_number=query.page_number,
            page_size=query.page_size,
        )
        tags = await self.uow.tags.list(spec)
        total = await self.uow.tags.count(spec)
        counts = await self.uow.tags.usage_counts([t.id for t in tags])
        items = [to_tag_dto(t, counts.get(t.id, 0)) for t in tags]
        return Result.success(
            PaginatedList[TagDto].create(items, total, spec.page_number, spec.page_size)
        )


@handles(GetPopularTagsQuery)
class GetPopularTagsHandler(RequestHandler):
    action = "查询热门标签"

    async def execute(self, query: GetPopularTagsQuery) -> Result[List[TagDto]]:
        count = min(max(query.count, 1), POPULAR_TAGS_MAX)
        rows = await self.uow.tags.list_popular(count, query.only_active)
        return Result.success([to_tag_dto(tag, usage) for tag, usage in rows])
