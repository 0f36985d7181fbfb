"""
通用仓储

- 所有读取自动排除已逻辑删除的记录
- 写操作只 flush，不提交；提交由 UnitOfWork 负责
- 不做业务规则校验
"""

import logging
from typing import Generic, List, Optional, Type, TypeVar
from uuid import UUID

from sqlalchemy import exists, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.specifications.base import Specification

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT")


class Repository(Generic[ModelT]):

    def __init__(self, session: AsyncSession, model: Type[ModelT]):
        self.session = session
        self.model = model

    def _not_deleted(self):
        return self.model.is_deleted.is_(False)

    def _query(self, spec: Optional[Specification] = None, paged: bool = True):
        stmt = select(self.model).where(self._not_deleted())
        if spec is None:
            return stmt
        stmt = stmt.where(spec.where())
        options = spec.includes()
        if options:
            stmt = stmt.options(*options)
        order = spec.order_by()
        if order:
            stmt = stmt.order_by(*order)
        if paged:
            if spec.skip:
                stmt = stmt.offset(spec.skip)
            if spec.take:
                stmt = stmt.limit(spec.take)
        return stmt

    async def get_by_id(self, id: UUID) -> Optional[ModelT]:
        result = await self.session.execute(
            select(self.model).where(self.model.id == id, self._not_deleted())
        )
        return result.scalars().first()

    async def list(self, spec: Optional[Specification] = None) -> List[ModelT]:
        result = await self.session.execute(self._query(spec))
        return list(result.scalars().all())

    async def first(self, spec: Specification) -> Optional[ModelT]:
        result = await self.session.execute(self._query(spec, paged=False).limit(1))
        return result.scalars().first()

    async def count(self, spec: Optional[Specification] = None) -> int:
        """统计符合条件的数量（忽略分页）"""
        stmt = select(func.count()).select_from(self.model).where(self._not_deleted())
        if spec is not None:
            stmt = stmt.where(spec.where())
        result = await self.session.execute(stmt)
        return result.scalar() or 0

    async def exists(self, *clauses) -> bool:
        stmt = select(exists().where(self._not_deleted(), *clauses))
        result = await self.session.execute(stmt)
        return bool(result.scalar())

    async def any(self, spec: Specification) -> bool:
        return await self.exists(spec.where())

    async def add(self, entity: ModelT, user_id: Optional[str] = None) -> ModelT:
        entity.set_created_by(user_id)
        self.session.add(entity)
        await self.session.flush()
        return entity

    async def update(self, entity: ModelT, user_id: Optional[str] = None) -> ModelT:
        entity.touch(user_id)
        await self.session.flush()
        return entity

    async def remove(self, entity: ModelT, user_id: Optional[str] = None) -> None:
        """逻辑删除"""
        entity.mark_deleted(user_id)
        await self.session.flush()
        logger.debug(f"已逻辑删除 {self.model.__name__} {entity.id}")
