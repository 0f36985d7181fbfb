"""
工作单元

一个请求一个实例，共享同一个 AsyncSession：
- 仓储写操作只 flush
- save_changes() 在显式事务外直接提交，事务内只 flush
- commit_transaction() 失败时先回滚再抛出

SQLite/PostgreSQL 都支持多语句事务；不支持事务的存储下退化为顺序写入，
不保证原子性。
"""

import logging
from contextlib import asynccontextmanager
from typing import Dict, Type
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.models import Category, Product
from app.repositories.base import Repository
from app.repositories.category import CategoryRepository
from app.repositories.identity import RoleRepository, UserRepository
from app.repositories.product import ProductRepository
from app.repositories.tag import TagRepository
from app.specifications import ProductsInCategorySpecification

logger = logging.getLogger(__name__)


class UnitOfWork:

    def __init__(self, session: AsyncSession):
        self.session = session
        self._repositories: Dict[Type, Repository] = {}
        self._in_transaction = False

        self.products = ProductRepository(session)
        self.categories = CategoryRepository(session)
        self.tags = TagRepository(session)
        self.roles = RoleRepository(session)
        self.users = UserRepository(session)

    def repository(self, model: Type) -> Repository:
        """获取任意模型的通用仓储（按模型缓存）"""
        if model not in self._repositories:
            self._repositories[model] = Repository(self.session, model)
        return self._repositories[model]

    @property
    def in_transaction(self) -> bool:
        return self._in_transaction

    # ========== 事务 ==========

    async def begin_transaction(self) -> None:
        if self._in_transaction:
            return
        if not self.session.in_transaction():
            await self.session.begin()
        self._in_transaction = True
        logger.debug("事务开始")

    async def commit_transaction(self) -> None:
        try:
            await self.session.commit()
            logger.debug("事务提交")
        except Exception:
            logger.warning("事务提交失败，正在回滚")
            await self.session.rollback()
            raise
        finally:
            self._in_transaction = False

    async def rollback_transaction(self) -> None:
        try:
            await self.session.rollback()
            logger.debug("事务回滚")
        finally:
            self._in_transaction = False

    async def rollback(self) -> None:
        """丢弃当前会话中的所有未提交修改"""
        await self.rollback_transaction()

    async def save_changes(self) -> None:
        if self._in_transaction:
            await self.session.flush()
            return
        try:
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

    @asynccontextmanager
    async def transaction(self):
        """
        用法:
            async with uow.transaction():
                ...
        正常退出时提交，异常时回滚并继续抛出
        """
        await self.begin_transaction()
        try:
            yield self
        except BaseException:
            await self.rollback_transaction()
            raise
        await self.commit_transaction()

    # ========== 聚合查询 ==========

    async def is_category_in_use(self, category_id: UUID) -> bool:
        return await self.products.any(ProductsInCategorySpecification(category_id))

    async def get_total_product_count(self) -> int:
        return await self.repository(Product).count()

    async def get_total_category_count(self) -> int:
        return await self.repository(Category).count()
