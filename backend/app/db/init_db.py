import asyncio
import logging

from sqlalchemy.ext.asyncio import AsyncEngine

from app.db.session import engine
from app.db.base import Base

# 导入所有模型，确保表能被创建
from app.models import (  # noqa: F401
    Product, Category, Tag, ApplicationUser, ApplicationRole, RoleClaim
)

logger = logging.getLogger(__name__)


async def ensure_tables_exist(bind: AsyncEngine = engine) -> None:
    """
    确保数据库表和索引存在（应用启动时调用）
    """
    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.debug(f"已确认 {len(Base.metadata.tables)} 张表")


async def init_db() -> None:
    """
    初始化数据库 - 创建所有表
    """
    await ensure_tables_exist()


if __name__ == "__main__":
    asyncio.run(init_db())
