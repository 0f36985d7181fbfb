import asyncio
import logging

from app.db.init_db import init_db as create_tables
from app.db.migrations import run_migrations
from app.db.session import SessionLocal, engine

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


async def init_db() -> None:
    """
    初始化数据库：建表并补齐唯一索引
    """
    try:
        logger.info("创建数据库表...")
        await create_tables()
        logger.info("数据库表创建成功")

        if engine.dialect.name == "sqlite":
            async with SessionLocal() as db:
                result = await run_migrations(db)
            logger.info(f"数据库版本: {result['new_version']}，新建索引: {result['indexes_created'] or '无'}")

        logger.info("数据库初始化完成")
    except Exception as e:
        logger.error(f"数据库初始化失败: {e}")
        raise


if __name__ == "__main__":
    asyncio.run(init_db())
