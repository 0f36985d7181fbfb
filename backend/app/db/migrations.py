"""
数据库版本迁移模块

在启动时自动检查并更新数据库结构，确保旧版本的数据库文件也具备当前的唯一索引。

迁移策略：
1. 每次启动都检查所有必需的索引，不依赖版本号
2. 版本号用于追踪，但不作为迁移的唯一依据
3. 任何一步失败都向上抛出，由启动流程终止应用
"""

import logging
from typing import List, Optional, Tuple

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)

# 当前数据库版本 - 每次有重要更新时递增
CURRENT_DB_VERSION = "1.2.0"


# ========== 必需的唯一索引 ==========
# 格式: (索引名, 表名, 列名)
# 唯一性只在未删除的记录之间生效（软删除后可以复用 SKU、名称等）
REQUIRED_UNIQUE_INDEXES: List[Tuple[str, str, str]] = [
    ("uq_products_sku", "products", "sku"),
    ("uq_products_barcode", "products", "barcode"),
    ("uq_product_variants_sku", "product_variants", "sku"),
    ("uq_categories_slug", "categories", "slug"),
    ("uq_tags_name", "tags", "name"),
    ("uq_tags_slug", "tags", "slug"),
    ("uq_users_username", "users", "username"),
    ("uq_roles_normalized_name", "roles", "normalized_name"),
]


async def ensure_system_config_table(db: AsyncSession) -> None:
    """确保 system_config 表存在"""
    await db.execute(text("""
        CREATE TABLE IF NOT EXISTS system_config (
            key TEXT PRIMARY KEY,
            value TEXT,
            updated_at DATETIME DEFAULT CURRENT_TIMESTAMP
        )
    """))
    await db.commit()


async def get_db_version(db: AsyncSession) -> Optional[str]:
    """获取数据库版本，没有记录时返回 None"""
    result = await db.execute(text(
        "SELECT value FROM system_config WHERE key = 'db_version'"
    ))
    row = result.fetchone()
    return row[0] if row else None


async def set_db_version(db: AsyncSession, version: str) -> None:
    """设置数据库版本"""
    await db.execute(text(
        "INSERT OR REPLACE INTO system_config (key, value) VALUES ('db_version', :version)"
    ), {"version": version})
    await db.commit()


async def check_table_exists(db: AsyncSession, table: str) -> bool:
    """检查表是否存在"""
    result = await db.execute(
        text("SELECT name FROM sqlite_master WHERE type='table' AND name=:table"),
        {"table": table},
    )
    return result.fetchone() is not None


async def check_index_exists(db: AsyncSession, index: str) -> bool:
    """检查索引是否存在"""
    result = await db.execute(
        text("SELECT name FROM sqlite_master WHERE type='index' AND name=:index"),
        {"index": index},
    )
    return result.fetchone() is not None


async def ensure_unique_indexes(db: AsyncSession) -> List[str]:
    """
    确保所有唯一索引存在

    返回值:
        新建的索引名列表
    """
    created = []
    for index, table, column in REQUIRED_UNIQUE_INDEXES:
        if not await check_table_exists(db, table):
            logger.debug(f"表 {table} 不存在，跳过索引 {index}")
            continue
        if await check_index_exists(db, index):
            continue
        await db.execute(text(
            f"CREATE UNIQUE INDEX IF NOT EXISTS {index} ON {table} ({column}) WHERE is_deleted = 0"
        ))
        created.append(index)
        logger.info(f"[+] 已创建索引: {table}.{index}")
    await db.commit()
    return created


async def run_migrations(db: AsyncSession) -> dict:
    """
    执行所有迁移步骤

    返回值:
        {"old_version", "new_version", "indexes_created"}
    """
    await ensure_system_config_table(db)
    old_version = await get_db_version(db)

    indexes_created = await ensure_unique_indexes(db)

    if old_version != CURRENT_DB_VERSION:
        await set_db_version(db, CURRENT_DB_VERSION)

    return {
        "old_version": old_version,
        "new_version": CURRENT_DB_VERSION,
        "indexes_created": indexes_created,
    }
