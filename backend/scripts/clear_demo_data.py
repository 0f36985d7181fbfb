"""
一键清除演示数据脚本
物理删除所有目录数据（包括已逻辑删除的记录）
"""

import asyncio
import sys
import os

# 添加项目路径
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import SessionLocal

# 按照外键依赖顺序删除
TABLES_TO_CLEAR = [
    ("product_tags", "商品标签关联"),
    ("product_variants", "商品变体"),
    ("products", "商品"),
    ("tags", "标签"),
    ("categories", "分类"),
    ("user_roles", "用户角色关联"),
    ("role_claims", "角色声明"),
    ("users", "用户"),
    ("roles", "角色"),
]


async def clear_tables(db: AsyncSession) -> None:
    print("🗑️  清除所有数据...")
    # 分类自引用，先断开上级关系
    await db.execute(text("UPDATE categories SET parent_category_id = NULL"))
    for table, name in TABLES_TO_CLEAR:
        await db.execute(text(f"DELETE FROM {table}"))
        print(f"   ✓ 清除 {name}")
    await db.commit()
    print("   完成！\n")


async def clear_business_data():
    print("=" * 60)
    print("🧹 商品目录 - 清除演示数据")
    print("=" * 60 + "\n")

    print("⚠️  警告：此操作将删除所有目录数据！")
    print("   包括：商品、分类、标签、用户、角色\n")

    confirm = input("确认清除所有演示数据？输入 'YES' 确认: ")
    if confirm != "YES":
        print("\n❌ 操作已取消")
        return

    async with SessionLocal() as db:
        await clear_tables(db)

    print("=" * 60)
    print("✅ 演示数据已清除！")
    print("=" * 60)


if __name__ == "__main__":
    asyncio.run(clear_business_data())
