"""
演示数据初始化脚本
- 确保表结构存在
- 清除现有数据
- 通过用例处理器创建角色、分类、标签、商品
"""

import asyncio
import sys
import os

# 添加项目路径
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.application import Mediator
from app.application.categories import CreateCategoryCommand
from app.application.products import CreateProductCommand
from app.application.roles import AddClaimToRoleCommand, CreateRoleCommand
from app.application.tags import CreateTagCommand
from app.application.users import CreateUserCommand
from app.core.security import CurrentUser
from app.db.init_db import ensure_tables_exist
from app.db.session import SessionLocal
from app.repositories import UnitOfWork
from scripts.clear_demo_data import clear_tables

SEED_USER = CurrentUser(id="seed", username="seed", roles=["admin"])


def _require(result, what: str):
    if not result.is_success:
        raise RuntimeError(f"{what}失败: {result.status.value} {result.message}")
    return result.value


async def create_roles(mediator: Mediator) -> dict:
    print("🔐 创建角色...")
    roles = {}
    for name, description in [
        ("admin", "系统管理员"),
        ("manager", "商品管理员"),
        ("user", "普通用户"),
    ]:
        role = _require(await mediator.send(CreateRoleCommand(name=name, description=description)), "创建角色")
        roles[name] = role
        print(f"   ✓ {name}")

    for claim_value in ["products.write", "categories.write", "tags.write"]:
        _require(await mediator.send(AddClaimToRoleCommand(
            role_id=roles["manager"].id, claim_type="permission", claim_value=claim_value,
        )), "添加角色声明")
    return roles


async def create_users(mediator: Mediator, roles: dict) -> None:
    print("👤 创建用户...")
    _require(await mediator.send(CreateUserCommand(
        username="admin", email="admin@hypesoft.local",
        first_name="System", last_name="Admin",
        role_ids=[roles["admin"].id],
    )), "创建用户")
    print("   ✓ admin（登录凭据由 Keycloak 管理）")


async def create_categories(mediator: Mediator) -> dict:
    print("📁 创建分类...")
    categories = {}
    tree = [
        ("电子产品", None),
        ("手机", "电子产品"),
        ("笔记本电脑", "电子产品"),
        ("服饰", None),
        ("运动鞋", "服饰"),
        ("食品饮料", None),
    ]
    for name, parent in tree:
        command = CreateCategoryCommand(
            name=name,
            parent_category_id=categories[parent] if parent else None,
        )
        categories[name] = _require(await mediator.send(command), "创建分类")
        print(f"   ✓ {name}" + (f"（{parent}）" if parent else ""))
    return categories


async def create_tags(mediator: Mediator) -> dict:
    print("🏷️  创建标签...")
    tags = {}
    for order, (name, color) in enumerate([
        ("新品", "#22c55e"),
        ("热卖", "#ef4444"),
        ("限时折扣", "#f59e0b"),
        ("包邮", "#3b82f6"),
    ]):
        tag = _require(await mediator.send(CreateTagCommand(name=name, color=color, display_order=order)), "创建标签")
        tags[name] = tag.id
        print(f"   ✓ {name}")
    return tags


async def create_products(mediator: Mediator, categories: dict, tags: dict) -> None:
    print("📦 创建商品...")
    products = [
        {"name": "智能手机 X1", "category": "手机", "price": 2999, "discount_price": 2699,
         "stock_quantity": 50, "sku": "PHN-X1", "tags": ["新品", "热卖"], "is_featured": True},
        {"name": "轻薄笔记本 Air 14", "category": "笔记本电脑", "price": 5999, "stock_quantity": 20,
         "sku": "NB-AIR14", "weight": 1.2, "tags": ["包邮"]},
        {"name": "无线蓝牙耳机", "category": "电子产品", "price": 199, "discount_price": 149,
         "stock_quantity": 0, "sku": "EAR-BT01", "tags": ["限时折扣"]},
        {"name": "跑步鞋 Pro", "category": "运动鞋", "price": 599, "stock_quantity": 120,
         "sku": "SHO-RUN-PRO", "tags": ["热卖"], "is_featured": True},
        {"name": "矿泉水 550ml", "category": "食品饮料", "price": 2, "stock_quantity": 1000,
         "sku": "DRK-WTR-550", "tags": []},
    ]
    for data in products:
        command = CreateProductCommand(
            name=data["name"],
            description=f"{data['name']} - 演示数据",
            price=data["price"],
            discount_price=data.get("discount_price"),
            stock_quantity=data["stock_quantity"],
            sku=data["sku"],
            weight=data.get("weight"),
            category_id=categories[data["category"]],
            is_featured=data.get("is_featured", False),
            is_published=True,
            tag_ids=[tags[t] for t in data["tags"]],
        )
        _require(await mediator.send(command), "创建商品")
        print(f"   ✓ {data['name']} ({data['sku']}) ¥{data['price']}")


async def main():
    print("=" * 60)
    print("🚀 商品目录 - 初始化演示数据")
    print("=" * 60 + "\n")

    await ensure_tables_exist()

    async with SessionLocal() as db:
        await clear_tables(db)
        mediator = Mediator(UnitOfWork(db), SEED_USER)

        roles = await create_roles(mediator)
        await create_users(mediator, roles)
        categories = await create_categories(mediator)
        tags = await create_tags(mediator)
        await create_products(mediator, categories, tags)

    print("\n" + "=" * 60)
    print("✅ 演示数据初始化完成！")
    print("=" * 60)


if __name__ == "__main__":
    asyncio.run(main())
