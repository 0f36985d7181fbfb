import uuid

import pytest
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm.exc import StaleDataError

from app.models import Category, Product, Tag
from app.repositories import UnitOfWork


async def add_category(uow, name="Tools"):
    category = Category(name=name)
    category.set_parent(None)
    await uow.categories.add(category, "tester")
    await uow.save_changes()
    return category


def new_product(category, **fields):
    data = {"name": "Widget", "price": 10, "category_id": category.id}
    data.update(fields)
    product = Product(**data)
    product.category = category
    product.tags = []
    return product


async def test_add_sets_audit_fields(uow):
    category = await add_category(uow)
    assert isinstance(category.id, uuid.UUID)
    assert category.created_at is not None
    assert category.created_by == "tester"
    assert category.is_deleted is False
    assert category.version == 1


async def test_update_increments_version(uow):
    category = await add_category(uow)
    category.description = "hand tools"
    await uow.categories.update(category, "editor")
    await uow.save_changes()
    assert category.version == 2
    assert category.updated_by == "editor"
    assert category.updated_at is not None


async def test_soft_deleted_rows_are_hidden(uow):
    category = await add_category(uow)
    product = new_product(category, sku="SKU-1")
    await uow.products.add(product)
    await uow.save_changes()

    await uow.products.remove(product, "tester")
    await uow.save_changes()

    assert await uow.products.get_by_id(product.id) is None
    assert await uow.products.list() == []
    assert await uow.products.count() == 0
    assert not await uow.products.sku_exists("SKU-1")
    assert product.deleted_by == "tester"


async def test_sku_can_be_reused_after_soft_delete(uow):
    category = await add_category(uow)
    first = new_product(category, sku="SKU-1")
    await uow.products.add(first)
    await uow.save_changes()
    await uow.products.remove(first)
    await uow.save_changes()

    second = new_product(category, sku="SKU-1")
    await uow.products.add(second)
    await uow.save_changes()
    assert (await uow.products.get_by_sku("SKU-1")).id == second.id


async def test_duplicate_sku_violates_unique_index(uow):
    category = await add_category(uow)
    await uow.products.add(new_product(category, sku="DUP"))
    await uow.save_changes()

    with pytest.raises(IntegrityError):
        await uow.products.add(new_product(category, name="Other", sku="DUP"))
    await uow.rollback()


async def test_counts_and_category_in_use(uow):
    tools = await add_category(uow, "Tools")
    garden = await add_category(uow, "Garden")
    await uow.products.add(new_product(tools))
    await uow.save_changes()

    assert await uow.get_total_product_count() == 1
    assert await uow.get_total_category_count() == 2
    assert await uow.is_category_in_use(tools.id)
    assert not await uow.is_category_in_use(garden.id)


async def test_generic_repository_is_cached(uow):
    assert uow.repository(Tag) is uow.repository(Tag)
    assert uow.repository(Tag).model is Tag


async def test_transaction_commits_all_writes(uow):
    async with uow.transaction():
        category = Category(name="Tools")
        category.set_parent(None)
        await uow.categories.add(category)
        await uow.products.add(new_product(category))
        # 事务内 save_changes 只 flush
        await uow.save_changes()
        assert uow.in_transaction

    assert not uow.in_transaction
    assert await uow.get_total_product_count() == 1


async def test_transaction_rolls_back_on_failure(uow):
    category = await add_category(uow)
    await uow.products.add(new_product(category, sku="DUP"))
    await uow.save_changes()

    with pytest.raises(IntegrityError):
        async with uow.transaction():
            await uow.tags.add(Tag(name="new"))
            await uow.products.add(new_product(category, name="Clash", sku="DUP"))

    assert not uow.in_transaction
    assert await uow.tags.count() == 0
    assert await uow.get_total_product_count() == 1


async def test_explicit_rollback_discards_changes(uow):
    await uow.begin_transaction()
    await uow.tags.add(Tag(name="temporary"))
    await uow.rollback_transaction()
    assert await uow.tags.count() == 0


async def test_concurrent_update_raises_stale_data(session_factory):
    async with session_factory() as setup:
        uow = UnitOfWork(setup)
        tag = Tag(name="shared")
        await uow.tags.add(tag)
        await uow.save_changes()
        tag_id = tag.id

    async with session_factory() as first, session_factory() as second:
        a = UnitOfWork(first)
        b = UnitOfWork(second)
        tag_a = await a.tags.get_by_id(tag_id)
        tag_b = await b.tags.get_by_id(tag_id)

        tag_a.description = "first"
        await a.tags.update(tag_a)
        await a.save_changes()

        tag_b.description = "second"
        with pytest.raises(StaleDataError):
            await b.tags.update(tag_b)


async def test_typed_repository_lookups(uow, make_category, make_product):
    root = await make_category("Electronics")
    phones = await make_category("Mobile Phones", parent_id=root)
    await make_category("Tablets", parent_id=root)
    await make_product(phones, name="Phone X", sku="PX-1")

    assert (await uow.categories.get_by_slug("mobile-phones")).id == phones
    assert [c.name for c in await uow.categories.list_children(root)] == ["Mobile Phones", "Tablets"]
    assert await uow.categories.get_ancestor_ids(phones) == [root]

    products = await uow.products.list_by_category(phones)
    assert [p.sku for p in products] == ["PX-1"]
    assert await uow.products.list_by_category(root) == []
    assert (await uow.products.count_by_category()) == {phones: 1}
