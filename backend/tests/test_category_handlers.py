import uuid

from app.application import ResultStatus
from app.application.categories import (
    CreateCategoryCommand,
    DeleteCategoryCommand,
    GetAllCategoriesQuery,
    GetCategoryByIdQuery,
    GetCategoryTreeQuery,
    UpdateCategoryCommand,
)


async def test_create_category(mediator):
    result = await mediator.send(CreateCategoryCommand(name="Home & Garden", description="Outdoor"))
    assert result.status == ResultStatus.SUCCESS

    fetched = await mediator.send(GetCategoryByIdQuery(id=result.value))
    assert fetched.value.slug == "home-garden"
    assert fetched.value.is_main_category
    assert fetched.value.product_count == 0


async def test_create_with_unknown_parent_is_not_found(mediator):
    result = await mediator.send(CreateCategoryCommand(name="Phones", parent_category_id=uuid.uuid4()))
    assert result.status == ResultStatus.NOT_FOUND


async def test_duplicate_name_is_conflict(mediator, make_category):
    await make_category("Tools")
    result = await mediator.send(CreateCategoryCommand(name="tools"))
    assert result.status == ResultStatus.CONFLICT


async def test_child_reports_parent_name(mediator, make_category):
    root = await make_category("Electronics")
    child = await make_category("Phones", parent_id=root)

    dto = (await mediator.send(GetCategoryByIdQuery(id=child))).value
    assert dto.parent_category_id == root
    assert dto.parent_category_name == "Electronics"
    assert not dto.is_main_category


async def test_delete_category_in_use_is_invalid(mediator, make_category, make_product):
    category_id = await make_category("Tools")
    await make_product(category_id)

    result = await mediator.send(DeleteCategoryCommand(id=category_id))
    assert result.status == ResultStatus.INVALID
    assert (await mediator.send(GetCategoryByIdQuery(id=category_id))).is_success


async def test_delete_category_with_children_is_invalid(mediator, make_category):
    root = await make_category("Electronics")
    await make_category("Phones", parent_id=root)

    result = await mediator.send(DeleteCategoryCommand(id=root))
    assert result.status == ResultStatus.INVALID


async def test_delete_unreferenced_category(mediator, make_category):
    category_id = await make_category("Tools")
    result = await mediator.send(DeleteCategoryCommand(id=category_id))
    assert result.is_success

    assert (await mediator.send(GetCategoryByIdQuery(id=category_id))).status == ResultStatus.NOT_FOUND
    assert (await mediator.send(DeleteCategoryCommand(id=category_id))).status == ResultStatus.NOT_FOUND


async def test_category_freed_after_products_deleted(mediator, make_category, make_product):
    from app.application.products import DeleteProductCommand

    category_id = await make_category("Tools")
    product_id = await make_product(category_id)
    await mediator.send(DeleteProductCommand(id=product_id))

    result = await mediator.send(DeleteCategoryCommand(id=category_id))
    assert result.is_success


async def test_update_category(mediator, make_category):
    category_id = await make_category("Tools")
    result = await mediator.send(UpdateCategoryCommand(id=category_id, name="Hand Tools"))
    assert result.is_success
    assert result.value.name == "Hand Tools"
    assert result.value.slug == "hand-tools"


async def test_update_into_own_descendant_is_invalid(mediator, make_category):
    root = await make_category("A")
    child = await make_category("B", parent_id=root)
    grandchild = await make_category("C", parent_id=child)

    result = await mediator.send(UpdateCategoryCommand(id=root, name="A", parent_category_id=grandchild))
    assert result.status == ResultStatus.INVALID

    result = await mediator.send(UpdateCategoryCommand(id=root, name="A", parent_category_id=root))
    assert result.status == ResultStatus.INVALID


async def test_list_and_tree(mediator, make_category, make_product):
    electronics = await make_category("Electronics")
    phones = await make_category("Phones", parent_id=electronics)
    await make_category("Books")
    await make_product(phones)

    page = (await mediator.send(GetAllCategoriesQuery(main_only=True))).value
    assert [c.name for c in page.items] == ["Books", "Electronics"]
    assert page.total_count == 2

    tree = (await mediator.send(GetCategoryTreeQuery())).value
    assert [n.name for n in tree] == ["Books", "Electronics"]
    assert [n.name for n in tree[1].children] == ["Phones"]
    assert tree[1].children[0].product_count == 1


async def test_symbol_only_names_get_distinct_slugs(mediator, make_category):
    first = await make_category("!!!")
    second = await make_category("???")
    root = await make_category("Sale")
    third = await make_category("!!!", parent_id=root)

    slugs = [
        (await mediator.send(GetCategoryByIdQuery(id=i))).value.slug
        for i in (first, second, third)
    ]
    assert all(s.startswith("category-") for s in slugs)
    assert len(set(slugs)) == 3

    # 改名为同样的符号，别名保持不变
    updated = await mediator.send(UpdateCategoryCommand(id=first, name="!!!", description="x"))
    assert updated.value.slug == slugs[0]
