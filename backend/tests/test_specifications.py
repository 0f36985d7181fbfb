import pytest

from app.application.tags import CreateTagCommand
from app.specifications import (
    CategoryByNameInParentSpecification,
    CategoryListSpecification,
    OutOfStockProductsSpecification,
    ProductFilter,
    ProductListSpecification,
    Specification,
    TagListSpecification,
)


def test_empty_specification_matches_everything():
    spec = Specification()
    assert spec.criteria() == []
    assert str(spec.where()) == "true"
    assert spec.skip is None and spec.take is None


def test_paging_window_is_clamped():
    spec = ProductListSpecification(ProductFilter(page_number=0, page_size=500))
    assert (spec.page_number, spec.page_size) == (1, 100)
    assert spec.skip == 0
    assert spec.take == 100

    spec = ProductListSpecification(ProductFilter(page_number=3, page_size=5))
    assert spec.skip == 10
    assert spec.take == 5


def test_inactive_filters_are_no_ops():
    spec = ProductListSpecification(ProductFilter(search_term="   "))
    assert spec.criteria() == []


@pytest.fixture
async def catalog(make_category, make_product):
    tools = await make_category("Tools")
    garden = await make_category("Garden")
    await make_product(tools, name="Hammer", price=25, stock_quantity=3, description="Steel WIDGET head")
    await make_product(tools, name="widget small", price=5, stock_quantity=0)
    await make_product(tools, name="Widget Large", price=50, stock_quantity=10, is_featured=True)
    await make_product(garden, name="Shovel", price=30, stock_quantity=1, is_published=True)
    return {"tools": tools, "garden": garden}


async def names(uow, **filters):
    products = await uow.products.list(ProductListSpecification(ProductFilter(**filters)))
    return [p.name for p in products]


async def test_search_matches_name_or_description_case_insensitive(uow, catalog):
    result = await names(uow, search_term="widget")
    assert sorted(result) == ["Hammer", "Widget Large", "widget small"]


async def test_default_order_is_name_ascending(uow, catalog):
    result = await names(uow)
    assert result == sorted(result)


async def test_order_by_price_descending(uow, catalog):
    result = await names(uow, order_by="price", descending=True)
    assert result == ["Widget Large", "Shovel", "Hammer", "widget small"]


async def test_filters_are_combined_with_and(uow, catalog):
    assert await names(uow, category_id=catalog["tools"], min_price=10, max_price=40) == ["Hammer"]
    assert await names(uow, in_stock=False) == ["widget small"]
    assert await names(uow, is_featured=True) == ["Widget Large"]
    assert await names(uow, is_published=True) == ["Shovel"]


async def test_count_ignores_paging(uow, catalog):
    spec = ProductListSpecification(ProductFilter(page_number=2, page_size=1))
    assert len(await uow.products.list(spec)) == 1
    assert await uow.products.count(spec) == 4


async def test_out_of_stock_specification(uow, catalog):
    products = await uow.products.list(OutOfStockProductsSpecification())
    assert [p.name for p in products] == ["widget small"]


async def test_category_name_unique_per_parent(uow, make_category):
    root = await make_category("Electronics")
    await make_category("Phones", parent_id=root)

    assert await uow.categories.any(CategoryByNameInParentSpecification("phones", root))
    assert not await uow.categories.any(CategoryByNameInParentSpecification("phones", None))


@pytest.fixture
async def wildcard_catalog(make_category, make_product):
    tools = await make_category("Tools")
    for name in ("Discount 50% off", "Plain lamp", "A_B cable", "AXB cable"):
        await make_product(tools, name=name)


@pytest.mark.parametrize("term,expected", [
    ("%", ["Discount 50% off"]),
    ("50%", ["Discount 50% off"]),
    ("A_B", ["A_B cable"]),
    ("a_b", ["A_B cable"]),
    ("_", ["A_B cable"]),
])
async def test_search_treats_wildcards_literally(uow, wildcard_catalog, term, expected):
    assert await names(uow, search_term=term) == expected


async def test_search_folds_accented_case(uow, make_category, make_product):
    tools = await make_category("Tools")
    await make_product(tools, name="ÉCRAN géant")
    await make_product(tools, name="Écouteurs", description="Son STÉRÉO")
    await make_product(tools, name="Plain lamp")

    assert await names(uow, search_term="écran") == ["ÉCRAN géant"]
    assert await names(uow, search_term="GÉANT") == ["ÉCRAN géant"]
    assert await names(uow, search_term="stéréo") == ["Écouteurs"]


async def test_category_and_tag_search_are_literal(uow, make_category, mediator):
    await make_category("Électroménager")
    await make_category("100% coton")
    await make_category("Lamps")
    await mediator.send(CreateTagCommand(name="Été"))
    await mediator.send(CreateTagCommand(name="Winter"))

    found = await uow.categories.list(CategoryListSpecification(search="ÉLECTRO"))
    assert [c.name for c in found] == ["Électroménager"]
    found = await uow.categories.list(CategoryListSpecification(search="%"))
    assert [c.name for c in found] == ["100% coton"]

    tags = await uow.tags.list(TagListSpecification(search="été"))
    assert [t.name for t in tags] == ["Été"]
