import uuid

import pytest

from app.application import Mediator, ResultStatus
from app.application.products import (
    CreateProductCommand,
    GetAllProductsQuery,
    GetProductByIdQuery,
    UpdateProductCommand,
)
from app.repositories import ProductRepository, UnitOfWork


async def test_concurrent_update_is_conflict(session_factory, admin_user, make_category, make_product):
    category_id = await make_category("Tools")
    product_id = await make_product(category_id, name="Shared", price=10)

    async with session_factory() as first, session_factory() as second:
        uow_a = UnitOfWork(first)
        # 会话 A 先读到版本 1
        assert (await uow_a.products.get_by_id(product_id)).version == 1

        winner = Mediator(UnitOfWork(second), admin_user)
        result = await winner.send(UpdateProductCommand(
            id=product_id, name="From B", price=12, category_id=category_id,
        ))
        assert result.is_success
        assert result.value.version == 2

        loser = Mediator(uow_a, admin_user)
        result = await loser.send(UpdateProductCommand(
            id=product_id, name="From A", price=11, category_id=category_id,
        ))
        assert result.status == ResultStatus.CONFLICT

    async with session_factory() as check:
        product = await UnitOfWork(check).products.get_by_id(product_id)
        assert product.name == "From B"
        assert product.version == 2


async def test_unique_index_violation_is_conflict(uow, mediator, make_category, make_product, monkeypatch):
    category_id = await make_category("Tools")
    await make_product(category_id, name="Original", sku="SKU-1")

    # 跳过预检查，让数据库唯一索引拦截
    async def never_exists(*args, **kwargs):
        return False

    monkeypatch.setattr(uow.products, "sku_exists", never_exists)

    result = await mediator.send(CreateProductCommand(
        name="Copy", price=1, category_id=category_id, sku="SKU-1",
    ))
    assert result.status == ResultStatus.CONFLICT

    # 回滚后会话仍可用
    page = (await mediator.send(GetAllProductsQuery())).value
    assert [p.name for p in page.items] == ["Original"]


async def test_unexpected_exception_is_error(mediator, monkeypatch, caplog):
    async def broken(self, id):
        raise RuntimeError("connection reset")

    monkeypatch.setattr(ProductRepository, "get_with_tags", broken)

    result = await mediator.send(GetProductByIdQuery(id=uuid.uuid4()))

    assert result.status == ResultStatus.ERROR
    assert result.message == "查询商品时发生错误"
    assert any("查询商品失败" in record.getMessage() for record in caplog.records)


async def test_unexpected_exception_is_500(client, monkeypatch):
    async def broken(self, id):
        raise RuntimeError("connection reset")

    monkeypatch.setattr(ProductRepository, "get_with_tags", broken)

    response = await client.get(f"/api/products/{uuid.uuid4()}")

    assert response.status_code == 500
    body = response.json()
    assert body["statusCode"] == 500
    assert body["message"] == "查询商品时发生错误"
    assert "connection reset" not in response.text


async def test_unregistered_request_type_is_rejected(mediator):
    class Unknown:
        pass

    with pytest.raises(LookupError):
        await mediator.send(Unknown())
