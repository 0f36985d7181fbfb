import uuid

import pytest

from app.core.exceptions import DomainError
from app.models import ApplicationRole, ApplicationUser, Category, Product, Tag
from app.utils.slug import slugify


def make_product(**fields):
    data = {"name": "Widget", "price": 10.0, "category_id": uuid.uuid4()}
    data.update(fields)
    return Product(**data)


class TestProduct:

    def test_name_is_trimmed(self):
        assert make_product(name="  Widget  ").name == "Widget"

    @pytest.mark.parametrize("name", ["", "   ", None])
    def test_empty_name_rejected(self, name):
        with pytest.raises(DomainError):
            make_product(name=name)

    def test_negative_price_rejected(self):
        with pytest.raises(DomainError) as exc:
            make_product(price=-1)
        assert exc.value.field == "price"

    def test_discount_cannot_exceed_price(self):
        with pytest.raises(DomainError):
            make_product(price=10, discount_price=12)

    def test_lowering_price_below_discount_rejected(self):
        product = make_product(price=10, discount_price=8)
        with pytest.raises(DomainError):
            product.price = 5

    def test_negative_stock_rejected(self):
        with pytest.raises(DomainError):
            make_product(stock_quantity=-1)

    def test_blank_codes_become_none(self):
        product = make_product(sku="  ", barcode="")
        assert product.sku is None
        assert product.barcode is None

    def test_dimensions_must_be_positive(self):
        with pytest.raises(DomainError):
            make_product(weight=0)

    def test_category_required(self):
        with pytest.raises(DomainError):
            make_product(category_id=None)

    def test_current_price_uses_discount(self):
        product = make_product(price=10, discount_price=7.5)
        assert product.has_discount
        assert product.current_price == 7.5

        plain = make_product(price=10)
        assert not plain.has_discount
        assert plain.current_price == 10

    def test_publish_and_unpublish(self):
        product = make_product()
        product.publish("u1")
        assert product.is_published
        assert product.published_at is not None
        assert product.updated_by == "u1"

        product.unpublish()
        assert not product.is_published
        assert product.published_at is None

    def test_adjust_stock(self):
        product = make_product(stock_quantity=5)
        product.adjust_stock(3)
        assert product.stock_quantity == 8
        product.adjust_stock(-8)
        assert product.stock_quantity == 0
        with pytest.raises(DomainError):
            product.adjust_stock(-1)
        assert product.stock_quantity == 0

    def test_mark_deleted(self):
        product = make_product()
        product.mark_deleted("u2")
        assert product.is_deleted
        assert product.deleted_by == "u2"
        assert product.deleted_at is not None


class TestCategory:

    def test_symbol_only_name_uses_id_in_slug(self):
        category = Category(name="!!!")
        assert category.slug == f"category-{category.id.hex[:8]}"

    def test_slug_follows_name(self):
        category = Category(name="Home & Garden")
        assert category.slug == "home-garden"
        category.name = "Kitchen"
        assert category.slug == "kitchen"

    def test_root_category_is_main(self):
        category = Category(name="Root")
        category.set_parent(None)
        assert category.is_main_category
        assert category.parent_category_id is None

    def test_child_category(self):
        parent = Category(name="Parent")
        parent.id = uuid.uuid4()
        child = Category(name="Child")
        child.set_parent(parent)
        assert not child.is_main_category
        assert child.parent_category is parent

    def test_cannot_be_own_parent(self):
        category = Category(name="Loop")
        category.id = uuid.uuid4()
        with pytest.raises(DomainError):
            category.set_parent(category)

    def test_cannot_be_own_ancestor(self):
        category = Category(name="A")
        category.id = uuid.uuid4()
        descendant = Category(name="B")
        descendant.id = uuid.uuid4()
        # descendant 的祖先链包含 category
        with pytest.raises(DomainError):
            category.set_parent(descendant, [category.id])


class TestTag:

    def test_slug_and_defaults(self):
        tag = Tag(name="Novidade Verão")
        assert tag.slug == "novidade-verao"

    def test_color_length(self):
        with pytest.raises(DomainError):
            Tag(name="x", color="#" * 21)

    def test_display_order_not_negative(self):
        with pytest.raises(DomainError):
            Tag(name="x", display_order=-1)


class TestIdentity:

    def test_role_normalized_name(self):
        role = ApplicationRole(name=" Manager ")
        assert role.name == "Manager"
        assert role.normalized_name == "MANAGER"

    def test_role_claims(self):
        role = ApplicationRole(name="editor", claims=[])
        assert role.add_claim("permission", "products.write")
        assert not role.add_claim("permission", "products.write")
        assert role.has_claim("permission", "products.write")
        assert role.remove_claim("permission", "products.write")
        assert not role.remove_claim("permission", "products.write")

    def test_user_roles(self):
        admin = ApplicationRole(name="Admin")
        admin.id = uuid.uuid4()
        user = ApplicationUser(username="alice", first_name="Alice", last_name="Liddell", roles=[])
        assert user.assign_role(admin)
        assert not user.assign_role(admin)
        assert user.role_names == ["Admin"]
        assert user.is_admin
        assert user.full_name == "Alice Liddell"
        assert user.remove_role(admin)
        assert not user.is_admin


@pytest.mark.parametrize("text,expected", [
    ("Electronics", "electronics"),
    ("  Tênis de Corrida  ", "tenis-de-corrida"),
    ("a__b--c", "a-b-c"),
    ("电子产品", "电子产品"),
    ("!!!", "item"),
])
def test_slugify(text, expected):
    assert slugify(text) == expected
