"""实体 → DTO 映射"""

from typing import Dict, Iterable, List, Optional

from app.models import ApplicationRole, ApplicationUser, Category, Product, ProductVariant, Tag
from app.schemas.category import CategoryDto, CategoryTreeNode
from app.schemas.product import ProductDimensions, ProductDto, ProductVariantDto
from app.schemas.role import RoleClaimDto, RoleDto
from app.schemas.tag import TagDto, TagSummary
from app.schemas.user import UserDto


def to_tag_summary(tag: Tag) -> TagSummary:
    return TagSummary(id=tag.id, name=tag.name, slug=tag.slug, color=tag.color)


def to_variant_dto(variant: ProductVariant, base_price: float) -> ProductVariantDto:
    return ProductVariantDto(
        id=variant.id,
        product_id=variant.product_id,
        name=variant.name,
        description=variant.description,
        sku=variant.sku,
        barcode=variant.barcode,
        price_adjustment=variant.price_adjustment or 0,
        weight_adjustment=variant.weight_adjustment,
        stock_quantity=variant.stock_quantity,
        is_default=variant.is_default,
        display_order=variant.display_order,
        image_url=variant.image_url,
        final_price=variant.final_price(base_price),
        created_at=variant.created_at,
        updated_at=variant.updated_at,
    )


def to_product_dto(product: Product) -> ProductDto:
    dimensions = None
    if any(v is not None for v in (product.weight, product.height, product.width, product.length)):
        dimensions = ProductDimensions(
            weight=product.weight,
            height=product.height,
            width=product.width,
            length=product.length,
        )
    category = product.category
    return ProductDto(
        id=product.id,
        name=product.name,
        description=product.description,
        image_url=product.image_url,
        price=product.price,
        discount_price=product.discount_price,
        stock_quantity=product.stock_quantity,
        sku=product.sku,
        barcode=product.barcode,
        dimensions=dimensions,
        is_featured=product.is_featured,
        is_published=product.is_published,
        published_at=product.published_at,
        category_id=product.category_id,
        category_name=category.name if category is not None else None,
        tags=[to_tag_summary(t) for t in product.tags if not t.is_deleted],
        variants=[to_variant_dto(v, product.current_price) for v in product.active_variants],
        has_discount=product.has_discount,
        current_price=product.current_price,
        created_at=product.created_at,
        updated_at=product.updated_at,
        version=product.version,
    )


def to_category_dto(category: Category, product_count: int = 0) -> CategoryDto:
    parent = category.parent_category
    return CategoryDto(
        id=category.id,
        name=category.name,
        description=category.description,
        image_url=category.image_url,
        slug=category.slug,
        parent_category_id=category.parent_category_id,
        parent_category_name=parent.name if parent is not None else None,
        is_main_category=category.is_main_category,
        product_count=product_count,
        created_at=category.created_at,
        updated_at=category.updated_at,
    )


def build_category_tree(
    categories: Iterable[Category], product_counts: Optional[Dict] = None
) -> List[CategoryTreeNode]:
    """由平铺列表构建分类树，父分类不存在（或已删除）的节点作为根"""
    product_counts = product_counts or {}
    nodes = {
        c.id: CategoryTreeNode(**to_category_dto(c, product_counts.get(c.id, 0)).model_dump())
        for c in categories
    }
    roots: List[CategoryTreeNode] = []
    for node in nodes.values():
        parent = nodes.get(node.parent_category_id) if node.parent_category_id else None
        if parent is None:
            roots.append(node)
        else:
            parent.children.append(node)

    def sort(items: List[CategoryTreeNode]) -> None:
        items.sort(key=lambda n: n.name.lower())
        for item in items:
            sort(item.children)

    sort(roots)
    return roots


def to_tag_dto(tag: Tag, usage_count: int = 0) -> TagDto:
    return TagDto(
        id=tag.id,
        name=tag.name,
        slug=tag.slug,
        description=tag.description,
        icon=tag.icon,
        color=tag.color,
        display_order=tag.display_order,
        is_active=tag.is_active,
        usage_count=usage_count,
        created_at=tag.created_at,
        updated_at=tag.updated_at,
    )


def to_role_dto(role: ApplicationRole) -> RoleDto:
    return RoleDto(
        id=role.id,
        name=role.name,
        normalized_name=role.normalized_name,
        description=role.description,
        claims=[
            RoleClaimDto(claim_type=c.claim_type, claim_value=c.claim_value)
            for c in role.claims
        ],
        created_at=role.created_at,
    )


def to_user_dto(user: ApplicationUser) -> UserDto:
    return UserDto(
        id=user.id,
        username=user.username,
        email=user.email,
        first_name=user.first_name,
        last_name=user.last_name,
        full_name=user.full_name,
        is_active=user.is_active,
        roles=user.role_names,
        last_login_at=user.last_login_at,
        created_at=user.created_at,
    )
