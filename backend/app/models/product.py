"""商品模型"""

from typing import List, Optional, TYPE_CHECKING

from sqlalchemy import (
    Boolean, Column, DateTime, Float, ForeignKey, Index, Integer, Numeric,
    String, Table, Text, Uuid,
)
from sqlalchemy.orm import relationship, validates

from app.core.exceptions import DomainError
from app.db.base import Base
from app.models.base import (
    AuditMixin, NOT_DELETED_POSTGRESQL, NOT_DELETED_SQLITE, utcnow,
)

if TYPE_CHECKING:
    from app.models.product_variant import ProductVariant


# 商品-标签关联表
product_tags = Table(
    "product_tags",
    Base.metadata,
    Column("product_id", Uuid, ForeignKey("products.id"), primary_key=True),
    Column("tag_id", Uuid, ForeignKey("tags.id"), primary_key=True),
    Column("created_at", DateTime(timezone=True), default=utcnow),
)


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


class Product(AuditMixin, Base):
    """商品

    价格规则：
    - price >= 0
    - discount_price 可空，设置时 0 <= discount_price <= price
    - 库存不能为负
    """
    __tablename__ = "products"
    __table_args__ = (
        Index(
            "uq_products_sku", "sku", unique=True,
            sqlite_where=NOT_DELETED_SQLITE, postgresql_where=NOT_DELETED_POSTGRESQL,
        ),
        Index(
            "uq_products_barcode", "barcode", unique=True,
            sqlite_where=NOT_DELETED_SQLITE, postgresql_where=NOT_DELETED_POSTGRESQL,
        ),
    )

    name = Column(String(200), nullable=False, index=True, comment="商品名称")
    description = Column(Text, nullable=True, comment="描述")
    image_url = Column(String(500), nullable=True, comment="图片地址")

    price = Column(Numeric(12, 2, asdecimal=False), nullable=False, default=0, comment="售价")
    discount_price = Column(Numeric(12, 2, asdecimal=False), nullable=True, comment="折扣价")
    stock_quantity = Column(Integer, nullable=False, default=0, comment="库存数量")

    sku = Column(String(50), nullable=True, comment="SKU")
    barcode = Column(String(50), nullable=True, comment="条码")

    # 物流尺寸
    weight = Column(Float, nullable=True, comment="重量")
    height = Column(Float, nullable=True, comment="高")
    width = Column(Float, nullable=True, comment="宽")
    length = Column(Float, nullable=True, comment="长")

    category_id = Column(Uuid, ForeignKey("categories.id"), nullable=False, index=True, comment="分类ID")

    is_featured = Column(Boolean, nullable=False, default=False, comment="是否推荐")
    is_published = Column(Boolean, nullable=False, default=False, comment="是否上架")
    published_at = Column(DateTime(timezone=True), nullable=True, comment="上架时间")

    # 关系
    category = relationship("Category", lazy="selectin")
    tags = relationship("Tag", secondary=product_tags, lazy="selectin")
    variants = relationship("ProductVariant", back_populates="product", lazy="selectin")

    def __repr__(self):
        return f"<Product {self.sku or self.id}: {self.name}>"

    # ========== 校验 ==========

    @validates("name")
    def _validate_name(self, key, value):
        value = (value or "").strip()
        if not value:
            raise DomainError("商品名称不能为空", field="name")
        if len(value) > 200:
            raise DomainError("商品名称不能超过200个字符", field="name")
        return value

    @validates("description", "image_url", "sku", "barcode")
    def _validate_optional_text(self, key, value):
        return _blank_to_none(value)

    @validates("price")
    def _validate_price(self, key, value):
        if value is None:
            raise DomainError("价格不能为空", field="price")
        value = float(value)
        if value < 0:
            raise DomainError("价格不能为负数", field="price")
        if self.discount_price is not None and self.discount_price > value:
            raise DomainError("折扣价不能高于售价", field="discountPrice")
        return value

    @validates("discount_price")
    def _validate_discount_price(self, key, value):
        if value is None:
            return None
        value = float(value)
        if value < 0:
            raise DomainError("折扣价不能为负数", field="discountPrice")
        if self.price is not None and value > self.price:
            raise DomainError("折扣价不能高于售价", field="discountPrice")
        return value

    @validates("stock_quantity")
    def _validate_stock(self, key, value):
        if value is None or value < 0:
            raise DomainError("库存数量不能为负数", field="stockQuantity")
        return value

    @validates("weight", "height", "width", "length")
    def _validate_dimension(self, key, value):
        if value is not None and value <= 0:
            raise DomainError(f"{key} 必须大于0", field=key)
        return value

    @validates("category_id")
    def _validate_category(self, key, value):
        if value is None:
            raise DomainError("商品必须属于一个分类", field="categoryId")
        return value

    # ========== 行为 ==========

    @property
    def has_discount(self) -> bool:
        return self.discount_price is not None and self.discount_price < self.price

    @property
    def current_price(self) -> float:
        return self.discount_price if self.has_discount else self.price

    def publish(self, user_id: Optional[str] = None) -> None:
        self.is_published = True
        self.published_at = utcnow()
        self.touch(user_id)

    def unpublish(self, user_id: Optional[str] = None) -> None:
        self.is_published = False
        self.published_at = None
        self.touch(user_id)

    def adjust_stock(self, delta: int, user_id: Optional[str] = None) -> None:
        """按增量调整库存，结果不能为负"""
        new_quantity = (self.stock_quantity or 0) + delta
        if new_quantity < 0:
            raise DomainError(
                f"库存不足：当前 {self.stock_quantity}，调整 {delta}",
                field="stockQuantity",
            )
        self.stock_quantity = new_quantity
        self.touch(user_id)

    def mark_deleted(self, user_id: Optional[str] = None) -> None:
        """删除商品时一并删除变体，释放变体 SKU"""
        for variant in self.active_variants:
            variant.mark_deleted(user_id)
        super().mark_deleted(user_id)

    # ========== 变体 ==========

    @property
    def active_variants(self) -> List["ProductVariant"]:
        variants = [v for v in (self.variants or []) if not v.is_deleted]
        return sorted(variants, key=lambda v: (v.display_order or 0, v.name.lower()))

    def get_variant(self, variant_id) -> Optional["ProductVariant"]:
        for variant in self.active_variants:
            if variant.id == variant_id:
                return variant
        return None

    def _apply_variant_rules(self, variant: "ProductVariant") -> None:
        name = variant.name.lower()
        others = [v for v in self.active_variants if v is not variant]
        if any(v.name.lower() == name for v in others):
            raise DomainError(f"变体名称 '{variant.name}' 已存在", field="name")
        if variant.final_price(self.current_price) < 0:
            raise DomainError("变体售价不能为负数", field="priceAdjustment")
        # 只保留一个默认变体
        if variant.is_default:
            for other in others:
                if other.is_default:
                    other.is_default = False

    def add_variant(self, variant: "ProductVariant", user_id: Optional[str] = None) -> None:
        self._apply_variant_rules(variant)
        variant.set_created_by(user_id)
        self.variants.append(variant)
        self.touch(user_id)

    def update_variant(self, variant: "ProductVariant", user_id: Optional[str] = None) -> None:
        """变体字段已修改后调用，重新校验聚合规则"""
        self._apply_variant_rules(variant)
        variant.touch(user_id)
        self.touch(user_id)

    def remove_variant(self, variant: "ProductVariant", user_id: Optional[str] = None) -> None:
        variant.mark_deleted(user_id)
        self.touch(user_id)
