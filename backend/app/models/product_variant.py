"""商品变体模型（尺码、颜色、材质等）"""

from sqlalchemy import Boolean, Column, Float, ForeignKey, Index, Integer, Numeric, String, Text, Uuid
from sqlalchemy.orm import relationship, validates

from app.core.exceptions import DomainError
from app.db.base import Base
from app.models.base import AuditMixin, NOT_DELETED_POSTGRESQL, NOT_DELETED_SQLITE


class ProductVariant(AuditMixin, Base):
    """商品变体

    属于某个商品，通过 Product.add_variant 添加：
    - 同一商品下变体名称唯一（忽略大小写）
    - 最多一个默认变体
    - 实际售价 = 商品当前价 + 价格调整，不能为负
    """
    __tablename__ = "product_variants"
    __table_args__ = (
        Index(
            "uq_product_variants_sku", "sku", unique=True,
            sqlite_where=NOT_DELETED_SQLITE, postgresql_where=NOT_DELETED_POSTGRESQL,
        ),
    )

    product_id = Column(Uuid, ForeignKey("products.id"), nullable=False, index=True, comment="商品ID")
    name = Column(String(100), nullable=False, comment="变体名称")
    description = Column(Text, nullable=True, comment="描述")
    sku = Column(String(50), nullable=True, comment="SKU")
    barcode = Column(String(50), nullable=True, comment="条码")
    price_adjustment = Column(Numeric(12, 2, asdecimal=False), nullable=False, default=0, comment="价格调整")
    weight_adjustment = Column(Float, nullable=True, comment="重量调整")
    stock_quantity = Column(Integer, nullable=False, default=0, comment="库存数量")
    is_default = Column(Boolean, nullable=False, default=False, comment="是否默认")
    display_order = Column(Integer, nullable=False, default=0, comment="排序")
    image_url = Column(String(500), nullable=True, comment="图片地址")

    product = relationship("Product", back_populates="variants")

    def __repr__(self):
        return f"<ProductVariant {self.name}>"

    @validates("name")
    def _validate_name(self, key, value):
        value = (value or "").strip()
        if not value:
            raise DomainError("变体名称不能为空", field="name")
        if len(value) > 100:
            raise DomainError("变体名称不能超过100个字符", field="name")
        return value

    @validates("description", "image_url")
    def _validate_optional_text(self, key, value):
        if value is None:
            return None
        return value.strip() or None

    @validates("sku", "barcode")
    def _validate_code(self, key, value):
        if value is None or not value.strip():
            return None
        value = value.strip()
        if len(value) > 50:
            raise DomainError(f"{key} 不能超过50个字符", field=key)
        return value

    @validates("price_adjustment")
    def _validate_price_adjustment(self, key, value):
        return float(value or 0)

    @validates("stock_quantity")
    def _validate_stock(self, key, value):
        if value is None or value < 0:
            raise DomainError("变体库存不能为负数", field="stockQuantity")
        return value

    @validates("display_order")
    def _validate_display_order(self, key, value):
        if value is None or value < 0:
            raise DomainError("排序不能为负数", field="displayOrder")
        return value

    def final_price(self, base_price: float) -> float:
        return round(base_price + (self.price_adjustment or 0), 2)
