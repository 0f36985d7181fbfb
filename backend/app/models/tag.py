"""标签模型"""

from sqlalchemy import Boolean, Column, Index, Integer, String
from sqlalchemy.orm import validates

from app.core.exceptions import DomainError
from app.db.base import Base
from app.models.base import AuditMixin, NOT_DELETED_POSTGRESQL, NOT_DELETED_SQLITE
from app.utils.slug import slugify


class Tag(AuditMixin, Base):
    """商品标签"""
    __tablename__ = "tags"
    __table_args__ = (
        Index(
            "uq_tags_name", "name", unique=True,
            sqlite_where=NOT_DELETED_SQLITE, postgresql_where=NOT_DELETED_POSTGRESQL,
        ),
        Index(
            "uq_tags_slug", "slug", unique=True,
            sqlite_where=NOT_DELETED_SQLITE, postgresql_where=NOT_DELETED_POSTGRESQL,
        ),
    )

    name = Column(String(100), nullable=False, comment="标签名称")
    slug = Column(String(120), nullable=False, comment="URL别名")
    description = Column(String(500), nullable=True, comment="描述")
    icon = Column(String(100), nullable=True, comment="图标")
    color = Column(String(20), nullable=True, comment="颜色")
    display_order = Column(Integer, nullable=False, default=0, comment="排序")
    is_active = Column(Boolean, nullable=False, default=True, comment="是否启用")

    def __repr__(self):
        return f"<Tag {self.slug}>"

    @validates("name")
    def _validate_name(self, key, value):
        value = (value or "").strip()
        if not value:
            raise DomainError("标签名称不能为空", field="name")
        if len(value) > 100:
            raise DomainError("标签名称不能超过100个字符", field="name")
        self.slug = slugify(value, fallback=f"tag-{self.ensure_id().hex[:8]}")
        return value

    @validates("color")
    def _validate_color(self, key, value):
        if value is not None and len(value) > 20:
            raise DomainError("颜色值不能超过20个字符", field="color")
        return value

    @validates("display_order")
    def _validate_display_order(self, key, value):
        if value is None:
            return 0
        if value < 0:
            raise DomainError("排序值不能为负数", field="displayOrder")
        return value
