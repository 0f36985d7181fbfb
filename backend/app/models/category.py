"""商品分类模型 - 支持多层级树形结构"""

from typing import Iterable, Optional

from sqlalchemy import Boolean, Column, ForeignKey, Index, String, Text, Uuid
from sqlalchemy.orm import relationship, validates

from app.core.exceptions import DomainError
from app.db.base import Base
from app.models.base import AuditMixin, NOT_DELETED_POSTGRESQL, NOT_DELETED_SQLITE
from app.utils.slug import slugify


class Category(AuditMixin, Base):
    """商品分类

    支持多层级树形结构，如：
    - 电子产品
      - 手机
      - 笔记本
    - 服饰
      - 鞋
    没有父分类的是主分类（is_main_category = True）
    """
    __tablename__ = "categories"
    __table_args__ = (
        Index(
            "uq_categories_slug", "slug", unique=True,
            sqlite_where=NOT_DELETED_SQLITE, postgresql_where=NOT_DELETED_POSTGRESQL,
        ),
    )

    name = Column(String(100), nullable=False, comment="分类名称")
    description = Column(Text, nullable=True, comment="描述")
    image_url = Column(String(500), nullable=True, comment="图片地址")
    slug = Column(String(120), nullable=False, comment="URL别名")
    parent_category_id = Column(Uuid, ForeignKey("categories.id"), nullable=True, index=True, comment="父分类ID")
    is_main_category = Column(Boolean, nullable=False, default=True, comment="是否主分类")

    # 关系（子分类通过平铺列表构建，不做反向关系）
    # 自引用的预加载默认不会展开，join_depth=1 只加载直接上级
    parent_category = relationship(
        "Category", remote_side="Category.id", lazy="selectin", join_depth=1,
    )

    def __repr__(self):
        return f"<Category {self.slug}: {self.name}>"

    @validates("name")
    def _validate_name(self, key, value):
        value = (value or "").strip()
        if not value:
            raise DomainError("分类名称不能为空", field="name")
        if len(value) > 100:
            raise DomainError("分类名称不能超过100个字符", field="name")
        # 名称全是符号时用主键前缀区分
        self.slug = slugify(value, fallback=f"category-{self.ensure_id().hex[:8]}")
        return value

    @validates("description", "image_url")
    def _validate_optional_text(self, key, value):
        if value is None:
            return None
        return value.strip() or None

    def set_parent(self, parent: Optional["Category"], parent_ancestor_ids: Iterable = ()) -> None:
        """
        设置父分类

        parent_ancestor_ids: 父分类的所有祖先ID，用于检测循环引用
        """
        # 只设置关系，外键在 flush 时同步
        if parent is None:
            self.parent_category = None
            self.is_main_category = True
            return

        if self.id is not None:
            if parent.id == self.id or self.id in set(parent_ancestor_ids):
                raise DomainError("分类不能成为自己的上级", field="parentCategoryId")

        self.parent_category = parent
        self.is_main_category = False
