# models包初始化文件

from app.models.base import AuditMixin
from app.models.category import Category
from app.models.product import Product, product_tags
from app.models.product_variant import ProductVariant
from app.models.tag import Tag
from app.models.role import ApplicationRole, RoleClaim, user_roles
from app.models.user import ApplicationUser

__all__ = [
    "AuditMixin",
    "Category",
    "Product",
    "product_tags",
    "ProductVariant",
    "Tag",
    "ApplicationRole",
    "RoleClaim",
    "user_roles",
    "ApplicationUser",
]
