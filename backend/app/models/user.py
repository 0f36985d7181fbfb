from typing import List, TYPE_CHECKING

from sqlalchemy import Boolean, Column, DateTime, Index, String
from sqlalchemy.orm import relationship, validates

from app.core.exceptions import DomainError
from app.db.base import Base
from app.models.base import AuditMixin, NOT_DELETED_POSTGRESQL, NOT_DELETED_SQLITE

# 延迟导入避免循环依赖
if TYPE_CHECKING:
    from app.models.role import ApplicationRole


class ApplicationUser(AuditMixin, Base):
    __tablename__ = "users"
    __table_args__ = (
        Index(
            "uq_users_username", "username", unique=True,
            sqlite_where=NOT_DELETED_SQLITE, postgresql_where=NOT_DELETED_POSTGRESQL,
        ),
    )

    username = Column(String(100), nullable=False)
    email = Column(String(200), nullable=True)
    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)  # True: 启用, False: 禁用
    last_login_at = Column(DateTime(timezone=True), nullable=True)

    roles = relationship("ApplicationRole", secondary="user_roles", lazy="selectin")

    def __repr__(self):
        return f"<User {self.username}>"

    @validates("username")
    def _validate_username(self, key, value):
        value = (value or "").strip()
        if not value:
            raise DomainError("用户名不能为空", field="username")
        return value

    @validates("email", "first_name", "last_name")
    def _validate_profile(self, key, value):
        if value is None or not value.strip():
            return None
        value = value.strip()
        if key == "email" and "@" not in value:
            raise DomainError("邮箱格式不正确", field="email")
        return value

    @property
    def full_name(self) -> str:
        return " ".join(p for p in (self.first_name, self.last_name) if p)

    @property
    def role_names(self) -> List[str]:
        return [r.name for r in (self.roles or []) if not r.is_deleted]

    @property
    def is_admin(self) -> bool:
        return any(name.lower() == "admin" for name in self.role_names)

    def has_role(self, role: "ApplicationRole") -> bool:
        return any(r.id == role.id for r in (self.roles or []))

    def assign_role(self, role: "ApplicationRole") -> bool:
        """分配角色，已拥有时返回 False"""
        if self.has_role(role):
            return False
        self.roles.append(role)
        return True

    def remove_role(self, role: "ApplicationRole") -> bool:
        for existing in list(self.roles):
            if existing.id == role.id:
                self.roles.remove(existing)
                return True
        return False
