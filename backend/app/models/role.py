"""
角色模型
身份数据的本地镜像，登录认证由身份服务负责
"""

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, String, Table, Uuid
from sqlalchemy.orm import relationship, validates

from app.core.exceptions import DomainError
from app.db.base import Base
from app.models.base import (
    AuditMixin, NOT_DELETED_POSTGRESQL, NOT_DELETED_SQLITE, utcnow,
)


# 用户-角色关联表
user_roles = Table(
    "user_roles",
    Base.metadata,
    Column("user_id", Uuid, ForeignKey("users.id"), primary_key=True),
    Column("role_id", Uuid, ForeignKey("roles.id"), primary_key=True),
    Column("created_at", DateTime(timezone=True), default=utcnow),
)


class RoleClaim(Base):
    """角色声明（claim_type / claim_value 对）"""
    __tablename__ = "role_claims"

    id = Column(Integer, primary_key=True, autoincrement=True)
    role_id = Column(Uuid, ForeignKey("roles.id"), nullable=False, index=True)
    claim_type = Column(String(200), nullable=False, comment="声明类型")
    claim_value = Column(String(500), nullable=False, comment="声明值")

    def __repr__(self):
        return f"<RoleClaim {self.claim_type}={self.claim_value}>"


class ApplicationRole(AuditMixin, Base):
    """角色"""
    __tablename__ = "roles"
    __table_args__ = (
        Index(
            "uq_roles_normalized_name", "normalized_name", unique=True,
            sqlite_where=NOT_DELETED_SQLITE, postgresql_where=NOT_DELETED_POSTGRESQL,
        ),
    )

    name = Column(String(100), nullable=False, comment="角色名称")
    normalized_name = Column(String(100), nullable=False, comment="大写角色名，用于唯一性比较")
    description = Column(String(500), nullable=True, comment="角色描述")

    # 关系
    claims = relationship(
        "RoleClaim", cascade="all, delete-orphan", lazy="selectin",
        order_by="RoleClaim.id",
    )

    def __repr__(self):
        return f"<Role {self.name}>"

    @validates("name")
    def _validate_name(self, key, value):
        value = (value or "").strip()
        if not value:
            raise DomainError("角色名称不能为空", field="name")
        if len(value) > 100:
            raise DomainError("角色名称不能超过100个字符", field="name")
        self.normalized_name = value.upper()
        return value

    def has_claim(self, claim_type: str, claim_value: str) -> bool:
        return any(
            c.claim_type == claim_type and c.claim_value == claim_value
            for c in self.claims
        )

    def add_claim(self, claim_type: str, claim_value: str) -> bool:
        """添加声明，已存在时返回 False"""
        if not claim_type or not claim_value:
            raise DomainError("声明类型和值不能为空", field="claimType")
        if self.has_claim(claim_type, claim_value):
            return False
        self.claims.append(RoleClaim(claim_type=claim_type, claim_value=claim_value))
        return True

    def remove_claim(self, claim_type: str, claim_value: str) -> bool:
        """移除声明，不存在时返回 False"""
        for claim in list(self.claims):
            if claim.claim_type == claim_type and claim.claim_value == claim_value:
                self.claims.remove(claim)
                return True
        return False
