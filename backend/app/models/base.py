"""
公共审计字段

所有实体都带有：
- 服务端生成的 UUID 主键
- 创建/修改/删除的时间与操作人
- 软删除标记（所有实体统一逻辑删除）
- 乐观并发版本号（由 SQLAlchemy 在每次 UPDATE 时自增并校验）
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Boolean, Column, DateTime, Integer, String, Uuid, text
from sqlalchemy.orm import declared_attr


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# 唯一索引只约束未删除的记录
NOT_DELETED_SQLITE = text("is_deleted = 0")
NOT_DELETED_POSTGRESQL = text("is_deleted = false")


class AuditMixin:
    id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    # 审计字段
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    created_by = Column(String(100), nullable=True)
    updated_at = Column(DateTime(timezone=True), nullable=True)
    updated_by = Column(String(100), nullable=True)

    # 软删除
    is_deleted = Column(Boolean, nullable=False, default=False, index=True)
    deleted_at = Column(DateTime(timezone=True), nullable=True)
    deleted_by = Column(String(100), nullable=True)

    # 乐观并发令牌
    version = Column(Integer, nullable=False)

    @declared_attr
    def __mapper_args__(cls):
        return {"version_id_col": cls.version}

    def ensure_id(self) -> uuid.UUID:
        """新实体在 flush 前提前生成主键"""
        if self.id is None:
            self.id = uuid.uuid4()
        return self.id

    def set_created_by(self, user_id: Optional[str]) -> None:
        if user_id:
            self.created_by = user_id
            self.updated_by = user_id

    def touch(self, user_id: Optional[str] = None) -> None:
        """刷新修改时间和修改人"""
        self.updated_at = utcnow()
        if user_id:
            self.updated_by = user_id

    def mark_deleted(self, user_id: Optional[str] = None) -> None:
        """逻辑删除"""
        self.is_deleted = True
        self.deleted_at = utcnow()
        self.deleted_by = user_id
        self.touch(user_id)
