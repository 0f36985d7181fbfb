"""角色Schema"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import Field

from app.schemas.common import CamelModel


class RoleBase(CamelModel):
    name: str = Field(..., min_length=1, max_length=100, description="角色名称")
    description: Optional[str] = Field(None, max_length=500, description="角色描述")


class RoleCreate(RoleBase):
    pass


class RoleUpdate(RoleBase):
    id: UUID


class RoleClaimDto(CamelModel):
    claim_type: str = Field(..., min_length=1, max_length=200)
    claim_value: str = Field(..., min_length=1, max_length=500)


class RoleDto(RoleBase):
    id: UUID
    normalized_name: str
    claims: List[RoleClaimDto] = []
    created_at: Optional[datetime] = None
