"""认证Schema"""

from typing import Optional

from pydantic import BaseModel, Field

from app.schemas.common import CamelModel


class LoginRequest(CamelModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class RefreshTokenRequest(CamelModel):
    refresh_token: str = Field(..., min_length=1)


class LogoutRequest(CamelModel):
    refresh_token: Optional[str] = None


class TokenResponse(BaseModel):
    """身份服务返回的令牌，字段名保持 OIDC 原样"""
    access_token: str
    expires_in: Optional[int] = None
    refresh_expires_in: Optional[int] = None
    refresh_token: Optional[str] = None
    token_type: Optional[str] = None
    id_token: Optional[str] = None
    not_before_policy: Optional[int] = Field(None, alias="not-before-policy")
    session_state: Optional[str] = None
    scope: Optional[str] = None

    class Config:
        populate_by_name = True


class MessageResponse(BaseModel):
    message: str
