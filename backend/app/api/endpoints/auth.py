"""
认证API - 代理到 Keycloak

- login / refresh-token 无需令牌
- 身份服务返回非2xx → 401
- 其他异常 → 500
- logout 时身份服务失败只记录日志，仍返回 200
"""

import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends
from fastapi.security import HTTPAuthorizationCredentials

from app.core.deps import get_identity_provider
from app.core.exceptions import ApiError, IdentityProviderError, UnauthorizedError
from app.core.security import CurrentUser, get_current_user, security
from app.schemas.auth import (
    LoginRequest,
    LogoutRequest,
    MessageResponse,
    RefreshTokenRequest,
    TokenResponse,
)
from app.services.identity_provider import KeycloakClient

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/login", response_model=TokenResponse)
async def login(
    *,
    idp: KeycloakClient = Depends(get_identity_provider),
    form: LoginRequest,
) -> Any:
    """
    用户名密码登录
    """
    try:
        token = await idp.password_grant(form.username, form.password)
    except IdentityProviderError:
        raise UnauthorizedError("用户名或密码错误")
    except Exception:
        logger.exception(f"登录失败: {form.username}")
        raise ApiError("登录时发生错误")
    logger.info(f"✅ 登录成功: {form.username}")
    return token


@router.post("/refresh-token", response_model=TokenResponse)
async def refresh_token(
    *,
    idp: KeycloakClient = Depends(get_identity_provider),
    body: RefreshTokenRequest,
) -> Any:
    try:
        return await idp.refresh(body.refresh_token)
    except IdentityProviderError:
        raise UnauthorizedError("刷新令牌无效或已过期")
    except Exception:
        logger.exception("刷新令牌失败")
        raise ApiError("刷新令牌时发生错误")


@router.post("/logout", response_model=MessageResponse)
async def logout(
    *,
    idp: KeycloakClient = Depends(get_identity_provider),
    current_user: CurrentUser = Depends(get_current_user),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    body: Optional[LogoutRequest] = None,
) -> Any:
    """
    注销：优先使用请求体中的刷新令牌，否则使用当前的 Bearer 令牌
    """
    token = (body.refresh_token if body else None) or (credentials.credentials if credentials else None)
    try:
        if token:
            await idp.logout(token)
    except IdentityProviderError as e:
        logger.warning(f"⚠️ 身份服务注销失败（{e.status_code}），用户 {current_user.id} 已在本地注销")
    except Exception:
        logger.exception(f"注销失败: {current_user.id}")
        raise ApiError("注销时发生错误")
    return {"message": "已注销"}
