"""JWT Bearer 校验 - 令牌由 Keycloak 签发，本地只做验签和声明提取"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from app.core.config import settings
from app.core.exceptions import ForbiddenError, UnauthorizedError

ADMIN_ROLE = "admin"

# JWT 令牌方案（auto_error=False 以便统一返回 401 错误体）
security = HTTPBearer(auto_error=False)


@dataclass
class CurrentUser:
    """当前请求的用户（来自令牌声明）"""
    id: str
    username: Optional[str] = None
    email: Optional[str] = None
    roles: List[str] = field(default_factory=list)
    token: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return any(r.lower() == ADMIN_ROLE for r in self.roles)


def extract_roles(payload: Dict[str, Any]) -> List[str]:
    """合并 realm 角色、客户端角色和顶层 roles 声明"""
    roles: List[str] = list(payload.get("realm_access", {}).get("roles", []))
    client_access = payload.get("resource_access", {}).get(settings.KEYCLOAK_CLIENT_ID, {})
    roles.extend(client_access.get("roles", []))
    roles.extend(payload.get("roles", []))
    # 去重并保持顺序
    return list(dict.fromkeys(roles))


def decode_token(token: str) -> Dict[str, Any]:
    options = {
        "verify_aud": settings.JWT_AUDIENCE is not None,
        "verify_iss": settings.JWT_ISSUER is not None,
    }
    return jwt.decode(
        token,
        settings.JWT_SECRET_KEY,
        algorithms=[settings.JWT_ALGORITHM],
        audience=settings.JWT_AUDIENCE,
        issuer=settings.JWT_ISSUER,
        options=options,
    )


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> CurrentUser:
    """返回当前已认证用户"""
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise UnauthorizedError("未提供认证令牌")

    try:
        payload = decode_token(credentials.credentials)
    except JWTError:
        raise UnauthorizedError("认证令牌无效或已过期")

    subject = payload.get("sub")
    if subject is None:
        raise UnauthorizedError("认证令牌无效或已过期")

    return CurrentUser(
        id=str(subject),
        username=payload.get("preferred_username"),
        email=payload.get("email"),
        roles=extract_roles(payload),
        token=credentials.credentials,
    )


def get_current_admin_user(
    current_user: CurrentUser = Depends(get_current_user),
) -> CurrentUser:
    """返回当前管理员用户"""
    if not current_user.is_admin:
        raise ForbiddenError("权限不足")
    return current_user
