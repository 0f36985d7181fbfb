"""
Keycloak 身份服务客户端

封装 OpenID Connect 的三个端点调用：
- 密码模式登录
- 刷新令牌
- 注销

请求体为表单编码，携带 client_id / client_secret。
非 2xx 响应统一抛出 IdentityProviderError，由接口层转换为 401。
本地不缓存令牌。
"""

import logging
from typing import Any, Dict, Optional

import httpx

from app.core.config import settings
from app.core.exceptions import IdentityProviderError

logger = logging.getLogger(__name__)


class KeycloakClient:

    def __init__(
        self,
        token_endpoint: Optional[str] = None,
        logout_endpoint: Optional[str] = None,
        client_id: Optional[str] = None,
        client_secret: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.token_endpoint = token_endpoint or settings.keycloak_token_endpoint
        self.logout_endpoint = logout_endpoint or settings.keycloak_logout_endpoint
        self.client_id = client_id or settings.KEYCLOAK_CLIENT_ID
        self.client_secret = client_secret if client_secret is not None else settings.KEYCLOAK_CLIENT_SECRET
        self.timeout = timeout or settings.KEYCLOAK_TIMEOUT
        # 测试时注入 httpx.MockTransport
        self.transport = transport

    def _client_form(self, **extra: str) -> Dict[str, str]:
        form = {"client_id": self.client_id}
        if self.client_secret:
            form["client_secret"] = self.client_secret
        form.update(extra)
        return form

    async def _post(self, url: str, form: Dict[str, str]) -> httpx.Response:
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            response = await client.post(url, data=form)
        if response.status_code < 200 or response.status_code >= 300:
            logger.warning(f"身份服务返回 {response.status_code}: {url}")
            raise IdentityProviderError(response.status_code, response.text)
        return response

    async def password_grant(self, username: str, password: str) -> Dict[str, Any]:
        """用户名密码换取令牌"""
        logger.info(f"用户登录: {username}")
        response = await self._post(
            self.token_endpoint,
            self._client_form(grant_type="password", username=username, password=password),
        )
        return response.json()

    async def refresh(self, refresh_token: str) -> Dict[str, Any]:
        """刷新令牌"""
        response = await self._post(
            self.token_endpoint,
            self._client_form(grant_type="refresh_token", refresh_token=refresh_token),
        )
        return response.json()

    async def logout(self, refresh_token: str) -> None:
        """注销会话"""
        await self._post(
            self.logout_endpoint,
            self._client_form(refresh_token=refresh_token),
        )
