"""
异常定义

DomainError 由实体在不变量被破坏时抛出；
ApiError 系列由依赖项（认证）和外部网关抛出，由全局异常处理器转换为统一的错误响应。
"""

from typing import Any, Optional


class DomainError(ValueError):
    """实体不变量校验失败"""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field


class ApiError(Exception):
    """带HTTP状态码的接口异常"""

    status_code: int = 500

    def __init__(self, message: str, status_code: Optional[int] = None, details: Any = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.details = details


class BadRequestError(ApiError):
    status_code = 400


class NotFoundError(ApiError):
    status_code = 404


class UnauthorizedError(ApiError):
    status_code = 401


class ForbiddenError(ApiError):
    status_code = 403


class IdentityProviderError(Exception):
    """身份提供方返回非2xx响应"""

    def __init__(self, status_code: int, body: str = ""):
        super().__init__(f"identity provider responded with {status_code}")
        self.status_code = status_code
        self.body = body
