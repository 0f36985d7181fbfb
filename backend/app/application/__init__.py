# 导入所有用例模块，确保处理器注册到 Mediator

from app.application import categories, dashboard, products, roles, tags, users  # noqa: F401
from app.application.mediator import Mediator, RequestHandler, handles
from app.application.result import Result, ResultStatus, ValidationError

__all__ = [
    "Mediator",
    "RequestHandler",
    "handles",
    "Result",
    "ResultStatus",
    "ValidationError",
]
