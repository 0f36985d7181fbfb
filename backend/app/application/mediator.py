"""
请求分发

处理器用 @handles(RequestType) 注册；Mediator 按请求类型找到处理器并执行。
每个 HTTP 请求创建一个 Mediator，共享该请求的 UnitOfWork。
"""

import logging
from typing import Any, Dict, Optional, Type

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm.exc import StaleDataError

from app.application.result import Result, ValidationError
from app.core.exceptions import DomainError
from app.core.security import CurrentUser
from app.repositories.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)

_registry: Dict[Type, Type["RequestHandler"]] = {}


def handles(request_type: Type):
    def decorator(handler_cls):
        if request_type in _registry:
            raise RuntimeError(f"{request_type.__name__} 已注册处理器 {_registry[request_type].__name__}")
        _registry[request_type] = handler_cls
        return handler_cls
    return decorator


def registered_handler(request_type: Type) -> Optional[Type["RequestHandler"]]:
    return _registry.get(request_type)


class RequestHandler:
    """
    处理器基类

    子类实现 execute()；handle() 统一把异常转换为结果：
    - DomainError → INVALID
    - StaleDataError / IntegrityError → CONFLICT
    - 其他异常 → 记录日志后返回 ERROR
    """

    # 用于日志和错误消息的操作描述
    action = "处理请求"

    def __init__(self, uow: UnitOfWork, current_user: Optional[CurrentUser] = None):
        self.uow = uow
        self.current_user = current_user

    @property
    def user_id(self) -> Optional[str]:
        return self.current_user.id if self.current_user else None

    async def execute(self, request) -> Result:
        raise NotImplementedError

    async def handle(self, request) -> Result:
        try:
            return await self.execute(request)
        except DomainError as e:
            await self.uow.rollback()
            logger.warning(f"⚠️ {self.action}校验失败: {e.message}")
            return Result.invalid([ValidationError(e.field or "", e.message)])
        except StaleDataError:
            await self.uow.rollback()
            logger.warning(f"⚠️ {self.action}发生并发冲突")
            return Result.conflict("数据已被其他操作修改，请刷新后重试")
        except IntegrityError as e:
            await self.uow.rollback()
            logger.warning(f"⚠️ {self.action}违反唯一性约束: {e.orig}")
            return Result.conflict("数据与已有记录冲突")
        except Exception:
            logger.exception(f"❌ {self.action}失败")
            await self.uow.rollback()
            return Result.error(f"{self.action}时发生错误")


class Mediator:

    def __init__(self, uow: UnitOfWork, current_user: Optional[CurrentUser] = None):
        self.uow = uow
        self.current_user = current_user

    async def send(self, request: Any) -> Result:
        handler_cls = registered_handler(type(request))
        if handler_cls is None:
            raise LookupError(f"未注册的请求类型: {type(request).__name__}")
        handler = handler_cls(self.uow, self.current_user)
        logger.debug(f"分发 {type(request).__name__} → {handler_cls.__name__}")
        return await handler.handle(request)
