"""处理器结果 → HTTP 响应"""

from typing import Any, Optional

from fastapi import Request, Response

from app.application.result import Result, ResultStatus
from app.core.exceptions import ApiError, BadRequestError, NotFoundError
from app.schemas.common import ValidationErrorItem

# 结果状态 → 异常类型（INVALID 和 CONFLICT 都返回 400）
RESULT_ERRORS = {
    ResultStatus.NOT_FOUND: NotFoundError,
    ResultStatus.INVALID: BadRequestError,
    ResultStatus.CONFLICT: BadRequestError,
}


def unwrap(result: Result) -> Any:
    """成功时返回结果值，否则抛出对应状态码的 ApiError"""
    if result.is_success:
        return result.value

    details = None
    if result.errors:
        details = [
            ValidationErrorItem(identifier=e.identifier, error_message=e.error_message).model_dump(by_alias=True)
            for e in result.errors
        ]
    error_cls = RESULT_ERRORS.get(result.status, ApiError)
    raise error_cls(result.message or "请求处理失败", details=details)


def set_location(response: Response, request: Request, resource_id: Any) -> None:
    """201 创建成功时设置 Location 头"""
    response.headers["Location"] = f"{str(request.url).split('?')[0].rstrip('/')}/{resource_id}"


def ensure_route_matches(route_id: Any, body_id: Optional[Any]) -> None:
    """路径ID与请求体ID必须一致"""
    if body_id is None or route_id != body_id:
        raise BadRequestError("路径中的ID与请求体中的ID不一致")
