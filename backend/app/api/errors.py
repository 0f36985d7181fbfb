"""
全局异常处理

所有失败响应统一为 {statusCode, message, details?}：
- 请求体/参数校验失败 → 400
- ApiError → 自身状态码
- HTTPException → 原状态码
- 其他未处理异常 → 500，仅在非生产环境附带异常详情
"""

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import settings
from app.core.exceptions import ApiError
from app.schemas.common import ValidationErrorItem

logger = logging.getLogger(__name__)


def error_response(status_code: int, message: str, details: Any = None) -> JSONResponse:
    content = {"statusCode": status_code, "message": message}
    if details is not None:
        content["details"] = jsonable_encoder(details)
    return JSONResponse(status_code=status_code, content=content)


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info(f"请求校验失败: {request.method} {request.url.path}")
    details = [
        ValidationErrorItem(
            identifier=".".join(str(p) for p in err.get("loc", ()) if p != "body"),
            error_message=err.get("msg", ""),
        ).model_dump(by_alias=True)
        for err in exc.errors()
    ]
    return error_response(status.HTTP_400_BAD_REQUEST, "请求参数校验失败", details)


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"❌ {request.method} {request.url.path}: {exc.message}")
        details = exc.details if not settings.is_production else None
    else:
        details = exc.details
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    response = error_response(exc.status_code, exc.message, details)
    if headers:
        response.headers.update(headers)
    return response


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return error_response(exc.status_code, str(exc.detail))


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"❌ 未处理的异常: {request.method} {request.url.path}")
    details = None if settings.is_production else f"{type(exc).__name__}: {exc}"
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "服务器内部错误", details)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
