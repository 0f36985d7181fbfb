"""API 路由聚合"""
from fastapi import APIRouter, Depends

from app.api.endpoints import auth, categories, dashboard, products, roles, tags, users
from app.core.security import get_current_user
from app.schemas.common import ErrorResponse

# 文档中统一的错误响应
error_responses = {
    400: {"model": ErrorResponse, "description": "参数校验失败或业务规则冲突"},
    401: {"model": ErrorResponse, "description": "未认证"},
    404: {"model": ErrorResponse, "description": "资源不存在"},
    500: {"model": ErrorResponse, "description": "服务器内部错误"},
}

api_router = APIRouter(responses=error_responses)

# 认证（login / refresh-token 不需要令牌）
api_router.include_router(auth.router, prefix="/auth", tags=["认证"])

# 以下路由都需要 Bearer 令牌
protected = [Depends(get_current_user)]
api_router.include_router(products.router, prefix="/products", tags=["商品管理"], dependencies=protected)
api_router.include_router(categories.router, prefix="/categories", tags=["商品分类"], dependencies=protected)
api_router.include_router(tags.router, prefix="/tags", tags=["标签管理"], dependencies=protected)
api_router.include_router(roles.router, prefix="/roles", tags=["角色管理"], dependencies=protected)
api_router.include_router(users.router, prefix="/users", tags=["用户管理"], dependencies=protected)
api_router.include_router(dashboard.router, prefix="/dashboard", tags=["仪表盘"], dependencies=protected)
