from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.api import api_router
from app.api.errors import register_exception_handlers
from app.core.config import settings
from app.core.deps import get_db
from app.core.logging_config import get_logger, setup_logging
from app.db.init_db import ensure_tables_exist
from app.db.migrations import run_migrations
from app.db.session import SessionLocal, engine

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """应用生命周期管理"""
    # 启动时
    logger.info(f"🚀 应用启动中... 环境: {settings.ENVIRONMENT}，数据库: {settings.DATABASE_NAME}")

    # 建表失败直接终止启动
    await ensure_tables_exist()
    logger.info("📊 数据库表已就绪")

    # 部分唯一索引和版本号（仅 SQLite）
    if engine.dialect.name == "sqlite":
        async with SessionLocal() as db:
            result = await run_migrations(db)
        if result.get("indexes_created"):
            logger.info(f"📦 数据库结构更新: 创建了 {len(result['indexes_created'])} 个索引")
        if result.get("old_version") != result.get("new_version"):
            logger.info(f"📊 数据库版本: {result.get('old_version') or '初始'} → {result.get('new_version')}")

    yield
    # 关闭时
    logger.info("🛑 应用关闭中...")
    await engine.dispose()


def create_app() -> FastAPI:
    setup_logging(settings.LOG_LEVEL, settings.LOG_DIR or None)

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        openapi_url=f"{settings.API_PREFIX}/openapi.json",
        description="商品目录管理后台",
        lifespan=lifespan,
    )

    # CORS配置
    if settings.BACKEND_CORS_ORIGINS:
        logger.info(f"配置CORS，允许的源: {settings.BACKEND_CORS_ORIGINS}")
        app.add_middleware(
            CORSMiddleware,
            allow_origins=[str(origin) for origin in settings.BACKEND_CORS_ORIGINS],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    register_exception_handlers(app)

    logger.info(f"注册API路由，前缀: {settings.API_PREFIX}")
    app.include_router(api_router, prefix=settings.API_PREFIX)

    @app.get("/health")
    async def health(db: AsyncSession = Depends(get_db)):
        await db.execute(text("SELECT 1"))
        return {"status": "ok"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="127.0.0.1", port=8000, log_level="info")
