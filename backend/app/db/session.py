from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker

from app.core.config import settings


def _normalize_url(url: str) -> str:
    """同步驱动的 SQLite 地址换成 aiosqlite"""
    if url.startswith("sqlite:///"):
        return url.replace("sqlite:///", "sqlite+aiosqlite:///")
    return url


def _unicode_lower(value):
    return value.lower() if isinstance(value, str) else value


def register_sqlite_functions(bind: AsyncEngine) -> None:
    """
    SQLite 自带的 lower() 只转换 ASCII 字母，
    每个新连接上用 Python 的 str.lower 覆盖，保证 "ÉCRAN" 与 "écran" 能互相匹配
    """
    if bind.dialect.name != "sqlite":
        return

    @event.listens_for(bind.sync_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.create_function("lower", 1, _unicode_lower)


# 创建异步引擎
# 仅在开发环境打印SQL（通过环境变量控制）
engine = create_async_engine(
    _normalize_url(settings.DATABASE_URL),
    echo=settings.SQL_DEBUG,
    future=True,
)
register_sqlite_functions(engine)

# 创建异步会话
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
)
