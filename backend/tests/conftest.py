import os

# 测试环境：只输出到控制台，不写日志文件
os.environ["LOG_DIR"] = ""
os.environ["ENVIRONMENT"] = "test"

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import app.models  # noqa: F401
from app.application import Mediator
from app.application.categories import CreateCategoryCommand
from app.application.products import CreateProductCommand
from app.core.deps import get_db
from app.core.security import CurrentUser, get_current_user
from app.db.base import Base
from app.db.session import register_sqlite_functions
from app.repositories import UnitOfWork


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    register_sqlite_functions(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest.fixture
async def session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def uow(session):
    return UnitOfWork(session)


@pytest.fixture
def admin_user():
    return CurrentUser(id="admin-id", username="admin", email="admin@example.com", roles=["admin"])


@pytest.fixture
def mediator(uow, admin_user):
    return Mediator(uow, admin_user)


@pytest.fixture
def make_category(mediator):
    async def _make(name="电子产品", parent_id=None):
        result = await mediator.send(CreateCategoryCommand(name=name, parent_category_id=parent_id))
        assert result.is_success, result.message
        return result.value
    return _make


@pytest.fixture
def make_product(mediator):
    async def _make(category_id, **fields):
        data = {"name": "Widget", "price": 10, "category_id": category_id}
        data.update(fields)
        result = await mediator.send(CreateProductCommand(**data))
        assert result.is_success, result.message
        return result.value
    return _make


def _build_client(session_factory, overrides):
    from app.main import app

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides.update(overrides)
    return app


@pytest.fixture
async def client(session_factory, admin_user):
    """以管理员身份访问的客户端"""
    app = _build_client(session_factory, {get_current_user: lambda: admin_user})
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
async def anon_client(session_factory):
    """不带认证覆盖的客户端（走真实的 JWT 校验）"""
    app = _build_client(session_factory, {})
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()
