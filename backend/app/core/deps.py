"""依赖注入"""
from typing import AsyncGenerator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.application import Mediator
from app.core.security import CurrentUser, get_current_user
from app.db.session import SessionLocal
from app.repositories import UnitOfWork
from app.services.identity_provider import KeycloakClient


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    获取数据库会话依赖（每个请求一个会话）
    """
    async with SessionLocal() as session:
        yield session


def get_uow(db: AsyncSession = Depends(get_db)) -> UnitOfWork:
    return UnitOfWork(db)


def get_mediator(
    uow: UnitOfWork = Depends(get_uow),
    current_user: CurrentUser = Depends(get_current_user),
) -> Mediator:
    return Mediator(uow, current_user)


def get_identity_provider() -> KeycloakClient:
    return KeycloakClient()
