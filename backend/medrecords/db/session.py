"""
Store handle — async engine, session factory and the ``get_db`` dependency.

A single :class:`Database` is built by ``create_app`` and kept on
``app.state.database`` for the lifetime of the process.
"""

from __future__ import annotations

import logging
from typing import Any, AsyncIterator

from fastapi import Request
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    pass


def _engine_kwargs(database_url: str, echo: bool) -> dict[str, Any]:
    kwargs: dict[str, Any] = {"echo": echo}
    if make_url(database_url).get_backend_name() != "sqlite":
        kwargs.update(pool_size=20, max_overflow=10)
    return kwargs


class Database:
    """Owns the engine and hands out short-lived sessions."""

    def __init__(self, database_url: str, *, echo: bool = False) -> None:
        self.url = database_url
        self.engine: AsyncEngine = create_async_engine(database_url, **_engine_kwargs(database_url, echo))
        self.async_session = async_sessionmaker(self.engine, class_=AsyncSession, expire_on_commit=False)

    async def create_all(self) -> None:
        # Table classes must be imported so they register with Base.metadata
        import medrecords.models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables ready (%s)", self.engine.url.render_as_string(hide_password=True))

    async def dispose(self) -> None:
        await self.engine.dispose()


async def get_db(request: Request) -> AsyncIterator[AsyncSession]:
    database: Database = request.app.state.database
    async with database.async_session() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
