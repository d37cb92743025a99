"""
Async SQLAlchemy store client.

``Database`` owns one engine and its session factory.  It is built once
by the app factory from ``Settings`` and handed to request handlers via
``app.state`` rather than living as a module-level global, so tests can
point the whole app at an in-memory SQLite database.
"""

from __future__ import annotations

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from src.config import Settings


class Base(DeclarativeBase):
    """Shared declarative base for all ORM models."""


def _enable_sqlite_savepoints(engine: AsyncEngine) -> None:
    """Let SQLAlchemy emit BEGIN itself so SAVEPOINT works on pysqlite."""

    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")


class Database:
    def __init__(self, engine: AsyncEngine):
        self.engine = engine
        self.session_factory = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @classmethod
    def from_url(cls, url: str, **engine_kwargs) -> "Database":
        if url.startswith("sqlite"):
            # one shared connection so :memory: survives across sessions
            engine_kwargs.setdefault("poolclass", StaticPool)
            engine_kwargs.setdefault("connect_args", {"check_same_thread": False})
        engine = create_async_engine(url, **engine_kwargs)
        if url.startswith("sqlite"):
            _enable_sqlite_savepoints(engine)
        return cls(engine)

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        kwargs: dict = {"echo": settings.db_echo}
        if not settings.database_url.startswith("sqlite"):
            kwargs.update(
                pool_size=settings.db_pool_size,
                max_overflow=settings.db_max_overflow,
            )
        return cls.from_url(settings.database_url, **kwargs)

    def session(self) -> AsyncSession:
        return self.session_factory()

    async def create_all(self) -> None:
        # importing registers the tables on Base.metadata
        from src.infrastructure import models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def drop_all(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)

    async def dispose(self) -> None:
        await self.engine.dispose()
