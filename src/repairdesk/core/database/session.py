"""Async database pool with an explicit lifecycle.

The pool is created once by the application lifespan (or by the worker
and CLI entry points), handed to request handlers through dependency
injection, and disposed on shutdown. Nothing here runs at import time.
"""

import asyncio
from collections.abc import AsyncGenerator, Awaitable, Callable
from contextlib import asynccontextmanager
from typing import Any, TypeVar

import structlog
from fastapi import Request
from sqlalchemy import text
from sqlalchemy.engine import Dialect
from sqlalchemy.ext.asyncio import (
    AsyncConnection,
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from repairdesk.config import Settings
from repairdesk.core.database.errors import error_code, error_message, is_transient_error
from repairdesk.core.errors import TransientConnectionError


logger = structlog.get_logger()

T = TypeVar("T")


class Database:
    """Process-wide connection pool plus retry policy.

    Usage:
        db = Database.from_settings(settings)
        rows = await db.run(lambda conn: conn.execute(stmt), operation="list")
        await db.dispose()
    """

    def __init__(
        self,
        url: str,
        *,
        retry_attempts: int = 2,
        retry_base_delay: float = 1.0,
        query_timeout: float | None = 30.0,
        **engine_kwargs: Any,
    ) -> None:
        self.engine: AsyncEngine = create_async_engine(url, **engine_kwargs)
        self.session_factory = async_sessionmaker(
            bind=self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )
        self.retry_attempts = retry_attempts
        self.retry_base_delay = retry_base_delay
        self.query_timeout = query_timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        """Build the production MySQL pool from settings."""
        return cls(
            settings.async_database_url,
            retry_attempts=settings.database_retry_attempts,
            retry_base_delay=settings.database_retry_base_delay,
            query_timeout=settings.database_query_timeout,
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
            pool_timeout=settings.database_pool_timeout,
            pool_recycle=settings.database_pool_recycle,
            pool_pre_ping=True,
            echo=settings.database_echo,
            connect_args={"connect_timeout": settings.database_connect_timeout},
        )

    @property
    def dialect(self) -> Dialect:
        return self.engine.dialect

    async def run(
        self,
        work: Callable[[AsyncConnection], Awaitable[T]],
        *,
        operation: str = "query",
    ) -> T:
        """Run ``work`` inside a transaction, retrying transient failures.

        The whole unit of work is retried, never a single statement, so a
        retry always starts from a rolled-back transaction.

        Raises:
            TransientConnectionError: If every attempt failed transiently
        """
        attempt = 0
        while True:
            try:
                async with asyncio.timeout(self.query_timeout):
                    async with self.engine.begin() as conn:
                        return await work(conn)
            except Exception as exc:
                if not is_transient_error(exc):
                    raise
                if attempt >= self.retry_attempts:
                    logger.error(
                        "database_retries_exhausted",
                        operation=operation,
                        attempts=attempt + 1,
                        code=error_code(exc),
                        error=error_message(exc),
                    )
                    raise TransientConnectionError(
                        details={"operation": operation}
                    ) from exc

                delay = self.retry_base_delay * 2**attempt
                logger.warning(
                    "database_retry",
                    operation=operation,
                    attempt=attempt + 1,
                    max_attempts=self.retry_attempts + 1,
                    delay_seconds=delay,
                    code=error_code(exc),
                    error=error_message(exc),
                )
                await asyncio.sleep(delay)
                attempt += 1

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Provide an ORM session that commits on success."""
        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def ping(self) -> None:
        """Round trip a trivial query; raises on failure."""
        await self.run(lambda conn: conn.execute(text("SELECT 1")), operation="ping")

    async def dispose(self) -> None:
        await self.engine.dispose()


def get_database(request: Request) -> Database:
    """Dependency returning the pool owned by the running application."""
    return request.app.state.database


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Dependency that provides an ORM session for global tables.

    Usage:
        @router.get("/items")
        async def list_items(db: AsyncSession = Depends(get_db)):
            ...
    """
    async with get_database(request).session() as session:
        yield session
