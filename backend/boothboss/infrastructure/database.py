"""Database Session Manager — async engine, request sessions and the readiness ping.

Invariants:
    - A session that fails inside SQLAlchemy is rolled back before the error leaves
    - Unique-constraint violations (email, username, event URL path) that slip past
      the service-level checks under concurrency surface as ConflictError (409)
    - Every other SQLAlchemy failure becomes DatabaseError (503)
    - BoothBossError raised while a session is open passes through untouched

Design Decisions:
    - Module-level db_manager set by the FastAPI lifespan; seed.py builds its own
    - expire_on_commit=False: route handlers serialize ORM rows after commit
    - SQLite URLs skip pool sizing (tests and single-file dev databases)
"""

import logging
import time
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.exc import DBAPIError, IntegrityError, OperationalError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from boothboss.core.errors import ConflictError, DatabaseError

logger = logging.getLogger(__name__)

_UNIQUE_MARKERS = ("unique", "duplicate key")


def _translate(exc: SQLAlchemyError) -> Exception:
    if isinstance(exc, IntegrityError):
        detail = str(exc.orig).lower()
        if any(marker in detail for marker in _UNIQUE_MARKERS):
            return ConflictError("This value is already in use")
        return DatabaseError("Integrity constraint violated", "commit")
    if isinstance(exc, OperationalError):
        return DatabaseError("Connection or operational error", "execute")
    if isinstance(exc, DBAPIError):
        return DatabaseError("Database driver error", "query")
    return DatabaseError("Database operation failed", "unknown")


class DatabaseSessionManager:
    """Owns the engine for the BoothBoss schema and hands out sessions."""

    def __init__(
        self, database_url: str, pool_size: int = 20, max_overflow: int = 10,
    ):
        engine_kwargs: dict = {"pool_pre_ping": True}
        if not database_url.startswith("sqlite"):
            engine_kwargs.update(
                pool_size=pool_size, max_overflow=max_overflow, pool_recycle=3600,
            )
        self.engine = create_async_engine(database_url, **engine_kwargs)
        self._session_factory = async_sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        session = self._session_factory()
        try:
            yield session
        except SQLAlchemyError as e:
            await session.rollback()
            translated = _translate(e)
            logger.error(f"{type(e).__name__} rolled back: {translated}")
            raise translated from e
        finally:
            await session.close()

    async def ping(self) -> float | None:
        """Round-trip time of SELECT 1 in milliseconds, or None when unreachable."""
        started = time.perf_counter()
        try:
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
        except Exception as e:
            logger.error(f"Database ping failed: {e}")
            return None
        return round((time.perf_counter() - started) * 1000, 2)

    async def dispose(self) -> None:
        await self.engine.dispose()


db_manager: DatabaseSessionManager | None = None


def init_db(database_url: str, **kwargs) -> DatabaseSessionManager:
    global db_manager
    db_manager = DatabaseSessionManager(database_url, **kwargs)
    return db_manager


async def close_db() -> None:
    global db_manager
    if db_manager:
        await db_manager.dispose()
        db_manager = None


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: one session per request."""
    if not db_manager:
        raise RuntimeError("Database not initialized")
    async with db_manager.session() as session:
        yield session
