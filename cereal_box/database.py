"""
Database gateway.

Owns the one database connection of the process, bootstraps the visitor
counter table and runs the atomic increment. Failures are logged and turned
into a disconnected state; nothing here is ever retried.
"""

import asyncio
import logging
from typing import Optional

from sqlalchemy import func, insert, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine
from sqlalchemy.pool import NullPool

from cereal_box.exceptions import ConnectionFailure, QueryFailure, SchemaError
from cereal_box.models import SINGLETON_ID, Base, VisitorCounter
from cereal_box.schemas import VisitorSnapshot

logger = logging.getLogger(__name__)

# Bare schemes handed out by hosting platforms -> async driver scheme
ASYNC_SCHEMES = {
    "postgres": "postgresql+asyncpg",
    "postgresql": "postgresql+asyncpg",
    "sqlite": "sqlite+aiosqlite",
}

AUTH_MARKERS = ("password", "authentication", "authorization")


def normalize_database_url(url: str) -> str:
    """Rewrite a bare database URL to use the matching async driver."""
    scheme, sep, rest = url.partition("://")
    if not sep:
        return url
    return f"{ASYNC_SCHEMES.get(scheme, scheme)}://{rest}"


def classify_connect_error(exc: BaseException) -> str:
    """Map a driver error raised while connecting to a ConnectionFailure reason."""
    if isinstance(exc, asyncio.TimeoutError):
        return ConnectionFailure.TIMEOUT
    message = str(getattr(exc, "orig", None) or exc).lower()
    if any(marker in message for marker in AUTH_MARKERS):
        return ConnectionFailure.AUTH
    return ConnectionFailure.UNREACHABLE


class DatabaseGateway:
    """Single-connection access to the visitor counter table."""

    def __init__(
        self,
        database_url: Optional[str],
        connect_timeout: float = 5.0,
        echo: bool = False,
    ):
        self.database_url = normalize_database_url(database_url) if database_url else None
        self.connect_timeout = connect_timeout
        self.echo = echo

        self._engine: Optional[AsyncEngine] = None
        self._conn: Optional[AsyncConnection] = None
        self._connected = False
        # An async driver connection runs one statement at a time
        self._lock = asyncio.Lock()

    @property
    def configured(self) -> bool:
        return self.database_url is not None

    @property
    def connected(self) -> bool:
        return self._connected

    async def connect(self, fail_open: bool = True) -> bool:
        """
        Open the connection and bootstrap the schema within connect_timeout.

        Returns whether the gateway ended up connected. A failure is logged and
        absorbed unless fail_open is False, in which case the ConnectionFailure
        propagates.
        """
        if not self.configured:
            logger.info("DATABASE_URL not set, running without persistence")
            return False

        try:
            await asyncio.wait_for(self._open_and_bootstrap(), timeout=self.connect_timeout)
        except asyncio.TimeoutError as exc:
            failure = ConnectionFailure(
                ConnectionFailure.TIMEOUT,
                f"no connection within {self.connect_timeout}s",
            )
            await self._abandon(failure)
            if not fail_open:
                raise failure from exc
            return False
        except ConnectionFailure as failure:
            await self._abandon(failure)
            if not fail_open:
                raise
            return False

        self._connected = True
        logger.info("Database connected")
        return True

    async def bootstrap(self) -> None:
        """Create the counter table if missing and seed the singleton row once."""
        async with self._lock:
            if self._conn is None:
                raise SchemaError("no open connection")
            try:
                await self._conn.run_sync(Base.metadata.create_all)
                rows = await self._conn.scalar(
                    select(func.count()).select_from(VisitorCounter)
                )
                if rows == 0:
                    await self._conn.execute(
                        insert(VisitorCounter).values(id=SINGLETON_ID, count=0)
                    )
                    logger.info("Visitor counter row created")
                await self._conn.commit()
            except SQLAlchemyError as e:
                raise SchemaError(str(e)) from e

    async def increment_and_fetch(self) -> Optional[VisitorSnapshot]:
        """
        Atomically bump the counter and return the new values.

        Returns None when disconnected or when the query fails.
        """
        if not self._connected:
            return None
        try:
            return await self._increment()
        except QueryFailure as e:
            logger.error(f"Visitor counter increment failed: {e}")
            return None
        except Exception as e:
            logger.error(f"Unexpected error incrementing visitor counter: {e}", exc_info=True)
            return None

    async def close(self) -> None:
        """Close the connection handle if open."""
        async with self._lock:
            self._connected = False
            await self._release()

    async def _open_and_bootstrap(self) -> None:
        try:
            self._engine = create_async_engine(
                self.database_url,
                echo=self.echo,
                poolclass=NullPool,
            )
            self._conn = await self._engine.connect()
        except Exception as e:
            raise ConnectionFailure(classify_connect_error(e), str(e)) from e
        await self.bootstrap()

    async def _increment(self) -> VisitorSnapshot:
        stmt = (
            update(VisitorCounter)
            .where(VisitorCounter.id == SINGLETON_ID)
            .values(count=VisitorCounter.count + 1, last_visit=func.now())
            .returning(VisitorCounter.count, VisitorCounter.last_visit)
        )

        async with self._lock:
            if self._conn is None:
                raise QueryFailure("connection closed")
            try:
                row = (await self._conn.execute(stmt)).first()
                await self._conn.commit()
            except SQLAlchemyError as e:
                if getattr(e, "connection_invalidated", False):
                    # No reconnection: persistence stays off for this process
                    self._connected = False
                    logger.warning("Database connection lost, persistence disabled")
                try:
                    await self._conn.rollback()
                except SQLAlchemyError as rollback_error:
                    logger.warning(f"Rollback failed: {rollback_error}")
                raise QueryFailure(str(e)) from e

        if row is None:
            raise QueryFailure("visitor counter row is missing")
        count, last_visit = row
        return VisitorSnapshot(count=count, last_visit=last_visit)

    async def _abandon(self, failure: ConnectionFailure) -> None:
        logger.error(f"Database connection failed ({failure.reason}): {failure.detail}")
        await self._release()

    async def _release(self) -> None:
        if self._conn is not None:
            try:
                await self._conn.close()
            except SQLAlchemyError as e:
                logger.warning(f"Error closing database connection: {e}")
            self._conn = None
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
