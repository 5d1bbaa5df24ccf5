"""Database client and SQLite driver adapter.

This module binds the SQLModel schema to a SQLite database file through an
aiosqlite-backed async engine and exposes the typed data-access client used
by the example script and the studio.
"""

from typing import Any

from sqlalchemy import event, text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine
from sqlmodel.ext.asyncio.session import AsyncSession

from .config import ASYNC_SQLITE_DRIVER
from .logging_config import get_logger
from .repositories import PostRepository, UserRepository

logger = get_logger(__name__)


def _enable_foreign_keys(dbapi_connection: Any, connection_record: Any) -> None:
    # SQLite ships with foreign key enforcement switched off per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class SQLiteAdapter:
    """Driver adapter running the ORM's queries on aiosqlite.

    Args:
        url: SQLite URL; ``sqlite://`` URLs are switched to the aiosqlite driver
        echo: Log emitted SQL statements
    """

    def __init__(self, url: str, echo: bool = False) -> None:
        parsed = make_url(url)
        if parsed.get_backend_name() != "sqlite":
            raise ValueError(f"SQLiteAdapter requires a SQLite URL, got '{parsed.drivername}'")
        if parsed.drivername != ASYNC_SQLITE_DRIVER:
            parsed = parsed.set(drivername=ASYNC_SQLITE_DRIVER)

        self.url = parsed.render_as_string(hide_password=False)
        self.database = parsed.database
        self.engine: AsyncEngine = create_async_engine(self.url, echo=echo)
        event.listen(self.engine.sync_engine, "connect", _enable_foreign_keys)

    async def dispose(self) -> None:
        """Close all pooled connections."""
        await self.engine.dispose()


class QuickstartClient:
    """Typed data-access client over the User and Post tables.

    The client owns exactly one resource, the adapter's engine. Use it as an
    async context manager, or call ``disconnect`` yourself, so the engine is
    released on both the success and failure paths.

    Example:
        async with QuickstartClient(SQLiteAdapter(url)) as client:
            users = await client.user.find_many()
    """

    def __init__(self, adapter: SQLiteAdapter) -> None:
        self.adapter = adapter
        self.session_factory = async_sessionmaker(
            adapter.engine,
            class_=AsyncSession,
            autoflush=False,
            expire_on_commit=False,
        )
        self.user = UserRepository(self.session_factory)
        self.post = PostRepository(self.session_factory)
        self._connected = False

    async def connect(self) -> None:
        """Open a connection and verify the database answers."""
        async with self.adapter.engine.connect() as connection:
            await connection.execute(text("SELECT 1"))
        self._connected = True
        logger.debug("Client connected", extra={"database": self.adapter.database})

    async def disconnect(self) -> None:
        """Release the engine and its pooled connections."""
        await self.adapter.dispose()
        if self._connected:
            logger.debug("Client disconnected", extra={"database": self.adapter.database})
        self._connected = False

    async def is_healthy(self) -> bool:
        """Return True if the database answers a trivial query."""
        try:
            async with self.adapter.engine.connect() as connection:
                await connection.execute(text("SELECT 1"))
            return True
        except Exception:
            logger.warning("Database health check failed", exc_info=True)
            return False

    async def __aenter__(self) -> "QuickstartClient":
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.disconnect()
