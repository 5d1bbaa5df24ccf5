"""Test configuration and fixtures.

Every test gets its own temporary project root. Fixtures that need a
database migrate a fresh SQLite file there with Alembic, the same way
``quickstart migrate`` does.
"""

import logging
from pathlib import Path
from typing import AsyncGenerator, Generator

import pytest
import pytest_asyncio
from sqlmodel import Session, create_engine

from sqlite_quickstart import migrate
from sqlite_quickstart.config import Settings
from sqlite_quickstart.database import QuickstartClient, SQLiteAdapter
from sqlite_quickstart.models import Post, PostCreate, User, UserCreate

CONFIGURED_LOGGERS = (
    "sqlite_quickstart",
    "alembic",
    "uvicorn",
    "uvicorn.access",
    "sqlalchemy.engine",
    "aiosqlite",
)


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep settings from the developer's shell out of the tests."""
    for var in ("DATABASE_URL", "DATABASE_URL_RUNTIME", "SCHEMA_DIR", "DEBUG", "LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture(autouse=True)
def reset_logging() -> Generator[None, None, None]:
    """Undo ``setup_logging`` so later tests see default propagation."""
    yield
    for name in CONFIGURED_LOGGERS + ("",):
        logger = logging.getLogger(name or None)
        for handler in list(logger.handlers):
            if handler.get_name() == "console":
                logger.removeHandler(handler)
        if name:
            logger.propagate = True
            logger.setLevel(logging.NOTSET)


@pytest.fixture(scope="function")
def project_root(tmp_path: Path) -> Path:
    """Empty project directory standing in for the quickstart checkout."""
    root = tmp_path / "project"
    root.mkdir()
    return root


@pytest.fixture(scope="function")
def test_settings() -> Settings:
    """Default settings, ignoring any .env file."""
    return Settings(_env_file=None)


@pytest.fixture(scope="function")
def migrated_database(test_settings: Settings, project_root: Path) -> Path:
    """Apply all migrations and return the database file path."""
    migrate.upgrade(test_settings, project_root)
    return test_settings.tooling_database_path(project_root)


@pytest_asyncio.fixture(scope="function")
async def client(
    test_settings: Settings, project_root: Path, migrated_database: Path
) -> AsyncGenerator[QuickstartClient, None]:
    """Connected client bound to the runtime URL of the migrated database."""
    quickstart_client = QuickstartClient(SQLiteAdapter(test_settings.runtime_url(project_root)))
    await quickstart_client.connect()
    yield quickstart_client
    await quickstart_client.disconnect()


@pytest.fixture(scope="function")
def sync_session(
    test_settings: Settings, project_root: Path, migrated_database: Path
) -> Generator[Session, None, None]:
    """Synchronous session on the tooling URL, for seeding and inspection."""
    engine = create_engine(test_settings.tooling_url(project_root))
    with Session(engine) as session:
        yield session
    engine.dispose()


@pytest.fixture(scope="function")
def alice_data() -> UserCreate:
    """The payload the example script writes."""
    return UserCreate(
        email="alice@prisma.io",
        name="Alice",
        posts=[
            PostCreate(
                title="Hello World",
                content="This is my first post!",
                published=True,
            )
        ],
    )


@pytest.fixture(scope="function")
def seeded_user(sync_session: Session) -> User:
    """Alice with one published post and one draft, written synchronously."""
    user = User(
        email="alice@prisma.io",
        name="Alice",
        posts=[
            Post(title="Hello World", content="This is my first post!", published=True),
            Post(title="Draft", published=False),
        ],
    )
    sync_session.add(user)
    sync_session.commit()
    sync_session.refresh(user)
    return user
