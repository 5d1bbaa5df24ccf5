"""Schema migrations and DDL rendering.

This module drives Alembic against the database file named by
``DATABASE_URL`` and renders the declared models as SQLite DDL for the
``generate`` command.
"""

from pathlib import Path

from alembic import command
from alembic.config import Config
from alembic.runtime.migration import MigrationContext
from sqlalchemy import create_engine, pool
from sqlalchemy.dialects import sqlite
from sqlalchemy.schema import CreateIndex, CreateTable
from sqlmodel import SQLModel

from . import models  # noqa: F401
from .config import Settings
from .logging_config import get_logger

logger = get_logger(__name__)

MIGRATIONS_DIR = Path(__file__).resolve().parent / "migrations"


def alembic_config(settings: Settings, project_root: Path) -> Config:
    """Build an Alembic configuration without an ini file.

    Args:
        settings: Application settings
        project_root: Project root the tooling URL is resolved from

    Returns:
        Config: Alembic configuration targeting the packaged migration scripts
    """
    config = Config()
    config.set_main_option("script_location", str(MIGRATIONS_DIR))
    # ConfigParser interpolation treats '%' specially
    config.set_main_option(
        "sqlalchemy.url", settings.tooling_url(project_root).replace("%", "%%")
    )
    return config


def _ensure_database_dir(settings: Settings, project_root: Path) -> Path | None:
    path = settings.tooling_database_path(project_root)
    if path is not None:
        path.parent.mkdir(parents=True, exist_ok=True)
    return path


def upgrade(settings: Settings, project_root: Path, revision: str = "head") -> None:
    """Apply migrations up to ``revision``."""
    path = _ensure_database_dir(settings, project_root)
    logger.info("Applying migrations", extra={"revision": revision, "database": str(path)})
    command.upgrade(alembic_config(settings, project_root), revision)


def downgrade(settings: Settings, project_root: Path, revision: str = "base") -> None:
    """Revert migrations down to ``revision``."""
    path = settings.tooling_database_path(project_root)
    logger.info("Reverting migrations", extra={"revision": revision, "database": str(path)})
    command.downgrade(alembic_config(settings, project_root), revision)


def current_revision(settings: Settings, project_root: Path) -> str | None:
    """Return the revision currently stamped on the database, if any."""
    engine = create_engine(settings.tooling_url(project_root), poolclass=pool.NullPool)
    try:
        with engine.connect() as connection:
            return MigrationContext.configure(connection).get_current_revision()
    finally:
        engine.dispose()


def render_schema_ddl() -> str:
    """Render the declared models as SQLite ``CREATE`` statements."""
    dialect = sqlite.dialect()
    statements = []
    for table in SQLModel.metadata.sorted_tables:
        statements.append(str(CreateTable(table).compile(dialect=dialect)).strip() + ";")
        for index in sorted(table.indexes, key=lambda ix: ix.name or ""):
            statements.append(str(CreateIndex(index).compile(dialect=dialect)).strip() + ";")
    return "\n\n".join(statements) + "\n"


def write_schema(output: Path) -> Path:
    """Write the rendered DDL to ``output`` and return its path."""
    output = Path(output)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(render_schema_ddl(), encoding="utf-8")
    logger.info("Schema written", extra={"path": str(output)})
    return output
