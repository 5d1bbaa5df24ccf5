"""Configuration management for the quickstart project.

This module provides centralized configuration using Pydantic settings with
environment variable and ``.env`` support. Two database URLs are carried:
``DATABASE_URL`` for the migration tooling and ``DATABASE_URL_RUNTIME`` for
the application script. Both must name the same SQLite file, even though the
tooling resolves relative paths from the schema directory and the script
resolves them from the project root.
"""

from pathlib import Path
from typing import Annotated

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL, make_url

ASYNC_SQLITE_DRIVER = "sqlite+aiosqlite"


class Settings(BaseSettings):
    """Application settings with environment variable support and validation."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    # Database Configuration
    database_url: Annotated[
        str, Field(description="SQLite URL used by migration tooling, relative to the schema directory")
    ] = "sqlite:///./dev.db"
    database_url_runtime: Annotated[
        str, Field(description="SQLite URL used at runtime, relative to the project root")
    ] = f"{ASYNC_SQLITE_DRIVER}:///./db/dev.db"
    schema_dir: Annotated[
        str, Field(description="Directory holding the database file, relative to the project root")
    ] = "db"

    debug: Annotated[bool, Field(description="Enable debug mode")] = False
    log_level: Annotated[str, Field(description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)")] = "INFO"

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is one of the allowed values."""
        allowed_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed_levels:
            raise ValueError(f"log_level must be one of {allowed_levels}")
        return v.upper()

    @field_validator("database_url", "database_url_runtime")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        """Validate database URL names a SQLite database."""
        if not v.startswith(("sqlite://", f"{ASYNC_SQLITE_DRIVER}://")):
            raise ValueError("database URLs must be SQLite URLs")
        return v

    def schema_path(self, project_root: Path) -> Path:
        """Directory the migration tooling works from."""
        return (Path(project_root) / self.schema_dir).resolve()

    def tooling_database_path(self, project_root: Path) -> Path | None:
        """Resolve ``database_url`` to a file path.

        Relative paths are taken from the schema directory, the working
        directory of the migration tooling.

        Returns:
            Absolute path of the database file, or None for in-memory URLs
        """
        return _resolve_sqlite_path(self.database_url, self.schema_path(project_root))

    def runtime_database_path(self, project_root: Path) -> Path | None:
        """Resolve ``database_url_runtime`` to a file path.

        Relative paths are taken from the project root, the working directory
        of the application script.
        """
        return _resolve_sqlite_path(self.database_url_runtime, Path(project_root).resolve())

    def tooling_url(self, project_root: Path) -> str:
        """Absolute synchronous URL handed to Alembic."""
        url = make_url(self.database_url).set(drivername="sqlite")
        return _with_path(url, self.tooling_database_path(project_root))

    def runtime_url(self, project_root: Path) -> str:
        """Absolute asynchronous URL handed to the driver adapter."""
        url = make_url(self.database_url_runtime).set(drivername=ASYNC_SQLITE_DRIVER)
        return _with_path(url, self.runtime_database_path(project_root))

    def database_paths_match(self, project_root: Path) -> bool:
        """Check that tooling and runtime point at the same physical file."""
        tooling = self.tooling_database_path(project_root)
        runtime = self.runtime_database_path(project_root)
        if tooling is None or runtime is None:
            return False
        return tooling == runtime


class ConfigurationError(Exception):
    """Raised when configuration validation fails."""
    pass


def _resolve_sqlite_path(url: str, base_dir: Path) -> Path | None:
    database = make_url(url).database
    if not database or database == ":memory:":
        return None
    path = Path(database)
    if not path.is_absolute():
        path = base_dir / path
    return path.resolve()


def _with_path(url: URL, path: Path | None) -> str:
    if path is not None:
        url = url.set(database=str(path))
    return url.render_as_string(hide_password=False)


def render_env_file(settings: Settings) -> str:
    """Render the ``.env`` contents written by ``quickstart init``."""
    return (
        "# Used by migration tooling, relative to the schema directory\n"
        f'DATABASE_URL="{settings.database_url}"\n'
        "# Used by the application script, relative to the project root\n"
        f'DATABASE_URL_RUNTIME="{settings.database_url_runtime}"\n'
    )


def get_settings(project_root: Path | None = None) -> Settings:
    """Get application settings with error handling.

    Args:
        project_root: Directory whose ``.env`` file should be read. Defaults
            to the current working directory.

    Returns:
        Settings: Validated application settings

    Raises:
        ConfigurationError: If configuration validation fails
    """
    env_file = Path(project_root or Path.cwd()) / ".env"
    try:
        return Settings(_env_file=env_file)
    except Exception as e:
        raise ConfigurationError(f"Configuration validation failed: {str(e)}") from e
