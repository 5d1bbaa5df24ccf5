"""Tests for settings and database path resolution."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from sqlite_quickstart.config import ConfigurationError, Settings, get_settings, render_env_file


class TestDatabasePaths:
    """The tooling and runtime URLs must land on the same file."""

    def test_default_urls_resolve_to_same_file(self, project_root: Path):
        settings = Settings(_env_file=None)

        tooling = settings.tooling_database_path(project_root)
        runtime = settings.runtime_database_path(project_root)

        assert tooling == (project_root / "db" / "dev.db").resolve()
        assert runtime == tooling
        assert settings.database_paths_match(project_root) is True

    def test_mismatched_urls_detected(self, project_root: Path):
        # Relative to the project root this names project/dev.db, not project/db/dev.db
        settings = Settings(_env_file=None, database_url_runtime="sqlite+aiosqlite:///./dev.db")

        assert settings.database_paths_match(project_root) is False

    def test_custom_schema_dir(self, project_root: Path):
        settings = Settings(
            _env_file=None,
            schema_dir="schema",
            database_url_runtime="sqlite+aiosqlite:///./schema/dev.db",
        )

        assert settings.tooling_database_path(project_root) == (project_root / "schema" / "dev.db").resolve()
        assert settings.database_paths_match(project_root) is True

    def test_absolute_paths(self, tmp_path: Path, project_root: Path):
        database = tmp_path / "shared.db"
        settings = Settings(
            _env_file=None,
            database_url=f"sqlite:///{database}",
            database_url_runtime=f"sqlite+aiosqlite:///{database}",
        )

        assert settings.tooling_database_path(project_root) == database.resolve()
        assert settings.database_paths_match(project_root) is True

    def test_in_memory_url_never_matches(self, project_root: Path):
        settings = Settings(_env_file=None, database_url="sqlite:///:memory:")

        assert settings.tooling_database_path(project_root) is None
        assert settings.database_paths_match(project_root) is False

    def test_rendered_urls_are_absolute(self, project_root: Path):
        settings = Settings(_env_file=None)
        expected = (project_root / "db" / "dev.db").resolve()

        assert settings.tooling_url(project_root) == f"sqlite:///{expected}"
        assert settings.runtime_url(project_root) == f"sqlite+aiosqlite:///{expected}"


class TestSettingsValidation:
    """Test cases for settings validators."""

    def test_rejects_non_sqlite_url(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, database_url="postgresql://localhost/db")

    def test_log_level_normalized(self):
        assert Settings(_env_file=None, log_level="debug").log_level == "DEBUG"

    def test_rejects_unknown_log_level(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, log_level="verbose")

    def test_reads_environment(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("DATABASE_URL_RUNTIME", "sqlite+aiosqlite:///./other.db")

        assert Settings(_env_file=None).database_url_runtime == "sqlite+aiosqlite:///./other.db"


class TestGetSettings:
    """Test cases for get_settings."""

    def test_reads_env_file_from_project_root(self, project_root: Path):
        (project_root / ".env").write_text(
            'DATABASE_URL="sqlite:///./app.db"\nDATABASE_URL_RUNTIME="sqlite+aiosqlite:///./db/app.db"\n'
        )

        settings = get_settings(project_root)

        assert settings.database_url == "sqlite:///./app.db"
        assert settings.database_paths_match(project_root) is True

    def test_invalid_env_file(self, project_root: Path):
        (project_root / ".env").write_text('DATABASE_URL="mysql://localhost/db"\n')

        with pytest.raises(ConfigurationError, match="Configuration validation failed"):
            get_settings(project_root)

    def test_render_env_file_round_trips(self, project_root: Path):
        (project_root / ".env").write_text(render_env_file(Settings(_env_file=None)))

        settings = get_settings(project_root)

        assert settings.database_url == "sqlite:///./dev.db"
        assert settings.database_url_runtime == "sqlite+aiosqlite:///./db/dev.db"
