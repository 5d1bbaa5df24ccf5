"""Tests for the quickstart command line."""

from pathlib import Path
from unittest.mock import patch

from typer.testing import CliRunner

from sqlite_quickstart.cli import app

runner = CliRunner()


def invoke(project_root: Path, *args: str):
    return runner.invoke(app, ["--project-root", str(project_root), *args])


class TestInit:
    """Test cases for the init command."""

    def test_init_creates_schema_dir_and_env(self, project_root: Path):
        result = invoke(project_root, "init")

        assert result.exit_code == 0, result.output
        assert (project_root / "db").is_dir()
        env_text = (project_root / ".env").read_text(encoding="utf-8")
        assert 'DATABASE_URL="sqlite:///./dev.db"' in env_text
        assert 'DATABASE_URL_RUNTIME="sqlite+aiosqlite:///./db/dev.db"' in env_text

    def test_init_refuses_to_overwrite(self, project_root: Path):
        (project_root / ".env").write_text("# keep me\n")

        result = invoke(project_root, "init")

        assert result.exit_code == 1
        assert "already exists" in result.output
        assert (project_root / ".env").read_text() == "# keep me\n"

    def test_init_force_overwrites(self, project_root: Path):
        (project_root / ".env").write_text("# replace me\n")

        result = invoke(project_root, "init", "--force")

        assert result.exit_code == 0, result.output
        assert "DATABASE_URL_RUNTIME" in (project_root / ".env").read_text()


class TestMigrationCommands:
    """Test cases for migrate, current and downgrade."""

    def test_migrate_then_current(self, project_root: Path):
        assert invoke(project_root, "init").exit_code == 0

        migrate_result = invoke(project_root, "migrate")
        current_result = invoke(project_root, "current")

        assert migrate_result.exit_code == 0, migrate_result.output
        assert (project_root / "db" / "dev.db").exists()
        assert current_result.exit_code == 0
        assert "0001" in current_result.stdout

    def test_downgrade(self, project_root: Path):
        invoke(project_root, "migrate")

        result = invoke(project_root, "downgrade")

        assert result.exit_code == 0, result.output
        assert "<none>" in invoke(project_root, "current").stdout

    def test_migrate_warns_on_path_mismatch(self, project_root: Path):
        (project_root / ".env").write_text(
            'DATABASE_URL="sqlite:///./dev.db"\nDATABASE_URL_RUNTIME="sqlite+aiosqlite:///./dev.db"\n'
        )

        result = invoke(project_root, "migrate")

        assert result.exit_code == 0, result.output
        assert "resolve to different files" in result.output

    def test_invalid_configuration_exits(self, project_root: Path):
        (project_root / ".env").write_text('DATABASE_URL="postgresql://localhost/db"\n')

        result = invoke(project_root, "migrate")

        assert result.exit_code == 1
        assert "Configuration validation failed" in result.output


class TestGenerate:
    """Test cases for the generate command."""

    def test_generate_default_output(self, project_root: Path):
        result = invoke(project_root, "generate")

        assert result.exit_code == 0, result.output
        assert "CREATE TABLE users" in (project_root / "db" / "schema.sql").read_text()

    def test_generate_custom_output(self, project_root: Path, tmp_path: Path):
        target = tmp_path / "out" / "ddl.sql"

        result = invoke(project_root, "generate", "--output", str(target))

        assert result.exit_code == 0, result.output
        assert target.exists()


class TestScriptCommand:
    """Test cases for the script command."""

    def test_script_exit_codes(self, project_root: Path):
        invoke(project_root, "init")
        invoke(project_root, "migrate")

        first = invoke(project_root, "script")
        second = invoke(project_root, "script")

        assert first.exit_code == 0, first.output
        assert "alice@prisma.io" in first.stdout
        assert second.exit_code == 1


class TestStudioCommand:
    """Test cases for the studio command."""

    def test_studio_starts_uvicorn(self, project_root: Path):
        with patch("uvicorn.run") as mock_run:
            result = invoke(project_root, "studio", "--port", "5600")

        assert result.exit_code == 0, result.output
        mock_run.assert_called_once()
        assert mock_run.call_args.kwargs["port"] == 5600
        assert mock_run.call_args.kwargs["host"] == "127.0.0.1"
