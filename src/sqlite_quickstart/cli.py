import asyncio
from pathlib import Path
from typing import Annotated

import typer

from . import migrate as migrations
from .config import ConfigurationError, Settings, get_settings, render_env_file
from .logging_config import setup_logging

PROG_NAME = "quickstart"

app = typer.Typer(
    name=PROG_NAME,
    help="Bootstrap, migrate and explore the SQLite quickstart database",
    no_args_is_help=True,
    pretty_exceptions_enable=False,
)


def success(msg: str):
    typer.secho(msg, fg=typer.colors.GREEN)


def error(msg: str):
    typer.secho(f"Error: {msg}", err=True, fg=typer.colors.RED)


def _settings(ctx: typer.Context) -> Settings:
    return ctx.obj["settings"]


def _root(ctx: typer.Context) -> Path:
    return ctx.obj["project_root"]


@app.callback()
def main(
    ctx: typer.Context,
    project_root: Annotated[
        Path,
        typer.Option(
            "--project-root",
            "-p",
            help="Project directory holding .env and the schema directory",
            file_okay=False,
            resolve_path=True,
            default_factory=Path.cwd,
        ),
    ],
):
    """Quickstart tooling for the User/Post SQLite database."""
    try:
        settings = get_settings(project_root)
    except ConfigurationError as e:
        error(str(e))
        raise typer.Exit(code=1)
    setup_logging(settings)
    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings
    ctx.obj["project_root"] = project_root


@app.command()
def init(
    ctx: typer.Context,
    force: Annotated[
        bool, typer.Option("--force", "-f", help="Overwrite an existing .env file")
    ] = False,
):
    """Create the schema directory and a .env file with both database URLs."""
    settings, root = _settings(ctx), _root(ctx)
    root.mkdir(parents=True, exist_ok=True)
    settings.schema_path(root).mkdir(parents=True, exist_ok=True)

    env_file = root / ".env"
    if env_file.exists() and not force:
        error(f"{env_file} already exists, use --force to overwrite it")
        raise typer.Exit(code=1)

    env_file.write_text(render_env_file(Settings(_env_file=None)), encoding="utf-8")
    success(f"Initialized project in {root}")


@app.command()
def migrate(
    ctx: typer.Context,
    revision: Annotated[str, typer.Option("--revision", "-r", help="Target revision")] = "head",
):
    """Apply migrations to the database named by DATABASE_URL."""
    settings, root = _settings(ctx), _root(ctx)
    if not settings.database_paths_match(root):
        typer.secho(
            "Warning: DATABASE_URL and DATABASE_URL_RUNTIME resolve to different files",
            err=True,
            fg=typer.colors.YELLOW,
        )
    migrations.upgrade(settings, root, revision)
    success(f"Database at {settings.tooling_database_path(root)} is at revision {revision}")


@app.command()
def downgrade(
    ctx: typer.Context,
    revision: Annotated[str, typer.Option("--revision", "-r", help="Target revision")] = "base",
):
    """Revert migrations on the database named by DATABASE_URL."""
    settings, root = _settings(ctx), _root(ctx)
    migrations.downgrade(settings, root, revision)
    success(f"Database reverted to revision {revision}")


@app.command()
def current(ctx: typer.Context):
    """Show the revision currently applied to the database."""
    revision = migrations.current_revision(_settings(ctx), _root(ctx))
    typer.echo(revision or "<none>")


@app.command()
def generate(
    ctx: typer.Context,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Where to write the DDL (default: <schema dir>/schema.sql)"),
    ] = None,
):
    """Render the declared models as SQLite DDL."""
    settings, root = _settings(ctx), _root(ctx)
    target = output or settings.schema_path(root) / "schema.sql"
    path = migrations.write_schema(target)
    success(f"Schema written to {path}")


@app.command()
def studio(
    ctx: typer.Context,
    host: Annotated[str, typer.Option(help="Interface to bind")] = "127.0.0.1",
    port: Annotated[int, typer.Option(help="Port to listen on")] = 5555,
):
    """Serve a read-only browser over the runtime database."""
    import uvicorn

    from .studio import create_app

    settings, root = _settings(ctx), _root(ctx)
    uvicorn.run(create_app(settings, root), host=host, port=port, log_config=None)


@app.command()
def script(ctx: typer.Context):
    """Run the example: create Alice with a post, then list all users."""
    from .script import run

    exit_code = asyncio.run(run(_settings(ctx), _root(ctx)))
    raise typer.Exit(code=exit_code)


if __name__ == "__main__":
    app()
