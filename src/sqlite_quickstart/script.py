"""Example data-access script.

Creates one user with a nested post, then lists every user with their
posts. Run it from the project root after ``quickstart migrate``:

    python -m sqlite_quickstart.script
"""

import asyncio
import json
import sys
from pathlib import Path

from .config import Settings, get_settings
from .database import QuickstartClient, SQLiteAdapter
from .logging_config import get_logger, setup_logging
from .models import PostCreate, User, UserCreate, UserWithPosts

logger = get_logger(__name__)

ALICE = UserCreate(
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


def render_user(user: User) -> str:
    return UserWithPosts.model_validate(user).model_dump_json(indent=2)


def render_users(users: list[User]) -> str:
    payload = [UserWithPosts.model_validate(user).model_dump(mode="json") for user in users]
    return json.dumps(payload, indent=2)


async def main(client: QuickstartClient, payload: UserCreate = ALICE) -> None:
    user = await client.user.create(payload)
    print("Created user:", render_user(user))

    users = await client.user.find_many(include_posts=True)
    print("All users:", render_users(users))


async def run(settings: Settings, project_root: Path) -> int:
    """Run the example against ``DATABASE_URL_RUNTIME``.

    Returns:
        Process exit status: 0 on success, 1 if the client raised
    """
    client = QuickstartClient(
        SQLiteAdapter(settings.runtime_url(project_root), echo=settings.debug)
    )
    try:
        await main(client)
    except Exception:
        logger.exception("Example script failed")
        return 1
    finally:
        await client.disconnect()

    return 0


def cli() -> None:
    project_root = Path.cwd()
    settings = get_settings(project_root)
    setup_logging(settings)
    sys.exit(asyncio.run(run(settings, project_root)))


if __name__ == "__main__":
    cli()
