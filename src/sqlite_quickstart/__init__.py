"""SQLite quickstart: a User/Post schema on SQLModel, migrated with Alembic.

Import the client from here to run queries against a migrated database:

    from sqlite_quickstart import QuickstartClient, SQLiteAdapter
"""

from .database import QuickstartClient, SQLiteAdapter

__version__ = "1.0.0"

__all__ = [
    "QuickstartClient",
    "SQLiteAdapter",
]
