"""Post repository for database operations.

This module provides the PostRepository class that handles database
operations for posts. Foreign key violations surface as SQLAlchemy's
``IntegrityError``.
"""

import time

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import async_sessionmaker
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from ..logging_config import log_database_operation
from ..models.post import Post, PostCreate


class PostRepository:
    """Repository for post database operations."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self.session_factory = session_factory

    async def create(self, post_data: PostCreate, author_id: int) -> Post:
        """Create a new post for the specified author.

        Args:
            post_data: Post creation data
            author_id: ID of the user who writes the post

        Returns:
            Post: The created post

        Raises:
            IntegrityError: If author_id doesn't exist

        Example:
            post = await client.post.create(PostCreate(title="Draft"), author_id=1)
        """
        db_post = Post(
            title=post_data.title,
            content=post_data.content,
            published=post_data.published,
            author_id=author_id,
        )
        start_time = time.perf_counter()

        async with self.session_factory() as session:
            try:
                session.add(db_post)
                await session.commit()
            except SQLAlchemyError as e:
                await session.rollback()
                log_database_operation(
                    "INSERT",
                    Post.__tablename__,
                    success=False,
                    duration=time.perf_counter() - start_time,
                    error=str(e.orig) if getattr(e, "orig", None) else str(e),
                    author_id=author_id,
                )
                raise

        log_database_operation(
            "INSERT",
            Post.__tablename__,
            duration=time.perf_counter() - start_time,
            post_id=db_post.id,
        )
        return db_post

    async def find_many(self, published: bool | None = None) -> list[Post]:
        """Get posts ordered by ID.

        Args:
            published: Only return posts with this publication status

        Returns:
            List of posts
        """
        statement = select(Post).order_by(Post.id)
        if published is not None:
            statement = statement.where(Post.published == published)

        start_time = time.perf_counter()
        async with self.session_factory() as session:
            result = await session.exec(statement)
            posts = list(result.all())

        log_database_operation(
            "SELECT",
            Post.__tablename__,
            duration=time.perf_counter() - start_time,
            row_count=len(posts),
        )
        return posts

    async def count(self) -> int:
        """Get total count of posts."""
        start_time = time.perf_counter()
        async with self.session_factory() as session:
            result = await session.exec(select(func.count(Post.id)))
            total = result.one()

        log_database_operation(
            "SELECT",
            Post.__tablename__,
            duration=time.perf_counter() - start_time,
            row_count=total,
        )
        return total
