"""User repository for database operations.

This module provides the data access layer for users. Errors raised by the
store, such as a duplicate email, are rolled back, logged and re-raised
unchanged so callers see SQLAlchemy's own exception types.
"""

import time

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import async_sessionmaker
from sqlalchemy.orm import selectinload
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from ..logging_config import log_database_operation
from ..models.post import Post
from ..models.user import User, UserCreate


class UserRepository:
    """Repository for user database operations.

    Every call runs in its own session taken from the client's session
    factory, so returned objects are detached snapshots of the rows.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        """Initialize user repository with a session factory.

        Args:
            session_factory: Factory producing async database sessions
        """
        self.session_factory = session_factory

    async def create(self, user_data: UserCreate) -> User:
        """Create a new user together with any nested posts.

        Args:
            user_data: User creation data, optionally carrying posts

        Returns:
            Created user with generated IDs and its posts loaded

        Raises:
            IntegrityError: If a user with the same email already exists
            SQLAlchemyError: If database operation fails
        """
        user = User(
            email=user_data.email,
            name=user_data.name,
            posts=[Post(**post.model_dump()) for post in user_data.posts],
        )
        start_time = time.perf_counter()

        async with self.session_factory() as session:
            try:
                session.add(user)
                await session.commit()
            except SQLAlchemyError as e:
                await session.rollback()
                log_database_operation(
                    "INSERT",
                    User.__tablename__,
                    success=False,
                    duration=time.perf_counter() - start_time,
                    error=str(e.orig) if getattr(e, "orig", None) else str(e),
                    email=user_data.email,
                )
                raise

        log_database_operation(
            "INSERT",
            User.__tablename__,
            duration=time.perf_counter() - start_time,
            user_id=user.id,
            post_count=len(user.posts),
        )
        return user

    async def find_many(self, include_posts: bool = True) -> list[User]:
        """Get all users ordered by ID.

        Args:
            include_posts: Eagerly load each user's posts

        Returns:
            List of users
        """
        statement = select(User).order_by(User.id)
        if include_posts:
            statement = statement.options(selectinload(User.posts))

        start_time = time.perf_counter()
        async with self.session_factory() as session:
            result = await session.exec(statement)
            users = list(result.all())

        log_database_operation(
            "SELECT",
            User.__tablename__,
            duration=time.perf_counter() - start_time,
            row_count=len(users),
        )
        return users

    async def find_unique(self, email: str) -> User | None:
        """Get user by email address, with posts loaded.

        Args:
            email: Email address to search for

        Returns:
            User if found, None otherwise
        """
        statement = (
            select(User).where(User.email == email).options(selectinload(User.posts))
        )
        start_time = time.perf_counter()
        async with self.session_factory() as session:
            result = await session.exec(statement)
            user = result.first()

        log_database_operation(
            "SELECT",
            User.__tablename__,
            duration=time.perf_counter() - start_time,
            found=user is not None,
        )
        return user

    async def count(self) -> int:
        """Get total count of users."""
        start_time = time.perf_counter()
        async with self.session_factory() as session:
            result = await session.exec(select(func.count(User.id)))
            total = result.one()

        log_database_operation(
            "SELECT",
            User.__tablename__,
            duration=time.perf_counter() - start_time,
            row_count=total,
        )
        return total
