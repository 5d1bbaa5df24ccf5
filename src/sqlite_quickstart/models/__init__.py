"""SQLModel data models.

This module exports all database models and schemas. Import models from here
so both tables are registered on ``SQLModel.metadata`` before the mappers
are configured or migrations run.
"""

from .post import Post, PostBase, PostCreate, PostRead
from .user import User, UserBase, UserCreate, UserRead, UserWithPosts

__all__ = [
    # User models
    "User",
    "UserBase",
    "UserCreate",
    "UserRead",
    "UserWithPosts",
    # Post models
    "Post",
    "PostBase",
    "PostCreate",
    "PostRead",
]
