"""Data access layer.

This module provides data access repositories used by the client.
"""

from .post_repository import PostRepository
from .user_repository import UserRepository

__all__ = [
    "UserRepository",
    "PostRepository",
]
