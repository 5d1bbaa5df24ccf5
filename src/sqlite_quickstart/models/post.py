"""Post model with author relationship.

This module defines the Post SQLModel for storing posts owned by a user,
along with the schemas used to create and read posts.
"""

from typing import TYPE_CHECKING, Optional

from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from .user import User


class PostBase(SQLModel):
    """Base post model with common fields."""

    title: str = Field(
        max_length=255,
        min_length=1,
        description="Post title (required)",
    )
    content: str | None = Field(
        default=None,
        description="Post content (optional)",
    )
    published: bool = Field(
        default=False,
        description="Whether the post is published",
    )


class Post(PostBase, table=True):
    """Post model for database storage.

    Each post belongs to exactly one user. The foreign key is enforced by
    SQLite once the driver adapter enables ``PRAGMA foreign_keys``.

    Attributes:
        id: Primary key (auto-generated)
        title: Post title
        content: Optional post content
        published: Publication status (default: false)
        author_id: Foreign key to the owning user
        author: Relationship to the User model
    """

    __tablename__ = "posts"

    id: int | None = Field(
        default=None, primary_key=True, description="Primary key (auto-generated)"
    )

    author_id: int = Field(
        foreign_key="users.id",
        index=True,
        description="ID of the user who wrote this post",
    )

    author: Optional["User"] = Relationship(back_populates="posts")


class PostCreate(PostBase):
    """Schema for creating a post, on its own or nested under a user."""

    pass


class PostRead(PostBase):
    """Schema for reading a post back with its generated identity."""

    id: int = Field(description="Post ID")
    author_id: int = Field(description="ID of the user who wrote this post")
