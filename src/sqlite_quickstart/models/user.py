"""User model.

This module defines the User SQLModel and the schemas used to create a user
(optionally with nested posts) and to read users back with their posts.
"""

from typing import TYPE_CHECKING

from sqlmodel import Field, Relationship, SQLModel

from .post import PostCreate, PostRead

if TYPE_CHECKING:
    from .post import Post


class UserBase(SQLModel):
    """Base user model with common fields."""

    email: str = Field(
        max_length=255,
        description="User's email address (unique)",
    )
    name: str | None = Field(
        default=None,
        max_length=255,
        description="Optional display name",
    )


class User(UserBase, table=True):
    """User model for database storage.

    Attributes:
        id: Primary key (auto-generated)
        email: Unique email address, enforced by the store
        name: Optional display name
        posts: Posts written by this user
    """

    __tablename__ = "users"

    id: int | None = Field(
        default=None,
        primary_key=True,
        description="Primary key (auto-generated)"
    )

    # Override email to add unique constraint
    email: str = Field(
        max_length=255,
        unique=True,
        description="User's email address (unique)",
    )

    posts: list["Post"] = Relationship(
        back_populates="author", sa_relationship_kwargs={"order_by": "Post.id"}
    )


class UserCreate(UserBase):
    """Schema for creating a new user.

    Posts listed here are inserted in the same transaction as the user.
    """

    posts: list[PostCreate] = Field(
        default_factory=list,
        description="Posts to create together with the user",
    )


class UserRead(UserBase):
    """Schema for reading a user back with its generated identity."""

    id: int = Field(description="User ID")


class UserWithPosts(UserRead):
    """Schema for a user together with all of their posts."""

    posts: list[PostRead] = Field(default_factory=list, description="User's posts")
