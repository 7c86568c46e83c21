"""Post model."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import JSON, Boolean, Column, DateTime, Index, String, Text, false
from sqlmodel import Field, SQLModel

from saude_blog.core.constants import utcnow


class Post(SQLModel, table=True):
    """Blog post table."""

    __tablename__ = "post"
    __table_args__ = (
        Index("ix_post_published_published_at", "published", "published_at"),
        Index("ix_post_category_published_at", "category", "published_at"),
        Index("ix_post_created_at", "created_at"),
    )

    id: int | None = Field(default=None, primary_key=True)
    slug: str = Field(sa_column=Column(String(255), unique=True, nullable=False))
    title: str = Field(sa_column=Column(String(200), nullable=False))
    excerpt: str | None = Field(default=None, sa_column=Column(String(500), nullable=True))
    content: str = Field(sa_column=Column(Text, nullable=False))
    published: bool = Field(
        default=False,
        sa_column=Column(Boolean, nullable=False, server_default=false()),
    )
    published_at: datetime | None = Field(
        default=None,
        sa_column=Column(DateTime(timezone=True), nullable=True),
    )
    category: str | None = Field(default=None, sa_column=Column(String(100), nullable=True))
    tags: list[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    reading_time: int = Field(default=1)
    meta_title: str | None = Field(default=None, sa_column=Column(String(200), nullable=True))
    meta_description: str | None = Field(
        default=None,
        sa_column=Column(String(500), nullable=True),
    )
    featured_image: str | None = Field(
        default=None,
        sa_column=Column(String(500), nullable=True),
    )
    created_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )
    updated_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False, onupdate=utcnow),
    )
