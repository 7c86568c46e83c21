"""Post payload and response schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Self

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

_REQUIRED_PATCH_FIELDS = ("title", "content", "published")


def _strip_optional_text(value: object) -> object:
    if not isinstance(value, str):
        return value
    normalized = value.strip()
    return normalized or None


def _normalize_tags(value: object) -> object:
    if not isinstance(value, list):
        return value
    tags: list[str] = []
    for raw_tag in value:
        if not isinstance(raw_tag, str):
            return value
        tag = raw_tag.strip()
        if tag and tag not in tags:
            tags.append(tag)
    return tags


class PostCreateInput(BaseModel):
    """Payload accepted when creating a post."""

    title: str = Field(min_length=1, max_length=200)
    content: str = Field(min_length=1)
    slug: str | None = Field(default=None, max_length=200)
    excerpt: str | None = Field(default=None, max_length=500)
    category: str | None = Field(default=None, max_length=100)
    tags: list[str] = Field(default_factory=list)
    featured_image: str | None = Field(default=None, max_length=500)
    published: bool = False
    meta_title: str | None = Field(default=None, max_length=200)
    meta_description: str | None = Field(default=None, max_length=500)

    @field_validator("title", "content", mode="before")
    @classmethod
    def _strip_required(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator(
        "slug",
        "excerpt",
        "category",
        "featured_image",
        "meta_title",
        "meta_description",
        mode="before",
    )
    @classmethod
    def _normalize_optional_text(cls, value: object) -> object:
        return _strip_optional_text(value)

    @field_validator("tags", mode="before")
    @classmethod
    def _clean_tags(cls, value: object) -> object:
        return _normalize_tags(value)


class PostUpdateInput(BaseModel):
    """Partial update; only fields present in the payload are applied.

    ``slug`` is not accepted: it changes only when the title does.
    """

    title: str | None = Field(default=None, min_length=1, max_length=200)
    content: str | None = Field(default=None, min_length=1)
    excerpt: str | None = Field(default=None, max_length=500)
    category: str | None = Field(default=None, max_length=100)
    tags: list[str] | None = None
    featured_image: str | None = Field(default=None, max_length=500)
    published: bool | None = None
    meta_title: str | None = Field(default=None, max_length=200)
    meta_description: str | None = Field(default=None, max_length=500)

    @field_validator("title", "content", mode="before")
    @classmethod
    def _strip_required(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator(
        "excerpt",
        "category",
        "featured_image",
        "meta_title",
        "meta_description",
        mode="before",
    )
    @classmethod
    def _normalize_optional_text(cls, value: object) -> object:
        return _strip_optional_text(value)

    @field_validator("tags", mode="before")
    @classmethod
    def _clean_tags(cls, value: object) -> object:
        if value is None:
            return []
        return _normalize_tags(value)

    @model_validator(mode="after")
    def _reject_null_required(self) -> Self:
        for name in _REQUIRED_PATCH_FIELDS:
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} não pode ser nulo")
        return self

    def changes(self) -> dict[str, object]:
        """Return only the fields the caller supplied."""

        return self.model_dump(exclude_unset=True)


class PostMeta(BaseModel):
    """Listing projection without body or SEO fields."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    slug: str
    title: str
    excerpt: str | None
    published: bool
    published_at: datetime | None
    created_at: datetime
    category: str | None
    tags: list[str]
    reading_time: int
    featured_image: str | None


class PostRead(PostMeta):
    """Full post representation."""

    content: str
    updated_at: datetime
    meta_title: str | None
    meta_description: str | None


class PostPage(BaseModel):
    """One page of a cursor-paginated listing."""

    posts: list[PostMeta]
    next_cursor: int | None = None


class PostStats(BaseModel):
    total: int
    published: int
    drafts: int
