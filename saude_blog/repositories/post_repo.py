"""Database access helpers for posts."""

from __future__ import annotations

import json
from collections.abc import Sequence
from datetime import datetime

from sqlalchemy import String, cast, func, or_
from sqlmodel import Session, col, select

from saude_blog.models.post import Post


def get_post_by_id(session: Session, post_id: int) -> Post | None:
    """Return post by primary key."""

    return session.get(Post, post_id)


def get_post_by_slug(session: Session, slug: str, *, published_only: bool = False) -> Post | None:
    """Return post by unique slug."""

    stmt = select(Post).where(col(Post.slug) == slug)
    if published_only:
        stmt = stmt.where(col(Post.published).is_(True))
    return session.exec(stmt).first()


def slug_exists(session: Session, slug: str, *, exclude_id: int | None = None) -> bool:
    """Return whether another post already owns ``slug``."""

    stmt = select(Post.id).where(col(Post.slug) == slug)
    if exclude_id is not None:
        stmt = stmt.where(col(Post.id) != exclude_id)
    return session.exec(stmt).first() is not None


def list_published_window(
    session: Session,
    *,
    limit: int,
    category: str | None = None,
    start_after: tuple[datetime, int] | None = None,
) -> Sequence[Post]:
    """Return published posts newest first, starting at an inclusive keyset."""

    stmt = select(Post).where(col(Post.published).is_(True))
    if category is not None:
        stmt = stmt.where(col(Post.category) == category)
    if start_after is not None:
        published_at, post_id = start_after
        stmt = stmt.where(
            or_(
                col(Post.published_at) < published_at,
                (col(Post.published_at) == published_at) & (col(Post.id) <= post_id),
            )
        )
    return session.exec(
        stmt.order_by(col(Post.published_at).desc(), col(Post.id).desc()).limit(limit)
    ).all()


def list_admin_window(
    session: Session,
    *,
    limit: int,
    start_after: tuple[datetime, int] | None = None,
) -> Sequence[Post]:
    """Return all posts newest-created first, starting at an inclusive keyset."""

    stmt = select(Post)
    if start_after is not None:
        created_at, post_id = start_after
        stmt = stmt.where(
            or_(
                col(Post.created_at) < created_at,
                (col(Post.created_at) == created_at) & (col(Post.id) <= post_id),
            )
        )
    return session.exec(
        stmt.order_by(col(Post.created_at).desc(), col(Post.id).desc()).limit(limit)
    ).all()


def list_published(
    session: Session,
    *,
    category: str | None = None,
    featured_image_only: bool = False,
    limit: int | None = None,
) -> Sequence[Post]:
    """Return published posts matching simple column filters."""

    stmt = select(Post).where(col(Post.published).is_(True))
    if category is not None:
        stmt = stmt.where(col(Post.category) == category)
    if featured_image_only:
        stmt = stmt.where(col(Post.featured_image).is_not(None))
    stmt = stmt.order_by(col(Post.published_at).desc(), col(Post.id).desc())
    if limit is not None:
        stmt = stmt.limit(limit)
    return session.exec(stmt).all()


def list_published_with_tag(session: Session, tag: str) -> Sequence[Post]:
    """Return published posts whose serialized tag list mentions ``tag``.

    The match runs on the JSON text, so callers confirm exact membership.
    """

    token = json.dumps(tag)
    stmt = (
        select(Post)
        .where(col(Post.published).is_(True))
        .where(cast(col(Post.tags), String).contains(token, autoescape=True))
        .order_by(col(Post.published_at).desc(), col(Post.id).desc())
    )
    return session.exec(stmt).all()


def list_published_categories(session: Session) -> Sequence[str]:
    """Return distinct non-null categories of published posts."""

    return session.exec(
        select(Post.category)
        .where(col(Post.published).is_(True))
        .where(col(Post.category).is_not(None))
        .distinct()
        .order_by(col(Post.category).asc())
    ).all()


def list_published_tag_lists(session: Session) -> Sequence[list[str]]:
    """Return the tag list of every published post."""

    return session.exec(select(Post.tags).where(col(Post.published).is_(True))).all()


def count_posts(session: Session, *, published: bool | None = None) -> int:
    """Return number of posts, optionally restricted by publish state."""

    stmt = select(func.count()).select_from(Post)
    if published is not None:
        stmt = stmt.where(col(Post.published).is_(published))
    return session.exec(stmt).one()


def create_post(session: Session, post: Post) -> Post:
    """Persist a new post."""

    session.add(post)
    session.commit()
    session.refresh(post)
    return post


def update_post(session: Session, post: Post) -> Post:
    """Persist an updated post."""

    session.add(post)
    session.commit()
    session.refresh(post)
    return post


def delete_post(session: Session, post: Post) -> None:
    """Hard-delete a post."""

    session.delete(post)
    session.commit()
