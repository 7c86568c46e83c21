"""Post lifecycle services.

Every function takes the request's SQLModel ``Session`` as the store handle.
Failures are raised as :mod:`saude_blog.core.errors` types; routers turn them
into JSON error envelopes.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session

from saude_blog.core.constants import (
    DEFAULT_FEATURED_LIMIT,
    DEFAULT_PAGE_SIZE,
    FALLBACK_SLUG,
    FEATURED_CATEGORY,
    FEATURED_CATEGORY_LIMIT,
    MAX_FEATURED_LIMIT,
    MAX_PAGE_SIZE,
    SLUG_CONFLICT_RETRIES,
    utcnow,
)
from saude_blog.core.errors import ConflictError, NotFoundError, StoreError, ValidationError
from saude_blog.core.text import estimate_reading_time, generate_slug
from saude_blog.models.post import Post
from saude_blog.repositories import post_repo
from saude_blog.schemas.post import PostCreateInput, PostStats, PostUpdateInput

logger = logging.getLogger(__name__)


@dataclass
class PostPageResult:
    posts: list[Post]
    next_cursor: int | None


@contextmanager
def _store_guard(session: Session, action: str) -> Iterator[None]:
    """Translate persistence failures other than unique violations into ``StoreError``."""

    try:
        yield
    except IntegrityError:
        raise
    except SQLAlchemyError as exc:
        session.rollback()
        logger.exception("Store failure while %s", action)
        raise StoreError() from exc


def _validate_limit(limit: int, maximum: int) -> int:
    if limit < 1 or limit > maximum:
        raise ValidationError(f"O limite deve estar entre 1 e {maximum}.")
    return limit


def _base_slug(raw: str) -> str:
    return generate_slug(raw) or FALLBACK_SLUG


def _disambiguate_slug(base_slug: str, attempt: int) -> str:
    stamp = int(utcnow().timestamp() * 1000)
    if attempt == 1:
        return f"{base_slug}-{stamp}"
    return f"{base_slug}-{stamp}-{attempt}"


def resolve_unique_slug(session: Session, base_slug: str, *, exclude_id: int | None = None) -> str:
    """Return ``base_slug`` or a suffixed variant no other post owns."""

    candidate = base_slug
    attempt = 0
    while post_repo.slug_exists(session, candidate, exclude_id=exclude_id):
        attempt += 1
        candidate = _disambiguate_slug(base_slug, attempt)
    return candidate


def _persist_with_slug_retry(
    session: Session,
    build: Callable[[], Post],
    *,
    action: str,
) -> Post:
    """Run ``build`` and commit, retrying when a concurrent write took the slug."""

    for attempt in range(1, SLUG_CONFLICT_RETRIES + 2):
        with _store_guard(session, action):
            try:
                post = build()
                if post.id is None:
                    return post_repo.create_post(session, post)
                return post_repo.update_post(session, post)
            except IntegrityError:
                session.rollback()
                logger.warning("Slug conflict while %s (attempt %d)", action, attempt)
    raise ConflictError()


def create_post(session: Session, input_data: PostCreateInput) -> Post:
    """Create a post, deriving slug, reading time and publish stamp."""

    if not input_data.title or not input_data.content:
        raise ValidationError("Título e conteúdo são obrigatórios.")

    base_slug = _base_slug(input_data.slug or input_data.title)
    fields = input_data.model_dump(exclude={"slug"})

    def build() -> Post:
        post = Post(**fields)
        post.slug = resolve_unique_slug(session, base_slug)
        post.reading_time = estimate_reading_time(input_data.content)
        post.published_at = utcnow() if input_data.published else None
        return post

    post = _persist_with_slug_retry(session, build, action="creating post")
    logger.info("Created post id=%s slug=%s published=%s", post.id, post.slug, post.published)
    return post


def update_post(session: Session, post_id: int, input_data: PostUpdateInput) -> Post:
    """Apply a partial update, keeping slug and publish stamp invariants."""

    changes = input_data.changes()

    def build() -> Post:
        post = post_repo.get_post_by_id(session, post_id)
        if post is None:
            raise NotFoundError()

        was_published = post.published
        title_changed = "title" in changes and changes["title"] != post.title

        for name, value in changes.items():
            if name != "published":
                setattr(post, name, value)

        if "content" in changes:
            post.reading_time = estimate_reading_time(post.content)
        if title_changed:
            post.slug = resolve_unique_slug(
                session,
                _base_slug(post.title),
                exclude_id=post.id,
            )
        if "published" in changes:
            _apply_publish_state(post, bool(changes["published"]), was_published)
        post.updated_at = utcnow()
        return post

    post = _persist_with_slug_retry(session, build, action=f"updating post {post_id}")
    logger.info("Updated post id=%s fields=%s", post.id, sorted(changes))
    return post


def _apply_publish_state(post: Post, published: bool, was_published: bool) -> None:
    if published:
        if not was_published or post.published_at is None:
            post.published_at = utcnow()
            logger.info("Publishing post id=%s", post.id)
    else:
        if was_published:
            logger.info("Unpublishing post id=%s", post.id)
        post.published_at = None
    post.published = published


def delete_post(session: Session, post_id: int) -> bool:
    """Hard-delete a post; return ``False`` when it does not exist."""

    with _store_guard(session, f"deleting post {post_id}"):
        post = post_repo.get_post_by_id(session, post_id)
        if post is None:
            return False
        post_repo.delete_post(session, post)
    logger.info("Deleted post id=%s", post_id)
    return True


def _post_id_for_slug(session: Session, slug: str) -> int | None:
    with _store_guard(session, f"loading post {slug}"):
        post = post_repo.get_post_by_slug(session, slug)
    return None if post is None else post.id


def update_post_by_slug(session: Session, slug: str, input_data: PostUpdateInput) -> Post:
    """Resolve ``slug`` (any publish state) and apply :func:`update_post`."""

    post_id = _post_id_for_slug(session, slug)
    if post_id is None:
        raise NotFoundError()
    return update_post(session, post_id, input_data)


def delete_post_by_slug(session: Session, slug: str) -> bool:
    post_id = _post_id_for_slug(session, slug)
    if post_id is None:
        return False
    return delete_post(session, post_id)


def get_post_by_id(session: Session, post_id: int) -> Post:
    """Return any post by id, published or not."""

    with _store_guard(session, f"loading post {post_id}"):
        post = post_repo.get_post_by_id(session, post_id)
    if post is None:
        raise NotFoundError()
    return post


def get_published_post_by_slug(session: Session, slug: str) -> Post:
    """Return a published post by slug."""

    with _store_guard(session, f"loading post {slug}"):
        post = post_repo.get_post_by_slug(session, slug, published_only=True)
    if post is None:
        raise NotFoundError()
    return post


def list_published_posts(
    session: Session,
    *,
    limit: int = DEFAULT_PAGE_SIZE,
    cursor: int | None = None,
    category: str | None = None,
) -> PostPageResult:
    """Return a page of published posts, newest publication first."""

    _validate_limit(limit, MAX_PAGE_SIZE)
    with _store_guard(session, "listing published posts"):
        start_after = None
        if cursor is not None:
            cursor_post = post_repo.get_post_by_id(session, cursor)
            if (
                cursor_post is None
                or not cursor_post.published
                or cursor_post.published_at is None
                or (category is not None and cursor_post.category != category)
            ):
                return PostPageResult(posts=[], next_cursor=None)
            start_after = (cursor_post.published_at, cursor)
        posts = post_repo.list_published_window(
            session,
            limit=limit + 1,
            category=category,
            start_after=start_after,
        )
    return _paginate(posts, limit)


def list_admin_posts(
    session: Session,
    *,
    limit: int = DEFAULT_PAGE_SIZE,
    cursor: int | None = None,
) -> PostPageResult:
    """Return a page of every post, newest creation first."""

    _validate_limit(limit, MAX_PAGE_SIZE)
    with _store_guard(session, "listing admin posts"):
        start_after = None
        if cursor is not None:
            cursor_post = post_repo.get_post_by_id(session, cursor)
            if cursor_post is None:
                return PostPageResult(posts=[], next_cursor=None)
            start_after = (cursor_post.created_at, cursor)
        posts = post_repo.list_admin_window(session, limit=limit + 1, start_after=start_after)
    return _paginate(posts, limit)


def _paginate(posts: Sequence[Post], limit: int) -> PostPageResult:
    page = list(posts)
    next_cursor = None
    if len(page) > limit:
        next_cursor = page.pop().id
    return PostPageResult(posts=page, next_cursor=next_cursor)


def list_posts_by_category(session: Session, category: str) -> list[Post]:
    with _store_guard(session, f"listing category {category}"):
        return list(post_repo.list_published(session, category=category))


def list_posts_by_tag(session: Session, tag: str) -> list[Post]:
    """Return published posts carrying ``tag``."""

    with _store_guard(session, f"listing tag {tag}"):
        posts = post_repo.list_published_with_tag(session, tag)
    return [post for post in posts if tag in post.tags]


def list_featured_posts(session: Session, *, limit: int = DEFAULT_FEATURED_LIMIT) -> list[Post]:
    """Return published posts that have a featured image."""

    _validate_limit(limit, MAX_FEATURED_LIMIT)
    with _store_guard(session, "listing featured posts"):
        return list(post_repo.list_published(session, featured_image_only=True, limit=limit))


def list_featured_category_posts(
    session: Session,
    *,
    limit: int = FEATURED_CATEGORY_LIMIT,
) -> list[Post]:
    """Return published posts filed under the ``featured`` category."""

    _validate_limit(limit, MAX_FEATURED_LIMIT)
    with _store_guard(session, "listing featured category posts"):
        return list(post_repo.list_published(session, category=FEATURED_CATEGORY, limit=limit))


def search_posts(session: Session, query: str) -> list[Post]:
    """Case-insensitive substring search over published posts."""

    needle = query.strip().casefold()
    if not needle:
        return []
    with _store_guard(session, "searching posts"):
        posts = post_repo.list_published(session)
    return [post for post in posts if _mentions(post, needle)]


def _mentions(post: Post, needle: str) -> bool:
    # SQL lower() on SQLite folds ASCII only, so accented text is compared here.
    return any(
        needle in text.casefold() for text in (post.title, post.excerpt or "", post.content)
    )


def list_all_tags(session: Session) -> list[str]:
    with _store_guard(session, "listing tags"):
        tag_lists = post_repo.list_published_tag_lists(session)
    return sorted({tag for tags in tag_lists for tag in tags})


def list_all_categories(session: Session) -> list[str]:
    with _store_guard(session, "listing categories"):
        return sorted(post_repo.list_published_categories(session))


def get_post_stats(session: Session) -> PostStats:
    """Return post counts for the admin dashboard."""

    with _store_guard(session, "counting posts"):
        total = post_repo.count_posts(session)
        published = post_repo.count_posts(session, published=True)
    return PostStats(total=total, published=published, drafts=total - published)
