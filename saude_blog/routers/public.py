"""Public read-only blog routes."""

from __future__ import annotations

from typing import Annotated, Literal

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from saude_blog.core.constants import (
    DEFAULT_FEATURED_LIMIT,
    DEFAULT_PAGE_SIZE,
    MAX_FEATURED_LIMIT,
    MAX_PAGE_SIZE,
)
from saude_blog.db.session import get_session
from saude_blog.schemas.post import PostMeta, PostPage, PostRead
from saude_blog.services import post_service

router = APIRouter(prefix="/api")

SessionDep = Annotated[Session, Depends(get_session)]


@router.get("/health")
def health():
    return {"status": "ok"}


@router.get("/posts", response_model=PostPage)
def list_posts(
    session: SessionDep,
    limit: Annotated[int, Query(ge=1, le=MAX_PAGE_SIZE)] = DEFAULT_PAGE_SIZE,
    cursor: Annotated[int | None, Query()] = None,
    category: Annotated[str | None, Query(min_length=1)] = None,
):
    page = post_service.list_published_posts(
        session,
        limit=limit,
        cursor=cursor,
        category=category,
    )
    return PostPage.model_validate(page, from_attributes=True)


@router.get("/posts/featured", response_model=list[PostMeta])
def featured_posts(
    session: SessionDep,
    limit: Annotated[int, Query(ge=1, le=MAX_FEATURED_LIMIT)] = DEFAULT_FEATURED_LIMIT,
    source: Annotated[Literal["image", "category"], Query()] = "image",
):
    if source == "category":
        return post_service.list_featured_category_posts(session, limit=limit)
    return post_service.list_featured_posts(session, limit=limit)


@router.get("/posts/search", response_model=list[PostMeta])
def search_posts(session: SessionDep, q: Annotated[str, Query(max_length=200)] = ""):
    return post_service.search_posts(session, q)


@router.get("/posts/{slug}", response_model=PostRead)
def post_detail(slug: str, session: SessionDep):
    return post_service.get_published_post_by_slug(session, slug)


@router.get("/categories", response_model=list[str])
def categories(session: SessionDep):
    return post_service.list_all_categories(session)


@router.get("/categories/{category}/posts", response_model=list[PostMeta])
def category_posts(category: str, session: SessionDep):
    return post_service.list_posts_by_category(session, category)


@router.get("/tags", response_model=list[str])
def tags(session: SessionDep):
    return post_service.list_all_tags(session)


@router.get("/tags/{tag}/posts", response_model=list[PostMeta])
def tag_posts(tag: str, session: SessionDep):
    return post_service.list_posts_by_tag(session, tag)
