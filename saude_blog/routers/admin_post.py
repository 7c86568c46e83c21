"""Admin post routes."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse
from sqlmodel import Session

from saude_blog.core.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from saude_blog.core.errors import NotFoundError
from saude_blog.db.session import get_session
from saude_blog.schemas.post import (
    PostCreateInput,
    PostPage,
    PostRead,
    PostStats,
    PostUpdateInput,
)
from saude_blog.services import post_service

router = APIRouter(prefix="/admin/api/posts")

SessionDep = Annotated[Session, Depends(get_session)]


@router.get("", response_model=PostPage)
def list_posts(
    session: SessionDep,
    limit: Annotated[int, Query(ge=1, le=MAX_PAGE_SIZE)] = DEFAULT_PAGE_SIZE,
    cursor: Annotated[int | None, Query()] = None,
):
    page = post_service.list_admin_posts(session, limit=limit, cursor=cursor)
    return PostPage.model_validate(page, from_attributes=True)


@router.post("", response_model=PostRead, status_code=status.HTTP_201_CREATED)
def create_post(payload: PostCreateInput, session: SessionDep):
    return post_service.create_post(session, payload)


@router.get("/stats", response_model=PostStats)
def post_stats(session: SessionDep):
    return post_service.get_post_stats(session)


@router.get("/{id}", response_model=PostRead)
def get_post(id: int, session: SessionDep):
    return post_service.get_post_by_id(session, id)


@router.patch("/{id}", response_model=PostRead)
def update_post(id: int, payload: PostUpdateInput, session: SessionDep):
    return post_service.update_post(session, id, payload)


@router.delete("/{id}")
def delete_post(id: int, session: SessionDep):
    if not post_service.delete_post(session, id):
        error = NotFoundError()
        return JSONResponse({"error": error.message}, status_code=error.status_code)
    return {"message": "Post excluído com sucesso."}


@router.patch("/by-slug/{slug}", response_model=PostRead)
def update_post_by_slug(slug: str, payload: PostUpdateInput, session: SessionDep):
    return post_service.update_post_by_slug(session, slug, payload)


@router.delete("/by-slug/{slug}")
def delete_post_by_slug(slug: str, session: SessionDep):
    if not post_service.delete_post_by_slug(session, slug):
        error = NotFoundError()
        return JSONResponse({"error": error.message}, status_code=error.status_code)
    return {"message": "Post excluído com sucesso."}
