"""Admin authentication routes."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from sqlmodel import Session

from saude_blog.db.session import get_session
from saude_blog.schemas.auth import AdminLoginInput, AdminRead
from saude_blog.services.auth_service import (
    authenticate_admin,
    get_authenticated_admin,
    login_admin,
    logout_admin,
)

router = APIRouter(prefix="/admin/api")


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


@router.post("/login", response_model=AdminRead)
def login(
    request: Request,
    payload: AdminLoginInput,
    session: Annotated[Session, Depends(get_session)],
):
    admin_user = authenticate_admin(session, payload)
    if admin_user is None:
        return _error("Usuário ou senha incorretos.", status.HTTP_401_UNAUTHORIZED)

    login_admin(request, admin_user)
    return admin_user


@router.post("/logout")
def logout(request: Request):
    logout_admin(request)
    return {"message": "Sessão encerrada."}


@router.get("/me", response_model=AdminRead)
def me(request: Request, session: Annotated[Session, Depends(get_session)]):
    admin_user = get_authenticated_admin(request, session)
    if admin_user is None:
        logout_admin(request)
        return _error("Autenticação necessária.", status.HTTP_401_UNAUTHORIZED)
    return admin_user
