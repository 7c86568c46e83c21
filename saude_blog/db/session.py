"""Database engine and session dependency helpers."""

from __future__ import annotations

from collections.abc import Generator

from fastapi import Request
from sqlalchemy.engine import Engine
from sqlmodel import Session, create_engine


def build_engine(database_url: str, *, echo: bool = False) -> Engine:
    """Create the engine for ``database_url``."""

    connect_args = {"check_same_thread": False} if database_url.startswith("sqlite") else {}
    return create_engine(database_url, connect_args=connect_args, echo=echo)


def get_session(request: Request) -> Generator[Session, None, None]:
    """Yield a database session bound to the application's engine."""

    with Session(request.app.state.engine) as session:
        yield session
