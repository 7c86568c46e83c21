"""Shared fixtures: in-memory database, app factory and a raw ASGI client."""

from __future__ import annotations

import asyncio
import json
from http.cookies import SimpleCookie
from urllib.parse import urlencode

import pytest
from fastapi import FastAPI
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine
from starlette.types import Message

from saude_blog.core.config import Settings
from saude_blog.core.security import hash_password
from saude_blog.main import create_app
from saude_blog.models.admin_user import AdminUser

ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "test-password"


class AsgiClient:
    """Drives the app through the ASGI interface and keeps a cookie jar."""

    def __init__(self, app: FastAPI) -> None:
        self.app = app
        self.cookies: dict[str, str] = {}

    def request(
        self,
        method: str,
        path: str,
        *,
        json_body: object | None = None,
        query: dict[str, object] | None = None,
    ) -> tuple[int, list[tuple[str, str]], object]:
        headers: list[tuple[bytes, bytes]] = [(b"host", b"testserver")]
        request_body = b""

        if self.cookies:
            cookie_header = "; ".join(f"{name}={value}" for name, value in self.cookies.items())
            headers.append((b"cookie", cookie_header.encode("utf-8")))

        if json_body is not None:
            request_body = json.dumps(json_body).encode("utf-8")
            headers.append((b"content-type", b"application/json"))
        headers.append((b"content-length", str(len(request_body)).encode("utf-8")))

        scope = {
            "type": "http",
            "asgi": {"version": "3.0", "spec_version": "2.3"},
            "http_version": "1.1",
            "method": method.upper(),
            "scheme": "http",
            "path": path,
            "raw_path": path.encode("utf-8"),
            "query_string": urlencode(query or {}).encode("utf-8"),
            "headers": headers,
            "client": ("testclient", 50000),
            "server": ("testserver", 80),
            "root_path": "",
        }

        sent = False

        async def receive() -> Message:
            nonlocal sent
            if sent:
                return {"type": "http.request", "body": b"", "more_body": False}
            sent = True
            return {"type": "http.request", "body": request_body, "more_body": False}

        messages: list[Message] = []

        async def send(message: Message) -> None:
            messages.append(message)

        asyncio.run(self.app(scope, receive, send))

        status_code = 500
        response_headers: list[tuple[str, str]] = []
        body = b""
        for message in messages:
            if message["type"] == "http.response.start":
                status_code = message["status"]
                response_headers = [
                    (key.decode("latin-1"), value.decode("latin-1"))
                    for key, value in message.get("headers", [])
                ]
            if message["type"] == "http.response.body":
                body += message.get("body", b"")

        self._update_cookie_jar(response_headers)
        payload = json.loads(body) if body else None
        return status_code, response_headers, payload

    def login(self, username: str = ADMIN_USERNAME, password: str = ADMIN_PASSWORD) -> int:
        status_code, _, _ = self.request(
            "POST",
            "/admin/api/login",
            json_body={"username": username, "password": password},
        )
        return status_code

    def _update_cookie_jar(self, headers: list[tuple[str, str]]) -> None:
        for key, value in headers:
            if key.lower() != "set-cookie":
                continue
            parsed_cookie = SimpleCookie()
            parsed_cookie.load(value)
            for morsel in parsed_cookie.values():
                if morsel["max-age"] == "0" or not morsel.value.strip('"'):
                    self.cookies.pop(morsel.key, None)
                else:
                    self.cookies[morsel.key] = morsel.value


@pytest.fixture
def settings() -> Settings:
    return Settings(
        app_env="test",
        secret_key="test-secret",
        auto_init_db=False,
        admin_username=ADMIN_USERNAME,
        admin_password=ADMIN_PASSWORD,
        _env_file=None,
    )


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def app(settings, engine) -> FastAPI:
    with Session(engine) as session:
        session.add(
            AdminUser(
                username=ADMIN_USERNAME,
                password_hash=hash_password(ADMIN_PASSWORD),
            )
        )
        session.commit()
    return create_app(settings, engine)


@pytest.fixture
def client(app) -> AsgiClient:
    return AsgiClient(app)


@pytest.fixture
def admin_client(client) -> AsgiClient:
    assert client.login() == 200
    return client
