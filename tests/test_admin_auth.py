from __future__ import annotations

from sqlmodel import Session, select

from saude_blog.main import SESSION_COOKIE_NAME
from saude_blog.models.admin_user import AdminUser
from saude_blog.services.auth_service import decode_session_cookie, encode_session_cookie


def _set_cookie(headers: list[tuple[str, str]]) -> str | None:
    for key, value in headers:
        if key.lower() == "set-cookie":
            return value
    return None


def test_login_sets_http_only_session_cookie(client, engine):
    status_code, headers, body = client.request(
        "POST",
        "/admin/api/login",
        json_body={"username": "admin", "password": "test-password"},
    )
    session_cookie = _set_cookie(headers)

    assert status_code == 200
    assert body == {"username": "admin"}
    assert session_cookie is not None
    assert session_cookie.startswith(f"{SESSION_COOKIE_NAME}=")
    assert "HttpOnly" in session_cookie
    assert "SameSite=lax" in session_cookie
    with Session(engine) as session:
        admin_user = session.exec(select(AdminUser)).one()
        assert admin_user.last_login_at is not None


def test_login_rejects_wrong_password(client):
    status_code, headers, body = client.request(
        "POST",
        "/admin/api/login",
        json_body={"username": "admin", "password": "wrong"},
    )

    assert status_code == 401
    assert body == {"error": "Usuário ou senha incorretos."}
    assert _set_cookie(headers) is None


def test_login_rejects_malformed_payload(client):
    status_code, _, body = client.request(
        "POST",
        "/admin/api/login",
        json_body={"username": "ab"},
    )

    assert status_code == 400
    assert body["error"].startswith("Dados inválidos")


def test_me_and_logout_flow(client):
    assert client.login() == 200

    status_code, _, body = client.request("GET", "/admin/api/me")

    assert status_code == 200
    assert body == {"username": "admin"}

    status_code, _, body = client.request("POST", "/admin/api/logout")

    assert status_code == 200
    assert SESSION_COOKIE_NAME not in client.cookies

    status_code, _, body = client.request("GET", "/admin/api/me")

    assert status_code == 401
    assert body == {"error": "Autenticação necessária."}


def test_tampered_session_cookie_is_ignored(client):
    forged = encode_session_cookie("another-secret", {"admin_user_id": 1})
    client.cookies[SESSION_COOKIE_NAME] = forged

    status_code, _, _ = client.request("GET", "/admin/api/posts")

    assert status_code == 401


def test_session_cookie_round_trip_and_garbage():
    encoded = encode_session_cookie("secret", {"admin_user_id": 7})

    assert decode_session_cookie("secret", encoded) == {"admin_user_id": 7}
    assert decode_session_cookie("other", encoded) == {}
    assert decode_session_cookie("secret", None) == {}
    assert decode_session_cookie("secret", "no-signature") == {}
