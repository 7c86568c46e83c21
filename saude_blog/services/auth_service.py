"""Admin authentication and session cookie helpers."""

from __future__ import annotations

import base64
import hashlib
import hmac
import json
import logging
from hmac import compare_digest
from typing import Any

from fastapi import Request
from sqlmodel import Session, col, select

from saude_blog.core.constants import utcnow
from saude_blog.core.security import verify_password
from saude_blog.models.admin_user import AdminUser
from saude_blog.schemas.auth import AdminLoginInput

SESSION_ADMIN_USER_ID_KEY = "admin_user_id"

logger = logging.getLogger(__name__)


def decode_session_cookie(secret_key: str, raw_cookie: str | None) -> dict[str, Any]:
    """Decode and validate signed session cookie payload."""

    if raw_cookie is None or "." not in raw_cookie:
        return {}
    encoded_payload, signature = raw_cookie.rsplit(".", 1)
    if not compare_digest(_sign_payload(secret_key, encoded_payload), signature):
        return {}
    try:
        padding = "=" * (-len(encoded_payload) % 4)
        payload = base64.urlsafe_b64decode(f"{encoded_payload}{padding}".encode())
        data = json.loads(payload.decode("utf-8"))
    except (ValueError, json.JSONDecodeError):
        return {}
    if not isinstance(data, dict):
        return {}
    return {str(key): value for key, value in data.items()}


def encode_session_cookie(secret_key: str, session_data: dict[str, Any]) -> str:
    """Encode session dict and sign it for cookie storage."""

    raw_payload = json.dumps(session_data, separators=(",", ":"), sort_keys=True).encode("utf-8")
    encoded_payload = base64.urlsafe_b64encode(raw_payload).decode("utf-8").rstrip("=")
    signature = _sign_payload(secret_key, encoded_payload)
    return f"{encoded_payload}.{signature}"


def authenticate_admin(session: Session, login_input: AdminLoginInput) -> AdminUser | None:
    """Return the admin matching the credentials, stamping the login time."""

    admin_user = session.exec(
        select(AdminUser).where(col(AdminUser.username) == login_input.username)
    ).first()
    if admin_user is None or not verify_password(login_input.password, admin_user.password_hash):
        logger.warning("Failed admin login for username=%s", login_input.username)
        return None

    admin_user.last_login_at = utcnow()
    session.add(admin_user)
    session.commit()
    session.refresh(admin_user)
    return admin_user


def is_authenticated(request: Request) -> bool:
    return isinstance(request.session.get(SESSION_ADMIN_USER_ID_KEY), int)


def get_authenticated_admin(request: Request, session: Session) -> AdminUser | None:
    """Return the currently authenticated admin from session."""

    admin_user_id = request.session.get(SESSION_ADMIN_USER_ID_KEY)
    if not isinstance(admin_user_id, int):
        return None
    return session.get(AdminUser, admin_user_id)


def login_admin(request: Request, admin_user: AdminUser) -> None:
    """Persist admin login state in session."""

    request.session.clear()
    request.session[SESSION_ADMIN_USER_ID_KEY] = admin_user.id
    logger.info("Admin %s logged in", admin_user.username)


def logout_admin(request: Request) -> None:
    """Clear the session for logout."""

    request.session.clear()


def _sign_payload(secret_key: str, payload: str) -> str:
    digest = hmac.new(secret_key.encode("utf-8"), payload.encode("utf-8"), hashlib.sha256)
    return digest.hexdigest()
