"""Password hashing for admin accounts."""

import bcrypt

_PASSWORD_ENCODING = "utf-8"


def hash_password(password: str) -> str:
    """Return a bcrypt hash suitable for ``AdminUser.password_hash``."""

    salt = bcrypt.gensalt()
    return bcrypt.hashpw(password.encode(_PASSWORD_ENCODING), salt).decode(_PASSWORD_ENCODING)


def verify_password(password: str, password_hash: str) -> bool:
    """Check a plain password against a stored hash; malformed hashes never match."""

    try:
        return bcrypt.checkpw(
            password.encode(_PASSWORD_ENCODING),
            password_hash.encode(_PASSWORD_ENCODING),
        )
    except ValueError:
        return False
