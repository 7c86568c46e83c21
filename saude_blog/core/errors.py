"""Typed failures raised by domain services."""

from __future__ import annotations


class BlogError(Exception):
    """Base error carrying a user-facing message and HTTP status."""

    status_code = 500
    default_message = "Erro inesperado."

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(BlogError):
    """Missing or malformed input."""

    status_code = 400
    default_message = "Dados inválidos."


class NotFoundError(BlogError):
    """Unknown post id or slug."""

    status_code = 404
    default_message = "Post não encontrado."


class ConflictError(BlogError):
    """Slug uniqueness violated at write time."""

    status_code = 409
    default_message = "Já existe um post com este slug. Tente novamente."


class StoreError(BlogError):
    """Underlying persistence failure."""

    status_code = 500
    default_message = "Falha ao acessar o banco de dados."
