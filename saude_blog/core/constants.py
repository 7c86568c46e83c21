"""Application-wide constants and shared values."""

from __future__ import annotations

from datetime import UTC, datetime

WORDS_PER_MINUTE = 200

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 50

DEFAULT_FEATURED_LIMIT = 3
MAX_FEATURED_LIMIT = 10
FEATURED_CATEGORY = "featured"
FEATURED_CATEGORY_LIMIT = 6

FALLBACK_SLUG = "post"
SLUG_CONFLICT_RETRIES = 3


def utcnow() -> datetime:
    """Return timezone-aware current UTC datetime."""

    return datetime.now(UTC)
