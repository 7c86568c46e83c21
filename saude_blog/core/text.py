"""Slug and reading-time helpers."""

from __future__ import annotations

import math
import re
import unicodedata

from saude_blog.core.constants import WORDS_PER_MINUTE

_DISALLOWED_SLUG_CHARS = re.compile(r"[^a-z0-9\s-]")
_WHITESPACE_RUN = re.compile(r"\s+")
_HYPHEN_RUN = re.compile(r"-+")


def generate_slug(title: str) -> str:
    """Return a URL-safe slug for ``title``.

    Accents are stripped (``"Política de Saúde!"`` becomes
    ``"politica-de-saude"``); anything outside ``[a-z0-9-]`` is dropped.
    The result may be empty when the title has no ASCII letters or digits.
    """

    decomposed = unicodedata.normalize("NFD", title.lower())
    without_marks = "".join(char for char in decomposed if not unicodedata.combining(char))
    cleaned = _DISALLOWED_SLUG_CHARS.sub("", without_marks)
    hyphenated = _WHITESPACE_RUN.sub("-", cleaned.strip())
    return _HYPHEN_RUN.sub("-", hyphenated).strip("-")


def count_words(content: str) -> int:
    return len(content.split())


def estimate_reading_time(content: str) -> int:
    """Return estimated reading minutes, never less than one."""

    return max(1, math.ceil(count_words(content) / WORDS_PER_MINUTE))
