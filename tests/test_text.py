from __future__ import annotations

import re

import pytest

from saude_blog.core.text import count_words, estimate_reading_time, generate_slug

SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")

TITLES = [
    "Política de Saúde!",
    "  Introdução à Saúde Pública: Conceitos Fundamentais  ",
    "Vacinação -- 2024 / Campanha",
    "ÁÉÍÓÚ ãõ ç ñ",
    "---hífens---nas---pontas---",
    "Tabs\tand\nnewlines   everywhere",
    "Epidemiologia: A Ciência por Trás da Prevenção",
    "100% SUS",
]


def test_generate_slug_strips_accents_and_punctuation():
    assert generate_slug("Política de Saúde!") == "politica-de-saude"


@pytest.mark.parametrize("title", TITLES)
def test_generate_slug_is_url_safe(title: str):
    slug = generate_slug(title)

    assert slug == slug.lower()
    assert SLUG_PATTERN.match(slug) is not None
    assert "--" not in slug
    assert not slug.startswith("-")
    assert not slug.endswith("-")


@pytest.mark.parametrize("title", TITLES)
def test_generate_slug_is_idempotent(title: str):
    slug = generate_slug(title)

    assert generate_slug(slug) == slug


def test_generate_slug_collapses_separators():
    assert generate_slug("Vacinação -- 2024 / Campanha") == "vacinacao-2024-campanha"
    assert generate_slug("---hífens---nas---pontas---") == "hifens-nas-pontas"


def test_generate_slug_returns_empty_for_symbol_only_titles():
    assert generate_slug("!!! ???") == ""
    assert generate_slug("健康") == ""


def test_reading_time_for_400_words_is_two_minutes():
    content = " ".join(["palavra"] * 400)

    assert count_words(content) == 400
    assert estimate_reading_time(content) == 2


def test_reading_time_is_at_least_one_minute():
    assert estimate_reading_time("curto") == 1
    assert estimate_reading_time(" ".join(["a"] * 200)) == 1
    assert estimate_reading_time(" ".join(["a"] * 201)) == 2


def test_reading_time_ignores_whitespace_layout():
    assert estimate_reading_time("  um\n\ndois\tTRÊS  ") == 1
    assert count_words("  um\n\ndois\tTRÊS  ") == 3


def test_reading_time_grows_with_word_count():
    minutes = [estimate_reading_time(" ".join(["w"] * count)) for count in range(1, 1201, 50)]

    assert minutes == sorted(minutes)
    assert minutes[-1] == 6
