from __future__ import annotations

import re

import pytest

from mdlatex.adapters.latex.utils import escape_latex_chars, escape_url


def test_reserved_characters_are_escaped() -> None:
    escaped = escape_latex_chars("100% & $5_{x}")
    assert escaped == r"100\% \& \$5\_\{x\}"
    for char in "%&$_":
        assert re.search(rf"(?<!\\){re.escape(char)}", escaped) is None


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("\\", r"\textbackslash{}"),
        ("&", r"\&"),
        ("%", r"\%"),
        ("$", r"\$"),
        ("#", r"\#"),
        ("_", r"\_"),
        ("{", r"\{"),
        ("}", r"\}"),
        ("~", r"\textasciitilde{}"),
        ("^", r"\textasciicircum{}"),
    ],
)
def test_each_reserved_character(raw: str, expected: str) -> None:
    assert escape_latex_chars(raw) == expected


def test_backslash_replacement_is_not_escaped_again() -> None:
    assert escape_latex_chars("\\{}") == r"\textbackslash{}\{\}"
    assert escape_latex_chars("a~b^c") == r"a\textasciitilde{}b\textasciicircum{}c"


def test_every_occurrence_is_replaced() -> None:
    assert escape_latex_chars("__##") == r"\_\_\#\#"


def test_plain_text_and_empty_string_are_unchanged() -> None:
    assert escape_latex_chars("Plain text, nothing special.") == "Plain text, nothing special."
    assert escape_latex_chars("") == ""


def test_unicode_is_kept_by_default() -> None:
    assert escape_latex_chars("café") == "café"


def test_legacy_accents_encode_non_ascii() -> None:
    escaped = escape_latex_chars("café & co", legacy_accents=True)
    assert "\\'{e}" in escaped
    assert "\\&" in escaped
    assert "é" not in escaped


def test_escape_url_only_touches_url_breakers() -> None:
    assert escape_url("https://example.com/a%20b#top") == r"https://example.com/a\%20b\#top"
    assert escape_url("https://example.com/a_b") == "https://example.com/a_b"
