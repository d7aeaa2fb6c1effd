"""Utility helpers specific to LaTeX output."""

from __future__ import annotations

import re

from pylatexenc.latexencode import unicode_to_latex


# Single-pass translation: the backslash is handled by the same table as the
# other reserved characters, so braces and backslashes introduced by a
# replacement are never escaped a second time.
_BASIC_LATEX_ESCAPE_MAP = str.maketrans(
    {
        "\\": r"\textbackslash{}",
        "&": r"\&",
        "%": r"\%",
        "$": r"\$",
        "#": r"\#",
        "_": r"\_",
        "{": r"\{",
        "}": r"\}",
        "~": r"\textasciitilde{}",
        "^": r"\textasciicircum{}",
    }
)

_URL_ESCAPE_MAP = str.maketrans(
    {
        "\\": r"\textbackslash{}",
        "%": r"\%",
        "#": r"\#",
    }
)

_ACCENT_NEEDS_BRACES_PATTERN = re.compile(
    r"\\([" + re.escape("`'^\"~=\\.Hrvuck") + r"])\s*([A-Za-z])(?!\{)"
)


def _wrap_accent_payload(payload: str) -> str:
    """Ensure accent macros produced by pylatexenc wrap their argument in braces."""

    def _repl(match: re.Match[str]) -> str:
        command, char = match.groups()
        return f"\\{command}{{{char}}}"

    return _ACCENT_NEEDS_BRACES_PATTERN.sub(_repl, payload)


def escape_latex_chars(text: str, *, legacy_accents: bool = False) -> str:
    """Escape the ten LaTeX reserved characters in ``text``.

    When ``legacy_accents`` is set, non-ASCII characters are additionally
    encoded as LaTeX macros (``é`` becomes ``\\'{e}``) for engines without
    Unicode input support.
    """
    if not text:
        return text
    escaped = text.translate(_BASIC_LATEX_ESCAPE_MAP)
    if legacy_accents and not escaped.isascii():
        encoded = unicode_to_latex(escaped, non_ascii_only=True, unknown_char_warning=False)
        return _wrap_accent_payload(encoded)
    return escaped


def escape_url(url: str) -> str:
    """Escape a URL for use inside ``\\href`` or ``\\url``."""
    return url.translate(_URL_ESCAPE_MAP)


__all__ = ["escape_latex_chars", "escape_url"]
