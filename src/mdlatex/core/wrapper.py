"""Wrap rendered LaTeX bodies into compilable documents."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .config import DocumentConfig


if TYPE_CHECKING:  # pragma: no cover - typing only
    from mdlatex.adapters.latex.formatter import LaTeXFormatter


DEFAULT_TITLE = DocumentConfig().title


def wrap_document(
    body: str,
    *,
    title: str = DEFAULT_TITLE,
    formatter: LaTeXFormatter | None = None,
) -> str:
    """Return a complete ``article`` document around ``body``.

    The body is inserted as is; only the title is escaped since it comes from
    configuration rather than from the renderer.
    """
    if formatter is None:
        from mdlatex.adapters.latex.formatter import LaTeXFormatter

        formatter = LaTeXFormatter()
    return formatter.document(body=body, title=title)


__all__ = ["DEFAULT_TITLE", "wrap_document"]
