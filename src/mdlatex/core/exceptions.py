"""Exception hierarchy shared by the conversion pipeline."""

from __future__ import annotations


class MdLatexError(Exception):
    """Base class for every error raised by mdlatex."""


class ConversionInputError(MdLatexError, ValueError):
    """Raised when the Markdown input is missing or empty."""


class MarkdownParseError(MdLatexError):
    """Raised when the Markdown source cannot be parsed."""


class LatexRenderingError(MdLatexError, RuntimeError):
    """Base exception for LaTeX rendering failures."""


class InvalidNodeError(LatexRenderingError):
    """Raised when a rule receives an unexpected DOM node shape."""


class CacheStorageError(MdLatexError, OSError):
    """Raised when the cache store cannot read or write an entry."""


class ConversionError(MdLatexError):
    """Raised when a conversion fails and cannot recover.

    The originating failure is always available as ``__cause__``.
    """


def exception_messages(exc: BaseException) -> list[str]:
    """Return the collected message chain for an exception and its causes."""
    messages: list[str] = []
    visited: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in visited:
        visited.add(id(current))
        text = str(current).strip()
        if text:
            first_line = text.splitlines()[0].strip()
            if first_line:
                messages.append(first_line)
        current = current.__cause__ or current.__context__
    return messages


def exception_hint(exc: BaseException) -> str | None:
    """Return the most specific message available for an exception chain."""
    messages = exception_messages(exc)
    return messages[-1] if messages else None


__all__ = [
    "CacheStorageError",
    "ConversionError",
    "ConversionInputError",
    "InvalidNodeError",
    "LatexRenderingError",
    "MarkdownParseError",
    "MdLatexError",
    "exception_hint",
    "exception_messages",
]
