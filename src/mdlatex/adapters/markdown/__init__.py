"""Markdown parsing front-end built on Python-Markdown."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
import logging
import re
from threading import Lock
from typing import Any

import markdown

from mdlatex.core.exceptions import MarkdownParseError


__all__ = [
    "DEFAULT_MARKDOWN_EXTENSIONS",
    "MATH_EXTENSION",
    "deduplicate_markdown_extensions",
    "normalize_markdown_extensions",
    "render_markdown",
    "resolve_markdown_extensions",
]

_log = logging.getLogger(__name__)

MATH_EXTENSION = "mdlatex.adapters.markdown_extensions.math:MathExtension"

DEFAULT_MARKDOWN_EXTENSIONS = [
    "fenced_code",
    "tables",
    MATH_EXTENSION,
]


class _MarkdownCacheEntry:
    __slots__ = ("lock", "processor")

    def __init__(self, processor: Any) -> None:
        self.processor = processor
        self.lock = Lock()


_MARKDOWN_CACHE: dict[tuple[str, ...], _MarkdownCacheEntry] = {}
_MARKDOWN_CACHE_GUARD = Lock()


def resolve_markdown_extensions(
    requested: Iterable[str] | None,
    disabled: Iterable[str] | None = None,
) -> list[str]:
    """Return the active Markdown extension list after applying overrides."""
    enabled = normalize_markdown_extensions(requested)
    disabled_normalized = {
        extension.lower() for extension in normalize_markdown_extensions(disabled)
    }
    combined = deduplicate_markdown_extensions(list(DEFAULT_MARKDOWN_EXTENSIONS) + enabled)
    if not disabled_normalized:
        return combined
    return [extension for extension in combined if extension.lower() not in disabled_normalized]


def deduplicate_markdown_extensions(values: Iterable[str]) -> list[str]:
    """Remove duplicate extensions while preserving order and case."""
    seen: set[str] = set()
    result: list[str] = []
    for value in values:
        key = value.lower()
        if key in seen:
            continue
        seen.add(key)
        result.append(value)
    return result


def normalize_markdown_extensions(values: Iterable[str] | str | None) -> list[str]:
    """Normalise extension names from CLI-friendly strings into a flat list."""
    if values is None:
        return []
    candidates: Iterable[str] = [values] if isinstance(values, str) else values
    normalized: list[str] = []
    for value in candidates:
        chunks = re.split(r"[,\s]+", value)
        normalized.extend(chunk for chunk in chunks if chunk)
    return normalized


def render_markdown(source: str, extensions: Sequence[str] | None = None) -> str:
    """Convert Markdown source into HTML.

    Processors are cached per extension set. ``markdown.Markdown`` instances
    keep state between calls, so each cached processor is reset and used under
    its own lock.
    """
    extensions_key = tuple(extensions if extensions is not None else DEFAULT_MARKDOWN_EXTENSIONS)
    entry = _resolve_markdown_entry(extensions_key)
    try:
        with entry.lock:
            processor = entry.processor
            processor.reset()
            return processor.convert(source)
    except Exception as exc:  # pragma: no cover - library-controlled
        raise MarkdownParseError(f"Failed to parse Markdown source: {exc}") from exc


def _resolve_markdown_entry(extensions_key: tuple[str, ...]) -> _MarkdownCacheEntry:
    entry = _MARKDOWN_CACHE.get(extensions_key)
    if entry is not None:
        return entry
    with _MARKDOWN_CACHE_GUARD:
        entry = _MARKDOWN_CACHE.get(extensions_key)
        if entry is None:
            entry = _MarkdownCacheEntry(_build_markdown_processor(extensions_key))
            _MARKDOWN_CACHE[extensions_key] = entry
    return entry


def _build_markdown_processor(extensions_key: tuple[str, ...]) -> markdown.Markdown:
    _log.debug("building Markdown processor with extensions %s", ", ".join(extensions_key))
    try:
        return markdown.Markdown(extensions=list(extensions_key))
    except Exception as exc:
        raise MarkdownParseError(f"Failed to initialize Markdown processor: {exc}") from exc
