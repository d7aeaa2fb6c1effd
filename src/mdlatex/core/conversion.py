"""Conversion orchestrator composing cache, chunked rendering, and wrapping.

A conversion computes the cache key of the source, returns the stored
document on a hit, and otherwise renders, wraps, and stores the result.
Caching is an optimisation only: a store that fails to read behaves like a
miss, and a store that fails to write still lets the converted document reach
the caller.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from .cache import CacheStore, FileCacheStore, cache_key
from .chunking import ChunkedDocumentProcessor, DocumentSection
from .config import CacheConfig, ConverterConfig
from .diagnostics import DiagnosticEmitter, ensure_emitter
from .exceptions import CacheStorageError, ConversionError, ConversionInputError
from .user_dir import CONVERSIONS_NAMESPACE, get_user_dir


if TYPE_CHECKING:  # pragma: no cover - typing only
    from mdlatex.adapters.latex.renderer import LaTeXRenderer


_log = logging.getLogger(__name__)


@dataclass(slots=True)
class ConversionResult:
    """Outcome of a single conversion."""

    latex: str
    cache_key: str
    cached: bool = False
    sections: list[DocumentSection] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Return the payload exposed to API callers."""
        return {"latex": self.latex}


def resolve_cache_directory(config: CacheConfig) -> Path:
    """Return the directory holding conversion entries."""
    if config.directory is not None:
        return Path(config.directory).expanduser()
    return get_user_dir().cache_dir(CONVERSIONS_NAMESPACE, create=False)


class MarkdownConverter:
    """Convert Markdown sources into complete LaTeX documents."""

    def __init__(
        self,
        config: ConverterConfig | None = None,
        *,
        store: CacheStore | None = None,
        renderer: LaTeXRenderer | None = None,
        emitter: DiagnosticEmitter | None = None,
    ) -> None:
        self.config = config or ConverterConfig()
        self.emitter = ensure_emitter(emitter)
        if renderer is None:
            from mdlatex.adapters.latex.renderer import LaTeXRenderer

            renderer = LaTeXRenderer(self.config.render)
        self.renderer = renderer
        self.processor = ChunkedDocumentProcessor(
            self.renderer,
            chunking=self.config.chunking,
            document=self.config.document,
            emitter=self.emitter,
        )
        if store is None and self.config.cache.enabled:
            store = FileCacheStore(resolve_cache_directory(self.config.cache))
        self.store = store

    def key_for(self, content: str) -> str:
        """Return the cache key used for ``content``."""
        return cache_key(content, prefix=self.config.cache.prefix)

    def convert(self, content: Any) -> ConversionResult:
        """Convert ``content`` and return the wrapped LaTeX document.

        Raises:
            ConversionInputError: ``content`` is missing, not a string, or empty.
                Raised before the cache is consulted.
            ConversionError: rendering failed; the original exception is the
                ``__cause__``. Nothing is cached in that case.
        """
        text = self._validate(content)
        key = self.key_for(text)

        entry = self._lookup(key)
        if entry is not None:
            self.emitter.event("cache_hit", {"key": key})
            return ConversionResult(latex=entry, cache_key=key, cached=True)

        if self.store is not None:
            self.emitter.event("cache_miss", {"key": key})

        try:
            sections = self.processor.sections_for(text)
            latex = self.processor.process(text, sections)
        except Exception as exc:
            raise ConversionError(f"Failed to convert Markdown document: {exc}") from exc

        self._store(key, latex)
        return ConversionResult(latex=latex, cache_key=key, cached=False, sections=sections)

    def _validate(self, content: Any) -> str:
        if content is None:
            raise ConversionInputError("Markdown content is required.")
        if not isinstance(content, str):
            raise ConversionInputError(
                f"Markdown content must be a string, got {type(content).__name__}."
            )
        if not content:
            raise ConversionInputError("Markdown content is empty.")
        return content

    def _lookup(self, key: str) -> str | None:
        if self.store is None:
            return None
        try:
            entry = self.store.get(key)
        except CacheStorageError as exc:
            self.emitter.warning(f"Ignoring unreadable cache entry {key}.", exc)
            return None
        return entry.content if entry is not None else None

    def _store(self, key: str, latex: str) -> None:
        if self.store is None:
            return
        try:
            self.store.set(key, latex)
        except CacheStorageError as exc:
            self.emitter.warning(f"Unable to cache conversion {key}.", exc)
            return
        location = getattr(self.store, "root", None)
        self.emitter.event(
            "cache_store",
            {"key": key, "location": str(location) if location is not None else None},
        )
        _log.debug("cached conversion %s", key)


def convert_markdown(
    content: Any,
    *,
    config: ConverterConfig | None = None,
    store: CacheStore | None = None,
    emitter: DiagnosticEmitter | None = None,
) -> dict[str, Any]:
    """Convert ``content`` and return the ``{"latex": ...}`` payload."""
    converter = MarkdownConverter(config, store=store, emitter=emitter)
    return converter.convert(content).to_dict()


__all__ = [
    "ConversionResult",
    "MarkdownConverter",
    "convert_markdown",
    "resolve_cache_directory",
]
