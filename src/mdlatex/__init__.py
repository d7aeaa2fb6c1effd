"""Primary public API for mdlatex."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version as _pkg_version

from mdlatex.adapters.handlers import default_rule_set
from mdlatex.adapters.latex.formatter import LaTeXFormatter
from mdlatex.adapters.latex.renderer import LaTeXRenderer
from mdlatex.adapters.latex.utils import escape_latex_chars
from mdlatex.core.cache import (
    CacheEntry,
    CacheStore,
    FileCacheStore,
    MemoryCacheStore,
    cache_key,
)
from mdlatex.core.chunking import ChunkedDocumentProcessor, DocumentSection, split_sections
from mdlatex.core.config import ConverterConfig, RenderOptions, load_config
from mdlatex.core.context import DocumentState, RenderContext
from mdlatex.core.conversion import ConversionResult, MarkdownConverter, convert_markdown
from mdlatex.core.exceptions import (
    CacheStorageError,
    ConversionError,
    ConversionInputError,
    MarkdownParseError,
    MdLatexError,
)
from mdlatex.core.math import preprocess_math
from mdlatex.core.rules import RenderPhase, RuleSet, renders
from mdlatex.core.wrapper import wrap_document


try:
    __version__ = _pkg_version("mdlatex")
except PackageNotFoundError:
    __version__ = "0.0.0"

__all__ = [
    "CacheEntry",
    "CacheStorageError",
    "CacheStore",
    "ChunkedDocumentProcessor",
    "ConversionError",
    "ConversionInputError",
    "ConversionResult",
    "ConverterConfig",
    "DocumentSection",
    "DocumentState",
    "FileCacheStore",
    "LaTeXFormatter",
    "LaTeXRenderer",
    "MarkdownConverter",
    "MarkdownParseError",
    "MdLatexError",
    "MemoryCacheStore",
    "RenderContext",
    "RenderOptions",
    "RenderPhase",
    "RuleSet",
    "__version__",
    "cache_key",
    "convert_markdown",
    "default_rule_set",
    "escape_latex_chars",
    "load_config",
    "preprocess_math",
    "renders",
    "split_sections",
    "wrap_document",
]
