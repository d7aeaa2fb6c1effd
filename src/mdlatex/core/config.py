"""Configuration models used by the converter.

RenderOptions

`heading_commands` (`dict[int, str]`)
: Sectioning command emitted for each Markdown heading level. Levels 5 and 6
  both map to `\\subparagraph` by default; override level 6 to change it.

`trim_table_cell_separator` (`bool`)
: Every table cell is emitted followed by ` & `, including the last one of a
  row. When `True`, the row rule removes that trailing separator. The default
  keeps it, which yields one extra empty column per table.

`image_width` (`str`)
: Width passed to `\\includegraphics` inside figures.

`plain_code_languages` (`list[str]`)
: Fence languages rendered as `verbatim` instead of `lstlisting`.

`legacy_latex_accents` (`bool`)
: Encode non-ASCII characters of escaped text as LaTeX accent macros.

`parser` (`str`)
: BeautifulSoup tree builder used for the intermediate HTML.

`markdown_extensions` (`list[str]`)
: Additional Python-Markdown extensions enabled on top of the defaults.

ChunkingConfig

`threshold` (`int`)
: Documents longer than this many characters are rendered section by section.

CacheConfig

`enabled` (`bool`)
: Toggle the conversion cache.

`directory` (`Path | None`)
: Directory holding cache entries. Resolved from the environment when unset.

`prefix` (`str`)
: Namespace tag prepended to every cache key.

DocumentConfig

`title` (`str`)
: Title placed in the preamble of wrapped documents.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
import yaml

from .exceptions import MdLatexError


DEFAULT_HEADING_COMMANDS: dict[int, str] = {
    1: "section",
    2: "subsection",
    3: "subsubsection",
    4: "paragraph",
    5: "subparagraph",
    6: "subparagraph",
}

DEFAULT_CHUNK_THRESHOLD = 30_000


class ConfigError(MdLatexError):
    """Raised when a configuration file cannot be loaded or validated."""


class RenderOptions(BaseModel):
    """Options consumed by the render rules."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    heading_commands: dict[int, str] = Field(
        default_factory=lambda: dict(DEFAULT_HEADING_COMMANDS)
    )
    trim_table_cell_separator: bool = False
    image_width: str = r"0.8\textwidth"
    plain_code_languages: list[str] = Field(default_factory=lambda: ["text"])
    legacy_latex_accents: bool = False
    parser: str = "html.parser"
    markdown_extensions: list[str] = Field(default_factory=list)

    @field_validator("heading_commands")
    @classmethod
    def _complete_levels(cls, value: dict[int, str]) -> dict[int, str]:
        merged = dict(DEFAULT_HEADING_COMMANDS)
        for level, command in value.items():
            if level not in DEFAULT_HEADING_COMMANDS:
                msg = f"Heading level must be between 1 and 6, got {level}"
                raise ValueError(msg)
            merged[level] = command.lstrip("\\")
        return merged

    def heading_command(self, level: int) -> str:
        """Return the sectioning command name for a heading level."""
        return self.heading_commands.get(level, DEFAULT_HEADING_COMMANDS[6])


class ChunkingConfig(BaseModel):
    """Large document splitting policy."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    threshold: int = Field(default=DEFAULT_CHUNK_THRESHOLD, gt=0)


class CacheConfig(BaseModel):
    """Conversion cache settings."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    enabled: bool = True
    directory: Path | None = None
    prefix: str = "md-"


class DocumentConfig(BaseModel):
    """Settings of the wrapping LaTeX document."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    title: str = "Converted Document"


class ConverterConfig(BaseModel):
    """Top-level configuration of :class:`~mdlatex.core.conversion.MarkdownConverter`."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    render: RenderOptions = Field(default_factory=RenderOptions)
    chunking: ChunkingConfig = Field(default_factory=ChunkingConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    document: DocumentConfig = Field(default_factory=DocumentConfig)

    def with_overrides(self, **sections: dict[str, Any]) -> ConverterConfig:
        """Return a copy where the named sections are updated with ``sections``."""
        payload = self.model_dump()
        for section, values in sections.items():
            if not values:
                continue
            payload.setdefault(section, {}).update(values)
        return ConverterConfig.model_validate(payload)


def load_config(path: Path | str | None = None) -> ConverterConfig:
    """Load a YAML configuration file, returning defaults when ``path`` is None."""
    if path is None:
        return ConverterConfig()

    source = Path(path)
    try:
        raw = source.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Unable to read configuration file '{source}': {exc}") from exc

    try:
        payload = yaml.safe_load(raw) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in '{source}': {exc}") from exc

    if not isinstance(payload, dict):
        raise ConfigError(f"Configuration file '{source}' must contain a mapping.")

    try:
        return ConverterConfig.model_validate(payload)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration in '{source}': {exc}") from exc


__all__ = [
    "DEFAULT_CHUNK_THRESHOLD",
    "DEFAULT_HEADING_COMMANDS",
    "CacheConfig",
    "ChunkingConfig",
    "ConfigError",
    "ConverterConfig",
    "DocumentConfig",
    "RenderOptions",
    "load_config",
]
