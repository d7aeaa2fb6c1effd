"""Commands exposing intermediate results: cache keys and section splits."""

from __future__ import annotations

from pathlib import Path

import typer

from mdlatex.core.cache import cache_key
from mdlatex.core.chunking import split_sections
from mdlatex.core.config import ConfigError, load_config

from .._options import ConfigOption, InputPathArgument, ThresholdOption
from ..state import emit_error, get_cli_state
from ..utils import read_source
from .convert import build_config


_PREVIEW_WIDTH = 48


def _read_or_exit(input_path: Path) -> str:
    try:
        return read_source(input_path)
    except OSError as exc:
        emit_error(str(exc), exception=exc)
        raise typer.Exit(code=1) from exc


def key(
    input_path: InputPathArgument,
    config: ConfigOption = None,
) -> None:
    """Print the cache key of a Markdown document."""
    try:
        settings = load_config(config)
    except ConfigError as exc:
        emit_error(str(exc), exception=exc)
        raise typer.Exit(code=1) from exc

    source = _read_or_exit(input_path)
    typer.echo(cache_key(source, prefix=settings.cache.prefix))


def sections(
    input_path: InputPathArgument,
    config: ConfigOption = None,
    threshold: ThresholdOption = None,
) -> None:
    """Show how a Markdown document is split at its headings."""
    from rich import box
    from rich.table import Table
    from rich.text import Text

    try:
        settings = build_config(config, threshold=threshold)
    except ConfigError as exc:
        emit_error(str(exc), exception=exc)
        raise typer.Exit(code=1) from exc

    source = _read_or_exit(input_path)
    parts = split_sections(source)
    limit = settings.chunking.threshold
    chunked = len(source) > limit

    table = Table(
        title="Document Sections",
        caption=(
            f"{len(source)} characters, threshold {limit}: "
            + ("rendered per section" if chunked else "rendered in one pass")
        ),
        box=box.SQUARE,
        header_style="bold cyan",
    )
    table.add_column("#", justify="right", style="magenta")
    table.add_column("Start", justify="right")
    table.add_column("End", justify="right")
    table.add_column("First line")

    for section in parts:
        first_line = section.text.split("\n", 1)[0]
        if len(first_line) > _PREVIEW_WIDTH:
            first_line = first_line[: _PREVIEW_WIDTH - 1] + "…"
        table.add_row(
            str(section.index), str(section.start), str(section.end), Text(first_line)
        )

    get_cli_state().console.print(table)


__all__ = ["key", "sections"]
