"""Implementation of the ``mdlatex convert`` command."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import typer

from mdlatex.core.config import ConfigError, ConverterConfig, load_config
from mdlatex.core.conversion import MarkdownConverter
from mdlatex.core.exceptions import ConversionError, ConversionInputError

from .._options import (
    CacheDirOption,
    ConfigOption,
    DebugOption,
    InputPathArgument,
    NoCacheOption,
    OutputPathOption,
    ThresholdOption,
    TitleOption,
    TrimCellSeparatorOption,
    VerboseOption,
)
from ..diagnostics import CliEmitter
from ..state import debug_enabled, emit_error, set_cli_state
from ..utils import read_source, write_output_file


def build_config(
    config_path: Path | None,
    *,
    cache_dir: Path | None = None,
    no_cache: bool = False,
    threshold: int | None = None,
    title: str | None = None,
    trim_cell_separator: bool = False,
) -> ConverterConfig:
    """Load the configuration file and apply command-line overrides on top."""
    settings = load_config(config_path)

    render: dict[str, Any] = {}
    if trim_cell_separator:
        render["trim_table_cell_separator"] = True
    cache: dict[str, Any] = {}
    if cache_dir is not None:
        cache["directory"] = cache_dir
    if no_cache:
        cache["enabled"] = False
    chunking: dict[str, Any] = {}
    if threshold is not None:
        chunking["threshold"] = threshold
    document: dict[str, Any] = {}
    if title is not None:
        document["title"] = title

    return settings.with_overrides(
        render=render, cache=cache, chunking=chunking, document=document
    )


def convert(
    ctx: typer.Context,
    input_path: InputPathArgument,
    output: OutputPathOption = None,
    config: ConfigOption = None,
    cache_dir: CacheDirOption = None,
    no_cache: NoCacheOption = False,
    threshold: ThresholdOption = None,
    title: TitleOption = None,
    trim_cell_separator: TrimCellSeparatorOption = False,
    verbose: VerboseOption = 0,
    debug: DebugOption = False,
) -> None:
    """Convert a Markdown document into a complete LaTeX document."""
    state = set_cli_state(ctx=ctx, verbosity=verbose, debug=debug)

    try:
        settings = build_config(
            config,
            cache_dir=cache_dir,
            no_cache=no_cache,
            threshold=threshold,
            title=title,
            trim_cell_separator=trim_cell_separator,
        )
    except ConfigError as exc:
        emit_error(str(exc), exception=exc)
        raise typer.Exit(code=1) from exc

    try:
        source = read_source(input_path)
    except OSError as exc:
        emit_error(str(exc), exception=exc)
        raise typer.Exit(code=1) from exc

    converter = MarkdownConverter(settings, emitter=CliEmitter(state=state))
    try:
        result = converter.convert(source)
    except ConversionInputError as exc:
        emit_error(str(exc), exception=exc)
        raise typer.Exit(code=1) from exc
    except ConversionError as exc:
        if debug_enabled():
            raise
        emit_error(str(exc), exception=exc)
        raise typer.Exit(code=1) from exc

    if output is None:
        typer.echo(result.latex, nl=False)
        return

    try:
        write_output_file(output, result.latex)
    except OSError as exc:
        emit_error(str(exc), exception=exc)
        raise typer.Exit(code=1) from exc

    origin = "cache" if result.cached else "renderer"
    state.err_console.print(f"[cyan]LaTeX written to[/] {output} [dim]({origin})[/]")


__all__ = ["build_config", "convert"]
