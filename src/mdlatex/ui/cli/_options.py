"""Shared Typer option definitions for CLI commands."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer


INPUTS_PANEL = "Input Handling"
RENDERING_PANEL = "Rendering"
CACHE_PANEL = "Cache"
OUTPUT_PANEL = "Output"
DIAGNOSTICS_PANEL = "Diagnostics"

InputPathArgument = Annotated[
    Path,
    typer.Argument(
        metavar="INPUT",
        help="Markdown source document, or '-' to read standard input.",
        dir_okay=False,
        rich_help_panel=INPUTS_PANEL,
    ),
]

OutputPathOption = Annotated[
    Path | None,
    typer.Option(
        "--output",
        "-o",
        help="Write the LaTeX document to this file instead of standard output.",
        dir_okay=False,
        rich_help_panel=OUTPUT_PANEL,
    ),
]

ConfigOption = Annotated[
    Path | None,
    typer.Option(
        "--config",
        "-c",
        help="YAML configuration file.",
        exists=True,
        dir_okay=False,
        readable=True,
        rich_help_panel=INPUTS_PANEL,
    ),
]

ThresholdOption = Annotated[
    int | None,
    typer.Option(
        "--threshold",
        min=1,
        help="Render documents longer than this many characters section by section.",
        rich_help_panel=RENDERING_PANEL,
    ),
]

TitleOption = Annotated[
    str | None,
    typer.Option(
        "--title",
        help="Title placed in the document preamble.",
        rich_help_panel=RENDERING_PANEL,
    ),
]

TrimCellSeparatorOption = Annotated[
    bool,
    typer.Option(
        "--trim-cell-separator",
        help="Drop the column separator emitted after the last cell of each table row.",
        rich_help_panel=RENDERING_PANEL,
    ),
]

CacheDirOption = Annotated[
    Path | None,
    typer.Option(
        "--cache-dir",
        help="Directory holding cached conversions.",
        file_okay=False,
        rich_help_panel=CACHE_PANEL,
    ),
]

NoCacheOption = Annotated[
    bool,
    typer.Option(
        "--no-cache",
        help="Neither read nor write the conversion cache.",
        rich_help_panel=CACHE_PANEL,
    ),
]

VerboseOption = Annotated[
    int,
    typer.Option(
        "--verbose",
        "-v",
        count=True,
        help="Increase CLI verbosity. Combine multiple times for additional diagnostics.",
        rich_help_panel=DIAGNOSTICS_PANEL,
    ),
]

DebugOption = Annotated[
    bool,
    typer.Option(
        "--debug",
        help="Show full tracebacks when an unexpected error occurs.",
        rich_help_panel=DIAGNOSTICS_PANEL,
    ),
]
