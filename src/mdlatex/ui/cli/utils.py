"""Input and output helpers shared by CLI commands."""

from __future__ import annotations

from pathlib import Path

import click


STDIN_MARKER = "-"


def read_source(source: Path) -> str:
    """Read Markdown from ``source``, or from standard input for ``-``.

    Undecodable input is reported as an :class:`OSError`, like a missing file.
    """
    try:
        if str(source) == STDIN_MARKER:
            return click.get_text_stream("stdin").read()
        return source.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise OSError(f"Failed to read Markdown input '{source}': {exc}") from exc


def write_output_file(target: Path, content: str) -> None:
    """Persist LaTeX content to disk, creating parent directories as needed."""
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
    except OSError as exc:  # pragma: no cover - filesystem errors
        raise OSError(f"Failed to write LaTeX output to '{target}': {exc}") from exc


__all__ = ["STDIN_MARKER", "read_source", "write_output_file"]
