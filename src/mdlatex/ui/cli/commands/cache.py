"""Implementation of the ``mdlatex cache`` command group."""

from __future__ import annotations

import typer

from mdlatex.core.cache import FileCacheStore
from mdlatex.core.config import CacheConfig
from mdlatex.core.conversion import resolve_cache_directory
from mdlatex.core.exceptions import CacheStorageError

from .._options import CacheDirOption
from ..state import emit_error, get_cli_state


cache_app = typer.Typer(help="Inspect and manage the conversion cache.", no_args_is_help=True)


@cache_app.command("clear")
def clear(cache_dir: CacheDirOption = None) -> None:
    """Remove every cached conversion."""
    directory = resolve_cache_directory(CacheConfig(directory=cache_dir))
    store = FileCacheStore(directory)
    try:
        removed = store.clear()
    except CacheStorageError as exc:
        emit_error(str(exc), exception=exc)
        raise typer.Exit(code=1) from exc
    get_cli_state().console.print(f"Removed {removed} cached conversion(s) from {directory}")


@cache_app.command("path")
def path(cache_dir: CacheDirOption = None) -> None:
    """Print the directory holding cached conversions."""
    typer.echo(str(resolve_cache_directory(CacheConfig(directory=cache_dir))))


__all__ = ["cache_app", "clear", "path"]
