"""Console state shared by the CLI commands of one invocation."""

from __future__ import annotations

from contextvars import ContextVar
from dataclasses import dataclass, field
import sys
from typing import TYPE_CHECKING

import click
import typer

from mdlatex.core.exceptions import exception_hint, exception_messages


if TYPE_CHECKING:
    from rich.console import Console

__all__ = [
    "CLIState",
    "debug_enabled",
    "emit_error",
    "emit_warning",
    "get_cli_state",
    "render_message",
    "set_cli_state",
]

# Minimum verbosity at which each message level is shown.
_LEVEL_VERBOSITY = {"debug": 2, "info": 1, "warning": 0, "error": 0}


@dataclass(slots=True)
class CLIState:
    """Verbosity, traceback policy and consoles of the running command."""

    verbosity: int = 0
    show_tracebacks: bool = False
    _console: Console | None = field(default=None, init=False, repr=False)
    _err_console: Console | None = field(default=None, init=False, repr=False)

    @property
    def console(self) -> Console:
        """Console bound to the current standard output."""
        from rich.console import Console

        if self._console is None or self._console.file is not sys.stdout:
            self._console = Console(file=sys.stdout)
        return self._console

    @property
    def err_console(self) -> Console:
        """Console bound to the current standard error, without highlighting."""
        from rich.console import Console

        if self._err_console is None or self._err_console.file is not sys.stderr:
            self._err_console = Console(file=sys.stderr, highlight=False)
        return self._err_console

    def shows(self, level: str) -> bool:
        """Return whether messages of ``level`` pass the verbosity filter."""
        return self.verbosity >= _LEVEL_VERBOSITY.get(level, 0)


_STATE_VAR: ContextVar[CLIState | None] = ContextVar("mdlatex_cli_state", default=None)


def get_cli_state(ctx: typer.Context | click.Context | None = None) -> CLIState:
    """Return the state stored on the root Click context.

    Outside a Click invocation the state lives in a context variable.
    """
    if ctx is None:
        ctx = click.get_current_context(silent=True)

    if ctx is None:
        state = _STATE_VAR.get()
        if state is None:
            state = CLIState()
            _STATE_VAR.set(state)
        return state

    root = ctx.find_root()
    if not isinstance(root.obj, CLIState):
        root.obj = CLIState()
    _STATE_VAR.set(root.obj)
    return root.obj


def set_cli_state(
    *,
    ctx: typer.Context | None = None,
    verbosity: int | None = None,
    debug: bool | None = None,
) -> CLIState:
    """Apply command options to the current state and return it."""
    state = get_cli_state(ctx)
    if verbosity is not None:
        state.verbosity = max(0, verbosity)
    if debug is not None:
        state.show_tracebacks = debug
    return state


def _exception_details(message: str, exception: BaseException, verbosity: int) -> list[str]:
    lines: list[str] = []
    hint = exception_hint(exception)
    if hint and hint not in message:
        lines.append(hint)
    lines.append(f"type: {type(exception).__name__}")
    causes = exception_messages(exception)[1:]
    if verbosity >= 2 and causes:
        lines.append("caused by:")
        lines.extend(f"  {cause}" for cause in causes)
    return lines


def render_message(
    level: str,
    message: str,
    *,
    exception: BaseException | None = None,
    state: CLIState | None = None,
) -> None:
    """Print ``message`` on stderr when ``level`` passes the verbosity filter.

    ``debug`` and ``info`` messages are plain log lines. Warnings and errors
    are styled, and with ``-v`` they list the exception type and its most
    specific cause. ``-vv`` adds the whole cause chain.
    """
    state = state or get_cli_state()
    if not state.shows(level):
        return

    if level in {"debug", "info"}:
        state.err_console.log(message, style="dim" if level == "debug" else None)
        return

    from rich.text import Text

    style = "red" if level == "error" else "yellow"
    text = Text.assemble((f"{level}: ", f"bold {style}"), (message, style))
    if exception is not None and state.verbosity >= 1:
        text.append("\n")
        text.append("\n".join(_exception_details(message, exception, state.verbosity)), style=style)
    state.err_console.print(text)


def emit_warning(
    message: str, *, exception: BaseException | None = None, state: CLIState | None = None
) -> None:
    """Report a recoverable problem on stderr."""
    render_message("warning", message, exception=exception, state=state)


def emit_error(
    message: str, *, exception: BaseException | None = None, state: CLIState | None = None
) -> None:
    """Report a failure on stderr."""
    render_message("error", message, exception=exception, state=state)


def debug_enabled() -> bool:
    """Return whether unexpected errors should propagate with their traceback."""
    return get_cli_state().show_tracebacks
