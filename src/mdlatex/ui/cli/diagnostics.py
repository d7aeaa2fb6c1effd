"""Diagnostic emitter printing conversion events on the CLI consoles."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from mdlatex.core.diagnostics import format_event_message

from .state import CLIState, emit_error, emit_warning, get_cli_state, render_message


class CliEmitter:
    """Route core diagnostics to the console of one CLI state.

    Events with a readable summary are shown with ``-v``. The remaining
    events (``cache_miss``, ``parser_fallback``) are shown raw with ``-vv``.
    """

    def __init__(self, state: CLIState | None = None) -> None:
        self._state = state or get_cli_state()

    @property
    def debug_enabled(self) -> bool:
        return self._state.show_tracebacks

    def warning(self, message: str, exc: BaseException | None = None) -> None:
        emit_warning(message, exception=exc, state=self._state)

    def error(self, message: str, exc: BaseException | None = None) -> None:
        emit_error(message, exception=exc, state=self._state)

    def event(self, name: str, payload: Mapping[str, Any]) -> None:
        message = format_event_message(name, payload)
        if message:
            render_message("info", message, state=self._state)
            return
        details = ", ".join(f"{key}={value}" for key, value in payload.items())
        render_message("debug", f"{name}: {details}", state=self._state)


__all__ = ["CliEmitter"]
