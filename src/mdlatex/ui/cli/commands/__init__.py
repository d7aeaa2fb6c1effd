"""CLI command implementations exposed via ``mdlatex.ui.cli``."""

from __future__ import annotations

from .cache import cache_app
from .convert import convert
from .inspection import key, sections


__all__ = ["cache_app", "convert", "key", "sections"]
