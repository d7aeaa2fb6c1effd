"""Render rules turning the parsed Markdown tree into LaTeX fragments."""

from __future__ import annotations

from mdlatex.core.rules import RuleSet

from . import basic, blocks, code, inline, media


BUILTIN_HANDLER_MODULES = (basic, code, inline, media, blocks)


def default_rule_set() -> RuleSet:
    """Return a fresh rule set holding every built-in rule."""
    return RuleSet.from_modules(*BUILTIN_HANDLER_MODULES)


__all__ = ["BUILTIN_HANDLER_MODULES", "default_rule_set"]
