"""Handlers for fenced code blocks and inline code."""

from __future__ import annotations

from bs4.element import Tag

from mdlatex.core.context import RenderContext
from mdlatex.core.rules import RenderPhase, renders

from ._helpers import gather_classes, replace_with_latex


_LANGUAGE_PREFIXES = ("language-", "lang-")


def _extract_language(element: Tag) -> str | None:
    for class_name in gather_classes(element.get("class")):
        for prefix in _LANGUAGE_PREFIXES:
            if class_name.startswith(prefix) and len(class_name) > len(prefix):
                return class_name[len(prefix) :]
    return None


@renders("pre", phase=RenderPhase.PRE, name="code_blocks", nestable=False)
def render_code_blocks(element: Tag, context: RenderContext) -> None:
    """Render ``<pre><code>`` blocks as listings or verbatim environments.

    The code body is emitted byte for byte: verbatim environments need no
    escaping.
    """
    code = element.find("code")
    target = code if isinstance(code, Tag) else element
    language = _extract_language(target) or _extract_language(element)
    text = target.get_text(strip=False)

    latex = context.formatter.codeblock(code=text, language=language)
    replace_with_latex(element, latex)
    if language:
        context.state.record_code_language(language)


@renders("code", phase=RenderPhase.PRE, name="inline_code", nestable=False)
def render_inline_code(element: Tag, context: RenderContext) -> None:
    """Render inline code spans inside ``\\texttt``."""
    if element.find_parent("pre") is not None:
        return
    text = element.get_text(strip=False)
    latex = context.formatter.codeinlinett(text)
    replace_with_latex(element, latex)
