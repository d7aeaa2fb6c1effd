"""Inline formatting handlers."""

from __future__ import annotations

from bs4.element import Tag

from mdlatex.core.context import RenderContext
from mdlatex.core.rules import RenderPhase, renders

from ..markdown_extensions.math import MATH_CLASS
from ._helpers import coerce_attribute, gather_classes, replace_with_latex


@renders("span", "div", phase=RenderPhase.PRE, name="math", auto_mark=False, nestable=False)
def render_math(element: Tag, context: RenderContext) -> None:
    """Emit math carriers verbatim."""
    if MATH_CLASS not in gather_classes(element.get("class")):
        return
    text = element.get_text(strip=False)
    replace_with_latex(element, text)
    context.mark_processed(element)


@renders("strong", "b", phase=RenderPhase.INLINE, name="inline_strong", after_children=True)
def render_inline_strong(element: Tag, context: RenderContext) -> None:
    """Render ``<strong>`` tags using bold template."""
    text = element.get_text(strip=False)
    latex = context.formatter.strong(text=text)
    replace_with_latex(element, latex)


@renders("em", "i", phase=RenderPhase.INLINE, name="inline_emphasis", after_children=True)
def render_inline_emphasis(element: Tag, context: RenderContext) -> None:
    """Render ``<em>`` tags using emphasis template."""
    text = element.get_text(strip=False)
    latex = context.formatter.italic(text=text)
    replace_with_latex(element, latex)


@renders("a", phase=RenderPhase.INLINE, name="links", after_children=True)
def render_links(element: Tag, context: RenderContext) -> None:
    """Render hyperlinks with ``\\href``; anchors without target keep their text."""
    text = element.get_text(strip=False)
    href = coerce_attribute(element.get("href"))
    if not href:
        replace_with_latex(element, text)
        return
    latex = context.formatter.href(text=text, url=href)
    replace_with_latex(element, latex)
