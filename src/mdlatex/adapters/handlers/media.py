"""Image handlers."""

from __future__ import annotations

from bs4.element import Tag

from mdlatex.core.context import RenderContext
from mdlatex.core.rules import RenderPhase, renders

from ._helpers import coerce_attribute, replace_with_latex


@renders("img", phase=RenderPhase.INLINE, name="images")
def render_images(element: Tag, context: RenderContext) -> None:
    """Render images as centred figures.

    The caption is the alt text, then the title attribute, then empty.
    """
    src = coerce_attribute(element.get("src")) or ""
    caption = (
        coerce_attribute(element.get("alt")) or coerce_attribute(element.get("title")) or ""
    )
    latex = context.formatter.figure(path=src, caption=context.formatter.escape(caption))
    replace_with_latex(element, latex)
    context.state.figures += 1
