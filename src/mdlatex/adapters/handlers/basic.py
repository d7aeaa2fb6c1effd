"""Built-in baseline handlers used by the renderer."""

from __future__ import annotations

from bs4.element import NavigableString, Tag

from mdlatex.core.context import RenderContext
from mdlatex.core.rules import RenderPhase, renders

from ..markdown_extensions.math import MATH_CLASS
from ._helpers import gather_classes, replace_with_latex


VERBATIM_TAGS = frozenset({"pre", "code"})


def _is_verbatim(node: NavigableString) -> bool:
    for parent in node.parents:
        if parent.name in VERBATIM_TAGS:
            return True
        if MATH_CLASS in gather_classes(parent.get("class")):
            return True
    return False


@renders(phase=RenderPhase.PRE, priority=-100, auto_mark=False, name="escape_text")
def escape_text(root: Tag, context: RenderContext) -> None:
    """Escape every leaf text node outside code and math payloads.

    This runs once, before any rule emits LaTeX, so the fragments produced
    later are never escaped a second time.
    """
    # Comments and other NavigableString subclasses never reach the output.
    leaves = [
        node
        for node in root.find_all(string=True)
        if type(node) is NavigableString and not _is_verbatim(node)
    ]
    for node in leaves:
        escaped = context.formatter.escape(str(node))
        if escaped != node:
            node.replace_with(NavigableString(escaped))


@renders("hr", phase=RenderPhase.BLOCK, name="render_horizontal_rule")
def render_horizontal_rule(element: Tag, context: RenderContext) -> None:
    """Render ``<hr>`` nodes as LaTeX horizontal rules."""
    latex = context.formatter.horizontal_rule()
    replace_with_latex(element, latex)


@renders("br", phase=RenderPhase.INLINE, name="line_breaks")
def replace_line_breaks(element: Tag, _context: RenderContext) -> None:
    """Convert ``<br>`` tags into explicit LaTeX line breaks."""
    replace_with_latex(element, "\\\\\n")


@renders(
    "h1",
    "h2",
    "h3",
    "h4",
    "h5",
    "h6",
    phase=RenderPhase.POST,
    name="render_headings",
    after_children=True,
)
def render_headings(element: Tag, context: RenderContext) -> None:
    """Convert HTML headings to LaTeX sectioning commands."""
    text = element.get_text(strip=False).strip()
    level = int(element.name[1:])
    latex = context.formatter.heading(text=text, level=level)
    replace_with_latex(element, latex)
    context.state.add_heading(level=level, text=text)


@renders("p", phase=RenderPhase.POST, name="paragraphs", after_children=True)
def render_paragraphs(element: Tag, context: RenderContext) -> None:
    """Render paragraphs followed by a blank line."""
    text = element.get_text(strip=False).strip("\n")
    if not text.strip():
        element.decompose()
        return
    latex = context.formatter.paragraph(text=text)
    replace_with_latex(element, latex)
