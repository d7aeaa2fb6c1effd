"""Handlers for structural blocks: lists, quotations and tables."""

from __future__ import annotations

from bs4.element import Tag

from mdlatex.core.context import RenderContext
from mdlatex.core.exceptions import InvalidNodeError
from mdlatex.core.rules import RenderPhase, renders

from ._helpers import rendered_fragments, replace_with_latex


@renders("li", phase=RenderPhase.POST, name="list_items", after_children=True)
def render_list_items(element: Tag, context: RenderContext) -> None:
    """Render list items as ``\\item`` fragments."""
    text = element.get_text(strip=False).strip()
    latex = context.formatter.item(text=text)
    replace_with_latex(element, latex)


@renders("ul", "ol", phase=RenderPhase.POST, name="lists", after_children=True)
def render_lists(element: Tag, context: RenderContext) -> None:
    """Wrap rendered items in ``itemize`` or ``enumerate``."""
    items = rendered_fragments(element)
    latex = context.formatter.list(items=items, ordered=element.name == "ol")
    replace_with_latex(element, latex)


@renders("blockquote", phase=RenderPhase.POST, name="blockquotes", after_children=True)
def render_blockquotes(element: Tag, context: RenderContext) -> None:
    """Convert blockquote elements into ``quotation`` environments."""
    text = element.get_text(strip=False).strip()
    latex = context.formatter.blockquote(text)
    replace_with_latex(element, latex)


@renders("th", "td", phase=RenderPhase.POST, name="table_cells", after_children=True)
def render_table_cells(element: Tag, context: RenderContext) -> None:
    """Render a cell followed by the column separator."""
    text = element.get_text(strip=False).strip()
    latex = context.formatter.table_cell(text=text)
    replace_with_latex(element, latex)


@renders("tr", phase=RenderPhase.POST, name="table_rows", after_children=True)
def render_table_rows(element: Tag, context: RenderContext) -> None:
    """Join rendered cells into a terminated row."""
    latex = context.formatter.table_row(cells=rendered_fragments(element))
    replace_with_latex(element, latex)


@renders("table", phase=RenderPhase.POST, name="tables", after_children=True)
def render_tables(element: Tag, context: RenderContext) -> None:
    """Render a table from its pre-rendered header and body rows.

    Without a ``<thead>`` the first row acts as the header.
    """
    head = element.find("thead")
    header_rows = rendered_fragments(head) if isinstance(head, Tag) else []
    body_rows: list[str] = []
    for section in element.find_all("tbody"):
        body_rows.extend(rendered_fragments(section))
    body_rows.extend(rendered_fragments(element))
    if not header_rows and body_rows:
        header_rows.append(body_rows.pop(0))
    if not header_rows:
        raise InvalidNodeError("Table has no rows to render.")

    latex = context.formatter.table(header="".join(header_rows), body=body_rows)
    replace_with_latex(element, latex)
    context.state.tables += 1
