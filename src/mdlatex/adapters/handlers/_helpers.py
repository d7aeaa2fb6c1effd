"""Internal helpers shared across handler modules."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, TypeVar, cast

from bs4.element import NavigableString, PageElement, Tag


NodeT = TypeVar("NodeT", bound=PageElement)


def mark_processed(node: NodeT) -> NodeT:
    """Mark a BeautifulSoup node as processed and return it for chaining."""
    cast(Any, node).processed = True  # type: ignore[attr-defined]
    return node


def replace_with_latex(element: Tag, latex: str) -> NavigableString:
    """Swap ``element`` for a LaTeX fragment and return the fragment."""
    fragment = mark_processed(NavigableString(latex))
    element.replace_with(fragment)
    return fragment


def coerce_attribute(value: Any) -> str | None:
    """Normalise a BeautifulSoup attribute value to a string when possible."""
    if isinstance(value, str):
        return value
    if isinstance(value, bytes):
        try:
            return value.decode("utf-8")
        except UnicodeDecodeError:
            return None
    if isinstance(value, Iterable):
        for item in value:
            if isinstance(item, str):
                return item
    return None


def gather_classes(value: Any) -> list[str]:
    """Return a list of classes extracted from a BeautifulSoup attribute."""
    if isinstance(value, str):
        return [value]
    if isinstance(value, Iterable) and not isinstance(value, (bytes, bytearray)):
        return [cast(str, item) for item in value if isinstance(item, str)]
    return []


def rendered_fragments(element: Tag) -> list[str]:
    """Return the non-blank string children of ``element`` in document order.

    Once the children of a container have been rendered they are plain
    strings; the whitespace emitted between HTML blocks is dropped.
    """
    return [
        str(child)
        for child in element.children
        if isinstance(child, NavigableString) and str(child).strip()
    ]
