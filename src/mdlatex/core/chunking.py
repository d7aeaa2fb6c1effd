"""Split oversized Markdown documents at headings and render them piecewise.

Sections are rendered without shared state: a list or table that is still
open when a heading starts a new section is closed at the section boundary.
Headings inside fenced code blocks are split points too.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
import re
from typing import TYPE_CHECKING

from .config import ChunkingConfig, DocumentConfig
from .diagnostics import DiagnosticEmitter, ensure_emitter
from .wrapper import wrap_document


if TYPE_CHECKING:  # pragma: no cover - typing only
    from mdlatex.adapters.latex.renderer import LaTeXRenderer


_log = logging.getLogger(__name__)

HEADING_BOUNDARY = re.compile(r"^#{1,6}\s", re.MULTILINE)


@dataclass(frozen=True, slots=True)
class DocumentSection:
    """Contiguous slice of a source document starting at a heading or at 0."""

    index: int
    start: int
    text: str

    @property
    def end(self) -> int:
        return self.start + len(self.text)


def split_sections(text: str) -> list[DocumentSection]:
    """Split ``text`` before every line that starts with a Markdown heading.

    Joining the ``text`` of the returned sections gives back ``text``.
    """
    boundaries = [match.start() for match in HEADING_BOUNDARY.finditer(text)]
    if not boundaries or boundaries[0] != 0:
        boundaries.insert(0, 0)
    boundaries.append(len(text))

    sections: list[DocumentSection] = []
    for start, end in zip(boundaries, boundaries[1:]):
        if start == end and sections:
            continue
        sections.append(DocumentSection(index=len(sections), start=start, text=text[start:end]))
    return sections


class ChunkedDocumentProcessor:
    """Render whole documents, splitting them when they exceed the threshold."""

    def __init__(
        self,
        renderer: LaTeXRenderer | None = None,
        *,
        chunking: ChunkingConfig | None = None,
        document: DocumentConfig | None = None,
        emitter: DiagnosticEmitter | None = None,
    ) -> None:
        if renderer is None:
            from mdlatex.adapters.latex.renderer import LaTeXRenderer

            renderer = LaTeXRenderer()
        self.renderer = renderer
        self.chunking = chunking or ChunkingConfig()
        self.document = document or DocumentConfig()
        self.emitter = ensure_emitter(emitter)

    @property
    def threshold(self) -> int:
        return self.chunking.threshold

    def sections_for(self, text: str) -> list[DocumentSection]:
        """Return the units rendered for ``text``: one, or one per section."""
        if len(text) > self.threshold:
            return split_sections(text)
        return [DocumentSection(index=0, start=0, text=text)]

    def render_body(self, text: str, sections: list[DocumentSection] | None = None) -> str:
        """Render ``text`` into a LaTeX body without the document preamble.

        ``sections`` defaults to :meth:`sections_for` of ``text``.
        """
        if sections is None:
            sections = self.sections_for(text)
        if len(sections) > 1:
            self.emitter.event(
                "document_chunked",
                {"length": len(text), "sections": len(sections), "threshold": self.threshold},
            )
        _log.debug("rendering %d section(s) of %d characters", len(sections), len(text))
        return "".join(
            self.renderer.render(section.text, emitter=self.emitter) for section in sections
        )

    def process(self, text: str, sections: list[DocumentSection] | None = None) -> str:
        """Render ``text`` and wrap it into a complete document."""
        body = self.render_body(text, sections)
        return wrap_document(body, title=self.document.title, formatter=self.renderer.formatter)


__all__ = [
    "HEADING_BOUNDARY",
    "ChunkedDocumentProcessor",
    "DocumentSection",
    "split_sections",
]
