"""Rendering context primitives shared across the LaTeX pipeline."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from .config import RenderOptions


if TYPE_CHECKING:  # pragma: no cover - typing only
    from mdlatex.adapters.latex.formatter import LaTeXFormatter

    from .rules import RenderPhase


@dataclass(slots=True)
class DocumentState:
    """In-memory state accumulated while rendering a document."""

    headings: list[dict[str, Any]] = field(default_factory=list)
    code_languages: list[str] = field(default_factory=list)
    figures: int = 0
    tables: int = 0

    def add_heading(self, *, level: int, text: str) -> None:
        """Track heading metadata in document order."""
        self.headings.append({"level": level, "text": text})

    def record_code_language(self, language: str) -> None:
        """Remember listing languages in order of first use."""
        if language not in self.code_languages:
            self.code_languages.append(language)


@dataclass
class RenderContext:
    """Shared context passed to every rule during rendering."""

    formatter: LaTeXFormatter
    document: Any
    options: RenderOptions = field(default_factory=RenderOptions)
    state: DocumentState = field(default_factory=DocumentState)
    runtime: dict[str, Any] = field(default_factory=dict)
    phase: RenderPhase | None = None

    _processed_nodes: defaultdict[int, set[int]] = field(
        default_factory=lambda: defaultdict(set), init=False
    )
    _skip_children: defaultdict[int, set[int]] = field(
        default_factory=lambda: defaultdict(set), init=False
    )

    def enter_phase(self, phase: RenderPhase) -> None:
        """Mark the current phase."""
        self.phase = phase
        self._skip_children[phase.value].clear()

    def mark_processed(self, node: Any, *, phase: RenderPhase | None = None) -> None:
        """Flag a node as already transformed for the selected phase."""
        label = phase or self.phase
        if label is None:
            return
        self._processed_nodes[label.value].add(id(node))

    def is_processed(self, node: Any, *, phase: RenderPhase | None = None) -> bool:
        """Check whether a node has been processed in the given phase."""
        label = phase or self.phase
        if label is None:
            return False
        return id(node) in self._processed_nodes[label.value]

    def suppress_children(self, node: Any, *, phase: RenderPhase | None = None) -> None:
        """Prevent traversal of node children for the active phase."""
        label = phase or self.phase
        if label is None:
            return
        self._skip_children[label.value].add(id(node))

    def should_skip_children(self, node: Any, *, phase: RenderPhase | None = None) -> bool:
        """Check whether children should be skipped during traversal."""
        label = phase or self.phase
        if label is None:
            return False
        return id(node) in self._skip_children[label.value]
