from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import pytest

from mdlatex.adapters.latex.formatter import LaTeXFormatter
from mdlatex.adapters.latex.renderer import LaTeXRenderer
from mdlatex.core.chunking import ChunkedDocumentProcessor, split_sections
from mdlatex.core.config import ChunkingConfig, DocumentConfig


class StubRenderer:
    def __init__(self) -> None:
        self.calls: list[str] = []
        self.formatter = LaTeXFormatter()

    def render(self, text: str, *, emitter: Any = None) -> str:
        self.calls.append(text)
        return f"<{len(self.calls)}>"


class RecordingEmitter:
    debug_enabled = False

    def __init__(self) -> None:
        self.events: list[tuple[str, dict[str, Any]]] = []

    def warning(self, message: str, exc: BaseException | None = None) -> None:
        return

    def error(self, message: str, exc: BaseException | None = None) -> None:
        return

    def event(self, name: str, payload: Mapping[str, Any]) -> None:
        self.events.append((name, dict(payload)))


def _large_document(parts: int = 5, size: int = 8_000) -> str:
    filler = ("lorem ipsum dolor sit amet " * (size // 27 + 1))[:size]
    return "".join(f"# Part {index}\n\n{filler}\n\n" for index in range(1, parts + 1))


def test_sections_start_at_headings() -> None:
    text = "intro\n# One\nbody\n## Two\nmore\n"
    sections = split_sections(text)

    assert [section.text for section in sections] == [
        "intro\n",
        "# One\nbody\n",
        "## Two\nmore\n",
    ]
    assert [section.start for section in sections] == [0, 6, 17]
    assert sections[-1].end == len(text)


def test_sections_concatenate_to_the_source() -> None:
    text = _large_document(parts=3, size=100)
    assert "".join(section.text for section in split_sections(text)) == text


def test_document_starting_with_heading_has_no_empty_prefix() -> None:
    sections = split_sections("# Title\ntext\n")
    assert len(sections) == 1
    assert sections[0].start == 0


@pytest.mark.parametrize(
    "text",
    [
        "no headings here\n",
        "####### seven hashes\n",
        "#hashtag without space\n",
        "text with # inside\n",
        "  # indented heading\n",
    ],
)
def test_non_boundaries(text: str) -> None:
    assert len(split_sections(text)) == 1


def test_empty_text_yields_a_single_empty_section() -> None:
    sections = split_sections("")
    assert len(sections) == 1
    assert sections[0].text == ""


def test_small_documents_render_in_one_call() -> None:
    renderer = StubRenderer()
    processor = ChunkedDocumentProcessor(renderer)  # type: ignore[arg-type]
    text = "# A\n\ntext\n\n# B\n\nmore\n"

    body = processor.render_body(text)

    assert renderer.calls == [text]
    assert body == "<1>"


def test_threshold_is_exclusive() -> None:
    renderer = StubRenderer()
    text = "# A\nx\n# B\ny\n"
    processor = ChunkedDocumentProcessor(
        renderer,  # type: ignore[arg-type]
        chunking=ChunkingConfig(threshold=len(text)),
    )

    processor.render_body(text)

    assert len(renderer.calls) == 1


def test_large_documents_render_each_section() -> None:
    renderer = StubRenderer()
    emitter = RecordingEmitter()
    processor = ChunkedDocumentProcessor(renderer, emitter=emitter)  # type: ignore[arg-type]
    text = _large_document()

    body = processor.render_body(text)

    assert len(text) > processor.threshold
    assert len(renderer.calls) == 5
    assert body == "<1><2><3><4><5>"
    assert all(call.startswith("# Part ") for call in renderer.calls)
    assert emitter.events == [
        ("document_chunked", {"length": len(text), "sections": 5, "threshold": 30_000})
    ]


def test_large_documents_keep_every_heading() -> None:
    processor = ChunkedDocumentProcessor(LaTeXRenderer())
    latex = processor.process(_large_document())

    for index in range(1, 6):
        assert f"\\section{{Part {index}}}" in latex
    assert latex.count("\\begin{document}") == 1
    assert latex.endswith("\\end{document}\n")


def test_process_uses_configured_title() -> None:
    renderer = StubRenderer()
    processor = ChunkedDocumentProcessor(
        renderer,  # type: ignore[arg-type]
        document=DocumentConfig(title="Report"),
    )

    latex = processor.process("text")

    assert "\\title{Report}" in latex
    assert "<1>" in latex
