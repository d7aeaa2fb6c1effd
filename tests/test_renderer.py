from __future__ import annotations

from typing import Any

import pytest

from mdlatex.adapters.latex.renderer import LaTeXRenderer
from mdlatex.core.config import RenderOptions
from mdlatex.core.context import DocumentState
from mdlatex.core.exceptions import InvalidNodeError, LatexRenderingError
from mdlatex.core.rules import RenderPhase, renders


@pytest.fixture
def renderer() -> LaTeXRenderer:
    return LaTeXRenderer(RenderOptions(parser="html.parser"))


@pytest.mark.parametrize(
    ("level", "command"),
    [
        (1, "section"),
        (2, "subsection"),
        (3, "subsubsection"),
        (4, "paragraph"),
        (5, "subparagraph"),
        (6, "subparagraph"),
    ],
)
def test_heading_levels(renderer: LaTeXRenderer, level: int, command: str) -> None:
    latex = renderer.render(f"{'#' * level} Title")
    assert f"\\{command}{{Title}}" in latex


def test_headings_are_recorded(renderer: LaTeXRenderer) -> None:
    state = DocumentState()
    renderer.render("# Title\n\n## R&D", state=state)
    assert state.headings == [
        {"level": 1, "text": "Title"},
        {"level": 2, "text": "R\\&D"},
    ]


def test_heading_command_can_be_overridden() -> None:
    renderer = LaTeXRenderer(RenderOptions(heading_commands={6: "\\minisec"}))
    assert "\\minisec{Six}" in renderer.render("###### Six")
    assert "\\subparagraph{Five}" in renderer.render("##### Five")


def test_heading_keeps_inline_markup_and_math(renderer: LaTeXRenderer) -> None:
    latex = renderer.render("# About **bold** $x^2$")
    assert "\\section{About \\textbf{bold} $x^2$}" in latex


def test_paragraph_is_followed_by_blank_line(renderer: LaTeXRenderer) -> None:
    latex = renderer.render("First paragraph.\n\nSecond paragraph.")
    assert "First paragraph.\n\n" in latex
    assert latex.index("First") < latex.index("Second")


def test_leaf_text_is_escaped(renderer: LaTeXRenderer) -> None:
    latex = renderer.render("Costs 100% & 5_x for #1")
    assert "Costs 100\\% \\& 5\\_x for \\#1" in latex


def test_unordered_list(renderer: LaTeXRenderer) -> None:
    latex = renderer.render("- one\n- two")
    assert "\\begin{itemize}\n\\item one\n\\item two\n\\end{itemize}" in latex
    assert latex.count("\\item") == 2


def test_ordered_list(renderer: LaTeXRenderer) -> None:
    latex = renderer.render("1. first\n2. second")
    assert "\\begin{enumerate}\n\\item first\n\\item second\n\\end{enumerate}" in latex


def test_nested_lists(renderer: LaTeXRenderer) -> None:
    latex = renderer.render("- outer\n    - inner\n- last")
    assert latex.count("\\begin{itemize}") == 2
    assert latex.count("\\item") == 3
    assert latex.index("outer") < latex.index("inner") < latex.index("last")


def test_fenced_code_with_language_uses_listings(renderer: LaTeXRenderer) -> None:
    latex = renderer.render("```python\nprint('a_b') # 100%\n```")
    assert (
        "\\begin{lstlisting}[language=python]\nprint('a_b') # 100%\n\\end{lstlisting}" in latex
    )


def test_text_fence_and_bare_fence_use_verbatim(renderer: LaTeXRenderer) -> None:
    for fence in ("```text", "```"):
        latex = renderer.render(f"{fence}\n\\foo{{x_y}} & $z$\n```")
        assert "\\begin{verbatim}\n\\foo{x_y} & $z$\n\\end{verbatim}" in latex
        assert "lstlisting" not in latex


def test_code_languages_are_recorded(renderer: LaTeXRenderer) -> None:
    state = DocumentState()
    renderer.render("```c\nx\n```\n\n```c\ny\n```\n\n```rust\nz\n```", state=state)
    assert state.code_languages == ["c", "rust"]


def test_inline_code_is_escaped(renderer: LaTeXRenderer) -> None:
    latex = renderer.render("Use `a_b%{}` here")
    assert "Use \\texttt{a\\_b\\%\\{\\}} here" in latex


def test_strong_and_emphasis(renderer: LaTeXRenderer) -> None:
    latex = renderer.render("**bold** and *it* and ***both***")
    assert "\\textbf{bold} and \\textit{it}" in latex
    assert "\\textbf{\\textit{both}}" in latex or "\\textit{\\textbf{both}}" in latex


def test_link(renderer: LaTeXRenderer) -> None:
    latex = renderer.render("[the site](https://example.com/a%20b#frag)")
    assert "\\href{https://example.com/a\\%20b\\#frag}{the site}" in latex


def test_link_text_is_escaped_once(renderer: LaTeXRenderer) -> None:
    latex = renderer.render("[50% off](https://example.com)")
    assert "\\href{https://example.com}{50\\% off}" in latex


def test_image_caption_prefers_alt(renderer: LaTeXRenderer) -> None:
    latex = renderer.render('![Alt text](img/pic.png "The title")')
    assert (
        "\\begin{figure}[h]\n"
        "\\centering\n"
        "\\includegraphics[width=0.8\\textwidth]{img/pic.png}\n"
        "\\caption{Alt text}\n"
        "\\end{figure}"
    ) in latex


def test_image_caption_falls_back_to_title_then_empty(renderer: LaTeXRenderer) -> None:
    assert "\\caption{The title}" in renderer.render('![](pic.png "The title")')
    assert "\\caption{}" in renderer.render("![](pic.png)")


def test_image_caption_is_escaped(renderer: LaTeXRenderer) -> None:
    assert "\\caption{Growth 10\\%}" in renderer.render("![Growth 10%](chart.png)")


def test_blockquote(renderer: LaTeXRenderer) -> None:
    latex = renderer.render("> quoted *text*")
    assert "\\begin{quotation}\nquoted \\textit{text}\n\\end{quotation}" in latex


def test_horizontal_rule(renderer: LaTeXRenderer) -> None:
    latex = renderer.render("above\n\n---\n\nbelow")
    assert "\\hrulefill\n\n" in latex
    assert latex.index("above") < latex.index("\\hrulefill") < latex.index("below")


TABLE = "| A | B |\n|---|---|\n| 1 | 2 |\n| 3 | 4 |"


def test_table_keeps_trailing_cell_separator_by_default(renderer: LaTeXRenderer) -> None:
    latex = renderer.render(TABLE)
    assert "\\begin{tabular}{ccc}\n\\hline\n" in latex
    assert "A & B &  \\\\ \\hline\n1 & 2 &  \\\\ \\hline\n3 & 4 &  \\\\ \\hline\n" in latex
    assert "\\end{tabular}" in latex


def test_table_separator_can_be_trimmed() -> None:
    renderer = LaTeXRenderer(RenderOptions(trim_table_cell_separator=True))
    latex = renderer.render(TABLE)
    assert "\\begin{tabular}{cc}\n\\hline\n" in latex
    assert "A & B \\\\ \\hline\n1 & 2 \\\\ \\hline\n3 & 4 \\\\ \\hline\n" in latex


def test_table_cells_keep_inline_markup(renderer: LaTeXRenderer) -> None:
    latex = renderer.render("| **A** | `b_c` |\n|---|---|\n| x | y |")
    assert "\\textbf{A} & \\texttt{b\\_c} & " in latex


def test_math_is_emitted_verbatim(renderer: LaTeXRenderer) -> None:
    latex = renderer.render("Inline $a_b < c$ and\n\n$$\n\\sum_{i} x_i\n$$")
    assert "Inline $a_b < c$ and" in latex
    assert "\\begin{equation}\n\\sum_{i} x_i\n\\end{equation}" in latex


def test_rendering_is_deterministic(renderer: LaTeXRenderer) -> None:
    source = "# T\n\n- a\n- b\n\n| x | y |\n|---|---|\n| 1 | 2 |\n\n`c` $m$"
    assert renderer.render(source) == renderer.render(source)


def test_custom_rule_only_affects_its_renderer() -> None:
    custom = LaTeXRenderer()
    plain = LaTeXRenderer()

    @renders("strong", phase=RenderPhase.INLINE, name="loud_strong", priority=-1)
    def loud_strong(element: Any, _context: Any) -> None:
        element.replace_with(element.get_text().upper())

    custom.register(loud_strong)

    assert "LOUD" in custom.render("**loud**")
    assert "\\textbf{loud}" in plain.render("**loud**")


def test_rule_failures_become_rendering_errors() -> None:
    renderer = LaTeXRenderer()

    @renders("p", phase=RenderPhase.BLOCK, name="explode")
    def explode(_element: Any, _context: Any) -> None:
        raise ValueError("boom")

    renderer.register(explode)
    with pytest.raises(LatexRenderingError) as excinfo:
        renderer.render("text")
    assert isinstance(excinfo.value.__cause__, ValueError)


def test_describe_registered_rules(renderer: LaTeXRenderer) -> None:
    names = {entry["name"] for entry in renderer.describe_registered_rules()}
    assert {"escape_text", "render_headings", "tables", "code_blocks", "math"} <= names
    phases = {phase for phase, _ in renderer.iter_registered_rules()}
    assert phases == set(RenderPhase)


def test_empty_table_is_rejected(renderer: LaTeXRenderer) -> None:
    with pytest.raises(InvalidNodeError):
        renderer.render_html("<table></table>")


class EventRecorder:
    debug_enabled = False

    def __init__(self) -> None:
        self.events: list[tuple[str, dict[str, Any]]] = []

    def warning(self, message: str, exc: BaseException | None = None) -> None:
        return

    def error(self, message: str, exc: BaseException | None = None) -> None:
        return

    def event(self, name: str, payload: Any) -> None:
        self.events.append((name, dict(payload)))


def test_missing_parser_falls_back_on_every_render() -> None:
    renderer = LaTeXRenderer(RenderOptions(parser="no-such-parser"))
    recorder = EventRecorder()

    first = renderer.render("**one**", emitter=recorder)
    second = renderer.render("**two**", emitter=recorder)

    assert "\\textbf{one}" in first
    assert "\\textbf{two}" in second
    assert renderer.parser_backend == "no-such-parser"
    assert [name for name, _ in recorder.events] == ["parser_fallback", "parser_fallback"]
    assert recorder.events[0][1] == {"preferred": "no-such-parser", "fallback": "html.parser"}
