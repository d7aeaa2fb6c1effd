from __future__ import annotations

from pathlib import Path

import pytest

from mdlatex.adapters.latex.formatter import LaTeXFormatter, count_columns
from mdlatex.core.config import RenderOptions


@pytest.fixture
def formatter() -> LaTeXFormatter:
    return LaTeXFormatter()


def test_templates_are_exposed_as_methods(formatter: LaTeXFormatter) -> None:
    assert formatter.strong(text="x") == "\\textbf{x}"
    assert formatter.italic("y") == "\\textit{y}"
    assert formatter.item(text="entry") == "\\item entry\n"
    assert formatter.horizontal_rule() == "\\hrulefill\n\n"


def test_unknown_template_raises_attribute_error(formatter: LaTeXFormatter) -> None:
    with pytest.raises(AttributeError):
        formatter.does_not_exist()


def test_positional_shorthand_accepts_a_single_argument(formatter: LaTeXFormatter) -> None:
    with pytest.raises(ValueError):
        formatter.strong("a", "b")


def test_heading_uses_configured_command() -> None:
    formatter = LaTeXFormatter(RenderOptions(heading_commands={2: "chapter"}))
    assert formatter.heading(text="Intro", level=2) == "\\chapter{Intro}\n\n"
    assert formatter.heading(text="Intro", level=1) == "\\section{Intro}\n\n"


def test_codeblock_adds_missing_trailing_newline(formatter: LaTeXFormatter) -> None:
    assert formatter.codeblock(code="x = 1") == "\\begin{verbatim}\nx = 1\n\\end{verbatim}\n\n"


def test_plain_code_languages_are_configurable() -> None:
    formatter = LaTeXFormatter(RenderOptions(plain_code_languages=["text", "console"]))
    assert formatter.codeblock(code="$ ls\n", language="Console").startswith("\\begin{verbatim}")
    assert formatter.codeblock(code="ls\n", language="bash").startswith(
        "\\begin{lstlisting}[language=bash]"
    )


def test_href_escapes_url(formatter: LaTeXFormatter) -> None:
    latex = formatter.href(text="docs", url="https://example.com/a b")
    assert latex == "\\href{https://example.com/a\\%20b}{docs}"


def test_figure_width_comes_from_options() -> None:
    formatter = LaTeXFormatter(RenderOptions(image_width="\\linewidth"))
    latex = formatter.figure(path="a.png", caption="A")
    assert "\\includegraphics[width=\\linewidth]{a.png}" in latex


def test_override_template_from_string(formatter: LaTeXFormatter) -> None:
    formatter.override_template("strong", "\\emph{\\VAR{text}}")
    assert formatter.strong(text="x") == "\\emph{x}"
    assert "strong" in formatter.template_names


def test_override_template_from_file(formatter: LaTeXFormatter, tmp_path: Path) -> None:
    source = tmp_path / "italic.tex"
    source.write_text("\\textsl{\\VAR{text}}", encoding="utf-8")
    formatter.override_template("italic", source)
    assert formatter.italic(text="x") == "\\textsl{x}"


@pytest.mark.parametrize(
    ("row", "expected"),
    [
        ("A & B &  \\\\ \\hline\n", 3),
        ("A & B \\\\ \\hline\n", 2),
        ("A \\\\ \\hline\n", 1),
        ("", 1),
    ],
)
def test_count_columns(row: str, expected: int) -> None:
    assert count_columns(row) == expected
