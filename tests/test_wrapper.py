from __future__ import annotations

from mdlatex.adapters.latex.formatter import LaTeXFormatter
from mdlatex.core.wrapper import DEFAULT_TITLE, wrap_document


PACKAGES = [
    "\\usepackage[utf8]{inputenc}",
    "\\usepackage{amsmath}",
    "\\usepackage{amssymb}",
    "\\usepackage{graphicx}",
    "\\usepackage{hyperref}",
    "\\usepackage{listings}",
    "\\usepackage{xcolor}",
    "\\usepackage{array}",
    "\\usepackage{booktabs}",
]


def test_preamble_loads_packages_in_order() -> None:
    document = wrap_document("Body\n\n")

    assert document.startswith("\\documentclass{article}\n")
    positions = [document.index(package) for package in PACKAGES]
    assert positions == sorted(positions)


def test_title_block_and_body() -> None:
    document = wrap_document("Body\n\n", title="Notes")

    assert "\\title{Notes}\n\\author{}\n\\date{\\today}\n" in document
    assert "\\begin{document}\n\n\\maketitle\n\nBody\n\n\n\\end{document}\n" in document
    assert document.endswith("\\end{document}\n")


def test_default_title() -> None:
    assert DEFAULT_TITLE == "Converted Document"
    assert "\\title{Converted Document}" in wrap_document("")


def test_title_is_escaped_but_body_is_not() -> None:
    document = wrap_document("50\\% done\n\n", title="R&D 100%")

    assert "\\title{R\\&D 100\\%}" in document
    assert "50\\% done" in document
    assert "50\\textbackslash{}" not in document


def test_uses_the_given_formatter() -> None:
    formatter = LaTeXFormatter()
    formatter.override_template("document", "[\\VAR{title}]\\VAR{body}")

    assert wrap_document("x", title="T", formatter=formatter) == "[T]x"
