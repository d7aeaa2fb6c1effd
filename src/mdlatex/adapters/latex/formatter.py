"""Utilities for rendering LaTeX partials."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined, Template
from requests.utils import requote_uri as requote_url

from mdlatex.core.config import RenderOptions

from .utils import escape_latex_chars, escape_url


TEMPLATE_DIR = Path(__file__).resolve().parent / "partials"

TABLE_CELL_SEPARATOR = " & "


class LaTeXFormatter:
    """Render LaTeX partials using Jinja2 with LaTeX-friendly delimiters.

    Every partial under ``partials/`` is reachable as a method named after the
    file (``formatter.strong(text=...)``). Methods prefixed with ``handle_``
    take precedence and add escaping or argument normalisation.
    """

    def __init__(
        self,
        options: RenderOptions | None = None,
        template_dir: Path = TEMPLATE_DIR,
    ) -> None:
        self.options = options or RenderOptions()
        self.env = Environment(
            block_start_string=r"\BLOCK{",
            block_end_string=r"}",
            variable_start_string=r"\VAR{",
            variable_end_string=r"}",
            comment_start_string=r"\COMMENT{",
            comment_end_string=r"}",
            loader=FileSystemLoader(template_dir),
            keep_trailing_newline=True,
            undefined=StrictUndefined,
            autoescape=False,
        )
        self.env.filters.setdefault("latex_escape", self.escape)

        self._template_names: dict[str, str] = {
            path.stem: path.name for path in template_dir.glob("*.tex")
        }
        self.templates: dict[str, Template] = {}

    @property
    def template_names(self) -> set[str]:
        """Return the set of available template identifiers."""
        return set(self._template_names)

    def _get_template(self, key: str) -> Template:
        template = self.templates.get(key)
        if template is not None:
            return template

        template_name = self._template_names.get(key)
        if template_name is None:
            raise KeyError(key)

        template = self.env.get_template(template_name)
        self.templates[key] = template
        return template

    def __getattr__(self, method: str) -> Callable[..., str]:
        """Proxy calls to templates or custom handlers."""
        if method.startswith("_"):
            raise AttributeError(method)
        try:
            handler = object.__getattribute__(self, f"handle_{method}")
        except AttributeError:
            handler = None
        if handler is not None:
            return handler  # type: ignore[return-value]

        try:
            template = self._get_template(method)
        except KeyError:
            raise AttributeError(f"Object has no template for '{method}'") from None

        def render_template(*args: Any, **kwargs: Any) -> str:
            """Render the template with optional positional shorthand."""
            if len(args) > 1:
                msg = f"Expected at most 1 argument, got {len(args)}, use keyword arguments instead"
                raise ValueError(msg)
            if args:
                kwargs["text"] = args[0]
            return template.render(**kwargs)

        return render_template

    def __getitem__(self, key: str) -> Callable[..., str]:
        return self._get_template(key).render

    def escape(self, value: str) -> str:
        """Escape helper honouring the legacy accent setting."""
        return escape_latex_chars(value, legacy_accents=self.options.legacy_latex_accents)

    def handle_heading(self, text: str, level: int) -> str:
        """Render a heading with the sectioning command configured for ``level``."""
        command = "\\" + self.options.heading_command(level)
        return self._get_template("heading").render(command=command, text=text)

    def handle_codeinlinett(self, text: str) -> str:
        """Render inline code inside ``\\texttt`` after escaping it."""
        return self._get_template("codeinlinett").render(text=self.escape(text))

    def handle_codeblock(self, code: str, language: str | None = None) -> str:
        """Render a fenced code block verbatim.

        ``lstlisting`` is used when a language is known and not listed in
        ``plain_code_languages``; everything else falls back to ``verbatim``.
        """
        if code and not code.endswith("\n"):
            code += "\n"
        plain = {entry.lower() for entry in self.options.plain_code_languages}
        if language and language.lower() not in plain:
            return self._get_template("codeblock_listings").render(code=code, language=language)
        return self._get_template("codeblock_verbatim").render(code=code)

    def handle_href(self, text: str, url: str) -> str:
        """Render ``\\href`` links with escaped URLs."""
        return self._get_template("href").render(text=text, url=escape_url(requote_url(url)))

    def handle_figure(self, path: str, caption: str) -> str:
        """Render a centred figure with the configured image width."""
        return self._get_template("figure").render(
            path=path,
            caption=caption,
            width=self.options.image_width,
        )

    def handle_list(self, items: list[str], *, ordered: bool) -> str:
        """Wrap rendered ``\\item`` fragments in ``enumerate`` or ``itemize``."""
        environment = "enumerate" if ordered else "itemize"
        return self._get_template("list").render(environment=environment, items="".join(items))

    def handle_table_row(self, cells: list[str]) -> str:
        """Join rendered cells and terminate the row."""
        joined = "".join(cells)
        if self.options.trim_table_cell_separator and joined.endswith(TABLE_CELL_SEPARATOR):
            joined = joined[: -len(TABLE_CELL_SEPARATOR)]
        return self._get_template("table_row").render(cells=joined)

    def handle_table(self, header: str, body: list[str]) -> str:
        """Render a ``tabular`` whose column count follows the header row."""
        columns = "c" * count_columns(header)
        return self._get_template("table").render(
            columns=columns,
            header=header,
            body="".join(body),
        )

    def handle_document(self, body: str, title: str) -> str:
        """Wrap a rendered body into a complete article."""
        return self._get_template("document").render(body=body, title=self.escape(title))

    def override_template(self, name: str, source: str | Path) -> None:
        """Override a built-in partial using an external payload."""
        if isinstance(source, Path):
            template_source = source.read_text(encoding="utf-8")
            template_name = source.as_posix()
        else:
            template_source = source
            template_name = name

        template = self.env.from_string(template_source)
        template.name = template_name
        self.templates[name] = template
        self._template_names[name] = template_name


def count_columns(row: str) -> int:
    """Count the cells of a rendered table row.

    The row is cut at its terminator and split on the cell separator. A row
    whose cells all end with a separator yields one extra, empty segment.
    """
    cells, _, _ = row.partition("\\\\")
    return max(1, len(cells.split(TABLE_CELL_SEPARATOR)))


__all__ = ["TABLE_CELL_SEPARATOR", "LaTeXFormatter", "count_columns"]
