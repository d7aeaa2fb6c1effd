"""High-level Markdown to LaTeX renderer based on the rule pipeline."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
import logging
from typing import Any

from bs4 import BeautifulSoup, FeatureNotFound

from mdlatex.core.config import RenderOptions
from mdlatex.core.context import DocumentState, RenderContext
from mdlatex.core.diagnostics import DiagnosticEmitter, NullEmitter
from mdlatex.core.exceptions import LatexRenderingError, MdLatexError
from mdlatex.core.rules import RenderEngine, RenderPhase, RuleSet

from ..handlers import default_rule_set
from ..markdown import render_markdown, resolve_markdown_extensions
from .formatter import LaTeXFormatter


_log = logging.getLogger(__name__)


class LaTeXRenderer:
    """Convert Markdown sources to LaTeX bodies using an explicit rule set.

    The rule set is owned by the renderer instance. Two renderers built with
    different rule sets can run side by side without affecting each other.
    """

    def __init__(
        self,
        options: RenderOptions | None = None,
        rules: RuleSet | None = None,
        formatter: LaTeXFormatter | None = None,
    ) -> None:
        self.options = options or RenderOptions()
        self.rules = rules if rules is not None else default_rule_set()
        self.formatter = formatter or LaTeXFormatter(self.options)
        self.parser_backend = self.options.parser
        self.markdown_extensions = resolve_markdown_extensions(self.options.markdown_extensions)
        self.engine = RenderEngine(self.rules)

    def register(self, handler: Any) -> None:
        """Register additional handlers on this renderer's rule set.

        Arguments can be callables decorated with :func:`renders` or modules/classes
        exposing decorated attributes.
        """
        definition = getattr(handler, "__render_rule__", None)
        if definition is not None:
            self.rules.register(handler)
            return

        self.rules.collect_from(handler)

    def to_html(self, markdown_text: str) -> str:
        """Run the structural parse, math isolation included."""
        return render_markdown(markdown_text, self.markdown_extensions)

    def render(
        self,
        markdown_text: str,
        *,
        runtime: Mapping[str, Any] | None = None,
        state: DocumentState | None = None,
        emitter: DiagnosticEmitter | None = None,
    ) -> str:
        """Render a Markdown source into a LaTeX body."""
        html = self.to_html(markdown_text)
        return self.render_html(html, runtime=runtime, state=state, emitter=emitter)

    def render_html(
        self,
        html: str,
        *,
        runtime: Mapping[str, Any] | None = None,
        state: DocumentState | None = None,
        emitter: DiagnosticEmitter | None = None,
    ) -> str:
        """Render an HTML fragment produced by the Markdown parser into LaTeX."""
        active_emitter = emitter or NullEmitter()
        try:
            soup = BeautifulSoup(html, self.parser_backend)
        except FeatureNotFound:
            if self.parser_backend == "html.parser":
                raise
            # Fall back to the built-in parser when the preferred backend is missing.
            active_emitter.event(
                "parser_fallback",
                {"preferred": self.parser_backend, "fallback": "html.parser"},
            )
            soup = BeautifulSoup(html, "html.parser")

        context = RenderContext(
            formatter=self.formatter,
            document=soup,
            options=self.options,
            state=state or DocumentState(),
        )
        context.runtime["emitter"] = active_emitter
        if runtime:
            context.runtime.update(runtime)

        try:
            self.engine.run(soup, context)
        except MdLatexError:
            raise
        except Exception as exc:
            raise LatexRenderingError(f"LaTeX rendering failed: {exc}") from exc

        return self._collect_output(soup)

    def _collect_output(self, soup: BeautifulSoup) -> str:
        """Extract the LaTeX output from the transformed soup."""
        return soup.get_text()

    def iter_registered_rules(self) -> Iterable[tuple[RenderPhase, str]]:
        """Expose currently registered rules for debugging/reporting."""
        for rule in self.rules:
            yield rule.phase, rule.name

    def describe_registered_rules(self) -> list[dict[str, object]]:
        """Return detailed metadata about registered rules."""
        return self.rules.describe()


__all__ = ["LaTeXRenderer"]
