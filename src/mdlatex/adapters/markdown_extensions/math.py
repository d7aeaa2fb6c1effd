"""Markdown extension hiding math spans from the Markdown inline grammar."""

from __future__ import annotations

from html import escape
import re

from markdown import Markdown
from markdown.extensions import Extension
from markdown.preprocessors import Preprocessor

from mdlatex.core.math import preprocess_math


MATH_CLASS = "latex-math"


class _MathPreprocessor(Preprocessor):
    """Substitute math spans and stash the LaTeX as raw HTML carriers."""

    _FENCE_RE = re.compile(r"^\s{0,3}(`{3,}|~{3,})(.*)$")

    def run(self, lines: list[str]) -> list[str]:
        result: list[str] = []
        prose: list[str] = []
        in_fence = False
        fence_char: str | None = None
        fence_len = 0

        for line in lines:
            fence_match = self._FENCE_RE.match(line)
            if fence_match:
                token = fence_match.group(1)
                if not in_fence:
                    result.extend(self._substitute(prose))
                    prose = []
                    in_fence = True
                    fence_char = token[0]
                    fence_len = len(token)
                elif token[0] == fence_char and len(token) >= fence_len:
                    in_fence = False
                    fence_char = None
                    fence_len = 0
                result.append(line)
                continue

            if in_fence:
                result.append(line)
            else:
                prose.append(line)

        result.extend(self._substitute(prose))
        return result

    def _substitute(self, lines: list[str]) -> list[str]:
        if not lines:
            return []
        text = "\n".join(lines)
        return preprocess_math(text, protect=self._stash).split("\n")

    def _stash(self, latex: str, display: bool) -> str:
        tag = "div" if display else "span"
        payload = escape(latex, quote=False)
        return self.md.htmlStash.store(f'<{tag} class="{MATH_CLASS}">{payload}</{tag}>')


class MathExtension(Extension):
    """Register the math span preprocessor ahead of fenced code handling."""

    def extendMarkdown(self, md: Markdown) -> None:  # type: ignore[override]  # noqa: N802
        md.preprocessors.register(_MathPreprocessor(md), "mdlatex_math", priority=27)


def makeExtension(**_: object) -> MathExtension:  # pragma: no cover - API hook  # noqa: N802
    return MathExtension()


__all__ = ["MATH_CLASS", "MathExtension", "makeExtension"]
