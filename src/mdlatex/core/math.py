"""Detection and substitution of ``$…$`` and ``$$…$$`` math spans.

Math is isolated from the Markdown source before structural parsing so that
emphasis markers, underscores, and backslashes inside formulas reach LaTeX
untouched. Detection is a forward-only scan: every delimiter search resumes
where the previous one stopped, so pathological inputs made of many unmatched
dollars stay linear in the length of the text.

Two passes run over the same text. The block pass pairs ``$$`` delimiters, the
inline pass pairs single ``$`` delimiters outside the regions claimed by the
block pass. A delimiter without a partner is left as literal text.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass
import re


BLOCK_DELIMITER = "$$"
INLINE_DELIMITER = "$"

_PARAGRAPH_BREAK = re.compile(r"\n[ \t]*\n")

MathProtector = Callable[[str, bool], str]


@dataclass(frozen=True, slots=True)
class MathSpan:
    """Location of a math span inside a source text."""

    start: int
    end: int
    body: str
    display: bool

    def to_latex(self) -> str:
        """Return the LaTeX replacement for this span."""
        if self.display:
            return f"\\begin{{equation}}\n{self.body.strip()}\n\\end{{equation}}"
        return f"${self.body}$"


def _is_escaped(text: str, index: int) -> bool:
    backslashes = 0
    cursor = index - 1
    while cursor >= 0 and text[cursor] == "\\":
        backslashes += 1
        cursor -= 1
    return backslashes % 2 == 1


def _find_unescaped(text: str, token: str, start: int) -> int:
    index = text.find(token, start)
    while index != -1 and _is_escaped(text, index):
        index = text.find(token, index + 1)
    return index


def _scan_block_spans(text: str) -> list[MathSpan]:
    spans: list[MathSpan] = []
    cursor = 0
    while True:
        opening = _find_unescaped(text, BLOCK_DELIMITER, cursor)
        if opening == -1:
            break
        body_start = opening + len(BLOCK_DELIMITER)
        closing = _find_unescaped(text, BLOCK_DELIMITER, body_start)
        if closing == -1:
            break
        body = text[body_start:closing]
        end = closing + len(BLOCK_DELIMITER)
        if body.strip():
            spans.append(MathSpan(start=opening, end=end, body=body, display=True))
        cursor = end
    return spans


def _scan_inline_spans(text: str, claimed: list[MathSpan]) -> list[MathSpan]:
    spans: list[MathSpan] = []
    regions = iter(claimed)
    region = next(regions, None)
    length = len(text)
    cursor = 0
    opening: int | None = None

    while cursor < length:
        if region is not None and cursor >= region.start:
            cursor = region.end
            region = next(regions, None)
            opening = None
            continue

        limit = region.start if region is not None else length
        index = text.find(INLINE_DELIMITER, cursor, limit)
        if index == -1:
            cursor = limit
            opening = None
            continue

        if _is_escaped(text, index):
            cursor = index + 1
            continue

        if text.startswith(BLOCK_DELIMITER, index):
            # Unpaired ``$$`` is literal text for both passes.
            cursor = index + len(BLOCK_DELIMITER)
            opening = None
            continue

        if opening is not None:
            body = text[opening + 1 : index]
            if body and not body[-1].isspace() and not _PARAGRAPH_BREAK.search(body):
                spans.append(MathSpan(start=opening, end=index + 1, body=body, display=False))
                opening = None
                cursor = index + 1
                continue
            opening = None

        following = text[index + 1] if index + 1 < length else ""
        if following and not following.isspace():
            opening = index
        cursor = index + 1

    return spans


def iter_math_spans(text: str) -> Iterator[MathSpan]:
    """Yield the math spans of ``text`` in document order."""
    block_spans = _scan_block_spans(text)
    inline_spans = _scan_inline_spans(text, block_spans)
    yield from sorted([*block_spans, *inline_spans], key=lambda span: span.start)


def preprocess_math(text: str, *, protect: MathProtector | None = None) -> str:
    """Replace math spans in ``text`` with their LaTeX form.

    Block spans become ``equation`` environments, inline spans keep their dollar
    delimiters. ``protect`` receives each replacement together with a flag
    telling whether it is a display span and returns the text that is actually
    inserted.
    """
    if INLINE_DELIMITER not in text:
        return text

    parts: list[str] = []
    cursor = 0
    for span in iter_math_spans(text):
        parts.append(text[cursor : span.start])
        latex = span.to_latex()
        parts.append(protect(latex, span.display) if protect is not None else latex)
        cursor = span.end
    parts.append(text[cursor:])
    return "".join(parts)


__all__ = ["MathProtector", "MathSpan", "iter_math_spans", "preprocess_math"]
