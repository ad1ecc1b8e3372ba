"""
clueai/client/highlight.py

Per-line classification for the highlighted code view.

A line is a HIT when it falls inside a hint's focus span, CONTEXT when it
sits immediately before or after one (inside the document), and NONE
otherwise. Nothing is cached: callers re-run this whenever the text or the
hints change.
"""

import re
from collections.abc import Sequence
from enum import Enum

from clueai.client.locator import LineHint

_LINE_SPLIT = re.compile(r"\r?\n")


class LineClass(str, Enum):
    HIT = "hit"
    CONTEXT = "context"
    NONE = "none"


def split_lines(text: str) -> list[str]:
    """Editor lines of ``text``; an empty text is one empty line."""
    return _LINE_SPLIT.split(text)


def classify_line(line_number: int, hints: Sequence[LineHint], total_lines: int) -> LineClass:
    """Classify one 1-based line against every hint. HIT wins over CONTEXT."""
    spans = [hint.focus for hint in hints]

    if any(start <= line_number <= end for start, end in spans):
        return LineClass.HIT

    for start, end in spans:
        if line_number == start - 1 and line_number >= 1:
            return LineClass.CONTEXT
        if line_number == end + 1 and line_number <= total_lines:
            return LineClass.CONTEXT

    return LineClass.NONE


def classify_lines(text: str, hints: Sequence[LineHint]) -> list[tuple[int, str, LineClass]]:
    """Classify every line of ``text``.

    Returns:
        ``(line_number, line_text, LineClass)`` for each editor line, in order.
    """
    lines = split_lines(text)
    total = len(lines)
    return [
        (number, line, classify_line(number, hints, total))
        for number, line in enumerate(lines, start=1)
    ]
