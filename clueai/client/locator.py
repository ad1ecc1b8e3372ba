"""
clueai/client/locator.py

Parser for the Locator endpoint's reply.

The model is asked for a fixed grammar:

    LINES:
    - 4-6 | check the loop bound
    - 10 | is the accumulator reset?
    NOTE: none

but the text comes from a language model, so parsing is best-effort: lines
that don't match are skipped and nothing here raises.

Every parsed range is widened by one line on each side (clamped to the
document) so the editor shows the flagged lines with surrounding context.
The model's own span is kept on the hint as its *focus*.
"""

import re
from dataclasses import dataclass, field

# "- 4-6 | reason", "-4 – 6|reason", "  - 10 | reason"
_BULLET_PATTERN = re.compile(
    r"^\s*-\s*"         # bullet dash
    r"(\d+)"            # start
    r"(?:\s*[-–]\s*(\d+))?"  # optional "-end" (hyphen or en dash)
    r"\s*\|\s*"         # pipe separator
    r"(.+)$",           # reason
    re.IGNORECASE,
)

_NOTE_PREFIX = "NOTE:"
_LINE_SPLIT = re.compile(r"\r?\n")


@dataclass(frozen=True)
class LineHint:
    """Inclusive 1-based line range with an optional reason.

    ``focus_start``/``focus_end`` hold the span the model actually named
    before padding. When omitted, the focus is ``start``/``end``.
    """

    start: int
    end: int
    reason: str | None = None
    focus_start: int | None = None
    focus_end: int | None = None

    def __post_init__(self) -> None:
        if self.start < 1 or self.end < self.start:
            raise ValueError(f"invalid line range {self.start}-{self.end}")

    @property
    def focus(self) -> tuple[int, int]:
        start = self.focus_start if self.focus_start is not None else self.start
        end = self.focus_end if self.focus_end is not None else self.end
        return start, end


@dataclass(frozen=True)
class LocatorResult:
    ranges: tuple[LineHint, ...] = field(default_factory=tuple)
    note: str = ""


def display_note(note: str) -> str:
    """The note to show the student; the model writes "none" for no note."""
    return "" if note.strip().lower() == "none" else note


def _pad(hint: LineHint, total_lines: int) -> LineHint:
    start = max(1, hint.start - 1)
    end = min(total_lines, max(hint.end, hint.start) + 1)
    return LineHint(
        start=start,
        end=end,
        reason=hint.reason,
        focus_start=hint.start,
        focus_end=hint.end,
    )


def parse_locator_text(text: str, total_lines: int) -> LocatorResult:
    """Parse a LINES/NOTE block into padded line hints and a note.

    Args:
        text: Raw model reply.
        total_lines: Line count of the document the reply refers to. When
            zero or negative, ranges are returned unpadded; otherwise ranges
            starting more than one line after the last line are dropped.

    Returns:
        Hints in reply order and the last ``NOTE:`` found ("" if none).
    """
    ranges: list[LineHint] = []
    note = ""

    for line in _LINE_SPLIT.split(text or ""):
        m = _BULLET_PATTERN.match(line)
        if m:
            start = int(m.group(1))
            if start > 0:
                end = int(m.group(2)) if m.group(2) else start
                if end < start:
                    end = start
                reason = m.group(3).strip() or None
                ranges.append(LineHint(start=start, end=end, reason=reason))
            continue

        if line.upper().startswith(_NOTE_PREFIX):
            note = line[len(_NOTE_PREFIX):].strip()

    if total_lines > 0:
        # Padding keeps start <= end only while the range starts at most one
        # line past the end; anything further has nothing left to highlight.
        ranges = [_pad(hint, total_lines) for hint in ranges if hint.start <= total_lines + 1]

    return LocatorResult(ranges=tuple(ranges), note=note)
