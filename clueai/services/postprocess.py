"""
clueai/services/postprocess.py

Post-processing for raw model output before returning it to the client.

Responsibilities:
  - Unwrap a transcription that the model wrapped in a single Markdown code
    fence (```python ... ``` or bare ``` ... ```), keeping the inner text.
  - Substitute a fixed apology when the hint model returns nothing.

Only a fence that wraps the *entire* reply is removed; fences in the middle
of prose are part of the transcription and stay.

Usage:
    text = strip_code_fences(raw_text.strip())
    hint = hint_or_fallback(raw_text)
"""

import re

EMPTY_HINT_FALLBACK = "Sorry, I couldn’t generate guidance this time."

# ```lang\n ... ```   (language tag followed by at least one line break)
_TAGGED_FENCE = re.compile(r"^```[\w-]*\s*[\r\n]+([\s\S]*?)\s*```$")

# ``` ... ```         (no language tag, possibly on one line)
_BARE_FENCE = re.compile(r"^```\s*([\s\S]*?)\s*```$")


def strip_code_fences(text: str) -> str:
    """Remove a Markdown code fence wrapping the whole text.

    Args:
        text: Model output, already stripped of outer whitespace.

    Returns:
        The fenced content (trimmed) if the whole text is one fence,
        otherwise ``text`` unchanged.
    """
    fenced = _TAGGED_FENCE.match(text)
    if fenced:
        return fenced.group(1).strip()
    bare = _BARE_FENCE.match(text)
    if bare:
        return bare.group(1).strip()
    return text


def hint_or_fallback(text: str | None) -> str:
    """Return the hint text, or the fixed apology when the model said nothing."""
    if text is None or text == "":
        return EMPTY_HINT_FALLBACK
    return text
