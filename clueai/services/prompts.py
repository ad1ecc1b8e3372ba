"""
clueai/services/prompts.py

Jinja2 prompt templates for the three Assist endpoints.

Each endpoint sends the model two messages:
  SYSTEM: a fixed instruction preamble (role, rules, output format)
  USER:   the rendered template carrying the student's context

Prompt roles:
  - Extraction: transcribe text/code from images verbatim, errors included.
  - Hint: coaching-only leads that point at locations, never the fix.
  - Locate: a tiny LINES/NOTE text block parsed by the client.

Rules:
    - Never ask the model for a full solution or corrected code.
    - Student text is truncated to ``max_input_chars`` before rendering.
    - The locate template numbers every line, blank ones included, because
      the client highlights by those numbers.
"""

import re

from jinja2 import Template

from clueai.core.logging import get_logger
from clueai.schemas.assist import readable_subject

logger = get_logger(__name__)

NO_DESCRIPTION = "(no extra description provided)"
NONE_PROVIDED = "(none provided)"

EXTRACT_SYSTEM_MESSAGE = """\
You transcribe code from images. Preserve the student's original formatting, \
indentation, symbols, and errors. Do not correct or normalize anything.

Return only the extracted text. No explanations, no extra notes.\
"""

HINT_SYSTEM_MESSAGE = """\
Help students understand and fix their assignments (code, math, science, English, \
or other subjects) by guiding them through the process of problem-solving and \
debugging, without directly providing the full answer, final solution, or complete \
solution code.

Specificity rules:
- Give 2–4 pinpointed leads that reference concrete spots in their work \
(e.g., "In your second loop that builds totals, check for a missing semicolon or \
off-by-one on the upper bound").
- Prefer actionable checks over generic advice: suggest exact diagnostics \
(print/log a variable, trace an index, plug numbers back into equation 2, check \
evidence in paragraph 3, re-check control vs. experimental setup).
- Call out likely syntax/logic/structure slips right after the area they mention \
(missing semicolons, <= vs. <, sign errors, misplaced thesis/evidence, skipped unit \
conversions) and say where to inspect.
- For logic errors, walk them through the path: point to the exact branch/loop/step \
that produces the output and ask them to trace inputs → state changes → outputs there.
- Tailor by subject: CS—loops/functions/state; Math—steps, operations, equation \
references; Science—setup, variables, controls/results; English—thesis, evidence, \
transitions; Other—most relevant structure/content checks.
- Point to the area without declaring the fix: frame checks as questions/verification, \
not statements like "replace the comma with a semicolon".
- If info is sparse, ask one clarifying question that narrows *where* to look next, \
never a broad "can you share more?".
- Never output full solutions or full code.

Tone/format:
- One tight paragraph plus a concise bullet list of the specific checks/questions. \
Avoid fluff.

DO NOT PROVIDE ANY HINTS THAT ARE NOT CORRECT!\
"""

LOCATE_SYSTEM_MESSAGE = """\
Identify the *most likely* lines in the student's submission where an error or \
logical issue resides. Return plain text in this exact format:
LINES:
- 4-4 | question-style note about what to verify there
- 9-10 | another location and what to check
NOTE: short pointer or clarifying question (optional; if none, write "NOTE: none")

Rules:
- 1–3 bullets max under LINES. Prefer spans that cover the full statement/block \
(e.g., 6-8). Only use a single-line range if the submission is one line; otherwise \
extend to include adjacent lines of that statement.
- Line numbers must include blank/whitespace-only lines; do not renumber or collapse them.
- Do NOT state the fix. Phrase reasons as checks/questions that guide inspection \
(e.g., "Check the loop header separators and increment").
- Keep reasons short and location-specific (reference the loop/branch/step near that line).
- If unsure, output:
  LINES:
  NOTE: none\
"""

EXTRACT_USER_TEMPLATE = """\
If relevant, context from the student:
• {{ ask or no_description }}
{% if subject %}Subject: {{ subject }}
{% endif %}
Extract ONLY the raw text/code. Do not fix errors.\
"""

HINT_USER_TEMPLATE = """\
Student request/context:
• {{ ask or no_description }}

Subject:
• {{ subject }}

Code snippet (may be partial):
{{ code or none_provided }}

Task: Give concrete, location-specific coaching-only hints and questions. Do NOT \
provide solutions or final code. Highlight the next spots to inspect and what to \
verify there.\
"""

LOCATE_USER_TEMPLATE = """\
Student request/context:
• {{ ask or no_description }}

Subject:
• {{ subject }}

Code with line numbers (include blank lines as shown):
{{ numbered_code or none_provided }}

Return only the specified text format. No fixes.\
"""

_extract_template = Template(EXTRACT_USER_TEMPLATE)
_hint_template = Template(HINT_USER_TEMPLATE)
_locate_template = Template(LOCATE_USER_TEMPLATE)

# Same split the client uses to count editor lines.
_LINE_SPLIT = re.compile(r"\r?\n")


def number_lines(code: str) -> str:
    """Prefix every line with its 1-based number, right-aligned to equal width.

    Blank lines are shown as ``(blank)`` so the model cannot skip them when
    counting.

        >>> number_lines("a\\n\\nb")
        '1 | a\\n2 | (blank)\\n3 | b'
    """
    lines = _LINE_SPLIT.split(code)
    width = len(str(max(1, len(lines))))
    return "\n".join(
        f"{str(idx).rjust(width)} | {line if line != '' else '(blank)'}"
        for idx, line in enumerate(lines, start=1)
    )


def compile_extract_prompt(*, ask: str | None, subject_mode: str | None) -> str:
    """Compile the user turn for image transcription.

    The subject line is omitted entirely when the client sent no mode.
    """
    rendered = _extract_template.render(
        ask=(ask or "").strip(),
        subject=subject_mode or "",
        no_description=NO_DESCRIPTION,
    )
    logger.debug("extract_prompt_compiled", prompt_length=len(rendered))
    return rendered


def compile_hint_prompt(
    *,
    code: str | None,
    ask: str | None,
    subject_mode: str | None,
    max_chars: int = 8000,
) -> str:
    """Compile the user turn for coaching hints.

    Args:
        code: The student's working text (pasted or extracted).
        ask: The student's free-text question.
        subject_mode: Raw subject mode; unknown values read "Not specified".
        max_chars: Characters of ``code`` kept in the prompt.

    Returns:
        The compiled prompt string ready for the LLM.
    """
    code = code or ""
    rendered = _hint_template.render(
        ask=(ask or "").strip(),
        subject=readable_subject(subject_mode),
        code=code[:max_chars] if code.strip() else "",
        no_description=NO_DESCRIPTION,
        none_provided=NONE_PROVIDED,
    )

    logger.debug(
        "hint_prompt_compiled",
        prompt_length=len(rendered),
        code_truncated=len(code) > max_chars,
        has_ask=bool((ask or "").strip()),
    )

    return rendered


def compile_locate_prompt(
    *,
    code: str | None,
    ask: str | None,
    subject_mode: str | None,
    max_chars: int = 8000,
) -> str:
    """Compile the user turn for line location.

    The numbered listing, not the raw code, is what gets truncated, so the
    numbers the model sees always match the editor's.
    """
    numbered = number_lines(code or "")
    rendered = _locate_template.render(
        ask=(ask or "").strip(),
        subject=readable_subject(subject_mode),
        numbered_code=numbered[:max_chars],
        no_description=NO_DESCRIPTION,
        none_provided=NONE_PROVIDED,
    )

    logger.debug(
        "locate_prompt_compiled",
        prompt_length=len(rendered),
        line_count=numbered.count("\n") + 1,
    )

    return rendered
