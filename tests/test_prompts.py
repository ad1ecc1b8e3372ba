"""Tests for prompt compilation and output post-processing."""

import pytest

from clueai.schemas.assist import SubjectMode, readable_subject
from clueai.services.postprocess import EMPTY_HINT_FALLBACK, hint_or_fallback, strip_code_fences
from clueai.services.prompts import (
    compile_extract_prompt,
    compile_hint_prompt,
    compile_locate_prompt,
    number_lines,
)


class TestNumberLines:
    def test_blank_lines_marked(self):
        assert number_lines("a\n\nb") == "1 | a\n2 | (blank)\n3 | b"

    def test_numbers_right_aligned(self):
        numbered = number_lines("\n".join(f"l{i}" for i in range(1, 11)))

        assert numbered.splitlines()[0] == " 1 | l1"
        assert numbered.splitlines()[-1] == "10 | l10"

    def test_trailing_newline_is_a_line(self):
        assert number_lines("a\r\n") == "1 | a\n2 | (blank)"


class TestHintPrompt:
    def test_includes_context(self):
        prompt = compile_hint_prompt(code="x = 1", ask="  why?  ", subject_mode="cs")

        assert "• why?" in prompt
        assert "• Computer Science" in prompt
        assert "x = 1" in prompt

    def test_placeholders_when_empty(self):
        prompt = compile_hint_prompt(code="   ", ask=None, subject_mode="astrology")

        assert "(no extra description provided)" in prompt
        assert "(none provided)" in prompt
        assert "• Not specified" in prompt

    def test_code_truncated(self):
        prompt = compile_hint_prompt(code="a" * 50, ask="", subject_mode="cs", max_chars=10)

        assert "a" * 10 in prompt
        assert "a" * 11 not in prompt


class TestLocatePrompt:
    def test_numbered_listing(self):
        prompt = compile_locate_prompt(code="x\n\ny", ask="", subject_mode="math")

        assert "1 | x\n2 | (blank)\n3 | y" in prompt
        assert "• Math" in prompt


class TestExtractPrompt:
    def test_subject_line_optional(self):
        assert "Subject: cs" in compile_extract_prompt(ask="", subject_mode="cs")
        assert "Subject:" not in compile_extract_prompt(ask="", subject_mode=None)


class TestStripCodeFences:
    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("```python\nprint(1)\n```", "print(1)"),
            ("```\nprint(1)\n```", "print(1)"),
            ("```print(1)```", "print(1)"),
            ("print(1)", "print(1)"),
            ("see:\n```\ncode\n```", "see:\n```\ncode\n```"),
        ],
    )
    def test_only_whole_reply_fences(self, raw, expected):
        assert strip_code_fences(raw) == expected


def test_hint_fallback():
    assert hint_or_fallback("") == EMPTY_HINT_FALLBACK
    assert hint_or_fallback(None) == EMPTY_HINT_FALLBACK
    assert hint_or_fallback("  keep  ") == "  keep  "


class TestSubjectMode:
    def test_labels(self):
        assert readable_subject("english") == "English"
        assert readable_subject(None) == "Not specified"
        assert SubjectMode.CS.label == "Computer Science"
