"""Tests for the LLM gateway with the chat model faked."""

import pytest
from langchain_core.messages import AIMessage, HumanMessage, SystemMessage

from clueai.core.config import get_settings
from clueai.schemas.assist import ImageAttachment
from clueai.services import llm
from clueai.services.llm import LLMError, build_messages
from clueai.services.postprocess import EMPTY_HINT_FALLBACK


class FakeChatModel:
    def __init__(self, reply=None, error=None):
        self.reply = reply
        self.error = error
        self.messages = None

    async def ainvoke(self, messages):
        self.messages = messages
        if self.error is not None:
            raise self.error
        return AIMessage(content=self.reply)


@pytest.fixture
def fake_model(monkeypatch):
    def install(reply=None, error=None):
        model = FakeChatModel(reply=reply, error=error)
        monkeypatch.setattr(llm, "_create_llm", lambda: model)
        return model

    return install


class TestBuildMessages:
    def test_system_and_user_parts(self):
        images = [
            ImageAttachment(name="a.png", src="data:image/png;base64,AAA"),
            ImageAttachment(name="empty.png", src=""),
        ]

        system, user = build_messages("rules", "context", images)

        assert isinstance(system, SystemMessage)
        assert system.content == "rules"
        assert isinstance(user, HumanMessage)
        assert user.content == [
            {"type": "text", "text": "context"},
            {"type": "image_url", "image_url": {"url": "data:image/png;base64,AAA"}},
        ]


class TestCreateLLM:
    def test_no_key_raises(self, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "")
        get_settings.cache_clear()

        with pytest.raises(LLMError, match="No LLM API key configured"):
            llm._create_llm()


class TestTasks:
    @pytest.mark.asyncio
    async def test_extract_strips_fence(self, fake_model):
        model = fake_model(reply="```java\nint x = 1;\n```")

        text = await llm.extract_text(
            images=[ImageAttachment(name="a.png", src="data:a")], ask="", subject_mode="cs"
        )

        assert text == "int x = 1;"
        assert model.messages[0].content.startswith("You transcribe code from images.")

    @pytest.mark.asyncio
    async def test_hint_empty_reply_falls_back(self, fake_model):
        fake_model(reply="")

        assert await llm.generate_hint(code="x", ask="why") == EMPTY_HINT_FALLBACK

    @pytest.mark.asyncio
    async def test_hint_content_parts_flattened(self, fake_model):
        fake_model(reply=[{"type": "text", "text": "Check "}, {"type": "text", "text": "line 2."}])

        assert await llm.generate_hint(code="x") == "Check line 2."

    @pytest.mark.asyncio
    async def test_locate_sends_numbered_code(self, fake_model):
        model = fake_model(reply="LINES:\nNOTE: none")

        reply = await llm.locate_lines(code="a\n\nb", ask="", subject_mode="science")

        assert reply == "LINES:\nNOTE: none"
        prompt = model.messages[1].content[0]["text"]
        assert "1 | a\n2 | (blank)\n3 | b" in prompt
        assert "• Science" in prompt

    @pytest.mark.asyncio
    async def test_provider_failure_becomes_llm_error(self, fake_model):
        fake_model(error=RuntimeError("429 Too Many Requests"))

        with pytest.raises(LLMError, match="429"):
            await llm.generate_hint(code="x")
