"""
clueai/services/llm.py

Langchain LLM integration for the three Assist endpoints:
  - Image transcription (vision input → verbatim text)
  - Coaching hints (text + optional images → free-form markdown)
  - Line location (numbered text → LINES/NOTE block)

Initializes a chat model based on available API keys (Gemini → OpenAI).

Rules:
    - Every call is attempted exactly once. There are no retries; the client
      surfaces the failure to the student instead.
    - LLM API key comes from environment: never hardcode, never log it.
    - Model output is returned as text; parsing of the locate grammar happens
      in the client.
"""

from langchain_core.messages import HumanMessage, SystemMessage

from clueai.core.config import get_settings
from clueai.core.logging import get_logger
from clueai.schemas.assist import ImageAttachment
from clueai.services.postprocess import hint_or_fallback, strip_code_fences
from clueai.services.prompts import (
    EXTRACT_SYSTEM_MESSAGE,
    HINT_SYSTEM_MESSAGE,
    LOCATE_SYSTEM_MESSAGE,
    compile_extract_prompt,
    compile_hint_prompt,
    compile_locate_prompt,
)

logger = get_logger(__name__)


class LLMError(Exception):
    """Raised when the chat model cannot be created or the call fails."""

    pass


def _create_llm():
    """Create a Langchain chat model based on available API keys.

    Priority: Gemini → OpenAI. Both default models accept image input.

    Raises:
        LLMError: If no API key is configured.
    """
    settings = get_settings()

    if settings.gemini_api_key:
        from langchain_google_genai import ChatGoogleGenerativeAI

        model_name = settings.llm_model or "gemini-2.5-flash"
        logger.info("llm_init", provider="google", model=model_name)
        return ChatGoogleGenerativeAI(
            model=model_name,
            google_api_key=settings.gemini_api_key,
            temperature=settings.llm_temperature,
        )

    if settings.openai_api_key:
        from langchain_openai import ChatOpenAI

        model_name = settings.llm_model or "gpt-4o"
        logger.info("llm_init", provider="openai", model=model_name)
        return ChatOpenAI(
            model=model_name,
            api_key=settings.openai_api_key,
            temperature=settings.llm_temperature,
        )

    raise LLMError(
        "No LLM API key configured. Set GEMINI_API_KEY or OPENAI_API_KEY in .env"
    )


def _content_to_text(content) -> str:
    """Flatten a chat message ``content`` (str or list of parts) to plain text."""
    if isinstance(content, list):
        return "".join(
            str(part.get("text", "")) if isinstance(part, dict) else str(part)
            for part in content
        )
    return str(content)


def build_messages(
    system: str,
    user_text: str,
    images: list[ImageAttachment] | None = None,
) -> list:
    """Build the system + user turn, attaching each image that has a source.

    Images without ``src`` are skipped rather than sent as empty parts.
    """
    parts: list[dict] = [{"type": "text", "text": user_text}]
    for image in images or []:
        if image.src:
            parts.append({"type": "image_url", "image_url": {"url": image.src}})
    return [SystemMessage(content=system), HumanMessage(content=parts)]


async def _complete(task: str, messages: list) -> str:
    """Run one chat completion and return its text.

    Args:
        task: Short name used in log events ("extract", "hint", "locate").
        messages: Output of ``build_messages``.

    Raises:
        LLMError: On missing configuration or any provider failure.
    """
    llm = _create_llm()

    logger.info("llm_call_start", task=task, parts=len(messages[-1].content))

    try:
        result = await llm.ainvoke(messages)
    except Exception as exc:
        logger.error(
            "llm_call_failed",
            task=task,
            error=str(exc),
            error_type=type(exc).__name__,
        )
        raise LLMError(str(exc) or f"{task} request failed") from exc

    text = _content_to_text(result.content if hasattr(result, "content") else result)
    logger.info("llm_call_success", task=task, response_length=len(text))
    return text


async def extract_text(
    *,
    images: list[ImageAttachment],
    ask: str | None = None,
    subject_mode: str | None = None,
) -> str:
    """Transcribe text/code from images.

    Returns:
        The transcription with any whole-reply code fence removed. May be
        empty; the endpoint decides how to report that.
    """
    prompt = compile_extract_prompt(ask=ask, subject_mode=subject_mode)
    raw = await _complete("extract", build_messages(EXTRACT_SYSTEM_MESSAGE, prompt, images))
    return strip_code_fences(raw.strip())


async def generate_hint(
    *,
    code: str | None,
    ask: str | None = None,
    images: list[ImageAttachment] | None = None,
    subject_mode: str | None = None,
) -> str:
    """Produce coaching-only hints for the student's work."""
    settings = get_settings()
    prompt = compile_hint_prompt(
        code=code,
        ask=ask,
        subject_mode=subject_mode,
        max_chars=settings.max_input_chars,
    )
    raw = await _complete("hint", build_messages(HINT_SYSTEM_MESSAGE, prompt, images))
    return hint_or_fallback(raw)


async def locate_lines(
    *,
    code: str | None,
    ask: str | None = None,
    subject_mode: str | None = None,
) -> str:
    """Ask the model which lines to inspect; returns the raw LINES/NOTE block."""
    settings = get_settings()
    prompt = compile_locate_prompt(
        code=code,
        ask=ask,
        subject_mode=subject_mode,
        max_chars=settings.max_input_chars,
    )
    return await _complete("locate", build_messages(LOCATE_SYSTEM_MESSAGE, prompt))
