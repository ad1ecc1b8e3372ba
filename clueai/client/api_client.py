"""
clueai/client/api_client.py

Async HTTP client for the Assist API (extract, help, help/locate).

Every endpoint answers ``{aiText}`` on success and ``{error}`` with a non-2xx
status on failure. This client turns any failure (HTTP status, transport
error, or a body that isn't JSON) into ``AssistServiceError`` carrying the
best message available, so callers deal with one exception type.

Each call is attempted once. No timeout unless ``timeout`` is given: a
stalled call stalls the submission, the server is expected to bound it.

Usage:
    async with AssistClient("http://localhost:8000/api/v1") as client:
        hint = await client.help(code=code, ask=ask, images=[], subject_mode="cs")
"""

from collections.abc import Sequence

import httpx

from clueai.core.logging import get_logger
from clueai.schemas.assist import ImageAttachment, SubjectMode

logger = get_logger(__name__)


class AssistServiceError(Exception):
    """A call to the Assist API failed; ``str(exc)`` is user-presentable."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def _images_payload(images: Sequence[ImageAttachment]) -> list[dict]:
    return [image.model_dump() for image in images]


class AssistClient:
    def __init__(
        self,
        base_url: str,
        *,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "AssistClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _post(self, path: str, payload: dict, fallback_error: str) -> str:
        """POST ``payload`` and return ``aiText``.

        Raises:
            AssistServiceError: With the server's ``error`` message when it
                sent one, the transport error text, or ``fallback_error``.
        """
        try:
            response = await self._client.post(path, json=payload)
        except httpx.RequestError as exc:
            logger.error("assist_request_error", path=path, error=str(exc))
            raise AssistServiceError(str(exc) or fallback_error) from exc

        try:
            data = response.json()
        except ValueError:
            data = None

        if not response.is_success:
            message = data.get("error") if isinstance(data, dict) else None
            if not isinstance(message, str):
                message = None
            logger.warning(
                "assist_request_failed",
                path=path,
                status_code=response.status_code,
                error=message,
            )
            raise AssistServiceError(message or fallback_error, response.status_code)

        if not isinstance(data, dict):
            logger.warning("assist_response_malformed", path=path, status_code=response.status_code)
            raise AssistServiceError(fallback_error, response.status_code)

        ai_text = data.get("aiText")
        return ai_text if isinstance(ai_text, str) else ""

    async def extract(
        self,
        *,
        images: Sequence[ImageAttachment],
        ask: str,
        subject_mode: SubjectMode,
    ) -> str:
        """Transcribed text from ``images``, trimmed. Empty text is an error."""
        ai_text = await self._post(
            "/extract",
            {"images": _images_payload(images), "ask": ask, "subjectMode": subject_mode.value},
            fallback_error="Failed to extract code from image",
        )
        extracted = ai_text.strip()
        if not extracted:
            raise AssistServiceError("No text extracted from image")
        return extracted

    async def help(
        self,
        *,
        code: str,
        ask: str,
        images: Sequence[ImageAttachment],
        subject_mode: SubjectMode,
    ) -> str:
        return await self._post(
            "/help",
            {
                "code": code,
                "ask": ask,
                "images": _images_payload(images),
                "subjectMode": subject_mode.value,
            },
            fallback_error="Request failed",
        )

    async def locate(self, *, code: str, ask: str, subject_mode: SubjectMode) -> str:
        return await self._post(
            "/help/locate",
            {"code": code, "ask": ask, "subjectMode": subject_mode.value},
            fallback_error="Request failed",
        )
