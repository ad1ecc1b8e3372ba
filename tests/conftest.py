"""Pytest configuration for clueai tests."""

import json

import httpx
import pytest

from clueai.core.config import get_settings

BASE_URL = "http://assist.test/api/v1"


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch, tmp_path):
    """Fresh settings per test, never a developer's real keys or state file."""
    monkeypatch.setenv("GEMINI_API_KEY", "")
    monkeypatch.setenv("OPENAI_API_KEY", "test-openai-key")
    monkeypatch.setenv("ENVIRONMENT", "development")
    monkeypatch.setenv("CLIENT_STATE_PATH", str(tmp_path / "state.json"))
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class FakeAssistAPI:
    """Routes requests to canned replies and remembers what was sent.

    ``replies`` maps an endpoint path (``/extract``, ``/help``,
    ``/help/locate``) to ``(status_code, json_body)`` or to an async callable
    taking the decoded request body and returning that pair.
    """

    def __init__(self, replies: dict) -> None:
        self.replies = replies
        self.calls: list[tuple[str, dict]] = []

    @property
    def paths(self) -> list[str]:
        return [path for path, _ in self.calls]

    async def handler(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path.removeprefix("/api/v1")
        body = json.loads(request.content or b"{}")
        self.calls.append((path, body))
        reply = self.replies.get(path)
        if reply is None:
            return httpx.Response(404, json={"error": f"no route {path}"})
        if callable(reply):
            reply = await reply(body)
        status_code, payload = reply
        if isinstance(payload, (dict, list)):
            return httpx.Response(status_code, json=payload)
        return httpx.Response(status_code, text=payload)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def fake_api():
    """Factory: ``fake_api({...})`` → (FakeAssistAPI, transport)."""

    def make(replies: dict):
        api = FakeAssistAPI(replies)
        return api, api.transport()

    return make
