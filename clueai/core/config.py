"""
clueai/core/config.py

Application settings loaded from environment variables / .env file.
Uses Pydantic Settings v2 for type-safe config with fail-fast validation:
a malformed value (e.g. a non-numeric temperature) makes the app refuse to
start with a clear error message rather than silently running on defaults.

Both halves of the project read from the same ``Settings``:
  - The Assist API (LLM keys, model override, CORS, prompt truncation).
  - The client core (API base URL, local state file, HTTP timeout).

Usage:
    from clueai.core.config import get_settings
    settings = get_settings()
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        # Extra fields in .env are silently ignored.
        extra="ignore",
    )

    # ── LLM APIs ──────────────────────────────────────────────────────────────
    # Both optional: the app starts without a key, and /health reports degraded.
    gemini_api_key: str | None = Field(default=None, description="Google Gemini API key")
    openai_api_key: str | None = Field(default=None, description="OpenAI API key (alternative)")

    # ── LLM Model Override ───────────────────────────────────────────────────
    llm_model: str | None = Field(
        default=None,
        description="Override default LLM model name (e.g. 'gemini-2.5-flash', 'gpt-4o')",
    )
    llm_temperature: float = Field(default=0.2, ge=0.0, le=2.0)

    # ── Prompt limits ─────────────────────────────────────────────────────────
    max_input_chars: int = Field(
        default=8000,
        gt=0,
        description="Student text beyond this many characters is cut before prompting",
    )

    # ── HTTP ──────────────────────────────────────────────────────────────────
    cors_origins: list[str] = Field(
        default_factory=list,
        description="Allowed browser origins in production (all origins in development)",
    )

    # ── Client ────────────────────────────────────────────────────────────────
    api_base_url: str = Field(
        default="http://localhost:8000/api/v1",
        description="Base URL of the Assist API used by the client orchestrator",
    )
    client_state_path: Path = Field(
        default=Path.home() / ".clueai" / "state.json",
        description="JSON file holding the client's history and theme preference",
    )
    client_timeout: float | None = Field(
        default=None,
        description="Per-request timeout in seconds for the client; None waits forever",
    )

    # ── Application ───────────────────────────────────────────────────────────
    environment: Literal["development", "production"] = Field(
        default="development",
        description="Runtime environment; controls log format and debug features",
    )
    app_version: str = Field(default="0.1.0")

    # ── Validators ────────────────────────────────────────────────────────────
    @field_validator("api_base_url")
    @classmethod
    def api_base_url_must_be_http(cls, v: str) -> str:
        if not v.startswith(("https://", "http://")):
            raise ValueError("API_BASE_URL must start with http:// or https://")
        return v.rstrip("/")

    @field_validator("gemini_api_key", "openai_api_key", "llm_model")
    @classmethod
    def blank_means_unset(cls, v: str | None) -> str | None:
        # `GEMINI_API_KEY=` in .env should behave like the variable is absent.
        if v is None or v.strip() == "":
            return None
        return v.strip()

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def llm_provider(self) -> Literal["google", "openai"] | None:
        """Provider that will be used, in priority order Gemini → OpenAI."""
        if self.gemini_api_key:
            return "google"
        if self.openai_api_key:
            return "openai"
        return None


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return (and cache) the application settings singleton.

    The cache means settings are validated once at first call.
    Use `get_settings.cache_clear()` in tests to reload from a fresh environment.
    """
    return Settings()
