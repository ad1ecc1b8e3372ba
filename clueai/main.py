"""
clueai/main.py

FastAPI application entrypoint for the Assist API.

Startup sequence (via lifespan):
  1. Logging is configured (JSON in prod, coloured console in dev).
  2. The configured model provider is logged; a missing API key is a warning,
     not a startup failure, so /health can report it.

The API is stateless: no database, no queue, no per-user data. Each request
is one model call.

Environment variables are loaded by Pydantic Settings from ``.env``; there
is no ``load_dotenv()`` call here. Do not add one.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from clueai.api.errors import validation_exception_handler
from clueai.core.config import get_settings
from clueai.core.logging import get_logger, setup_logging


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Configure logging and report the model provider before serving."""
    settings = get_settings()

    # ── Startup ───────────────────────────────────────────────────────────────
    setup_logging(environment=settings.environment)
    logger = get_logger(__name__)

    logger.info(
        "app_startup",
        version=settings.app_version,
        environment=settings.environment,
    )

    if settings.llm_provider is None:
        logger.warning(
            "llm_not_configured",
            message="Set GEMINI_API_KEY or OPENAI_API_KEY; Assist endpoints will return 500.",
        )
    else:
        logger.info("app_ready", llm_provider=settings.llm_provider)

    yield  # ← application serves requests here

    # ── Shutdown ──────────────────────────────────────────────────────────────
    logger.info("app_stopped")


def create_app() -> FastAPI:
    """Application factory.

    Returns a configured FastAPI instance. Separating creation from the module
    global makes the app importable without side effects (useful for testing).
    """
    settings = get_settings()

    app = FastAPI(
        title="ClueAI Assist API",
        description=(
            "Coaching-style hints for student assignments without giving the answer. "
            "Transcribes work from images, returns non-spoiler hints, and points at "
            "the line ranges worth inspecting."
        ),
        version=settings.app_version,
        docs_url="/docs" if not settings.is_production else None,
        redoc_url="/redoc" if not settings.is_production else None,
        lifespan=lifespan,
    )

    # ── CORS ──────────────────────────────────────────────────────────────────
    # All origins in development; the configured list in production.
    origins = ["*"] if not settings.is_production else settings.cors_origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=False,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    # ── Routers ───────────────────────────────────────────────────────────────
    from clueai.api.v1 import extract, health, hint  # noqa: PLC0415  (deferred import avoids circular deps at configure time)

    app.include_router(health.router, prefix="/api/v1", tags=["Health"])
    app.include_router(extract.router, prefix="/api/v1", tags=["Extraction"])
    app.include_router(hint.router, prefix="/api/v1", tags=["Coaching"])

    @app.get("/", include_in_schema=False)
    async def root() -> dict:
        return {
            "service": "clueai-assist",
            "version": settings.app_version,
            "docs": "/docs",
        }

    return app


# Module-level app instance, used by uvicorn: ``uvicorn clueai.main:app``
app = create_app()
