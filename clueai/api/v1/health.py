"""
clueai/api/v1/health.py

GET /api/v1/health: backend configuration check.

Returns HTTP 200 when a model provider is configured.
Returns HTTP 503 when no LLM API key is set, so monitoring tools and load
balancers see that every Assist endpoint would fail.

The check is configuration-only: it does not spend a model call.
"""

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from clueai.core.config import get_settings
from clueai.core.logging import get_logger
from clueai.schemas.health import HealthResponse, ServiceStatus

logger = get_logger(__name__)
router = APIRouter()


def _probe_llm() -> ServiceStatus:
    settings = get_settings()
    provider = settings.llm_provider
    if provider is None:
        return ServiceStatus(status="error", detail="No LLM API key configured")
    return ServiceStatus(status="ok", detail=provider)


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Backend health check",
)
async def health_check() -> JSONResponse:
    """Report version, environment and whether a model provider is configured."""
    settings = get_settings()

    llm_status = _probe_llm()
    all_ok = llm_status.status == "ok"
    overall = "ok" if all_ok else "degraded"

    response = HealthResponse(
        status=overall,
        version=settings.app_version,
        environment=settings.environment,
        llm=llm_status,
    )

    logger.info("health_check", overall=overall, llm=llm_status.status)

    return JSONResponse(
        content=response.model_dump(),
        status_code=status.HTTP_200_OK if all_ok else status.HTTP_503_SERVICE_UNAVAILABLE,
    )
