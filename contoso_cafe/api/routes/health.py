"""Health check endpoints.

Provides:
- Basic health check (GET /health)
- Detailed health check with dependency status (GET /health/detailed)
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from contoso_cafe import __version__
from contoso_cafe.api.dependencies import get_runtime
from contoso_cafe.core.runtime import BotRuntime

router = APIRouter()

# Storage key that is never used by a real conversation
_PROBE_KEY = "health/conversations/probe"


class HealthResponse(BaseModel):
    """Basic health check response."""

    status: str


class DetailedHealthResponse(BaseModel):
    """Detailed health check response."""

    status: str
    checks: dict[str, str]
    version: str


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Basic health check endpoint.

    Returns:
        Simple status indicating the API is running.
    """
    return HealthResponse(status="healthy")


@router.get("/health/detailed", response_model=DetailedHealthResponse)
async def detailed_health_check(
    runtime: BotRuntime = Depends(get_runtime),
) -> DetailedHealthResponse:
    """Detailed health check including dependency status.

    Checks:
    - State storage is readable
    - Which recognizer and knowledge base are configured (no external calls)

    Returns:
        Status with individual component checks.
    """
    settings = runtime.settings
    checks: dict[str, str] = {"bot": settings.bot_kind}

    try:
        await runtime.storage.read([_PROBE_KEY])
        checks["storage"] = "ok"
    except Exception as e:
        checks["storage"] = f"error: {type(e).__name__}"

    checks["recognizer"] = settings.recognizer
    if settings.recognizer == "llm":
        checks["groq"] = "configured" if settings.groq_api_key else "missing"
    checks["qna"] = "configured" if settings.qna_enabled else "disabled"

    status = "healthy" if checks["storage"] == "ok" else "degraded"

    return DetailedHealthResponse(
        status=status,
        checks=checks,
        version=__version__,
    )
