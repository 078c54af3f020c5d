"""
Health check endpoints.

Provides liveness and readiness probes. Readiness checks that the
exclusion rules can be loaded.
"""

from fastapi import APIRouter, Response, status
from pydantic import BaseModel

from filterforge.exclusion import get_rules

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    rules: str | None = None


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """
    Liveness probe.

    Returns healthy if the service is running.
    Does not check dependencies.
    """
    return HealthResponse(status="healthy")


@router.get(
    "/ready",
    response_model=HealthResponse,
    responses={503: {"model": HealthResponse}},
)
async def ready(response: Response) -> HealthResponse:
    """
    Readiness probe.

    Returns ready if the exclusion rules load and are non-empty.
    Returns 503 otherwise.
    """
    try:
        rules = get_rules()
    except FileNotFoundError:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return HealthResponse(status="not ready", rules="missing")

    if rules.is_empty():
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return HealthResponse(status="not ready", rules="empty")
    return HealthResponse(status="ready", rules="loaded")
