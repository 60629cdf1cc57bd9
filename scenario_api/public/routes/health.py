"""
Health check endpoint. Minimal, stable, no scenario execution.
"""
from fastapi import APIRouter
from datetime import datetime, timezone
from scenario_api.public.schemas import ErrorResponse, HealthResponse
from scenario_api.public.settings import settings

router = APIRouter(responses={500: {"model": ErrorResponse}})


@router.get("/health")
async def health_check() -> HealthResponse:
    """
    Simple health check. Returns service status, version, commit.
    """
    return HealthResponse(
        status="ok",
        service="float-stability-api",
        version=settings.api_version,
        commit=settings.build_commit,
        timestamp=datetime.now(timezone.utc),
    )
