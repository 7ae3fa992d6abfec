"""Health check API endpoints."""

from fastapi import APIRouter, Request

from sales_copilot.schemas.common import HealthCheckResponse
from sales_copilot.utils.logging import get_logger

LOGGER = get_logger(__name__)

router = APIRouter()


@router.get(
    "",
    response_model=HealthCheckResponse,
    summary="Health check endpoint",
    description="Check if the service is running and its database is reachable",
    operation_id="get_service_health_status",
)
async def health_check(request: Request) -> HealthCheckResponse:
    """Health check endpoint."""
    app_settings = request.app.state.settings
    db_health = await request.app.state.db_client.health_check()
    if db_health["status"] != "healthy":
        LOGGER.warning(f"Database unhealthy: {db_health.get('error')}")

    return HealthCheckResponse(
        status="healthy" if db_health["status"] == "healthy" else "degraded",
        version=app_settings.app_version,
        service=app_settings.app_name,
    )
