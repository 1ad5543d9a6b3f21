"""
FastAPI endpoints for Weather Aggregator Service.
"""

from datetime import datetime
from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from ..api.schemas import TemperatureResponse, HealthResponse
from ..core.config import settings
from ..core.logging_config import create_logger
from ..providers import ProviderError
from ..services.temperature_aggregator import (
    TemperatureAggregatorService, EmptyProviderSetError, aggregator_service
)

logger = create_logger(__name__)

# Create API router
router = APIRouter()

# Application startup time for uptime calculation
app_start_time = datetime.utcnow()


def get_aggregator() -> TemperatureAggregatorService:
    """Dependency returning the process-wide aggregator service."""
    return aggregator_service


@router.get("/hello", response_class=PlainTextResponse)
async def hello():
    """Liveness greeting."""
    return "hello!"


@router.get(
    "/weather/{city:path}",
    response_model=TemperatureResponse,
    responses={
        500: {"description": "A provider failed", "content": {"text/plain": {}}},
        503: {"description": "No providers configured", "content": {"text/plain": {}}}
    }
)
async def get_weather(city: str, aggregator: TemperatureAggregatorService = Depends(get_aggregator)):
    """
    Get the mean current temperature for a city across all providers.

    Args:
        city: City name; everything after /weather/ in the path

    Returns:
        City, mean temperature in Kelvin and how long the aggregation took
    """
    if not city.strip():
        return PlainTextResponse("city is required", status_code=400)

    logger.info("Weather request received", extra={"city": city})

    try:
        result = await aggregator.query(city)

    except EmptyProviderSetError as e:
        return PlainTextResponse(e.message, status_code=503)

    except ProviderError as e:
        return PlainTextResponse(e.message, status_code=500)

    return TemperatureResponse(
        city=result.city,
        temp=result.temperature,
        took=result.took_display
    )


@router.get("/health", response_model=HealthResponse)
async def health_check(aggregator: TemperatureAggregatorService = Depends(get_aggregator)):
    """
    Health check endpoint.
    The service is healthy while at least one provider is active.
    """
    providers = aggregator.get_provider_names()
    uptime_seconds = (datetime.utcnow() - app_start_time).total_seconds()

    return HealthResponse(
        status="healthy" if providers else "unhealthy",
        version=settings.app_version,
        uptime_seconds=uptime_seconds,
        providers=providers,
        provider_timeout_seconds=aggregator.provider_timeout
    )
