"""
Main FastAPI application for Weather Aggregator Service.
Includes lifespan management for provider initialization.
"""

from contextlib import asynccontextmanager
from datetime import datetime
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
import time

from weather_aggregator.core.config import settings
from weather_aggregator.core.logging_config import setup_logging, create_logger
from weather_aggregator.api.endpoints import router as api_router
from weather_aggregator.services.temperature_aggregator import aggregator_service
from weather_aggregator.api.schemas import ErrorResponse

# Setup logging first
setup_logging()
logger = create_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for FastAPI application.
    Connects providers on startup and disconnects them on shutdown.
    """
    logger.info("Starting Weather Aggregator Service", extra={
        "version": settings.app_version,
        "debug": settings.debug
    })

    try:
        await aggregator_service.initialize()
        logger.info("Weather Aggregator Service started successfully")

    except Exception as e:
        logger.error("Failed to start Weather Aggregator Service", extra={
            "error": str(e)
        })
        raise

    yield  # Application is running

    logger.info("Shutting down Weather Aggregator Service")

    try:
        await aggregator_service.shutdown()
        logger.info("Weather Aggregator Service shutdown completed")

    except Exception as e:
        logger.error("Error during service shutdown", extra={
            "error": str(e)
        })


# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    description="Concurrent temperature aggregation across multiple weather providers",
    version=settings.app_version,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
    openapi_url="/openapi.json" if settings.debug else None,
    lifespan=lifespan
)


# Request logging middleware
@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log each request with its status and processing time."""
    start_time = time.perf_counter()

    try:
        response = await call_next(request)
    except Exception as e:
        logger.error("Request failed", extra={
            "method": request.method,
            "path": request.url.path,
            "error": str(e)
        })
        raise

    process_time = time.perf_counter() - start_time
    logger.info("Request completed", extra={
        "method": request.method,
        "path": request.url.path,
        "status_code": response.status_code,
        "process_time": round(process_time, 4)
    })

    response.headers["X-Process-Time"] = str(process_time)
    return response


@app.exception_handler(404)
async def not_found_handler(request: Request, exc):
    """Handle 404 errors with structured response."""
    return JSONResponse(
        status_code=404,
        content=ErrorResponse(
            error="Endpoint not found",
            error_code="NOT_FOUND",
            details={
                "path": request.url.path,
                "method": request.method
            }
        ).model_dump(mode="json")
    )


# Include API routes
app.include_router(api_router, tags=["Weather API"])


# Root endpoint
@app.get("/", include_in_schema=False)
async def root():
    """Root endpoint with service information."""
    return {
        "service": settings.app_name,
        "version": settings.app_version,
        "status": "running",
        "providers": aggregator_service.get_provider_names(),
        "timestamp": datetime.utcnow()
    }


def run() -> None:
    """Run the service with uvicorn."""
    import uvicorn

    uvicorn.run(
        "weather_aggregator.main:app",
        host=settings.server_host,
        port=settings.server_port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
        access_log=True
    )


if __name__ == "__main__":
    run()
