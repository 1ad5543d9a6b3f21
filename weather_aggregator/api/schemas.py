"""
Pydantic schemas for Weather Aggregator Service.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional, Dict, Any, Literal
from pydantic import BaseModel, Field


class WeatherProvider(str, Enum):
    """Supported weather providers."""
    OPENWEATHERMAP = "openweathermap"
    WEATHERBIT = "weatherbit"
    CLIMACELL = "climacell"


class TemperatureResponse(BaseModel):
    """Model for an aggregated temperature response."""
    city: str = Field(..., description="City the temperature was requested for")
    temp: float = Field(..., description="Mean temperature across providers, in Kelvin")
    took: str = Field(..., description="Wall-clock duration of the aggregation")


class HealthResponse(BaseModel):
    """Model for health check response."""
    status: Literal["healthy", "unhealthy"] = Field(..., description="Service status")
    timestamp: datetime = Field(default_factory=datetime.utcnow, description="Health check timestamp")
    version: str = Field(..., description="Service version")
    uptime_seconds: float = Field(..., description="Service uptime in seconds")
    providers: List[str] = Field(default_factory=list, description="Active weather providers")
    provider_timeout_seconds: Optional[float] = Field(None, description="Per-provider deadline")


class ErrorResponse(BaseModel):
    """Model for error responses."""
    error: str = Field(..., description="Error message")
    error_code: str = Field(..., description="Error code")
    timestamp: datetime = Field(default_factory=datetime.utcnow, description="Error timestamp")
    details: Optional[Dict[str, Any]] = Field(None, description="Additional error details")
