"""
ClimaCell provider implementation.
Geocodes the city through OpenCage, then reads the realtime temperature
for those coordinates from ClimaCell.
"""

from typing import Dict, Optional, Tuple
import httpx

from .base import (
    BaseWeatherProvider, ProviderError, AuthenticationError, DataNotFoundError,
    celsius_to_kelvin
)
from ..api.schemas import WeatherProvider
from ..core.config import Settings
from ..core.logging_config import create_logger

logger = create_logger(__name__)


class ClimaCellProvider(BaseWeatherProvider):
    """ClimaCell provider; reports Celsius, converted to Kelvin."""

    def __init__(
        self,
        api_key: Optional[str],
        geocoding_api_key: Optional[str],
        base_url: str = "https://api.climacell.co",
        geocoding_url: str = "https://api.opencagedata.com",
        client: Optional[httpx.AsyncClient] = None
    ):
        super().__init__(
            name=WeatherProvider.CLIMACELL.value,
            api_key=api_key,
            base_url=base_url,
            client=client
        )
        self.geocoding_api_key = geocoding_api_key
        self.geocoding_url = geocoding_url.rstrip('/')

    @classmethod
    def from_settings(cls, settings: Settings) -> "ClimaCellProvider":
        return cls(
            api_key=settings.climacell_api_key,
            geocoding_api_key=settings.opencage_api_key,
            base_url=settings.climacell_api_url,
            geocoding_url=settings.opencage_api_url
        )

    async def connect(self) -> None:
        """Initialize client; both ClimaCell and OpenCage keys are required."""
        if not self.geocoding_api_key:
            raise AuthenticationError("OpenCage API key is required for climacell", self.name)
        await super().connect()

    async def geocode(self, city: str) -> Tuple[float, float]:
        """
        Resolve a city name to coordinates using OpenCage.

        Args:
            city: City name to resolve

        Returns:
            (latitude, longitude) of the best match

        Raises:
            DataNotFoundError: If OpenCage has no match for the city
            ProviderError: If the geocoding request fails
        """
        data = await self._make_request(
            method="GET",
            url=f"{self.geocoding_url}/geocode/v1/json",
            city=city,
            params={"q": city, "key": self.geocoding_api_key, "limit": 1}
        )

        try:
            results = data["results"]
        except (KeyError, TypeError):
            raise ProviderError(
                f"Unexpected geocoding response for {self.name}: missing results",
                self.name,
                city
            )

        if not results:
            raise DataNotFoundError(f"Could not geocode {city}", self.name, city)

        try:
            geometry: Dict[str, float] = results[0]["geometry"]
            latitude = self._extract_float(geometry["lat"], "geometry.lat", city)
            longitude = self._extract_float(geometry["lng"], "geometry.lng", city)
        except (KeyError, IndexError, TypeError):
            raise ProviderError(
                f"Unexpected geocoding response for {self.name}: missing geometry",
                self.name,
                city
            )

        logger.debug("Geocoded city", extra={
            "provider": self.name,
            "city": city,
            "lat": latitude,
            "lon": longitude
        })
        return latitude, longitude

    async def measure(self, city: str) -> float:
        """Get the current temperature from ClimaCell."""
        latitude, longitude = await self.geocode(city)

        data = await self._make_request(
            method="GET",
            url=f"{self.base_url}/v3/weather/realtime",
            city=city,
            params={
                "lat": latitude,
                "lon": longitude,
                "fields": "temp",
                "apikey": self.api_key
            }
        )

        try:
            celsius = self._extract_float(data["temp"]["value"], "temp.value", city)
        except (KeyError, TypeError):
            logger.warning("Error decoding provider response", extra={
                "provider": self.name,
                "city": city
            })
            raise ProviderError(
                f"Unexpected response from {self.name}: missing temp.value",
                self.name,
                city
            )

        kelvin = celsius_to_kelvin(celsius)
        self._log_measurement(city, kelvin)
        return kelvin
