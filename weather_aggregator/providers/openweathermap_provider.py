"""
OpenWeatherMap provider implementation.
Reads the current temperature from the OpenWeatherMap weather endpoint.
"""

from typing import Optional
import httpx

from .base import BaseWeatherProvider, ProviderError
from ..api.schemas import WeatherProvider
from ..core.config import Settings


class OpenWeatherMapProvider(BaseWeatherProvider):
    """OpenWeatherMap provider; reports Kelvin natively."""

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str = "http://api.openweathermap.org",
        client: Optional[httpx.AsyncClient] = None
    ):
        super().__init__(
            name=WeatherProvider.OPENWEATHERMAP.value,
            api_key=api_key,
            base_url=base_url,
            client=client
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "OpenWeatherMapProvider":
        return cls(
            api_key=settings.openweathermap_api_key,
            base_url=settings.openweathermap_api_url
        )

    async def measure(self, city: str) -> float:
        """Get the current temperature from OpenWeatherMap."""
        data = await self._make_request(
            method="GET",
            url=f"{self.base_url}/data/2.5/weather",
            city=city,
            params={"APPID": self.api_key, "q": city}
        )

        try:
            kelvin = self._extract_float(data["main"]["temp"], "main.temp", city)
        except (KeyError, TypeError):
            raise ProviderError(
                f"Unexpected response from {self.name}: missing main.temp",
                self.name,
                city
            )

        self._log_measurement(city, kelvin)
        return kelvin
