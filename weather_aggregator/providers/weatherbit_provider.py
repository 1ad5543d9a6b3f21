"""
Weatherbit provider implementation.
Reads current conditions from Weatherbit in scientific units (Kelvin).
"""

from typing import Optional
import httpx

from .base import BaseWeatherProvider, ProviderError, DataNotFoundError
from ..api.schemas import WeatherProvider
from ..core.config import Settings


class WeatherbitProvider(BaseWeatherProvider):
    """Weatherbit provider for current conditions."""

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str = "https://api.weatherbit.io",
        client: Optional[httpx.AsyncClient] = None
    ):
        super().__init__(
            name=WeatherProvider.WEATHERBIT.value,
            api_key=api_key,
            base_url=base_url,
            client=client
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "WeatherbitProvider":
        return cls(
            api_key=settings.weatherbit_api_key,
            base_url=settings.weatherbit_api_url
        )

    async def measure(self, city: str) -> float:
        """Get the current temperature from Weatherbit."""
        # units=S asks Weatherbit for Kelvin
        data = await self._make_request(
            method="GET",
            url=f"{self.base_url}/v2.0/current",
            city=city,
            params={"units": "S", "city": city, "key": self.api_key}
        )

        try:
            observations = data["data"]
        except (KeyError, TypeError):
            raise ProviderError(
                f"Unexpected response from {self.name}: missing data",
                self.name,
                city
            )

        if not observations:
            raise DataNotFoundError(f"No observations from {self.name} for {city}", self.name, city)

        try:
            kelvin = self._extract_float(observations[0]["temp"], "data[0].temp", city)
        except (KeyError, IndexError, TypeError):
            raise ProviderError(
                f"Unexpected response from {self.name}: missing data[0].temp",
                self.name,
                city
            )

        self._log_measurement(city, kelvin)
        return kelvin
