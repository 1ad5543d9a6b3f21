"""
Abstract base class for weather providers in Weather Aggregator.
Defines the interface that all weather providers must implement.
"""

from abc import ABC, abstractmethod
from typing import Dict, Optional, Any
import httpx

from ..core.config import settings
from ..core.logging_config import create_logger

logger = create_logger(__name__)

KELVIN_OFFSET = 273.15


class ProviderError(Exception):
    """Base exception for provider errors."""

    def __init__(self, message: str, provider: str, city: Optional[str] = None):
        self.message = message
        self.provider = provider
        self.city = city
        super().__init__(self.message)


class AuthenticationError(ProviderError):
    """Exception raised when provider authentication fails."""
    pass


class DataNotFoundError(ProviderError):
    """Exception raised when the provider has no data for the requested city."""
    pass


def celsius_to_kelvin(celsius: float) -> float:
    """Convert a Celsius reading to Kelvin."""
    return celsius + KELVIN_OFFSET


class BaseWeatherProvider(ABC):
    """Abstract base class for weather providers.

    A provider turns a city name into a single temperature in Kelvin. Every
    failure, whether transport, status code, decoding or response shape,
    surfaces as a ProviderError.
    """

    requires_api_key = True

    def __init__(
        self,
        name: str,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None
    ):
        self.name = name
        self.api_key = api_key
        self.base_url = base_url.rstrip('/') if base_url else base_url
        self.client = client
        self._owns_client = client is None

    async def __aenter__(self):
        """Async context manager entry."""
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.disconnect()

    async def connect(self) -> None:
        """Initialize HTTP client connection."""
        if self.requires_api_key and not self.api_key:
            raise AuthenticationError(f"{self.name} API key is required", self.name)

        if self.client is None:
            timeout = httpx.Timeout(settings.http_timeout, connect=settings.http_connect_timeout)
            limits = httpx.Limits(max_keepalive_connections=10, max_connections=20)

            self.client = httpx.AsyncClient(
                timeout=timeout,
                limits=limits,
                headers=self._get_default_headers(),
                follow_redirects=True
            )
            self._owns_client = True

            logger.debug("Connected to provider", extra={"provider": self.name})

    async def disconnect(self) -> None:
        """Close HTTP client connection."""
        if self.client and self._owns_client:
            await self.client.aclose()
            self.client = None
            logger.debug("Disconnected from provider", extra={"provider": self.name})

    def _get_default_headers(self) -> Dict[str, str]:
        """Get default HTTP headers for requests."""
        return {
            'User-Agent': 'Weather-Aggregator/1.0.0',
            'Accept': 'application/json',
            'Accept-Encoding': 'gzip, deflate',
            'Connection': 'keep-alive'
        }

    async def _make_request(
        self,
        method: str,
        url: str,
        city: str,
        params: Optional[Dict[str, Any]] = None
    ) -> Any:
        """Make a single HTTP request and decode its JSON body.

        No retry is attempted: any failure is converted to a ProviderError
        and raised to the caller.
        """
        if not self.client:
            await self.connect()

        logger.debug("Making request to provider", extra={
            "provider": self.name,
            "method": method,
            "url": url,
            "city": city
        })

        try:
            response = await self.client.request(method=method, url=url, params=params)
        except httpx.TimeoutException:
            logger.warning("Request timeout", extra={
                "provider": self.name,
                "url": url,
                "city": city
            })
            raise ProviderError(f"Request timeout for {self.name}", self.name, city)
        except httpx.HTTPError as e:
            logger.warning("HTTP error", extra={
                "provider": self.name,
                "error": str(e),
                "city": city
            })
            raise ProviderError(f"HTTP error for {self.name}: {str(e)}", self.name, city)

        if response.status_code == 401:
            raise AuthenticationError(f"Authentication failed for {self.name}", self.name, city)

        if not response.is_success:
            raise ProviderError(
                f"{self.name} returned HTTP {response.status_code} for {city}",
                self.name,
                city
            )

        try:
            data = response.json()
        except ValueError as e:
            raise ProviderError(
                f"Invalid JSON response from {self.name}: {str(e)}",
                self.name,
                city
            )

        logger.debug("Received response from provider", extra={
            "provider": self.name,
            "status_code": response.status_code,
            "response_size": len(response.content)
        })
        return data

    def _extract_float(self, value: Any, field: str, city: str) -> float:
        """Coerce a decoded JSON field to float or raise a ProviderError."""
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ProviderError(
                f"Unexpected response from {self.name}: field '{field}' is not a number",
                self.name,
                city
            )
        return float(value)

    def _log_measurement(self, city: str, kelvin: float) -> None:
        logger.info("Provider measurement", extra={
            "provider": self.name,
            "city": city,
            "temperature_kelvin": round(kelvin, 2)
        })

    @abstractmethod
    async def measure(self, city: str) -> float:
        """
        Get the current temperature for the given city.

        Args:
            city: City name to look up

        Returns:
            Temperature in Kelvin

        Raises:
            ProviderError: If unable to produce a temperature
        """
        pass
