"""
Temperature aggregator service for Weather Aggregator.
Queries every configured provider concurrently and reduces their
temperatures to a single mean, failing fast on the first provider error.
"""

import asyncio
import math
import time
from dataclasses import dataclass
from typing import Iterable, List, Optional, Set

from ..core.config import Settings, settings
from ..core.logging_config import create_logger
from ..providers import PROVIDER_CLASSES, BaseWeatherProvider, ProviderError

logger = create_logger(__name__)

# Provider tasks still running after their aggregation call returned early.
# Held here so the event loop keeps a strong reference until they finish.
_in_flight: Set[asyncio.Task] = set()


class AggregationError(Exception):
    """Base exception for aggregation errors."""
    pass


class EmptyProviderSetError(AggregationError):
    """Exception raised when there are no providers to aggregate."""

    def __init__(self, message: str = "No weather providers configured"):
        self.message = message
        super().__init__(self.message)


@dataclass(frozen=True)
class Outcome:
    """Result of one provider's measurement within a single aggregation."""
    provider: str
    temperature: Optional[float] = None
    error: Optional[ProviderError] = None

    @property
    def failed(self) -> bool:
        return self.error is not None


@dataclass(frozen=True)
class AggregationResult:
    """Mean temperature over all providers and the time it took."""
    city: str
    temperature: float
    took: float
    provider_count: int

    @property
    def took_display(self) -> str:
        return format_duration(self.took)


def format_duration(seconds: float) -> str:
    """Render an elapsed time the way a human reads it, e.g. '312.481ms'."""
    if seconds <= 0:
        return "0s"
    if seconds < 1e-3:
        return f"{seconds * 1e6:.3f}µs"
    if seconds < 1:
        return f"{seconds * 1e3:.3f}ms"
    return f"{seconds:.3f}s"


async def _measure(provider: BaseWeatherProvider, city: str, timeout: Optional[float]) -> Outcome:
    """Run one provider and fold whatever happens into an Outcome."""
    try:
        if timeout is None:
            temperature = await provider.measure(city)
        else:
            temperature = await asyncio.wait_for(provider.measure(city), timeout)
    except ProviderError as e:
        return Outcome(provider=provider.name, error=e)
    except asyncio.TimeoutError:
        deadline = f" after {timeout}s" if timeout is not None else ""
        return Outcome(
            provider=provider.name,
            error=ProviderError(f"{provider.name} timed out{deadline}", provider.name, city)
        )
    except Exception as e:
        return Outcome(
            provider=provider.name,
            error=ProviderError(f"{provider.name} failed: {str(e)}", provider.name, city)
        )

    is_number = isinstance(temperature, (int, float)) and not isinstance(temperature, bool)
    if not is_number or not math.isfinite(temperature):
        return Outcome(
            provider=provider.name,
            error=ProviderError(
                f"{provider.name} returned a non-numeric temperature: {temperature!r}",
                provider.name,
                city
            )
        )

    return Outcome(provider=provider.name, temperature=float(temperature))


async def _report(
    provider: BaseWeatherProvider,
    city: str,
    timeout: Optional[float],
    outcomes: "asyncio.Queue[Outcome]"
) -> None:
    outcomes.put_nowait(await _measure(provider, city, timeout))


async def aggregate_temperature(
    providers: Iterable[BaseWeatherProvider],
    city: str,
    timeout: Optional[float] = None
) -> float:
    """
    Query all providers concurrently and return their mean temperature.

    One task is started per provider. Outcomes are consumed in the order
    they arrive; the first failure is raised immediately and the remaining
    tasks are left to finish on their own, unobserved and uncancelled.

    Args:
        providers: Providers to query; order does not affect the result
        city: City to look up
        timeout: Optional per-provider deadline in seconds

    Returns:
        Arithmetic mean of every provider's temperature, in Kelvin

    Raises:
        EmptyProviderSetError: If no providers were given
        ProviderError: The first provider failure observed
    """
    providers = list(providers)
    if not providers:
        raise EmptyProviderSetError()

    # Unbounded, so no provider task ever blocks delivering its outcome
    outcomes: "asyncio.Queue[Outcome]" = asyncio.Queue()

    for provider in providers:
        task = asyncio.create_task(_report(provider, city, timeout, outcomes))
        _in_flight.add(task)
        task.add_done_callback(_in_flight.discard)

    total = 0.0
    for _ in range(len(providers)):
        outcome = await outcomes.get()
        if outcome.failed:
            raise outcome.error
        total += outcome.temperature

    return total / len(providers)


class TemperatureAggregatorService:
    """Service that owns the configured providers and aggregates across them."""

    def __init__(
        self,
        providers: Optional[Iterable[BaseWeatherProvider]] = None,
        provider_timeout: Optional[float] = None
    ):
        self._providers: List[BaseWeatherProvider] = list(providers or [])
        self._provider_timeout = provider_timeout

    @property
    def provider_timeout(self) -> Optional[float]:
        return self._provider_timeout

    async def initialize(self, app_settings: Settings = settings) -> None:
        """Build and connect providers.

        When no providers were injected, the enabled providers are built
        from settings. A provider that fails to connect (typically a missing
        API key) is logged and left out.
        """
        logger.info("Initializing temperature aggregator service")

        candidates = self._providers or [
            PROVIDER_CLASSES[name].from_settings(app_settings)
            for name in app_settings.get_enabled_providers_list()
        ]
        if self._provider_timeout is None:
            self._provider_timeout = app_settings.get_provider_timeout()

        connected: List[BaseWeatherProvider] = []
        for provider in candidates:
            try:
                await provider.connect()
                connected.append(provider)
                logger.info("Initialized provider", extra={"provider": provider.name})

            except Exception as e:
                logger.error("Failed to initialize provider", extra={
                    "provider": provider.name,
                    "error": str(e)
                })
                # Continue with other providers even if one fails
                continue

        self._providers = connected

        if not self._providers:
            logger.warning("No weather providers available; queries will fail")

        logger.info("Temperature aggregator service initialized", extra={
            "active_providers": self.get_provider_names(),
            "provider_timeout": self._provider_timeout
        })

    async def shutdown(self) -> None:
        """Disconnect every provider."""
        logger.info("Shutting down temperature aggregator service", extra={
            "abandoned_tasks": len(_in_flight)
        })

        for provider in self._providers:
            try:
                await provider.disconnect()
            except Exception as e:
                logger.warning("Error disconnecting provider", extra={
                    "provider": provider.name,
                    "error": str(e)
                })

        self._providers = []
        logger.info("Temperature aggregator service shutdown complete")

    def get_provider_names(self) -> List[str]:
        """Get names of the active providers, in query order."""
        return [provider.name for provider in self._providers]

    async def query(self, city: str) -> AggregationResult:
        """Aggregate the current temperature for a city across all providers."""
        begin = time.perf_counter()

        try:
            temperature = await aggregate_temperature(self._providers, city, self._provider_timeout)
        except ProviderError as e:
            logger.error("Provider failed during aggregation", extra={
                "city": city,
                "provider": e.provider,
                "error": e.message,
                "duration_seconds": time.perf_counter() - begin
            })
            raise
        except AggregationError as e:
            logger.error("Aggregation failed", extra={"city": city, "error": str(e)})
            raise

        took = time.perf_counter() - begin
        logger.info("Temperature aggregated", extra={
            "city": city,
            "temperature_kelvin": temperature,
            "providers": len(self._providers),
            "duration_seconds": took
        })

        return AggregationResult(
            city=city,
            temperature=temperature,
            took=took,
            provider_count=len(self._providers)
        )


# Global aggregator service instance
aggregator_service = TemperatureAggregatorService()
