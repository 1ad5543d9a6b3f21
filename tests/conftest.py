"""Shared pytest fixtures for weather aggregator tests."""

import asyncio
from typing import Callable, Optional

import httpx
import pytest

from weather_aggregator.providers.base import BaseWeatherProvider, ProviderError


class FakeProvider(BaseWeatherProvider):
    """In-memory provider returning a canned temperature or error."""

    requires_api_key = False

    def __init__(
        self,
        name: str,
        temperature: Optional[float] = None,
        error: Optional[Exception] = None,
        delay: float = 0.0,
        gate: Optional[asyncio.Event] = None
    ):
        super().__init__(name=name)
        self.temperature = temperature
        self.error = error
        self.delay = delay
        self.gate = gate
        self.cities = []
        self.finished = False

    async def connect(self) -> None:
        """No HTTP client needed."""

    async def disconnect(self) -> None:
        """No HTTP client to close."""

    async def measure(self, city: str) -> float:
        self.cities.append(city)
        if self.gate is not None:
            await self.gate.wait()
        if self.delay:
            await asyncio.sleep(self.delay)
        self.finished = True
        if self.error is not None:
            raise self.error
        return self.temperature


@pytest.fixture
def make_provider() -> Callable[..., FakeProvider]:
    """Factory for FakeProvider test doubles."""
    return FakeProvider


@pytest.fixture
def provider_error() -> Callable[..., ProviderError]:
    """Factory for ProviderError instances."""
    def _make(message: str = "timeout", provider: str = "fake", city: str = "Paris") -> ProviderError:
        return ProviderError(message, provider, city)
    return _make


@pytest.fixture
def mock_client() -> Callable[[Callable[[httpx.Request], httpx.Response]], httpx.AsyncClient]:
    """Build an httpx.AsyncClient whose requests are answered by a handler."""
    def _make(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return _make
