"""Tests for the HTTP endpoints."""

import pytest
from fastapi.testclient import TestClient

from weather_aggregator.api.endpoints import get_aggregator
from weather_aggregator.main import app
from weather_aggregator.providers import ProviderError
from weather_aggregator.services.temperature_aggregator import (
    AggregationResult,
    EmptyProviderSetError,
    TemperatureAggregatorService,
)


class _StubAggregator:
    """Test double standing in for the aggregator service."""

    provider_timeout = 10.0

    def __init__(self, result=None, error=None, providers=("openweathermap", "weatherbit")):
        self.result = result
        self.error = error
        self.providers = list(providers)
        self.cities = []

    async def query(self, city: str) -> AggregationResult:
        self.cities.append(city)
        if self.error is not None:
            raise self.error
        return self.result

    def get_provider_names(self):
        return self.providers


@pytest.fixture
def client_with():
    """Build a TestClient whose aggregator is the given stub."""
    def _make(stub: _StubAggregator) -> TestClient:
        app.dependency_overrides[get_aggregator] = lambda: stub
        return TestClient(app)

    yield _make
    app.dependency_overrides.clear()


def test_hello(client_with):
    response = client_with(_StubAggregator()).get("/hello")

    assert response.status_code == 200
    assert response.text == "hello!"


def test_weather_success(client_with):
    """A successful aggregation is serialized as city, temp and took."""
    stub = _StubAggregator(result=AggregationResult(
        city="Paris", temperature=290.0, took=0.012, provider_count=3
    ))

    response = client_with(stub).get("/weather/Paris")

    assert response.status_code == 200
    assert response.json() == {"city": "Paris", "temp": 290.0, "took": "12.000ms"}
    assert stub.cities == ["Paris"]
    assert "X-Process-Time" in response.headers


def test_weather_city_keeps_rest_of_path(client_with):
    """Everything after /weather/ is the city, spaces and slashes included."""
    stub = _StubAggregator(result=AggregationResult(
        city="New York/US", temperature=280.0, took=0.5, provider_count=1
    ))

    response = client_with(stub).get("/weather/New York/US")

    assert response.status_code == 200
    assert stub.cities == ["New York/US"]


def test_weather_provider_failure(client_with):
    """A provider failure becomes a 500 with the message as plain text."""
    stub = _StubAggregator(error=ProviderError("timeout", "weatherbit", "Paris"))

    response = client_with(stub).get("/weather/Paris")

    assert response.status_code == 500
    assert response.text == "timeout"
    assert response.headers["content-type"].startswith("text/plain")


def test_weather_without_providers(client_with):
    stub = _StubAggregator(error=EmptyProviderSetError(), providers=())

    response = client_with(stub).get("/weather/Paris")

    assert response.status_code == 503
    assert response.text == "No weather providers configured"


def test_weather_blank_city(client_with):
    stub = _StubAggregator()

    response = client_with(stub).get("/weather/%20")

    assert response.status_code == 400
    assert stub.cities == []


def test_health(client_with):
    response = client_with(_StubAggregator()).get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["providers"] == ["openweathermap", "weatherbit"]
    assert body["provider_timeout_seconds"] == 10.0


def test_health_without_providers(client_with):
    response = client_with(_StubAggregator(providers=())).get("/health")

    assert response.json()["status"] == "unhealthy"


def test_unknown_path(client_with):
    response = client_with(_StubAggregator()).get("/nope")

    assert response.status_code == 404
    assert response.json()["error_code"] == "NOT_FOUND"


def test_weather_non_numeric_reading_is_plain_text_failure(client_with, make_provider):
    """A provider breaking the float contract still yields the plain-text 500."""
    service = TemperatureAggregatorService([
        make_provider("openweathermap", 280.0),
        make_provider("weatherbit", None),
    ])

    response = client_with(service).get("/weather/Paris")

    assert response.status_code == 500
    assert response.headers["content-type"].startswith("text/plain")
    assert "weatherbit returned a non-numeric temperature" in response.text
