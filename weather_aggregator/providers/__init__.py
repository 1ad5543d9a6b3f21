"""
Weather providers for Weather Aggregator.
"""

from typing import Dict, Type

from .base import (
    BaseWeatherProvider, ProviderError, AuthenticationError, DataNotFoundError,
    celsius_to_kelvin
)
from .openweathermap_provider import OpenWeatherMapProvider
from .weatherbit_provider import WeatherbitProvider
from .climacell_provider import ClimaCellProvider
from ..api.schemas import WeatherProvider

PROVIDER_CLASSES: Dict[str, Type[BaseWeatherProvider]] = {
    WeatherProvider.OPENWEATHERMAP.value: OpenWeatherMapProvider,
    WeatherProvider.WEATHERBIT.value: WeatherbitProvider,
    WeatherProvider.CLIMACELL.value: ClimaCellProvider
}

__all__ = [
    "BaseWeatherProvider",
    "ProviderError",
    "AuthenticationError",
    "DataNotFoundError",
    "celsius_to_kelvin",
    "OpenWeatherMapProvider",
    "WeatherbitProvider",
    "ClimaCellProvider",
    "PROVIDER_CLASSES",
]
