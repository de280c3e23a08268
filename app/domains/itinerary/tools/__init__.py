"""Supply data providers.

- FlightProvider: flight offers from the default origin airport
- HotelProvider: hotel offers ranked by budget tier
- WeatherProvider: daily forecasts (OpenWeatherMap or mock)
- gather_supply_data: concurrent, failure-tolerant fan-out over all three
"""

from app.domains.itinerary.tools.base import (
    APIClientError,
    AuthenticationError,
    RateLimitError,
    SupplyParams,
    SupplyProvider,
    ToolError,
)
from app.domains.itinerary.tools.flights import FlightProvider
from app.domains.itinerary.tools.hotels import HotelProvider
from app.domains.itinerary.tools.supply import (
    SupplyCache,
    SupplyData,
    default_providers,
    gather_supply_data,
    get_supply_cache,
)
from app.domains.itinerary.tools.weather import WeatherProvider

__all__ = [
    # Providers
    "SupplyProvider",
    "SupplyParams",
    "FlightProvider",
    "HotelProvider",
    "WeatherProvider",
    # Fan-out
    "SupplyData",
    "SupplyCache",
    "default_providers",
    "gather_supply_data",
    "get_supply_cache",
    # Error Classes
    "ToolError",
    "APIClientError",
    "RateLimitError",
    "AuthenticationError",
]
