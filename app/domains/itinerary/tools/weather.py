"""Weather forecast provider.

Queries OpenWeatherMap's 5-day/3-hour ``/forecast`` endpoint when
``WEATHER_API_KEY`` is configured, otherwise produces deterministic mock
forecasts. Either way there is at most one forecast per trip day.
"""

import logging
from collections import Counter
from datetime import UTC, date, datetime, timedelta

from app.core.config import settings
from app.domains.itinerary.exceptions import ProviderError
from app.domains.itinerary.schemas import WeatherForecast
from app.domains.itinerary.tools.base import (
    BaseAsyncAPIClient,
    SupplyParams,
    SupplyProvider,
    ToolError,
)

logger = logging.getLogger(__name__)

MAX_FORECAST_DAYS = 14

# OpenWeatherMap "main" condition -> UI icon name
ICONS: dict[str, str] = {
    "Clear": "sun",
    "Clouds": "cloud-sun",
    "Rain": "cloud-rain",
    "Drizzle": "cloud-rain",
    "Thunderstorm": "cloud-lightning",
    "Snow": "cloud-snow",
}

# (condition, °F, humidity %, icon, advisory) cycled over the trip
MOCK_PATTERN: list[tuple[str, int, int, str, str | None]] = [
    ("Sunny", 72, 45, "sun", "Perfect weather for outdoor activities"),
    ("Light Rain", 68, 70, "cloud-rain", "Pack an umbrella"),
    ("Partly Cloudy", 74, 50, "cloud-sun", None),
    ("Sunny", 76, 40, "sun", None),
    ("Clear", 78, 35, "sun", None),
]


def advisory_for(condition: str, temp_f: float, humidity: float) -> str | None:
    """Short packing/activity hint for a day's weather."""
    hints = []
    if temp_f > 95:
        hints.append("Extreme heat - stay hydrated")
    elif temp_f > 86:
        hints.append("Hot weather - bring water and sunscreen")
    elif temp_f < 32:
        hints.append("Freezing conditions - bundle up")
    elif temp_f < 41:
        hints.append("Cold weather - dress warmly")

    if condition in ("Rain", "Drizzle"):
        hints.append("Pack an umbrella")
    elif condition == "Snow":
        hints.append("Wear warm, waterproof footwear")
    elif condition == "Thunderstorm":
        hints.append("Thunderstorms expected - plan indoor activities")

    if humidity > 80:
        hints.append("High humidity")

    return "; ".join(hints) if hints else None


def mock_forecasts(params: SupplyParams) -> list[WeatherForecast]:
    days = min(params.duration_days, MAX_FORECAST_DAYS)
    forecasts = []
    for offset in range(days):
        condition, temp, humidity, icon, advisory = MOCK_PATTERN[offset % len(MOCK_PATTERN)]
        forecasts.append(
            WeatherForecast(
                date=(params.start_date + timedelta(days=offset)).isoformat(),
                condition=condition,
                temperature=f"{temp}°F",
                humidity=f"{humidity}%",
                icon=icon,
                advisory=advisory,
            )
        )
    return forecasts


class OpenWeatherMapClient(BaseAsyncAPIClient):
    """Async client for the OpenWeatherMap REST API."""

    def __init__(self, api_key: str | None = None, base_url: str | None = None):
        self.api_key = api_key or settings.WEATHER_API_KEY
        super().__init__(base_url or settings.WEATHER_API_BASE_URL)

    async def _get_headers(self) -> dict[str, str]:
        return {"Accept": "application/json"}

    async def get_forecast(
        self, location: str, start: date, end: date
    ) -> list[WeatherForecast]:
        """Daily forecasts for the location, restricted to start..end."""
        response = await self.get(
            "/forecast",
            params={"q": location, "appid": self.api_key, "units": "imperial"},
        )
        return self._parse_forecast(response, start, end)

    def _parse_forecast(
        self, response: dict, start: date, end: date
    ) -> list[WeatherForecast]:
        # Bucket 3-hour slots by calendar day
        buckets: dict[date, dict[str, list]] = {}
        for item in response.get("list", []):
            day = datetime.fromtimestamp(item.get("dt", 0), UTC).date()
            if not start <= day <= end:
                continue
            bucket = buckets.setdefault(day, {"temps": [], "humidity": [], "conditions": []})
            main = item.get("main", {})
            bucket["temps"].append(main.get("temp", 0))
            bucket["humidity"].append(main.get("humidity", 0))
            bucket["conditions"].append(item.get("weather", [{}])[0].get("main", "Clouds"))

        forecasts = []
        for day, data in sorted(buckets.items())[:MAX_FORECAST_DAYS]:
            temp = sum(data["temps"]) / len(data["temps"])
            humidity = sum(data["humidity"]) / len(data["humidity"])
            condition = Counter(data["conditions"]).most_common(1)[0][0]
            forecasts.append(
                WeatherForecast(
                    date=day.isoformat(),
                    condition=condition,
                    temperature=f"{temp:.0f}°F",
                    humidity=f"{humidity:.0f}%",
                    icon=ICONS.get(condition, "cloud"),
                    advisory=advisory_for(condition, temp, humidity),
                )
            )
        return forecasts


class WeatherProvider(SupplyProvider):
    """Daily weather forecasts for the trip dates."""

    name = "weather"
    result_model = WeatherForecast

    def __init__(self, api_key: str | None = None) -> None:
        self.api_key = api_key if api_key is not None else settings.WEATHER_API_KEY

    async def query(self, params: SupplyParams) -> list[WeatherForecast]:
        if not self.api_key:
            return mock_forecasts(params)

        try:
            async with OpenWeatherMapClient(api_key=self.api_key) as client:
                forecasts = await client.get_forecast(
                    params.destination, params.start_date, params.end_date
                )
        except ToolError as e:
            raise ProviderError(f"Weather lookup failed: {e.message}", self.name) from e

        if not forecasts:
            # Trip is beyond the 5-day forecast window
            logger.info(f"No live forecast covers {params.destination}, using estimates")
            return mock_forecasts(params)
        return forecasts
