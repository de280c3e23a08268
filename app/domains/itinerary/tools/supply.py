"""Concurrent supply data gathering.

Flight, hotel and weather providers are queried side by side. A provider
that fails contributes an empty list; nothing here ever raises because a
provider broke.
"""

import asyncio
import logging
from collections.abc import Sequence

from pydantic import BaseModel, Field, TypeAdapter

from app.core.config import settings
from app.domains.itinerary.schemas import (
    FlightOption,
    HotelOption,
    TravelDataPreview,
    WeatherForecast,
)
from app.domains.itinerary.tools.base import SupplyParams, SupplyProvider
from app.domains.itinerary.tools.flights import FlightProvider
from app.domains.itinerary.tools.hotels import HotelProvider
from app.domains.itinerary.tools.weather import WeatherProvider
from app.infra.redis import CacheService, get_redis_client

logger = logging.getLogger(__name__)


class SupplyData(BaseModel):
    """Everything the providers returned for one trip."""

    flights: list[FlightOption] = Field(default_factory=list)
    hotels: list[HotelOption] = Field(default_factory=list)
    weather: list[WeatherForecast] = Field(default_factory=list)

    def preview(self, limit: int | None = None) -> TravelDataPreview:
        """Top offers per category, never more than ``PREVIEW_LIMIT`` each."""
        limit = min(limit or settings.PREVIEW_LIMIT, settings.PREVIEW_LIMIT)
        return TravelDataPreview(
            flights=self.flights[:limit],
            hotels=self.hotels[:limit],
            weather=self.weather[:limit],
        )


class SupplyCache:
    """Redis-backed cache of provider results.

    Any Redis failure is logged and treated as a miss.
    """

    def __init__(self, cache: CacheService, ttl: int | None = None) -> None:
        self.cache = cache
        self.ttl = ttl or settings.SUPPLY_CACHE_TTL

    @staticmethod
    def key(provider: SupplyProvider, params: SupplyParams) -> str:
        return f"supply:{provider.name}:{params.cache_key()}"

    async def get(
        self, provider: SupplyProvider, params: SupplyParams
    ) -> list[BaseModel] | None:
        try:
            cached = await self.cache.get_json(self.key(provider, params))
        except Exception as e:
            logger.warning(f"Supply cache read failed for {provider.name}: {e}")
            return None
        if cached is None:
            return None
        try:
            return TypeAdapter(list[provider.result_model]).validate_python(cached)
        except ValueError as e:
            logger.warning(f"Discarding malformed cached {provider.name} data: {e}")
            return None

    async def set(
        self,
        provider: SupplyProvider,
        params: SupplyParams,
        results: Sequence[BaseModel],
    ) -> None:
        payload = [item.model_dump(mode="json") for item in results]
        try:
            await self.cache.set_json(self.key(provider, params), payload, ttl=self.ttl)
        except Exception as e:
            logger.warning(f"Supply cache write failed for {provider.name}: {e}")


def get_supply_cache() -> SupplyCache | None:
    """Supply cache over the shared Redis client, if caching is possible."""
    if not settings.SUPPLY_CACHE_ENABLED:
        return None
    redis = get_redis_client()
    if redis is None:
        return None
    return SupplyCache(CacheService(redis))


def default_providers() -> list[SupplyProvider]:
    return [FlightProvider(), HotelProvider(), WeatherProvider()]


async def _safe_query(
    provider: SupplyProvider,
    params: SupplyParams,
    cache: SupplyCache | None = None,
) -> list[BaseModel]:
    """Query one provider, returning [] on any failure."""
    if cache is not None:
        cached = await cache.get(provider, params)
        if cached is not None:
            logger.debug(f"Supply cache hit for {provider.name}")
            return cached

    try:
        results = await provider.query(params)
    except Exception as e:
        logger.warning(f"{provider.name} provider failed for {params.destination}: {e}")
        return []

    if cache is not None and results:
        await cache.set(provider, params, results)
    return list(results)


async def gather_supply_data(
    params: SupplyParams,
    providers: Sequence[SupplyProvider] | None = None,
    cache: SupplyCache | None = None,
) -> SupplyData:
    """Query all providers concurrently and collect their offers.

    Args:
        params: Trip the offers are for
        providers: Providers to query, defaults to flights, hotels and weather
        cache: Optional result cache

    Returns:
        SupplyData with one (possibly empty) list per category
    """
    providers = list(providers) if providers is not None else default_providers()
    results = await asyncio.gather(
        *(_safe_query(provider, params, cache) for provider in providers)
    )

    collected: dict[str, list[BaseModel]] = {}
    for provider, items in zip(providers, results):
        if provider.name not in SupplyData.model_fields:
            logger.error(f"Ignoring results from unknown provider category {provider.name}")
            continue
        collected.setdefault(provider.name, []).extend(items)

    data = SupplyData.model_validate(
        {name: [item.model_dump() for item in items] for name, items in collected.items()}
    )
    logger.info(
        f"Supply data for {params.destination}: {len(data.flights)} flights, "
        f"{len(data.hotels)} hotels, {len(data.weather)} forecasts"
    )
    return data
