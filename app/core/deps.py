"""FastAPI dependencies.

The itinerary store and synthesizer are process-wide singletons; the
service is assembled per request on top of them. Tests swap any of these
through ``app.dependency_overrides``.
"""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from app.core.config import settings
from app.domains.itinerary.services import ItineraryService, LLMItinerarySynthesizer
from app.domains.itinerary.services.synthesizer import ItinerarySynthesizer
from app.domains.itinerary.store import InMemoryItineraryStore, ItineraryStore
from app.domains.itinerary.tools.supply import SupplyCache, get_supply_cache


@lru_cache
def get_itinerary_store() -> ItineraryStore:
    """Store backend selected by ``ITINERARY_STORE``."""
    if settings.ITINERARY_STORE == "database":
        from app.domains.itinerary.repository import SqlItineraryStore

        return SqlItineraryStore()
    return InMemoryItineraryStore()


@lru_cache
def get_synthesizer() -> ItinerarySynthesizer:
    """Shared LLM-backed synthesizer."""
    return LLMItinerarySynthesizer()


def get_itinerary_service(
    store: Annotated[ItineraryStore, Depends(get_itinerary_store)],
    synthesizer: Annotated[ItinerarySynthesizer, Depends(get_synthesizer)],
    cache: Annotated[SupplyCache | None, Depends(get_supply_cache)],
) -> ItineraryService:
    """Dependency for getting ItineraryService."""
    return ItineraryService(store, synthesizer, cache=cache)


ItineraryServiceDep = Annotated[ItineraryService, Depends(get_itinerary_service)]
