"""Itinerary persistence port and the in-memory adapter.

The SQL adapter lives in ``repository.py``; ``app.core.deps.get_itinerary_store``
picks one according to ``settings.ITINERARY_STORE``.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from datetime import UTC, datetime
from typing import Any

from app.domains.itinerary.schemas import Itinerary, ItineraryCreate
from app.infra.database import generate_id

logger = logging.getLogger(__name__)

# Fields owned by the store; partial updates never touch them
_IMMUTABLE_FIELDS = frozenset({"id", "created_at"})


class ItineraryStore(ABC):
    """Keyed storage of itineraries."""

    @abstractmethod
    async def get(self, itinerary_id: str) -> Itinerary | None:
        """Return the itinerary, or None if the id is unknown."""

    @abstractmethod
    async def create(self, data: ItineraryCreate) -> Itinerary:
        """Persist a new itinerary, assigning its id and created_at."""

    @abstractmethod
    async def update(self, itinerary_id: str, partial: dict[str, Any]) -> Itinerary | None:
        """Merge top-level fields into an existing itinerary.

        Never creates a record. Returns None if the id is unknown.
        """

    @abstractmethod
    async def list_all(self) -> list[Itinerary]:
        """Return every stored itinerary, oldest first."""


def merge_partial(current: Itinerary, partial: dict[str, Any]) -> Itinerary:
    """Apply a shallow top-level merge and re-validate the result."""
    values = current.model_dump()
    for field, value in partial.items():
        if field in _IMMUTABLE_FIELDS:
            continue
        if field not in Itinerary.model_fields:
            logger.warning(f"Ignoring unknown itinerary field in update: {field}")
            continue
        values[field] = value
    return Itinerary.model_validate(values)


class InMemoryItineraryStore(ItineraryStore):
    """Process-local store.

    Records are deep-copied on the way in and out, so callers never hold
    references into stored state.
    """

    def __init__(self) -> None:
        self._items: dict[str, Itinerary] = {}
        self._lock = asyncio.Lock()

    async def get(self, itinerary_id: str) -> Itinerary | None:
        item = self._items.get(itinerary_id)
        return item.model_copy(deep=True) if item else None

    async def create(self, data: ItineraryCreate) -> Itinerary:
        itinerary = Itinerary.model_validate(
            {
                **data.model_dump(),
                "id": generate_id(),
                "created_at": datetime.now(UTC),
            }
        )
        async with self._lock:
            self._items[itinerary.id] = itinerary.model_copy(deep=True)
        logger.info(f"Stored itinerary {itinerary.id} ({itinerary.title})")
        return itinerary

    async def update(self, itinerary_id: str, partial: dict[str, Any]) -> Itinerary | None:
        async with self._lock:
            current = self._items.get(itinerary_id)
            if current is None:
                return None
            updated = merge_partial(current, partial)
            self._items[itinerary_id] = updated.model_copy(deep=True)
        return updated

    async def list_all(self) -> list[Itinerary]:
        return [item.model_copy(deep=True) for item in self._items.values()]

    def __len__(self) -> int:
        return len(self._items)
