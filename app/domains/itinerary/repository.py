"""Repository for the Itinerary domain - SQLAlchemy-backed store."""

import logging
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from app.domains.itinerary.models import ItineraryRecord
from app.domains.itinerary.schemas import Itinerary, ItineraryBase, ItineraryCreate
from app.domains.itinerary.store import ItineraryStore, merge_partial
from app.domains.shared.repository import GenericRepository
from app.infra.database import DatabaseManager, db_manager

logger = logging.getLogger(__name__)

# Columns stored as JSON documents
_JSON_FIELDS = {"interests", "days", "flight_data", "hotel_data", "weather_data"}


def to_row(data: ItineraryBase) -> dict[str, Any]:
    """Flatten an itinerary schema into column values.

    Scalar columns keep their Python types; JSON columns are dumped in
    JSON mode so nested dates become ISO strings.
    """
    row = data.model_dump(exclude=_JSON_FIELDS | {"id", "created_at"})
    row.update(data.model_dump(mode="json", include=_JSON_FIELDS))
    return row


def to_schema(record: ItineraryRecord) -> Itinerary:
    """Convert a stored row into the API-facing schema."""
    return Itinerary.model_validate(record)


class ItineraryRepository(GenericRepository[ItineraryRecord, ItineraryCreate]):
    """Repository for ItineraryRecord rows."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(ItineraryRecord, session)

    async def create_itinerary(self, data: ItineraryCreate) -> ItineraryRecord:
        """Insert a new itinerary row."""
        return await self.create(to_row(data))

    async def replace_itinerary(
        self, itinerary_id: str, itinerary: Itinerary
    ) -> ItineraryRecord | None:
        """Overwrite every mutable column of an existing row."""
        return await self.update(itinerary_id, to_row(itinerary))


class SqlItineraryStore(ItineraryStore):
    """ItineraryStore backed by Postgres, one transaction per call."""

    def __init__(self, manager: DatabaseManager | None = None) -> None:
        self._db = manager or db_manager

    async def get(self, itinerary_id: str) -> Itinerary | None:
        async with self._db.session() as session:
            record = await ItineraryRepository(session).get_by_id(itinerary_id)
            return to_schema(record) if record else None

    async def create(self, data: ItineraryCreate) -> Itinerary:
        async with self._db.transaction() as session:
            record = await ItineraryRepository(session).create_itinerary(data)
            itinerary = to_schema(record)
        logger.info(f"Stored itinerary {itinerary.id} ({itinerary.title})")
        return itinerary

    async def update(self, itinerary_id: str, partial: dict[str, Any]) -> Itinerary | None:
        async with self._db.transaction() as session:
            repo = ItineraryRepository(session)
            record = await repo.get_by_id(itinerary_id)
            if record is None:
                return None
            merged = merge_partial(to_schema(record), partial)
            record = await repo.replace_itinerary(itinerary_id, merged)
            return to_schema(record) if record else None

    async def list_all(self) -> list[Itinerary]:
        async with self._db.session() as session:
            records = await ItineraryRepository(session).find_many()
            return [to_schema(record) for record in records]
