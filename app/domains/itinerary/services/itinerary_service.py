"""Services for the Itinerary domain - Business logic layer."""

import logging
from collections.abc import Mapping, Sequence
from functools import cached_property
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from app.domains.itinerary.exceptions import ItineraryNotFoundError
from app.domains.itinerary.schemas import (
    ExportResponse,
    Itinerary,
    ItineraryCreate,
    ItineraryDay,
    RegenerateRequest,
    TravelDataPreview,
    TravelDataPreviewRequest,
)
from app.domains.itinerary.services.regeneration import RegenerationOrchestrator
from app.domains.itinerary.services.synthesizer import ItinerarySynthesizer
from app.domains.itinerary.store import ItineraryStore
from app.domains.itinerary.tools.base import SupplyParams, SupplyProvider
from app.domains.itinerary.tools.supply import SupplyCache, gather_supply_data
from app.domains.itinerary.validation import validate_trip_request

logger = logging.getLogger(__name__)


def format_total_cost(days: Sequence[ItineraryDay]) -> str:
    """Sum day totals and format as whole dollars, e.g. "$1240"."""
    total = sum((Decimal(str(day.total_cost)) for day in days), Decimal(0))
    return f"${total.quantize(Decimal(1), rounding=ROUND_HALF_UP)}"


class ItineraryService:
    """Service for itinerary business logic.

    Ties together validation, supply gathering, synthesis and storage so
    the API layer only translates HTTP to calls on this class.
    """

    def __init__(
        self,
        store: ItineraryStore,
        synthesizer: ItinerarySynthesizer,
        providers: Sequence[SupplyProvider] | None = None,
        cache: SupplyCache | None = None,
    ) -> None:
        self.store = store
        self.synthesizer = synthesizer
        self.providers = providers
        self.cache = cache

    @cached_property
    def orchestrator(self) -> RegenerationOrchestrator:
        """Regeneration workflow, compiled on first use."""
        return RegenerationOrchestrator(self.store, self.synthesizer)

    # ==================== Generation ====================

    async def generate(self, raw: Mapping[str, Any]) -> Itinerary:
        """Generate and store a new itinerary from raw trip input.

        Raises:
            TripValidationError: If the input is invalid
            SynthesisError: If the synthesizer failed
        """
        trip = validate_trip_request(raw)
        logger.info(f"Generating itinerary: {trip.title}")

        supply = await gather_supply_data(
            SupplyParams.from_trip_request(trip),
            providers=self.providers,
            cache=self.cache,
        )
        days = await self.synthesizer.synthesize(trip, supply)

        itinerary = await self.store.create(
            ItineraryCreate(
                title=trip.title,
                destination=trip.destination,
                start_date=trip.start_date,
                end_date=trip.end_date,
                interests=list(trip.interests),
                budget=trip.budget,
                pace=trip.pace,
                days=days,
                flight_data=supply.flights,
                hotel_data=supply.hotels,
                weather_data=supply.weather,
                total_cost=format_total_cost(days),
            )
        )
        logger.info(f"Generated itinerary {itinerary.id} with {len(itinerary.days)} days")
        return itinerary

    async def preview(self, request: TravelDataPreviewRequest) -> TravelDataPreview:
        """Top supply offers for a destination without generating anything."""
        params = SupplyParams(
            destination=request.destination,
            start_date=request.start_date,
            end_date=request.end_date,
            budget=request.budget,
        )
        supply = await gather_supply_data(params, providers=self.providers, cache=self.cache)
        return supply.preview()

    # ==================== Regeneration ====================

    async def regenerate(self, request: RegenerateRequest) -> Itinerary:
        """Regenerate part of a stored itinerary."""
        return await self.orchestrator.regenerate(request)

    # ==================== Queries ====================

    async def get(self, itinerary_id: str) -> Itinerary:
        """Get an itinerary by id.

        Raises:
            ItineraryNotFoundError: If the id is unknown
        """
        itinerary = await self.store.get(itinerary_id)
        if itinerary is None:
            raise ItineraryNotFoundError(itinerary_id)
        return itinerary

    async def list_all(self) -> list[Itinerary]:
        return await self.store.list_all()

    async def export(self, itinerary_id: str) -> ExportResponse:
        """Export payload for client-side document rendering."""
        itinerary = await self.get(itinerary_id)
        return ExportResponse(message="PDF export data", itinerary=itinerary)
