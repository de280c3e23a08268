"""Itinerary API endpoints.

Request bodies are read as raw JSON and validated in the domain layer, so
malformed input fails with the same ``{message, error}`` body as any other
failure instead of FastAPI's 422.
"""

import logging

from fastapi import APIRouter, Request, status

from app.core.deps import ItineraryServiceDep
from app.core.exceptions import InternalServerError, NotFoundError
from app.domains.itinerary.exceptions import ItineraryNotFoundError
from app.domains.itinerary.schemas import (
    ErrorResponse,
    ExportResponse,
    Itinerary,
    RegenerateRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter()

ITINERARY_NOT_FOUND = "Itinerary not found"

ERROR_RESPONSES = {
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
}
NOT_FOUND_RESPONSES = {
    status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
    **ERROR_RESPONSES,
}


@router.post(
    "/itinerary/generate",
    response_model=Itinerary,
    responses=ERROR_RESPONSES,
    summary="Generate a new itinerary",
    description="""
    Validate the trip request, gather flight, hotel and weather data, and
    synthesize a day-by-day plan with one day per calendar day of the trip.

    Body fields: `destination`, `startDate`, `endDate`, `interests`,
    `budget` (`budget | mid-range | luxury`), `pace`
    (`relaxed | moderate | packed`).
    """,
)
async def generate_itinerary(request: Request, service: ItineraryServiceDep) -> Itinerary:
    """Generate and store an itinerary."""
    try:
        raw = await request.json()
        return await service.generate(raw)
    except Exception as e:
        logger.error(f"Itinerary generation failed: {e}")
        raise InternalServerError("Failed to generate itinerary", str(e)) from e


@router.post(
    "/itinerary/regenerate",
    response_model=Itinerary,
    responses=NOT_FOUND_RESPONSES,
    summary="Regenerate part of an itinerary",
    description="""
    Regenerate the `entire` itinerary, one `day` (`dayNumber`, 1-based), or
    one `timeBlock` (`dayNumber` plus 0-based `timeBlockIndex`). Days that
    are not targeted are kept as they are.
    """,
)
async def regenerate_itinerary(request: Request, service: ItineraryServiceDep) -> Itinerary:
    """Regenerate a section and return the updated itinerary."""
    try:
        payload = RegenerateRequest.model_validate(await request.json())
        return await service.regenerate(payload)
    except ItineraryNotFoundError:
        raise NotFoundError(ITINERARY_NOT_FOUND) from None
    except Exception as e:
        logger.error(f"Itinerary regeneration failed: {e}")
        raise InternalServerError("Failed to regenerate itinerary section", str(e)) from e


@router.get(
    "/itineraries",
    response_model=list[Itinerary],
    responses=ERROR_RESPONSES,
    summary="List all itineraries",
)
async def list_itineraries(service: ItineraryServiceDep) -> list[Itinerary]:
    try:
        return await service.list_all()
    except Exception as e:
        logger.error(f"Failed to list itineraries: {e}")
        raise InternalServerError("Failed to fetch itineraries", str(e)) from e


@router.get(
    "/itinerary/{itinerary_id}",
    response_model=Itinerary,
    responses=NOT_FOUND_RESPONSES,
    summary="Get an itinerary by ID",
)
async def get_itinerary(itinerary_id: str, service: ItineraryServiceDep) -> Itinerary:
    try:
        return await service.get(itinerary_id)
    except ItineraryNotFoundError:
        raise NotFoundError(ITINERARY_NOT_FOUND) from None
    except Exception as e:
        logger.error(f"Failed to fetch itinerary {itinerary_id}: {e}")
        raise InternalServerError("Failed to fetch itinerary", str(e)) from e


@router.get(
    "/itinerary/{itinerary_id}/export",
    response_model=ExportResponse,
    responses=NOT_FOUND_RESPONSES,
    summary="Export an itinerary",
    description="Return the itinerary payload for client-side PDF rendering.",
)
async def export_itinerary(itinerary_id: str, service: ItineraryServiceDep) -> ExportResponse:
    try:
        return await service.export(itinerary_id)
    except ItineraryNotFoundError:
        raise NotFoundError(ITINERARY_NOT_FOUND) from None
    except Exception as e:
        logger.error(f"Failed to export itinerary {itinerary_id}: {e}")
        raise InternalServerError("Failed to export itinerary", str(e)) from e
