"""Travel data preview endpoint."""

import logging

from fastapi import APIRouter, Request, status

from app.core.deps import ItineraryServiceDep
from app.core.exceptions import InternalServerError
from app.domains.itinerary.schemas import (
    ErrorResponse,
    TravelDataPreview,
    TravelDataPreviewRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/travel-data/preview",
    response_model=TravelDataPreview,
    responses={status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse}},
    summary="Preview live travel data",
    description="Top two flights, hotels and forecast days for a destination.",
)
async def preview_travel_data(
    request: Request, service: ItineraryServiceDep
) -> TravelDataPreview:
    """Fetch a short preview of supply data before generating."""
    try:
        payload = TravelDataPreviewRequest.model_validate(await request.json())
        return await service.preview(payload)
    except Exception as e:
        logger.error(f"Travel data preview failed: {e}")
        raise InternalServerError("Failed to fetch travel data", str(e)) from e
