"""API main router - aggregates all endpoint routers."""

from fastapi import APIRouter

from app.api.v1.endpoints import health, itinerary, travel_data

api_router = APIRouter()

# Include health check endpoint
api_router.include_router(
    health.router,
    tags=["Health"],
)

# Include itinerary endpoints
api_router.include_router(
    itinerary.router,
    tags=["Itineraries"],
)

# Include supply data preview endpoint
api_router.include_router(
    travel_data.router,
    tags=["Travel Data"],
)
