"""API v1 endpoints."""

from app.api.v1.endpoints import health, itinerary, travel_data

__all__ = ["health", "itinerary", "travel_data"]
