"""Domain modules - business logic organized by bounded context.

Domain modules are imported lazily to avoid circular imports.
Import them directly where needed:

    from app.domains.itinerary.schemas import Itinerary, TripRequest
    from app.domains.itinerary.store import ItineraryStore
"""
