"""Hotel offers provider backed by a static catalogue."""

import logging
from typing import NamedTuple

from app.domains.itinerary.schemas import BudgetLevel, HotelOption
from app.domains.itinerary.tools.base import SupplyParams, SupplyProvider

logger = logging.getLogger(__name__)


class _Hotel(NamedTuple):
    name: str
    rating: float
    nightly: int
    area: str
    amenities: list[str]


CATALOGUE: list[_Hotel] = [
    _Hotel("The Plaza Hotel", 4.8, 450, "Midtown", ["Spa", "Restaurant", "Gym", "WiFi"]),
    _Hotel("Pod Hotels", 4.2, 180, "Brooklyn", ["WiFi", "Gym", "Cafe"]),
    _Hotel(
        "1 Hotels Central Park",
        4.6,
        320,
        "Central Park",
        ["Spa", "Restaurant", "Eco-friendly", "WiFi"],
    ),
    _Hotel("The High Line Hotel", 4.4, 275, "Chelsea", ["Restaurant", "Pet-friendly", "WiFi"]),
    _Hotel("citizenM Bowery", 4.3, 210, "Lower East Side", ["Modern design", "WiFi", "Gym"]),
]


def rank_hotels(hotels: list[_Hotel], budget: BudgetLevel) -> list[_Hotel]:
    """Order hotels by what matters most for the budget tier."""
    if budget == BudgetLevel.BUDGET:
        return sorted(hotels, key=lambda h: (h.nightly, -h.rating))
    if budget == BudgetLevel.LUXURY:
        return sorted(hotels, key=lambda h: (-h.nightly, -h.rating))
    # Mid-range: best rated under 400/night first
    return sorted(hotels, key=lambda h: (h.nightly > 400, -h.rating))


class HotelProvider(SupplyProvider):
    """Hotel offers near the destination."""

    name = "hotels"
    result_model = HotelOption

    async def query(self, params: SupplyParams) -> list[HotelOption]:
        return [
            HotelOption(
                name=hotel.name,
                rating=hotel.rating,
                price=f"${hotel.nightly}/night",
                location=f"{hotel.area}, {params.destination}",
                amenities=list(hotel.amenities),
            )
            for hotel in rank_hotels(CATALOGUE, params.budget)
        ]
