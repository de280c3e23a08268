"""Flight offers provider.

No live flight API is wired in; offers are generated from a fixed carrier
table and scaled by budget tier.
"""

import logging

from app.domains.itinerary.schemas import BudgetLevel, FlightOption
from app.domains.itinerary.tools.base import SupplyParams, SupplyProvider

logger = logging.getLogger(__name__)

# (airline, base fare in USD, flight time)
CARRIERS: list[tuple[str, int, str]] = [
    ("Delta Airlines", 342, "5h 30m"),
    ("United Airlines", 389, "6h 15m"),
    ("American Airlines", 298, "5h 45m"),
]

FARE_MULTIPLIER: dict[BudgetLevel, float] = {
    BudgetLevel.BUDGET: 0.85,
    BudgetLevel.MID_RANGE: 1.0,
    BudgetLevel.LUXURY: 3.2,  # business class
}


class FlightProvider(SupplyProvider):
    """Outbound flight offers from the configured origin airport."""

    name = "flights"
    result_model = FlightOption

    async def query(self, params: SupplyParams) -> list[FlightOption]:
        multiplier = FARE_MULTIPLIER[params.budget]
        departure = params.start_date.isoformat()
        offers = [
            FlightOption(
                airline=airline,
                route=f"{params.origin} → {params.destination}",
                price=f"${round(fare * multiplier)}",
                duration=duration,
                departure=departure,
                arrival=departure,
            )
            for airline, fare, duration in CARRIERS
        ]
        logger.debug(f"Generated {len(offers)} flight offers for {params.destination}")
        return offers
