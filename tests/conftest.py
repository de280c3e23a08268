"""Shared fixtures for itinerary tests."""

from collections.abc import Callable
from datetime import date, timedelta

import pytest
import pytest_asyncio

from app.domains.itinerary.schemas import (
    Activity,
    BudgetLevel,
    GeoLocation,
    Itinerary,
    ItineraryCreate,
    ItineraryDay,
    NewPreferences,
    RegenerationScope,
    RegenerationSection,
    TimeBlock,
    TimePeriod,
    TripPace,
    TripRequest,
)
from app.domains.itinerary.services.synthesizer import ItinerarySynthesizer
from app.domains.itinerary.store import InMemoryItineraryStore
from app.domains.itinerary.tools.supply import SupplyData

BALI_START = date(2024, 3, 15)
BALI_END = date(2024, 3, 20)


def build_day(
    number: int,
    start: date,
    title: str | None = None,
    total_cost: float = 100.0,
) -> ItineraryDay:
    """A day with one morning, afternoon and evening block."""
    blocks = [
        TimeBlock(
            time=time,
            period=period,
            activity=Activity(
                name=f"{period.value.title()} activity {number}",
                description="Something to do",
                duration="2 hours",
                cost="$30",
                location=GeoLocation(lat=-8.4, lng=115.2, address="Ubud"),
            ),
        )
        for time, period in [
            ("9:00 AM", TimePeriod.MORNING),
            ("2:00 PM", TimePeriod.AFTERNOON),
            ("7:00 PM", TimePeriod.EVENING),
        ]
    ]
    return ItineraryDay(
        day=number,
        date=start + timedelta(days=number - 1),
        title=title or f"Day {number}",
        time_blocks=blocks,
        total_cost=total_cost,
        walking_distance="3 km",
    )


class FakeSynthesizer(ItinerarySynthesizer):
    """Deterministic synthesizer that records how it was called.

    ``resynthesize_result`` overrides the regenerated days when set;
    ``error`` is raised from both operations when set.
    """

    def __init__(self) -> None:
        self.resynthesize_result: list[ItineraryDay] | None = None
        self.error: Exception | None = None
        self.synthesize_calls: list[tuple[TripRequest, SupplyData]] = []
        self.resynthesize_calls: list[dict] = []

    async def synthesize(self, trip_request, supply):
        self.synthesize_calls.append((trip_request, supply))
        if self.error:
            raise self.error
        return [
            build_day(n, trip_request.start_date, title=f"Explore {trip_request.destination}")
            for n in range(1, trip_request.duration_days + 1)
        ]

    async def resynthesize(
        self,
        existing_days,
        trip_request,
        scope: RegenerationScope,
        new_preferences: NewPreferences | None = None,
        supply: SupplyData | None = None,
    ):
        self.resynthesize_calls.append(
            {
                "existing_days": existing_days,
                "trip_request": trip_request,
                "scope": scope,
                "new_preferences": new_preferences,
                "supply": supply,
            }
        )
        if self.error:
            raise self.error
        if self.resynthesize_result is not None:
            return self.resynthesize_result
        if scope.section == RegenerationSection.ENTIRE:
            return [
                build_day(day.day, trip_request.start_date, title=f"Fresh day {day.day}")
                for day in existing_days
            ]
        return [
            build_day(
                scope.day_number,
                trip_request.start_date,
                title=f"Regenerated day {scope.day_number}",
                total_cost=55.0,
            )
        ]


@pytest.fixture
def day_factory() -> Callable[..., ItineraryDay]:
    return build_day


@pytest.fixture
def synthesizer() -> FakeSynthesizer:
    return FakeSynthesizer()


@pytest.fixture
def store() -> InMemoryItineraryStore:
    return InMemoryItineraryStore()


@pytest.fixture
def bali_trip() -> TripRequest:
    return TripRequest(
        destination="Bali, Indonesia",
        start_date=BALI_START,
        end_date=BALI_END,
        interests=["beaches", "temples"],
        budget=BudgetLevel.MID_RANGE,
        pace=TripPace.MODERATE,
    )


@pytest.fixture
def bali_payload() -> dict:
    """Raw generate request body as sent by the client."""
    return {
        "destination": "Bali, Indonesia",
        "startDate": "2024-03-15",
        "endDate": "2024-03-20",
        "interests": ["beaches", "temples"],
        "budget": "mid-range",
        "pace": "moderate",
    }


@pytest_asyncio.fixture
async def bali_itinerary(store: InMemoryItineraryStore, bali_trip: TripRequest) -> Itinerary:
    """A stored six-day Bali itinerary."""
    return await store.create(
        ItineraryCreate(
            title=bali_trip.title,
            destination=bali_trip.destination,
            start_date=bali_trip.start_date,
            end_date=bali_trip.end_date,
            interests=list(bali_trip.interests),
            budget=bali_trip.budget,
            pace=bali_trip.pace,
            days=[build_day(n, BALI_START) for n in range(1, 7)],
            total_cost="$600",
        )
    )
