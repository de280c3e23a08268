"""Pydantic schemas for the Itinerary domain.

Wire format is camelCase (``startDate``, ``timeBlocks``, ``totalCost``);
Python attributes stay snake_case. Both spellings are accepted on input.
"""

from datetime import UTC, date, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serializing to camelCase and accepting both spellings."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ============ Enums ============


class BudgetLevel(str, Enum):
    """Spending tier for the trip."""

    BUDGET = "budget"
    MID_RANGE = "mid-range"
    LUXURY = "luxury"


class TripPace(str, Enum):
    """How densely activities are scheduled."""

    RELAXED = "relaxed"
    MODERATE = "moderate"
    PACKED = "packed"


class TimePeriod(str, Enum):
    """Part of the day a time block belongs to."""

    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"


class RegenerationSection(str, Enum):
    """Which slice of an itinerary a regeneration request targets."""

    ENTIRE = "entire"
    DAY = "day"
    TIME_BLOCK = "timeBlock"


# ============ Trip Request ============


class TripRequest(CamelModel):
    """Canonical, validated trip constraints submitted by the user."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    destination: str = Field(..., min_length=1, max_length=255)
    start_date: date
    end_date: date
    interests: list[str] = Field(..., min_length=1)
    budget: BudgetLevel
    pace: TripPace

    @field_validator("end_date")
    @classmethod
    def validate_end_date(cls, v: date, info) -> date:
        """Validate that end_date is not before start_date."""
        start_date = info.data.get("start_date")
        if start_date and v < start_date:
            raise ValueError("end_date must be on or after start_date")
        return v

    @property
    def duration_days(self) -> int:
        """Number of calendar days spanned, both ends inclusive."""
        return (self.end_date - self.start_date).days + 1

    @property
    def title(self) -> str:
        """Human title derived from the trip span and destination."""
        unit = "Day" if self.duration_days == 1 else "Days"
        return f"{self.duration_days} {unit} in {self.destination}"

    def with_budget(self, budget: BudgetLevel | None) -> "TripRequest":
        """Copy of this request with the budget overridden when given."""
        if budget is None:
            return self
        return self.model_copy(update={"budget": budget})


# ============ Itinerary Content ============


class GeoLocation(CamelModel):
    """Where an activity takes place."""

    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)
    address: str = ""


class Activity(CamelModel):
    """The single activity embedded in a time block."""

    name: str = Field(..., min_length=1)
    description: str = ""
    duration: str = Field(default="", description="Formatted duration, e.g. '2 hours'")
    cost: str = Field(default="$0", description="Formatted cost, e.g. '$25'")
    image_url: str | None = None
    location: GeoLocation


class TimeBlock(CamelModel):
    """One scheduled activity slot within a day."""

    time: str = Field(..., description="Time label, e.g. '9:00 AM'")
    period: TimePeriod
    activity: Activity


class DayWeather(CamelModel):
    """Weather snapshot shown on a day card."""

    condition: str = "Unknown"
    temperature: str = ""
    icon: str = "cloud"


class ItineraryDay(CamelModel):
    """One calendar day of an itinerary."""

    day: int = Field(..., ge=1, description="1-based day number")
    date: date
    title: str = ""
    weather: DayWeather = Field(default_factory=DayWeather)
    time_blocks: list[TimeBlock] = Field(default_factory=list)
    total_cost: float = Field(
        ..., ge=0, allow_inf_nan=False, description="Sum of activity costs for the day"
    )
    walking_distance: str = ""


# ============ Supply Data ============


class FlightOption(CamelModel):
    """A flight offer."""

    airline: str
    route: str
    price: str
    duration: str
    departure: str
    arrival: str


class HotelOption(CamelModel):
    """A hotel offer."""

    name: str
    rating: float = Field(..., ge=0, le=5)
    price: str
    location: str
    amenities: list[str] = Field(default_factory=list)
    image_url: str | None = None


class WeatherForecast(CamelModel):
    """Forecast for one day at the destination."""

    date: str
    condition: str
    temperature: str
    humidity: str
    icon: str
    advisory: str | None = None


# ============ Itinerary ============


class ItineraryBase(CamelModel):
    """Fields shared by stored itineraries and creation payloads."""

    title: str = Field(..., min_length=1, max_length=300)
    destination: str = Field(..., min_length=1, max_length=255)
    start_date: date
    end_date: date
    interests: list[str]
    budget: BudgetLevel
    pace: TripPace
    days: list[ItineraryDay] = Field(default_factory=list)
    flight_data: list[FlightOption] | None = None
    hotel_data: list[HotelOption] | None = None
    weather_data: list[WeatherForecast] | None = None
    total_cost: str | None = Field(None, description="Formatted total, e.g. '$1240'")


class ItineraryCreate(ItineraryBase):
    """Payload for Store.create; the store assigns id and created_at."""

    pass


class Itinerary(ItineraryBase):
    """The persisted root record describing a full trip plan."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    id: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    def trip_request(self) -> TripRequest:
        """Rebuild the trip constraints this itinerary was generated from."""
        return TripRequest(
            destination=self.destination,
            start_date=self.start_date,
            end_date=self.end_date,
            interests=self.interests,
            budget=self.budget,
            pace=self.pace,
        )


# ============ Regeneration ============


class NewPreferences(CamelModel):
    """Preference overrides supplied with a regeneration request."""

    budget: BudgetLevel | None = None
    style: str | None = Field(None, max_length=200)


class RegenerateRequest(CamelModel):
    """Request to regenerate all or part of an existing itinerary.

    Index ranges are checked against the stored itinerary, not here, so an
    out-of-range day or block surfaces as a regeneration index error.
    """

    itinerary_id: str = Field(..., min_length=1)
    section: RegenerationSection
    day_number: int | None = None
    time_block_index: int | None = None
    new_preferences: NewPreferences | None = None


class RegenerationScope(BaseModel):
    """Resolved slice of an itinerary handed to the synthesizer."""

    section: RegenerationSection
    day_number: int | None = None
    time_block_index: int | None = None
    period: TimePeriod | None = None


# ============ Travel Data Preview ============


class TravelDataPreviewRequest(CamelModel):
    """Body of the travel data preview endpoint."""

    destination: str = Field(..., min_length=1)
    start_date: date
    end_date: date
    budget: BudgetLevel = BudgetLevel.MID_RANGE


class TravelDataPreview(CamelModel):
    """Top supply offers for a destination."""

    flights: list[FlightOption] = Field(default_factory=list)
    hotels: list[HotelOption] = Field(default_factory=list)
    weather: list[WeatherForecast] = Field(default_factory=list)


# ============ Responses ============


class ExportResponse(BaseModel):
    """Export payload; document rendering happens client-side."""

    message: str
    itinerary: Itinerary


class ErrorResponse(BaseModel):
    """Failure body returned by every endpoint."""

    message: str
    error: str | None = None
