"""SQLAlchemy models for the Itinerary domain."""

from datetime import date

from sqlalchemy import JSON, CheckConstraint, Date, Enum, Index, String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from app.domains.itinerary.schemas import BudgetLevel, TripPace
from app.infra.database import Base

# JSONB on Postgres, plain JSON elsewhere
JSONType = JSON().with_variant(JSONB(), "postgresql")


def _enum_values(enum_cls: type) -> list[str]:
    return [member.value for member in enum_cls]


class ItineraryRecord(Base):
    """Persisted itinerary.

    Attributes:
        id: Opaque identifier - inherited from Base
        title: Display title, e.g. "6 Days in Bali, Indonesia"
        destination: Trip destination as entered by the user
        start_date: First trip day
        end_date: Last trip day (inclusive)
        interests: Interest tags used for generation
        budget: Budget tier
        pace: Activity density
        days: Day-by-day plan (list of ItineraryDay dicts)
        flight_data: Flight offers used at generation time
        hotel_data: Hotel offers used at generation time
        weather_data: Forecasts used at generation time
        total_cost: Formatted trip total
        created_at: Creation timestamp - inherited from Base
    """

    __tablename__ = "itineraries"

    title: Mapped[str] = mapped_column(
        String(300),
        nullable=False,
    )
    destination: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
    )
    start_date: Mapped[date] = mapped_column(
        Date,
        nullable=False,
    )
    end_date: Mapped[date] = mapped_column(
        Date,
        nullable=False,
    )
    interests: Mapped[list] = mapped_column(
        JSONType,
        nullable=False,
        default=list,
    )
    budget: Mapped[BudgetLevel] = mapped_column(
        Enum(
            BudgetLevel,
            native_enum=False,
            length=20,
            values_callable=_enum_values,
            name="budget_level",
        ),
        nullable=False,
    )
    pace: Mapped[TripPace] = mapped_column(
        Enum(
            TripPace,
            native_enum=False,
            length=20,
            values_callable=_enum_values,
            name="trip_pace",
        ),
        nullable=False,
    )
    days: Mapped[list] = mapped_column(
        JSONType,
        nullable=False,
        default=list,
        comment="Day-by-day plan (ItineraryDay list)",
    )
    flight_data: Mapped[list | None] = mapped_column(
        JSONType,
        nullable=True,
        comment="Flight offers snapshot from generation time",
    )
    hotel_data: Mapped[list | None] = mapped_column(
        JSONType,
        nullable=True,
        comment="Hotel offers snapshot from generation time",
    )
    weather_data: Mapped[list | None] = mapped_column(
        JSONType,
        nullable=True,
        comment="Weather forecast snapshot from generation time",
    )
    total_cost: Mapped[str | None] = mapped_column(
        String(32),
        nullable=True,
    )

    __table_args__ = (
        CheckConstraint("end_date >= start_date", name="valid_date_range"),
        Index("ix_itineraries_created_at", "created_at"),
    )