"""
Tests for trip request validation.
"""

from datetime import date

import pytest

from app.domains.itinerary.exceptions import TripValidationError, ValidationErrorKind
from app.domains.itinerary.schemas import BudgetLevel, TripPace
from app.domains.itinerary.validation import validate_trip_request


def _payload(**overrides) -> dict:
    body = {
        "destination": "Kyoto, Japan",
        "startDate": "2024-04-01",
        "endDate": "2024-04-05",
        "interests": ["food", "temples"],
        "budget": "budget",
        "pace": "relaxed",
    }
    body.update(overrides)
    return body


class TestValidTripRequest:
    """Tests for input that should be accepted."""

    def test_camel_case_payload(self):
        """Test a typical client payload."""
        trip = validate_trip_request(_payload())

        assert trip.destination == "Kyoto, Japan"
        assert trip.start_date == date(2024, 4, 1)
        assert trip.end_date == date(2024, 4, 5)
        assert trip.interests == ["food", "temples"]
        assert trip.budget == BudgetLevel.BUDGET
        assert trip.pace == TripPace.RELAXED

    def test_snake_case_keys(self):
        """Test that snake_case keys are accepted too."""
        body = _payload()
        body["start_date"] = body.pop("startDate")
        body["end_date"] = body.pop("endDate")

        trip = validate_trip_request(body)

        assert trip.duration_days == 5

    def test_same_day_trip(self):
        """Test that start == end is a one-day trip."""
        trip = validate_trip_request(_payload(endDate="2024-04-01"))

        assert trip.duration_days == 1
        assert trip.title == "1 Day in Kyoto, Japan"

    def test_timestamp_dates_keep_date_part(self):
        """Test that full ISO timestamps are cut to their date."""
        trip = validate_trip_request(_payload(startDate="2024-04-01T00:00:00.000Z"))

        assert trip.start_date == date(2024, 4, 1)

    def test_interests_are_stripped_and_deduplicated(self):
        """Test that interest order is kept while duplicates and blanks drop out."""
        trip = validate_trip_request(_payload(interests=[" food", "art", "food", "  "]))

        assert trip.interests == ["food", "art"]

    def test_enum_values_are_case_insensitive(self):
        """Test that budget and pace ignore case."""
        trip = validate_trip_request(_payload(budget="Mid-Range", pace="PACKED"))

        assert trip.budget == BudgetLevel.MID_RANGE
        assert trip.pace == TripPace.PACKED

    def test_title_uses_inclusive_span(self):
        """Test the six-day title for March 15-20."""
        trip = validate_trip_request(
            _payload(destination="Bali", startDate="2024-03-15", endDate="2024-03-20")
        )

        assert trip.title == "6 Days in Bali"
        assert trip.duration_days == 6


class TestInvalidTripRequest:
    """Tests for input that should be rejected."""

    @pytest.mark.parametrize("field", ["destination", "startDate", "endDate", "budget", "pace"])
    def test_missing_field(self, field):
        """Test that each required field is reported when absent."""
        body = _payload()
        del body[field]

        with pytest.raises(TripValidationError) as exc_info:
            validate_trip_request(body)

        assert exc_info.value.kind == ValidationErrorKind.MISSING_FIELD
        assert exc_info.value.field == field

    def test_blank_destination(self):
        """Test that whitespace-only destination counts as missing."""
        with pytest.raises(TripValidationError) as exc_info:
            validate_trip_request(_payload(destination="   "))

        assert exc_info.value.kind == ValidationErrorKind.MISSING_FIELD

    def test_unparseable_date(self):
        """Test that a malformed date names the field."""
        with pytest.raises(TripValidationError) as exc_info:
            validate_trip_request(_payload(endDate="next friday"))

        assert exc_info.value.kind == ValidationErrorKind.INVALID_DATE
        assert exc_info.value.field == "endDate"

    def test_end_before_start(self):
        """Test that a reversed range is rejected on endDate."""
        with pytest.raises(TripValidationError) as exc_info:
            validate_trip_request(_payload(startDate="2024-04-05", endDate="2024-04-01"))

        assert exc_info.value.kind == ValidationErrorKind.INVALID_RANGE
        assert exc_info.value.field == "endDate"

    @pytest.mark.parametrize("interests", [[], ["", "  "], None])
    def test_empty_interests(self, interests):
        """Test that at least one interest is required."""
        body = _payload(interests=interests)

        with pytest.raises(TripValidationError) as exc_info:
            validate_trip_request(body)

        assert exc_info.value.kind == ValidationErrorKind.EMPTY_COLLECTION
        assert exc_info.value.field == "interests"

    @pytest.mark.parametrize("field,value", [("budget", "cheap"), ("pace", "leisurely")])
    def test_unknown_enum_value(self, field, value):
        """Test that values outside the enums are rejected."""
        with pytest.raises(TripValidationError) as exc_info:
            validate_trip_request(_payload(**{field: value}))

        assert exc_info.value.kind == ValidationErrorKind.INVALID_ENUM
        assert exc_info.value.field == field

    def test_non_object_body(self):
        """Test that a JSON array body is rejected."""
        with pytest.raises(TripValidationError) as exc_info:
            validate_trip_request(["Bali"])

        assert exc_info.value.field == "body"

    def test_overlong_destination(self):
        """Test that a destination past the column limit is a typed error."""
        with pytest.raises(TripValidationError) as exc_info:
            validate_trip_request(_payload(destination="x" * 300))

        assert exc_info.value.kind == ValidationErrorKind.INVALID_RANGE
        assert exc_info.value.field == "destination"

    def test_longest_destination_accepted(self):
        """Test the boundary length."""
        trip = validate_trip_request(_payload(destination="x" * 255))

        assert len(trip.destination) == 255
