"""Trip request validation.

Turns raw key/value input (camelCase or snake_case keys) into a canonical
``TripRequest``, failing with a ``TripValidationError`` that names the
offending field.
"""

from collections.abc import Mapping
from datetime import date
from enum import Enum
from typing import Any, TypeVar

from pydantic import ValidationError
from pydantic.alias_generators import to_camel

from app.domains.itinerary.exceptions import TripValidationError, ValidationErrorKind
from app.domains.itinerary.schemas import BudgetLevel, TripPace, TripRequest

E = TypeVar("E", bound=Enum)

MAX_DESTINATION_LENGTH = 255


def _lookup(raw: Mapping[str, Any], camel: str, snake: str) -> Any:
    if camel in raw:
        return raw[camel]
    return raw.get(snake)


def _require_text(raw: Mapping[str, Any], camel: str, snake: str) -> str:
    value = _lookup(raw, camel, snake)
    if value is None or (isinstance(value, str) and not value.strip()):
        raise TripValidationError(
            ValidationErrorKind.MISSING_FIELD, camel, f"{camel} is required"
        )
    if not isinstance(value, str):
        raise TripValidationError(
            ValidationErrorKind.MISSING_FIELD, camel, f"{camel} must be a string"
        )
    return value.strip()


def _parse_date(raw: Mapping[str, Any], camel: str, snake: str) -> date:
    value = _lookup(raw, camel, snake)
    if isinstance(value, date):
        return value
    if value is not None and not isinstance(value, str):
        raise TripValidationError(
            ValidationErrorKind.INVALID_DATE, camel, f"{camel} must be an ISO date string"
        )
    text = _require_text(raw, camel, snake)
    try:
        # Accept full timestamps from date pickers, keep only the date part
        return date.fromisoformat(text[:10])
    except ValueError:
        raise TripValidationError(
            ValidationErrorKind.INVALID_DATE,
            camel,
            f"{camel} is not a valid ISO date: {text!r}",
        ) from None


def _parse_enum(raw: Mapping[str, Any], field: str, enum_cls: type[E]) -> E:
    value = _require_text(raw, field, field)
    try:
        return enum_cls(value.lower())
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise TripValidationError(
            ValidationErrorKind.INVALID_ENUM,
            field,
            f"{field} must be one of: {allowed}",
        ) from None


def _parse_interests(raw: Mapping[str, Any]) -> list[str]:
    value = raw.get("interests")
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple, set)):
        raise TripValidationError(
            ValidationErrorKind.EMPTY_COLLECTION,
            "interests",
            "Select at least one interest",
        )

    interests: list[str] = []
    for item in value:
        if not isinstance(item, str):
            continue
        tag = item.strip()
        if tag and tag not in interests:
            interests.append(tag)

    if not interests:
        raise TripValidationError(
            ValidationErrorKind.EMPTY_COLLECTION,
            "interests",
            "Select at least one interest",
        )
    return interests


def validate_trip_request(raw: Mapping[str, Any]) -> TripRequest:
    """Validate raw user input and return the canonical TripRequest.

    Args:
        raw: Request body as decoded JSON

    Returns:
        The validated, normalized TripRequest

    Raises:
        TripValidationError: If any field is missing, malformed or out of range
    """
    if not isinstance(raw, Mapping):
        raise TripValidationError(
            ValidationErrorKind.MISSING_FIELD, "body", "Request body must be an object"
        )

    destination = _require_text(raw, "destination", "destination")
    if len(destination) > MAX_DESTINATION_LENGTH:
        raise TripValidationError(
            ValidationErrorKind.INVALID_RANGE,
            "destination",
            f"destination must be at most {MAX_DESTINATION_LENGTH} characters",
        )
    start_date = _parse_date(raw, "startDate", "start_date")
    end_date = _parse_date(raw, "endDate", "end_date")
    if start_date > end_date:
        raise TripValidationError(
            ValidationErrorKind.INVALID_RANGE,
            "endDate",
            "endDate must be on or after startDate",
        )
    interests = _parse_interests(raw)
    budget = _parse_enum(raw, "budget", BudgetLevel)
    pace = _parse_enum(raw, "pace", TripPace)

    try:
        return TripRequest(
            destination=destination,
            start_date=start_date,
            end_date=end_date,
            interests=interests,
            budget=budget,
            pace=pace,
        )
    except ValidationError as e:
        error = e.errors()[0]
        field = to_camel(str(error["loc"][0])) if error["loc"] else "body"
        raise TripValidationError(
            ValidationErrorKind.INVALID_RANGE, field, f"{field}: {error['msg']}"
        ) from None
