"""Domain errors for the Itinerary domain.

These are transport-agnostic; the API layer maps them onto HTTP responses.
"""

from enum import Enum


class ItineraryDomainError(Exception):
    """Base exception for itinerary domain errors."""

    def __init__(self, message: str, details: dict | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ValidationErrorKind(str, Enum):
    """Why a trip request was rejected."""

    MISSING_FIELD = "missing_field"
    INVALID_ENUM = "invalid_enum"
    EMPTY_COLLECTION = "empty_collection"
    INVALID_DATE = "invalid_date"
    INVALID_RANGE = "invalid_range"


class TripValidationError(ItineraryDomainError):
    """Raised when raw trip input cannot be turned into a TripRequest."""

    def __init__(self, kind: ValidationErrorKind, field: str, message: str) -> None:
        self.kind = kind
        self.field = field
        super().__init__(message, details={"kind": kind.value, "field": field})


class ItineraryNotFoundError(ItineraryDomainError):
    """Raised when an itinerary id does not resolve."""

    def __init__(self, itinerary_id: str) -> None:
        self.itinerary_id = itinerary_id
        super().__init__(
            f"Itinerary {itinerary_id} not found",
            details={"itinerary_id": itinerary_id},
        )


class RegenerationIndexError(ItineraryDomainError, IndexError):
    """Raised when a day number or time-block index is missing or out of range."""

    def __init__(self, message: str, **details: int | None) -> None:
        super().__init__(message, details=dict(details))


class SynthesisError(ItineraryDomainError):
    """Raised when the LLM call fails or returns unusable content."""

    def __init__(self, message: str, kind: str = "unknown") -> None:
        self.kind = kind
        super().__init__(message, details={"kind": kind})


class ProviderError(ItineraryDomainError):
    """Raised by a supply data provider; recovered locally as an empty list."""

    def __init__(self, message: str, provider: str) -> None:
        self.provider = provider
        super().__init__(message, details={"provider": provider})
