"""Base classes for supply data providers and their HTTP clients."""

import logging
from abc import ABC, abstractmethod
from datetime import date
from typing import Any, ClassVar

import httpx
from pydantic import BaseModel, Field

from app.core.config import settings
from app.domains.itinerary.schemas import BudgetLevel, TripRequest

logger = logging.getLogger(__name__)


class ToolError(Exception):
    """Base exception for external API client errors."""

    def __init__(self, message: str, tool_name: str, details: dict | None = None):
        self.message = message
        self.tool_name = tool_name
        self.details = details or {}
        super().__init__(self.message)


class APIClientError(ToolError):
    """Exception for API client errors."""

    pass


class RateLimitError(ToolError):
    """Exception for rate limit errors."""

    pass


class AuthenticationError(ToolError):
    """Exception for authentication errors."""

    pass


class BaseAsyncAPIClient(ABC):
    """Base class for async API clients.

    Use as an async context manager; the underlying ``httpx.AsyncClient``
    only lives inside the ``async with`` block. Requests are made once,
    failures are raised as ``ToolError`` subclasses.
    """

    def __init__(self, base_url: str, timeout: float = 10.0):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "BaseAsyncAPIClient":
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            headers=await self._get_headers(),
        )
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    @abstractmethod
    async def _get_headers(self) -> dict[str, str]:
        """Get headers for API requests. Override in subclasses."""

    async def get(self, endpoint: str, params: dict | None = None) -> dict:
        """Make an async GET request and decode the JSON body."""
        if not self._client:
            raise APIClientError(
                "Client not initialized. Use async context manager.",
                tool_name=self.__class__.__name__,
            )

        url = endpoint if endpoint.startswith("/") else f"/{endpoint}"
        try:
            response = await self._client.get(url, params=params)
        except httpx.RequestError as e:
            raise APIClientError(
                f"Request error: {e}",
                tool_name=self.__class__.__name__,
            ) from e

        if response.status_code == 401:
            raise AuthenticationError(
                "Authentication failed",
                tool_name=self.__class__.__name__,
            )
        if response.status_code == 429:
            raise RateLimitError(
                "Rate limit exceeded",
                tool_name=self.__class__.__name__,
            )
        if response.is_error:
            raise APIClientError(
                f"HTTP error: {response.status_code}",
                tool_name=self.__class__.__name__,
                details={"status_code": response.status_code},
            )
        return response.json()


# ============ Supply Providers ============


class SupplyParams(BaseModel):
    """What every supply provider is queried with."""

    destination: str
    start_date: date
    end_date: date
    budget: BudgetLevel = BudgetLevel.MID_RANGE
    origin: str = Field(default_factory=lambda: settings.DEFAULT_ORIGIN_AIRPORT)

    @classmethod
    def from_trip_request(cls, trip: TripRequest) -> "SupplyParams":
        return cls(
            destination=trip.destination,
            start_date=trip.start_date,
            end_date=trip.end_date,
            budget=trip.budget,
        )

    @property
    def duration_days(self) -> int:
        return (self.end_date - self.start_date).days + 1

    def cache_key(self) -> str:
        """Stable key fragment identifying this query."""
        return ":".join(
            [
                self.destination.strip().lower(),
                self.start_date.isoformat(),
                self.end_date.isoformat(),
                self.budget.value,
                self.origin.upper(),
            ]
        )


class SupplyProvider(ABC):
    """A source of one category of supply data.

    Subclasses set ``name`` (the SupplyData field they fill) and
    ``result_model`` (the schema of each returned offer).
    """

    name: ClassVar[str]
    result_model: ClassVar[type[BaseModel]]

    @abstractmethod
    async def query(self, params: SupplyParams) -> list[BaseModel]:
        """Return offers for the given trip, best first.

        May raise; callers treat any failure as "no data".
        """
