"""Itinerary synthesis with an LLM.

The synthesizer turns a trip request plus supply data into day-by-day
plans, and regenerates slices of an existing plan. Raw model output is
checked by ``parse_synthesis_output`` before anything downstream sees it.
"""

import json
import logging
import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import date, timedelta
from enum import Enum
from typing import Any

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.prompts import ChatPromptTemplate
from langchain_openai import ChatOpenAI
from pydantic import ValidationError

from app.core.config import settings
from app.domains.itinerary.exceptions import SynthesisError
from app.domains.itinerary.schemas import (
    ItineraryDay,
    NewPreferences,
    RegenerationScope,
    RegenerationSection,
    TripRequest,
)
from app.domains.itinerary.tools.supply import SupplyData

logger = logging.getLogger(__name__)


# ============ Output Parsing ============


class SynthesisErrorKind(str, Enum):
    """Why model output could not be turned into itinerary days."""

    EMPTY = "empty"
    INVALID_JSON = "invalid_json"
    INVALID_SHAPE = "invalid_shape"
    NON_CONTIGUOUS = "non_contiguous"


@dataclass(frozen=True)
class SynthesisOk:
    days: list[ItineraryDay] = field(default_factory=list)


@dataclass(frozen=True)
class SynthesisErr:
    kind: SynthesisErrorKind
    detail: str


SynthesisResult = SynthesisOk | SynthesisErr


def strip_code_fences(content: str) -> str:
    """Remove a surrounding markdown code fence, if any."""
    content = content.strip()
    if "```" in content:
        content = content.split("```")[1]
        if content.startswith("json"):
            content = content[4:]
    return content.strip()


def _is_number(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, float):
        return math.isfinite(value)
    return isinstance(value, int)


def parse_synthesis_output(
    content: str | None,
    expected_days: int,
    allow_partial: bool = False,
    start_date: date | None = None,
) -> SynthesisResult:
    """Validate raw model output as a list of itinerary days.

    Args:
        content: Model response text, JSON possibly wrapped in a code fence
        expected_days: Number of days in the trip
        allow_partial: Accept any subset of days with unique numbers instead
            of exactly 1..expected_days
        start_date: When given, the date of each day within the trip is set
            to start_date + (day - 1)

    Returns:
        SynthesisOk with days ordered by day number, or SynthesisErr
    """
    if content is None or not content.strip():
        return SynthesisErr(SynthesisErrorKind.EMPTY, "Model returned no content")

    try:
        data = json.loads(strip_code_fences(content))
    except json.JSONDecodeError as e:
        return SynthesisErr(SynthesisErrorKind.INVALID_JSON, f"Response is not JSON: {e}")

    raw_days = data.get("days") if isinstance(data, dict) else data
    if raw_days is None or raw_days == []:
        return SynthesisErr(SynthesisErrorKind.EMPTY, "Response contains no days")
    if not isinstance(raw_days, list):
        return SynthesisErr(
            SynthesisErrorKind.INVALID_SHAPE,
            f"Expected a list of days, got {type(raw_days).__name__}",
        )

    days: list[ItineraryDay] = []
    for index, raw in enumerate(raw_days):
        if not isinstance(raw, dict):
            return SynthesisErr(
                SynthesisErrorKind.INVALID_SHAPE, f"Day at index {index} is not an object"
            )
        total = raw.get("totalCost", raw.get("total_cost"))
        if not _is_number(total):
            return SynthesisErr(
                SynthesisErrorKind.INVALID_SHAPE,
                f"Day at index {index} has non-numeric totalCost: {total!r}",
            )
        number = raw.get("day")
        if start_date is not None and type(number) is int and 1 <= number <= expected_days:
            try:
                day_date = start_date + timedelta(days=number - 1)
            except OverflowError:
                return SynthesisErr(
                    SynthesisErrorKind.INVALID_SHAPE,
                    f"Day at index {index} falls outside the calendar",
                )
            raw = {**raw, "date": day_date.isoformat()}
        try:
            days.append(ItineraryDay.model_validate(raw))
        except ValidationError as e:
            return SynthesisErr(
                SynthesisErrorKind.INVALID_SHAPE,
                f"Day at index {index} is malformed: {e.error_count()} validation error(s)",
            )

    numbers = [day.day for day in days]
    if len(set(numbers)) != len(numbers):
        return SynthesisErr(
            SynthesisErrorKind.NON_CONTIGUOUS, f"Duplicate day numbers: {numbers}"
        )
    if not allow_partial and sorted(numbers) != list(range(1, expected_days + 1)):
        return SynthesisErr(
            SynthesisErrorKind.NON_CONTIGUOUS,
            f"Expected days 1..{expected_days}, got {sorted(numbers)}",
        )

    return SynthesisOk(days=sorted(days, key=lambda day: day.day))


# ============ Synthesizer Port ============


class ItinerarySynthesizer(ABC):
    """Produces itinerary days for a trip."""

    @abstractmethod
    async def synthesize(
        self, trip_request: TripRequest, supply: SupplyData
    ) -> list[ItineraryDay]:
        """Generate exactly one day per trip day, numbered 1..N.

        Raises:
            SynthesisError: If generation fails or the output is unusable
        """

    @abstractmethod
    async def resynthesize(
        self,
        existing_days: list[ItineraryDay],
        trip_request: TripRequest,
        scope: RegenerationScope,
        new_preferences: NewPreferences | None = None,
        supply: SupplyData | None = None,
    ) -> list[ItineraryDay]:
        """Regenerate the scoped slice of an itinerary.

        Returns the regenerated days (possibly only the targeted one), or an
        empty list when the model produced nothing.

        Raises:
            SynthesisError: If generation fails or the output is malformed
        """


# ============ LLM Configuration ============


def get_llm(temperature: float | None = None) -> ChatOpenAI:
    """Get configured ChatOpenAI instance."""
    return ChatOpenAI(
        model=settings.OPENAI_MODEL,
        api_key=settings.OPENAI_API_KEY,
        temperature=settings.OPENAI_TEMPERATURE if temperature is None else temperature,
    )


# ============ Prompts ============


SYSTEM_PROMPT = """You are an expert travel planner. You produce detailed, personalized \
itineraries and always answer with JSON only, no commentary."""

DAY_SCHEMA = """Each day is an object with this shape:
{{
  "day": number,                // 1-based day number
  "date": "YYYY-MM-DD",
  "title": string,
  "weather": {{"condition": string, "temperature": string, "icon": string}},
  "timeBlocks": [
    {{
      "time": string,           // e.g. "9:00 AM"
      "period": "morning" | "afternoon" | "evening",
      "activity": {{
        "name": string,
        "description": string,
        "duration": string,
        "cost": string,         // e.g. "$25"
        "location": {{"lat": number, "lng": number, "address": string}}
      }}
    }}
  ],
  "totalCost": number,          // sum of activity costs, a plain number
  "walkingDistance": string
}}"""

GENERATION_PROMPT = """Generate a detailed travel itinerary based on the following information:

Destination: {destination}
Dates: {start_date} to {end_date} ({duration_days} days)
Interests: {interests}
Budget: {budget}
Pace: {pace}

Available flight options: {flights}
Available hotels: {hotels}
Weather forecast: {weather}

Create exactly {duration_days} days, numbered 1 to {duration_days}, with:
- Morning, afternoon, and evening activities
- Each activity with name, description, duration, estimated cost, and coordinates
- Activities that suit the weather forecast
- Activities matched to the traveler's interests
- Costs within the specified budget range
- Activity density adjusted to the pace preference
- Activities clustered geographically to minimize travel time

""" + DAY_SCHEMA + """

Return a JSON object: {{"days": [ ... ]}}"""

DAY_REGENERATION_PROMPT = """Regenerate day {day_number} of this travel itinerary with new \
activities. Keep the same structure but provide different options.

Original itinerary: {itinerary}
Trip details: {trip}
New preferences: {preferences}

""" + DAY_SCHEMA + """

Return a JSON object {{"days": [ ... ]}} containing the regenerated day {day_number}."""

TIME_BLOCK_REGENERATION_PROMPT = """Regenerate the {period} time block (index \
{time_block_index}) for day {day_number} of this travel itinerary. Keep every other time \
block of that day as it is and update the day's totalCost accordingly.

Original itinerary: {itinerary}
Trip details: {trip}
New preferences: {preferences}

""" + DAY_SCHEMA + """

Return a JSON object {{"days": [ ... ]}} containing the full updated day {day_number}."""

ENTIRE_REGENERATION_PROMPT = """Regenerate the entire travel itinerary with a different \
style or approach.

Original request: {trip}
New preferences: {preferences}
Available flight options: {flights}
Available hotels: {hotels}
Weather forecast: {weather}

Create exactly {duration_days} days, numbered 1 to {duration_days}.

""" + DAY_SCHEMA + """

Return a completely new itinerary as a JSON object: {{"days": [ ... ]}}"""


def _dump_models(items: list) -> str:
    return json.dumps([item.model_dump(mode="json", by_alias=True) for item in items])


# ============ LLM Synthesizer ============


class LLMItinerarySynthesizer(ItinerarySynthesizer):
    """Synthesizer backed by an OpenAI chat model through LangChain."""

    def __init__(self, llm: BaseChatModel | None = None) -> None:
        self._llm = llm

    @property
    def llm(self) -> BaseChatModel:
        if self._llm is None:
            self._llm = get_llm()
        return self._llm

    async def _complete(self, template: str, **values: Any) -> str:
        prompt = ChatPromptTemplate.from_messages(
            [("system", SYSTEM_PROMPT), ("human", template)]
        )
        messages = prompt.format_messages(**values)
        try:
            response = await self.llm.ainvoke(messages)
        except Exception as e:
            logger.error(f"LLM call failed: {e}")
            raise SynthesisError(f"LLM call failed: {e}", kind="llm_error") from e
        content = response.content
        return content if isinstance(content, str) else json.dumps(content)

    async def synthesize(
        self, trip_request: TripRequest, supply: SupplyData
    ) -> list[ItineraryDay]:
        content = await self._complete(
            GENERATION_PROMPT,
            destination=trip_request.destination,
            start_date=trip_request.start_date.isoformat(),
            end_date=trip_request.end_date.isoformat(),
            duration_days=trip_request.duration_days,
            interests=", ".join(trip_request.interests),
            budget=trip_request.budget.value,
            pace=trip_request.pace.value,
            flights=_dump_models(supply.flights),
            hotels=_dump_models(supply.hotels),
            weather=_dump_models(supply.weather),
        )

        result = parse_synthesis_output(
            content,
            expected_days=trip_request.duration_days,
            start_date=trip_request.start_date,
        )
        if isinstance(result, SynthesisErr):
            logger.error(f"Unusable itinerary output ({result.kind.value}): {result.detail}")
            raise SynthesisError(
                f"Failed to generate itinerary: {result.detail}", kind=result.kind.value
            )

        logger.info(f"Synthesized {len(result.days)} days for {trip_request.destination}")
        return result.days

    async def resynthesize(
        self,
        existing_days: list[ItineraryDay],
        trip_request: TripRequest,
        scope: RegenerationScope,
        new_preferences: NewPreferences | None = None,
        supply: SupplyData | None = None,
    ) -> list[ItineraryDay]:
        supply = supply or SupplyData()
        values: dict[str, Any] = {
            "itinerary": _dump_models(existing_days),
            "trip": trip_request.model_dump_json(by_alias=True),
            "preferences": (
                new_preferences.model_dump_json(by_alias=True, exclude_none=True)
                if new_preferences
                else "none"
            ),
        }

        if scope.section == RegenerationSection.DAY:
            template = DAY_REGENERATION_PROMPT
            values["day_number"] = scope.day_number
        elif scope.section == RegenerationSection.TIME_BLOCK:
            template = TIME_BLOCK_REGENERATION_PROMPT
            values.update(
                day_number=scope.day_number,
                time_block_index=scope.time_block_index,
                period=scope.period.value if scope.period else "selected",
            )
        else:
            template = ENTIRE_REGENERATION_PROMPT
            values.update(
                duration_days=trip_request.duration_days,
                flights=_dump_models(supply.flights),
                hotels=_dump_models(supply.hotels),
                weather=_dump_models(supply.weather),
            )
            values.pop("itinerary")

        content = await self._complete(template, **values)
        result = parse_synthesis_output(
            content,
            expected_days=trip_request.duration_days,
            allow_partial=scope.section != RegenerationSection.ENTIRE,
            start_date=trip_request.start_date,
        )

        if isinstance(result, SynthesisErr):
            if result.kind == SynthesisErrorKind.EMPTY:
                logger.warning(f"Regeneration of {scope.section.value} returned no days")
                return []
            logger.error(f"Unusable regeneration output ({result.kind.value}): {result.detail}")
            raise SynthesisError(
                f"Failed to regenerate section: {result.detail}", kind=result.kind.value
            )
        return result.days
