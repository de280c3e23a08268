"""LangGraph workflow for regenerating part of a stored itinerary.

Flow:
1. load_itinerary -> fetch the stored itinerary (unknown id fails here)
2. resolve_scope -> check day / time-block indices against it
3. resynthesize -> ask the synthesizer for replacement days
4. splice -> merge the replacement days into the existing list
5. persist -> write the new day list back to the store

Any node may set ``error``, which ends the run; ``regenerate`` re-raises
it so callers see the domain exception.
"""

import logging
from typing import Literal, TypedDict

from langgraph.graph import END, StateGraph

from app.domains.itinerary.exceptions import (
    ItineraryDomainError,
    ItineraryNotFoundError,
    RegenerationIndexError,
)
from app.domains.itinerary.schemas import (
    Itinerary,
    ItineraryDay,
    RegenerateRequest,
    RegenerationScope,
    RegenerationSection,
    TripRequest,
)
from app.domains.itinerary.services.synthesizer import ItinerarySynthesizer
from app.domains.itinerary.store import ItineraryStore
from app.domains.itinerary.tools.supply import SupplyData

logger = logging.getLogger(__name__)


class RegenerationState(TypedDict, total=False):
    """State carried through the regeneration workflow."""

    # Input
    request: RegenerateRequest

    # Loaded / derived
    itinerary: Itinerary
    trip_request: TripRequest
    scope: RegenerationScope

    # Synthesizer output and splice result
    regenerated_days: list[ItineraryDay]
    new_days: list[ItineraryDay]

    # Final output
    result: Itinerary | None
    error: ItineraryDomainError | None


def resolve_scope(request: RegenerateRequest, itinerary: Itinerary) -> RegenerationScope:
    """Check the request's indices against the itinerary.

    Raises:
        RegenerationIndexError: If a required index is missing or out of range
    """
    if request.section == RegenerationSection.ENTIRE:
        return RegenerationScope(section=RegenerationSection.ENTIRE)

    day_count = len(itinerary.days)
    day_number = request.day_number
    if day_number is None or not 1 <= day_number <= day_count:
        raise RegenerationIndexError(
            f"Day number {day_number} is out of range (1-{day_count})",
            day_number=day_number,
            day_count=day_count,
        )

    if request.section == RegenerationSection.DAY:
        return RegenerationScope(section=RegenerationSection.DAY, day_number=day_number)

    blocks = itinerary.days[day_number - 1].time_blocks
    index = request.time_block_index
    if index is None or not 0 <= index < len(blocks):
        raise RegenerationIndexError(
            f"Time block index {index} is out of range for day {day_number} "
            f"({len(blocks)} blocks)",
            day_number=day_number,
            time_block_index=index,
            block_count=len(blocks),
        )

    return RegenerationScope(
        section=RegenerationSection.TIME_BLOCK,
        day_number=day_number,
        time_block_index=index,
        period=blocks[index].period,
    )


def splice_days(
    existing: list[ItineraryDay],
    regenerated: list[ItineraryDay],
    section: RegenerationSection,
) -> list[ItineraryDay]:
    """Merge regenerated days into the existing day list.

    An empty result keeps the existing days. ``entire`` replaces the list;
    otherwise each day 1..N comes from the result when present and from
    the existing list when not.
    """
    if not regenerated:
        return list(existing)
    if section == RegenerationSection.ENTIRE:
        return list(regenerated)

    day_count = len(existing)
    by_number: dict[int, ItineraryDay] = {}
    for day in regenerated:
        if 1 <= day.day <= day_count:
            by_number[day.day] = day
        else:
            logger.warning(f"Discarding regenerated day {day.day} outside 1-{day_count}")

    return [by_number.get(number, existing[number - 1]) for number in range(1, day_count + 1)]


class RegenerationOrchestrator:
    """Regenerates all or part of a stored itinerary."""

    def __init__(self, store: ItineraryStore, synthesizer: ItinerarySynthesizer) -> None:
        self.store = store
        self.synthesizer = synthesizer
        self.graph = self._build_graph().compile()

    # ============ Nodes ============

    async def _load_itinerary(self, state: RegenerationState) -> RegenerationState:
        request = state["request"]
        itinerary = await self.store.get(request.itinerary_id)
        if itinerary is None:
            return {"error": ItineraryNotFoundError(request.itinerary_id)}

        trip_request = itinerary.trip_request()
        if request.new_preferences:
            trip_request = trip_request.with_budget(request.new_preferences.budget)
        return {"itinerary": itinerary, "trip_request": trip_request}

    async def _resolve_scope(self, state: RegenerationState) -> RegenerationState:
        try:
            scope = resolve_scope(state["request"], state["itinerary"])
        except RegenerationIndexError as e:
            logger.warning(f"Rejected regeneration of {state['itinerary'].id}: {e.message}")
            return {"error": e}
        return {"scope": scope}

    async def _resynthesize(self, state: RegenerationState) -> RegenerationState:
        itinerary = state["itinerary"]
        scope = state["scope"]
        supply = SupplyData(
            flights=itinerary.flight_data or [],
            hotels=itinerary.hotel_data or [],
            weather=itinerary.weather_data or [],
        )
        logger.info(f"Regenerating {scope.section.value} of itinerary {itinerary.id}")
        try:
            days = await self.synthesizer.resynthesize(
                itinerary.days,
                state["trip_request"],
                scope,
                new_preferences=state["request"].new_preferences,
                supply=supply,
            )
        except ItineraryDomainError as e:
            logger.error(f"Regeneration of itinerary {itinerary.id} failed: {e.message}")
            return {"error": e}
        return {"regenerated_days": days}

    async def _splice(self, state: RegenerationState) -> RegenerationState:
        itinerary = state["itinerary"]
        regenerated = state.get("regenerated_days") or []
        if not regenerated:
            logger.info(f"No regenerated days for itinerary {itinerary.id}, keeping it as is")
            return {"result": itinerary}
        return {
            "new_days": splice_days(itinerary.days, regenerated, state["scope"].section)
        }

    async def _persist(self, state: RegenerationState) -> RegenerationState:
        itinerary_id = state["itinerary"].id
        updated = await self.store.update(itinerary_id, {"days": state["new_days"]})
        if updated is None:
            return {"error": ItineraryNotFoundError(itinerary_id)}
        logger.info(f"Itinerary {itinerary_id} updated ({len(updated.days)} days)")
        return {"result": updated}

    # ============ Graph ============

    def _build_graph(self) -> StateGraph:
        workflow = StateGraph(RegenerationState)

        workflow.add_node("load_itinerary", self._load_itinerary)
        workflow.add_node("resolve_scope", self._resolve_scope)
        workflow.add_node("resynthesize", self._resynthesize)
        workflow.add_node("splice", self._splice)
        workflow.add_node("persist", self._persist)

        workflow.set_entry_point("load_itinerary")

        def should_continue(state: RegenerationState) -> Literal["continue", "end"]:
            if state.get("error") or state.get("result") is not None:
                return "end"
            return "continue"

        steps = ["load_itinerary", "resolve_scope", "resynthesize", "splice", "persist"]
        for current, following in zip(steps, steps[1:]):
            workflow.add_conditional_edges(
                current,
                should_continue,
                {"continue": following, "end": END},
            )
        workflow.add_edge("persist", END)

        return workflow

    # ============ Public Interface ============

    async def regenerate(self, request: RegenerateRequest) -> Itinerary:
        """Regenerate the requested section and return the stored result.

        Raises:
            ItineraryNotFoundError: If the itinerary id is unknown
            RegenerationIndexError: If a day or time-block index is invalid
            SynthesisError: If the synthesizer failed; the store is unchanged
        """
        initial_state: RegenerationState = {
            "request": request,
            "result": None,
            "error": None,
        }
        final_state = await self.graph.ainvoke(initial_state)

        if final_state.get("error"):
            raise final_state["error"]
        return final_state["result"]
