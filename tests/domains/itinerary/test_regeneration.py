"""
Tests for the regeneration workflow.

Covers scope resolution, the splice policy, and the store post-conditions
for every section type.
"""

import pytest

from app.domains.itinerary.exceptions import (
    ItineraryNotFoundError,
    RegenerationIndexError,
    SynthesisError,
)
from app.domains.itinerary.schemas import (
    BudgetLevel,
    NewPreferences,
    RegenerateRequest,
    RegenerationSection,
    TimePeriod,
)
from app.domains.itinerary.services.regeneration import (
    RegenerationOrchestrator,
    resolve_scope,
    splice_days,
)


@pytest.fixture
def orchestrator(store, synthesizer) -> RegenerationOrchestrator:
    return RegenerationOrchestrator(store, synthesizer)


def _request(itinerary_id: str, section: str, **kwargs) -> RegenerateRequest:
    return RegenerateRequest(itinerary_id=itinerary_id, section=section, **kwargs)


class TestResolveScope:
    """Tests for index checks against a stored itinerary."""

    @pytest.mark.asyncio
    async def test_entire_ignores_indices(self, bali_itinerary):
        """Test that indices are irrelevant for the entire section."""
        scope = resolve_scope(
            _request(bali_itinerary.id, "entire", day_number=99, time_block_index=-4),
            bali_itinerary,
        )

        assert scope.section == RegenerationSection.ENTIRE
        assert scope.day_number is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("day_number", [None, 0, 7, -1])
    async def test_day_out_of_range(self, bali_itinerary, day_number):
        """Test that day numbers outside 1..6 are rejected."""
        with pytest.raises(RegenerationIndexError):
            resolve_scope(_request(bali_itinerary.id, "day", day_number=day_number), bali_itinerary)

    @pytest.mark.asyncio
    async def test_time_block_carries_period(self, bali_itinerary):
        """Test that the targeted block's period is resolved."""
        scope = resolve_scope(
            _request(bali_itinerary.id, "timeBlock", day_number=2, time_block_index=2),
            bali_itinerary,
        )

        assert scope.period == TimePeriod.EVENING
        assert scope.time_block_index == 2

    @pytest.mark.asyncio
    @pytest.mark.parametrize("index", [None, 3, -1])
    async def test_time_block_out_of_range(self, bali_itinerary, index):
        """Test that block indices outside 0..2 are rejected."""
        with pytest.raises(RegenerationIndexError):
            resolve_scope(
                _request(bali_itinerary.id, "timeBlock", day_number=2, time_block_index=index),
                bali_itinerary,
            )

    def test_index_error_is_builtin_index_error(self):
        """Test that callers catching IndexError also see regeneration index errors."""
        assert issubclass(RegenerationIndexError, IndexError)


class TestSpliceDays:
    """Tests for splice_days."""

    def test_empty_result_keeps_existing(self, day_factory, bali_trip):
        """Test that nothing regenerated means nothing changes."""
        existing = [day_factory(n, bali_trip.start_date) for n in range(1, 4)]

        assert splice_days(existing, [], RegenerationSection.DAY) == existing

    def test_entire_replaces_list(self, day_factory, bali_trip):
        """Test that entire regeneration swaps the whole list."""
        existing = [day_factory(n, bali_trip.start_date) for n in range(1, 4)]
        fresh = [day_factory(n, bali_trip.start_date, title="New") for n in range(1, 4)]

        assert splice_days(existing, fresh, RegenerationSection.ENTIRE) == fresh

    def test_day_replaces_only_returned_days(self, day_factory, bali_trip):
        """Test that missing days fall back to the existing ones."""
        existing = [day_factory(n, bali_trip.start_date) for n in range(1, 4)]
        new_day = day_factory(2, bali_trip.start_date, title="New day 2")

        result = splice_days(existing, [new_day], RegenerationSection.DAY)

        assert [day.title for day in result] == ["Day 1", "New day 2", "Day 3"]

    def test_out_of_range_days_discarded(self, day_factory, bali_trip):
        """Test that returned days beyond the trip are dropped."""
        existing = [day_factory(n, bali_trip.start_date) for n in range(1, 4)]
        stray = day_factory(5, bali_trip.start_date, title="Stray")

        result = splice_days(existing, [stray], RegenerationSection.DAY)

        assert result == existing


class TestRegenerateDay:
    """Tests for day regeneration."""

    @pytest.mark.asyncio
    async def test_bali_day_two(self, orchestrator, store, bali_itinerary):
        """Test regenerating day 2 of the six-day Bali trip."""
        assert "6 Days in Bali, Indonesia" in bali_itinerary.title
        original_day_two = bali_itinerary.days[1]

        result = await orchestrator.regenerate(_request(bali_itinerary.id, "day", day_number=2))

        assert len(result.days) == 6
        assert [day.day for day in result.days] == [1, 2, 3, 4, 5, 6]
        assert result.days[1] != original_day_two
        assert result.days[1].title == "Regenerated day 2"
        assert result.days[0] == bali_itinerary.days[0]
        assert result.days[2:] == bali_itinerary.days[2:]

        stored = await store.get(bali_itinerary.id)
        assert stored.days == result.days

    @pytest.mark.asyncio
    async def test_total_cost_not_recomputed(self, orchestrator, bali_itinerary):
        """Test that the itinerary-level total stays as stored."""
        result = await orchestrator.regenerate(_request(bali_itinerary.id, "day", day_number=1))

        assert result.days[0].total_cost == 55.0
        assert result.total_cost == bali_itinerary.total_cost

    @pytest.mark.asyncio
    async def test_out_of_range_leaves_store_unchanged(
        self, orchestrator, store, synthesizer, bali_itinerary
    ):
        """Test that an invalid day fails before the synthesizer runs."""
        with pytest.raises(IndexError):
            await orchestrator.regenerate(_request(bali_itinerary.id, "day", day_number=7))

        assert synthesizer.resynthesize_calls == []
        assert (await store.get(bali_itinerary.id)).days == bali_itinerary.days

    @pytest.mark.asyncio
    async def test_budget_preference_applied(self, orchestrator, synthesizer, bali_itinerary):
        """Test that a new budget reaches the synthesizer's trip request."""
        await orchestrator.regenerate(
            _request(
                bali_itinerary.id,
                "day",
                day_number=3,
                new_preferences=NewPreferences(budget=BudgetLevel.LUXURY),
            )
        )

        call = synthesizer.resynthesize_calls[0]
        assert call["trip_request"].budget == BudgetLevel.LUXURY
        assert call["new_preferences"].budget == BudgetLevel.LUXURY


class TestRegenerateTimeBlock:
    """Tests for time-block regeneration."""

    @pytest.mark.asyncio
    async def test_valid_pair(self, orchestrator, synthesizer, bali_itinerary):
        """Test that a valid day/block pair regenerates that day."""
        result = await orchestrator.regenerate(
            _request(bali_itinerary.id, "timeBlock", day_number=4, time_block_index=0)
        )

        assert len(result.days) == 6
        assert result.days[3].title == "Regenerated day 4"
        scope = synthesizer.resynthesize_calls[0]["scope"]
        assert scope.period == TimePeriod.MORNING

    @pytest.mark.asyncio
    async def test_block_out_of_range(self, orchestrator, store, bali_itinerary):
        """Test that a block index past the day's blocks fails."""
        with pytest.raises(IndexError):
            await orchestrator.regenerate(
                _request(bali_itinerary.id, "timeBlock", day_number=4, time_block_index=3)
            )

        assert (await store.get(bali_itinerary.id)).days == bali_itinerary.days


class TestRegenerateEntire:
    """Tests for whole-itinerary regeneration."""

    @pytest.mark.asyncio
    async def test_replaces_all_days(self, orchestrator, bali_itinerary):
        """Test that every day is replaced."""
        result = await orchestrator.regenerate(_request(bali_itinerary.id, "entire"))

        assert [day.title for day in result.days] == [f"Fresh day {n}" for n in range(1, 7)]

    @pytest.mark.asyncio
    async def test_uses_stored_supply_snapshot(self, orchestrator, synthesizer, bali_itinerary):
        """Test that regeneration reuses stored supply data instead of refetching."""
        await orchestrator.regenerate(_request(bali_itinerary.id, "entire"))

        supply = synthesizer.resynthesize_calls[0]["supply"]
        assert supply.flights == []
        assert supply.hotels == []


class TestRegenerationFailures:
    """Tests for failure handling shared by all sections."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "kwargs",
        [
            {"section": "entire"},
            {"section": "day", "day_number": 1},
            {"section": "timeBlock", "day_number": 1, "time_block_index": 0},
            {"section": "day", "day_number": 99},
        ],
    )
    async def test_unknown_itinerary(self, orchestrator, kwargs):
        """Test that an unknown id is reported before any index check."""
        with pytest.raises(ItineraryNotFoundError):
            await orchestrator.regenerate(RegenerateRequest(itinerary_id="missing", **kwargs))

    @pytest.mark.asyncio
    async def test_empty_result_keeps_days(self, orchestrator, store, synthesizer, bali_itinerary):
        """Test that an empty synthesizer result changes nothing."""
        synthesizer.resynthesize_result = []

        result = await orchestrator.regenerate(_request(bali_itinerary.id, "entire"))

        assert result.days == bali_itinerary.days
        assert (await store.get(bali_itinerary.id)).days == bali_itinerary.days

    @pytest.mark.asyncio
    async def test_synthesis_error_leaves_store_unchanged(
        self, orchestrator, store, synthesizer, bali_itinerary
    ):
        """Test that unparseable output propagates and nothing is written."""
        synthesizer.error = SynthesisError("Response is not JSON", kind="invalid_json")

        with pytest.raises(SynthesisError):
            await orchestrator.regenerate(_request(bali_itinerary.id, "day", day_number=2))

        assert (await store.get(bali_itinerary.id)).days == bali_itinerary.days

    @pytest.mark.asyncio
    async def test_itinerary_vanishes_before_write(self, synthesizer, bali_itinerary, store):
        """Test that a missing row at write time is reported as not found."""
        store.update = _always_none
        orchestrator = RegenerationOrchestrator(store, synthesizer)

        with pytest.raises(ItineraryNotFoundError):
            await orchestrator.regenerate(_request(bali_itinerary.id, "day", day_number=1))


async def _always_none(itinerary_id, partial):
    return None
