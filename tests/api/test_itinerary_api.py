"""
Tests for the HTTP API.

The store and synthesizer are swapped through dependency overrides; the
supply cache is disabled so no Redis is needed.
"""

from unittest.mock import AsyncMock, patch

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from app.api.v1.endpoints import health
from app.core.config import settings
from app.core.deps import get_itinerary_store, get_synthesizer
from app.domains.itinerary.exceptions import SynthesisError
from app.domains.itinerary.tools.supply import get_supply_cache
from app.main import app


@pytest_asyncio.fixture
async def client(store, synthesizer):
    app.dependency_overrides[get_itinerary_store] = lambda: store
    app.dependency_overrides[get_synthesizer] = lambda: synthesizer
    app.dependency_overrides[get_supply_cache] = lambda: None
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


class TestGenerateEndpoint:
    """Tests for POST /api/itinerary/generate."""

    @pytest.mark.asyncio
    async def test_generate_bali(self, client, bali_payload):
        """Test generating the six-day Bali itinerary."""
        response = await client.post("/api/itinerary/generate", json=bali_payload)

        assert response.status_code == 200
        body = response.json()
        assert "6 Days in Bali, Indonesia" in body["title"]
        assert [day["day"] for day in body["days"]] == [1, 2, 3, 4, 5, 6]
        assert body["startDate"] == "2024-03-15"
        assert body["totalCost"] == "$600"
        assert body["days"][0]["timeBlocks"][0]["period"] == "morning"
        assert body["days"][0]["date"] == "2024-03-15"

    @pytest.mark.asyncio
    async def test_validation_error_is_500(self, client, bali_payload):
        """Test that invalid input yields the flat error body."""
        bali_payload["endDate"] = "2024-03-01"

        response = await client.post("/api/itinerary/generate", json=bali_payload)

        assert response.status_code == 500
        body = response.json()
        assert body["message"] == "Failed to generate itinerary"
        assert "endDate" in body["error"]

    @pytest.mark.asyncio
    async def test_synthesis_error_is_500(self, client, synthesizer, bali_payload):
        """Test that synthesizer failures yield the flat error body."""
        synthesizer.error = SynthesisError("Failed to generate itinerary: Response is not JSON")

        response = await client.post("/api/itinerary/generate", json=bali_payload)

        assert response.status_code == 500
        assert "not JSON" in response.json()["error"]

    @pytest.mark.asyncio
    async def test_malformed_body_is_500(self, client):
        """Test that a non-JSON body is reported, not rejected with 422."""
        response = await client.post(
            "/api/itinerary/generate",
            content=b"destination=Bali",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 500
        assert response.json()["message"] == "Failed to generate itinerary"


class TestRegenerateEndpoint:
    """Tests for POST /api/itinerary/regenerate."""

    @pytest.mark.asyncio
    async def test_regenerate_day(self, client, bali_itinerary):
        """Test regenerating day 2 keeps six days and changes only day 2."""
        response = await client.post(
            "/api/itinerary/regenerate",
            json={"itineraryId": bali_itinerary.id, "section": "day", "dayNumber": 2},
        )

        assert response.status_code == 200
        days = response.json()["days"]
        assert len(days) == 6
        assert days[1]["title"] == "Regenerated day 2"
        assert days[0]["title"] == "Day 1"

    @pytest.mark.asyncio
    async def test_regenerate_time_block(self, client, bali_itinerary):
        """Test regenerating one time block."""
        response = await client.post(
            "/api/itinerary/regenerate",
            json={
                "itineraryId": bali_itinerary.id,
                "section": "timeBlock",
                "dayNumber": 5,
                "timeBlockIndex": 1,
            },
        )

        assert response.status_code == 200
        assert response.json()["days"][4]["title"] == "Regenerated day 5"

    @pytest.mark.asyncio
    async def test_unknown_itinerary_is_404(self, client):
        """Test that an unknown id yields 404 with a message."""
        response = await client.post(
            "/api/itinerary/regenerate",
            json={"itineraryId": "missing", "section": "entire"},
        )

        assert response.status_code == 404
        assert response.json() == {"message": "Itinerary not found"}

    @pytest.mark.asyncio
    async def test_out_of_range_day_is_500(self, client, store, bali_itinerary):
        """Test that an invalid day number yields 500 and leaves the itinerary alone."""
        response = await client.post(
            "/api/itinerary/regenerate",
            json={"itineraryId": bali_itinerary.id, "section": "day", "dayNumber": 9},
        )

        assert response.status_code == 500
        body = response.json()
        assert body["message"] == "Failed to regenerate itinerary section"
        assert "out of range" in body["error"]
        assert (await store.get(bali_itinerary.id)).days == bali_itinerary.days

    @pytest.mark.asyncio
    async def test_unknown_section_is_500(self, client, bali_itinerary):
        """Test that an unsupported section is a validation failure."""
        response = await client.post(
            "/api/itinerary/regenerate",
            json={"itineraryId": bali_itinerary.id, "section": "week"},
        )

        assert response.status_code == 500


class TestReadEndpoints:
    """Tests for the GET endpoints."""

    @pytest.mark.asyncio
    async def test_get_itinerary(self, client, bali_itinerary):
        """Test fetching a stored itinerary."""
        response = await client.get(f"/api/itinerary/{bali_itinerary.id}")

        assert response.status_code == 200
        assert response.json()["id"] == bali_itinerary.id

    @pytest.mark.asyncio
    async def test_get_unknown_is_404(self, client):
        """Test that unknown ids are 404."""
        response = await client.get("/api/itinerary/missing")

        assert response.status_code == 404
        assert response.json()["message"] == "Itinerary not found"

    @pytest.mark.asyncio
    async def test_export(self, client, bali_itinerary):
        """Test the export payload."""
        response = await client.get(f"/api/itinerary/{bali_itinerary.id}/export")

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "PDF export data"
        assert body["itinerary"]["id"] == bali_itinerary.id

    @pytest.mark.asyncio
    async def test_export_unknown_is_404(self, client):
        """Test that exporting an unknown id is 404."""
        response = await client.get("/api/itinerary/missing/export")

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_list_itineraries(self, client, bali_itinerary):
        """Test listing all itineraries."""
        response = await client.get("/api/itineraries")

        assert response.status_code == 200
        assert [item["id"] for item in response.json()] == [bali_itinerary.id]


class TestTravelDataPreview:
    """Tests for POST /api/travel-data/preview."""

    @pytest.mark.asyncio
    async def test_preview_at_most_two_each(self, client):
        """Test that every category holds at most two entries."""
        response = await client.post(
            "/api/travel-data/preview",
            json={
                "destination": "Bali, Indonesia",
                "startDate": "2024-03-15",
                "endDate": "2024-03-20",
                "budget": "luxury",
            },
        )

        assert response.status_code == 200
        body = response.json()
        assert set(body) == {"flights", "hotels", "weather"}
        assert all(len(entries) <= 2 for entries in body.values())

    @pytest.mark.asyncio
    async def test_preview_missing_destination_is_500(self, client):
        """Test that an incomplete body yields the flat error body."""
        response = await client.post(
            "/api/travel-data/preview",
            json={"startDate": "2024-03-15", "endDate": "2024-03-20"},
        )

        assert response.status_code == 500
        assert response.json()["message"] == "Failed to fetch travel data"


class TestHealth:
    """Tests for health endpoints."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("path", ["/health", "/api/health"])
    async def test_health(self, client, path):
        """Test both health check paths."""
        response = await client.get(path)

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    @pytest.mark.asyncio
    async def test_memory_store_skips_database(self, client):
        """Test that the memory backend reports no database status."""
        with patch.object(settings, "ITINERARY_STORE", "memory"):
            response = await client.get("/health")

        assert "database" not in response.json()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "reachable, status, database",
        [(True, "healthy", "ok"), (False, "degraded", "unavailable")],
    )
    async def test_database_store_reports_connectivity(
        self, client, reachable, status, database
    ):
        """Test that the database backend reports whether Postgres answers."""
        with (
            patch.object(settings, "ITINERARY_STORE", "database"),
            patch.object(
                health.db_manager, "health_check", AsyncMock(return_value=reachable)
            ),
        ):
            response = await client.get("/api/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == status
        assert body["database"] == database
