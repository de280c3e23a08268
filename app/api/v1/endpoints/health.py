"""Health check endpoints."""

from fastapi import APIRouter

from app.core.config import settings
from app.infra.database import db_manager

router = APIRouter()


@router.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint.

    With the database store, also reports whether Postgres answers.
    """
    payload = {
        "status": "healthy",
        "app": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "store": settings.ITINERARY_STORE,
    }
    if settings.ITINERARY_STORE == "database":
        database_ok = await db_manager.health_check()
        payload["database"] = "ok" if database_ok else "unavailable"
        if not database_ok:
            payload["status"] = "degraded"
    return payload
