"""Infrastructure module - Database and cache."""

from app.infra.database import Base, DatabaseManager, close_db, db_manager, init_db
from app.infra.redis import (
    CacheService,
    close_redis,
    get_redis_client,
    init_redis,
)

__all__ = [
    # Database
    "Base",
    "DatabaseManager",
    "db_manager",
    "init_db",
    "close_db",
    # Redis
    "CacheService",
    "get_redis_client",
    "init_redis",
    "close_redis",
]
