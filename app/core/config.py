"""Application configuration using Pydantic Settings.

Loads configuration from environment variables and .env file.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, PostgresDsn, RedisDsn, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # ============ Application Settings ============
    APP_NAME: str = "Wayfarer"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    ENVIRONMENT: Literal["development", "staging", "production"] = "development"

    # ============ Server Settings ============
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    WORKERS: int = 1

    # ============ CORS Settings ============
    CORS_ORIGINS: list[str] = Field(
        default=["http://localhost:3000", "http://localhost:5173"],
        description="Allowed CORS origins",
    )

    # ============ Itinerary Store ============
    ITINERARY_STORE: Literal["memory", "database"] = Field(
        default="memory",
        description="Backend for itinerary persistence",
    )

    # ============ Database Settings ============
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str = "wayfarer"
    POSTGRES_PASSWORD: str = "wayfarer_password"
    POSTGRES_DB: str = "wayfarer_db"
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20

    @computed_field  # type: ignore[misc]
    @property
    def DATABASE_URL(self) -> PostgresDsn:
        """Construct PostgreSQL async connection URL."""
        return PostgresDsn.build(
            scheme="postgresql+asyncpg",
            username=self.POSTGRES_USER,
            password=self.POSTGRES_PASSWORD,
            host=self.POSTGRES_HOST,
            port=self.POSTGRES_PORT,
            path=self.POSTGRES_DB,
        )

    @property
    def database_url(self) -> str:
        """Get database URL as string for Alembic."""
        return str(self.DATABASE_URL)

    # ============ Redis Settings ============
    REDIS_HOST: str = "localhost"
    REDIS_PORT: int = 6379
    REDIS_PASSWORD: str | None = None
    REDIS_DB: int = 0
    REDIS_MAX_CONNECTIONS: int = 10
    REDIS_DEFAULT_TTL: int = 3600  # 1 hour

    @computed_field  # type: ignore[misc]
    @property
    def REDIS_URL(self) -> RedisDsn:
        """Construct Redis connection URL."""
        if self.REDIS_PASSWORD:
            return RedisDsn.build(
                scheme="redis",
                password=self.REDIS_PASSWORD,
                host=self.REDIS_HOST,
                port=self.REDIS_PORT,
                path=str(self.REDIS_DB),
            )
        return RedisDsn.build(
            scheme="redis",
            host=self.REDIS_HOST,
            port=self.REDIS_PORT,
            path=str(self.REDIS_DB),
        )

    # ============ Supply Data Settings ============
    SUPPLY_CACHE_ENABLED: bool = Field(
        default=True,
        description="Cache flight/hotel/weather lookups in Redis",
    )
    SUPPLY_CACHE_TTL: int = Field(
        default=900,
        description="TTL in seconds for cached supply data",
    )
    DEFAULT_ORIGIN_AIRPORT: str = Field(
        default="LAX",
        description="Origin airport used for flight lookups",
    )
    PREVIEW_LIMIT: int = Field(
        default=2,
        ge=1,
        le=2,
        description="Max entries per category in the travel data preview",
    )

    # ============ OpenAI Settings ============
    OPENAI_API_KEY: str = Field(
        default="",
        description="OpenAI API Key for itinerary synthesis",
    )
    OPENAI_MODEL: str = Field(
        default="gpt-4o-mini",
        description="OpenAI model to use",
    )
    OPENAI_TEMPERATURE: float = Field(
        default=0.7,
        ge=0,
        le=2,
        description="Sampling temperature for itinerary generation",
    )

    # ============ Weather API Settings ============
    WEATHER_API_KEY: str = Field(
        default="",
        description="OpenWeatherMap API key (mock forecasts when empty)",
    )
    WEATHER_API_BASE_URL: str = Field(
        default="https://api.openweathermap.org/data/2.5",
        description="Weather API Base URL",
    )

    # ============ Logging Settings ============
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: Literal["json", "text"] = "json"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
