"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - All secrets and deployment paths come from environment variables
    - get_settings() is cached (lru_cache) — single instance per process

Design Decisions:
    - Defaults work out-of-the-box with docker-compose (postgres service "db")
    - postgresql:// URLs are rewritten to the asyncpg driver
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database
    database_url: str = (
        "postgresql+asyncpg://truckest:truckest@db:5432/truckest"
    )

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosting platforms provide postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10
    seed_reference_data: bool = True

    # Vehicle registry (NHTSA vPIC)
    nhtsa_base_url: str = "https://vpic.nhtsa.dot.gov/api"
    nhtsa_user_agent: str = "CM-TruckEst-App/1.0"
    nhtsa_timeout_seconds: float = 10.0
    nhtsa_max_retries: int = 2
    nhtsa_base_delay_ms: int = 250
    nhtsa_max_delay_ms: int = 4_000

    # Uploads
    upload_dir: str = "public/uploads"
    max_upload_bytes: int = 25 * 1024 * 1024

    # Auth
    password_reset_ttl_minutes: int = 60
    bcrypt_rounds: int = 10

    # Simulated estimator
    ai_simulated_latency_seconds: float = 2.0
    labor_rate_per_hour: float = 75.0

    # API
    cors_origins: list[str] = ["http://localhost:3000"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
