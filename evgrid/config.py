"""
Service configuration from environment variables using Pydantic BaseSettings.

All configuration values are loaded from environment variables at startup.
No hardcoded hosts, URLs, or credentials.

CHANGELOG:
- 2026-10-09: Add DB_POOL_SIZE and LOG_LEVEL (STORY-006)
- 2026-10-02: Initial creation (STORY-001)

TODO:
- None
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Attributes:
        DATABASE_URL: PostgreSQL connection string (asyncpg).
        REDIS_URL: Redis connection string for the status cache.
        CACHE_TTL_S: Status cache TTL in seconds.
        DB_POOL_SIZE: Number of pooled database connections.
        LOG_LEVEL: Root logger level name.
    """

    DATABASE_URL: str
    REDIS_URL: str
    CACHE_TTL_S: int = 5
    DB_POOL_SIZE: int = 5
    LOG_LEVEL: str = "INFO"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


def get_settings() -> Settings:
    """Create and return a Settings instance.

    Returns:
        Settings: Validated configuration from environment variables.
    """
    return Settings()
