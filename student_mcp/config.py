"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - Every setting has a working default: the server starts with no .env file
    - get_settings() is cached (lru_cache) — single instance per process

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Plain sqlite:// URLs upgraded to sqlite+aiosqlite:// (the store is async-only)
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Data store
    database_url: str = "sqlite+aiosqlite:///./database.db"

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_sqlite_url(cls, v: str) -> str:
        """The async engine needs the aiosqlite driver spelled out."""
        if isinstance(v, str) and v.startswith("sqlite://"):
            return v.replace("sqlite://", "sqlite+aiosqlite://", 1)
        return v

    # Protocol
    service_name: str = "student-api-mcp"
    service_version: str = "1.0.0"
    protocol_version: str = "2024-11-05"
    message_path: str = "/message"
    sse_keepalive_seconds: float = 15.0
    instructions_path: str = "instructions.md"

    # HTTP
    host: str = "0.0.0.0"
    port: int = 3000
    cors_origins: list[str] = ["*"]
    shutdown_grace_seconds: int = 5

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
