from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AdapterSettings(BaseSettings):
    """HTTP adapter settings loaded from environment variables with RESOURCEKIT_ prefix."""

    # Backend location; requests go to host + namespace + path
    host: str = ""
    namespace: str = ""
    # Extra request headers, e.g. RESOURCEKIT_HEADERS='{"authorization": "Bearer x"}'
    headers: dict[str, str] = Field(default_factory=dict)
    # Per-request timeout in seconds
    timeout: float = 10.0

    model_config = SettingsConfigDict(env_prefix="RESOURCEKIT_", env_file=".env")


@lru_cache
def get_settings() -> AdapterSettings:
    """Return cached adapter settings instance."""
    return AdapterSettings()
