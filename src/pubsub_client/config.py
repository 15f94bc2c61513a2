"""
Client configuration.

Settings are read from ``PUB_SUB_*`` environment variables so the same code
can target the real service or a local emulator.
"""

from datetime import timedelta
from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from pubsub_client.auth.exchange import PUBSUB_SCOPE


class PubSubSettings(BaseSettings):
    """Configuration for talking to the Pub/Sub REST API."""

    model_config = SettingsConfigDict(env_prefix="PUB_SUB_")

    base_url: str = Field(
        "https://pubsub.googleapis.com",
        description="Service root; set to the emulator address for local testing.",
    )
    scope: str = PUBSUB_SCOPE
    refresh_margin_seconds: float = Field(
        30.0,
        ge=0,
        description="Refresh tokens this long before they expire.",
    )
    token_timeout: Optional[float] = Field(10.0, description="Timeout for the token endpoint.")
    default_timeout: Optional[float] = Field(
        60.0,
        description="Timeout for Pub/Sub calls that do not pass their own.",
    )

    @property
    def refresh_margin(self) -> timedelta:
        return timedelta(seconds=self.refresh_margin_seconds)


@lru_cache()
def get_settings() -> PubSubSettings:
    """Return a cached settings object."""
    return PubSubSettings()


__all__ = ["PubSubSettings", "get_settings"]
