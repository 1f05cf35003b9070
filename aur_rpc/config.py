from __future__ import annotations

from functools import lru_cache
from typing import Any

from loguru import logger
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from rich.console import Console

from aur_rpc.query import DEFAULT_API_VERSION, DEFAULT_ENDPOINT

console = Console(stderr=True)
log = logger.bind(module="config")


class Settings(BaseSettings):
    """Host-side configuration for building RPC clients.

    The clients themselves never read these values; `from_settings` on either
    client is the bridge.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    endpoint: str = Field(default=DEFAULT_ENDPOINT, alias="AUR_RPC_ENDPOINT")
    api_version: int = Field(default=DEFAULT_API_VERSION, alias="AUR_RPC_VERSION")
    timeout_seconds: float = Field(default=10.0, alias="AUR_RPC_TIMEOUT_SECONDS")
    follow_redirects: bool = Field(default=True, alias="AUR_RPC_FOLLOW_REDIRECTS")
    user_agent: str = Field(default="aur-rpc", alias="AUR_RPC_USER_AGENT")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    def export_safe(self) -> dict[str, Any]:
        """Return settings for debugging/logging."""
        return {
            "endpoint": self.endpoint,
            "api_version": self.api_version,
            "timeout_seconds": self.timeout_seconds,
            "follow_redirects": self.follow_redirects,
            "user_agent": self.user_agent,
        }


@lru_cache
def get_settings() -> Settings:
    """Load and cache settings."""
    settings = Settings()
    console.log(f"[bold green]Loaded settings[/] endpoint={settings.endpoint!r}")
    log.info("Settings initialised: {}", settings.export_safe())
    return settings
