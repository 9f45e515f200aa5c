"""
Configuration settings for the HAVS tracker.

Uses Pydantic Settings to load environment variables for storage locations,
timezone handling and logging. Paths are derived from a single data directory
so the catalog file and the ledger database always live side by side.
"""
from __future__ import annotations

from datetime import tzinfo
from functools import lru_cache
from pathlib import Path
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from havs.errors import ConfigError


class Settings(BaseSettings):
    # Storage
    data_dir: Path = Field(Path("~/.havs"), alias="HAVS_DATA_DIR")
    tools_file_name: str = Field("tools.json", alias="HAVS_TOOLS_FILE")
    state_db_name: str = Field("havs_store.db", alias="HAVS_STATE_DB")
    seed_path: Optional[Path] = Field(None, alias="HAVS_SEED_PATH")

    # Day boundaries follow this zone; None means the system local zone
    timezone: Optional[str] = Field(None, alias="HAVS_TIMEZONE")

    # Application
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    json_logs: bool = Field(False, alias="HAVS_JSON_LOGS")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    @property
    def tools_path(self) -> Path:
        return self.data_dir.expanduser() / self.tools_file_name

    @property
    def state_db_path(self) -> Path:
        return self.data_dir.expanduser() / self.state_db_name

    def resolve_timezone(self) -> Optional[tzinfo]:
        """
        Return the configured zone, or None to use the system local zone.
        """
        if not self.timezone:
            return None
        try:
            return ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ConfigError(f"Unknown timezone: {self.timezone}") from exc


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings to avoid repeated env parsing.
    """
    return Settings()


__all__ = ["Settings", "get_settings"]
