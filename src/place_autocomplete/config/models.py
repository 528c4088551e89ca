from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from place_autocomplete.core.formatting import DEFAULT_SEARCH_URL_BASE


class FileRotationSettings(BaseModel):
    """
    Date-based rotation settings (daily).

    This maps cleanly to Python's standard library TimedRotatingFileHandler behavior.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    backup_count: int = 5


class FileLoggingSettings(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    # Empty path disables file logging.
    path: str = "data/logs/place-autocomplete.log"
    rotation: FileRotationSettings = Field(default_factory=FileRotationSettings)


class LoggingSettings(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    level: str = "INFO"
    file: FileLoggingSettings = Field(default_factory=FileLoggingSettings)


class AutocompleteSettings(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    min_query_length: int = Field(default=3, ge=1)

    # Throttled burst timing
    initial_delay_seconds: float = Field(default=0.5, gt=0)
    recurring_interval_seconds: float = Field(default=1.2, gt=0)

    request_timeout_seconds: float = Field(default=10, gt=0)


class ProviderSettings(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    base_url: str = "https://nominatim.openstreetmap.org/search"
    user_agent: str = "place-autocomplete/0.1 - location search"
    limit: int = Field(default=5, ge=1)
    address_details: bool = True
    country_codes: str = ""
    timeout_seconds: float = Field(default=10, gt=0)


class LinkSettings(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    search_url_base: str = DEFAULT_SEARCH_URL_BASE


class AppConfig(BaseModel):
    """Effective runtime configuration after applying all precedence rules."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    autocomplete: AutocompleteSettings = Field(default_factory=AutocompleteSettings)
    provider: ProviderSettings = Field(default_factory=ProviderSettings)
    links: LinkSettings = Field(default_factory=LinkSettings)


@dataclass(frozen=True, slots=True)
class ConfigLoadRequest:
    """
    Optional inputs for a configuration loader.

    Implementations may use these to control where configuration is read from.
    """

    yaml_path: str = "data/config/config.yaml"
    env_prefix: str = "APP__"
    dotenv_path: Optional[str] = ".env"
