"""Configuration models and loaders."""

from place_autocomplete.config.loader import YamlConfigLoader
from place_autocomplete.config.models import AppConfig, AutocompleteSettings, ConfigLoadRequest, ProviderSettings

__all__ = ["AppConfig", "AutocompleteSettings", "ConfigLoadRequest", "ProviderSettings", "YamlConfigLoader"]
