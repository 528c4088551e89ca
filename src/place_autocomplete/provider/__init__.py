"""Suggestion provider contracts and implementations."""

from place_autocomplete.provider.interfaces import SuggestionProvider, SuggestionProviderError
from place_autocomplete.provider.mock import StaticSuggestionProvider
from place_autocomplete.provider.nominatim import NominatimSuggestionProvider, parse_suggestions

__all__ = [
    "NominatimSuggestionProvider",
    "StaticSuggestionProvider",
    "SuggestionProvider",
    "SuggestionProviderError",
    "parse_suggestions",
]
