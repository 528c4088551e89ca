from __future__ import annotations

from typing import Optional
from urllib.parse import quote

from place_autocomplete.core.models import Coordinates

DEFAULT_SEARCH_URL_BASE = "https://www.google.com/maps/search/?api=1&query="

_FALLBACK_LABEL = "Location"

# Same unreserved set as JavaScript's encodeURIComponent.
_URL_COMPONENT_SAFE = "-_.!~*'()"


def format_suggestion_meta(place_type: Optional[str], category: Optional[str]) -> str:
    """Build the secondary label for a suggestion, hiding the provider's "yes" placeholders."""
    if not place_type or place_type == "yes":
        return category or _FALLBACK_LABEL
    if not category or category == "yes":
        return place_type or _FALLBACK_LABEL
    if place_type != category:
        return f"{place_type} · {category}"
    return place_type


def extract_primary_name(display_name: str) -> str:
    primary = display_name.split(",", 1)[0].strip()
    return primary or display_name


def extract_full_address(display_name: str) -> str:
    parts = display_name.split(",", 1)
    if len(parts) < 2:
        return ""
    return parts[1].strip()


def build_search_url(location_name: str, base: str = DEFAULT_SEARCH_URL_BASE) -> str:
    name = location_name.strip() if location_name else ""
    if not name:
        return ""
    return f"{base}{quote(name, safe=_URL_COMPONENT_SAFE)}"


def build_coordinate_url(coordinates: Coordinates, base: str = DEFAULT_SEARCH_URL_BASE) -> str:
    lon, lat = coordinates
    return f"{base}{lat},{lon}"
