from __future__ import annotations

import logging
from typing import Any, Optional

import aiohttp

from place_autocomplete.config.models import ProviderSettings
from place_autocomplete.core.formatting import format_suggestion_meta
from place_autocomplete.core.models import Coordinates, Suggestion
from place_autocomplete.provider.interfaces import SuggestionProviderError

logger = logging.getLogger(__name__)


def _parse_coordinates(item: dict[str, Any]) -> Optional[Coordinates]:
    try:
        return float(item["lon"]), float(item["lat"])
    except (KeyError, TypeError, ValueError):
        return None


def _suggestion_id(item: dict[str, Any], display_name: str) -> str:
    osm_type = item.get("osm_type")
    osm_id = item.get("osm_id")
    if osm_type and osm_id is not None:
        return f"{osm_type}-{osm_id}"
    place_id = item.get("place_id")
    if place_id is not None:
        return str(place_id)
    return display_name


def parse_suggestions(payload: Any) -> list[Suggestion]:
    if not isinstance(payload, list):
        raise SuggestionProviderError(f"Expected a JSON array of places, got: {type(payload).__name__}")

    suggestions: list[Suggestion] = []
    for item in payload:
        if not isinstance(item, dict):
            continue
        display_name = item.get("display_name")
        if not isinstance(display_name, str) or not display_name.strip():
            continue
        suggestions.append(
            Suggestion(
                id=_suggestion_id(item, display_name),
                display_text=display_name,
                coordinates=_parse_coordinates(item),
                metadata=format_suggestion_meta(item.get("type"), item.get("class")),
            )
        )
    return suggestions


class NominatimSuggestionProvider:
    """
    Searches places on a Nominatim-compatible `/search` endpoint.

    Used as an async context manager the provider keeps one ClientSession open for all
    queries; otherwise each query opens and closes its own session.
    """

    def __init__(self, *, config: ProviderSettings, session: Optional[aiohttp.ClientSession] = None) -> None:
        self._config = config
        self._session = session
        self._owns_session = False

    async def __aenter__(self) -> NominatimSuggestionProvider:
        if self._session is None:
            timeout = aiohttp.ClientTimeout(total=self._config.timeout_seconds)
            self._session = aiohttp.ClientSession(timeout=timeout)
            self._owns_session = True
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None
            self._owns_session = False

    def _build_params(self, query: str) -> dict[str, str]:
        return {
            "q": query,
            "format": "json",
            "limit": str(self._config.limit),
            "addressdetails": "1" if self._config.address_details else "0",
            "countrycodes": self._config.country_codes,
        }

    def _build_headers(self) -> dict[str, str]:
        return {
            "Accept": "application/json",
            "User-Agent": self._config.user_agent,
        }

    async def search(self, query: str) -> list[Suggestion]:
        if self._session is not None:
            return await self._request(self._session, query)

        timeout = aiohttp.ClientTimeout(total=self._config.timeout_seconds)
        async with aiohttp.ClientSession(timeout=timeout) as session:
            return await self._request(session, query)

    async def _request(self, session: aiohttp.ClientSession, query: str) -> list[Suggestion]:
        logger.debug("Nominatim search: start. query=%s", query)
        try:
            async with session.get(
                self._config.base_url,
                params=self._build_params(query),
                headers=self._build_headers(),
            ) as response:
                if not 200 <= response.status < 300:
                    raise SuggestionProviderError(
                        f"Suggestion request failed with status {response.status}. query={query}"
                    )
                payload = await response.json(content_type=None)
        except aiohttp.ClientError as exc:
            raise SuggestionProviderError(f"Suggestion request failed. query={query} error={exc}") from exc
        except ValueError as exc:
            raise SuggestionProviderError(f"Suggestion response is not valid JSON. query={query}") from exc

        suggestions = parse_suggestions(payload)
        logger.debug("Nominatim search: completed. query=%s results=%s", query, len(suggestions))
        return suggestions
