from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from place_autocomplete.core.models import Suggestion


@dataclass(frozen=True, slots=True)
class StaticSuggestionProvider:
    """
    A deterministic in-memory provider for offline runs and tests.

    Returns the places whose display text contains the query, case-insensitively,
    in their original order.
    """

    places: Sequence[Suggestion] = ()
    limit: int = 5

    async def search(self, query: str) -> list[Suggestion]:
        needle = query.strip().casefold()
        if not needle:
            return []
        matches = [place for place in self.places if needle in place.display_text.casefold()]
        return matches[: self.limit]
