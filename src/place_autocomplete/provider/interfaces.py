from __future__ import annotations

from typing import Protocol

from place_autocomplete.core.models import Suggestion


class SuggestionProviderError(RuntimeError):
    """Transient provider failure: non-2xx status, transport error or unparseable payload."""


class SuggestionProvider(Protocol):
    async def search(self, query: str) -> list[Suggestion]:
        """Return ranked place matches for a partially typed query."""
