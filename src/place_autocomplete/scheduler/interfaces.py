from __future__ import annotations

from typing import Callable, Protocol, Sequence

from place_autocomplete.core.models import LocationData, Suggestion

SelectionSink = Callable[[LocationData], None]


class SuggestionsListener(Protocol):
    def on_suggestions(self, suggestions: Sequence[Suggestion]) -> None:
        """Replace the visible suggestion list."""

    def on_loading(self, loading: bool) -> None:
        """A request started (True) or was applied or abandoned (False)."""


class NullSuggestionsListener:
    def on_suggestions(self, suggestions: Sequence[Suggestion]) -> None:
        return None

    def on_loading(self, loading: bool) -> None:
        return None
