from __future__ import annotations

import logging
from typing import Optional

from place_autocomplete.core.formatting import DEFAULT_SEARCH_URL_BASE, build_search_url
from place_autocomplete.core.models import CommitReason, Coordinates, LocationData, Suggestion
from place_autocomplete.scheduler.interfaces import SelectionSink
from place_autocomplete.scheduler.scheduler import RequestScheduler

logger = logging.getLogger(__name__)


class SelectionAcceptanceHandler:
    """
    Finalizes the input and reports the resolved location to the selection sink.

    Coordinates are only reported for text that exactly matches the accepted suggestion;
    any edit, including whitespace, turns the value back into unresolved free text.
    """

    def __init__(
        self,
        *,
        scheduler: RequestScheduler,
        sink: SelectionSink,
        search_url_base: str = DEFAULT_SEARCH_URL_BASE,
    ) -> None:
        self._scheduler = scheduler
        self._sink = sink
        self._search_url_base = search_url_base
        self._accepted_coordinates: Optional[Coordinates] = None

    def accept(self, suggestion: Suggestion) -> LocationData:
        display_name = suggestion.display_text
        self._scheduler.on_suggestion_accepted(display_name)
        self._accepted_coordinates = suggestion.coordinates

        location = LocationData(
            display_name=display_name,
            input=display_name,
            coordinates=suggestion.coordinates,
            derived_url=self._derive_url(display_name),
        )
        self._emit(location)
        return location

    def commit(self, *, reason: CommitReason = CommitReason.BLUR) -> Optional[LocationData]:
        session = self._scheduler.session
        text = session.raw_text
        preserve_coordinates = bool(session.accepted_text) and text == session.accepted_text

        self._scheduler.on_input_committed()
        if not text.strip():
            return None

        location = LocationData(
            display_name=text,
            input=text,
            coordinates=self._accepted_coordinates if preserve_coordinates else None,
            derived_url=self._derive_url(text),
        )
        logger.debug(
            "Location input committed. reason=%s resolved=%s",
            reason.value,
            location.coordinates is not None,
        )
        self._emit(location)
        return location

    def restore(self, location: LocationData) -> None:
        """Seed the input with a previously saved location without querying the provider."""
        if location.coordinates is not None and location.input:
            self._scheduler.on_suggestion_accepted(location.input)
            self._accepted_coordinates = location.coordinates
            return
        self._accepted_coordinates = None
        self._scheduler.preload_text(location.input)

    def _derive_url(self, text: str) -> Optional[str]:
        return build_search_url(text, self._search_url_base) or None

    def _emit(self, location: LocationData) -> None:
        try:
            self._sink(location)
        except Exception:
            logger.exception("Selection sink failed. display_name=%s", location.display_name)
