from __future__ import annotations

import asyncio
import logging
from typing import Optional

from place_autocomplete.config.models import AutocompleteSettings
from place_autocomplete.core.models import SchedulerMode, Suggestion
from place_autocomplete.provider.interfaces import SuggestionProvider
from place_autocomplete.scheduler.executor import RequestExecutor, RequestToken
from place_autocomplete.scheduler.interfaces import NullSuggestionsListener, SuggestionsListener
from place_autocomplete.scheduler.session import InputSession
from place_autocomplete.scheduler.timers import SleepFn, TimerEngine

logger = logging.getLogger(__name__)


class RequestScheduler:
    """
    Decides when a partially typed location is sent to the suggestion provider.

    Throttled burst policy:
    - The first request fires `initial_delay_seconds` after the last keystroke of a burst.
    - Afterwards the text is checked every `recurring_interval_seconds` and re-queried only
      if it changed since the last request.
    - Nothing is queried below `min_query_length` (trimmed) or while an accepted
      suggestion is still in the input.

    All methods must be called from the event loop thread.
    """

    def __init__(
        self,
        *,
        provider: SuggestionProvider,
        settings: AutocompleteSettings = AutocompleteSettings(),
        listener: Optional[SuggestionsListener] = None,
        sleep: SleepFn = asyncio.sleep,
    ) -> None:
        self._settings = settings
        self._listener: SuggestionsListener = listener or NullSuggestionsListener()
        self._session = InputSession(min_query_length=settings.min_query_length)
        self._timers = TimerEngine(sleep=sleep)
        self._executor = RequestExecutor(provider=provider, timeout_seconds=settings.request_timeout_seconds)
        self._loading = False

    @property
    def mode(self) -> SchedulerMode:
        return self._session.mode

    @property
    def session(self) -> InputSession:
        return self._session

    @property
    def timers(self) -> TimerEngine:
        return self._timers

    @property
    def executor(self) -> RequestExecutor:
        return self._executor

    def on_text_changed(self, text: str) -> None:
        session = self._session
        session.update_text(text)

        if not session.is_queryable():
            if session.mode is not SchedulerMode.IDLE:
                logger.debug("Input below minimum length; scheduler reset. length=%s", len(text.strip()))
            self._halt()
            session.clear()
            self._publish_suggestions([])
            return

        if session.is_settled:
            return

        if session.mode is SchedulerMode.RECURRING:
            # The next tick picks up the new text.
            return

        if session.mode is SchedulerMode.SUPPRESSED:
            logger.debug("Input diverged from accepted suggestion; resuming requests.")

        self._timers.stop_all()
        session.arm_initial()
        self._timers.start_initial(self._settings.initial_delay_seconds, self._on_initial_timer)

    def on_suggestion_accepted(self, text: str) -> None:
        self._halt()
        self._session.accept(text)
        self._publish_suggestions([])
        logger.debug("Suggestion accepted; requests suppressed. text=%s", text)

    def on_input_committed(self) -> None:
        """The input lost focus or was confirmed without choosing a suggestion."""
        if self._session.is_settled:
            return
        self._halt()
        self._session.go_idle()

    def preload_text(self, text: str) -> None:
        """Load a saved value into the input without scheduling a request."""
        self._halt()
        self._session.update_text(text)
        self._session.go_idle()

    def close(self) -> None:
        self._halt()
        self._session.go_idle()

    def _halt(self) -> None:
        self._timers.stop_all()
        self._executor.cancel()
        self._set_loading(False)

    def _on_initial_timer(self) -> None:
        session = self._session
        if session.mode is not SchedulerMode.AWAITING_INITIAL:
            return
        if not session.is_queryable() or session.is_settled:
            session.go_idle()
            return

        self._issue_request(session.raw_text)
        session.enter_recurring()
        self._timers.start_recurring(self._settings.recurring_interval_seconds, self._on_recurring_tick)

    def _on_recurring_tick(self) -> bool:
        session = self._session
        if session.mode is not SchedulerMode.RECURRING:
            return False
        if session.needs_request():
            self._issue_request(session.raw_text)
        return bool(session.raw_text.strip())

    def _issue_request(self, text: str) -> None:
        self._session.mark_requested(text)
        token = self._executor.execute(text, self._apply_results)
        logger.debug("Suggestion request issued. generation=%s mode=%s query=%s", token.generation, self.mode.value, text)
        self._set_loading(True)

    def _apply_results(self, token: RequestToken, suggestions: list[Suggestion]) -> None:
        if self._session.mode not in (SchedulerMode.AWAITING_INITIAL, SchedulerMode.RECURRING):
            logger.debug("Ignoring suggestions outside an active typing session. query=%s", token.query)
            return
        self._set_loading(False)
        self._publish_suggestions(suggestions)

    def _set_loading(self, loading: bool) -> None:
        if self._loading == loading:
            return
        self._loading = loading
        try:
            self._listener.on_loading(loading)
        except Exception:
            logger.exception("Suggestions listener failed on loading change.")

    def _publish_suggestions(self, suggestions: list[Suggestion]) -> None:
        try:
            self._listener.on_suggestions(tuple(suggestions))
        except Exception:
            logger.exception("Suggestions listener failed on suggestion update.")
