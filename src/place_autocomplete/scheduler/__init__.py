"""Throttled, cancellation-safe autocomplete request scheduling."""

from place_autocomplete.scheduler.acceptance import SelectionAcceptanceHandler
from place_autocomplete.scheduler.executor import RequestExecutor, RequestToken
from place_autocomplete.scheduler.interfaces import NullSuggestionsListener, SelectionSink, SuggestionsListener
from place_autocomplete.scheduler.scheduler import RequestScheduler
from place_autocomplete.scheduler.session import InputSession
from place_autocomplete.scheduler.timers import TimerEngine

__all__ = [
    "InputSession",
    "NullSuggestionsListener",
    "RequestExecutor",
    "RequestScheduler",
    "RequestToken",
    "SelectionAcceptanceHandler",
    "SelectionSink",
    "SuggestionsListener",
    "TimerEngine",
]
