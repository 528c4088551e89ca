from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Optional

from place_autocomplete.core.models import Suggestion
from place_autocomplete.provider.interfaces import SuggestionProvider, SuggestionProviderError

logger = logging.getLogger(__name__)

CompletionCallback = Callable[["RequestToken", list[Suggestion]], None]


@dataclass(eq=False)
class RequestToken:
    """
    Handle for one outstanding provider call. Compared by identity.

    `task` always finishes normally: with the suggestions, or with `None` once the token
    is cancelled or superseded. Only the inner provider call is ever cancelled.
    """

    generation: int
    query: str
    task: Optional[asyncio.Task[Optional[list[Suggestion]]]] = field(default=None, repr=False)
    cancelled: bool = False
    _fetch: Optional[asyncio.Task[list[Suggestion]]] = field(default=None, init=False, repr=False)

    def cancel(self) -> None:
        self.cancelled = True
        if self._fetch is not None:
            self._fetch.cancel()


class RequestExecutor:
    """
    Runs at most one provider query at a time.

    Starting a query cancels the previous one first. A result reaches `on_complete` only
    while its token is still the one held by the executor; cancelled calls complete
    silently with `None`. Provider failures and timeouts degrade to an empty list.
    """

    def __init__(self, *, provider: SuggestionProvider, timeout_seconds: float = 10) -> None:
        self._provider = provider
        self._timeout_seconds = timeout_seconds
        self._token: Optional[RequestToken] = None
        self._generation = 0

    @property
    def current_token(self) -> Optional[RequestToken]:
        return self._token

    @property
    def has_pending(self) -> bool:
        return self._token is not None

    def is_current(self, token: RequestToken) -> bool:
        return token is self._token

    def execute(self, query: str, on_complete: CompletionCallback) -> RequestToken:
        self.cancel()
        self._generation += 1
        token = RequestToken(generation=self._generation, query=query)
        self._token = token
        token.task = asyncio.create_task(self._run(token, on_complete))
        return token

    def cancel(self) -> None:
        token = self._token
        self._token = None
        if token is None or token.cancelled or (token.task is not None and token.task.done()):
            return
        logger.debug("Cancelling suggestion request. generation=%s query=%s", token.generation, token.query)
        token.cancel()

    async def _run(self, token: RequestToken, on_complete: CompletionCallback) -> Optional[list[Suggestion]]:
        if token.cancelled:
            return None

        started = time.perf_counter()
        token._fetch = asyncio.create_task(self._fetch(token.query))
        try:
            suggestions = await token._fetch
        except asyncio.CancelledError:
            if token.cancelled:
                return None
            raise

        elapsed_ms = int((time.perf_counter() - started) * 1000)
        if not self.is_current(token):
            logger.debug(
                "Discarding stale suggestion response. generation=%s query=%s latency_ms=%s",
                token.generation,
                token.query,
                elapsed_ms,
            )
            return None

        self._token = None
        logger.debug(
            "Suggestion response applied. generation=%s query=%s results=%s latency_ms=%s",
            token.generation,
            token.query,
            len(suggestions),
            elapsed_ms,
        )
        try:
            on_complete(token, suggestions)
        except Exception:
            logger.exception("Suggestion completion callback failed. query=%s", token.query)
        return suggestions

    async def _fetch(self, query: str) -> list[Suggestion]:
        try:
            return list(await asyncio.wait_for(self._provider.search(query), timeout=self._timeout_seconds))
        except asyncio.TimeoutError:
            logger.warning(
                "Suggestion request timed out. query=%s timeout_seconds=%s",
                query,
                self._timeout_seconds,
            )
        except SuggestionProviderError as exc:
            logger.warning("Suggestion request failed. query=%s error=%s", query, exc)
        except Exception:
            logger.exception("Unexpected suggestion provider error. query=%s", query)
        return []
