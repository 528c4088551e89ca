from __future__ import annotations

import asyncio
import heapq
import itertools
from typing import Callable, Optional, Sequence

from place_autocomplete.core.models import Suggestion

_EPSILON = 1e-9


async def settle(iterations: int = 25) -> None:
    for _ in range(iterations):
        await asyncio.sleep(0)


class FakeClock:
    """Virtual time for code that sleeps through an injected `sleep` coroutine."""

    def __init__(self) -> None:
        self.now = 0.0
        self._waiters: list[tuple[float, int, asyncio.Future[None]]] = []
        self._seq = itertools.count()

    async def sleep(self, delay: float) -> None:
        future: asyncio.Future[None] = asyncio.get_running_loop().create_future()
        heapq.heappush(self._waiters, (self.now + delay, next(self._seq), future))
        await future

    async def advance(self, seconds: float) -> None:
        target = self.now + seconds
        await settle()
        while self._waiters and self._waiters[0][0] <= target + _EPSILON:
            deadline, _, future = heapq.heappop(self._waiters)
            if future.done():
                continue
            self.now = max(self.now, deadline)
            future.set_result(None)
            await settle()
        self.now = target
        await settle()


def make_suggestion(display_text: str, *, coordinates=(-9.1393, 38.7223)) -> Suggestion:
    return Suggestion(
        id=display_text.lower().replace(" ", "-"),
        display_text=display_text,
        coordinates=coordinates,
        metadata="city · place",
    )


def _default_results(query: str) -> list[Suggestion]:
    return [make_suggestion(f"{query} result")]


class ControlledProvider:
    """
    Records every search and answers immediately, or holds it until `resolve` when
    `manual` is set.
    """

    def __init__(
        self,
        *,
        clock: Optional[FakeClock] = None,
        results: Callable[[str], list[Suggestion]] = _default_results,
        manual: bool = False,
        error: Optional[BaseException] = None,
    ) -> None:
        self._clock = clock
        self._results = results
        self._manual = manual
        self._error = error
        self.calls: list[tuple[float, str]] = []
        self.cancelled: list[str] = []
        self._pending: list[tuple[str, asyncio.Future[list[Suggestion]]]] = []

    @property
    def queries(self) -> list[str]:
        return [query for _, query in self.calls]

    async def search(self, query: str) -> list[Suggestion]:
        self.calls.append((self._clock.now if self._clock else 0.0, query))
        if self._error is not None:
            raise self._error
        if not self._manual:
            return self._results(query)

        future: asyncio.Future[list[Suggestion]] = asyncio.get_running_loop().create_future()
        self._pending.append((query, future))
        try:
            return await future
        except asyncio.CancelledError:
            self.cancelled.append(query)
            raise

    def resolve(self, query: str, suggestions: Optional[Sequence[Suggestion]] = None) -> bool:
        for pending_query, future in self._pending:
            if pending_query == query and not future.done():
                future.set_result(list(suggestions) if suggestions is not None else self._results(query))
                return True
        return False


class RecordingListener:
    def __init__(self) -> None:
        self.updates: list[tuple[Suggestion, ...]] = []
        self.loading: list[bool] = []

    @property
    def latest(self) -> tuple[Suggestion, ...]:
        return self.updates[-1] if self.updates else ()

    def on_suggestions(self, suggestions: Sequence[Suggestion]) -> None:
        self.updates.append(tuple(suggestions))

    def on_loading(self, loading: bool) -> None:
        self.loading.append(loading)
