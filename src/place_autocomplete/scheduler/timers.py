from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Optional

logger = logging.getLogger(__name__)

SleepFn = Callable[[float], Awaitable[None]]


@dataclass
class _TimerSlot:
    name: str
    task: Optional[asyncio.Task[None]] = None
    generation: int = field(default=0)

    @property
    def pending(self) -> bool:
        return self.task is not None and not self.task.done()


class TimerEngine:
    """
    One initial (one-shot) timer and one recurring timer, each backed by an asyncio task.

    Every start or stop bumps the slot generation; a task only runs its callback while
    its captured generation is still current, so a stopped timer never fires even if
    its sleep already completed.
    """

    def __init__(self, *, sleep: SleepFn = asyncio.sleep) -> None:
        self._sleep = sleep
        self._initial = _TimerSlot(name="initial")
        self._recurring = _TimerSlot(name="recurring")

    @property
    def initial_pending(self) -> bool:
        return self._initial.pending

    @property
    def recurring_pending(self) -> bool:
        return self._recurring.pending

    def start_initial(self, delay_seconds: float, on_fire: Callable[[], None]) -> None:
        self._stop(self._initial)
        generation = self._initial.generation
        self._initial.task = asyncio.create_task(self._fire_once(generation, delay_seconds, on_fire))

    def start_recurring(self, interval_seconds: float, on_tick: Callable[[], bool]) -> None:
        self._stop(self._recurring)
        generation = self._recurring.generation
        self._recurring.task = asyncio.create_task(self._run_recurring(generation, interval_seconds, on_tick))

    def stop_all(self) -> None:
        self._stop(self._initial)
        self._stop(self._recurring)

    def _stop(self, slot: _TimerSlot) -> None:
        slot.generation += 1
        task = slot.task
        slot.task = None
        if task is None or task.done():
            return
        # A callback may stop its own timer; the generation check ends that task instead.
        if task is not asyncio.current_task():
            task.cancel()

    async def _fire_once(self, generation: int, delay_seconds: float, on_fire: Callable[[], None]) -> None:
        try:
            await self._sleep(delay_seconds)
        except asyncio.CancelledError:
            return

        if self._initial.generation != generation:
            return
        self._initial.task = None

        try:
            on_fire()
        except Exception:
            logger.exception("Initial timer callback failed.")

    async def _run_recurring(self, generation: int, interval_seconds: float, on_tick: Callable[[], bool]) -> None:
        while True:
            try:
                await self._sleep(interval_seconds)
            except asyncio.CancelledError:
                return

            if self._recurring.generation != generation:
                return

            try:
                keep_going = on_tick()
            except Exception:
                logger.exception("Recurring timer callback failed.")
                keep_going = True

            if self._recurring.generation != generation:
                return
            if not keep_going:
                logger.debug("Recurring timer stopped by its callback.")
                self._recurring.task = None
                return
