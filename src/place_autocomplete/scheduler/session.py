from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from place_autocomplete.core.models import SchedulerMode


@dataclass(slots=True)
class InputSession:
    """
    Typing state of one location input.

    Transitions here only mutate fields; timers and requests are driven by the scheduler.
    """

    raw_text: str = ""
    last_requested_text: str = ""
    accepted_text: str = ""
    mode: SchedulerMode = SchedulerMode.IDLE
    min_query_length: int = 3

    def is_queryable(self, text: Optional[str] = None) -> bool:
        value = self.raw_text if text is None else text
        return len(value.strip()) >= self.min_query_length

    @property
    def is_settled(self) -> bool:
        return bool(self.raw_text) and self.raw_text == self.accepted_text

    def update_text(self, text: str) -> None:
        self.raw_text = text
        if self.accepted_text and text != self.accepted_text:
            self.accepted_text = ""

    def clear(self) -> None:
        self.mode = SchedulerMode.IDLE
        self.last_requested_text = ""
        self.accepted_text = ""

    def arm_initial(self) -> None:
        self.mode = SchedulerMode.AWAITING_INITIAL

    def enter_recurring(self) -> None:
        self.mode = SchedulerMode.RECURRING

    def go_idle(self) -> None:
        self.mode = SchedulerMode.IDLE

    def mark_requested(self, text: str) -> None:
        self.last_requested_text = text

    def needs_request(self) -> bool:
        return self.is_queryable() and not self.is_settled and self.raw_text != self.last_requested_text

    def accept(self, text: str) -> None:
        self.raw_text = text
        self.accepted_text = text
        self.last_requested_text = ""
        self.mode = SchedulerMode.SUPPRESSED
