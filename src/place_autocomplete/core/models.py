from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

# (longitude, latitude)
Coordinates = Tuple[float, float]


class SchedulerMode(str, Enum):
    IDLE = "idle"
    AWAITING_INITIAL = "awaiting_initial"
    RECURRING = "recurring"
    SUPPRESSED = "suppressed"


class CommitReason(str, Enum):
    BLUR = "blur"
    ENTER = "enter"
    ESCAPE = "escape"


@dataclass(frozen=True, slots=True)
class Suggestion:
    id: str
    display_text: str
    coordinates: Optional[Coordinates] = None
    metadata: str = ""


@dataclass(frozen=True, slots=True)
class LocationData:
    """
    Resolved location handed to the selection sink.

    `coordinates` is only set when the text came from an accepted suggestion.
    """

    display_name: str
    input: str
    coordinates: Optional[Coordinates] = None
    derived_url: Optional[str] = None
