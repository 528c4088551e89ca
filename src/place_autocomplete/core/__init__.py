"""Shared value types."""

from place_autocomplete.core.models import CommitReason, Coordinates, LocationData, SchedulerMode, Suggestion

__all__ = ["CommitReason", "Coordinates", "LocationData", "SchedulerMode", "Suggestion"]
