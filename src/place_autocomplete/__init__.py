"""Location search autocomplete with a throttled, cancellation-safe request scheduler."""

__version__ = "0.1.0"
