"""Exception hierarchy for the decision engine and its collaborators."""

from __future__ import annotations


class BotError(Exception):
    """Base error carrying a human readable message."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class InsufficientHistory(BotError):
    """Lag query reached past the recorded history of a series."""

    def __init__(self, series: str, lag: int, available: int) -> None:
        self.series = series
        self.lag = lag
        self.available = available
        super().__init__(f"series={series} lag={lag} available={available}")


class MisconfigurationError(BotError):
    """Configuration rejected before the engine starts."""


class OrderRejected(BotError):
    """Gateway refused to open a position."""


class CloseRejected(BotError):
    """Gateway refused to close a position."""
