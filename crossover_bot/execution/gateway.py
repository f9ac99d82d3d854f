"""Collaborator contracts consumed by the decision engine."""

from __future__ import annotations

from typing import Protocol, Sequence

from crossover_bot.execution.order import OpenCommand, OrderResult, Position


class PositionManager(Protocol):
    """Authoritative view of open positions."""

    def open_positions(self, label: str) -> Sequence[Position]:
        """Return positions whose label matches exactly."""
        ...


class OrderGateway(Protocol):
    """Executes commands; may return a failed result or raise
    ``OrderRejected`` / ``CloseRejected``."""

    def open(self, command: OpenCommand) -> OrderResult:
        ...

    def close(self, position: Position) -> OrderResult:
        ...
