"""PnL tracking and run statistics."""

from __future__ import annotations

from dataclasses import dataclass

from crossover_bot.execution.order import ClosedTrade


@dataclass
class PnLTracker:
    """Tracks realised performance and decision counters for a run."""

    realized_pnl: float = 0.0
    realized_pips: float = 0.0
    peak_pnl: float = 0.0
    max_drawdown: float = 0.0
    wins: int = 0
    losses: int = 0
    trades_closed: int = 0
    stop_exits: int = 0
    opens: int = 0
    rejections: int = 0
    bars: int = 0
    skipped_bars: int = 0

    def mark_exit(self, trade: ClosedTrade) -> None:
        """Book a closed round trip."""
        self.realized_pnl += trade.pnl
        self.realized_pips += trade.pnl_pips
        self.trades_closed += 1
        if trade.reason != "signal":
            self.stop_exits += 1

        if trade.pnl >= 0:
            self.wins += 1
        else:
            self.losses += 1

        self.peak_pnl = max(self.peak_pnl, self.realized_pnl)
        self.max_drawdown = max(self.max_drawdown, self.peak_pnl - self.realized_pnl)

    def mark_bar(self, skipped: bool) -> None:
        self.bars += 1
        if skipped:
            self.skipped_bars += 1

    @property
    def win_rate(self) -> float:
        """Win ratio over closed trades."""
        if self.trades_closed == 0:
            return 0.0
        return self.wins / self.trades_closed

    @property
    def skipped_bar_ratio(self) -> float:
        """Fraction of bars the engine could not evaluate."""
        if self.bars == 0:
            return 0.0
        return self.skipped_bars / self.bars
