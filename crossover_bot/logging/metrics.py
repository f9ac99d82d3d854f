"""Metrics summary helpers."""

from __future__ import annotations

from dataclasses import asdict

from crossover_bot.accounting.pnl_tracker import PnLTracker


def summarize_metrics(pnl: PnLTracker, open_positions: int) -> dict[str, float]:
    """Build a minimal metrics snapshot for reporting."""
    base = {
        "realized_pnl": pnl.realized_pnl,
        "realized_pips": pnl.realized_pips,
        "win_rate": pnl.win_rate,
        "max_drawdown": pnl.max_drawdown,
        "open_positions": float(open_positions),
        "skipped_bar_ratio": pnl.skipped_bar_ratio,
    }
    base.update({f"count_{k}": float(v) for k, v in asdict(pnl).items() if isinstance(v, int)})
    return base
