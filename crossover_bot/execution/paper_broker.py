"""Paper execution layer: in-memory order gateway and position manager."""

from __future__ import annotations

from datetime import datetime
import random
from typing import Dict, List, Optional
from uuid import uuid4

from crossover_bot.data.market_feed import Candle
from crossover_bot.execution.order import ClosedTrade, OpenCommand, OrderResult, Position, TradeType
from crossover_bot.execution.symbol import SymbolInfo


class PaperBroker:
    """Fills market orders at the last bar close and enforces stop levels.

    Positions are keyed by id and scoped by label, so several engines can
    share one broker without seeing each other's trades.
    """

    def __init__(self, symbol: SymbolInfo, reject_probability: float = 0.0, seed: int = 42) -> None:
        if not 0.0 <= reject_probability <= 1.0:
            raise ValueError("reject_probability must be within [0, 1]")
        self.symbol = symbol
        self.reject_probability = reject_probability
        self._rng = random.Random(seed)
        self._positions: Dict[str, Position] = {}
        self.last_price: Optional[float] = None
        self.last_ts: Optional[datetime] = None
        self.closed_trades: List[ClosedTrade] = []

    def open_positions(self, label: str) -> List[Position]:
        """Positions carrying exactly ``label``, oldest first."""
        return [p for p in self._positions.values() if p.label == label]

    def open(self, command: OpenCommand) -> OrderResult:
        """Open a market position at the last known price."""
        if self.last_price is None:
            return OrderResult(success=False, error="no_market_price")
        if command.volume <= 0:
            return OrderResult(success=False, error="invalid_volume")
        if self._rng.random() < self.reject_probability:
            return OrderResult(success=False, error="rejected_by_broker")

        price = self.last_price
        sl_offset = self.symbol.pips_to_price(command.stop_loss_pips)
        tp_offset = self.symbol.pips_to_price(command.take_profit_pips)
        sign = 1.0 if command.trade_type is TradeType.BUY else -1.0

        position = Position(
            position_id=str(uuid4()),
            label=command.label,
            trade_type=command.trade_type,
            volume=command.volume,
            entry_price=price,
            stop_loss_price=price - sign * sl_offset,
            take_profit_price=price + sign * tp_offset,
            entry_ts=self.last_ts,
        )
        self._positions[position.position_id] = position
        return OrderResult(success=True, position=position)

    def close(self, position: Position) -> OrderResult:
        """Close at the last known price; closing twice fails without side effects."""
        if position.position_id not in self._positions:
            return OrderResult(success=False, position=position, error="position_not_open")
        if self.last_price is None:
            return OrderResult(success=False, position=position, error="no_market_price")
        self._settle(position.position_id, self.last_price, "signal")
        return OrderResult(success=True, position=position)

    def mark(self, candle: Candle) -> List[ClosedTrade]:
        """Apply a new bar: trigger stops against its range, then update the mark."""
        self.last_ts = candle.ts
        exits: List[ClosedTrade] = []
        for position in list(self._positions.values()):
            hit = self._stop_hit(position, candle)
            if hit is not None:
                price, reason = hit
                exits.append(self._settle(position.position_id, price, reason))
        self.last_price = candle.close
        return exits

    def _stop_hit(self, position: Position, candle: Candle) -> tuple[float, str] | None:
        sl = position.stop_loss_price
        tp = position.take_profit_price
        # Stop loss wins when a single bar touches both levels.
        if position.trade_type is TradeType.BUY:
            if sl is not None and candle.low <= sl:
                return sl, "stop_loss"
            if tp is not None and candle.high >= tp:
                return tp, "take_profit"
        else:
            if sl is not None and candle.high >= sl:
                return sl, "stop_loss"
            if tp is not None and candle.low <= tp:
                return tp, "take_profit"
        return None

    def _settle(self, position_id: str, price: float, reason: str) -> ClosedTrade:
        position = self._positions.pop(position_id)
        sign = 1.0 if position.trade_type is TradeType.BUY else -1.0
        move = (price - position.entry_price) * sign
        trade = ClosedTrade(
            position=position,
            exit_ts=self.last_ts or datetime.now(),
            exit_price=price,
            reason=reason,
            pnl=move * position.volume,
            pnl_pips=move / self.symbol.pip_size,
        )
        self.closed_trades.append(trade)
        return trade

    def drain_closed_trades(self) -> List[ClosedTrade]:
        """Hand over closed trades not yet collected and forget them."""
        drained, self.closed_trades = self.closed_trades, []
        return drained
