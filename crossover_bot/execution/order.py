"""Position and trade command models shared by engine and gateways."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional, Union


class TradeType(Enum):
    BUY = "BUY"
    SELL = "SELL"

    @property
    def opposite(self) -> "TradeType":
        return TradeType.SELL if self is TradeType.BUY else TradeType.BUY


@dataclass(frozen=True)
class Position:
    """Open trade as reported by the position manager."""

    position_id: str
    label: str
    trade_type: TradeType
    volume: float
    entry_price: float = 0.0
    stop_loss_price: Optional[float] = None
    take_profit_price: Optional[float] = None
    entry_ts: Optional[datetime] = None


@dataclass(frozen=True)
class OpenCommand:
    """Intent to open one market position with fixed protective stops."""

    trade_type: TradeType
    volume: float
    stop_loss_pips: float
    take_profit_pips: float
    label: str


@dataclass(frozen=True)
class CloseCommand:
    """Intent to close an existing position."""

    position: Position


TradeCommand = Union[OpenCommand, CloseCommand]


@dataclass(frozen=True)
class OrderResult:
    """Gateway answer to an open or close request."""

    success: bool
    position: Optional[Position] = None
    error: Optional[str] = None


@dataclass(frozen=True)
class ClosedTrade:
    """Round trip realised by a close command or a protective stop."""

    position: Position
    exit_ts: datetime
    exit_price: float
    reason: str
    pnl: float
    pnl_pips: float
