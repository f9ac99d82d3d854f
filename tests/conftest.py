"""
Shared fakes for crossover_bot tests.

Provides:
- series(): IndicatorSeries built from oldest-to-newest values
- FakePositions: label-filtered in-memory position manager
- RecordingGateway: order gateway that records every call in order
- candle(): flat OHLC bar helper
"""

from datetime import datetime, timedelta, timezone

import pytest

from crossover_bot.data.market_feed import Candle
from crossover_bot.data.series import IndicatorSeries
from crossover_bot.engine import TradeSettings
from crossover_bot.errors import CloseRejected, OrderRejected
from crossover_bot.execution.order import OrderResult, Position, TradeType

LABEL = "TestBot"
T0 = datetime(2024, 1, 1, tzinfo=timezone.utc)


def series(name, *values):
    s = IndicatorSeries(name)
    for v in values:
        s.append(v)
    return s


def position(position_id, trade_type, label=LABEL, volume=1000.0):
    return Position(position_id=position_id, label=label, trade_type=trade_type, volume=volume)


def buy(position_id, label=LABEL):
    return position(position_id, TradeType.BUY, label)


def sell(position_id, label=LABEL):
    return position(position_id, TradeType.SELL, label)


def candle(i, close, high=None, low=None):
    return Candle(
        ts=T0 + timedelta(minutes=i),
        open=close,
        high=close if high is None else high,
        low=close if low is None else low,
        close=close,
        volume=1.0,
    )


class FakePositions:
    def __init__(self, *positions):
        self.positions = list(positions)
        self.queries = []

    def open_positions(self, label):
        self.queries.append(label)
        return [p for p in self.positions if p.label == label]


class RecordingGateway:
    def __init__(self, open_ok=True, close_ok=True, raise_on_open=False, raise_on_close=False):
        self.calls = []
        self.open_ok = open_ok
        self.close_ok = close_ok
        self.raise_on_open = raise_on_open
        self.raise_on_close = raise_on_close

    def open(self, command):
        self.calls.append(("open", command))
        if self.raise_on_open:
            raise OrderRejected("market closed")
        if not self.open_ok:
            return OrderResult(success=False, error="not_enough_money")
        return OrderResult(success=True)

    def close(self, pos):
        self.calls.append(("close", pos))
        if self.raise_on_close:
            raise CloseRejected("position locked")
        if not self.close_ok:
            return OrderResult(success=False, position=pos, error="position_not_open")
        return OrderResult(success=True, position=pos)


@pytest.fixture
def settings():
    return TradeSettings(label=LABEL, volume=1000.0, stop_loss_pips=10.0, take_profit_pips=10.0)


@pytest.fixture
def gateway():
    return RecordingGateway()
