"""Decision engine and the paper trading orchestration around it."""

from __future__ import annotations

from dataclasses import dataclass, field
import asyncio
import contextlib
import time
from typing import List, Optional, Sequence

from crossover_bot.accounting.pnl_tracker import PnLTracker
from crossover_bot.config.settings import EngineConfig, TradeConfig
from crossover_bot.data.market_feed import Candle, LiveMarketFeed, MarketFeed
from crossover_bot.errors import CloseRejected, InsufficientHistory, OrderRejected
from crossover_bot.execution.gateway import OrderGateway, PositionManager
from crossover_bot.execution.order import (
    CloseCommand,
    OpenCommand,
    OrderResult,
    Position,
    TradeCommand,
)
from crossover_bot.execution.paper_broker import PaperBroker
from crossover_bot.execution.symbol import SymbolInfo
from crossover_bot.logging.event_log import get_signal_logger, get_trade_logger, set_log_level
from crossover_bot.logging.metrics import summarize_metrics
from crossover_bot.strategy.factory import build_signal_source
from crossover_bot.strategy.signal import Direction, SignalSource


@dataclass(frozen=True)
class TradeSettings:
    """Order parameters with volume already in instrument units."""

    label: str
    volume: float
    stop_loss_pips: float
    take_profit_pips: float

    @classmethod
    def from_config(cls, trade: TradeConfig, symbol: SymbolInfo) -> "TradeSettings":
        return cls(
            label=trade.label,
            volume=symbol.quantity_to_volume_in_units(trade.volume_in_lots),
            stop_loss_pips=trade.stop_loss_pips,
            take_profit_pips=trade.take_profit_pips,
        )


@dataclass
class BarOutcome:
    """Commands issued for one closed bar and what the gateway answered."""

    commands: List[TradeCommand] = field(default_factory=list)
    results: List[OrderResult] = field(default_factory=list)
    skipped: bool = False

    @property
    def rejected(self) -> int:
        return sum(1 for r in self.results if not r.success)


class DecisionEngine:
    """Turns the latest signal and the open position set into trade commands.

    Holds no per-bar memory: every call re-reads the indicator history and
    re-queries the position manager.
    """

    def __init__(
        self,
        signal_source: SignalSource,
        positions: PositionManager,
        gateway: OrderGateway,
        settings: TradeSettings,
    ) -> None:
        self.signal_source = signal_source
        self.positions = positions
        self.gateway = gateway
        self.settings = settings
        self.signal_logger = get_signal_logger()
        self.trade_logger = get_trade_logger()

    def decide(self, positions: Sequence[Position]) -> List[TradeCommand]:
        """Close commands first, then at most one open command.

        All indicator reads happen here, so an ``InsufficientHistory`` leaves
        no command half issued.
        """
        direction = self.signal_source.evaluate_open()
        commands: List[TradeCommand] = [
            CloseCommand(position) for position in positions if self.signal_source.should_close(position, direction)
        ]
        if direction is not None:
            commands.append(self._open_command(direction))
        return commands

    def on_bar_closed(self) -> BarOutcome:
        """Evaluate the bar that just closed and dispatch the resulting commands."""
        positions = list(self.positions.open_positions(self.settings.label))
        try:
            commands = self.decide(positions)
        except InsufficientHistory as exc:
            self.signal_logger.info("skip bar reason=insufficient_history detail=%s", exc.message)
            return BarOutcome(skipped=True)

        if not commands:
            self.signal_logger.info("no_signal source=%s open_positions=%d", self.signal_source.name, len(positions))
            return BarOutcome()

        outcome = BarOutcome(commands=commands)
        for command in commands:
            outcome.results.append(self._dispatch(command))
        return outcome

    def _open_command(self, direction: Direction) -> OpenCommand:
        return OpenCommand(
            trade_type=direction.trade_type,
            volume=self.settings.volume,
            stop_loss_pips=self.settings.stop_loss_pips,
            take_profit_pips=self.settings.take_profit_pips,
            label=self.settings.label,
        )

    def _dispatch(self, command: TradeCommand) -> OrderResult:
        # Failures are logged and not retried; the next bar re-evaluates from scratch.
        if isinstance(command, CloseCommand):
            try:
                result = self.gateway.close(command.position)
            except CloseRejected as exc:
                result = OrderResult(success=False, position=command.position, error=exc.message)
            if result.success:
                self.trade_logger.info(
                    "close id=%s side=%s volume=%.2f",
                    command.position.position_id,
                    command.position.trade_type.value,
                    command.position.volume,
                )
            else:
                self.trade_logger.warning(
                    "close_rejected id=%s reason=%s", command.position.position_id, result.error
                )
            return result

        try:
            result = self.gateway.open(command)
        except OrderRejected as exc:
            result = OrderResult(success=False, error=exc.message)
        if result.success:
            self.trade_logger.info(
                "open side=%s volume=%.2f sl_pips=%.1f tp_pips=%.1f label=%s",
                command.trade_type.value,
                command.volume,
                command.stop_loss_pips,
                command.take_profit_pips,
                command.label,
            )
        else:
            self.trade_logger.warning("open_rejected side=%s reason=%s", command.trade_type.value, result.error)
        return result


class PaperTradingEngine:
    """Coordinates feed, indicators, decision engine, and paper execution."""

    def __init__(self, config: EngineConfig, market: Optional[MarketFeed] = None) -> None:
        set_log_level(config.log_level)
        self.config = config
        run = config.run
        self.market = market or MarketFeed(
            seed=run.seed,
            start_price=run.start_price,
            bar_interval_seconds=config.feed.bar_interval_seconds,
        )
        self.broker = PaperBroker(
            symbol=config.symbol,
            reject_probability=config.execution.reject_probability,
            seed=run.seed,
        )
        self.signal_source, self.feeds = build_signal_source(config.strategy, run.max_history)
        self.decision = DecisionEngine(
            signal_source=self.signal_source,
            positions=self.broker,
            gateway=self.broker,
            settings=TradeSettings.from_config(config.trade, config.symbol),
        )
        self.pnl = PnLTracker()
        self.signal_logger = get_signal_logger()
        self.trade_logger = get_trade_logger()
        self.max_bars = run.max_bars
        self.warmup_bars = run.warmup_bars
        self.loop_sleep_seconds = run.loop_sleep_seconds
        self._warmed = False

    def warmup(self, candles: Sequence[Candle]) -> None:
        """Feed indicators without trading."""
        for candle in candles:
            self.broker.mark(candle)
            for feed in self.feeds:
                feed.on_bar(candle)
        self._warmed = True

    def process_bar(self, candle: Candle) -> BarOutcome:
        """Handle one closed bar: stop exits, indicator update, decision."""
        self.broker.mark(candle)
        for feed in self.feeds:
            feed.on_bar(candle)

        outcome = self.decision.on_bar_closed()
        self.pnl.mark_bar(outcome.skipped)
        for command, result in zip(outcome.commands, outcome.results):
            if isinstance(command, OpenCommand):
                if result.success:
                    self.pnl.opens += 1
                else:
                    self.pnl.rejections += 1
            elif not result.success:
                self.pnl.rejections += 1
        self._book_closed_trades()
        return outcome

    def _book_closed_trades(self) -> None:
        for trade in self.broker.drain_closed_trades():
            self.pnl.mark_exit(trade)
            self.trade_logger.info(
                "exit reason=%s side=%s entry=%.5f exit=%.5f pips=%.1f pnl=%.2f",
                trade.reason,
                trade.position.trade_type.value,
                trade.position.entry_price,
                trade.exit_price,
                trade.pnl_pips,
                trade.pnl,
            )

    def step(self) -> BarOutcome:
        """Perform one market cycle (one iteration of the main loop)."""
        if not self._warmed:
            self.warmup(self.market.warmup(self.warmup_bars))
        return self.process_bar(self.market.next_candle())

    def run(self) -> dict[str, float]:
        """Execute the bounded main loop on the synthetic feed."""
        for _ in range(self.max_bars):
            self.step()
            if self.loop_sleep_seconds:
                time.sleep(self.loop_sleep_seconds)
        return self.metrics()

    async def run_live(self, feed: LiveMarketFeed) -> dict[str, float]:
        """Execute the main loop using live bars from a websocket feed."""
        ws_task = asyncio.create_task(feed.connect())
        try:
            warm = [await feed.next_candle() for _ in range(self.warmup_bars)]
            self.warmup(warm)
            for _ in range(self.max_bars):
                candle = await feed.next_candle()
                self.process_bar(candle)
        finally:
            ws_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await ws_task
        return self.metrics()

    def metrics(self) -> dict[str, float]:
        open_count = len(self.broker.open_positions(self.decision.settings.label))
        return summarize_metrics(pnl=self.pnl, open_positions=open_count)

    def shutdown(self) -> dict[str, float]:
        """Print the run summary and flush log handlers."""
        metrics = self.metrics()
        print("=== PAPER RUN SUMMARY ===")
        for k, v in metrics.items():
            print(f"{k}: {v:.6f}" if isinstance(v, float) else f"{k}: {v}")
        for logger in [self.signal_logger, self.trade_logger]:
            for handler in logger.handlers:
                handler.flush()
        return metrics
