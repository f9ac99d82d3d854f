"""Entry point for running the paper trading engine on a live trade stream."""

from __future__ import annotations

import asyncio
import sys

from crossover_bot.data.market_feed import LiveMarketFeed
from crossover_bot.engine import PaperTradingEngine
from crossover_bot.errors import MisconfigurationError
from crossover_bot.run_paper import load_config


def main(argv: list[str] | None = None) -> int:
    try:
        config = load_config(sys.argv if argv is None else argv)
        engine = PaperTradingEngine(config)
    except MisconfigurationError as exc:
        print(f"Invalid configuration: {exc.message}")
        return 2

    feed = LiveMarketFeed(
        symbol=config.feed.live_symbol,
        bar_interval_seconds=config.feed.bar_interval_seconds,
        max_bars=config.run.max_history,
    )
    print("=== Live paper trading started ===")
    try:
        asyncio.run(engine.run_live(feed))
    except KeyboardInterrupt:
        print("\nGraceful shutdown initiated...")
    finally:
        engine.shutdown()
        print("Live paper trading stopped cleanly.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
