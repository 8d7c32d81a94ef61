"""
Entry point for running a single strategy against the paper host.

This module loads a JSON config document, builds the strategy it
describes, and runs it under :class:`~botkit.runner.StrategyRunner`
until interrupted, until ``--timeout`` elapses, or until the strategy
asks to stop.  With ``PAPER_TRADING`` enabled (the default) every
placed order is filled after ``STRATEGY_FILL_DELAY`` seconds, which is
enough to watch a buy/sell strategy cycle.

Example usage::

    LOG_LEVEL=DEBUG python -m botkit.worker_main --config configs/simple.json --timeout 5
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
from typing import List, Optional

from .clients.paper_exchange import PaperContext
from .config import ConfigError, env_flag, env_float, env_int, load_document
from .instruments import InstrumentRegistry
from .runner import StrategyRunner
from .strategies import build_strategy
from .telemetry import start_metrics_server

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run a strategy against the paper host.")
    parser.add_argument("--config", required=True, help="Path to a JSON config document.")
    parser.add_argument(
        "--metrics-port",
        type=int,
        default=None,
        help="Expose Prometheus metrics on this port (defaults to PROMETHEUS_PORT).",
    )
    parser.add_argument("--timeout", type=float, default=None, help="Stop after this many seconds.")
    return parser.parse_args(argv)


def build_runner(config_path: str) -> StrategyRunner:
    """Load a config document and wire strategy, paper context and runner."""
    doc = load_document(config_path)
    try:
        registry = InstrumentRegistry.from_mapping(doc["instruments"])
    except ValueError as exc:
        raise ConfigError(str(exc)) from exc
    strategy = build_strategy(doc["strategy"])
    context = PaperContext(instruments=registry, strategy_id=strategy.strategy_id)
    return StrategyRunner(
        strategy,
        context,
        paper_fills=env_flag("PAPER_TRADING", True),
        fill_delay=env_float("STRATEGY_FILL_DELAY", 0.1),
    )


async def run(runner: StrategyRunner, timeout: Optional[float] = None) -> None:
    if timeout is not None:
        asyncio.get_running_loop().call_later(timeout, runner.shutdown)
    await runner.run()


def main(argv: Optional[List[str]] = None) -> int:
    logging.basicConfig(level=os.environ.get("LOG_LEVEL", "INFO"))
    args = parse_args(argv)
    try:
        runner = build_runner(args.config)
        port = args.metrics_port if args.metrics_port is not None else env_int("PROMETHEUS_PORT")
    except ConfigError as exc:
        logger.error("Configuration error: %s", exc)
        return 2
    if port is not None:
        start_metrics_server(port)
    try:
        asyncio.run(run(runner, args.timeout))
    except KeyboardInterrupt:
        pass
    return 1 if runner.context.stop_requested else 0


if __name__ == "__main__":
    raise SystemExit(main())
