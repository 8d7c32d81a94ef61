"""Builders shared by the strategy and runner tests.

These helpers construct configs, instrument registries and paper
contexts with sensible defaults so each test only spells out the
values it actually cares about.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Optional

from botkit.clients.paper_exchange import PaperContext
from botkit.instruments import InstrumentMeta, InstrumentRegistry
from botkit.strategies.quoting_strategy import QuotingConfig
from botkit.strategies.simple_strategy import SimpleConfig

MARKET = "binance:BTC-USDT"


class FakeClock:
    """Manually advanced millisecond clock."""

    def __init__(self, now_ms: int = 1_000_000) -> None:
        self.now = now_ms

    def advance(self, ms: int) -> None:
        self.now += ms

    def __call__(self) -> int:
        return self.now


def make_registry(tick_size: str = "0.5", lot_size: str = "0.1", min_qty: Optional[str] = None) -> InstrumentRegistry:
    meta = InstrumentMeta(
        tick_size=Decimal(tick_size),
        lot_size=Decimal(lot_size),
        min_qty=Decimal(min_qty) if min_qty is not None else None,
    )
    return InstrumentRegistry({MARKET: meta})


def make_context(registry: Optional[InstrumentRegistry] = None, clock: Optional[FakeClock] = None) -> PaperContext:
    return PaperContext(
        instruments=registry if registry is not None else make_registry(),
        strategy_id="test",
        clock=clock,
    )


def simple_config(**overrides: Any) -> SimpleConfig:
    data: dict[str, Any] = {
        "strategy_id": "btc-simple",
        "environment": "testnet",
        "market": MARKET,
        "buy_price": "100",
        "sell_price": "110",
        "order_size": "1",
    }
    data.update(overrides)
    return SimpleConfig.model_validate(data)


def quoting_config(**overrides: Any) -> QuotingConfig:
    data: dict[str, Any] = {
        "strategy_id": "btc-quoting",
        "environment": "testnet",
        "market": MARKET,
        "order_size": "0.25",
    }
    data.update(overrides)
    return QuotingConfig.model_validate(data)
