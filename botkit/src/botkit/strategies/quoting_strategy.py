"""Quoting Strategy Template
=========================

Skeleton for price-reactive strategies.  Compared to
:mod:`~botkit.strategies.simple_strategy` it adds a pre-trade
``QUOTING`` phase: the strategy tracks the latest mid price from
``Quote`` events and asks :meth:`QuotingStrategy.decide` whether to act.
The default implementation never acts; subclasses override ``decide``
to return an :class:`OrderIntent`.

Phases::

    IDLE --start--> QUOTING --decide()--> ORDER_PLACED --completed/canceled/rejected--> QUOTING
    any --stop--> IDLE

Order prices are truncated to five significant figures before tick
rounding so noise from upstream float conversion never reaches the
exchange.  While the exchange reports ``halted`` no new decisions are
taken.

A recurring timer emits a status log line at most once every 30 seconds.
This is advisory telemetry and never changes the phase.

Configuration
-------------

* ``order_size`` – default order quantity in base asset (must be positive)
* ``timer_interval_secs`` – period of the housekeeping timer (default 5)
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import List, Optional

from pydantic import Field

from ..config import StrategyConfig
from ..context import StrategyContext
from ..instruments import InstrumentMeta, trim_to_sig_figs
from ..models import CancelAll, OrderSide, PlaceOrder
from ..models_events import (
    TERMINAL_ORDER_EVENTS,
    ExchangeStateChanged,
    OrderCanceled,
    OrderCompleted,
    OrderFilled,
    Quote,
)
from .base import BaseStrategy

STATUS_LOG_INTERVAL_MS = 30_000
PRICE_SIG_FIGS = 5


class QuotingConfig(StrategyConfig):
    """Configuration for :class:`QuotingStrategy`."""

    order_size: Decimal = Field(..., description="Order size in base asset (e.g. 0.01 BTC)")
    timer_interval_secs: float = Field(5.0, description="Housekeeping timer period in seconds")

    def validate(self) -> List[str]:  # type: ignore[override]
        errors: List[str] = []
        if self.order_size <= 0:
            errors.append("order_size must be > 0")
        if self.timer_interval_secs <= 0:
            errors.append("timer_interval_secs must be > 0")
        return errors


class QuotingPhase(str, Enum):
    IDLE = "idle"
    QUOTING = "quoting"
    ORDER_PLACED = "order_placed"


@dataclass(frozen=True)
class OrderIntent:
    """What :meth:`QuotingStrategy.decide` wants placed.

    ``qty`` defaults to the configured ``order_size``.
    """

    side: OrderSide
    price: Decimal
    qty: Optional[Decimal] = None


@dataclass
class QuotingState:
    phase: QuotingPhase = QuotingPhase.IDLE
    last_mid: Optional[Decimal] = None
    active_order: Optional[str] = None
    # Last periodic status log timestamp (ms)
    last_log_ts: int = 0
    halted: bool = False
    timer_id: Optional[int] = None


class QuotingStrategy(BaseStrategy[QuotingConfig]):
    """Track the mid price and place one order at a time when ``decide`` says so."""

    def __init__(self, config: QuotingConfig) -> None:
        super().__init__(config)
        self.state = QuotingState()
        self.instrument_meta: Optional[InstrumentMeta] = None

    def decide(self, mid: Decimal) -> Optional[OrderIntent]:
        """Extension point: return an intent to place an order, or ``None``."""
        return None

    def round_price(self, price: Decimal) -> Decimal:
        """Round price to 5 significant figures and then to tick size."""
        trimmed = trim_to_sig_figs(price, PRICE_SIG_FIGS)
        if self.instrument_meta is not None:
            return self.instrument_meta.round_price(trimmed)
        return trimmed

    def round_qty(self, qty: Decimal, side: OrderSide) -> Decimal:
        if self.instrument_meta is None:
            return qty
        if side is OrderSide.SELL:
            return self.instrument_meta.trunc_qty(qty)
        return self.instrument_meta.round_qty(qty)

    def on_start(self, ctx: StrategyContext) -> None:
        self.state = QuotingState()
        instrument = self.instrument_id()
        self.instrument_meta = ctx.instrument_meta(instrument)
        if self.instrument_meta is None:
            ctx.log_error(f"Instrument not found: {instrument}")
            ctx.stop_strategy(self.strategy_id, "Instrument not found")
            return

        errors = self.config.validate()
        if errors:
            for err in errors:
                ctx.log_error(f"Config error: {err}")
            ctx.stop_strategy(self.strategy_id, f"Config validation failed: {'; '.join(errors)}")
            return

        ctx.log_info(f"QuotingStrategy started: {instrument} order_size={self.config.order_size}")
        self.state.timer_id = ctx.set_interval(self.config.timer_interval_secs)
        self.state.phase = QuotingPhase.QUOTING

    def on_event(self, ctx: StrategyContext, event: object) -> None:
        if self.state.phase is QuotingPhase.IDLE:
            return

        if isinstance(event, Quote):
            if event.instrument != self.instrument_id():
                return
            mid = event.mid
            self.state.last_mid = mid
            if self.state.phase is QuotingPhase.QUOTING and not self.state.halted:
                intent = self.decide(mid)
                if intent is not None:
                    self._place(ctx, intent)
        elif isinstance(event, OrderFilled):
            if event.client_id == self.state.active_order:
                ctx.log_info(f"Filled: {event.side} {event.client_id} @ {event.price} qty={event.qty}")
        elif isinstance(event, TERMINAL_ORDER_EVENTS):
            if event.client_id != self.state.active_order:
                return
            if isinstance(event, OrderCompleted):
                ctx.log_info(f"Completed: {event.client_id} filled_qty={event.filled_qty}")
            elif isinstance(event, OrderCanceled):
                ctx.log_info(f"Canceled: {event.client_id}")
            else:
                ctx.log_warn(f"Rejected: {event.client_id} reason={event.reason}")
            self.state.active_order = None
            self.state.phase = QuotingPhase.QUOTING
        elif isinstance(event, ExchangeStateChanged):
            if event.exchange != self.config.market.exchange:
                return
            ctx.log_info(f"Exchange state: {event.old_state} -> {event.new_state} ({event.reason})")
            self.state.halted = event.new_state.lower() == "halted"

    def on_timer(self, ctx: StrategyContext, timer_id: int) -> None:
        if self.state.phase is QuotingPhase.IDLE or timer_id != self.state.timer_id:
            return
        now = ctx.now_ms()
        if now - self.state.last_log_ts > STATUS_LOG_INTERVAL_MS:
            if self.state.last_mid is not None:
                ctx.log_info(f"Status: mid={self.state.last_mid} active_order={self.state.active_order}")
            self.state.last_log_ts = now

    def on_stop(self, ctx: StrategyContext) -> None:
        ctx.log_info("QuotingStrategy stopping, canceling all orders")
        ctx.cancel_all(CancelAll(exchange=self.exchange_instance()))
        self.state.active_order = None
        self.state.phase = QuotingPhase.IDLE

    def _place(self, ctx: StrategyContext, intent: OrderIntent) -> None:
        assert self.instrument_meta is not None
        price = self.round_price(intent.price)
        qty = self.round_qty(intent.qty if intent.qty is not None else self.config.order_size, intent.side)
        if price <= 0 or not self.instrument_meta.tradable_qty(qty):
            ctx.log_warn(f"Skipping {intent.side.name} intent: price={price} qty={qty} after rounding")
            return
        order = PlaceOrder.limit(self.exchange_instance(), self.instrument_id(), intent.side, price, qty)
        self.state.active_order = order.client_id
        self.state.phase = QuotingPhase.ORDER_PLACED
        ctx.place_order(order)
        ctx.log_info(f"{intent.side.name} order placed @ {price}")
