"""Buy-Low / Sell-High Strategy
=============================

A minimal strategy that demonstrates the full order-lifecycle pattern.
It keeps exactly one limit order outstanding and cycles forever::

    WAITING_TO_BUY -> BUY_PLACED -> WAITING_TO_SELL -> SELL_PLACED -> WAITING_TO_BUY

* On start it places a BUY at ``buy_price``.
* When the BUY completes it immediately places a SELL at ``sell_price``.
  ``WAITING_TO_SELL`` is only ever held inside that callback.
* When the SELL completes the cycle starts again with a new BUY.
* If the outstanding order is canceled or rejected, the strategy
  resets to ``WAITING_TO_BUY`` and places one fresh BUY.
* On stop it cancels every open order on its exchange instance and
  ignores every later event, including the cancellations it caused.

Quantities are rounded to the instrument's lot size; a BUY rounds to
the nearest lot while a SELL truncates, so a SELL never asks for more
than the BUY acquired.  A quantity below the instrument's ``min_qty`` is
never sent.

Configuration
-------------

* ``buy_price`` – price of every BUY order (must be below ``sell_price``)
* ``sell_price`` – take-profit price of every SELL order
* ``order_size`` – order quantity in base asset (must be positive)

Limitations
-----------

* One position at a time; no scaling, grids or stop losses.
* Runtime state is not persisted; a restart begins with a new BUY.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import List, Optional

from pydantic import Field

from ..config import StrategyConfig
from ..context import StrategyContext
from ..instruments import InstrumentMeta
from ..models import CancelAll, OrderSide, PlaceOrder
from ..models_events import TERMINAL_ORDER_EVENTS, OrderCompleted, OrderRejected
from .base import BaseStrategy


class SimpleConfig(StrategyConfig):
    """Configuration for :class:`SimpleStrategy`."""

    buy_price: Decimal = Field(..., description="Price at which to place a BUY order")
    sell_price: Decimal = Field(..., description="Price at which to place a SELL order (take profit)")
    order_size: Decimal = Field(..., description="Order quantity in base asset")

    def validate(self) -> List[str]:  # type: ignore[override]
        errors: List[str] = []
        if self.buy_price >= self.sell_price:
            errors.append("buy_price must be < sell_price")
        if self.order_size <= 0:
            errors.append("order_size must be > 0")
        return errors


class Phase(str, Enum):
    """Which step of the buy/sell cycle the strategy is in."""

    WAITING_TO_BUY = "waiting_to_buy"
    BUY_PLACED = "buy_placed"
    WAITING_TO_SELL = "waiting_to_sell"
    SELL_PLACED = "sell_placed"


# Phases in which exactly one order is outstanding.
PLACED_PHASES = frozenset({Phase.BUY_PLACED, Phase.SELL_PLACED})


@dataclass
class SimpleState:
    phase: Phase = Phase.WAITING_TO_BUY
    active_order: Optional[str] = None
    # Set by on_stop; a stopped strategy ignores every later callback.
    stopped: bool = False


class SimpleStrategy(BaseStrategy[SimpleConfig]):
    """Buy at ``buy_price``, sell at ``sell_price``, repeat."""

    def __init__(self, config: SimpleConfig) -> None:
        super().__init__(config)
        self.state = SimpleState()
        self.meta: Optional[InstrumentMeta] = None

    def on_start(self, ctx: StrategyContext) -> None:
        self.state = SimpleState()
        self.meta = ctx.instrument_meta(self.instrument_id())
        if self.meta is None:
            ctx.log_error(f"Instrument not found: {self.instrument_id()}")
            ctx.stop_strategy(self.strategy_id, "Instrument not found")
            return
        errors = self.config.validate() or self._check_rounding(self.meta)
        if errors:
            ctx.stop_strategy(self.strategy_id, "; ".join(errors))
            return
        ctx.log_info(
            f"SimpleStrategy started: buy@{self.config.buy_price} "
            f"sell@{self.config.sell_price} qty={self.config.order_size}"
        )
        self._place_buy(ctx)

    def on_event(self, ctx: StrategyContext, event: object) -> None:
        if self.state.stopped:
            return
        if isinstance(event, OrderCompleted):
            if event.client_id != self.state.active_order:
                return
            if self.state.phase is Phase.BUY_PLACED:
                ctx.log_info(f"Buy filled @ avg={event.avg_fill_px}")
                self.state.active_order = None
                self.state.phase = Phase.WAITING_TO_SELL
                self._place_sell(ctx, event.filled_qty)
            elif self.state.phase is Phase.SELL_PLACED:
                ctx.log_info(f"Sell filled @ avg={event.avg_fill_px}, cycle complete")
                self.state.active_order = None
                self.state.phase = Phase.WAITING_TO_BUY
                self._place_buy(ctx)
        elif isinstance(event, TERMINAL_ORDER_EVENTS):
            if event.client_id != self.state.active_order:
                return
            if isinstance(event, OrderRejected):
                ctx.log_warn(f"Order rejected ({event.reason}), resetting to buy phase")
            else:
                ctx.log_warn("Order canceled, resetting to buy phase")
            self.state.active_order = None
            self.state.phase = Phase.WAITING_TO_BUY
            self._place_buy(ctx)

    def on_timer(self, ctx: StrategyContext, timer_id: int) -> None:
        pass

    def on_stop(self, ctx: StrategyContext) -> None:
        ctx.cancel_all(CancelAll(exchange=self.exchange_instance()))
        self.state.active_order = None
        self.state.phase = Phase.WAITING_TO_BUY
        self.state.stopped = True
        ctx.log_info("SimpleStrategy stopped")

    def _check_rounding(self, meta: InstrumentMeta) -> List[str]:
        # Parameters that are valid on their own can still round away to nothing.
        errors: List[str] = []
        if meta.round_price(self.config.buy_price) <= 0:
            errors.append(f"buy_price rounds to zero at tick size {meta.tick_size}")
        qty = meta.round_qty(self.config.order_size)
        if qty <= 0:
            errors.append(f"order_size rounds to zero at lot size {meta.lot_size}")
        elif not meta.tradable_qty(qty):
            errors.append(f"order_size {qty} is below min_qty {meta.min_qty}")
        return errors

    def _place_buy(self, ctx: StrategyContext) -> None:
        assert self.meta is not None
        price = self.meta.round_price(self.config.buy_price)
        qty = self.meta.round_qty(self.config.order_size)
        self._place(ctx, OrderSide.BUY, price, qty, Phase.BUY_PLACED)

    def _place_sell(self, ctx: StrategyContext, filled_qty: Decimal) -> None:
        assert self.meta is not None
        qty = self.config.order_size
        if 0 < filled_qty < qty:
            qty = filled_qty
        qty = self.meta.trunc_qty(qty)
        if not self.meta.tradable_qty(qty):
            ctx.log_error(f"Sell quantity {qty} is not tradable (min_qty={self.meta.min_qty}), restarting buy cycle")
            self.state.phase = Phase.WAITING_TO_BUY
            self._place_buy(ctx)
            return
        price = self.meta.round_price(self.config.sell_price)
        self._place(ctx, OrderSide.SELL, price, qty, Phase.SELL_PLACED)

    def _place(self, ctx: StrategyContext, side: OrderSide, price: Decimal, qty: Decimal, phase: Phase) -> None:
        order = PlaceOrder.limit(self.exchange_instance(), self.instrument_id(), side, price, qty)
        # State first: a synchronous fill callback must see the placed phase.
        self.state.active_order = order.client_id
        self.state.phase = phase
        ctx.place_order(order)
        ctx.log_info(f"{side.name} order placed @ {price}")
