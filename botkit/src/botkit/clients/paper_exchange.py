"""
Paper host context for simulation.

:class:`PaperContext` implements :class:`~botkit.context.StrategyContext`
without touching any exchange.  Every command a strategy issues is
recorded in order so callers (the runner, tests, a paper-trading
session) can inspect it, and the context can build the events an
exchange would send back for those orders: completion, partial fill,
cancellation and rejection.  No matching engine logic is implemented;
orders fill at their limit price when asked to.

Log lines are forwarded to the standard :mod:`logging` module, prefixed
with the strategy id, and commands are counted in the Prometheus
metrics from :mod:`botkit.telemetry`.
"""

from __future__ import annotations

import logging
import time
from decimal import Decimal
from typing import Callable, Dict, List, Optional, Tuple, Union

from .. import telemetry
from ..context import StrategyContext
from ..instruments import InstrumentMeta, InstrumentRegistry
from ..models import CancelAll, PlaceOrder
from ..models_events import OrderCanceled, OrderCompleted, OrderFilled, OrderRejected

logger = logging.getLogger("botkit.strategy")

Command = Union[PlaceOrder, CancelAll]


def _wall_clock_ms() -> int:
    return int(time.time() * 1000)


class PaperContext(StrategyContext):
    """Record strategy commands and serve instrument metadata from a registry."""

    def __init__(
        self,
        instruments: Optional[InstrumentRegistry] = None,
        strategy_id: str = "",
        clock: Optional[Callable[[], int]] = None,
        on_order: Optional[Callable[[PlaceOrder], None]] = None,
    ) -> None:
        self.instruments = instruments or InstrumentRegistry()
        self.strategy_id = strategy_id
        self.clock = clock or _wall_clock_ms
        # Called after each recorded order; the runner uses it for paper fills.
        self.on_order = on_order
        # Ledger of submitted orders (client id -> command)
        self.orders: Dict[str, PlaceOrder] = {}
        # Every command in emission order
        self.commands: List[Command] = []
        self.cancels: List[CancelAll] = []
        self.stop_requests: List[Tuple[str, str]] = []
        # timer id -> period in seconds
        self.timers: Dict[int, float] = {}
        self.logs: List[Tuple[int, str]] = []

    # -- StrategyContext -------------------------------------------------

    def place_order(self, order: PlaceOrder) -> None:
        self.orders[order.client_id] = order
        self.commands.append(order)
        telemetry.ORDERS_PLACED.labels(strategy=self.strategy_id, side=order.side.value).inc()
        if self.on_order is not None:
            self.on_order(order)

    def cancel_all(self, command: CancelAll) -> None:
        self.cancels.append(command)
        self.commands.append(command)
        telemetry.CANCEL_ALL.labels(strategy=self.strategy_id).inc()

    def instrument_meta(self, instrument_id: str) -> Optional[InstrumentMeta]:
        return self.instruments.get(instrument_id)

    def stop_strategy(self, strategy_id: str, reason: str) -> None:
        self.stop_requests.append((strategy_id, reason))
        telemetry.STOP_REQUESTS.labels(strategy=strategy_id).inc()
        logger.error("[%s] stop requested: %s", strategy_id, reason)

    def log_info(self, message: str) -> None:
        self._log(logging.INFO, message)

    def log_warn(self, message: str) -> None:
        self._log(logging.WARNING, message)

    def log_error(self, message: str) -> None:
        self._log(logging.ERROR, message)

    def now_ms(self) -> int:
        return self.clock()

    def set_interval(self, seconds: float) -> int:
        timer_id = len(self.timers) + 1
        self.timers[timer_id] = seconds
        return timer_id

    # -- inspection helpers ---------------------------------------------

    @property
    def stop_requested(self) -> bool:
        return bool(self.stop_requests)

    @property
    def placed_orders(self) -> List[PlaceOrder]:
        return [c for c in self.commands if isinstance(c, PlaceOrder)]

    @property
    def last_order(self) -> Optional[PlaceOrder]:
        placed = self.placed_orders
        return placed[-1] if placed else None

    def messages(self, level: Optional[int] = None) -> List[str]:
        return [msg for lvl, msg in self.logs if level is None or lvl == level]

    # -- simulated exchange responses -----------------------------------

    def complete(self, client_id: str, avg_fill_px: Optional[Decimal] = None) -> OrderCompleted:
        """Build the completion event for a recorded order, filled in full."""
        order = self._order(client_id)
        return OrderCompleted(
            client_id=client_id,
            filled_qty=order.qty,
            avg_fill_px=avg_fill_px if avg_fill_px is not None else order.price,
        )

    def fill(self, client_id: str, qty: Decimal) -> OrderFilled:
        order = self._order(client_id)
        return OrderFilled(client_id=client_id, side=order.side, price=order.price, qty=qty)

    def cancel(self, client_id: str) -> OrderCanceled:
        self._order(client_id)
        return OrderCanceled(client_id=client_id)

    def reject(self, client_id: str, reason: str = "rejected by exchange") -> OrderRejected:
        self._order(client_id)
        return OrderRejected(client_id=client_id, reason=reason)

    def _order(self, client_id: str) -> PlaceOrder:
        try:
            return self.orders[client_id]
        except KeyError:
            raise KeyError(f"Unknown client order id {client_id!r}") from None

    def _log(self, level: int, message: str) -> None:
        self.logs.append((level, message))
        logger.log(level, "[%s] %s", self.strategy_id, message)
