"""Unit tests for the recording paper context."""

import logging
from decimal import Decimal

import pytest

from botkit import telemetry
from botkit.models import CancelAll, Environment, ExchangeInstance, OrderSide, PlaceOrder
from botkit.models_events import OrderCompleted
from tests.helpers.factories import MARKET, FakeClock, make_context


EXCHANGE = ExchangeInstance(exchange="binance", environment=Environment.TESTNET)


def order(side: OrderSide = OrderSide.BUY) -> PlaceOrder:
    return PlaceOrder.limit(EXCHANGE, MARKET, side, Decimal("100"), Decimal("0.5"))


def test_commands_recorded_in_order() -> None:
    ctx = make_context()
    first, second = order(), order(OrderSide.SELL)
    ctx.place_order(first)
    ctx.cancel_all(CancelAll(exchange=EXCHANGE))
    ctx.place_order(second)
    assert [type(c) for c in ctx.commands] == [PlaceOrder, CancelAll, PlaceOrder]
    assert ctx.placed_orders == [first, second]
    assert ctx.last_order is second
    assert ctx.orders[first.client_id] is first
    assert first.client_id != second.client_id


def test_order_callback_and_metrics() -> None:
    seen = []
    ctx = make_context()
    ctx.on_order = seen.append
    counter = telemetry.ORDERS_PLACED.labels(strategy="test", side="buy")
    before = counter._value.get()
    ctx.place_order(order())
    assert seen == [ctx.last_order]
    assert counter._value.get() == before + 1


def test_simulated_responses() -> None:
    ctx = make_context()
    placed = order()
    ctx.place_order(placed)
    completed = ctx.complete(placed.client_id)
    assert completed == OrderCompleted(
        client_id=placed.client_id, filled_qty=Decimal("0.5"), avg_fill_px=Decimal("100")
    )
    assert ctx.fill(placed.client_id, Decimal("0.1")).side is OrderSide.BUY
    assert ctx.reject(placed.client_id).reason == "rejected by exchange"
    assert ctx.cancel(placed.client_id).client_id == placed.client_id
    with pytest.raises(KeyError):
        ctx.complete("unknown")


def test_logs_stop_requests_clock_and_timers(caplog) -> None:
    clock = FakeClock(now_ms=5)
    ctx = make_context(clock=clock)
    with caplog.at_level(logging.INFO, logger="botkit.strategy"):
        ctx.log_info("hello")
        ctx.log_warn("careful")
        ctx.stop_strategy("test", "bad config")
    assert ctx.messages() == ["hello", "careful"]
    assert ctx.messages(level=logging.WARNING) == ["careful"]
    assert "[test] hello" in caplog.text
    assert ctx.stop_requested
    assert ctx.stop_requests == [("test", "bad config")]
    assert ctx.now_ms() == 5
    assert ctx.instrument_meta(MARKET) is not None
    assert ctx.instrument_meta("binance:ETH-USDT") is None
    assert ctx.set_interval(1.0) == 1
    assert ctx.set_interval(2.0) == 2
    assert ctx.timers == {1: 1.0, 2: 2.0}
