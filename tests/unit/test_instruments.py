"""Unit tests for instrument metadata rounding and the registry."""

from decimal import Decimal

import pytest

from botkit.instruments import InstrumentMeta, InstrumentRegistry, trim_to_sig_figs


META = InstrumentMeta(tick_size=Decimal("0.5"), lot_size=Decimal("0.001"))


@pytest.mark.parametrize(
    "price, expected",
    [("100.2", "100.0"), ("100.25", "100.5"), ("100.74", "100.5"), ("100.75", "101.0")],
)
def test_round_price_half_up_to_tick(price: str, expected: str) -> None:
    assert META.round_price(Decimal(price)) == Decimal(expected)


def test_round_price_keeps_tick_exponent() -> None:
    meta = InstrumentMeta(tick_size=Decimal("0.01"), lot_size=Decimal("1"))
    assert str(meta.round_price(Decimal("100"))) == "100.00"


def test_round_and_truncate_quantity() -> None:
    assert META.round_qty(Decimal("0.0125")) == Decimal("0.013")
    assert META.trunc_qty(Decimal("0.0129")) == Decimal("0.012")
    assert META.trunc_qty(Decimal("0.0005")) == 0
    assert META.trunc_qty(Decimal("0.012")) == Decimal("0.012")


@pytest.mark.parametrize("field", ["tick_size", "lot_size", "min_qty"])
@pytest.mark.parametrize("value", ["NaN", "Infinity", "0", "-0.5"])
def test_increments_must_be_positive_and_finite(field: str, value: str) -> None:
    kwargs = {"tick_size": Decimal("0.5"), "lot_size": Decimal("0.1"), field: Decimal(value)}
    with pytest.raises(ValueError) as excinfo:
        InstrumentMeta(**kwargs)
    assert field in str(excinfo.value)


def test_tradable_qty_respects_min_qty() -> None:
    meta = InstrumentMeta(tick_size=Decimal("0.5"), lot_size=Decimal("0.001"), min_qty=Decimal("0.01"))
    assert meta.tradable_qty(Decimal("0.01"))
    assert not meta.tradable_qty(Decimal("0.009"))
    assert not META.tradable_qty(Decimal("0"))
    assert META.tradable_qty(Decimal("0.001"))


def test_trim_to_sig_figs() -> None:
    assert trim_to_sig_figs(Decimal("101.23000000000001"), 5) == Decimal("101.23")
    assert trim_to_sig_figs(Decimal("0.000123456"), 3) == Decimal("0.000123")
    assert trim_to_sig_figs(Decimal("0"), 5) == 0
    with pytest.raises(ValueError):
        trim_to_sig_figs(Decimal("1"), 0)


def test_registry_from_mapping() -> None:
    registry = InstrumentRegistry.from_mapping(
        {"binance:BTC-USDT": {"tick_size": "0.01", "lot_size": 0.001, "min_qty": "0.001"}}
    )
    assert len(registry) == 1
    assert "binance:BTC-USDT" in registry
    meta = registry.get("binance:BTC-USDT")
    assert meta == InstrumentMeta(Decimal("0.01"), Decimal("0.001"), Decimal("0.001"))
    assert registry.get("binance:ETH-USDT") is None


@pytest.mark.parametrize(
    "entry, message",
    [
        ({"tick_size": "0.01"}, "requires 'tick_size' and 'lot_size'"),
        ({"tick_size": "abc", "lot_size": "1"}, "tick_size must be a decimal number"),
        ("0.01", "expected an object"),
        ({"tick_size": "NaN", "lot_size": "1"}, "tick_size must be a positive finite number"),
        ({"tick_size": "Infinity", "lot_size": "1"}, "tick_size must be a positive finite number"),
        ({"tick_size": "0.01", "lot_size": "0"}, "lot_size must be a positive finite number"),
        ({"tick_size": "-0.5", "lot_size": "0.1"}, "tick_size must be a positive finite number"),
        ({"tick_size": "0.5", "lot_size": "-0.1"}, "lot_size must be a positive finite number"),
    ],
)
def test_registry_rejects_malformed_entries(entry, message: str) -> None:
    with pytest.raises(ValueError) as excinfo:
        InstrumentRegistry.from_mapping({"binance:BTC-USDT": entry})
    assert "binance:BTC-USDT" in str(excinfo.value)
    assert message in str(excinfo.value)
