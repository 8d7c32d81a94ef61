"""
Instrument metadata and rounding rules.

Every order a strategy emits must respect the instrument's tick size
(price increment) and lot size (quantity increment).  The host owns
this metadata; strategies fetch it once through
``StrategyContext.instrument_meta`` when they start and keep it for the
rest of the run.  :class:`InstrumentRegistry` is the read-only lookup
the paper host serves that call from.

Increments must be positive finite decimals; metadata that violates this
is rejected when it is built, never at rounding time.  ``min_qty`` is the
smallest quantity the venue accepts for an order.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_DOWN, ROUND_HALF_UP, Decimal
from typing import Any, Dict, Mapping, Optional


def _to_decimal(value: Any, name: str) -> Decimal:
    try:
        return Decimal(str(value).strip())
    except Exception as exc:
        raise ValueError(f"{name} must be a decimal number, got {value!r}") from exc


def _require_positive(value: Decimal, name: str) -> None:
    # NaN compares by raising, so finiteness is checked first.
    if not value.is_finite() or value <= 0:
        raise ValueError(f"{name} must be a positive finite number, got {value}")


def trim_to_sig_figs(value: Decimal, sig_figs: int) -> Decimal:
    """Truncate ``value`` to ``sig_figs`` significant figures.

    Upstream float/decimal conversions can leave long noisy tails such
    as ``101.23000000000001``; trimming first keeps tick rounding from
    carrying that noise into an order price.
    """
    if sig_figs <= 0:
        raise ValueError("sig_figs must be positive")
    if not value.is_finite() or value.is_zero():
        return value
    quantum = Decimal(1).scaleb(value.adjusted() - sig_figs + 1)
    return value.quantize(quantum, rounding=ROUND_DOWN)


@dataclass(frozen=True)
class InstrumentMeta:
    tick_size: Decimal
    lot_size: Decimal
    min_qty: Optional[Decimal] = None

    def __post_init__(self) -> None:
        _require_positive(self.tick_size, "tick_size")
        _require_positive(self.lot_size, "lot_size")
        if self.min_qty is not None:
            _require_positive(self.min_qty, "min_qty")

    def round_price(self, price: Decimal) -> Decimal:
        """Round a price to the nearest tick (half up)."""
        # int() keeps the result at the tick's exponent (100.0, not 1.0E+2)
        steps = int((price / self.tick_size).to_integral_value(rounding=ROUND_HALF_UP))
        return steps * self.tick_size

    def round_qty(self, qty: Decimal) -> Decimal:
        """Round a quantity to the nearest lot (half up)."""
        steps = int((qty / self.lot_size).to_integral_value(rounding=ROUND_HALF_UP))
        return steps * self.lot_size

    def trunc_qty(self, qty: Decimal) -> Decimal:
        """Round a quantity down to a whole number of lots.

        Used for sells so a sell never asks for more than was bought.
        """
        return int(qty // self.lot_size) * self.lot_size

    def tradable_qty(self, qty: Decimal) -> bool:
        """True if ``qty`` is positive and not below ``min_qty``."""
        if qty <= 0:
            return False
        return self.min_qty is None or qty >= self.min_qty

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "InstrumentMeta":
        if "tick_size" not in data or "lot_size" not in data:
            raise ValueError("instrument metadata requires 'tick_size' and 'lot_size'")
        min_qty = data.get("min_qty")
        return cls(
            tick_size=_to_decimal(data["tick_size"], "tick_size"),
            lot_size=_to_decimal(data["lot_size"], "lot_size"),
            min_qty=_to_decimal(min_qty, "min_qty") if min_qty is not None else None,
        )


class InstrumentRegistry:
    """Read-only map of instrument id (``exchange:symbol``) to metadata."""

    def __init__(self, instruments: Optional[Mapping[str, InstrumentMeta]] = None) -> None:
        self._instruments: Dict[str, InstrumentMeta] = dict(instruments or {})

    def get(self, instrument_id: str) -> Optional[InstrumentMeta]:
        return self._instruments.get(instrument_id)

    def __contains__(self, instrument_id: object) -> bool:
        return instrument_id in self._instruments

    def __len__(self) -> int:
        return len(self._instruments)

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Mapping[str, Any]]) -> "InstrumentRegistry":
        """Build a registry from the ``instruments`` section of a config document.

        Raises ``ValueError`` naming the offending instrument when an
        entry is malformed.
        """
        instruments: Dict[str, InstrumentMeta] = {}
        for instrument_id, data in raw.items():
            if not isinstance(data, Mapping):
                raise ValueError(f"instrument {instrument_id!r}: expected an object")
            try:
                instruments[instrument_id] = InstrumentMeta.from_mapping(data)
            except ValueError as exc:
                raise ValueError(f"instrument {instrument_id!r}: {exc}") from exc
        return cls(instruments)
