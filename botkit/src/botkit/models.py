"""
Domain models for order commands and market selection using Pydantic.
These models provide validation and serialization for the commands a
strategy emits towards its host and for the market selector that every
strategy configuration carries.  Prices and quantities are exact
``Decimal`` values throughout; floats never reach an order command.
"""

from __future__ import annotations

import uuid
from decimal import Decimal
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Environment(str, Enum):
    """Trading environment an exchange connection points at."""

    MAINNET = "mainnet"
    TESTNET = "testnet"


class OrderSide(str, Enum):
    BUY = "buy"
    SELL = "sell"

    def __str__(self) -> str:
        return self.value


class ExchangeInstance(BaseModel):
    """A concrete exchange connection: venue plus environment."""

    model_config = ConfigDict(frozen=True)

    exchange: str = Field(..., description="Exchange name, e.g. binance")
    environment: Environment = Field(..., description="Mainnet or testnet")

    def __str__(self) -> str:
        return f"{self.exchange}/{self.environment.value}"


class Market(BaseModel):
    """Single source of truth for exchange, instrument and asset index.

    Accepts either an object with ``exchange``, ``instrument`` and
    ``index`` keys or the compact string form ``"exchange:instrument"``
    / ``"exchange:instrument:index"``.
    """

    model_config = ConfigDict(frozen=True)

    exchange: str = Field(..., min_length=1, description="Exchange name")
    instrument: str = Field(..., min_length=1, description="Instrument symbol, e.g. BTC-USDT")
    index: int = Field(0, ge=0, description="Exchange-side asset index")

    @model_validator(mode="before")
    @classmethod
    def _parse_compact(cls, value: Any) -> Any:
        if not isinstance(value, str):
            return value
        parts = [p.strip() for p in value.split(":")]
        if len(parts) not in (2, 3) or not all(parts):
            raise ValueError("market must look like 'exchange:instrument[:index]'")
        data: dict[str, Any] = {"exchange": parts[0], "instrument": parts[1]}
        if len(parts) == 3:
            data["index"] = parts[2]
        return data

    def instrument_id(self) -> str:
        return f"{self.exchange}:{self.instrument}"

    def exchange_instance(self, environment: Environment) -> ExchangeInstance:
        return ExchangeInstance(exchange=self.exchange, environment=environment)

    def __str__(self) -> str:
        return self.instrument_id()


def new_client_id() -> str:
    """Return a fresh locally unique client order id."""
    return uuid.uuid4().hex


class PlaceOrder(BaseModel):
    """Fire-and-forget instruction to place a limit order."""

    model_config = ConfigDict(frozen=True)

    client_id: str = Field(default_factory=new_client_id, description="Id assigned by the strategy")
    exchange: ExchangeInstance
    instrument: str = Field(..., description="Instrument id, e.g. binance:BTC-USDT")
    side: OrderSide
    order_type: Literal["limit"] = "limit"
    price: Decimal = Field(..., gt=0, description="Limit price, already tick-rounded")
    qty: Decimal = Field(..., gt=0, description="Quantity in base asset, already lot-rounded")

    @classmethod
    def limit(
        cls,
        exchange: ExchangeInstance,
        instrument: str,
        side: OrderSide,
        price: Decimal,
        qty: Decimal,
    ) -> "PlaceOrder":
        return cls(exchange=exchange, instrument=instrument, side=side, price=price, qty=qty)


class CancelAll(BaseModel):
    """Instruction to cancel every open order on an exchange instance."""

    model_config = ConfigDict(frozen=True)

    exchange: ExchangeInstance
