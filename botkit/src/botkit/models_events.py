"""Event schema definitions and normalisation helpers.

This module defines the typed events a host runtime delivers to a
strategy's ``on_event`` callback.  Every event is a Pydantic model
carrying a literal ``kind`` tag; together they form the
:data:`Event` discriminated union.  Strategies test only for the kinds
they care about and treat every other kind as a no-op, so new event
kinds can be added here without touching existing strategies.

Order events carry the ``client_id`` the strategy assigned when it
built the :class:`~botkit.models.PlaceOrder` command, which is how a
strategy correlates an event with its outstanding order.

:func:`normalize_event` turns a raw dictionary (for example a message
taken off an event bus) into one of these models.  It raises
:class:`ValueError` when the payload is missing required keys or names
an unknown kind.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from .models import OrderSide


class _EventModel(BaseModel):
    model_config = ConfigDict(frozen=True)


class Quote(_EventModel):
    """Top-of-book update for an instrument."""

    kind: Literal["quote"] = "quote"
    instrument: str
    bid: Decimal
    ask: Decimal

    @property
    def mid(self) -> Decimal:
        return (self.bid + self.ask) / 2


class Trade(_EventModel):
    """Public trade print."""

    kind: Literal["trade"] = "trade"
    instrument: str
    price: Decimal
    qty: Decimal


class OrderAccepted(_EventModel):
    kind: Literal["order_accepted"] = "order_accepted"
    client_id: str
    exchange_order_id: Optional[str] = None


class OrderFilled(_EventModel):
    """A (possibly partial) fill on an order."""

    kind: Literal["order_filled"] = "order_filled"
    client_id: str
    side: OrderSide
    price: Decimal
    qty: Decimal


class OrderCompleted(_EventModel):
    """Terminal event: the order is fully filled."""

    kind: Literal["order_completed"] = "order_completed"
    client_id: str
    filled_qty: Decimal
    avg_fill_px: Optional[Decimal] = None


class OrderCanceled(_EventModel):
    kind: Literal["order_canceled"] = "order_canceled"
    client_id: str


class OrderRejected(_EventModel):
    kind: Literal["order_rejected"] = "order_rejected"
    client_id: str
    reason: str = ""


class ExchangeStateChanged(_EventModel):
    """Connectivity / trading state of an exchange instance changed."""

    kind: Literal["exchange_state_changed"] = "exchange_state_changed"
    exchange: str
    old_state: str
    new_state: str
    reason: str = ""


Event = Annotated[
    Union[
        Quote,
        Trade,
        OrderAccepted,
        OrderFilled,
        OrderCompleted,
        OrderCanceled,
        OrderRejected,
        ExchangeStateChanged,
    ],
    Field(discriminator="kind"),
]

# Order events that end an order's life on the host side.
TERMINAL_ORDER_EVENTS = (OrderCompleted, OrderCanceled, OrderRejected)

_event_adapter: TypeAdapter[Any] = TypeAdapter(Event)


def normalize_event(msg: Any) -> Any:
    """Normalise an arbitrary event message into an :data:`Event` model.

    Parameters
    ----------
    msg : Any
        Either an already-built event model (returned unchanged) or a
        mapping with a ``kind`` key and the fields of that kind.
        Numeric values may be strings, ints or floats; they are
        coerced to ``Decimal``.

    Returns
    -------
    Event
        The matching event model.

    Raises
    ------
    ValueError
        If the message is not a mapping, has no ``kind``, names an
        unknown kind or lacks required fields.
    """
    if isinstance(msg, _EventModel):
        return msg
    if not isinstance(msg, dict) or "kind" not in msg:
        raise ValueError("Event message must be a mapping with a 'kind' key")
    try:
        return _event_adapter.validate_python(msg)
    except ValidationError as exc:
        raise ValueError(f"Invalid {msg.get('kind')!r} event: {exc}") from exc
