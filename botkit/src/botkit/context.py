"""
Host interface consumed by strategies.

A strategy never talks to an exchange, a clock or a log handler
directly; it receives a :class:`StrategyContext` in every lifecycle
callback and issues everything through it.  All calls are synchronous
and fire-and-forget: their effects (fills, cancellations, rejections)
come back later as events on ``on_event``.
"""

from __future__ import annotations

import abc
from typing import Optional

from .instruments import InstrumentMeta
from .models import CancelAll, PlaceOrder


class StrategyContext(abc.ABC):
    """Abstract host runtime as seen from inside a strategy callback."""

    @abc.abstractmethod
    def place_order(self, order: PlaceOrder) -> None:
        raise NotImplementedError

    @abc.abstractmethod
    def cancel_all(self, command: CancelAll) -> None:
        raise NotImplementedError

    @abc.abstractmethod
    def instrument_meta(self, instrument_id: str) -> Optional[InstrumentMeta]:
        """Return rounding metadata for an instrument, or ``None`` if unknown."""
        raise NotImplementedError

    @abc.abstractmethod
    def stop_strategy(self, strategy_id: str, reason: str) -> None:
        """Ask the host to terminate the strategy.  Used for fatal conditions."""
        raise NotImplementedError

    @abc.abstractmethod
    def log_info(self, message: str) -> None:
        raise NotImplementedError

    @abc.abstractmethod
    def log_warn(self, message: str) -> None:
        raise NotImplementedError

    @abc.abstractmethod
    def log_error(self, message: str) -> None:
        raise NotImplementedError

    @abc.abstractmethod
    def now_ms(self) -> int:
        """Wall-clock time in milliseconds."""
        raise NotImplementedError

    @abc.abstractmethod
    def set_interval(self, seconds: float) -> int:
        """Register a recurring timer and return its id for ``on_timer``."""
        raise NotImplementedError
