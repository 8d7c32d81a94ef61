"""
Base classes and interfaces for trading strategies.  Strategies are
plugins driven by a host runtime: the host calls one lifecycle callback
at a time, each runs to completion, and every side effect goes through
the :class:`~botkit.context.StrategyContext` passed in.  This module
defines the common contract that all strategies must implement.
"""

from __future__ import annotations

import abc
from typing import Generic, TypeVar

from ..config import StrategyConfig
from ..context import StrategyContext
from ..models import ExchangeInstance

ConfigT = TypeVar("ConfigT", bound=StrategyConfig)


class BaseStrategy(abc.ABC, Generic[ConfigT]):
    """Abstract base class for trading strategies."""

    def __init__(self, config: ConfigT) -> None:
        self.config = config

    @property
    def strategy_id(self) -> str:
        return self.config.strategy_id

    def exchange_instance(self) -> ExchangeInstance:
        return self.config.market.exchange_instance(self.config.environment)

    def instrument_id(self) -> str:
        return self.config.market.instrument_id()

    @abc.abstractmethod
    def on_start(self, ctx: StrategyContext) -> None:
        """Load metadata, validate config and place any initial orders."""
        raise NotImplementedError

    @abc.abstractmethod
    def on_event(self, ctx: StrategyContext, event: object) -> None:
        """React to a market or order event.  Unknown kinds must be ignored."""
        raise NotImplementedError

    @abc.abstractmethod
    def on_timer(self, ctx: StrategyContext, timer_id: int) -> None:
        raise NotImplementedError

    @abc.abstractmethod
    def on_stop(self, ctx: StrategyContext) -> None:
        """Cancel outstanding orders.  No further callbacks follow."""
        raise NotImplementedError
