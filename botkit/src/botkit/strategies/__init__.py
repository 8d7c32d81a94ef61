"""
Strategy modules for the trading platform.

Each strategy is a :class:`~botkit.strategies.base.BaseStrategy`
subclass paired with a Pydantic config model.  Hosts never name a
concrete class: they pass the ``strategy`` section of a config document
to :func:`build_strategy`, whose ``type`` key selects the variant from
:data:`STRATEGY_TYPES`.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Tuple, Type

from pydantic import ValidationError

from ..config import ConfigError, StrategyConfig
from .base import BaseStrategy
from .quoting_strategy import QuotingConfig, QuotingStrategy
from .simple_strategy import SimpleConfig, SimpleStrategy

STRATEGY_TYPES: Dict[str, Tuple[Type[StrategyConfig], Type[BaseStrategy]]] = {
    "simple": (SimpleConfig, SimpleStrategy),
    "quoting": (QuotingConfig, QuotingStrategy),
}


def build_strategy(section: Mapping[str, Any]) -> BaseStrategy:
    """Construct the strategy described by a config ``strategy`` section.

    Raises :class:`~botkit.config.ConfigError` for an unknown ``type`` or
    when the section does not parse into the variant's config model.
    Semantic validation is left to the strategy's ``on_start``.
    """
    data = dict(section)
    strategy_type = data.pop("type", None)
    if strategy_type not in STRATEGY_TYPES:
        known = ", ".join(sorted(STRATEGY_TYPES))
        raise ConfigError(f"Unknown strategy type {strategy_type!r} (expected one of: {known})")
    config_cls, strategy_cls = STRATEGY_TYPES[strategy_type]
    try:
        config = config_cls.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid {strategy_type!r} strategy config: {exc}") from exc
    return strategy_cls(config)


__all__ = [
    "BaseStrategy",
    "QuotingConfig",
    "QuotingStrategy",
    "STRATEGY_TYPES",
    "SimpleConfig",
    "SimpleStrategy",
    "build_strategy",
]
