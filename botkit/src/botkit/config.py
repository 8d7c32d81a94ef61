"""
Strategy configuration.

Each strategy variant defines an immutable Pydantic model deriving from
:class:`StrategyConfig`.  Pydantic handles parsing (types, required
fields, the compact market string); :meth:`StrategyConfig.validate`
handles the semantic rules and returns every violation as a
human-readable message instead of raising, so a strategy can report the
full list to its host before refusing to trade.

Config documents are JSON files of the form::

    {
      "strategy": {
        "type": "simple",
        "strategy_id": "btc-simple",
        "environment": "testnet",
        "market": "binance:BTC-USDT",
        "buy_price": "100",
        "sell_price": "110",
        "order_size": "0.01"
      },
      "instruments": {
        "binance:BTC-USDT": {"tick_size": "0.01", "lot_size": "0.001"}
      }
    }

Process-level settings are read from environment variables:

* ``LOG_LEVEL`` – logging level for the entry point (default ``INFO``)
* ``PROMETHEUS_PORT`` – port for the metrics endpoint (disabled if unset)
* ``PAPER_TRADING`` – simulate fills for placed orders (default ``true``)
* ``STRATEGY_FILL_DELAY`` – seconds before a simulated fill (default ``0.1``)
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, List, Union

from pydantic import BaseModel, ConfigDict, Field

from .models import Environment, Market


class ConfigError(ValueError):
    """Raised when a config document cannot be loaded or parsed."""


class StrategyConfig(BaseModel):
    """Fields shared by every strategy configuration."""

    model_config = ConfigDict(frozen=True)

    strategy_id: str = Field(..., min_length=1, description="Unique strategy identifier, e.g. btc-simple")
    environment: Environment = Field(..., description="Trading environment (mainnet or testnet)")
    market: Market = Field(..., description="Exchange, instrument and index in one selector")

    def validate(self) -> List[str]:  # type: ignore[override]
        """Return the list of semantic errors; empty means valid."""
        return []


def load_document(path: Union[str, Path]) -> Dict[str, Any]:
    """Read a JSON config document with ``strategy`` and ``instruments`` sections."""
    p = Path(path)
    try:
        text = p.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Cannot read config file {p}: {exc}") from exc
    try:
        doc = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Config file {p} is not valid JSON: {exc}") from exc
    if not isinstance(doc, dict):
        raise ConfigError(f"Config file {p} must contain a JSON object")
    if not isinstance(doc.get("strategy"), dict):
        raise ConfigError(f"Config file {p} is missing the 'strategy' section")
    instruments = doc.setdefault("instruments", {})
    if not isinstance(instruments, dict):
        raise ConfigError(f"Config file {p}: 'instruments' must be an object")
    return doc


def env_flag(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() not in ("false", "0", "no", "off", "")


def env_float(name: str, default: float) -> float:
    value = os.environ.get(name)
    if value is None or not value.strip():
        return default
    try:
        return float(value)
    except ValueError as exc:
        raise ConfigError(f"{name} must be a number, got {value!r}") from exc


def env_int(name: str) -> int | None:
    value = os.environ.get(name)
    if value is None or not value.strip():
        return None
    try:
        return int(value)
    except ValueError as exc:
        raise ConfigError(f"{name} must be an integer, got {value!r}") from exc
