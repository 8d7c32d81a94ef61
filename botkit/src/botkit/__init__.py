"""
Event-driven trading strategy plugins and a paper host to run them.

A strategy is an order-lifecycle state machine: the host calls
``on_start``, ``on_event``, ``on_timer`` and ``on_stop`` one at a time,
and the strategy answers by issuing order and cancel commands through
the :class:`~botkit.context.StrategyContext` it is handed.  Strategies
keep at most one order outstanding and recover from cancellations and
rejections by starting their cycle over.

Subpackages:

* ``strategies`` – the strategy interface, the variants and the registry
* ``clients`` – the paper host context
* ``services`` – the in-memory event bus
"""

from .config import ConfigError, StrategyConfig  # noqa: F401
from .context import StrategyContext  # noqa: F401
from .instruments import InstrumentMeta, InstrumentRegistry  # noqa: F401
from .models import CancelAll, Environment, Market, OrderSide, PlaceOrder  # noqa: F401
