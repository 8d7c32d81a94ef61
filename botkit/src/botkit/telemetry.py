"""
Telemetry for the strategy host.

This module defines the Prometheus metrics the paper host and the
runner update as strategies emit commands and receive events.  The
metrics are module-level so they are registered exactly once per
process; :func:`start_metrics_server` exposes them over HTTP.

Metrics
-------

* ``botkit_orders_placed_total{strategy,side}`` – order commands emitted.
* ``botkit_cancel_all_total{strategy}`` – cancel-all commands emitted.
* ``botkit_stop_requests_total{strategy}`` – fatal stop requests.
* ``botkit_events_dispatched_total{kind}`` – callbacks dispatched by the runner.
"""

from __future__ import annotations

import logging

from prometheus_client import Counter, start_http_server

logger = logging.getLogger(__name__)

ORDERS_PLACED = Counter(
    "botkit_orders_placed",
    "Order commands emitted by strategies",
    labelnames=["strategy", "side"],
)
CANCEL_ALL = Counter(
    "botkit_cancel_all",
    "Cancel-all commands emitted by strategies",
    labelnames=["strategy"],
)
STOP_REQUESTS = Counter(
    "botkit_stop_requests",
    "Strategies that requested their own termination",
    labelnames=["strategy"],
)
EVENTS_DISPATCHED = Counter(
    "botkit_events_dispatched",
    "Events and timer ticks dispatched to strategy callbacks",
    labelnames=["kind"],
)


def start_metrics_server(port: int) -> bool:
    """Start the Prometheus HTTP endpoint; return False if it could not bind."""
    try:
        start_http_server(port)
    except Exception as exc:
        logger.warning("Failed to start Prometheus server on port %d: %s", port, exc)
        return False
    logger.info("Prometheus metrics exposed on port %d", port)
    return True
