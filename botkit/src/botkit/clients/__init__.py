"""
Client utilities for hosting strategies.

This package currently provides the paper host context, which records
strategy commands and simulates exchange responses.  Live exchange
clients should live here.
"""

from .paper_exchange import PaperContext  # noqa: F401
