"""Shared utility modules.

- timing: Timer context manager for measuring operations
- logging: JSON-formatted logging utilities
"""

from .timing import Timer
from .logging import JSONFormatter, setup_logging, log_exchange, log_summary

__all__ = [
    "Timer",
    "JSONFormatter",
    "setup_logging",
    "log_exchange",
    "log_summary",
]
