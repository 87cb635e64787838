"""
Utility functions and helpers for the CircleStreaks application.

This module contains shared helpers used across the Lambda handlers and
services: calendar date arithmetic and structured JSON logging.
"""

from .dates import day_bounds, format_timestamp, is_iso_date, today_and_yesterday
from .structured_log import log_error, log_event

__all__ = [
    "day_bounds",
    "format_timestamp",
    "is_iso_date",
    "today_and_yesterday",
    "log_error",
    "log_event",
]
