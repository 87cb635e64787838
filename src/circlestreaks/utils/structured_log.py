"""
Structured logging helpers for the CircleStreaks Lambda functions.

Lambda stdout is collected by CloudWatch Logs, so every diagnostic is printed
as a single JSON line carrying an ``event`` name, a ``level`` and a UTC
``timestamp``. Keeping one line per event makes the output queryable with
CloudWatch Logs Insights.

Functions:
    log_event: Print a structured log line
    log_error: Print a structured error line, optionally with a traceback
"""

import json
import os
import traceback
from datetime import datetime, timezone
from typing import Any

_LEVELS = {"DEBUG": 10, "INFO": 20, "WARNING": 30, "ERROR": 40}


def _enabled(level: str) -> bool:
    threshold = _LEVELS.get(os.getenv("LOG_LEVEL", "INFO").upper(), 20)
    return _LEVELS.get(level, 20) >= threshold


def log_event(event: str, level: str = "INFO", **fields: Any) -> None:
    """
    Print a structured log line.

    Args:
        event: Upper-case event name, e.g. ``STREAK_UPDATED``
        level: One of DEBUG, INFO, WARNING, ERROR
        **fields: Additional camelCase context fields

    Example:
        >>> log_event("STREAK_UPDATED", circleId="c1", streak=4)
        {"event": "STREAK_UPDATED", "level": "INFO", ..., "circleId": "c1", "streak": 4}
    """
    if not _enabled(level):
        return

    log_data = {
        "event": event,
        "level": level,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
    log_data.update(fields)

    try:
        print(json.dumps(log_data, default=str))
    except (TypeError, ValueError) as e:
        print(f"Error logging event {event}: {e}")


def log_error(
    event: str, error: BaseException, exc_info: bool = False, **fields: Any
) -> None:
    """
    Print a structured error line for a caught exception.

    Args:
        event: Upper-case event name describing where the error happened
        error: The caught exception
        exc_info: Whether to attach the formatted traceback
        **fields: Additional context fields
    """
    details = {
        "errorType": type(error).__name__,
        "errorMessage": str(error),
    }
    if exc_info:
        details["traceback"] = traceback.format_exc()

    log_event(event, level="ERROR", **details, **fields)
