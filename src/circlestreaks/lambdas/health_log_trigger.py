"""
Health log trigger Lambda for the CircleStreaks application.

Invoked by the table stream when an entry is added to a user's daily health
log (``LOG#{userId}#{date}`` / ``ENTRY#...``). Entries for any date other than
today are ignored.

Functions:
    lambda_handler: Main entry point for the Lambda function
"""

from typing import Any, Dict

from ..models.events import HealthLogEntryEvent
from .stream_handler import process_stream_event


def lambda_handler(
    event: Dict[str, Any], context: Any  # noqa: ARG001
) -> Dict[str, Any]:
    """Re-evaluate circle streaks for today's new health-log entries."""
    return process_stream_event(
        event,
        source="health_log",
        event_type=HealthLogEntryEvent,
        handler_name="on_health_log_entry",
    )
