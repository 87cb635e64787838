"""
Habit completion trigger Lambda for the CircleStreaks application.

Invoked by the table stream when a habit completion is written under a user
(``USER#{userId}`` / ``COMPLETION#...``). Every circle the user belongs to is
re-evaluated; completions are not date-guarded.

Functions:
    lambda_handler: Main entry point for the Lambda function
"""

from typing import Any, Dict

from ..models.events import HabitCompletionEvent
from .stream_handler import process_stream_event


def lambda_handler(
    event: Dict[str, Any], context: Any  # noqa: ARG001
) -> Dict[str, Any]:
    """
    Re-evaluate circle streaks for newly created habit completions.

    Args:
        event: DynamoDB Stream event
        context: AWS Lambda runtime context (unused but required)

    Returns:
        Processing summary from process_stream_event
    """
    return process_stream_event(
        event,
        source="habit_completion",
        event_type=HabitCompletionEvent,
        handler_name="on_habit_completion",
    )
