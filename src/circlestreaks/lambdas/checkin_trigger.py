"""
Circle check-in trigger Lambda for the CircleStreaks application.

Invoked by the table stream when a member checks into a circle. Check-ins are
accepted in both storage shapes:

    CIRCLE#{circleId}#CHECKIN#{date}          ENTRY#{userId}
    CIRCLE#{circleId}#CHECKIN_MEMBERS#{date}  MEMBER#{userId}

Only the checked-into circle is evaluated, and only for today's check-ins.

Functions:
    lambda_handler: Main entry point for the Lambda function
"""

from typing import Any, Dict

from ..models.events import CircleCheckInEvent
from .stream_handler import process_stream_event


def lambda_handler(
    event: Dict[str, Any], context: Any  # noqa: ARG001
) -> Dict[str, Any]:
    """
    Re-evaluate a circle's streak for today's new check-ins.

    Args:
        event: DynamoDB Stream event
        context: AWS Lambda runtime context (unused but required)

    Returns:
        Processing summary from process_stream_event
    """
    return process_stream_event(
        event,
        source="circle_check_in",
        event_type=CircleCheckInEvent,
        handler_name="on_circle_check_in",
    )
