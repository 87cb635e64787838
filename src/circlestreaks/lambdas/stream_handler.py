"""
Shared DynamoDB Stream processing for the CircleStreaks trigger Lambdas.

Each trigger Lambda is subscribed to the application table's stream with the
NEW_IMAGE view and filtered to one record kind. This module walks the stream
batch, turns INSERT records into typed events and hands them to the trigger
service. Per-record problems are logged and skipped; the handler always
returns normally so the stream never redelivers a batch because of a
downstream streak problem.

Functions:
    get_trigger_service: Container-scoped service wiring
    process_stream_event: Walk a stream batch for one event kind
"""

import os
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Type

from ..models.events import new_image_from_record
from ..services.dynamodb_service import DynamoDBService
from ..services.streak_service import StreakUpdateCoordinator
from ..services.trigger_service import StreakTriggerService
from ..utils.structured_log import log_error, log_event

ENVIRONMENT = os.getenv("ENVIRONMENT", "dev")

_trigger_service: Optional[StreakTriggerService] = None


def get_trigger_service() -> StreakTriggerService:
    """
    Build the store handle and services once per Lambda container.
    """
    global _trigger_service
    if _trigger_service is None:
        db_service = DynamoDBService()
        coordinator = StreakUpdateCoordinator(db_service)
        _trigger_service = StreakTriggerService(db_service, coordinator)
        log_event(
            "STREAK_TRIGGER_INITIALIZED",
            environment=ENVIRONMENT,
            tableName=db_service.table_name,
        )
    return _trigger_service


def process_stream_event(
    event: Dict[str, Any],
    source: str,
    event_type: Type[Any],
    handler_name: str,
) -> Dict[str, Any]:
    """
    Process one DynamoDB Stream batch for a single event kind.

    Args:
        event: Lambda event with a ``Records`` list of stream records
        source: Event source name used in logs and the response
        event_type: Event model; records whose item it does not match are
            skipped, and items it matches but cannot parse are logged
        handler_name: StreakTriggerService method receiving the typed event

    Returns:
        Summary dictionary:
        {
            "statusCode": 200|500,
            "source": "habit_completion",
            "processed": 1,
            "skipped": 0,
            "evaluations": [{"circleId": "...", "transition": "continue", ...}],
            "processingTime": 12.5
        }
    """
    start_time = datetime.now(timezone.utc)
    response: Dict[str, Any] = {
        "statusCode": 200,
        "source": source,
        "processed": 0,
        "skipped": 0,
        "evaluations": [],
        "processingTime": None,
    }

    records = event.get("Records") or []
    log_event("STREAK_TRIGGER_RECEIVED", source=source, recordsCount=len(records))

    try:
        trigger_service = get_trigger_service()
    except Exception as e:
        log_error("SERVICE_INITIALIZATION_ERROR", e, source=source)
        response["statusCode"] = 500
        response["skipped"] = len(records)
        return _finish(response, start_time)

    handle = getattr(trigger_service, handler_name)

    for record in records:
        if record.get("eventName") != "INSERT":
            response["skipped"] += 1
            continue

        try:
            item = new_image_from_record(record)
            if not event_type.matches(item):
                response["skipped"] += 1
                continue
            trigger_event = event_type.from_item(item)
        except ValueError as e:
            log_error(
                "STREAK_TRIGGER_RECORD_INVALID",
                e,
                source=source,
                eventId=record.get("eventID"),
            )
            response["skipped"] += 1
            continue

        try:
            response["evaluations"].extend(handle(trigger_event))
            response["processed"] += 1
        except Exception as e:
            log_error(
                "STREAK_TRIGGER_PROCESSING_ERROR",
                e,
                exc_info=True,
                source=source,
                eventId=record.get("eventID"),
            )
            response["skipped"] += 1

    return _finish(response, start_time)


def _finish(response: Dict[str, Any], start_time: datetime) -> Dict[str, Any]:
    processing_time = (datetime.now(timezone.utc) - start_time).total_seconds() * 1000
    response["processingTime"] = round(processing_time, 2)

    log_event(
        "STREAK_TRIGGER_COMPLETED",
        source=response["source"],
        statusCode=response["statusCode"],
        processed=response["processed"],
        skipped=response["skipped"],
        evaluations=len(response["evaluations"]),
        processingTimeMs=response["processingTime"],
    )
    return response
