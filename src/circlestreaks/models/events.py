"""
Trigger event models for the CircleStreaks application.

The streak triggers are fed by a DynamoDB Stream on the application table.
Each INSERT record carries the new item; these models validate that item and
expose the fields the trigger adapters need.

Classes:
    HabitCompletionEvent: A member completed a habit
    HealthLogEntryEvent: A member logged a health entry for a date
    CircleCheckInEvent: A member checked into a circle for a date

Functions:
    new_image_from_record: Extract and deserialize a stream record's NewImage
"""

from datetime import datetime
from typing import Annotated, Any, Dict, Optional

from boto3.dynamodb.types import TypeDeserializer
from pydantic import AfterValidator, BaseModel, Field, ValidationError

from ..utils.dates import is_iso_date, parse_timestamp
from .keys import (
    CHECKIN_SEGMENT,
    CIRCLE_PREFIX,
    COMPLETION_PREFIX,
    ENTRY_PREFIX,
    LEGACY_CHECKIN_SEGMENT,
    LOG_PREFIX,
    MEMBER_PREFIX,
    USER_PREFIX,
    strip_prefix,
)

_deserializer = TypeDeserializer()


def new_image_from_record(record: Dict[str, Any]) -> Dict[str, Any]:
    """
    Extract the new item image from a DynamoDB Stream record.

    Args:
        record: One entry of the stream event's ``Records`` list

    Returns:
        The item as plain Python values

    Raises:
        ValueError: If the record has no NewImage or it cannot be deserialized
    """
    try:
        image = record["dynamodb"]["NewImage"]
        return {key: _deserializer.deserialize(value) for key, value in image.items()}
    except (KeyError, TypeError, AttributeError) as e:
        raise ValueError(f"Stream record has no readable NewImage: {e}") from e


def _validate_date(v: str) -> str:
    if not is_iso_date(v):
        raise ValueError("date must be a YYYY-MM-DD calendar date")
    return v


IsoDate = Annotated[str, AfterValidator(_validate_date)]


class HabitCompletionEvent(BaseModel):
    """
    A habit completion written under a member.

    Attributes:
        member_id: User who completed the habit
        habit_id: Completed habit
        completion_id: Identifier of the completion record
        completed_at: When the habit was completed (UTC)
    """

    member_id: str = Field(..., min_length=1)
    habit_id: str = Field(default="")
    completion_id: str = Field(..., min_length=1)
    completed_at: datetime

    @staticmethod
    def matches(item: Dict[str, Any]) -> bool:
        return str(item.get("pk", "")).startswith(USER_PREFIX) and str(
            item.get("sk", "")
        ).startswith(COMPLETION_PREFIX)

    @classmethod
    def from_item(cls, item: Dict[str, Any]) -> "HabitCompletionEvent":
        """
        Build the event from a completion item.

        Raises:
            ValueError: If the item is not a habit completion
        """
        try:
            member_id = strip_prefix(item.get("pk", ""), USER_PREFIX)
            remainder = strip_prefix(item.get("sk", ""), COMPLETION_PREFIX)
            stamped_at, _, completion_id = remainder.rpartition("#")
            completed_at = item.get("completedAt") or stamped_at

            return cls(
                member_id=member_id,
                habit_id=item.get("habitId", ""),
                completion_id=completion_id,
                completed_at=parse_timestamp(completed_at),
            )
        except (ValidationError, AttributeError, TypeError) as e:
            raise ValueError(f"Invalid habit completion item: {e}") from e


class HealthLogEntryEvent(BaseModel):
    """
    A health-log entry under a member's daily log.

    Attributes:
        member_id: User who logged the entry
        date: Calendar date of the daily log
        entry_id: Identifier of the entry
    """

    member_id: str = Field(..., min_length=1)
    date: IsoDate
    entry_id: str = Field(..., min_length=1)

    @staticmethod
    def matches(item: Dict[str, Any]) -> bool:
        return str(item.get("pk", "")).startswith(LOG_PREFIX)

    @classmethod
    def from_item(cls, item: Dict[str, Any]) -> "HealthLogEntryEvent":
        """
        Build the event from a health-log entry item.

        Raises:
            ValueError: If the item is not a health-log entry
        """
        try:
            remainder = strip_prefix(item.get("pk", ""), LOG_PREFIX)
            member_id, _, date = remainder.rpartition("#")

            return cls(
                member_id=member_id,
                date=date,
                entry_id=strip_prefix(item.get("sk", ""), ENTRY_PREFIX),
            )
        except ValidationError as e:
            raise ValueError(f"Invalid health log item: {e}") from e


class CircleCheckInEvent(BaseModel):
    """
    A member's check-in to a circle for a date.

    Attributes:
        circle_id: Circle checked into
        date: Calendar date of the check-in
        member_id: User who checked in
        energy_level: Self-reported energy on a 1-10 scale, if given
        legacy_shape: Whether the record used the legacy storage shape
    """

    circle_id: str = Field(..., min_length=1)
    date: IsoDate
    member_id: str = Field(..., min_length=1)
    energy_level: Optional[int] = Field(None, ge=1, le=10)
    legacy_shape: bool = False

    @staticmethod
    def matches(item: Dict[str, Any]) -> bool:
        pk = str(item.get("pk", ""))
        return pk.startswith(CIRCLE_PREFIX) and (
            CHECKIN_SEGMENT in pk or LEGACY_CHECKIN_SEGMENT in pk
        )

    @classmethod
    def from_item(cls, item: Dict[str, Any]) -> "CircleCheckInEvent":
        """
        Build the event from a check-in item in either storage shape.

        Raises:
            ValueError: If the item is not a check-in
        """
        pk = item.get("pk", "")
        sk = item.get("sk", "")
        try:
            remainder = strip_prefix(pk, CIRCLE_PREFIX)
            if LEGACY_CHECKIN_SEGMENT in remainder:
                circle_id, _, date = remainder.rpartition(LEGACY_CHECKIN_SEGMENT)
                member_id = strip_prefix(sk, MEMBER_PREFIX)
                legacy = True
            elif CHECKIN_SEGMENT in remainder:
                circle_id, _, date = remainder.rpartition(CHECKIN_SEGMENT)
                member_id = strip_prefix(sk, ENTRY_PREFIX)
                legacy = False
            else:
                raise ValueError(f"Key {pk!r} is not a check-in key")

            energy = item.get("energy")
            return cls(
                circle_id=circle_id,
                date=date,
                member_id=member_id,
                energy_level=int(energy) if energy is not None else None,
                legacy_shape=legacy,
            )
        except (ValidationError, TypeError) as e:
            raise ValueError(f"Invalid check-in item: {e}") from e
