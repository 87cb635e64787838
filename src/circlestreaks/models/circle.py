"""
Circle and streak data models for the CircleStreaks application.

This module defines the persisted circle record, the member profile fields the
engine reads, and the small value types the streak engine passes around.

Classes:
    ActivitySignal: Tri-state result of reading one activity source
    StreakTransition: Which streak rule fired for an evaluation
    StreakState: Immutable (streak, lastStreakDate) pair
    Circle: Pydantic model for a circle record
    UserProfile: Pydantic model for the circle memberships of a user
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..utils.dates import format_timestamp, is_iso_date, parse_timestamp
from .keys import CIRCLE_PREFIX, USER_PREFIX, circle_key, strip_prefix


class ActivitySignal(str, Enum):
    """
    Result of reading a single activity source for a (member, date).

    DEGRADED marks a read that failed; it counts as absent so one flaky
    source never blocks the others.
    """

    PRESENT = "present"
    ABSENT = "absent"
    DEGRADED = "degraded"

    @property
    def is_present(self) -> bool:
        return self is ActivitySignal.PRESENT


class StreakTransition(str, Enum):
    """Streak rule applied by an evaluation, in evaluation order."""

    RESET = "reset"
    UNCHANGED = "unchanged"
    CONTINUE = "continue"
    RESTART = "restart"


def _validate_streak_date(v: Optional[str]) -> str:
    if v is None or v == "":
        return ""
    if not is_iso_date(v):
        raise ValueError("lastStreakDate must be empty or a YYYY-MM-DD date")
    return v


class StreakState(BaseModel):
    """
    A circle's streak counter and the last date it was credited.

    Attributes:
        streak: Current consecutive-day count (>= 0)
        last_streak_date: Last credited date, or "" if never credited
    """

    model_config = ConfigDict(frozen=True)

    streak: int = Field(default=0, ge=0)
    last_streak_date: str = Field(default="")

    @field_validator("last_streak_date", mode="before")
    @classmethod
    def validate_last_streak_date(cls, v: Optional[str]) -> str:
        return _validate_streak_date(v)


class Circle(BaseModel):
    """
    Pydantic model representing a circle record.

    Circles are created by the circle-creation flow; this engine only reads
    them and updates the streak fields.

    Attributes:
        id: Circle identifier
        members: Unique member user ids; order carries no meaning
        streak: Current consecutive-day count
        last_streak_date: Last credited date ("" if never credited)
        updated_at: When the streak fields were last written

    Example:
        >>> circle = Circle(id="g1", members=["a", "b", "a"], streak=3,
        ...                 last_streak_date="2024-01-09")
        >>> circle.members
        ['a', 'b']
    """

    id: str = Field(..., min_length=1, description="Circle identifier")
    members: List[str] = Field(default_factory=list, description="Member user ids")
    streak: int = Field(default=0, ge=0, description="Consecutive-day streak")
    last_streak_date: str = Field(default="", description="Last credited date")
    updated_at: Optional[datetime] = Field(None, description="Last streak write")

    @field_validator("members", mode="before")
    @classmethod
    def dedupe_members(cls, v: Any) -> List[str]:
        """
        Collapse duplicate and blank member ids, keeping first occurrences.
        """
        if v is None:
            return []
        if isinstance(v, (set, frozenset)):
            v = sorted(v)
        return list(dict.fromkeys(str(m) for m in v if m))

    @field_validator("last_streak_date", mode="before")
    @classmethod
    def validate_last_streak_date(cls, v: Optional[str]) -> str:
        return _validate_streak_date(v)

    @property
    def streak_state(self) -> StreakState:
        return StreakState(streak=self.streak, last_streak_date=self.last_streak_date)

    def to_dynamodb_item(self) -> Dict[str, Any]:
        """
        Convert the circle to its DynamoDB item, using the persisted field names.
        """
        item: Dict[str, Any] = {
            **circle_key(self.id),
            "members": list(self.members),
            "streak": self.streak,
            "lastStreakDate": self.last_streak_date,
        }
        if self.updated_at is not None:
            item["updatedAt"] = format_timestamp(self.updated_at)
        return item

    @classmethod
    def from_dynamodb_item(cls, item: Dict[str, Any]) -> "Circle":
        """
        Create a Circle from a DynamoDB item.

        Missing streak fields take their creation defaults and DynamoDB
        ``Decimal`` numbers are converted to ``int``.

        Raises:
            ValueError: If the item is not a circle record
        """
        circle_id = strip_prefix(item.get("pk", ""), CIRCLE_PREFIX)

        streak = item.get("streak") or 0
        if isinstance(streak, Decimal):
            streak = int(streak)

        updated_at = item.get("updatedAt")
        if isinstance(updated_at, str) and updated_at:
            updated_at = parse_timestamp(updated_at)
        else:
            updated_at = None

        return cls(
            id=circle_id,
            members=item.get("members") or [],
            streak=streak,
            last_streak_date=item.get("lastStreakDate") or "",
            updated_at=updated_at,
        )


class UserProfile(BaseModel):
    """
    The parts of a user profile the streak engine reads.

    Attributes:
        id: User identifier
        circles: Ids of the circles the user belongs to
    """

    id: str = Field(..., min_length=1)
    circles: List[str] = Field(default_factory=list)

    @field_validator("circles", mode="before")
    @classmethod
    def dedupe_circles(cls, v: Any) -> List[str]:
        if v is None:
            return []
        if isinstance(v, (set, frozenset)):
            v = sorted(v)
        return list(dict.fromkeys(str(c) for c in v if c))

    @classmethod
    def from_dynamodb_item(cls, item: Dict[str, Any]) -> "UserProfile":
        return cls(
            id=strip_prefix(item.get("pk", ""), USER_PREFIX),
            circles=item.get("circles") or [],
        )
