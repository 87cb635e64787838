"""
Single-table key layout for the CircleStreaks DynamoDB table.

Every record kind shares one table keyed by a string partition key ``pk`` and
a string sort key ``sk``. The builders here are the only place the layout is
spelled out; services and stream parsers both go through them.

    Circle                   CIRCLE#{circleId}                        META
    User profile             USER#{userId}                            PROFILE
    Habit completion         USER#{userId}                            COMPLETION#{completedAt}#{completionId}
    Health-log entry         LOG#{userId}#{date}                      ENTRY#{entryId}
    Check-in (current)       CIRCLE#{circleId}#CHECKIN#{date}         ENTRY#{userId}
    Check-in (legacy)        CIRCLE#{circleId}#CHECKIN_MEMBERS#{date} MEMBER#{userId}
"""

from typing import Dict, Tuple

from ..utils.dates import format_timestamp, parse_timestamp

CIRCLE_PREFIX = "CIRCLE#"
USER_PREFIX = "USER#"
LOG_PREFIX = "LOG#"
COMPLETION_PREFIX = "COMPLETION#"
ENTRY_PREFIX = "ENTRY#"
MEMBER_PREFIX = "MEMBER#"

CIRCLE_SK = "META"
PROFILE_SK = "PROFILE"

CHECKIN_SEGMENT = "#CHECKIN#"
LEGACY_CHECKIN_SEGMENT = "#CHECKIN_MEMBERS#"

# Sorts after every character used in completion ids.
_RANGE_CEILING = "~"


def circle_key(circle_id: str) -> Dict[str, str]:
    return {"pk": f"{CIRCLE_PREFIX}{circle_id}", "sk": CIRCLE_SK}


def user_pk(user_id: str) -> str:
    return f"{USER_PREFIX}{user_id}"


def profile_key(user_id: str) -> Dict[str, str]:
    return {"pk": user_pk(user_id), "sk": PROFILE_SK}


def completion_key(user_id: str, completed_at: str, completion_id: str) -> Dict[str, str]:
    """
    Key for a completion, with the stamp normalized to UTC milliseconds.

    Day range queries compare sort keys as strings, so ``...T23:59:59Z`` or an
    offset stamp would fall outside the day it belongs to.

    Raises:
        ValueError: If completed_at is not an ISO-8601 timestamp
    """
    stamp = format_timestamp(parse_timestamp(completed_at))
    return {
        "pk": user_pk(user_id),
        "sk": f"{COMPLETION_PREFIX}{stamp}#{completion_id}",
    }


def completion_sk_range(start: str, end: str) -> Tuple[str, str]:
    """Sort-key bounds covering every completion stamped in [start, end]."""
    return f"{COMPLETION_PREFIX}{start}", f"{COMPLETION_PREFIX}{end}#{_RANGE_CEILING}"


def health_log_pk(user_id: str, date: str) -> str:
    return f"{LOG_PREFIX}{user_id}#{date}"


def health_log_key(user_id: str, date: str, entry_id: str) -> Dict[str, str]:
    return {"pk": health_log_pk(user_id, date), "sk": f"{ENTRY_PREFIX}{entry_id}"}


def checkin_key(circle_id: str, date: str, user_id: str) -> Dict[str, str]:
    return {
        "pk": f"{CIRCLE_PREFIX}{circle_id}{CHECKIN_SEGMENT}{date}",
        "sk": f"{ENTRY_PREFIX}{user_id}",
    }


def legacy_checkin_key(circle_id: str, date: str, user_id: str) -> Dict[str, str]:
    return {
        "pk": f"{CIRCLE_PREFIX}{circle_id}{LEGACY_CHECKIN_SEGMENT}{date}",
        "sk": f"{MEMBER_PREFIX}{user_id}",
    }


def strip_prefix(value: str, prefix: str) -> str:
    """
    Remove a key prefix, raising ValueError when the value does not carry it.
    """
    if not isinstance(value, str) or not value.startswith(prefix):
        raise ValueError(f"Expected key starting with {prefix!r}, got {value!r}")
    remainder = value[len(prefix):]
    if not remainder:
        raise ValueError(f"Key {value!r} has an empty identifier")
    return remainder
