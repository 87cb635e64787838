"""
Activity signal probe for the CircleStreaks application.

Answers whether a member produced any qualifying activity on a calendar date
by reading three independent sources in a fixed order and stopping at the
first hit:

    1. habit completions stamped within the UTC day
    2. health-log entries under the member's daily log for the date
    3. check-ins for the date in any of the member's circles, legacy shape
       first and then the current shape

A failed read degrades that source to "no signal" and the next source is
tried. The probe never raises.

Classes:
    ActivitySignalProbe: Per-member activity check
"""

from typing import Callable, List, Tuple

from ..models.circle import ActivitySignal
from ..utils.structured_log import log_error, log_event
from .dynamodb_service import DynamoDBService

SOURCE_COMPLETIONS = "habit_completions"
SOURCE_HEALTH_LOG = "health_log"
SOURCE_CHECK_INS = "circle_check_ins"


class ActivitySignalProbe:
    """
    Per-member activity check across the three activity sources.

    Attributes:
        db_service: Store handle used for every source read

    Example:
        >>> probe = ActivitySignalProbe(db_service)
        >>> probe.has_activity("user-1", "2024-01-10")
        True
    """

    def __init__(self, db_service: DynamoDBService):
        self.db_service = db_service
        self._sources: List[Tuple[str, Callable[[str, str], bool]]] = [
            (SOURCE_COMPLETIONS, self._completion_signal),
            (SOURCE_HEALTH_LOG, self._health_log_signal),
            (SOURCE_CHECK_INS, self._check_in_signal),
        ]

    def has_activity(self, member_id: str, date: str) -> bool:
        """
        Check whether the member had any qualifying activity on date.

        Args:
            member_id: Member user id
            date: Calendar date (YYYY-MM-DD)

        Returns:
            True on the first source that reports activity, False otherwise
        """
        for _, signal in self.signals(member_id, date):
            if signal.is_present:
                return True
        return False

    def signals(self, member_id: str, date: str) -> List[Tuple[str, ActivitySignal]]:
        """
        Evaluate sources in order, stopping after the first PRESENT one.

        Returns:
            (source name, signal) pairs for every source actually read
        """
        results = []
        for name, lookup in self._sources:
            signal = self._read(name, lookup, member_id, date)
            results.append((name, signal))
            if signal.is_present:
                break

        log_event(
            "ACTIVITY_PROBED",
            level="DEBUG",
            memberId=member_id,
            date=date,
            signals={name: signal.value for name, signal in results},
        )
        return results

    def _read(
        self,
        source: str,
        lookup: Callable[[str, str], bool],
        member_id: str,
        date: str,
    ) -> ActivitySignal:
        """
        Boundary for one source: a failed read becomes DEGRADED.
        """
        try:
            found = lookup(member_id, date)
        except Exception as e:
            log_error(
                "ACTIVITY_SOURCE_READ_ERROR",
                e,
                source=source,
                memberId=member_id,
                date=date,
            )
            return ActivitySignal.DEGRADED

        return ActivitySignal.PRESENT if found else ActivitySignal.ABSENT

    def _completion_signal(self, member_id: str, date: str) -> bool:
        return self.db_service.has_completion_on(member_id, date)

    def _health_log_signal(self, member_id: str, date: str) -> bool:
        return self.db_service.has_health_log_entry(member_id, date)

    def _check_in_signal(self, member_id: str, date: str) -> bool:
        profile = self.db_service.get_user_profile(member_id)
        if profile is None:
            return False

        # Both shapes stay until the check-in migration is confirmed complete.
        for circle_id in profile.circles:
            if self.db_service.has_legacy_check_in(circle_id, date, member_id):
                return True
            if self.db_service.has_check_in(circle_id, date, member_id):
                return True
        return False
