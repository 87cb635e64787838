"""
Trigger adapters for the CircleStreaks application.

Maps each activity event onto the circles whose streak it can affect and asks
the coordinator to evaluate them. Health-log and check-in events dated
anything other than today are ignored so historical backfills never rewrite
streak state.

Classes:
    StreakTriggerService: Event-to-evaluation routing
"""

from typing import Any, Dict, List

from ..models.events import CircleCheckInEvent, HabitCompletionEvent, HealthLogEntryEvent
from ..utils.dates import today_and_yesterday
from ..utils.structured_log import log_error, log_event
from .dynamodb_service import DynamoDBService
from .streak_service import StreakUpdateCoordinator


class StreakTriggerService:
    """
    Routes activity events to streak evaluations.

    Attributes:
        db_service: Store handle used to resolve member profiles
        coordinator: Streak evaluator for single circles
    """

    def __init__(
        self, db_service: DynamoDBService, coordinator: StreakUpdateCoordinator
    ):
        self.db_service = db_service
        self.coordinator = coordinator

    def on_habit_completion(self, event: HabitCompletionEvent) -> List[Dict[str, Any]]:
        """Evaluate every circle of the member who completed a habit."""
        return self._evaluate_member_circles(event.member_id)

    def on_health_log_entry(self, event: HealthLogEntryEvent) -> List[Dict[str, Any]]:
        """Evaluate every circle of the member, if the entry is for today."""
        if not self._is_today(event.date):
            log_event(
                "HISTORICAL_EVENT_SKIPPED",
                level="DEBUG",
                source="health_log",
                memberId=event.member_id,
                date=event.date,
            )
            return []
        return self._evaluate_member_circles(event.member_id)

    def on_circle_check_in(self, event: CircleCheckInEvent) -> List[Dict[str, Any]]:
        """Evaluate the checked-into circle, if the check-in is for today."""
        if not self._is_today(event.date):
            log_event(
                "HISTORICAL_EVENT_SKIPPED",
                level="DEBUG",
                source="circle_check_in",
                circleId=event.circle_id,
                memberId=event.member_id,
                date=event.date,
            )
            return []
        return [self.coordinator.evaluate(event.circle_id)]

    def _is_today(self, date: str) -> bool:
        today, _ = today_and_yesterday(self.coordinator.clock())
        return date == today

    def _evaluate_member_circles(self, member_id: str) -> List[Dict[str, Any]]:
        try:
            profile = self.db_service.get_user_profile(member_id)
        except Exception as e:
            log_error("PROFILE_LOAD_ERROR", e, memberId=member_id)
            return []

        if profile is None:
            log_event("PROFILE_NOT_FOUND", level="WARNING", memberId=member_id)
            return []

        return self.coordinator.evaluate_many(profile.circles)
