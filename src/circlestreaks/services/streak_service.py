"""
Streak update coordination for the CircleStreaks application.

This service orchestrates one streak evaluation for a circle: load the circle,
check whether every member was active today, apply the streak rules and
persist the new state when it changed. It is the error boundary of the engine:
nothing raised underneath it reaches the trigger that called it.

Classes:
    StreakUpdateCoordinator: Evaluates and persists circle streaks
"""

from typing import Any, Dict, Iterable, List, Optional

from botocore.exceptions import ClientError

from ..utils.dates import Clock, today_and_yesterday, utc_now
from ..utils.structured_log import log_error, log_event
from .dynamodb_service import DynamoDBService
from .group_activity import GroupActivityAggregator
from .streak_state_machine import apply_transition, classify_transition


class StreakUpdateCoordinator:
    """
    Evaluates a circle's streak and writes it back at most once per call.

    Attributes:
        db_service: Store handle for circle reads and writes
        aggregator: All-members-active check
        clock: Returns the current wall-clock time (UTC)

    Example:
        >>> coordinator = StreakUpdateCoordinator(db_service)
        >>> result = coordinator.evaluate("circle-123")
        >>> result["transition"], result["streak"]
        ('continue', 4)
    """

    def __init__(
        self,
        db_service: DynamoDBService,
        aggregator: Optional[GroupActivityAggregator] = None,
        clock: Optional[Clock] = None,
    ):
        self.db_service = db_service
        self.aggregator = aggregator or GroupActivityAggregator(db_service)
        self.clock = clock or utc_now

    def evaluate(self, circle_id: str) -> Dict[str, Any]:
        """
        Evaluate and persist the streak of one circle.

        Args:
            circle_id: Circle identifier

        Returns:
            Dictionary containing evaluation results:
            - success: False only if a read or write failed
            - circleId: the evaluated circle
            - transition: rule applied (reset/unchanged/continue/restart),
              None when the circle does not exist
            - streak, lastStreakDate: the resulting state
            - written: whether the circle record was updated
            - error: error message if the evaluation failed
        """
        result: Dict[str, Any] = {
            "success": False,
            "circleId": circle_id,
            "transition": None,
            "streak": None,
            "lastStreakDate": None,
            "written": False,
            "error": None,
        }

        try:
            circle = self.db_service.get_circle(circle_id)
            if circle is None:
                log_event("CIRCLE_NOT_FOUND", level="WARNING", circleId=circle_id)
                result["success"] = True
                return result

            now = self.clock()
            today, yesterday = today_and_yesterday(now)

            all_active = self.aggregator.all_members_active(circle.members, today)

            current = circle.streak_state
            kind = classify_transition(current, all_active, today, yesterday)
            new_state = apply_transition(current, kind, today)

            result.update(
                {
                    "transition": kind.value,
                    "streak": new_state.streak,
                    "lastStreakDate": new_state.last_streak_date,
                }
            )

            if new_state == current:
                result["success"] = True
                return result

            self.db_service.update_circle_streak(circle_id, new_state, updated_at=now)
            result["written"] = True
            result["success"] = True

            log_event(
                "STREAK_UPDATED",
                circleId=circle_id,
                transition=kind.value,
                previousStreak=current.streak,
                streak=new_state.streak,
                lastStreakDate=new_state.last_streak_date,
                memberCount=len(circle.members),
            )

        except ClientError as e:
            code = e.response.get("Error", {}).get("Code", "")
            if code == "ConditionalCheckFailedException":
                log_event("CIRCLE_REMOVED_DURING_EVALUATION", level="WARNING", circleId=circle_id)
            else:
                log_error("STREAK_EVALUATION_ERROR", e, circleId=circle_id)
            result["error"] = f"DynamoDB error evaluating circle streak: {code or e}"

        except Exception as e:
            log_error("STREAK_EVALUATION_ERROR", e, exc_info=True, circleId=circle_id)
            result["error"] = f"Unexpected error evaluating circle streak: {str(e)}"

        return result

    def evaluate_many(self, circle_ids: Iterable[str]) -> List[Dict[str, Any]]:
        """Evaluate each distinct circle id once, in order."""
        return [self.evaluate(circle_id) for circle_id in dict.fromkeys(circle_ids)]
