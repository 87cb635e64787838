"""
Group activity aggregation for the CircleStreaks application.

Reduces the per-member activity probes of a circle to one answer: were all
members active on the date? Probes run concurrently and every one of them
completes before the answer is produced.

Classes:
    GroupActivityAggregator: Concurrent all-members-active check
"""

import os
from concurrent.futures import ThreadPoolExecutor
from typing import Optional, Sequence

from ..utils.structured_log import log_event
from .activity_probe import ActivitySignalProbe
from .dynamodb_service import DynamoDBService

DEFAULT_MAX_WORKERS = 8


class GroupActivityAggregator:
    """
    Decides whether every member of a circle was active on a date.

    Attributes:
        db_service: Store handle used to load circles
        probe: Per-member activity probe
        max_workers: Upper bound on concurrent member probes
    """

    def __init__(
        self,
        db_service: DynamoDBService,
        probe: Optional[ActivitySignalProbe] = None,
        max_workers: Optional[int] = None,
    ):
        self.db_service = db_service
        self.probe = probe or ActivitySignalProbe(db_service)
        self.max_workers = max_workers or int(
            os.getenv("PROBE_MAX_WORKERS", DEFAULT_MAX_WORKERS)
        )

    def all_active(self, circle_id: str, date: str) -> bool:
        """
        Load a circle and check whether all its members were active on date.

        A missing circle or one without members is never active.

        Raises:
            ClientError: If the circle itself cannot be loaded
        """
        circle = self.db_service.get_circle(circle_id)
        if circle is None:
            return False
        return self.all_members_active(circle.members, date)

    def all_members_active(self, members: Sequence[str], date: str) -> bool:
        """
        Probe every member concurrently and AND the results.

        Args:
            members: Member user ids
            date: Calendar date (YYYY-MM-DD)

        Returns:
            False for an empty member list, otherwise True only if every
            member had activity
        """
        if not members:
            return False

        workers = max(1, min(self.max_workers, len(members)))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            results = list(
                executor.map(lambda member: self.probe.has_activity(member, date), members)
            )

        inactive = [member for member, active in zip(members, results) if not active]
        log_event(
            "GROUP_ACTIVITY_AGGREGATED",
            level="DEBUG",
            date=date,
            memberCount=len(members),
            inactiveMembers=inactive,
        )
        return not inactive
