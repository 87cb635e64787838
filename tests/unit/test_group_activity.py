"""
Unit tests for the group activity aggregator.
"""

import threading
from datetime import datetime, timezone
from unittest.mock import Mock

import pytest

from circlestreaks.models.circle import Circle, UserProfile
from circlestreaks.services.activity_probe import ActivitySignalProbe
from circlestreaks.services.dynamodb_service import DynamoDBService
from circlestreaks.services.group_activity import GroupActivityAggregator

DATE = "2024-01-10"


def _probe(active_members):
    probe = Mock(spec=ActivitySignalProbe)
    probe.has_activity.side_effect = lambda member, date: member in active_members
    return probe


class TestGroupActivityAggregator:
    """Test cases for all_active and all_members_active."""

    def test_empty_member_list_is_never_active(self):
        """Test an empty circle is inactive rather than vacuously active."""
        probe = _probe(set())
        aggregator = GroupActivityAggregator(Mock(spec=DynamoDBService), probe=probe)

        assert aggregator.all_members_active([], DATE) is False
        probe.has_activity.assert_not_called()

    def test_all_members_active(self):
        """Test every member active gives True."""
        aggregator = GroupActivityAggregator(
            Mock(spec=DynamoDBService), probe=_probe({"a", "b", "c"})
        )

        assert aggregator.all_members_active(["a", "b", "c"], DATE) is True

    def test_one_inactive_member(self):
        """Test a single inactive member makes the circle inactive."""
        aggregator = GroupActivityAggregator(
            Mock(spec=DynamoDBService), probe=_probe({"a", "c"})
        )

        assert aggregator.all_members_active(["a", "b", "c"], DATE) is False

    def test_every_member_is_probed(self):
        """Test the fan-out waits for all probes instead of stopping at the first miss."""
        probe = _probe(set())
        aggregator = GroupActivityAggregator(Mock(spec=DynamoDBService), probe=probe)

        aggregator.all_members_active(["a", "b", "c", "d"], DATE)

        assert sorted(c.args for c in probe.has_activity.call_args_list) == [
            ("a", DATE),
            ("b", DATE),
            ("c", DATE),
            ("d", DATE),
        ]

    def test_probes_run_concurrently(self):
        """Test member probes overlap in time."""
        members = ["a", "b", "c"]
        barrier = threading.Barrier(len(members), timeout=5)

        probe = Mock(spec=ActivitySignalProbe)

        def has_activity(member, date):
            # Only passes if all three probes are in flight together.
            barrier.wait()
            return True

        probe.has_activity.side_effect = has_activity
        aggregator = GroupActivityAggregator(
            Mock(spec=DynamoDBService), probe=probe, max_workers=3
        )

        assert aggregator.all_members_active(members, DATE) is True

    def test_all_active_loads_circle(self):
        """Test all_active reads the circle's members from the store."""
        db = Mock(spec=DynamoDBService)
        db.get_circle.return_value = Circle(id="g1", members=["a", "b"])
        aggregator = GroupActivityAggregator(db, probe=_probe({"a", "b"}))

        assert aggregator.all_active("g1", DATE) is True
        db.get_circle.assert_called_once_with("g1")

    def test_all_active_missing_or_empty_circle(self):
        """Test missing and memberless circles are inactive."""
        db = Mock(spec=DynamoDBService)
        aggregator = GroupActivityAggregator(db, probe=_probe({"a"}))

        db.get_circle.return_value = None
        assert aggregator.all_active("g1", DATE) is False

        db.get_circle.return_value = Circle(id="g1", members=[])
        assert aggregator.all_active("g1", DATE) is False

    def test_max_workers_from_environment(self, monkeypatch):
        """Test the pool size is configurable via PROBE_MAX_WORKERS."""
        monkeypatch.setenv("PROBE_MAX_WORKERS", "3")

        aggregator = GroupActivityAggregator(Mock(spec=DynamoDBService), probe=_probe(set()))

        assert aggregator.max_workers == 3


@pytest.mark.aws
class TestGroupActivityWithDynamoDB:
    """Test cases for aggregation against a mocked table."""

    def test_members_with_mixed_sources(self, dynamodb_service, seeded_circle):
        """Test members active through different sources together make the circle active."""
        dynamodb_service.save_health_log_entry("A", DATE)
        dynamodb_service.save_check_in("G1", DATE, "B", energy=6)

        aggregator = GroupActivityAggregator(dynamodb_service)

        assert aggregator.all_active("G1", DATE) is True
        assert aggregator.all_active("G1", "2024-01-11") is False

    def test_concurrent_fan_out_over_many_members(self, dynamodb_service):
        """Test concurrent probes against the table agree with the per-member records."""
        members = [f"m{i}" for i in range(8)]
        for i, member in enumerate(members):
            dynamodb_service.save_user_profile(UserProfile(id=member, circles=["G7"]))
            if i % 3 == 0:
                dynamodb_service.save_completion(
                    member, "h-1", datetime(2024, 1, 10, 9, i, tzinfo=timezone.utc)
                )
            elif i % 3 == 1:
                dynamodb_service.save_health_log_entry(member, DATE)
            else:
                dynamodb_service.save_check_in("G7", DATE, member, legacy=i % 2 == 0)

        aggregator = GroupActivityAggregator(dynamodb_service, max_workers=len(members))

        for _ in range(5):
            assert aggregator.all_members_active(members, DATE) is True
        assert aggregator.all_members_active(members + ["idle"], DATE) is False

    def test_member_lookups_bypass_table_resource(self, dynamodb_service, monkeypatch):
        """Test concurrent member lookups go through the shared client, not the Table resource."""
        dynamodb_service.save_health_log_entry("a", DATE)
        dynamodb_service.save_user_profile(UserProfile(id="b", circles=["G1"]))
        dynamodb_service.save_check_in("G1", DATE, "b")
        dynamodb_service.save_completion(
            "c", "h-1", datetime(2024, 1, 10, 12, 0, tzinfo=timezone.utc)
        )

        table = Mock()
        table.query.side_effect = AssertionError("Table resource used for a member lookup")
        table.get_item.side_effect = AssertionError("Table resource used for a member lookup")
        monkeypatch.setattr(dynamodb_service, "table", table)

        aggregator = GroupActivityAggregator(dynamodb_service, max_workers=3)

        assert aggregator.all_members_active(["a", "b", "c"], DATE) is True
        table.query.assert_not_called()
        table.get_item.assert_not_called()
