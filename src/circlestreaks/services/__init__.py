"""
Service layer for the CircleStreaks application.

This module contains the streak engine and its DynamoDB integration. Services
are wired together explicitly: one DynamoDBService store handle is created per
Lambda container and passed into everything that reads or writes records.

Classes:
    DynamoDBService: DynamoDB integration for data persistence
    ActivitySignalProbe: Per-member activity check across activity sources
    GroupActivityAggregator: All-members-active check for a circle
    StreakUpdateCoordinator: Evaluates and persists circle streaks
    StreakTriggerService: Routes activity events to streak evaluations
"""

from .activity_probe import ActivitySignalProbe
from .dynamodb_service import DynamoDBService
from .group_activity import GroupActivityAggregator
from .streak_service import StreakUpdateCoordinator
from .streak_state_machine import apply_transition, classify_transition, transition
from .trigger_service import StreakTriggerService

__all__ = [
    "ActivitySignalProbe",
    "DynamoDBService",
    "GroupActivityAggregator",
    "StreakUpdateCoordinator",
    "StreakTriggerService",
    "apply_transition",
    "classify_transition",
    "transition",
]
