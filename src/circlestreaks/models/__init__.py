"""
Data models for the CircleStreaks application.

This module contains Pydantic models for data validation and serialization
used throughout the application for circles, streak state, member profiles
and the stream events that trigger streak evaluation.

Classes:
    Circle: Model representing a circle and its streak fields
    UserProfile: Circle memberships of a user
    StreakState: Immutable (streak, lastStreakDate) pair
    StreakTransition: Enum of streak rules
    ActivitySignal: Tri-state result of one activity source read
    HabitCompletionEvent: Habit completion trigger event
    HealthLogEntryEvent: Health-log entry trigger event
    CircleCheckInEvent: Circle check-in trigger event
"""

from .circle import ActivitySignal, Circle, StreakState, StreakTransition, UserProfile
from .events import (
    CircleCheckInEvent,
    HabitCompletionEvent,
    HealthLogEntryEvent,
    new_image_from_record,
)

__all__ = [
    "ActivitySignal",
    "Circle",
    "StreakState",
    "StreakTransition",
    "UserProfile",
    "CircleCheckInEvent",
    "HabitCompletionEvent",
    "HealthLogEntryEvent",
    "new_image_from_record",
]
