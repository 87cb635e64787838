"""
CircleStreaks: Serverless group activity streaks for habit circles.

This package keeps the shared streak of each circle up to date. DynamoDB
Stream triggers fire when members complete habits, log health entries or
check into a circle; the streak engine then checks whether every member was
active today and continues, resets or restarts the circle's streak.

Modules:
    lambdas: AWS Lambda handlers for the DynamoDB Stream triggers
    services: Streak engine and DynamoDB integration
    models: Data models and validation using Pydantic
    utils: Date helpers and structured logging
"""

__version__ = "0.1.0"

from .models import Circle, StreakState, StreakTransition, UserProfile
from .services import (
    ActivitySignalProbe,
    DynamoDBService,
    GroupActivityAggregator,
    StreakUpdateCoordinator,
)

__all__ = [
    "Circle",
    "StreakState",
    "StreakTransition",
    "UserProfile",
    "ActivitySignalProbe",
    "DynamoDBService",
    "GroupActivityAggregator",
    "StreakUpdateCoordinator",
]
