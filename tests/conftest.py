"""
Pytest configuration and shared fixtures for CircleStreaks tests.

This module sets up a mocked DynamoDB table with the single-table layout,
a fixed evaluation clock, seeded circles and members, and helpers for
building DynamoDB Stream records.

Fixtures:
    mock_dynamodb_table: Mocked application table
    dynamodb_service: DynamoDBService bound to the mocked table
    fixed_clock: Clock frozen at 2024-01-10 15:00 UTC
    coordinator: StreakUpdateCoordinator using the fixed clock
    seeded_circle: Circle G1 with members A and B and streak (3, 2024-01-09)
"""

import os
from datetime import datetime, timezone
from typing import Any, Callable, Dict

import boto3
import pytest
from boto3.dynamodb.types import TypeSerializer
from moto import mock_aws

from circlestreaks.models.circle import Circle, UserProfile
from circlestreaks.services.dynamodb_service import DynamoDBService
from circlestreaks.services.streak_service import StreakUpdateCoordinator


# Test configuration constants
TEST_TABLE_NAME = "test-circle-streaks-table"
TODAY = "2024-01-10"
YESTERDAY = "2024-01-09"
NOW = datetime(2024, 1, 10, 15, 0, 0, tzinfo=timezone.utc)


@pytest.fixture(scope="session")
def aws_credentials():
    """
    Fixture to set up AWS credentials for testing.

    These are fake credentials used by moto only.
    """
    os.environ["AWS_ACCESS_KEY_ID"] = "testing"
    os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
    os.environ["AWS_SECURITY_TOKEN"] = "testing"
    os.environ["AWS_SESSION_TOKEN"] = "testing"
    os.environ["AWS_DEFAULT_REGION"] = "us-east-1"


@pytest.fixture
def mock_dynamodb_table(aws_credentials):
    """
    Fixture that creates a mocked DynamoDB table for testing.

    Uses moto to create an in-memory table with the string ``pk``/``sk``
    key schema shared by every record kind.

    Returns:
        boto3.resource.Table: Mocked DynamoDB table resource
    """
    with mock_aws():
        dynamodb = boto3.resource("dynamodb", region_name="us-east-1")

        table = dynamodb.create_table(
            TableName=TEST_TABLE_NAME,
            KeySchema=[
                {"AttributeName": "pk", "KeyType": "HASH"},
                {"AttributeName": "sk", "KeyType": "RANGE"},
            ],
            AttributeDefinitions=[
                {"AttributeName": "pk", "AttributeType": "S"},
                {"AttributeName": "sk", "AttributeType": "S"},
            ],
            BillingMode="PAY_PER_REQUEST",
        )

        table.wait_until_exists()
        yield table


@pytest.fixture
def dynamodb_service(mock_dynamodb_table):
    """
    Fixture that provides a DynamoDBService bound to the mocked table.
    """
    return DynamoDBService(table_name=TEST_TABLE_NAME)


@pytest.fixture
def fixed_clock() -> Callable[[], datetime]:
    """Clock frozen at 2024-01-10 15:00 UTC."""
    return lambda: NOW


@pytest.fixture
def coordinator(dynamodb_service, fixed_clock):
    return StreakUpdateCoordinator(dynamodb_service, clock=fixed_clock)


@pytest.fixture
def seeded_circle(dynamodb_service) -> Circle:
    """
    Circle G1 with members A and B, a 3-day streak credited yesterday,
    and profiles linking both members to it.
    """
    circle = Circle(id="G1", members=["A", "B"], streak=3, last_streak_date=YESTERDAY)
    dynamodb_service.save_circle(circle)
    dynamodb_service.save_user_profile(UserProfile(id="A", circles=["G1"]))
    dynamodb_service.save_user_profile(UserProfile(id="B", circles=["G1"]))
    return circle


def make_stream_record(
    item: Dict[str, Any], event_name: str = "INSERT", event_id: str = "evt-1"
) -> Dict[str, Any]:
    """
    Build a DynamoDB Stream record carrying item as its NewImage.
    """
    serializer = TypeSerializer()
    image = {key: serializer.serialize(value) for key, value in item.items()}
    return {
        "eventID": event_id,
        "eventName": event_name,
        "eventSource": "aws:dynamodb",
        "dynamodb": {
            "Keys": {"pk": image["pk"], "sk": image["sk"]},
            "NewImage": image,
            "StreamViewType": "NEW_IMAGE",
        },
    }


@pytest.fixture
def stream_record() -> Callable[..., Dict[str, Any]]:
    return make_stream_record


# Pytest configuration
def pytest_configure(config):
    """
    Register custom markers for organizing test execution.
    """
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "integration: mark test as an integration test")
    config.addinivalue_line("markers", "aws: mark test as requiring mocked AWS services")
