"""
DynamoDB service for the CircleStreaks application.

This service is the store handle for every record the streak engine reads or
writes: circles, user profiles, habit completions, health-log entries and
circle check-ins. It is constructed once per Lambda container and passed into
the components that need it.

Read and write methods let ``botocore`` errors propagate; the callers decide
whether an error means "no signal" or "log and give up".

Classes:
    DynamoDBService: Service for DynamoDB operations and data persistence
"""

import os
import uuid
from datetime import datetime
from typing import Any, Dict, Optional

import boto3
from boto3.dynamodb.conditions import Attr, Key
from botocore.exceptions import ClientError, NoCredentialsError

from ..models import keys
from ..models.circle import Circle, StreakState, UserProfile
from ..utils.dates import day_bounds, format_timestamp, utc_now


class DynamoDBService:
    """
    Service for managing CircleStreaks data in DynamoDB.

    Attributes:
        table_name: Name of the DynamoDB table
        dynamodb: Boto3 DynamoDB resource
        table: DynamoDB table resource, used from the invoking thread
        client: Low-level client behind the resource, shared by probe threads

    Example:
        >>> db_service = DynamoDBService()
        >>> circle = db_service.get_circle("circle-123")
        >>> db_service.has_health_log_entry("user-1", "2024-01-10")
        True
    """

    def __init__(self, table_name: Optional[str] = None):
        """
        Initialize the DynamoDB service.

        Args:
            table_name: Optional table name override, uses env var if not provided

        Raises:
            ValueError: If table name is not provided and not in environment
            NoCredentialsError: If AWS credentials are not configured
        """
        self.table_name = table_name or os.getenv("STREAKS_TABLE")

        if not self.table_name:
            raise ValueError(
                "Table name must be provided either as parameter or STREAKS_TABLE environment variable"
            )

        try:
            self.dynamodb = boto3.resource("dynamodb")
            self.table = self.dynamodb.Table(self.table_name)
            # Resources are not thread-safe; activity lookups run on probe
            # threads and go through the shared low-level client instead.
            self.client = self.dynamodb.meta.client

            # Verify table exists by getting its description
            self.table.load()

        except NoCredentialsError:
            raise NoCredentialsError(
                "AWS credentials not found. Please configure AWS credentials."
            )
        except ClientError as e:
            if e.response["Error"]["Code"] == "ResourceNotFoundException":
                raise ValueError(f"DynamoDB table '{self.table_name}' not found")
            raise

    # Circles

    def get_circle(self, circle_id: str) -> Optional[Circle]:
        """
        Retrieve a circle by ID.

        Args:
            circle_id: Circle identifier

        Returns:
            Circle if found, None otherwise
        """
        response = self.table.get_item(Key=keys.circle_key(circle_id))
        if "Item" not in response:
            return None
        return Circle.from_dynamodb_item(response["Item"])

    def save_circle(self, circle: Circle) -> None:
        self.table.put_item(Item=circle.to_dynamodb_item())

    def update_circle_streak(
        self, circle_id: str, state: StreakState, updated_at: Optional[datetime] = None
    ) -> None:
        """
        Persist a circle's streak fields in a single conditional write.

        The write only lands if the circle still exists, so a circle deleted
        mid-evaluation is never resurrected as a bare streak record.

        Args:
            circle_id: Circle identifier
            state: New streak state
            updated_at: Write time, defaults to now

        Raises:
            ClientError: ConditionalCheckFailedException if the circle is gone,
                or any other DynamoDB error
        """
        self.table.update_item(
            Key=keys.circle_key(circle_id),
            UpdateExpression="SET streak = :streak, lastStreakDate = :date, updatedAt = :updated",
            ConditionExpression=Attr("pk").exists(),
            ExpressionAttributeValues={
                ":streak": state.streak,
                ":date": state.last_streak_date,
                ":updated": format_timestamp(updated_at or utc_now()),
            },
        )

    # User profiles

    def get_user_profile(self, user_id: str) -> Optional[UserProfile]:
        response = self.client.get_item(
            TableName=self.table_name, Key=keys.profile_key(user_id)
        )
        if "Item" not in response:
            return None
        return UserProfile.from_dynamodb_item(response["Item"])

    def save_user_profile(self, profile: UserProfile) -> None:
        self.table.put_item(
            Item={**keys.profile_key(profile.id), "circles": list(profile.circles)}
        )

    # Activity sources

    def has_completion_on(self, user_id: str, date: str) -> bool:
        """
        Check for any habit completion stamped within a UTC calendar day.

        Args:
            user_id: Member identifier
            date: Calendar date (YYYY-MM-DD)

        Returns:
            True if at least one completion falls in [00:00:00.000, 23:59:59.999]
        """
        low, high = keys.completion_sk_range(*day_bounds(date))
        response = self.client.query(
            TableName=self.table_name,
            KeyConditionExpression=Key("pk").eq(keys.user_pk(user_id))
            & Key("sk").between(low, high),
            ProjectionExpression="pk",
            Limit=1,
        )
        return bool(response.get("Items"))

    def save_completion(
        self,
        user_id: str,
        habit_id: str,
        completed_at: datetime,
        completion_id: Optional[str] = None,
    ) -> str:
        """
        Store a habit completion and return its completion id.
        """
        completion_id = completion_id or uuid.uuid4().hex
        stamp = format_timestamp(completed_at)
        self.table.put_item(
            Item={
                **keys.completion_key(user_id, stamp, completion_id),
                "habitId": habit_id,
                "completedAt": stamp,
            }
        )
        return completion_id

    def has_health_log_entry(self, user_id: str, date: str) -> bool:
        """Check for any entry under the member's daily log for exactly date."""
        response = self.client.query(
            TableName=self.table_name,
            KeyConditionExpression=Key("pk").eq(keys.health_log_pk(user_id, date)),
            ProjectionExpression="pk",
            Limit=1,
        )
        return bool(response.get("Items"))

    def save_health_log_entry(
        self,
        user_id: str,
        date: str,
        entry_id: Optional[str] = None,
        data: Optional[Dict[str, Any]] = None,
    ) -> str:
        entry_id = entry_id or uuid.uuid4().hex
        self.table.put_item(
            Item={
                **(data or {}),
                **keys.health_log_key(user_id, date, entry_id),
                "date": date,
            }
        )
        return entry_id

    def has_check_in(self, circle_id: str, date: str, user_id: str) -> bool:
        response = self.client.get_item(
            TableName=self.table_name,
            Key=keys.checkin_key(circle_id, date, user_id),
            ProjectionExpression="pk",
        )
        return "Item" in response

    def has_legacy_check_in(self, circle_id: str, date: str, user_id: str) -> bool:
        """Check-in lookup in the pre-migration CHECKIN_MEMBERS shape."""
        response = self.client.get_item(
            TableName=self.table_name,
            Key=keys.legacy_checkin_key(circle_id, date, user_id),
            ProjectionExpression="pk",
        )
        return "Item" in response

    def save_check_in(
        self,
        circle_id: str,
        date: str,
        user_id: str,
        energy: Optional[int] = None,
        legacy: bool = False,
    ) -> None:
        key_builder = keys.legacy_checkin_key if legacy else keys.checkin_key
        item: Dict[str, Any] = dict(key_builder(circle_id, date, user_id))
        if energy is not None:
            item["energy"] = energy
        self.table.put_item(Item=item)
