"""
AWS Lambda functions for the CircleStreaks application.

This package contains the Lambda function handlers subscribed to the
application table's DynamoDB Stream. Each one re-evaluates circle streaks
when a kind of member activity is recorded.

Modules:
    habit_completion_trigger: Habit completions
    health_log_trigger: Health-log entries
    checkin_trigger: Circle check-ins
    stream_handler: Shared stream batch processing
"""

# Lambda function entry points are imported directly from their modules
# This allows for clean imports in the AWS SAM template
