"""
Integration tests for CircleStreaks component interactions.

These tests wire the real services together against a moto-mocked DynamoDB
table and drive them through the coordinator and the Lambda handlers.
"""
