"""
Test package for the CircleStreaks application.

Test Organization:
    unit/: Unit tests for models, the streak rules, the probe and the aggregator
    integration/: Coordinator and Lambda handler tests against mocked DynamoDB
    conftest.py: Pytest configuration and shared fixtures
"""
