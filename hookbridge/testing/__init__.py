"""
Test helpers for code built on hookbridge.
"""

from hookbridge.testing.mocks import MockProvider
from hookbridge.testing.tester import (
    IntegrationTester,
    MockData,
    TestCase,
    TestResult,
    TestSuite,
)

__all__ = [
    "MockProvider",
    "IntegrationTester",
    "MockData",
    "TestCase",
    "TestResult",
    "TestSuite",
]
