"""
Testing utilities module.

Provides helpers for testing applications built on blueprint-di.
"""

from .utilities import PlanRecorder, TestContainer, create_mock_container

__all__ = [
    "TestContainer",
    "PlanRecorder",
    "create_mock_container",
]
