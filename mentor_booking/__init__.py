"""Mentor assignment and slot booking service for mock interviews."""

__version__ = "1.0.0"
