"""
Shared test fixtures for the eventchannel library.

Usage:
    from tests.fixtures import (
        SessionEvent,
        SessionStarted,
        SessionMessage,
        SessionEnded,
        SessionErrorEnded,
        Shape,
        Circle,
        Square,
        Session,
    )
"""

from tests.fixtures.payloads import (
    Circle,
    Session,
    SessionEnded,
    SessionErrorEnded,
    SessionEvent,
    SessionMessage,
    SessionStarted,
    Shape,
    Square,
)

__all__ = [
    "Circle",
    "Session",
    "SessionEnded",
    "SessionErrorEnded",
    "SessionEvent",
    "SessionMessage",
    "SessionStarted",
    "Shape",
    "Square",
]
