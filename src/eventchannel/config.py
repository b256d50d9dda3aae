"""
Configuration classes for event channels.

This module provides:
- ChannelConfig: Configuration for a single event channel
- HistoryMode: Enum describing how a channel records payload history
- accepted_payload_classes: Runtime view of a channel's payload type
"""

from __future__ import annotations

import types
from dataclasses import dataclass
from enum import Enum
from typing import Any, Union, get_args, get_origin

NoneType = type(None)


class HistoryMode(Enum):
    """
    How a channel records fired payloads.

    Attributes:
        DISABLED: No history is recorded (history_limit < 0)
        UNBOUNDED: Every payload is recorded (history_limit == 0)
        BOUNDED: Only the most recent history_limit payloads are kept
    """

    DISABLED = "disabled"
    UNBOUNDED = "unbounded"
    BOUNDED = "bounded"

    @classmethod
    def from_limit(cls, history_limit: int) -> HistoryMode:
        """Derive the history mode from a history limit."""
        if history_limit < 0:
            return cls.DISABLED
        if history_limit == 0:
            return cls.UNBOUNDED
        return cls.BOUNDED


@dataclass(frozen=True)
class ChannelConfig:
    """
    Configuration for an event channel.

    Attributes:
        name: Diagnostic label of the channel (no uniqueness constraint)
        history_limit: History mode selector
            - negative: history disabled
            - 0: history enabled without limit
            - positive: only the most recent history_limit payloads are kept
        payload_type: Optional runtime description of the payload type.
            Used to reject mistyped payloads and to decide whether
            notify() is allowed. None means untyped.
        enable_tracing: Emit OpenTelemetry spans for dispatch and replay
        isolate_listener_errors: Catch listener failures and continue
            delivering to the remaining listeners. When False, the first
            failure propagates to the caller of fire().

    Example:
        >>> config = ChannelConfig(name="session", history_limit=10)
        >>> config.history_mode
        <HistoryMode.BOUNDED: 'bounded'>
    """

    name: str = "event"
    history_limit: int = -1
    payload_type: Any = None
    enable_tracing: bool = True
    isolate_listener_errors: bool = True

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if not isinstance(self.name, str) or not self.name:
            raise ValueError(f"name must be a non-empty string, got {self.name!r}")
        if isinstance(self.history_limit, bool) or not isinstance(self.history_limit, int):
            raise TypeError(f"history_limit must be an int, got {type(self.history_limit).__name__}")

    @property
    def history_mode(self) -> HistoryMode:
        """History mode derived from history_limit."""
        return HistoryMode.from_limit(self.history_limit)

    @property
    def admits_none(self) -> bool:
        """Whether None is a valid payload for this configuration."""
        classes = accepted_payload_classes(self.payload_type)
        return classes is None or NoneType in classes


def accepted_payload_classes(payload_type: Any) -> tuple[type, ...] | None:
    """
    Resolve a payload type annotation to the classes it accepts.

    Args:
        payload_type: A class, a union, a parametrized generic, or None

    Returns:
        Tuple of accepted classes, or None when any payload is accepted
        (untyped channel, Any, object, or an annotation that cannot be
        checked at runtime)

    Example:
        >>> accepted_payload_classes(int | None)
        (<class 'int'>, <class 'NoneType'>)
        >>> accepted_payload_classes(list[int])
        (<class 'list'>,)
    """
    if payload_type is None or payload_type is Any or payload_type is object:
        return None
    if payload_type is NoneType:
        return (NoneType,)

    origin = get_origin(payload_type)
    if origin is Union or origin is types.UnionType:
        classes: list[type] = []
        for member in get_args(payload_type):
            member_classes = accepted_payload_classes(member)
            if member_classes is None:
                return None
            classes.extend(member_classes)
        return tuple(classes)

    if origin is not None:
        # list[int] and friends are checked against their origin
        return (origin,) if isinstance(origin, type) else None

    if isinstance(payload_type, type):
        return (payload_type,)
    return None


__all__ = [
    "ChannelConfig",
    "HistoryMode",
    "accepted_payload_classes",
]
