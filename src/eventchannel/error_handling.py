"""
Error isolation for listener failures.

A listener that raises during delivery must not corrupt the channel or stop
delivery to the listeners after it. This module provides:
- ListenerFailure: what failed, where, and with which payload
- ListenerErrorStats: aggregate failure statistics for a channel
- ListenerErrorHandler: records, logs, and forwards failures to callbacks
"""

import logging
import traceback
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any
from uuid import UUID

logger = logging.getLogger(__name__)


class DeliveryPhase(Enum):
    """When a listener was invoked."""

    DISPATCH = "dispatch"
    """Live delivery from the drain loop."""

    REPLAY = "replay"
    """History replay while the listener was being added."""


@dataclass
class ListenerFailure:
    """
    Detailed information about a listener failure.

    Captures the context needed for debugging and monitoring.
    """

    channel_name: str
    listener_name: str
    subscription_id: UUID
    payload: Any
    error: BaseException
    phase: DeliveryPhase = DeliveryPhase.DISPATCH
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    @property
    def error_type(self) -> str:
        return type(self.error).__name__

    @property
    def error_message(self) -> str:
        return str(self.error)

    @property
    def error_stacktrace(self) -> str:
        return "".join(
            traceback.format_exception(type(self.error), self.error, self.error.__traceback__)
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "channel_name": self.channel_name,
            "listener_name": self.listener_name,
            "subscription_id": str(self.subscription_id),
            "payload_type": type(self.payload).__name__,
            "error_type": self.error_type,
            "error_message": self.error_message,
            "phase": self.phase.value,
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass
class ListenerErrorStats:
    """Aggregate listener failure statistics for a channel."""

    total_errors: int = 0
    errors_by_type: dict[str, int] = field(default_factory=dict)
    errors_by_listener: dict[str, int] = field(default_factory=dict)
    first_error_at: datetime | None = None
    last_error_at: datetime | None = None

    def record(self, failure: ListenerFailure) -> None:
        """
        Record a failure in statistics.

        Args:
            failure: The failure to record
        """
        self.total_errors += 1
        self.errors_by_type[failure.error_type] = self.errors_by_type.get(failure.error_type, 0) + 1
        self.errors_by_listener[failure.listener_name] = (
            self.errors_by_listener.get(failure.listener_name, 0) + 1
        )
        if self.first_error_at is None:
            self.first_error_at = failure.timestamp
        self.last_error_at = failure.timestamp

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "total_errors": self.total_errors,
            "errors_by_type": dict(self.errors_by_type),
            "errors_by_listener": dict(self.errors_by_listener),
            "first_error_at": (self.first_error_at.isoformat() if self.first_error_at else None),
            "last_error_at": (self.last_error_at.isoformat() if self.last_error_at else None),
        }


# Type alias for error callbacks
ListenerErrorCallback = Callable[[ListenerFailure], Any]
"""Sync callback invoked when a listener fails."""


class ListenerErrorHandler:
    """
    Records listener failures and notifies callbacks.

    Errors raised by callbacks are logged and never propagate, so an
    observability hook cannot break delivery.

    Example:
        >>> handler = ListenerErrorHandler("orders")
        >>> handler.on_error(lambda failure: alerts.append(failure))
        >>> handler.handle(failure)
    """

    def __init__(self, channel_name: str) -> None:
        self._channel_name = channel_name
        self._callbacks: list[ListenerErrorCallback] = []
        self._stats = ListenerErrorStats()
        self._recent: list[ListenerFailure] = []
        self._max_recent = 100

    def on_error(self, callback: ListenerErrorCallback) -> Callable[[], None]:
        """
        Register a callback for listener failures.

        Args:
            callback: Function called with each ListenerFailure

        Returns:
            Function that unregisters the callback
        """
        if not callable(callback):
            raise TypeError(f"Error callback must be callable, got {type(callback)}")
        self._callbacks.append(callback)

        def remove() -> None:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

        return remove

    def handle(self, failure: ListenerFailure) -> None:
        """
        Record, log, and forward a listener failure.

        Args:
            failure: The failure to handle
        """
        self._stats.record(failure)
        self._recent.append(failure)
        if len(self._recent) > self._max_recent:
            del self._recent[0]

        logger.error(
            f"Listener {failure.listener_name} on channel '{failure.channel_name}' "
            f"failed during {failure.phase.value}: {failure.error}",
            exc_info=failure.error,
            extra={
                "channel": failure.channel_name,
                "listener": failure.listener_name,
                "subscription_id": str(failure.subscription_id),
                "payload_type": type(failure.payload).__name__,
                "phase": failure.phase.value,
                "error": failure.error_message,
            },
        )

        for callback in list(self._callbacks):
            try:
                callback(failure)
            except Exception as e:
                logger.error(
                    f"Error in listener error callback: {e}",
                    exc_info=True,
                    extra={
                        "channel": self._channel_name,
                        "callback": getattr(callback, "__name__", repr(callback)),
                    },
                )

    @property
    def stats(self) -> ListenerErrorStats:
        return self._stats

    @property
    def recent_failures(self) -> list[ListenerFailure]:
        """Most recent failures (up to 100), oldest first."""
        return list(self._recent)

    def clear(self) -> None:
        """Reset statistics and recent failures. Callbacks stay registered."""
        self._stats = ListenerErrorStats()
        self._recent.clear()


__all__ = [
    "DeliveryPhase",
    "ListenerErrorCallback",
    "ListenerErrorHandler",
    "ListenerErrorStats",
    "ListenerFailure",
]
