"""
Standard span attributes for eventchannel.

This module defines attribute constants used across eventchannel components
for consistent span naming and labeling.

Example:
    >>> from eventchannel.observability.attributes import (
    ...     ATTR_CHANNEL_NAME,
    ...     ATTR_PAYLOAD_TYPE,
    ... )
    >>>
    >>> with tracer.span(
    ...     "eventchannel.channel.dispatch",
    ...     {ATTR_CHANNEL_NAME: channel.name, ATTR_PAYLOAD_TYPE: "int"},
    ... ):
    ...     pass
"""

# =============================================================================
# Span Names
# =============================================================================

SPAN_DISPATCH = "eventchannel.channel.dispatch"
"""Delivery of one queued payload to all listeners."""

SPAN_HANDLE = "eventchannel.channel.handle"
"""Invocation of one listener with one payload."""

SPAN_REPLAY = "eventchannel.channel.replay"
"""History replay to a newly added listener."""

# =============================================================================
# Channel Attributes
# =============================================================================

ATTR_CHANNEL_NAME = "eventchannel.channel.name"
"""Diagnostic name of the channel."""

ATTR_HISTORY_MODE = "eventchannel.history.mode"
"""History mode of the channel ('disabled', 'unbounded', 'bounded')."""

ATTR_HISTORY_LENGTH = "eventchannel.history.length"
"""Number of payloads in history (integer)."""

ATTR_QUEUE_DEPTH = "eventchannel.queue.depth"
"""Number of payloads still queued when a dispatch starts (integer)."""

# =============================================================================
# Payload Attributes
# =============================================================================

ATTR_PAYLOAD_TYPE = "eventchannel.payload.type"
"""Class name of the payload."""

# =============================================================================
# Listener Attributes
# =============================================================================

ATTR_LISTENER_NAME = "eventchannel.listener.name"
"""Listener function or class name."""

ATTR_LISTENER_KIND = "eventchannel.listener.kind"
"""Listener kind ('plain', 'filtered', 'typed')."""

ATTR_LISTENER_COUNT = "eventchannel.listener.count"
"""Number of listeners a payload is delivered to (integer)."""

ATTR_LISTENER_SUCCESS = "eventchannel.listener.success"
"""Whether the listener completed without raising (boolean)."""

ATTR_SUBSCRIPTION_ID = "eventchannel.subscription.id"
"""Identifier of the listener's subscription (UUID string)."""

# =============================================================================
# Error Attributes
# =============================================================================

ATTR_ERROR_TYPE = "error.type"
"""Exception class name (OTEL semantic convention)."""


__all__ = [
    "SPAN_DISPATCH",
    "SPAN_HANDLE",
    "SPAN_REPLAY",
    "ATTR_CHANNEL_NAME",
    "ATTR_HISTORY_MODE",
    "ATTR_HISTORY_LENGTH",
    "ATTR_QUEUE_DEPTH",
    "ATTR_PAYLOAD_TYPE",
    "ATTR_LISTENER_NAME",
    "ATTR_LISTENER_KIND",
    "ATTR_LISTENER_COUNT",
    "ATTR_LISTENER_SUCCESS",
    "ATTR_SUBSCRIPTION_ID",
    "ATTR_ERROR_TYPE",
]
