"""
Observability utilities for eventchannel.

This module provides composition-based tracing and standard attribute
definitions for consistent observability across channel components.

Example:
    >>> from eventchannel.observability import create_tracer
    >>>
    >>> class MyComponent:
    ...     def __init__(self, enable_tracing: bool = True):
    ...         self._tracer = create_tracer(__name__, enable_tracing)
    ...
    ...     def work(self) -> None:
    ...         with self._tracer.span("my_component.work"):
    ...             pass
"""

from eventchannel.observability.attributes import (
    ATTR_CHANNEL_NAME,
    ATTR_ERROR_TYPE,
    ATTR_HISTORY_LENGTH,
    ATTR_HISTORY_MODE,
    ATTR_LISTENER_COUNT,
    ATTR_LISTENER_KIND,
    ATTR_LISTENER_NAME,
    ATTR_LISTENER_SUCCESS,
    ATTR_PAYLOAD_TYPE,
    ATTR_QUEUE_DEPTH,
    ATTR_SUBSCRIPTION_ID,
    SPAN_DISPATCH,
    SPAN_HANDLE,
    SPAN_REPLAY,
)
from eventchannel.observability.tracer import (
    MockTracer,
    NullTracer,
    OpenTelemetryTracer,
    RecordedSpan,
    Tracer,
    create_tracer,
)

__all__ = [
    # Tracers
    "Tracer",
    "NullTracer",
    "OpenTelemetryTracer",
    "RecordedSpan",
    "MockTracer",
    "create_tracer",
    # Span names
    "SPAN_DISPATCH",
    "SPAN_HANDLE",
    "SPAN_REPLAY",
    # Attributes
    "ATTR_CHANNEL_NAME",
    "ATTR_ERROR_TYPE",
    "ATTR_HISTORY_LENGTH",
    "ATTR_HISTORY_MODE",
    "ATTR_LISTENER_COUNT",
    "ATTR_LISTENER_KIND",
    "ATTR_LISTENER_NAME",
    "ATTR_LISTENER_SUCCESS",
    "ATTR_PAYLOAD_TYPE",
    "ATTR_QUEUE_DEPTH",
    "ATTR_SUBSCRIPTION_ID",
]
